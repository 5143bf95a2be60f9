"""The market graph and the shared application state holding it."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from mev_scalpel.decoders import Pool, Pubkey


@dataclass
class Edge:
    """A one-way swap from one token to ``destination`` through ``pool``."""

    destination: int
    pool: Pool


@dataclass
class MarketGraph:
    """Tokens as numbered nodes, with an adjacency list of swap edges."""

    token_map: dict[Pubkey, int] = field(default_factory=dict)
    nodes: list[list[Edge]] = field(default_factory=list)

    def add_token(self, mint: Pubkey) -> int:
        """Return the node index of ``mint``, adding a node if it is new."""
        index = self.token_map.get(mint)
        if index is None:
            index = len(self.nodes)
            self.token_map[mint] = index
            self.nodes.append([])
        return index

    def add_pool(self, pool: Pool) -> tuple[int, int]:
        """Connect the pool's two tokens with an edge each way."""
        mint_a, mint_b = pool.mints()
        idx_a = self.add_token(mint_a)
        idx_b = self.add_token(mint_b)
        self.nodes[idx_a].append(Edge(destination=idx_b, pool=pool))
        self.nodes[idx_b].append(Edge(destination=idx_a, pool=pool))
        return idx_a, idx_b

    def mint_of(self, index: int) -> Pubkey:
        """Return the mint whose node has ``index``."""
        for mint, idx in self.token_map.items():
            if idx == index:
                return mint
        raise KeyError(f"no token at node {index}")

    def pool_count(self) -> int:
        """Number of pools, each counted once for its two edges."""
        return sum(len(edges) for edges in self.nodes) // 2


class AppState:
    """Holds the current market graph; readers load it, the writer swaps it whole."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._graph = MarketGraph()

    def load(self) -> MarketGraph:
        with self._lock:
            return self._graph

    def store(self, graph: MarketGraph) -> None:
        with self._lock:
            self._graph = graph