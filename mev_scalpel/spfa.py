"""Negative-cycle search over the market graph (arbitrage detection)."""

from __future__ import annotations

import math
from collections import deque
from typing import Optional

from mev_scalpel.decoders import PoolError, Pubkey, RaydiumAmmPool
from mev_scalpel.state import Edge, MarketGraph

TEST_SWAP_AMOUNT = 1_000_000_000


def _edge_weight(edge: Edge, source_mint: Pubkey) -> float:
    """Return ``-ln(rate)`` for a test-sized swap, or infinity if it cannot be priced."""
    pool = edge.pool
    if not isinstance(pool, RaydiumAmmPool):
        return math.inf
    try:
        amount_out = pool.quote(source_mint, TEST_SWAP_AMOUNT)
    except PoolError:
        return math.inf
    if amount_out <= 0:
        return math.inf
    return -math.log(amount_out / TEST_SWAP_AMOUNT)


def _trace_cycle(predecessor: list[Optional[int]], end: int) -> list[int]:
    def previous(node: int) -> int:
        prev = predecessor[node]
        if prev is None:
            raise RuntimeError(f"node {node} has no predecessor")
        return prev

    path = [end]
    current = previous(end)
    while current not in path:
        path.append(current)
        current = previous(current)
    path.append(current)
    path.reverse()
    return path[path.index(current):]


def find_negative_cycle(graph: MarketGraph, start_node_idx: int) -> Optional[list[int]]:
    """Run SPFA from ``start_node_idx`` and return a cycle of node indices, or None."""
    num_nodes = len(graph.nodes)
    if num_nodes == 0:
        return None
    if not 0 <= start_node_idx < num_nodes:
        raise IndexError(f"start node {start_node_idx} is not in the graph")

    dist = [math.inf] * num_nodes
    predecessor: list[Optional[int]] = [None] * num_nodes
    push_count = [0] * num_nodes

    dist[start_node_idx] = 0.0
    queue = deque([start_node_idx])
    push_count[start_node_idx] = 1

    while queue:
        u = queue.popleft()
        u_mint = graph.mint_of(u)
        for edge in graph.nodes[u]:
            v = edge.destination
            candidate = dist[u] + _edge_weight(edge, u_mint)
            if candidate < dist[v]:
                dist[v] = candidate
                predecessor[v] = u
                if v not in queue:
                    queue.append(v)
                    push_count[v] += 1
                    if push_count[v] >= num_nodes:
                        return _trace_cycle(predecessor, v)
    return None