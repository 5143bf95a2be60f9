"""Development runner: build the test graph, search it for a cycle, size the trade."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from itertools import pairwise
from typing import Optional

from mev_scalpel.config import Config, ConfigError
from mev_scalpel.decoders import PoolError, Pubkey
from mev_scalpel.graph_engine import SOL_DECIMALS, SOL_MINT, build_hydrated_test_graph
from mev_scalpel.optimizer import ArbitrageStep, find_optimal_amount
from mev_scalpel.rpc import RpcClient, RpcError
from mev_scalpel.spfa import find_negative_cycle
from mev_scalpel.state import MarketGraph

MAX_TRADE_AMOUNT = 100 * 10**SOL_DECIMALS


def build_path_for_optimizer(graph: MarketGraph, cycle_indices: Sequence[int]) -> list[ArbitrageStep]:
    """Turn a cycle of node indices into swap steps through the graph's pools."""
    path = []
    for u_idx, v_idx in pairwise(cycle_indices):
        edge = next((e for e in graph.nodes[u_idx] if e.destination == v_idx), None)
        if edge is None:
            raise ValueError("Could not find edge in graph")
        input_mint, output_mint = edge.pool.mints()
        u_mint = graph.mint_of(u_idx)
        path.append(
            ArbitrageStep(
                pool=edge.pool,
                input_mint=u_mint,
                output_mint=output_mint if input_mint == u_mint else input_mint,
            )
        )
    return path


def _format_sol(lamports: int) -> str:
    text = str(lamports / 10**SOL_DECIMALS)
    return text[:-2] if text.endswith(".0") else text


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="mev-scalpel-dev", description="Build the development graph and look for arbitrage."
    )
    parser.parse_args(argv)

    print("--- DEVELOPMENT RUNNER (STABILIZED) ---")
    try:
        config = Config.load()
    except ConfigError as exc:
        print(f"Failed to load config: {exc}", file=sys.stderr)
        return 1

    try:
        with RpcClient(config.solana_rpc_url) as rpc_client:
            graph = build_hydrated_test_graph(rpc_client)
    except RpcError as exc:
        print(f"Failed to build graph: {exc}", file=sys.stderr)
        return 1

    print("\n--- MINI-GRAPH BUILT SUCCESSFULLY ---")
    print(f"Total pools hydrated: {graph.pool_count()}")
    print(f"Total tokens in graph: {len(graph.token_map)}")
    print("-------------------------------------\n")

    start = graph.token_map.get(Pubkey.from_base58(SOL_MINT))
    if start is None:
        return 0

    print("Running SPFA starting from WSOL...")
    cycle = find_negative_cycle(graph, start)
    if cycle is None:
        print("--- No opportunity found. ---")
        return 0

    print("\n--- !!! OPPORTUNITY FOUND !!! ---")
    try:
        path = build_path_for_optimizer(graph, cycle)
        optimal_amount, max_profit = find_optimal_amount(path, MAX_TRADE_AMOUNT)
    except (ValueError, KeyError, PoolError):
        return 0
    print("\n--- OPTIMIZATION COMPLETE ---")
    print(f"Optimal trade amount: {_format_sol(optimal_amount)} SOL")
    print(f"Predicted profit:     {_format_sol(max_profit)} SOL")
    print("-----------------------------")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())