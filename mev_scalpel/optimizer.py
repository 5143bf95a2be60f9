"""Simulation of arbitrage cycles and a search for the most profitable size."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from mev_scalpel.decoders import Pool, Pubkey

logger = logging.getLogger(__name__)

_MAX_ITERATIONS = 100
_LOGGED_ITERATIONS = 10


@dataclass(frozen=True)
class ArbitrageStep:
    """One swap of an arbitrage cycle."""

    pool: Pool
    input_mint: Pubkey
    output_mint: Pubkey


def simulate_path_profit(initial_amount: int, path: Sequence[ArbitrageStep]) -> int:
    """Swap ``initial_amount`` along ``path`` and return the gain (negative for a loss)."""
    if not path:
        raise ValueError("Arbitrage path cannot be empty")
    amount = initial_amount
    mint = path[0].input_mint
    for step in path:
        if step.input_mint != mint:
            raise ValueError("Mismatched mints in arbitrage path")
        amount = step.pool.quote(step.input_mint, amount)
        mint = step.output_mint
    return amount - initial_amount


def find_optimal_amount(path: Sequence[ArbitrageStep], max_amount: int) -> tuple[int, int]:
    """Ternary-search ``[0, max_amount]`` for the input with the largest profit.

    Returns ``(amount, profit)``; ``(0, 0)`` when no sampled amount is profitable.
    """
    if not path:
        raise ValueError("Arbitrage path cannot be empty")

    low, high = 0, max_amount
    optimal_amount, max_profit = 0, 0
    logger.debug("Starting optimization search (0 -> %d)", max_amount)
    for iteration in range(_MAX_ITERATIONS):
        if low > high:
            break
        m1 = low + (high - low) // 3
        m2 = high - (high - low) // 3
        profit1 = simulate_path_profit(m1, path)
        profit2 = simulate_path_profit(m2, path)
        if iteration < _LOGGED_ITERATIONS:
            logger.debug("Iter %d: m1=%d, profit1=%d | m2=%d, profit2=%d", iteration, m1, profit1, m2, profit2)
        if profit1 > max_profit:
            max_profit, optimal_amount = profit1, m1
        if profit2 > max_profit:
            max_profit, optimal_amount = profit2, m2
        if profit1 < profit2:
            low = m1 + 1
        else:
            high = m2 - 1
    return optimal_amount, max_profit