"""Unifies the pool listings of every supported exchange."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx

from mev_scalpel.discovery import GenericPoolInfo, fetch_orca_pools, fetch_raydium_pools

logger = logging.getLogger(__name__)

RAYDIUM_AMM_V4_PROGRAM_ID = "675kPX9MHTjS2zt1qfr1NYHuzELxQfM9H24wFSut1Mp8"
ORCA_WHIRLPOOL_PROGRAM_ID = "whirLbMiicVdio4iTSEveBxE8hSdrjvrnPAcKGAJqgM"


async def _fetch_all(http: httpx.AsyncClient) -> list[GenericPoolInfo]:
    raydium_result, orca_result = await asyncio.gather(
        fetch_raydium_pools(http), fetch_orca_pools(http), return_exceptions=True
    )
    for result in (raydium_result, orca_result):
        if isinstance(result, BaseException) and not isinstance(result, Exception):
            raise result

    unified: list[GenericPoolInfo] = []
    if isinstance(raydium_result, Exception):
        logger.warning("Raydium discovery failed: %s", raydium_result)
    else:
        unified.extend(
            GenericPoolInfo(
                id=pool.id,
                mint_a=pool.mint_a.address,
                mint_b=pool.mint_b.address,
                source="Raydium",
                program_id=pool.program_id,
            )
            for pool in raydium_result
        )
    if isinstance(orca_result, Exception):
        logger.warning("Orca discovery failed: %s", orca_result)
    else:
        unified.extend(
            GenericPoolInfo(
                id=pool.address,
                mint_a=pool.token_mint_a,
                mint_b=pool.token_mint_b,
                source="Orca",
                program_id=ORCA_WHIRLPOOL_PROGRAM_ID,
            )
            for pool in orca_result
        )
    return unified


async def fetch_initial_markets(client: Optional[httpx.AsyncClient] = None) -> list[GenericPoolInfo]:
    """Fetch pools from every source concurrently; a failing source is skipped."""
    logger.info("Starting market discovery from all sources...")
    if client is None:
        async with httpx.AsyncClient(timeout=30.0) as own_client:
            pools = await _fetch_all(own_client)
    else:
        pools = await _fetch_all(client)
    logger.info("Total unified pools found from all sources: %d", len(pools))
    return pools