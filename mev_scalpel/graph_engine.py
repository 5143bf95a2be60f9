"""Builds a small hydrated market graph from a fixed set of pools."""

from __future__ import annotations

from mev_scalpel.decoders import PoolError, Pubkey, RaydiumAmmPool, decode_raydium_amm
from mev_scalpel.rpc import AccountSource, RpcError, hydrate_single_pool
from mev_scalpel.state import MarketGraph

DEV_POOLS = (
    "58oQChx4yWmvKdwLLZzBi4ChoCc2fqbAaGvVwvVoYDLw",  # SOL-USDC
    "6UmmUiYoBjSrhakAobJw8BvkmJtDVxaeBtbt7rxWo1mg",  # USDC-RAY
    "AVs9TA4nWDzfPJE9gGVNJMVhcQy3V9PGazuz33BfG2RA",  # RAY-SOL
)

SOL_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
USDC_DECIMALS = 6
SOL_DECIMALS = 9


def build_hydrated_test_graph(rpc_client: AccountSource) -> MarketGraph:
    """Fetch, decode and hydrate the development pools, then add a mispriced SOL-USDC pool."""
    pool_ids = [Pubkey.from_base58(text) for text in DEV_POOLS]
    accounts = rpc_client.get_multiple_accounts(pool_ids)

    graph = MarketGraph()
    for pool_id, account in zip(pool_ids, accounts):
        if account is None:
            continue
        try:
            pool = decode_raydium_amm(pool_id, account.data)
            hydrate_single_pool(pool, rpc_client)
        except (PoolError, RpcError):
            continue
        if pool.mint_a_reserve > 0:
            graph.add_pool(pool)

    wsol = Pubkey.from_base58(SOL_MINT)
    usdc = Pubkey.from_base58(USDC_MINT)
    if wsol in graph.token_map and usdc in graph.token_map:
        graph.add_pool(
            RaydiumAmmPool(
                id=Pubkey.new_unique(),
                mint_a=usdc,
                mint_b=wsol,
                mint_a_reserve=149_000_000 * 10**USDC_DECIMALS,
                mint_b_reserve=1_000_000 * 10**SOL_DECIMALS,
                base_vault=Pubkey.new_unique(),
                quote_vault=Pubkey.new_unique(),
            )
        )
    return graph