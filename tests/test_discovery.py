import httpx
import pytest
import respx

from mev_scalpel.discovery import (
    RAYDIUM_PAGE_SIZE,
    DiscoveryError,
    MintInfo,
    OrcaPoolInfo,
    PoolConfig,
    fetch_orca_pools,
    fetch_raydium_pools,
)


def orca_pool(n):
    return {"address": f"pool{n}", "tokenMintA": f"a{n}", "tokenMintB": f"b{n}", "extra": 1}


def raydium_pool(n, with_config=False):
    pool = {
        "id": f"ray{n}",
        "programId": "prog",
        "type": "Standard",
        "mintA": {"address": f"ma{n}", "programId": "tok", "decimals": 9},
        "mintB": {"address": f"mb{n}", "programId": "tok", "decimals": 6},
    }
    if with_config:
        pool["config"] = {"index": 2, "protocolFeeRate": 120000, "tradeFeeRate": 2500}
        pool["observationId"] = "obs"
    return pool


def orca_route():
    return respx.route(host="api.orca.so", path="/v2/solana/pools")


def raydium_route():
    return respx.route(host="api-v3.raydium.io", path="/pools/info/list")


@pytest.mark.asyncio
async def test_orca_follows_cursor_until_it_ends():
    seen = []

    def handler(request):
        params = dict(request.url.params)
        seen.append(params)
        if "next" not in params:
            return httpx.Response(200, json={"data": [orca_pool(1), orca_pool(2)], "meta": {"next": "abc"}})
        return httpx.Response(200, json={"data": [orca_pool(3)], "meta": {"next": None}})

    with respx.mock:
        orca_route().mock(side_effect=handler)
        async with httpx.AsyncClient() as client:
            pools = await fetch_orca_pools(client)

    assert [p.address for p in pools] == ["pool1", "pool2", "pool3"]
    assert pools[0] == OrcaPoolInfo(address="pool1", token_mint_a="a1", token_mint_b="b1")
    assert seen[0] == {"size": "3000"}
    assert seen[1] == {"size": "3000", "next": "abc"}


@pytest.mark.asyncio
async def test_orca_stops_on_empty_page_and_missing_meta():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"data": [], "meta": {"next": "again"}})

    with respx.mock:
        orca_route().mock(side_effect=handler)
        async with httpx.AsyncClient() as client:
            pools = await fetch_orca_pools(client)
    assert pools == []
    assert len(calls) == 1

    with respx.mock:
        orca_route().mock(return_value=httpx.Response(200, json={"data": [orca_pool(7)]}))
        async with httpx.AsyncClient() as client:
            pools = await fetch_orca_pools(client)
    assert [p.address for p in pools] == ["pool7"]


@pytest.mark.asyncio
async def test_orca_invalid_json_raises():
    with respx.mock:
        orca_route().mock(return_value=httpx.Response(200, text="not json"))
        async with httpx.AsyncClient() as client:
            with pytest.raises(DiscoveryError):
                await fetch_orca_pools(client)


@pytest.mark.asyncio
async def test_orca_missing_field_raises():
    with respx.mock:
        orca_route().mock(return_value=httpx.Response(200, json={"data": [{"address": "x"}]}))
        async with httpx.AsyncClient() as client:
            with pytest.raises(DiscoveryError, match="tokenMintA"):
                await fetch_orca_pools(client)


@pytest.mark.asyncio
async def test_raydium_single_page_parses_fields():
    body = {"success": True, "data": {"count": 2, "data": [raydium_pool(1), raydium_pool(2, True)]}}
    with respx.mock:
        route = raydium_route().mock(return_value=httpx.Response(200, json=body))
        async with httpx.AsyncClient() as client:
            pools = await fetch_raydium_pools(client)
        params = dict(route.calls[0].request.url.params)

    assert params["page"] == "1"
    assert params["pageSize"] == str(RAYDIUM_PAGE_SIZE)
    assert params["poolType"] == "all"
    assert len(pools) == 2
    first, second = pools
    assert first.id == "ray1"
    assert first.pool_type == "Standard"
    assert first.mint_a == MintInfo(address="ma1", program_id="tok", decimals=9)
    assert first.config is None
    assert first.observation_id is None
    assert second.config == PoolConfig(index=2, protocol_fee_rate=120000, trade_fee_rate=2500)
    assert second.observation_id == "obs"


@pytest.mark.asyncio
async def test_raydium_fetches_next_page_after_full_page():
    def handler(request):
        page = int(request.url.params["page"])
        if page == 1:
            items = [raydium_pool(n) for n in range(RAYDIUM_PAGE_SIZE)]
        else:
            items = [raydium_pool(RAYDIUM_PAGE_SIZE)]
        return httpx.Response(200, json={"success": True, "data": {"count": 0, "data": items}})

    with respx.mock:
        route = raydium_route().mock(side_effect=handler)
        async with httpx.AsyncClient() as client:
            pools = await fetch_raydium_pools(client)
        assert route.call_count == 2

    assert len(pools) == RAYDIUM_PAGE_SIZE + 1
    assert pools[-1].id == f"ray{RAYDIUM_PAGE_SIZE}"


@pytest.mark.asyncio
async def test_raydium_http_failure_raises():
    with respx.mock:
        raydium_route().mock(return_value=httpx.Response(500, text="boom"))
        async with httpx.AsyncClient() as client:
            with pytest.raises(DiscoveryError, match="500"):
                await fetch_raydium_pools(client)


@pytest.mark.asyncio
async def test_raydium_api_error_message():
    with respx.mock:
        raydium_route().mock(return_value=httpx.Response(200, json={"success": False, "msg": "rate limited"}))
        async with httpx.AsyncClient() as client:
            with pytest.raises(DiscoveryError, match="rate limited"):
                await fetch_raydium_pools(client)

    with respx.mock:
        raydium_route().mock(return_value=httpx.Response(200, json={"success": False}))
        async with httpx.AsyncClient() as client:
            with pytest.raises(DiscoveryError, match="Unknown API error"):
                await fetch_raydium_pools(client)


@pytest.mark.asyncio
async def test_raydium_null_data_gives_no_pools():
    with respx.mock:
        raydium_route().mock(return_value=httpx.Response(200, json={"success": True, "data": None}))
        async with httpx.AsyncClient() as client:
            assert await fetch_raydium_pools(client) == []


@pytest.mark.asyncio
async def test_raydium_malformed_json_raises():
    with respx.mock:
        raydium_route().mock(return_value=httpx.Response(200, text="{broken"))
        async with httpx.AsyncClient() as client:
            with pytest.raises(DiscoveryError, match="invalid JSON"):
                await fetch_raydium_pools(client)