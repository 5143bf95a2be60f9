"""Pool discovery through the public Orca and Raydium listing APIs."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

ORCA_API_URL = "https://api.orca.so/v2/solana/pools"
ORCA_PAGE_SIZE = 3000

RAYDIUM_API_URL = "https://api-v3.raydium.io/pools/info/list"
RAYDIUM_PAGE_SIZE = 1000

_RAW_PREVIEW_CHARS = 2000


class DiscoveryError(Exception):
    """Raised when a listing API cannot be reached or returns something unusable."""


def _field(obj: Any, key: str, kind: type) -> Any:
    if not isinstance(obj, dict) or key not in obj:
        raise DiscoveryError(f"missing field {key!r}")
    value = obj[key]
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise DiscoveryError(f"field {key!r} has the wrong type")
    return value


def _optional(obj: Any, key: str, kind: type) -> Any:
    if not isinstance(obj, dict):
        raise DiscoveryError("expected a JSON object")
    if obj.get(key) is None:
        return None
    return _field(obj, key, kind)


@dataclass(frozen=True)
class GenericPoolInfo:
    """The minimum known about a pool, whatever API it came from."""

    id: str
    mint_a: str
    mint_b: str
    source: str
    program_id: str


@dataclass(frozen=True)
class OrcaPoolInfo:
    """A whirlpool as listed by the Orca API."""

    address: str
    token_mint_a: str
    token_mint_b: str

    @classmethod
    def _from_json(cls, value: Any) -> OrcaPoolInfo:
        return cls(
            address=_field(value, "address", str),
            token_mint_a=_field(value, "tokenMintA", str),
            token_mint_b=_field(value, "tokenMintB", str),
        )


@dataclass(frozen=True)
class MintInfo:
    """One side of a Raydium pool."""

    address: str
    program_id: str
    decimals: int

    @classmethod
    def _from_json(cls, value: Any) -> MintInfo:
        return cls(
            address=_field(value, "address", str),
            program_id=_field(value, "programId", str),
            decimals=_field(value, "decimals", int),
        )


@dataclass(frozen=True)
class PoolConfig:
    """Fee configuration of a Raydium pool."""

    index: int
    protocol_fee_rate: int
    trade_fee_rate: int

    @classmethod
    def _from_json(cls, value: Any) -> PoolConfig:
        return cls(
            index=_field(value, "index", int),
            protocol_fee_rate=_field(value, "protocolFeeRate", int),
            trade_fee_rate=_field(value, "tradeFeeRate", int),
        )


@dataclass(frozen=True)
class RaydiumPoolInfo:
    """A pool as listed by the Raydium API."""

    id: str
    program_id: str
    pool_type: str
    mint_a: MintInfo
    mint_b: MintInfo
    config: Optional[PoolConfig] = None
    observation_id: Optional[str] = None

    @classmethod
    def _from_json(cls, value: Any) -> RaydiumPoolInfo:
        config = _optional(value, "config", dict)
        return cls(
            id=_field(value, "id", str),
            program_id=_field(value, "programId", str),
            pool_type=_field(value, "type", str),
            mint_a=MintInfo._from_json(_field(value, "mintA", dict)),
            mint_b=MintInfo._from_json(_field(value, "mintB", dict)),
            config=None if config is None else PoolConfig._from_json(config),
            observation_id=_optional(value, "observationId", str),
        )


@asynccontextmanager
async def _client_scope(client: Optional[httpx.AsyncClient]) -> AsyncIterator[httpx.AsyncClient]:
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=30.0) as own_client:
        yield own_client


async def _get(http: httpx.AsyncClient, url: str, params: dict[str, Any]) -> httpx.Response:
    try:
        return await http.get(url, params=params)
    except httpx.HTTPError as exc:
        raise DiscoveryError(f"request to {url} failed: {exc}") from exc


async def fetch_orca_pools(client: Optional[httpx.AsyncClient] = None) -> list[OrcaPoolInfo]:
    """Fetch every whirlpool, following the API's pagination cursor."""
    logger.info("Fetching all whirlpools from Orca V2 API (with pagination)...")
    pools: list[OrcaPoolInfo] = []
    cursor: Optional[str] = None
    async with _client_scope(client) as http:
        while True:
            params: dict[str, Any] = {"size": ORCA_PAGE_SIZE}
            if cursor is not None:
                params["next"] = cursor
            response = await _get(http, ORCA_API_URL, params)
            try:
                body = response.json()
            except ValueError as exc:
                raise DiscoveryError("Orca API returned invalid JSON") from exc

            page = [OrcaPoolInfo._from_json(item) for item in _field(body, "data", list)]
            pools.extend(page)

            meta = _optional(body, "meta", dict)
            next_cursor = None if meta is None else _optional(meta, "next", str)
            if next_cursor is None:
                break
            cursor = next_cursor
            if not page:
                break

    logger.info("Successfully fetched a total of %d pools from Orca.", len(pools))
    return pools


async def fetch_raydium_pools(client: Optional[httpx.AsyncClient] = None) -> list[RaydiumPoolInfo]:
    """Fetch every pool from the Raydium API, page by page."""
    pools: list[RaydiumPoolInfo] = []
    page_number = 1
    async with _client_scope(client) as http:
        while True:
            params = {
                "poolType": "all",
                "poolSortField": "default",
                "sortType": "desc",
                "pageSize": RAYDIUM_PAGE_SIZE,
                "page": page_number,
            }
            logger.info("Fetching page %d...", page_number)
            response = await _get(http, RAYDIUM_API_URL, params)
            if not response.is_success:
                raise DiscoveryError(
                    f"API request failed with status: {response.status_code} {response.reason_phrase}"
                )

            raw_text = response.text
            try:
                body = json.loads(raw_text)
            except ValueError as exc:
                logger.error("Failed to decode JSON; raw response: %s", raw_text[:_RAW_PREVIEW_CHARS])
                raise DiscoveryError("Raydium API returned invalid JSON") from exc

            success = _field(body, "success", bool)
            data = _optional(body, "data", dict)
            message = _optional(body, "msg", str)
            if not success:
                raise DiscoveryError(f"Raydium API returned an error: {message or 'Unknown API error'}")
            if data is None:
                break

            count = _field(data, "count", int)
            if page_number == 1:
                logger.info("Total pools available according to API: %d", count)
            page = [RaydiumPoolInfo._from_json(item) for item in _field(data, "data", list)]
            pools.extend(page)
            logger.info(
                "-> Page %d fetched with %d pools. Total so far: %d", page_number, len(page), len(pools)
            )
            if len(page) < RAYDIUM_PAGE_SIZE:
                break
            page_number += 1
    return pools