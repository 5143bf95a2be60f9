"""A minimal JSON-RPC client and the vault reader that fills pool reserves."""

from __future__ import annotations

import base64
import binascii
import itertools
import struct
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import httpx

from mev_scalpel.decoders import Pubkey, RaydiumAmmPool

TOKEN_PROGRAM_ID = Pubkey.from_base58("TokenkegQfeZyiNwAJbNbGMPTP7z3A1Ah1bpbGEMAsQf")
TOKEN_ACCOUNT_LEN = 165

_AMOUNT_OFFSET = 64
_AMOUNT = struct.Struct("<Q")


class RpcError(Exception):
    """Raised when an RPC call fails or returns something unusable."""


@dataclass(frozen=True)
class Account:
    """An on-chain account as returned by the node."""

    owner: Pubkey
    data: bytes
    lamports: int = 0
    executable: bool = False

    @classmethod
    def _from_json(cls, value: dict[str, Any]) -> Account:
        encoded, encoding = value["data"]
        if encoding != "base64":
            raise ValueError(f"unexpected account encoding {encoding!r}")
        return cls(
            owner=Pubkey.from_base58(value["owner"]),
            data=base64.b64decode(encoded, validate=True),
            lamports=int(value.get("lamports", 0)),
            executable=bool(value.get("executable", False)),
        )


class AccountSource(Protocol):
    """Anything that can fetch several accounts at once."""

    def get_multiple_accounts(self, pubkeys: Iterable[Pubkey]) -> list[Optional[Account]]: ...


class RpcClient:
    """Talks JSON-RPC over HTTP to a node."""

    def __init__(self, url: str, *, client: httpx.Client | None = None, timeout: float = 30.0) -> None:
        self.url = url
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout)
        self._ids = itertools.count(1)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> RpcClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _call(self, method: str, params: list[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        try:
            response = self._client.post(self.url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as exc:
            raise RpcError(f"{method} request failed: {exc}") from exc
        except ValueError as exc:
            raise RpcError(f"{method} returned invalid JSON") from exc
        if not isinstance(body, dict):
            raise RpcError(f"{method} returned an unexpected body")
        if "error" in body:
            error = body["error"] or {}
            raise RpcError(f"RPC error {error.get('code')}: {error.get('message')}")
        if "result" not in body:
            raise RpcError(f"{method} returned no result")
        return body["result"]

    def get_multiple_accounts(self, pubkeys: Iterable[Pubkey]) -> list[Optional[Account]]:
        """Fetch the given accounts; missing ones come back as None."""
        keys = [str(key) for key in pubkeys]
        result = self._call("getMultipleAccounts", [keys, {"encoding": "base64"}])
        try:
            return [None if value is None else Account._from_json(value) for value in result["value"]]
        except (KeyError, TypeError, ValueError, binascii.Error) as exc:
            raise RpcError(f"malformed account data: {exc}") from exc


def _vault_amount(account: Optional[Account]) -> Optional[int]:
    if account is None or account.owner != TOKEN_PROGRAM_ID or len(account.data) < TOKEN_ACCOUNT_LEN:
        return None
    (amount,) = _AMOUNT.unpack_from(account.data, _AMOUNT_OFFSET)
    return amount


def hydrate_single_pool(pool: RaydiumAmmPool, rpc_client: AccountSource) -> None:
    """Read the pool's two token vaults and store their balances as reserves."""
    accounts = list(rpc_client.get_multiple_accounts([pool.base_vault, pool.quote_vault]))
    accounts.extend([None, None])
    if (base_amount := _vault_amount(accounts[0])) is not None:
        pool.mint_a_reserve = base_amount
    if (quote_amount := _vault_amount(accounts[1])) is not None:
        pool.mint_b_reserve = quote_amount