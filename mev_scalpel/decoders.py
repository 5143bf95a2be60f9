"""Pool account decoding and constant-product quoting."""

from __future__ import annotations

import itertools
import struct
import threading
from dataclasses import dataclass
from typing import Protocol, Union

_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_ALPHABET_INDEX = {char: value for value, char in enumerate(_ALPHABET)}
_PUBKEY_LEN = 32
_U64_MAX = 2**64 - 1

_unique_counter = itertools.count(1)
_unique_lock = threading.Lock()


def _b58encode(raw: bytes) -> str:
    zeros = len(raw) - len(raw.lstrip(b"\0"))
    number = int.from_bytes(raw, "big")
    digits = []
    while number:
        number, rem = divmod(number, 58)
        digits.append(_ALPHABET[rem])
    return "1" * zeros + "".join(reversed(digits))


def _b58decode(text: str) -> bytes:
    number = 0
    for char in text:
        try:
            number = number * 58 + _ALPHABET_INDEX[char]
        except KeyError:
            raise ValueError(f"invalid base58 character {char!r}") from None
    zeros = len(text) - len(text.lstrip("1"))
    body = number.to_bytes((number.bit_length() + 7) // 8, "big")
    return b"\0" * zeros + body


@dataclass(frozen=True, order=True)
class Pubkey:
    """A 32-byte account address."""

    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != _PUBKEY_LEN:
            raise ValueError(f"a pubkey is {_PUBKEY_LEN} bytes, got {len(self.raw)}")

    @classmethod
    def from_base58(cls, text: str) -> Pubkey:
        """Parse a base58-encoded address."""
        raw = _b58decode(text)
        if len(raw) != _PUBKEY_LEN:
            raise ValueError(f"{text!r} does not decode to {_PUBKEY_LEN} bytes")
        return cls(raw)

    @classmethod
    def new_unique(cls) -> Pubkey:
        """Return a fresh address that no earlier call returned."""
        with _unique_lock:
            counter = next(_unique_counter)
        return cls(counter.to_bytes(8, "big") + bytes(_PUBKEY_LEN - 8))

    def __str__(self) -> str:
        return _b58encode(self.raw)

    def __repr__(self) -> str:
        return f"Pubkey({str(self)!r})"


class PoolError(Exception):
    """Raised when a pool cannot be decoded or cannot quote a swap."""


class PoolOperations(Protocol):
    """What every pool kind offers to the strategies."""

    def mints(self) -> tuple[Pubkey, Pubkey]: ...

    def quote(self, token_in_mint: Pubkey, amount_in: int) -> int: ...


@dataclass
class RaydiumAmmPool:
    """A constant-product pool with its vault reserves."""

    id: Pubkey
    mint_a: Pubkey
    mint_b: Pubkey
    mint_a_reserve: int
    mint_b_reserve: int
    base_vault: Pubkey
    quote_vault: Pubkey

    FEE_NUMERATOR = 25
    FEE_DENOMINATOR = 10_000

    def mints(self) -> tuple[Pubkey, Pubkey]:
        return self.mint_a, self.mint_b

    def quote(self, token_in_mint: Pubkey, amount_in: int) -> int:
        """Return the output amount for swapping ``amount_in`` of ``token_in_mint``."""
        if self.mint_a_reserve == 0 or self.mint_b_reserve == 0:
            raise PoolError("Pool has no liquidity data yet.")
        if token_in_mint == self.mint_a:
            in_reserve, out_reserve = self.mint_a_reserve, self.mint_b_reserve
        elif token_in_mint == self.mint_b:
            in_reserve, out_reserve = self.mint_b_reserve, self.mint_a_reserve
        else:
            raise PoolError("Input token does not belong to this pool.")
        amount_in_with_fee = amount_in * (self.FEE_DENOMINATOR - self.FEE_NUMERATOR)
        if amount_in_with_fee > _U64_MAX:
            raise PoolError("Input amount overflows the fee computation.")
        numerator = amount_in_with_fee * out_reserve
        denominator = in_reserve * self.FEE_DENOMINATOR + amount_in_with_fee
        return numerator // denominator


@dataclass
class RaydiumClmmPool:
    """A concentrated-liquidity pool; its pricing is not modelled."""

    id: Pubkey
    mint_a: Pubkey
    mint_b: Pubkey
    current_sqrt_price: int
    current_tick: int

    def mints(self) -> tuple[Pubkey, Pubkey]:
        return self.mint_a, self.mint_b

    def quote(self, token_in_mint: Pubkey, amount_in: int) -> int:
        """Validate the swap request; concentrated-liquidity pricing yields no output."""
        if token_in_mint not in self.mints():
            raise PoolError("Input token does not belong to this pool.")
        if not 0 <= amount_in <= _U64_MAX:
            raise PoolError("Input amount is outside the u64 range.")
        return 0


Pool = Union[RaydiumAmmPool, RaydiumClmmPool]

# AmmInfo layout (packed, little endian): 16 u64 header, 64 bytes of fees,
# 144 bytes of state data, then the vault and mint addresses we need.
_AMM_INFO = struct.Struct("<336x32s32s32s32s288x")


def decode_raydium_amm(pool_id: Pubkey, data: bytes) -> RaydiumAmmPool:
    """Decode the trailing AmmInfo record of a pool account; reserves start at zero."""
    if len(data) < _AMM_INFO.size:
        raise PoolError("Data too short for AmmInfo")
    coin_vault, pc_vault, coin_mint, pc_mint = _AMM_INFO.unpack(data[len(data) - _AMM_INFO.size:])
    return RaydiumAmmPool(
        id=pool_id,
        mint_a=Pubkey(coin_mint),
        mint_b=Pubkey(pc_mint),
        mint_a_reserve=0,
        mint_b_reserve=0,
        base_vault=Pubkey(coin_vault),
        quote_vault=Pubkey(pc_vault),
    )