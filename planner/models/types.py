"""Shared type definitions and unit conversions.

Token amounts live in two units:
- chain amounts: integers in the mint's smallest unit (what the programs see)
- UI amounts: Decimal values scaled by 10^decimals (what users type)

Conversion from UI to chain always rounds down so a plan never moves more
value than the user asked for.
"""

from __future__ import annotations

import decimal
import re
from decimal import ROUND_FLOOR, Decimal
from enum import Enum
from typing import Annotated, Any

from pydantic import BeforeValidator, Field, PlainSerializer

from planner.safe_int import U64_MAX

# 78 digits covers any u64 amount scaled by any u8 decimal count in practice
DECIMAL_CONTEXT = decimal.Context(prec=78, rounding=ROUND_FLOOR)

_PUBKEY_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")


class Side(str, Enum):
    """Which conditional market a trade targets."""

    PASS = "pass"
    FAIL = "fail"


class Direction(str, Enum):
    """Swap direction relative to the conditional base token."""

    BUY = "buy"
    SELL = "sell"


def is_valid_pubkey(value: Any) -> bool:
    """Check if a value looks like a base58-encoded Solana public key."""
    return isinstance(value, str) and bool(_PUBKEY_RE.match(value))


def _validate_pubkey(value: Any) -> str:
    if not is_valid_pubkey(value):
        raise ValueError(f"Not a base58 public key: {value!r}")
    return value


def _validate_chain_amount(value: Any) -> int:
    # Accept decimal strings so snapshots can carry amounts beyond JS number range
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"Chain amount must be a decimal integer string: '{value}'") from err
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Chain amount must be int or string, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"Chain amount cannot be negative: {value}")
    if value > U64_MAX:
        raise ValueError(f"Chain amount overflows u64: {value}")
    return value


# Base58 Solana public key
Pubkey = Annotated[str, BeforeValidator(_validate_pubkey)]

# u64 token amount in the mint's smallest unit, serialised as a decimal string
ChainAmount = Annotated[
    int,
    BeforeValidator(_validate_chain_amount),
    PlainSerializer(lambda v: str(v), return_type=str, when_used="json"),
    Field(description="u64 token amount as decimal string"),
]

# Human-readable amount, serialised as a string to keep it exact
UiAmount = Annotated[
    Decimal,
    PlainSerializer(lambda v: str(v), return_type=str, when_used="json"),
]


def to_chain_amount(amount: Decimal, decimals: int) -> int:
    """Convert a UI amount to chain units, rounding down.

    Args:
        amount: Human-readable amount
        decimals: Mint decimals

    Returns:
        floor(amount * 10^decimals)
    """
    with decimal.localcontext(DECIMAL_CONTEXT):
        scaled = Decimal(amount).scaleb(decimals)
        return int(scaled.to_integral_value(rounding=ROUND_FLOOR))


def to_ui_amount(amount: int, decimals: int) -> Decimal:
    """Convert a chain amount to its exact UI value (amount / 10^decimals)."""
    with decimal.localcontext(DECIMAL_CONTEXT):
        return Decimal(amount).scaleb(-decimals)
