"""Input validation shared by the planners.

Each helper returns the normalised value or raises ValidationError naming
the offending field.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, TypeVar

from planner.errors import ValidationError
from planner.models.types import is_valid_pubkey
from planner.safe_int import U64_MAX

E = TypeVar("E", bound=Enum)


def validate_amount(value: Any, field: str = "amount") -> Decimal:
    """Parse a strictly positive, finite decimal amount."""
    if value is None or value == "":
        raise ValidationError(field, "is required")
    if isinstance(value, bool):
        raise ValidationError(field, "must be a number")
    try:
        # str() first so floats keep their shortest repr rather than binary expansion
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(field, f"not a number: {value!r}") from None
    if not amount.is_finite():
        raise ValidationError(field, "must be finite")
    if amount <= 0:
        raise ValidationError(field, f"must be positive, got {amount}")
    # no u64 amount has more integer digits than U64_MAX, at any precision
    if amount.adjusted() >= len(str(U64_MAX)):
        raise ValidationError(field, f"{amount} exceeds the maximum token amount")
    return amount


def validate_pubkey(value: Any, field: str = "user") -> str:
    if value is None or value == "":
        raise ValidationError(field, "public key is required")
    if not is_valid_pubkey(value):
        raise ValidationError(field, f"not a base58 public key: {value!r}")
    return value


def validate_choice(value: Any, enum_type: type[E], field: str) -> E:
    """Coerce a value into an enum member."""
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(str(member.value) for member in enum_type)
        raise ValidationError(field, f"must be one of {allowed}, got {value!r}") from None


__all__ = ["validate_amount", "validate_pubkey", "validate_choice"]
