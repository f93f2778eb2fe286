"""Checked integer wrapper for token amount arithmetic.

SPL token amounts are unsigned 64-bit integers on chain, but intermediate
products (reserve * amount) easily exceed that width. Python ints never
overflow, so SafeInt only has to catch the mistakes that matter here:

- Division by zero raises DivisionByZero
- Subtraction below zero raises Underflow
- Values that do not fit a u64 raise U64Overflow on to_u64()

Usage pattern:
    from planner.safe_int import S

    expected = (S(reserve_out) * S(amount_in)) // (S(reserve_in) + S(amount_in))
    return expected.to_u64()
"""

from __future__ import annotations

U64_MAX = 2**64 - 1


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division by zero."""

    pass


class Underflow(SafeIntError):
    """Subtraction would produce a negative amount."""

    pass


class U64Overflow(SafeIntError):
    """Value does not fit an unsigned 64-bit token amount."""

    pass


class SafeInt:
    """Integer with checked arithmetic.

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            self._value = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            self._value = value
        else:
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _unwrap(other))

    __radd__ = __add__

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        other_val = _unwrap(other)
        if other_val > self._value:
            raise Underflow(f"Underflow: {self._value} - {other_val}")
        return SafeInt(self._value - other_val)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _unwrap(other))

    __rmul__ = __mul__

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        other_val = _unwrap(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt | int):
            return self._value == _unwrap(other)
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _unwrap(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _unwrap(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _unwrap(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _unwrap(other)

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    def to_u64(self) -> int:
        """Return the value, validating that it fits an on-chain token amount.

        Raises:
            U64Overflow: If value is negative or exceeds 2^64-1
        """
        if not self.is_u64():
            raise U64Overflow(f"Value is not a valid u64 token amount: {self._value}")
        return self._value

    def is_u64(self) -> bool:
        return 0 <= self._value <= U64_MAX


def _unwrap(x: SafeInt | int) -> int:
    if isinstance(x, SafeInt):
        return x._value
    return x


S = SafeInt
