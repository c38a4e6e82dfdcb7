"""Checked integers for the constant-product pricing formula.

The formula must fail loudly rather than return a wrong amount:
- a zero denominator raises DivisionByZero
- reserve_out - amount_out below zero raises Underflow
- a quote above uint256 raises Uint256Overflow from to_uint256()

Usage:
    from connector.safe_int import S

    numerator = S(amount_in) * S(fee) * S(reserve_out)
    return (numerator // (S(reserve_in) * S(10000) + S(amount_in) * S(fee))).to_uint256()
"""

from __future__ import annotations

from connector.models.types import UINT256_MAX


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""


class DivisionByZero(SafeIntError):
    """Division by zero."""


class Underflow(SafeIntError):
    """Subtraction would produce a negative result."""


class Uint256Overflow(SafeIntError):
    """Value exceeds uint256 maximum."""


def _unwrap(other: SafeInt | int) -> int:
    if isinstance(other, SafeInt):
        return other.value
    if isinstance(other, int):
        return other
    raise TypeError(f"SafeInt operand must be int or SafeInt, got {type(other).__name__}")


class SafeInt:
    """Non-negative integer with checked subtraction and division."""

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
        """The underlying integer value."""
        return self._value

    def to_uint256(self) -> int:
        """Return the value, raising Uint256Overflow if it does not fit."""
        if self._value > UINT256_MAX:
            raise Uint256Overflow(f"Value {self._value} exceeds uint256 max")
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _unwrap(other))

    __radd__ = __add__

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        other_val = _unwrap(other)
        result = self._value - other_val
        if result < 0:
            raise Underflow(f"Underflow: {self._value} - {other_val} = {result}")
        return SafeInt(result)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _unwrap(other))

    __rmul__ = __mul__

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        other_val = _unwrap(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)


# Short alias used at call sites
S = SafeInt

__all__ = [
    "SafeInt",
    "S",
    "SafeIntError",
    "DivisionByZero",
    "Underflow",
    "Uint256Overflow",
]
