"""
Numeric values for cal expressions.

A Number is either an exact signed 128-bit integer or a 64-bit float.
Mixing the two promotes to float; integer results wrap around like a
fixed-width machine integer. Every operation is total: nothing here
raises for numeric reasons (division by zero yields NaN).

Comparisons between two integers are exact. Any comparison involving a
float is done in floating point with a tolerance of EPSILON, so values
that differ only by rounding compare equal.
"""

from __future__ import annotations

import math
import numbers
import sys
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

INT_BITS = 128
INT_MAX = (1 << (INT_BITS - 1)) - 1
INT_MIN = -(1 << (INT_BITS - 1))
_INT_MODULUS = 1 << INT_BITS

# Tolerance for comparisons that involve a float operand.
EPSILON = sys.float_info.epsilon * 1e3


def wrap_int(value: int) -> int:
    """Wrap an arbitrary Python int into the signed 128-bit range."""
    value &= _INT_MODULUS - 1
    if value > INT_MAX:
        value -= _INT_MODULUS
    return value


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and int(x) % 2 == 1


def float_pow(base: float, exponent: float) -> float:
    """IEEE-style power that returns inf/NaN instead of raising."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        # Zero to a negative power, or a negative base with a fractional exponent
        if base == 0.0:
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        return math.nan


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


class NumberKind(StrEnum):
    """The two representations a Number can take."""

    INT = "int"
    FLOAT = "float"


class Number(BaseModel):
    """A tagged int/float value with calculator arithmetic."""

    kind: NumberKind
    value: int | float

    model_config = ConfigDict(frozen=True, ser_json_inf_nan="constants")

    @model_validator(mode="before")
    @classmethod
    def _normalize_value(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        kind = data.get("kind")
        value = data.get("value")
        if isinstance(value, bool):
            return data
        if kind == NumberKind.INT and isinstance(value, int):
            return {**data, "value": wrap_int(value)}
        if kind == NumberKind.FLOAT and isinstance(value, (int, float)):
            return {**data, "value": float(value)}
        return data

    @model_validator(mode="after")
    def _check_kind(self) -> Number:
        if self.kind == NumberKind.INT and type(self.value) is not int:
            raise ValueError(f"int number requires an integer value, got {self.value!r}")
        if self.kind == NumberKind.FLOAT and type(self.value) is not float:
            raise ValueError(f"float number requires a float value, got {self.value!r}")
        return self

    # -- Construction --

    @classmethod
    def int_(cls, value: int) -> Number:
        return cls(kind=NumberKind.INT, value=value)

    @classmethod
    def float_(cls, value: float) -> Number:
        return cls(kind=NumberKind.FLOAT, value=value)

    @classmethod
    def of(cls, value: Any) -> Number:
        """Build a Number from any integral or real Python number.

        Integral values of any width are wrapped into the signed 128-bit
        range; other reals become floats.

        Raises:
            TypeError: If ``value`` is a bool or not a number.
        """
        if isinstance(value, Number):
            return value
        if isinstance(value, bool):
            raise TypeError("Cannot build a Number from a bool")
        if isinstance(value, numbers.Integral):
            return cls.int_(int(value))
        if isinstance(value, numbers.Real):
            return cls.float_(float(value))
        raise TypeError(f"Cannot build a Number from {type(value).__name__}")

    # -- Inspection --

    @property
    def is_int(self) -> bool:
        return self.kind == NumberKind.INT

    @property
    def is_float(self) -> bool:
        return self.kind == NumberKind.FLOAT

    @property
    def is_nan(self) -> bool:
        return self.is_float and math.isnan(self.value)

    def as_float(self) -> float:
        return float(self.value)

    def __float__(self) -> float:
        return self.as_float()

    # -- Arithmetic --

    def __add__(self, other: Any) -> Number:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        if self.is_int and rhs.is_int:
            return Number.int_(self.value + rhs.value)
        return Number.float_(self.as_float() + rhs.as_float())

    def __sub__(self, other: Any) -> Number:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        if self.is_int and rhs.is_int:
            return Number.int_(self.value - rhs.value)
        return Number.float_(self.as_float() - rhs.as_float())

    def __mul__(self, other: Any) -> Number:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        if self.is_int and rhs.is_int:
            return Number.int_(self.value * rhs.value)
        return Number.float_(self.as_float() * rhs.as_float())

    def __truediv__(self, other: Any) -> Number:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        if rhs == _INT_ZERO or rhs == _FLOAT_ZERO:
            return Number.float_(math.nan)
        if self.is_int and rhs.is_int:
            return Number.int_(_trunc_div(self.value, rhs.value))
        return Number.float_(self.as_float() / rhs.as_float())

    def __pow__(self, other: Any) -> Number:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        if self.is_int and rhs.is_int:
            if rhs.value >= 0:
                return Number.int_(pow(self.value, rhs.value, _INT_MODULUS))
            return Number.float_(float_pow(float(self.value), float(rhs.value)))
        return Number.float_(float_pow(self.as_float(), rhs.as_float()))

    def __radd__(self, other: Any) -> Number:
        lhs = _coerce(other)
        return NotImplemented if lhs is None else lhs + self

    def __rsub__(self, other: Any) -> Number:
        lhs = _coerce(other)
        return NotImplemented if lhs is None else lhs - self

    def __rmul__(self, other: Any) -> Number:
        lhs = _coerce(other)
        return NotImplemented if lhs is None else lhs * self

    def __rtruediv__(self, other: Any) -> Number:
        lhs = _coerce(other)
        return NotImplemented if lhs is None else lhs / self

    def __rpow__(self, other: Any) -> Number:
        lhs = _coerce(other)
        return NotImplemented if lhs is None else lhs**self

    def __neg__(self) -> Number:
        if self.is_int:
            return Number.int_(-self.value)
        return Number.float_(-self.value)

    def __pos__(self) -> Number:
        return self

    # -- Comparison --

    def __eq__(self, other: object) -> bool:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        if self.is_int and rhs.is_int:
            return self.value == rhs.value
        return abs(self.as_float() - rhs.as_float()) < EPSILON

    # Equality is tolerance based, so there is no hash consistent with it.
    __hash__ = None  # type: ignore[assignment]

    def compare(self, other: Number) -> int | None:
        """Three-way comparison: -1, 0 or 1, or None when unordered (NaN)."""
        if self.is_int and other.is_int:
            return (self.value > other.value) - (self.value < other.value)
        a = self.as_float()
        b = other.as_float()
        if math.isnan(a) or math.isnan(b):
            return None
        if a == b or abs(a - b) < EPSILON:
            return 0
        return -1 if a < b else 1

    def __lt__(self, other: Any) -> bool:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        order = self.compare(rhs)
        return order is not None and order < 0

    def __le__(self, other: Any) -> bool:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        order = self.compare(rhs)
        return order is not None and order <= 0

    def __gt__(self, other: Any) -> bool:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        order = self.compare(rhs)
        return order is not None and order > 0

    def __ge__(self, other: Any) -> bool:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        order = self.compare(rhs)
        return order is not None and order >= 0

    # -- Display --

    def __str__(self) -> str:
        if self.is_int:
            return str(self.value)
        return repr(self.value)

    def __repr__(self) -> str:
        return f"Number({self.kind.value}, {self.value!r})"


def _coerce(value: Any) -> Number | None:
    """Accept plain Python numbers on the other side of an operator."""
    if isinstance(value, Number):
        return value
    try:
        return Number.of(value)
    except TypeError:
        return None


_INT_ZERO = Number.int_(0)
_FLOAT_ZERO = Number.float_(0.0)
