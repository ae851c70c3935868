"""
Arbitrary-precision number type.

Values are backed by mpmath floats. A Number never changes after it is
created; every computation runs inside an mpmath working-precision block
for the requested number of significant decimal digits and produces a new
Number at that precision.
"""

from dataclasses import dataclass
from typing import Callable, Union

import mpmath

from .formatter import format_number

NumberLike = Union[int, str, mpmath.mpf]


class NonRealResultError(ArithmeticError):
    """Raised when a computation does not produce a finite real number."""

    pass


@dataclass(frozen=True)
class Number:
    """An immutable arbitrary-precision real value."""

    value: mpmath.mpf
    """The underlying mpmath value."""

    precision: int
    """Significant decimal digits the value was produced at."""

    @classmethod
    def parse(cls, literal: str, precision: int) -> "Number":
        """
        Parses a decimal literal at the given precision.

        Raises:
            ValueError: If the literal is not a finite decimal number
        """
        with mpmath.workdps(precision):
            value = mpmath.mpf(literal)
        if not mpmath.isfinite(value):
            raise ValueError(f"not a finite number: {literal}")
        return cls(value, precision)

    @classmethod
    def of(cls, value: NumberLike, precision: int) -> "Number":
        """Wraps an int, string or mpmath value, rounded to the given precision."""
        with mpmath.workdps(precision):
            return cls(mpmath.mpf(value), precision)

    def is_zero(self) -> bool:
        return not self.value

    def is_integer(self) -> bool:
        return bool(mpmath.isint(self.value))

    def sign(self) -> int:
        if self.value > 0:
            return 1
        if self.value < 0:
            return -1
        return 0

    def __lt__(self, other: "Number") -> bool:
        return self.value < other.value

    def __le__(self, other: "Number") -> bool:
        return self.value <= other.value

    def __gt__(self, other: "Number") -> bool:
        return self.value > other.value

    def __ge__(self, other: "Number") -> bool:
        return self.value >= other.value

    def __str__(self) -> str:
        return format_number(self)


def compute(
    function: Callable[..., object], *operands: Number, precision: int
) -> Number:
    """
    Applies an mpmath function to the operands at the given precision.

    Raises:
        NonRealResultError: If the result is complex, infinite or NaN
        ZeroDivisionError: If mpmath divides by zero
    """
    with mpmath.workdps(precision):
        result = function(*(operand.value for operand in operands))
        if not isinstance(result, mpmath.mpf) or not mpmath.isfinite(result):
            raise NonRealResultError(f"result is not a finite real number: {result}")
        return Number(+result, precision)
