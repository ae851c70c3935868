"""
Result formatting.

Renders numbers as plain, locale-independent decimal strings: a period as
the decimal separator, no digit grouping and never exponent notation.
"""

import math
from typing import TYPE_CHECKING, Optional

import mpmath

if TYPE_CHECKING:
    from .number import Number


def format_number(number: "Number", digits: Optional[int] = None) -> str:
    """
    Formats a number as a decimal string.

    Args:
        number: The number to format
        digits: Significant digits to display; defaults to the number's
            own precision. Values above that precision are clamped.

    Returns:
        The decimal representation, without trailing fractional zeros
    """
    if digits is None or digits <= 0 or digits > number.precision:
        digits = number.precision

    text = mpmath.nstr(
        number.value,
        digits,
        min_fixed=-math.inf,
        max_fixed=math.inf,
    )
    if text.endswith(".0"):
        text = text[:-2]
    return text
