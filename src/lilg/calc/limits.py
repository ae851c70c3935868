"""
Resource limits for expression evaluation.

These limits bound the work a single evaluation may request: very long
inputs, deep bracket nesting, huge argument lists, extreme precision
and results too large or too small to print as plain decimals.
"""

import math
from dataclasses import dataclass
from typing import Optional

import mpmath

from .errors import LimitExceededError


@dataclass(frozen=True)
class ExpressionLimits:
    """Expression limits configuration."""

    # Maximum expression string length in characters
    max_expression_length: int = 4096

    # Maximum bracket nesting depth
    max_nesting_depth: int = 64

    # Maximum function call arguments
    max_function_args: int = 256

    # Maximum significant digits for a single evaluation
    max_precision: int = 10000

    # Maximum decimal exponent of any computed result, above or below zero
    max_result_digits: int = 100000


# Default expression limits.
DEFAULT_EXPRESSION_LIMITS = ExpressionLimits()


def check_expression_length(
    expression: str, limits: Optional[ExpressionLimits] = None
) -> None:
    """Validates that expression length is within limits."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if len(expression) > limits.max_expression_length:
        raise LimitExceededError(
            "expression length", limits.max_expression_length, len(expression)
        )


def check_nesting_depth(
    depth: int,
    limits: Optional[ExpressionLimits] = None,
    position: Optional[int] = None,
    expression: Optional[str] = None,
) -> None:
    """Validates bracket nesting depth during evaluation."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if depth > limits.max_nesting_depth:
        raise LimitExceededError(
            "nesting depth", limits.max_nesting_depth, depth, position, expression
        )


def check_function_arg_count(
    count: int,
    limits: Optional[ExpressionLimits] = None,
    position: Optional[int] = None,
    expression: Optional[str] = None,
) -> None:
    """Validates function argument count."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if count > limits.max_function_args:
        raise LimitExceededError(
            "function arguments", limits.max_function_args, count, position, expression
        )


def check_precision(precision: int, limits: Optional[ExpressionLimits] = None) -> None:
    """Validates the precision requested for an evaluation."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if precision > limits.max_precision:
        raise LimitExceededError("precision", limits.max_precision, precision)


def check_result_magnitude(
    value: mpmath.mpf,
    limits: Optional[ExpressionLimits] = None,
    position: Optional[int] = None,
    expression: Optional[str] = None,
) -> None:
    """Validates that a result's decimal exponent is within limits."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if not value:
        return
    digits = int(abs(mpmath.mag(value)) * math.log10(2))
    if digits > limits.max_result_digits:
        raise LimitExceededError(
            "result digits", limits.max_result_digits, digits, position, expression
        )
