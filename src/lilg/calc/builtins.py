"""
Built-in operators, functions and constants.

Implementations are registered by descriptor kind, so a relabeled grammar
entry keeps its behavior. Every implementation receives its operands
already evaluated and computes at the precision carried by the context.

Domain rules are checked before computing:
- Division and modulo by zero are rejected.
- ln and log require a positive argument.
- asin and acos require an argument in [-1, 1].
- A negative base needs an integer exponent; zero needs a non-negative one.
Any other computation that fails to produce a finite real number is
rejected the same way. All of these raise InvalidOperandError naming the
operator or function. Results whose decimal exponent exceeds the limits
raise LimitExceededError.
"""

import operator
from typing import Any, Callable, Dict, Sequence

import mpmath

from .errors import ArityError, EvaluationError, InvalidOperandError
from .grammar import (
    ConstantDescriptor,
    ConstantKind,
    FunctionDescriptor,
    FunctionKind,
    OperatorDescriptor,
    OperatorKind,
)
from .limits import ExpressionLimits, check_result_magnitude
from .number import NonRealResultError, Number, compute


class BuiltinContext:
    """Context passed to built-in implementations."""

    def __init__(
        self,
        name: str,
        precision: int,
        limits: ExpressionLimits,
        position: int,
        source: str,
        user_context: Any = None,
    ):
        self.name = name
        self.precision = precision
        self.limits = limits
        self.position = position
        self.source = source
        self.user_context = user_context

    def invalid(self, message: str) -> InvalidOperandError:
        """Builds an InvalidOperandError for the current operator or function."""
        return InvalidOperandError(self.name, message, self.position, self.source)


# Signature of a built-in operator or function.
BuiltinFunction = Callable[[Sequence[Number], BuiltinContext], Number]

# Signature of a built-in constant.
ConstantFunction = Callable[[BuiltinContext], Number]


def _compute(ctx: BuiltinContext, function: Callable[..., Any], *args: Number) -> Number:
    """Computes at the context precision, rejecting non-real and oversized results."""
    try:
        result = compute(function, *args, precision=ctx.precision)
    except (NonRealResultError, ZeroDivisionError) as e:
        raise ctx.invalid(f"undefined result ({e})") from e
    check_result_magnitude(result.value, ctx.limits, ctx.position, ctx.source)
    return result


# ============================================================
# Operators
# ============================================================


def _negate(args: Sequence[Number], ctx: BuiltinContext) -> Number:
    return _compute(ctx, operator.neg, args[0])


def _add(args: Sequence[Number], ctx: BuiltinContext) -> Number:
    return _compute(ctx, operator.add, args[0], args[1])


def _subtract(args: Sequence[Number], ctx: BuiltinContext) -> Number:
    return _compute(ctx, operator.sub, args[0], args[1])


def _multiply(args: Sequence[Number], ctx: BuiltinContext) -> Number:
    return _compute(ctx, operator.mul, args[0], args[1])


def _divide(args: Sequence[Number], ctx: BuiltinContext) -> Number:
    if args[1].is_zero():
        raise ctx.invalid("division by zero")
    return _compute(ctx, operator.truediv, args[0], args[1])


def _modulo(args: Sequence[Number], ctx: BuiltinContext) -> Number:
    """
    Floored modulo: the result takes the sign of the divisor,
    so -7 % 3 is 2 and 7 % -3 is -2.
    """
    if args[1].is_zero():
        raise ctx.invalid("modulo by zero")
    return _compute(ctx, operator.mod, args[0], args[1])


def _power(args: Sequence[Number], ctx: BuiltinContext) -> Number:
    base, exponent = args
    if base.is_zero() and exponent.sign() < 0:
        raise ctx.invalid("zero cannot be raised to a negative power")
    if base.sign() < 0 and not exponent.is_integer():
        raise ctx.invalid("negative base requires an integer exponent")
    return _compute(ctx, mpmath.power, base, exponent)


# ============================================================
# Rounding and magnitude
# ============================================================


def _abs(args: Sequence[Number], ctx: BuiltinContext) -> Number:
    return _compute(ctx, mpmath.fabs, args[0])


def _ceil(args: Sequence[Number], ctx: BuiltinContext) -> Number:
    return _compute(ctx, mpmath.ceil, args[0])


def _floor(args: Sequence[Number], ctx: BuiltinContext) -> Number:
    return _compute(ctx, mpmath.floor, args[0])


def _round_away_from_zero(x: mpmath.mpf) -> mpmath.mpf:
    magnitude = mpmath.ceil(mpmath.fabs(x))
    return -magnitude if x < 0 else magnitude


def _round(args: Sequence[Number], ctx: BuiltinContext) -> Number:
    """round(x) -> integer away from zero (2.1 -> 3, -2.1 -> -3, 2.0 -> 2)."""
    return _compute(ctx, _round_away_from_zero, args[0])


# ============================================================
# Transcendental
# ============================================================


def _unary(function: Callable[[mpmath.mpf], Any]) -> BuiltinFunction:
    def call(args: Sequence[Number], ctx: BuiltinContext) -> Number:
        return _compute(ctx, function, args[0])

    return call


def _asin(args: Sequence[Number], ctx: BuiltinContext) -> Number:
    if not -1 <= args[0].value <= 1:
        raise ctx.invalid("argument must be between -1 and 1")
    return _compute(ctx, mpmath.asin, args[0])


def _acos(args: Sequence[Number], ctx: BuiltinContext) -> Number:
    if not -1 <= args[0].value <= 1:
        raise ctx.invalid("argument must be between -1 and 1")
    return _compute(ctx, mpmath.acos, args[0])


def _ln(args: Sequence[Number], ctx: BuiltinContext) -> Number:
    if args[0].sign() <= 0:
        raise ctx.invalid("argument must be positive")
    return _compute(ctx, mpmath.ln, args[0])


def _log(args: Sequence[Number], ctx: BuiltinContext) -> Number:
    if args[0].sign() <= 0:
        raise ctx.invalid("argument must be positive")
    return _compute(ctx, mpmath.log10, args[0])


# ============================================================
# Variadic helpers
# ============================================================


def _min(args: Sequence[Number], ctx: BuiltinContext) -> Number:
    """min(x, ...) -> smallest argument; ties keep the earliest one."""
    result = args[0]
    for arg in args[1:]:
        if arg < result:
            result = arg
    return result


def _max(args: Sequence[Number], ctx: BuiltinContext) -> Number:
    """max(x, ...) -> largest argument; ties keep the earliest one."""
    result = args[0]
    for arg in args[1:]:
        if arg > result:
            result = arg
    return result


def _sum(args: Sequence[Number], ctx: BuiltinContext) -> Number:
    total = _compute(ctx, mpmath.mpf, args[0])
    for arg in args[1:]:
        total = _compute(ctx, operator.add, total, arg)
    return total


def _average(args: Sequence[Number], ctx: BuiltinContext) -> Number:
    count = Number.of(len(args), ctx.precision)
    return _compute(ctx, operator.truediv, _sum(args, ctx), count)


def _random(args: Sequence[Number], ctx: BuiltinContext) -> Number:
    """random() -> uniformly distributed value in [0, 1); not seeded."""
    return _compute(ctx, mpmath.rand)


# ============================================================
# Constants
# ============================================================


def _pi(ctx: BuiltinContext) -> Number:
    return _compute(ctx, lambda: +mpmath.mp.pi)


def _e(ctx: BuiltinContext) -> Number:
    return _compute(ctx, lambda: +mpmath.mp.e)


# ============================================================
# Registries
# ============================================================

OPERATOR_IMPLEMENTATIONS: Dict[OperatorKind, BuiltinFunction] = {
    OperatorKind.NEGATE: _negate,
    OperatorKind.ADD: _add,
    OperatorKind.SUBTRACT: _subtract,
    OperatorKind.MULTIPLY: _multiply,
    OperatorKind.DIVIDE: _divide,
    OperatorKind.MODULO: _modulo,
    OperatorKind.POWER: _power,
}

FUNCTION_IMPLEMENTATIONS: Dict[FunctionKind, BuiltinFunction] = {
    FunctionKind.ABS: _abs,
    FunctionKind.CEIL: _ceil,
    FunctionKind.FLOOR: _floor,
    FunctionKind.ROUND: _round,
    FunctionKind.SIN: _unary(mpmath.sin),
    FunctionKind.COS: _unary(mpmath.cos),
    FunctionKind.TAN: _unary(mpmath.tan),
    FunctionKind.ASIN: _asin,
    FunctionKind.ACOS: _acos,
    FunctionKind.ATAN: _unary(mpmath.atan),
    FunctionKind.SINH: _unary(mpmath.sinh),
    FunctionKind.COSH: _unary(mpmath.cosh),
    FunctionKind.TANH: _unary(mpmath.tanh),
    FunctionKind.MIN: _min,
    FunctionKind.MAX: _max,
    FunctionKind.SUM: _sum,
    FunctionKind.AVERAGE: _average,
    FunctionKind.LN: _ln,
    FunctionKind.LOG: _log,
    FunctionKind.RANDOM: _random,
}

CONSTANT_IMPLEMENTATIONS: Dict[ConstantKind, ConstantFunction] = {
    ConstantKind.PI: _pi,
    ConstantKind.E: _e,
}


def call_operator(
    descriptor: OperatorDescriptor,
    operands: Sequence[Number],
    context: BuiltinContext,
) -> Number:
    """
    Applies an operator to its operands.

    Raises:
        InvalidOperandError: If the result is undefined for the operands
    """
    implementation = OPERATOR_IMPLEMENTATIONS.get(descriptor.kind)
    if implementation is None:
        raise EvaluationError(
            f"Unsupported operator: {descriptor.symbol}",
            context.position,
            context.source,
        )
    return implementation(operands, context)


def call_function(
    descriptor: FunctionDescriptor,
    args: Sequence[Number],
    context: BuiltinContext,
) -> Number:
    """
    Calls a function after validating its argument count.

    Raises:
        ArityError: If the argument count is outside the descriptor's bounds
        InvalidOperandError: If the result is undefined for the arguments
    """
    if not descriptor.accepts(len(args)):
        raise ArityError(
            descriptor.name,
            descriptor.min_args,
            descriptor.max_args,
            len(args),
            context.position,
            context.source,
        )
    implementation = FUNCTION_IMPLEMENTATIONS.get(descriptor.kind)
    if implementation is None:
        raise EvaluationError(
            f"Unsupported function: {descriptor.name}",
            context.position,
            context.source,
        )
    return implementation(args, context)


def resolve_constant(
    descriptor: ConstantDescriptor, context: BuiltinContext
) -> Number:
    """Evaluates a constant at the context precision."""
    implementation = CONSTANT_IMPLEMENTATIONS.get(descriptor.kind)
    if implementation is None:
        raise EvaluationError(
            f"Unsupported constant: {descriptor.name}",
            context.position,
            context.source,
        )
    return implementation(context)
