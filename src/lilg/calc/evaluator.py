"""
Expression evaluator.

Evaluates an expression string in a single pass with the shunting-yard
algorithm: tokens are consumed left to right and reduced directly onto an
operand stack of Numbers, with an operator stack holding pending operators
and bracket barriers. No syntax tree is built.

Precision semantics:
- The precision is fixed once per evaluation, from the context or else the
  process-wide default, and used for every literal, constant and operation.
- Changing the default while an evaluation runs does not affect it.

Unary vs. binary operators:
- An operator is unary when it appears where an operand is expected: at the
  start, after another operator, after an opening bracket or after an
  argument separator. Otherwise it is binary.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Union

from .builtins import BuiltinContext, call_function, call_operator, resolve_constant
from .errors import ExpressionError, InvalidOperandError, StructuralError
from .grammar import (
    Associativity,
    BracketPair,
    FunctionDescriptor,
    Grammar,
    OperatorDescriptor,
    default_grammar,
)
from .limits import (
    DEFAULT_EXPRESSION_LIMITS,
    ExpressionLimits,
    check_function_arg_count,
    check_nesting_depth,
    check_precision,
)
from .number import Number
from .precision import resolve_precision
from .tokenizer import Token, Tokenizer, TokenType

logger = logging.getLogger(__name__)


@dataclass
class EvaluationContext:
    """Per-evaluation settings."""

    precision: Optional[int] = None
    """Significant digits; the process-wide default is used when unset."""

    grammar: Optional[Grammar] = None
    """Grammar catalog; the standard default grammar is used when unset."""

    limits: Optional[ExpressionLimits] = None
    """Expression limits."""

    user_context: Any = None
    """Opaque caller value handed unchanged to every builtin call."""


@dataclass
class EvaluationResult:
    """Result of an evaluation that reports failure instead of raising."""

    value: Optional[Number]
    """The evaluated value."""

    success: bool
    """Whether evaluation succeeded."""

    error: Optional[ExpressionError] = None
    """The error if evaluation failed."""

    @property
    def message(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None


@dataclass
class _PendingOperator:
    descriptor: OperatorDescriptor
    position: int


@dataclass
class _Barrier:
    """An opening bracket on the operator stack, possibly opening a call."""

    bracket: BracketPair
    position: int
    function: Optional[FunctionDescriptor] = None
    call_position: int = 0
    operand_base: int = 0
    separators: int = 0


_StackEntry = Union[_PendingOperator, _Barrier]


class _TokenStream:
    """Token iterator with one token of lookahead."""

    def __init__(self, tokens: Iterator[Token]):
        self._tokens = tokens
        self._lookahead: Optional[Token] = None

    def peek(self) -> Token:
        if self._lookahead is None:
            self._lookahead = next(self._tokens)
        return self._lookahead

    def advance(self) -> Token:
        token = self.peek()
        self._lookahead = None
        return token


class Evaluator:
    """
    Evaluates expression strings against a context.

    An Evaluator keeps its stacks between calls, so one instance must not
    run two evaluations at the same time.
    """

    def __init__(self, context: Optional[EvaluationContext] = None):
        self._context = context or EvaluationContext()
        self._grammar = self._context.grammar or default_grammar()
        self._limits = self._context.limits or DEFAULT_EXPRESSION_LIMITS
        self._precision = 0
        self._source = ""
        self._operands: List[Number] = []
        self._operators: List[_StackEntry] = []
        self._depth = 0

    @property
    def precision(self) -> int:
        """Precision of the current or most recent evaluation."""
        return self._precision

    def evaluate(self, source: str) -> Number:
        """Evaluates an expression string and returns its value."""
        self._precision = resolve_precision(self._context.precision)
        check_precision(self._precision, self._limits)

        self._source = source
        self._operands = []
        self._operators = []
        self._depth = 0

        tokens = Tokenizer(source, self._grammar, self._limits)
        stream = _TokenStream(iter(tokens))
        expect_operand = True

        while True:
            token = stream.advance()
            token_type = token.type

            if token_type == TokenType.EOF:
                return self._finish(token, expect_operand)

            if token_type == TokenType.NUMBER:
                self._require_operand_slot(token, expect_operand)
                self._operands.append(self._parse_literal(token))
                expect_operand = False

            elif token_type == TokenType.IDENTIFIER:
                self._require_operand_slot(token, expect_operand)
                expect_operand = self._handle_identifier(token, stream)

            elif token_type == TokenType.OPERATOR:
                self._handle_operator(token, expect_operand)
                expect_operand = True

            elif token_type == TokenType.OPEN_BRACKET:
                self._require_operand_slot(token, expect_operand)
                self._open_expression_bracket(token)
                expect_operand = True

            elif token_type == TokenType.SEPARATOR:
                self._handle_separator(token, expect_operand)
                expect_operand = True

            elif token_type == TokenType.CLOSE_BRACKET:
                self._close_bracket(token, expect_operand)
                expect_operand = False

    # ============================================================
    # Token handlers
    # ============================================================

    def _require_operand_slot(self, token: Token, expect_operand: bool) -> None:
        if not expect_operand:
            raise StructuralError(
                f"Missing operator before '{token.value}'",
                token.position,
                self._source,
            )

    def _parse_literal(self, token: Token) -> Number:
        try:
            return Number.parse(token.value, self._precision)
        except ValueError as e:
            raise InvalidOperandError(
                token.value, "invalid number literal", token.position, self._source
            ) from e

    def _handle_identifier(self, token: Token, stream: _TokenStream) -> bool:
        """Handles a function or constant name; returns whether an operand follows."""
        name = token.value

        function = self._grammar.function(name)
        if function is not None:
            following = stream.peek()
            pair = None
            if following.type == TokenType.OPEN_BRACKET:
                pair = self._grammar.opening_bracket(following.value)
            if pair is None or not self._grammar.is_function_bracket(pair):
                raise StructuralError(
                    f"Function '{name}' must be followed by an argument list",
                    token.position,
                    self._source,
                )
            stream.advance()
            self._push_barrier(
                _Barrier(
                    bracket=pair,
                    position=following.position,
                    function=function,
                    call_position=token.position,
                    operand_base=len(self._operands),
                )
            )
            return True

        constant = self._grammar.constant(name)
        if constant is not None:
            context = self._builtin_context(name, token.position)
            self._operands.append(resolve_constant(constant, context))
            return False

        raise StructuralError(
            f"Unknown identifier: '{name}'", token.position, self._source
        )

    def _handle_operator(self, token: Token, expect_operand: bool) -> None:
        if expect_operand:
            descriptor = self._grammar.unary_operator(token.value)
            if descriptor is None:
                raise StructuralError(
                    f"Missing operand before '{token.value}'",
                    token.position,
                    self._source,
                )
            # A prefix operator has no left operand, so nothing to reduce yet
            self._operators.append(_PendingOperator(descriptor, token.position))
            return

        descriptor = self._grammar.binary_operator(token.value)
        if descriptor is None:
            raise StructuralError(
                f"Operator '{token.value}' cannot follow an operand",
                token.position,
                self._source,
            )
        self._reduce_before(descriptor)
        self._operators.append(_PendingOperator(descriptor, token.position))

    def _open_expression_bracket(self, token: Token) -> None:
        pair = self._grammar.opening_bracket(token.value)
        if pair is None or not self._grammar.is_expression_bracket(pair):
            raise StructuralError(
                f"Bracket '{token.value}' can only open an argument list",
                token.position,
                self._source,
            )
        self._push_barrier(_Barrier(bracket=pair, position=token.position))

    def _handle_separator(self, token: Token, expect_operand: bool) -> None:
        if expect_operand:
            raise StructuralError(
                f"Missing argument before '{token.value}'",
                token.position,
                self._source,
            )

        barrier = self._reduce_to_barrier()
        if barrier is None or barrier.function is None:
            raise StructuralError(
                "Argument separator outside of a function call",
                token.position,
                self._source,
            )
        barrier.separators += 1
        check_function_arg_count(
            barrier.separators + 1, self._limits, token.position, self._source
        )

    def _close_bracket(self, token: Token, expect_operand: bool) -> None:
        pair = self._grammar.closing_bracket(token.value)

        if expect_operand and not self._is_empty_call():
            raise StructuralError(
                f"Missing operand before '{token.value}'",
                token.position,
                self._source,
            )

        barrier = self._reduce_to_barrier()
        if barrier is None:
            raise StructuralError(
                f"Unmatched closing bracket '{token.value}'",
                token.position,
                self._source,
            )
        if barrier.bracket != pair:
            raise StructuralError(
                f"Bracket '{barrier.bracket.open}' closed by '{token.value}'",
                token.position,
                self._source,
            )
        self._operators.pop()
        self._depth -= 1

        if barrier.function is None:
            return

        args = self._operands[barrier.operand_base :]
        del self._operands[barrier.operand_base :]

        context = self._builtin_context(barrier.function.name, barrier.call_position)
        self._operands.append(call_function(barrier.function, args, context))

    def _finish(self, token: Token, expect_operand: bool) -> Number:
        if expect_operand:
            if not self._operands and not self._operators:
                raise StructuralError("Empty expression", 0, self._source)
            raise StructuralError(
                "Unexpected end of expression: missing operand",
                token.position,
                self._source,
            )

        while self._operators:
            entry = self._operators.pop()
            if isinstance(entry, _Barrier):
                raise StructuralError(
                    f"Unmatched opening bracket '{entry.bracket.open}'",
                    entry.position,
                    self._source,
                )
            self._apply_operator(entry)

        if len(self._operands) != 1:
            raise StructuralError(
                f"Malformed expression: {len(self._operands)} values left",
                token.position,
                self._source,
            )
        return self._operands[0]

    # ============================================================
    # Stack helpers
    # ============================================================

    def _is_empty_call(self) -> bool:
        """Checks for a function bracket opened with nothing inside it yet."""
        if not self._operators:
            return False
        top = self._operators[-1]
        return (
            isinstance(top, _Barrier)
            and top.function is not None
            and top.separators == 0
            and len(self._operands) == top.operand_base
        )

    def _push_barrier(self, barrier: _Barrier) -> None:
        self._depth += 1
        check_nesting_depth(self._depth, self._limits, barrier.position, self._source)
        self._operators.append(barrier)

    def _reduce_before(self, incoming: OperatorDescriptor) -> None:
        """Applies pending operators that bind at least as tightly as incoming."""
        while self._operators:
            top = self._operators[-1]
            if not isinstance(top, _PendingOperator):
                return
            pending = top.descriptor
            if pending.precedence > incoming.precedence or (
                pending.precedence == incoming.precedence
                and incoming.associativity == Associativity.LEFT
            ):
                self._operators.pop()
                self._apply_operator(top)
            else:
                return

    def _reduce_to_barrier(self) -> Optional[_Barrier]:
        """Applies pending operators down to the nearest barrier, left in place."""
        while self._operators:
            top = self._operators[-1]
            if isinstance(top, _Barrier):
                return top
            self._operators.pop()
            self._apply_operator(top)
        return None

    def _apply_operator(self, entry: _PendingOperator) -> None:
        descriptor = entry.descriptor
        arity = descriptor.arity
        if len(self._operands) < arity:
            raise StructuralError(
                f"Missing operand for '{descriptor.symbol}'",
                entry.position,
                self._source,
            )
        operands = self._operands[-arity:]
        del self._operands[-arity:]

        context = self._builtin_context(descriptor.symbol, entry.position)
        self._operands.append(call_operator(descriptor, operands, context))

    def _builtin_context(self, name: str, position: int) -> BuiltinContext:
        return BuiltinContext(
            name=name,
            precision=self._precision,
            limits=self._limits,
            position=position,
            source=self._source,
            user_context=self._context.user_context,
        )


def evaluate(expression: str, context: Optional[EvaluationContext] = None) -> Number:
    """
    Evaluates an expression string and returns its value.

    Args:
        expression: The expression to evaluate
        context: Optional evaluation context (precision, grammar, limits)

    Returns:
        The value, at the precision of the evaluation

    Raises:
        LexicalError: If the input contains a character no token rule matches
        StructuralError: If the tokens do not form a valid expression
        ArityError: If a function gets the wrong number of arguments
        InvalidOperandError: If an operator or function result is undefined
        LimitExceededError: If the expression exceeds the configured limits
    """
    evaluator = Evaluator(context)
    try:
        value = evaluator.evaluate(expression)
    except ExpressionError as error:
        logger.debug(
            "expression_failed",
            extra={
                "expression": expression,
                "error_type": type(error).__name__,
                "position": error.position,
            },
        )
        raise

    logger.debug(
        "expression_evaluated",
        extra={"expression": expression, "precision": evaluator.precision},
    )
    return value


def try_evaluate(
    expression: str, context: Optional[EvaluationContext] = None
) -> EvaluationResult:
    """
    Evaluates an expression, reporting failure in the result instead of raising.

    Args:
        expression: The expression to evaluate
        context: Optional evaluation context

    Returns:
        The evaluation result with value, success status and error
    """
    try:
        value = evaluate(expression, context)
        return EvaluationResult(value=value, success=True)
    except ExpressionError as error:
        return EvaluationResult(value=None, success=False, error=error)
