"""
Grammar catalog for the expression language.

A Grammar is the closed set of operators, functions, constants and bracket
pairs an evaluation recognizes. Descriptors are keyed by a kind enum, so a
catalog may relabel or drop entries (to localize names or restrict the
language) without changing what each entry computes.

Standard operator table (higher binds tighter):
1. Additive: + -
2. Multiplicative: * / %
3. Unary minus: -
4. Exponentiation: ^

The spreadsheet table only raises unary minus to 5, so -3^2 is (-3)^2.
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Tuple


class Associativity(Enum):
    """Grouping of repeated operators of equal precedence."""

    LEFT = "LEFT"
    RIGHT = "RIGHT"


class GrammarStyle(Enum):
    """Preset operator tables."""

    STANDARD = "standard"
    SPREADSHEET = "spreadsheet"


class OperatorKind(Enum):
    NEGATE = "NEGATE"
    ADD = "ADD"
    SUBTRACT = "SUBTRACT"
    MULTIPLY = "MULTIPLY"
    DIVIDE = "DIVIDE"
    MODULO = "MODULO"
    POWER = "POWER"


class FunctionKind(Enum):
    ABS = "ABS"
    CEIL = "CEIL"
    FLOOR = "FLOOR"
    ROUND = "ROUND"
    SIN = "SIN"
    COS = "COS"
    TAN = "TAN"
    ASIN = "ASIN"
    ACOS = "ACOS"
    ATAN = "ATAN"
    SINH = "SINH"
    COSH = "COSH"
    TANH = "TANH"
    MIN = "MIN"
    MAX = "MAX"
    SUM = "SUM"
    AVERAGE = "AVERAGE"
    LN = "LN"
    LOG = "LOG"
    RANDOM = "RANDOM"


class ConstantKind(Enum):
    PI = "PI"
    E = "E"


@dataclass(frozen=True)
class OperatorDescriptor:
    """An operator symbol with its arity, associativity and precedence."""

    kind: OperatorKind
    symbol: str
    arity: int
    associativity: Associativity
    precedence: int


@dataclass(frozen=True)
class FunctionDescriptor:
    """A named function and the argument counts it accepts."""

    kind: FunctionKind
    name: str
    min_args: int
    max_args: Optional[int]
    """Maximum argument count, or None when unbounded."""

    def accepts(self, count: int) -> bool:
        if count < self.min_args:
            return False
        return self.max_args is None or count <= self.max_args


@dataclass(frozen=True)
class ConstantDescriptor:
    """A named constant, evaluated at the precision of each reference."""

    kind: ConstantKind
    name: str


@dataclass(frozen=True)
class BracketPair:
    """Opening and closing bracket characters."""

    open: str
    close: str


PARENTHESES = BracketPair("(", ")")
SQUARE_BRACKETS = BracketPair("[", "]")

ARGUMENT_SEPARATOR = ","

# Operators
NEGATE = OperatorDescriptor(OperatorKind.NEGATE, "-", 1, Associativity.RIGHT, 3)
NEGATE_HIGH = OperatorDescriptor(OperatorKind.NEGATE, "-", 1, Associativity.RIGHT, 5)
MINUS = OperatorDescriptor(OperatorKind.SUBTRACT, "-", 2, Associativity.LEFT, 1)
PLUS = OperatorDescriptor(OperatorKind.ADD, "+", 2, Associativity.LEFT, 1)
MULTIPLY = OperatorDescriptor(OperatorKind.MULTIPLY, "*", 2, Associativity.LEFT, 2)
DIVIDE = OperatorDescriptor(OperatorKind.DIVIDE, "/", 2, Associativity.LEFT, 2)
MODULO = OperatorDescriptor(OperatorKind.MODULO, "%", 2, Associativity.LEFT, 2)
EXPONENT = OperatorDescriptor(OperatorKind.POWER, "^", 2, Associativity.LEFT, 4)

# Functions
ABS = FunctionDescriptor(FunctionKind.ABS, "abs", 1, 1)
CEIL = FunctionDescriptor(FunctionKind.CEIL, "ceil", 1, 1)
FLOOR = FunctionDescriptor(FunctionKind.FLOOR, "floor", 1, 1)
ROUND = FunctionDescriptor(FunctionKind.ROUND, "round", 1, 1)
SINE = FunctionDescriptor(FunctionKind.SIN, "sin", 1, 1)
COSINE = FunctionDescriptor(FunctionKind.COS, "cos", 1, 1)
TANGENT = FunctionDescriptor(FunctionKind.TAN, "tan", 1, 1)
ASINE = FunctionDescriptor(FunctionKind.ASIN, "asin", 1, 1)
ACOSINE = FunctionDescriptor(FunctionKind.ACOS, "acos", 1, 1)
ATAN = FunctionDescriptor(FunctionKind.ATAN, "atan", 1, 1)
SINEH = FunctionDescriptor(FunctionKind.SINH, "sinh", 1, 1)
COSINEH = FunctionDescriptor(FunctionKind.COSH, "cosh", 1, 1)
TANGENTH = FunctionDescriptor(FunctionKind.TANH, "tanh", 1, 1)
MIN = FunctionDescriptor(FunctionKind.MIN, "min", 1, None)
MAX = FunctionDescriptor(FunctionKind.MAX, "max", 1, None)
SUM = FunctionDescriptor(FunctionKind.SUM, "sum", 1, None)
AVERAGE = FunctionDescriptor(FunctionKind.AVERAGE, "avg", 1, None)
AVERAGE_LONG = FunctionDescriptor(FunctionKind.AVERAGE, "average", 1, None)
LN = FunctionDescriptor(FunctionKind.LN, "ln", 1, 1)
LOG = FunctionDescriptor(FunctionKind.LOG, "log", 1, 1)
RANDOM = FunctionDescriptor(FunctionKind.RANDOM, "random", 0, 0)

# Constants
PI = ConstantDescriptor(ConstantKind.PI, "pi")
E = ConstantDescriptor(ConstantKind.E, "e")

OPERATORS: Tuple[OperatorDescriptor, ...] = (
    NEGATE,
    MINUS,
    PLUS,
    MULTIPLY,
    DIVIDE,
    EXPONENT,
    MODULO,
)

OPERATORS_SPREADSHEET: Tuple[OperatorDescriptor, ...] = (
    NEGATE_HIGH,
    MINUS,
    PLUS,
    MULTIPLY,
    DIVIDE,
    EXPONENT,
    MODULO,
)

FUNCTIONS: Tuple[FunctionDescriptor, ...] = (
    SINE,
    COSINE,
    TANGENT,
    ASINE,
    ACOSINE,
    ATAN,
    SINEH,
    COSINEH,
    TANGENTH,
    MIN,
    MAX,
    SUM,
    AVERAGE,
    AVERAGE_LONG,
    LN,
    LOG,
    ROUND,
    CEIL,
    FLOOR,
    ABS,
    RANDOM,
)

CONSTANTS: Tuple[ConstantDescriptor, ...] = (PI, E)


def _is_name(text: str) -> bool:
    return bool(text) and all(ch.isalpha() for ch in text)


def _is_symbol(text: str) -> bool:
    return bool(text) and not any(
        ch.isalnum() or ch.isspace() or ch == "." for ch in text
    )


class Grammar:
    """
    Immutable catalog of operators, functions, constants and brackets.

    Raises ValueError on construction if two descriptors collide (same
    symbol and arity, same name) or a name or symbol could never be produced
    by the tokenizer.
    """

    def __init__(
        self,
        operators: Iterable[OperatorDescriptor],
        functions: Iterable[FunctionDescriptor] = (),
        constants: Iterable[ConstantDescriptor] = (),
        function_brackets: Iterable[BracketPair] = (PARENTHESES,),
        expression_brackets: Iterable[BracketPair] = (PARENTHESES,),
        separator: str = ARGUMENT_SEPARATOR,
    ):
        self._operators = tuple(operators)
        self._functions = tuple(functions)
        self._constants = tuple(constants)
        self._function_brackets = tuple(function_brackets)
        self._expression_brackets = tuple(expression_brackets)
        self._separator = separator

        self._unary: Dict[str, OperatorDescriptor] = {}
        self._binary: Dict[str, OperatorDescriptor] = {}
        self._function_index: Dict[str, FunctionDescriptor] = {}
        self._constant_index: Dict[str, ConstantDescriptor] = {}
        self._openers: Dict[str, BracketPair] = {}
        self._closers: Dict[str, BracketPair] = {}

        self._index_operators()
        self._index_names()
        self._index_brackets()

        symbols = set(self._unary) | set(self._binary) | {separator}
        symbols |= set(self._openers) | set(self._closers)
        # Longest first, so the tokenizer can take the first match
        self._symbols: Tuple[str, ...] = tuple(
            sorted(symbols, key=lambda s: (-len(s), s))
        )

    def _index_operators(self) -> None:
        for operator in self._operators:
            if not _is_symbol(operator.symbol):
                raise ValueError(f"Invalid operator symbol: {operator.symbol!r}")
            if operator.arity == 1:
                table = self._unary
            elif operator.arity == 2:
                table = self._binary
            else:
                raise ValueError(
                    f"Operator {operator.symbol!r} has unsupported arity "
                    f"{operator.arity}"
                )
            if operator.symbol in table:
                raise ValueError(
                    f"Duplicate operator {operator.symbol!r} with arity "
                    f"{operator.arity}"
                )
            table[operator.symbol] = operator

    def _index_names(self) -> None:
        for function in self._functions:
            if not _is_name(function.name):
                raise ValueError(f"Invalid function name: {function.name!r}")
            if function.min_args < 0 or (
                function.max_args is not None and function.max_args < function.min_args
            ):
                raise ValueError(
                    f"Invalid argument bounds for {function.name}: "
                    f"{function.min_args}-{function.max_args}"
                )
            if function.name in self._function_index:
                raise ValueError(f"Duplicate function name: {function.name}")
            self._function_index[function.name] = function

        for constant in self._constants:
            if not _is_name(constant.name):
                raise ValueError(f"Invalid constant name: {constant.name!r}")
            if constant.name in self._constant_index:
                raise ValueError(f"Duplicate constant name: {constant.name}")
            if constant.name in self._function_index:
                raise ValueError(
                    f"Name {constant.name} is both a function and a constant"
                )
            self._constant_index[constant.name] = constant

    def _index_brackets(self) -> None:
        if not _is_symbol(self._separator):
            raise ValueError(f"Invalid argument separator: {self._separator!r}")

        operator_symbols = set(self._unary) | set(self._binary) | {self._separator}
        for pair in self._function_brackets + self._expression_brackets:
            for text in (pair.open, pair.close):
                if not _is_symbol(text) or text in operator_symbols:
                    raise ValueError(f"Invalid bracket: {text!r}")
            existing = self._openers.get(pair.open)
            if existing is not None and existing != pair:
                raise ValueError(f"Conflicting bracket pairs for {pair.open!r}")
            self._openers[pair.open] = pair
            self._closers[pair.close] = pair

    # ============================================================
    # Catalog contents
    # ============================================================

    @property
    def operators(self) -> Tuple[OperatorDescriptor, ...]:
        return self._operators

    @property
    def functions(self) -> Tuple[FunctionDescriptor, ...]:
        return self._functions

    @property
    def constants(self) -> Tuple[ConstantDescriptor, ...]:
        return self._constants

    @property
    def function_brackets(self) -> Tuple[BracketPair, ...]:
        return self._function_brackets

    @property
    def expression_brackets(self) -> Tuple[BracketPair, ...]:
        return self._expression_brackets

    @property
    def separator(self) -> str:
        return self._separator

    @property
    def symbols(self) -> Tuple[str, ...]:
        """All operator, bracket and separator symbols, longest first."""
        return self._symbols

    # ============================================================
    # Lookups
    # ============================================================

    def unary_operator(self, symbol: str) -> Optional[OperatorDescriptor]:
        return self._unary.get(symbol)

    def binary_operator(self, symbol: str) -> Optional[OperatorDescriptor]:
        return self._binary.get(symbol)

    def function(self, name: str) -> Optional[FunctionDescriptor]:
        return self._function_index.get(name)

    def constant(self, name: str) -> Optional[ConstantDescriptor]:
        return self._constant_index.get(name)

    def opening_bracket(self, text: str) -> Optional[BracketPair]:
        return self._openers.get(text)

    def closing_bracket(self, text: str) -> Optional[BracketPair]:
        return self._closers.get(text)

    def is_function_bracket(self, pair: BracketPair) -> bool:
        return pair in self._function_brackets

    def is_expression_bracket(self, pair: BracketPair) -> bool:
        return pair in self._expression_brackets

    def match_symbol(self, source: str, position: int) -> Optional[str]:
        """Returns the longest symbol starting at position, if any."""
        for symbol in self._symbols:
            if source.startswith(symbol, position):
                return symbol
        return None


def get_default_operators(
    style: GrammarStyle = GrammarStyle.STANDARD,
) -> List[OperatorDescriptor]:
    """Returns a copy of the predefined operator table for a style."""
    if style == GrammarStyle.SPREADSHEET:
        return list(OPERATORS_SPREADSHEET)
    return list(OPERATORS)


def default_grammar(style: GrammarStyle = GrammarStyle.STANDARD) -> Grammar:
    """
    Returns the shared default grammar for a style.

    The grammar contains all predefined operators, functions and constants,
    with parentheses for both function calls and sub-expressions. It is
    built once per style and safe to share between evaluations.
    """
    return _build_default_grammar(GrammarStyle(style))


@lru_cache(maxsize=None)
def _build_default_grammar(style: GrammarStyle) -> Grammar:
    return Grammar(
        operators=get_default_operators(style),
        functions=FUNCTIONS,
        constants=CONSTANTS,
    )
