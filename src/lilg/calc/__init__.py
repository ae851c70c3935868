"""
Arbitrary-precision arithmetic expression evaluator.

This module parses infix expressions with numeric literals, named
constants, unary and binary operators and multi-argument functions, and
evaluates them to a single high-precision number in one pass.
"""

# Calculator facade
from .calculator import Calculator
from .config import CalculatorConfig

# Errors
from .errors import (
    ArityError,
    EvaluationError,
    ExpressionError,
    InvalidOperandError,
    LexicalError,
    LimitExceededError,
    StructuralError,
)

# Evaluator
from .evaluator import (
    EvaluationContext,
    EvaluationResult,
    Evaluator,
    evaluate,
    try_evaluate,
)
from .formatter import format_number

# Grammar
from .grammar import (
    Associativity,
    BracketPair,
    ConstantDescriptor,
    ConstantKind,
    FunctionDescriptor,
    FunctionKind,
    Grammar,
    GrammarStyle,
    OperatorDescriptor,
    OperatorKind,
    default_grammar,
    get_default_operators,
)
from .limits import DEFAULT_EXPRESSION_LIMITS, ExpressionLimits

# Number type
from .number import Number
from .precision import (
    DEFAULT_PRECISION,
    get_default_precision,
    set_default_precision,
)

# Tokenizer
from .tokenizer import (
    Token,
    Tokenizer,
    TokenType,
    tokenize,
)

__all__ = [
    # Facade
    "Calculator",
    "CalculatorConfig",
    # Errors
    "ExpressionError",
    "LexicalError",
    "StructuralError",
    "EvaluationError",
    "ArityError",
    "InvalidOperandError",
    "LimitExceededError",
    # Limits
    "ExpressionLimits",
    "DEFAULT_EXPRESSION_LIMITS",
    # Precision
    "DEFAULT_PRECISION",
    "get_default_precision",
    "set_default_precision",
    # Number type
    "Number",
    "format_number",
    # Grammar
    "Associativity",
    "BracketPair",
    "ConstantDescriptor",
    "ConstantKind",
    "FunctionDescriptor",
    "FunctionKind",
    "Grammar",
    "GrammarStyle",
    "OperatorDescriptor",
    "OperatorKind",
    "default_grammar",
    "get_default_operators",
    # Tokenizer
    "Token",
    "TokenType",
    "Tokenizer",
    "tokenize",
    # Evaluator
    "EvaluationContext",
    "EvaluationResult",
    "Evaluator",
    "evaluate",
    "try_evaluate",
]
