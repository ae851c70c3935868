"""
Calculator facade.

Bundles a grammar, limits and precision from a CalculatorConfig so callers
can hand over an expression string and get a value or a formatted string
back.
"""

import logging
from typing import Any, Optional

from .config import CalculatorConfig
from .evaluator import EvaluationContext, EvaluationResult, evaluate, try_evaluate
from .formatter import format_number
from .grammar import Grammar, default_grammar
from .number import Number

logger = logging.getLogger(__name__)


class Calculator:
    """Evaluates expressions with a fixed grammar and its own precision."""

    def __init__(
        self,
        config: Optional[CalculatorConfig] = None,
        grammar: Optional[Grammar] = None,
    ):
        self._config = config or CalculatorConfig()
        self._grammar = grammar or default_grammar(self._config.style)
        self._limits = self._config.to_limits()
        self._precision = self._config.precision

    @property
    def config(self) -> CalculatorConfig:
        return self._config

    @property
    def grammar(self) -> Grammar:
        return self._grammar

    @property
    def precision(self) -> int:
        return self._precision

    def set_precision(self, precision: int) -> None:
        """Sets the precision for later evaluations; non-positive values are ignored."""
        if precision <= 0:
            logger.warning("precision_ignored", extra={"precision": precision})
            return
        self._precision = precision

    def evaluate(self, expression: str, user_context: Any = None) -> Number:
        """Evaluates an expression and returns its value."""
        return evaluate(expression, self._context(user_context))

    def try_evaluate(self, expression: str, user_context: Any = None) -> EvaluationResult:
        """Evaluates an expression, reporting failure in the result."""
        return try_evaluate(expression, self._context(user_context))

    def calculate(self, expression: str, user_context: Any = None) -> str:
        """Evaluates an expression and returns the formatted result."""
        value = self.evaluate(expression, user_context)
        return format_number(value, self._config.display_digits)

    def _context(self, user_context: Any) -> EvaluationContext:
        return EvaluationContext(
            precision=self._precision,
            grammar=self._grammar,
            limits=self._limits,
            user_context=user_context,
        )
