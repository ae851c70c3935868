"""
Error types for the arithmetic expression evaluator.

All evaluator errors extend ExpressionError for consistent handling.
"""

from typing import Optional


class ExpressionError(Exception):
    """
    Base error class for all expression-related errors.
    """

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.position = position
        self.expression = expression

    def format_with_context(self) -> str:
        """
        Returns a formatted error message with position context.
        """
        if self.expression is None or self.position is None:
            return self.message

        pointer = " " * self.position + "^"
        return f"{self.message}\n  {self.expression}\n  {pointer}"


class LexicalError(ExpressionError):
    """
    Error thrown when the input matches no token rule.
    """

    def __init__(
        self,
        text: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        super().__init__(f"Unexpected character: '{text}'", position, expression)
        self.text = text


class StructuralError(ExpressionError):
    """
    Error thrown when the token sequence violates the grammar shape.
    """

    pass


class EvaluationError(ExpressionError):
    """
    Error thrown during evaluation (runtime error).
    """

    pass


class ArityError(EvaluationError):
    """
    Error thrown when a function is called with the wrong number of arguments.
    """

    def __init__(
        self,
        function_name: str,
        expected_min: int,
        expected_max: Optional[int],
        actual: int,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        if expected_max is None:
            expected = f"at least {expected_min}"
        elif expected_min == expected_max:
            expected = str(expected_min)
        else:
            expected = f"{expected_min}-{expected_max}"
        message = f"{function_name}: expected {expected} argument(s), got {actual}"
        super().__init__(message, position, expression)
        self.function_name = function_name
        self.expected_min = expected_min
        self.expected_max = expected_max
        self.actual = actual


class InvalidOperandError(EvaluationError):
    """
    Error thrown when an operator or function has no defined result
    for its operands.
    """

    def __init__(
        self,
        name: str,
        message: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        full_message = f"{name}: {message}"
        super().__init__(full_message, position, expression)
        self.name = name


class LimitExceededError(ExpressionError):
    """
    Error thrown when expression limits are exceeded.
    """

    def __init__(
        self,
        limit_name: str,
        limit: int,
        actual: int,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        message = f"Limit exceeded: {limit_name} (limit: {limit}, actual: {actual})"
        super().__init__(message, position, expression)
        self.limit_name = limit_name
        self.limit = limit
        self.actual = actual
