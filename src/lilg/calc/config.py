"""
Calculator configuration.

Settings can be given directly or read from the environment:

- LILG_CALC_PRECISION: significant digits per evaluation
- LILG_CALC_STYLE: operator table, "standard" or "spreadsheet"
- LILG_CALC_DISPLAY_DIGITS: significant digits shown when formatting
- LILG_CALC_LOG_LEVEL: log level for the command-line tool
"""

from __future__ import annotations

import os
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from .grammar import GrammarStyle
from .limits import DEFAULT_EXPRESSION_LIMITS, ExpressionLimits
from .precision import DEFAULT_PRECISION

ENV_VAR_PRECISION = "LILG_CALC_PRECISION"
ENV_VAR_STYLE = "LILG_CALC_STYLE"
ENV_VAR_DISPLAY_DIGITS = "LILG_CALC_DISPLAY_DIGITS"
ENV_VAR_LOG_LEVEL = "LILG_CALC_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "warning"


class CalculatorConfig(BaseModel):
    """
    Configuration for a Calculator.

    Limits default to the values in DEFAULT_EXPRESSION_LIMITS.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    # Significant digits used by every evaluation
    precision: int = Field(default=DEFAULT_PRECISION, gt=0)

    # Operator table preset
    style: GrammarStyle = GrammarStyle.STANDARD

    # Significant digits shown by calculate(); all digits when unset
    display_digits: Optional[int] = Field(default=None, gt=0)

    max_expression_length: int = Field(
        default=DEFAULT_EXPRESSION_LIMITS.max_expression_length, gt=0
    )
    max_nesting_depth: int = Field(
        default=DEFAULT_EXPRESSION_LIMITS.max_nesting_depth, gt=0
    )
    max_function_args: int = Field(
        default=DEFAULT_EXPRESSION_LIMITS.max_function_args, gt=0
    )
    max_precision: int = Field(default=DEFAULT_EXPRESSION_LIMITS.max_precision, gt=0)
    max_result_digits: int = Field(
        default=DEFAULT_EXPRESSION_LIMITS.max_result_digits, gt=0
    )

    def to_limits(self) -> ExpressionLimits:
        return ExpressionLimits(
            max_expression_length=self.max_expression_length,
            max_nesting_depth=self.max_nesting_depth,
            max_function_args=self.max_function_args,
            max_precision=self.max_precision,
            max_result_digits=self.max_result_digits,
        )

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any
    ) -> CalculatorConfig:
        """
        Builds a configuration from environment variables.

        Unset variables keep their defaults; keyword overrides win over both.

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value
        """
        environ = os.environ if environ is None else environ
        candidate: dict[str, Any] = {}

        precision = environ.get(ENV_VAR_PRECISION)
        if precision:
            candidate["precision"] = precision

        style = environ.get(ENV_VAR_STYLE)
        if style:
            candidate["style"] = style.lower()

        display_digits = environ.get(ENV_VAR_DISPLAY_DIGITS)
        if display_digits:
            candidate["display_digits"] = display_digits

        candidate.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(candidate)


def get_log_level(environ: Optional[Mapping[str, str]] = None) -> str:
    """Returns the configured log level name, upper-cased for logging."""
    environ = os.environ if environ is None else environ
    return environ.get(ENV_VAR_LOG_LEVEL, DEFAULT_LOG_LEVEL).upper()
