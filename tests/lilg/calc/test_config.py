"""
Tests for calculator configuration.
"""

import pytest
from pydantic import ValidationError

from lilg.calc import CalculatorConfig, ExpressionLimits, GrammarStyle
from lilg.calc.config import (
    ENV_VAR_DISPLAY_DIGITS,
    ENV_VAR_LOG_LEVEL,
    ENV_VAR_PRECISION,
    ENV_VAR_STYLE,
    get_log_level,
)


class TestCalculatorConfig:
    """Tests for CalculatorConfig validation."""

    def test_defaults(self):
        config = CalculatorConfig()
        assert config.precision == 64
        assert config.style == GrammarStyle.STANDARD
        assert config.display_digits is None
        assert config.to_limits() == ExpressionLimits()

    def test_rejects_non_positive_precision(self):
        with pytest.raises(ValidationError):
            CalculatorConfig(precision=0)

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            CalculatorConfig(precison=10)

    def test_is_frozen(self):
        config = CalculatorConfig()
        with pytest.raises(ValidationError):
            config.precision = 10

    def test_accepts_style_by_value(self):
        config = CalculatorConfig(style="spreadsheet")
        assert config.style == GrammarStyle.SPREADSHEET

    def test_to_limits(self):
        config = CalculatorConfig(max_nesting_depth=8, max_precision=500)
        limits = config.to_limits()
        assert limits.max_nesting_depth == 8
        assert limits.max_precision == 500
        assert limits.max_function_args == 256
        assert limits.max_result_digits == 100000

    def test_result_digits_limit(self):
        config = CalculatorConfig(max_result_digits=20)
        assert config.to_limits().max_result_digits == 20
        with pytest.raises(ValidationError):
            CalculatorConfig(max_result_digits=0)


class TestFromEnv:
    """Tests for environment-driven configuration."""

    def test_empty_environment_uses_defaults(self):
        assert CalculatorConfig.from_env({}) == CalculatorConfig()

    def test_reads_variables(self):
        config = CalculatorConfig.from_env(
            {
                ENV_VAR_PRECISION: "128",
                ENV_VAR_STYLE: "SPREADSHEET",
                ENV_VAR_DISPLAY_DIGITS: "12",
            }
        )
        assert config.precision == 128
        assert config.style == GrammarStyle.SPREADSHEET
        assert config.display_digits == 12

    def test_rejects_invalid_values(self):
        with pytest.raises(ValidationError):
            CalculatorConfig.from_env({ENV_VAR_PRECISION: "0"})
        with pytest.raises(ValidationError):
            CalculatorConfig.from_env({ENV_VAR_STYLE: "scientific"})

    def test_overrides_win(self):
        config = CalculatorConfig.from_env({ENV_VAR_PRECISION: "128"}, precision=16)
        assert config.precision == 16

    def test_none_overrides_are_ignored(self):
        config = CalculatorConfig.from_env(
            {ENV_VAR_PRECISION: "128"}, precision=None, style=None
        )
        assert config.precision == 128
        assert config.style == GrammarStyle.STANDARD

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv(ENV_VAR_PRECISION, "20")
        assert CalculatorConfig.from_env().precision == 20


class TestLogLevel:
    """Tests for log level lookup."""

    def test_default_log_level(self):
        assert get_log_level({}) == "WARNING"

    def test_log_level_from_environment(self):
        assert get_log_level({ENV_VAR_LOG_LEVEL: "debug"}) == "DEBUG"
