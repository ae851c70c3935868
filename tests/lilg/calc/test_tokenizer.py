"""
Tests for expression tokenizer.
"""

from typing import Optional

import pytest

from lilg.calc import (
    ExpressionLimits,
    Grammar,
    LexicalError,
    LimitExceededError,
    Tokenizer,
    tokenize,
)
from lilg.calc.grammar import (
    EXPONENT,
    MULTIPLY,
    OPERATORS,
    Associativity,
    OperatorDescriptor,
    OperatorKind,
)
from lilg.calc.tokenizer import TokenType


def token_types(source: str, grammar: Optional[Grammar] = None) -> list[TokenType]:
    return [token.type for token in tokenize(source, grammar)]


class TestLiterals:
    """Tests for numeric literal tokenization."""

    def test_tokenizes_integer_literals(self):
        tokens = tokenize("42")
        assert len(tokens) == 2
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == "42"
        assert tokens[0].position == 0
        assert tokens[1].type == TokenType.EOF

    def test_tokenizes_decimal_literals(self):
        tokens = tokenize("3.14159")
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == "3.14159"

    def test_does_not_include_sign_in_literal(self):
        tokens = tokenize("-5")
        assert tokens[0].type == TokenType.OPERATOR
        assert tokens[0].value == "-"
        assert tokens[1].type == TokenType.NUMBER
        assert tokens[1].value == "5"

    def test_throws_on_trailing_decimal_point(self):
        with pytest.raises(LexicalError) as exc_info:
            tokenize("1.")
        assert exc_info.value.text == "."
        assert exc_info.value.position == 1

    def test_throws_on_leading_decimal_point(self):
        with pytest.raises(LexicalError):
            tokenize(".5")

    def test_exponent_is_not_part_of_literal(self):
        tokens = tokenize("1e5")
        assert [t.value for t in tokens[:3]] == ["1", "e", "5"]
        assert tokens[1].type == TokenType.IDENTIFIER


class TestIdentifiers:
    """Tests for identifier tokenization."""

    def test_tokenizes_identifiers(self):
        tokens = tokenize("pi")
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == "pi"

    def test_identifiers_are_letters_only(self):
        tokens = tokenize("abc12")
        assert tokens[0].value == "abc"
        assert tokens[1].type == TokenType.NUMBER
        assert tokens[1].value == "12"

    def test_unknown_names_are_still_identifiers(self):
        # Names are matched against the grammar by the evaluator
        tokens = tokenize("unknown")
        assert tokens[0].type == TokenType.IDENTIFIER

    def test_keeps_case(self):
        tokens = tokenize("PI")
        assert tokens[0].value == "PI"


class TestSymbols:
    """Tests for operator, bracket and separator tokenization."""

    def test_tokenizes_operators(self):
        tokens = tokenize("+ - * / % ^")
        assert all(t.type == TokenType.OPERATOR for t in tokens[:-1])
        assert [t.value for t in tokens[:-1]] == ["+", "-", "*", "/", "%", "^"]

    def test_tokenizes_function_call(self):
        assert token_types("max(1, 2)") == [
            TokenType.IDENTIFIER,
            TokenType.OPEN_BRACKET,
            TokenType.NUMBER,
            TokenType.SEPARATOR,
            TokenType.NUMBER,
            TokenType.CLOSE_BRACKET,
            TokenType.EOF,
        ]

    def test_prefers_longest_symbol(self):
        power = OperatorDescriptor(OperatorKind.POWER, "**", 2, Associativity.LEFT, 4)
        grammar = Grammar(operators=[MULTIPLY, power])
        tokens = tokenize("2**3*4", grammar)
        assert [t.value for t in tokens[:-1]] == ["2", "**", "3", "*", "4"]

    def test_symbols_come_from_grammar(self):
        grammar = Grammar(operators=[op for op in OPERATORS if op != EXPONENT])
        with pytest.raises(LexicalError) as exc_info:
            tokenize("2^3", grammar)
        assert exc_info.value.text == "^"

    def test_throws_on_unknown_character(self):
        with pytest.raises(LexicalError) as exc_info:
            tokenize("2 $ 3")
        assert exc_info.value.text == "$"
        assert exc_info.value.position == 2
        assert exc_info.value.expression == "2 $ 3"


class TestPositions:
    """Tests for token position tracking."""

    def test_tracks_positions(self):
        tokens = tokenize("1 + sin(x)")
        assert [t.position for t in tokens] == [0, 2, 4, 7, 8, 9, 10]

    def test_skips_whitespace(self):
        tokens = tokenize("  \t1\n+\r2  ")
        assert [t.value for t in tokens[:-1]] == ["1", "+", "2"]

    def test_eof_position_is_source_length(self):
        tokens = tokenize("1+2 ")
        assert tokens[-1].type == TokenType.EOF
        assert tokens[-1].position == 4


class TestLaziness:
    """Tests for lazy, restartable iteration."""

    def test_iteration_restarts_from_start(self):
        tokenizer = Tokenizer("1 + 2")
        assert list(tokenizer) == list(tokenizer)

    def test_yields_tokens_before_error(self):
        tokens = iter(Tokenizer("1 $"))
        assert next(tokens).value == "1"
        with pytest.raises(LexicalError):
            next(tokens)

    def test_empty_source_yields_only_eof(self):
        assert token_types("") == [TokenType.EOF]

    def test_tokens_are_immutable(self):
        token = tokenize("1")[0]
        with pytest.raises(AttributeError):
            token.value = "2"


class TestLimits:
    """Tests for expression length limits."""

    def test_throws_on_too_long_expression(self):
        limits = ExpressionLimits(max_expression_length=5)
        with pytest.raises(LimitExceededError) as exc_info:
            tokenize("1+2+3+4", limits=limits)
        assert exc_info.value.limit == 5
        assert exc_info.value.actual == 7
