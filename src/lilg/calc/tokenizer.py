"""
Tokenizer (lexer) for the expression language.

Converts expression strings into a stream of tokens for the evaluator.
Operator, bracket and separator symbols come from the grammar; names are
only matched against the grammar later, by the evaluator.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

from .errors import LexicalError
from .grammar import Grammar, default_grammar
from .limits import ExpressionLimits, check_expression_length


class TokenType(Enum):
    """Token types produced by the tokenizer."""

    # Literals
    NUMBER = "NUMBER"

    # Function and constant names
    IDENTIFIER = "IDENTIFIER"

    # Symbols
    OPERATOR = "OPERATOR"
    OPEN_BRACKET = "OPEN_BRACKET"
    CLOSE_BRACKET = "CLOSE_BRACKET"
    SEPARATOR = "SEPARATOR"

    # Special
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A token produced by the tokenizer."""

    type: TokenType
    value: str
    position: int


def _is_digit(ch: str) -> bool:
    """Checks if a character is a digit."""
    return "0" <= ch <= "9"


def _is_whitespace(ch: str) -> bool:
    """Checks if a character is whitespace."""
    return ch in (" ", "\t", "\n", "\r")


class Tokenizer:
    """
    Tokenizer for expression strings.

    Iterating a Tokenizer scans the source lazily and always restarts from
    the beginning, so the same instance can be iterated more than once.
    """

    def __init__(
        self,
        source: str,
        grammar: Optional[Grammar] = None,
        limits: Optional[ExpressionLimits] = None,
    ):
        self._source = source
        self._grammar = grammar or default_grammar()
        self._limits = limits

    def __iter__(self) -> Iterator[Token]:
        return self.iter_tokens()

    def tokenize(self) -> List[Token]:
        """Tokenizes the source expression and returns all tokens."""
        return list(self.iter_tokens())

    def iter_tokens(self) -> Iterator[Token]:
        """Yields tokens one at a time, ending with an EOF token."""
        check_expression_length(self._source, self._limits)

        source = self._source
        position = 0

        while position < len(source):
            ch = source[position]

            if _is_whitespace(ch):
                position += 1
                continue

            if _is_digit(ch):
                end = self._scan_number(position)
                yield Token(TokenType.NUMBER, source[position:end], position)
                position = end
                continue

            if ch.isalpha():
                end = position
                while end < len(source) and source[end].isalpha():
                    end += 1
                yield Token(TokenType.IDENTIFIER, source[position:end], position)
                position = end
                continue

            symbol = self._grammar.match_symbol(source, position)
            if symbol is None:
                raise LexicalError(ch, position, source)

            yield Token(self._classify(symbol), symbol, position)
            position += len(symbol)

        yield Token(TokenType.EOF, "", position)

    def _scan_number(self, start: int) -> int:
        source = self._source
        end = start

        # Integer part
        while end < len(source) and _is_digit(source[end]):
            end += 1

        # Fractional part, only when a digit follows the '.'
        if (
            end + 1 < len(source)
            and source[end] == "."
            and _is_digit(source[end + 1])
        ):
            end += 1
            while end < len(source) and _is_digit(source[end]):
                end += 1

        return end

    def _classify(self, symbol: str) -> TokenType:
        if symbol == self._grammar.separator:
            return TokenType.SEPARATOR
        if self._grammar.opening_bracket(symbol) is not None:
            return TokenType.OPEN_BRACKET
        if self._grammar.closing_bracket(symbol) is not None:
            return TokenType.CLOSE_BRACKET
        return TokenType.OPERATOR


def tokenize(
    source: str,
    grammar: Optional[Grammar] = None,
    limits: Optional[ExpressionLimits] = None,
) -> List[Token]:
    """
    Tokenizes an expression string into tokens.

    Args:
        source: The expression string to tokenize
        grammar: Optional grammar supplying symbols (defaults to the standard one)
        limits: Optional expression limits

    Returns:
        List of tokens, ending with an EOF token

    Raises:
        LexicalError: If the expression contains a character no rule matches
    """
    return Tokenizer(source, grammar, limits).tokenize()
