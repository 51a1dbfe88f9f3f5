"""Lexer/tokenizer for arithmetic expressions.

Converts an expression string into a stream of tokens for the parser.

Token types:
- Literals: NUMBER
- Operators: PLUS, MINUS, ASTERISK, SLASH, CARET
- Punctuation: LPAREN, RPAREN

Digits and '.' accumulate into a numeric buffer which is flushed when an
operator, punctuation, whitespace or the end of input is reached. Whitespace
is always skipped. Any other character is an unknown symbol: reported in
strict mode, skipped in permissive mode.
"""

import logging
import string
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator

from pemdas.errors import LexError, LexErrorKind
from pemdas.numeric import Arithmetic, Number, NumberDomain, arithmetic_for, format_number

logger = logging.getLogger(__name__)


class TokenType(Enum):
    """Types of tokens in the expression language."""

    # Literals
    NUMBER = auto()

    # Arithmetic operators
    MINUS = auto()       # -
    PLUS = auto()        # +
    ASTERISK = auto()    # *
    SLASH = auto()       # /
    CARET = auto()       # ^

    # Punctuation
    LPAREN = auto()      # (
    RPAREN = auto()      # )

    # End of input (synthesized by the parser, never emitted by the lexer)
    EOF = auto()


@dataclass(frozen=True)
class Token:
    """One lexeme and the index where it starts in the source.

    For NUMBER tokens ``value`` is the literal already converted to the
    lexer's number domain (float, Decimal or int). Operator and parenthesis
    tokens carry their character, and the parser's EOF marker carries None.
    """

    type: TokenType
    value: Number | str | None
    position: int

    def __repr__(self) -> str:
        shown = format_number(self.value) if self.type == TokenType.NUMBER else repr(self.value)
        return f"<{self.type.name} {shown} @{self.position}>"


SYMBOLS = {
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    "*": TokenType.ASTERISK,
    "/": TokenType.SLASH,
    "^": TokenType.CARET,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}

_CONSTANT_CHARS = frozenset(string.digits + ".")


class Lexer:
    """Tokenizer for arithmetic expressions.

    Tokens are produced lazily; each iteration starts again from the
    beginning of the source, so a Lexer can be iterated any number of times
    and always yields the same sequence.

    Usage:
        lexer = Lexer("2 + 3 * (4 - 1)")
        for token in lexer:
            print(token)
    """

    def __init__(
        self,
        source: str,
        strict: bool = True,
        domain: NumberDomain | str = NumberDomain.FLOAT,
    ):
        self.source = source
        self.strict = strict
        self.arithmetic: Arithmetic = arithmetic_for(domain)

    def __iter__(self) -> Iterator[Token]:
        """Iterate over all tokens in the source."""
        buffer_start = 0
        buffer: list[str] = []

        for index, char in enumerate(self.source):
            if char in _CONSTANT_CHARS:
                if not buffer:
                    buffer_start = index
                buffer.append(char)
                continue

            if buffer:
                yield self._constant("".join(buffer), buffer_start, index)
                buffer.clear()

            token_type = SYMBOLS.get(char)
            if token_type is not None:
                yield Token(token_type, char, index)
            elif char.isspace():
                continue
            elif self.strict:
                raise LexError(LexErrorKind.UNKNOWN_SYMBOL, index, char)
            else:
                logger.debug("Skipping unknown symbol %r at index %d", char, index)

        if buffer:
            yield self._constant("".join(buffer), buffer_start, len(self.source) - 1)

    def _constant(self, text: str, start: int, fault_index: int) -> Token:
        """Build a NUMBER token; fault_index is reported if the text is invalid."""
        try:
            value = self.arithmetic.parse_constant(text)
        except ValueError:
            raise LexError(LexErrorKind.INVALID_CONSTANT, fault_index, text)
        return Token(TokenType.NUMBER, value, start)

    def tokenize(self) -> list[Token]:
        """Tokenize the entire source and return list of tokens."""
        return list(self)


def tokenize(
    expression: str,
    strict: bool = True,
    domain: NumberDomain | str = NumberDomain.FLOAT,
) -> Lexer:
    """Return a lazy, restartable token sequence for an expression."""
    return Lexer(expression, strict=strict, domain=domain)
