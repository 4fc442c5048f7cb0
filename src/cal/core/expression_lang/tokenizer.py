"""
Tokenizer for cal expressions.

Converts an expression string into a sequence of typed tokens. The
parser only depends on the Token contract, so any other lexer that
yields Tokens can feed it.
"""

from __future__ import annotations

import logging
import re
from enum import StrEnum, auto

from cal.core.errors import TokenizeError

logger = logging.getLogger(__name__)


class TokenKind(StrEnum):
    """Token types for the expression language."""

    # Literals
    INT = auto()
    FLOAT = auto()

    # Function names
    IDENT = auto()

    # Operators (value is an Operator)
    OP = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()


class Operator(StrEnum):
    """Operator symbols."""

    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    CARET = "^"


TokenValue = int | float | str | Operator | None


class Token:
    """A single token: its kind, its value and its start offset in the source."""

    __slots__ = ("kind", "value", "pos")

    def __init__(self, kind: TokenKind, value: TokenValue, pos: int) -> None:
        self.kind = kind
        self.value = value
        self.pos = pos

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return (self.kind, self.value, self.pos) == (other.kind, other.value, other.pos)

    def __hash__(self) -> int:
        return hash((self.kind, self.value, self.pos))

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"


# Float: digits with a fraction and/or an exponent. Int: bare digits.
_FLOAT_RE = re.compile(r"([0-9]+\.[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?|[0-9]+[eE][+-]?[0-9]+")
_INT_RE = re.compile(r"[0-9]+")
# Identifier: letter or underscore followed by alphanumerics/underscores
_IDENT_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")

_DIGITS = frozenset("0123456789")
_IDENT_START = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")

_SINGLE_MAP: dict[str, tuple[TokenKind, Operator | None]] = {
    "+": (TokenKind.OP, Operator.PLUS),
    "-": (TokenKind.OP, Operator.MINUS),
    "*": (TokenKind.OP, Operator.STAR),
    "/": (TokenKind.OP, Operator.SLASH),
    "^": (TokenKind.OP, Operator.CARET),
    "(": (TokenKind.LPAREN, None),
    ")": (TokenKind.RPAREN, None),
}


def tokenize(source: str) -> list[Token]:
    """Tokenize an expression string into a list of tokens.

    Raises:
        TokenizeError: On a character that cannot start a token.
    """
    tokens: list[Token] = []
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        # Skip whitespace
        if c in " \t\n\r":
            i += 1
            continue

        # Numbers; a lone "." is not a number
        if c in _DIGITS or (c == "." and i + 1 < n and source[i + 1] in _DIGITS):
            m = _FLOAT_RE.match(source, i)
            if m is not None:
                tokens.append(Token(TokenKind.FLOAT, float(m.group(0)), i))
                i = m.end()
                continue
            m = _INT_RE.match(source, i)
            assert m is not None
            tokens.append(Token(TokenKind.INT, int(m.group(0)), i))
            i = m.end()
            continue

        # Identifiers (function names)
        if c in _IDENT_START:
            m = _IDENT_RE.match(source, i)
            assert m is not None
            tokens.append(Token(TokenKind.IDENT, m.group(0), i))
            i = m.end()
            continue

        if c in _SINGLE_MAP:
            kind, op = _SINGLE_MAP[c]
            tokens.append(Token(kind, op if op is not None else c, i))
            i += 1
            continue

        raise TokenizeError(f"Unexpected character: {c!r}", i)

    logger.debug("Tokenized %r into %d tokens", source, len(tokens))
    return tokens
