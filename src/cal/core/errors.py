"""
Error types for cal tokenizing, parsing and tree loading.

Evaluation has no error path: the numeric model is total. Everything
that can go wrong happens before a tree exists.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cal.core.expression_lang.tokenizer import Token


class CalError(Exception):
    """Base exception for all cal errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.message}\n{self.context.format()}"
        return self.message

    def attach_source(self, source: str) -> None:
        """Attach the source text so the message points at the offending offset."""
        pos = getattr(self, "pos", None)
        if pos is None:
            return
        self.context = ErrorContext(source=source, pos=pos)
        self.args = (self._format_message(),)


class TokenizeError(CalError):
    """Raised when the source contains a character no token starts with."""

    def __init__(self, message: str, pos: int):
        self.pos = pos
        super().__init__(message)


class ParseError(CalError):
    """
    Raised when a token stream does not form an expression.

    Every parse error records ``pos``, the source offset of the token it
    was raised on (the end of input for UnexpectedEndOfInput).
    """

    def __init__(self, message: str, pos: int | None = None):
        self.pos = pos
        super().__init__(message)


class UnexpectedEndOfInput(ParseError):
    """A token was required but the stream was exhausted."""

    def __init__(self, pos: int | None = None):
        super().__init__("Unexpected end of input", pos)


class InvalidUnaryOperator(ParseError):
    """An operator appeared where only an operand could start."""

    def __init__(self, token: Token):
        self.token = token
        super().__init__(f"Invalid unary operator {token.value!s}", token.pos)


class MismatchedRightParenthesis(ParseError):
    """A ``(`` was not closed, or a ``)`` has no matching ``(``."""

    def __init__(self, pos: int):
        super().__init__(f"Mismatched right parenthesis at offset {pos}", pos)


class UnknownFunction(ParseError):
    """An identifier that does not name a supported function."""

    def __init__(self, name: str, pos: int):
        self.name = name
        super().__init__(f"Unknown function: {name}", pos)


class ExpectedLeftParenthesis(ParseError):
    """A function name was not followed by its parenthesised argument."""

    def __init__(self, name: str, pos: int | None):
        self.name = name
        super().__init__(f"Expected '(' after function name {name}", pos)


class UnexpectedToken(ParseError):
    """A token was left over after a complete expression."""

    def __init__(self, token: Token):
        self.token = token
        super().__init__(f"Unexpected token after expression: {token.value!s}", token.pos)


class ExpressionTooDeep(ParseError):
    """Parentheses, signs or powers nest deeper than the parser can follow."""

    def __init__(self, pos: int | None = None):
        super().__init__("Expression nested too deeply", pos)


class NodeLoadError(CalError):
    """Raised when a serialized expression tree fails validation."""


class NodeDumpError(CalError):
    """Raised when a tree cannot be written as JSON, e.g. when it is too deep."""


class ConfigError(CalError):
    """Raised when cal.toml cannot be read or holds invalid settings."""


@dataclass
class ErrorContext:
    """
    Source text and the offset an error points at.

    Attributes:
        source: The full expression text
        pos: 0-indexed offset into ``source``
    """

    source: str
    pos: int

    def format(self) -> str:
        """
        Format the context as the source line with a marker under ``pos``.

        Returns:
            Two lines, e.g.::

                1 + 2)
                     ^
        """
        lines = self.source.split("\n")
        offset = 0
        for line in lines:
            if self.pos <= offset + len(line):
                column = self.pos - offset
                return f"{line}\n{' ' * column}^"
            offset += len(line) + 1
        # Offsets past the end point just after the last character
        last = lines[-1]
        return f"{last}\n{' ' * len(last)}^"
