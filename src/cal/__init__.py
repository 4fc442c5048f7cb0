"""
cal - calculator expression core.

Parses arithmetic expressions into a typed AST and evaluates them with
an int/float number model.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.errors import CalError, ParseError, TokenizeError
from .core.expression_lang import calculate, evaluate, parse_expr
from .core.ir import Node, Number

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "CalError",
    "Node",
    "Number",
    "ParseError",
    "TokenizeError",
    "calculate",
    "evaluate",
    "parse_expr",
]
