"""
Actions performed by AST nodes.

A BinaryAction combines two operands, a UnaryAction transforms one. The
unary set is closed: negate, identity, or one of the twelve named
trigonometric functions in Function.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, model_validator


class Function(StrEnum):
    """Named unary functions callable as ``name(expr)``."""

    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    SEC = "sec"
    CSC = "csc"
    COT = "cot"
    ASIN = "asin"
    ACOS = "acos"
    ATAN = "atan"
    ASEC = "asec"
    ACSC = "acsc"
    ACOT = "acot"


class BinaryAction(StrEnum):
    """Binary operators, valued by their source symbol."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "^"

    @property
    def label(self) -> str:
        return f"Op({self.value})"


class UnaryActionKind(StrEnum):
    NEG = "neg"
    IDEN = "iden"
    FUNC = "func"


class UnaryAction(BaseModel):
    """
    A unary action: negation, identity, or a function call.

    Examples:
        - UnaryAction.neg() → -x
        - UnaryAction.iden() → +x
        - UnaryAction.func(Function.SIN) → sin(x)
    """

    kind: UnaryActionKind
    function: Function | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_function(self) -> UnaryAction:
        if self.kind == UnaryActionKind.FUNC and self.function is None:
            raise ValueError("function action requires a function name")
        if self.kind != UnaryActionKind.FUNC and self.function is not None:
            raise ValueError(f"{self.kind} action does not take a function")
        return self

    @classmethod
    def neg(cls) -> UnaryAction:
        return cls(kind=UnaryActionKind.NEG)

    @classmethod
    def iden(cls) -> UnaryAction:
        return cls(kind=UnaryActionKind.IDEN)

    @classmethod
    def func(cls, function: Function) -> UnaryAction:
        return cls(kind=UnaryActionKind.FUNC, function=function)

    @property
    def label(self) -> str:
        if self.kind == UnaryActionKind.NEG:
            return "Op(-)"
        if self.kind == UnaryActionKind.IDEN:
            return "Op(+)"
        return f"Func({self.function})"

    def __str__(self) -> str:
        return self.label
