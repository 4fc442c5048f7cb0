"""
Expression evaluator for cal expressions.

Walks a tree bottom-up and applies each node's action. Evaluation is
pure and total: the numeric model never raises, and the functions below
map domain errors to NaN and reciprocals of zero to infinity.
"""

from __future__ import annotations

import math
import operator
from collections.abc import Callable

from cal.core.expression_lang.parser import parse_expr
from cal.core.ir import (
    BinaryAction,
    BinaryNode,
    Function,
    Node,
    Number,
    PlainNode,
    UnaryAction,
    UnaryActionKind,
    UnaryNode,
)

_BINARY_OPS: dict[BinaryAction, Callable[[Number, Number], Number]] = {
    BinaryAction.ADD: operator.add,
    BinaryAction.SUB: operator.sub,
    BinaryAction.MUL: operator.mul,
    BinaryAction.DIV: operator.truediv,
    BinaryAction.POW: operator.pow,
}


def _recip(x: float) -> float:
    if x == 0.0:
        return math.copysign(math.inf, x)
    return 1.0 / x


_FUNCTIONS: dict[Function, Callable[[float], float]] = {
    Function.SIN: math.sin,
    Function.COS: math.cos,
    Function.TAN: math.tan,
    Function.SEC: lambda x: _recip(math.cos(x)),
    Function.CSC: lambda x: _recip(math.sin(x)),
    Function.COT: lambda x: _recip(math.tan(x)),
    Function.ASIN: math.asin,
    Function.ACOS: math.acos,
    Function.ATAN: math.atan,
    Function.ASEC: lambda x: math.acos(_recip(x)),
    Function.ACSC: lambda x: math.asin(_recip(x)),
    Function.ACOT: lambda x: math.atan(_recip(x)),
}


def evaluate(node: Node) -> Number:
    """Evaluate a tree to a Number.

    Children are evaluated before their parent, left before right. The
    walk keeps its own stack, so tree depth is not bounded by the
    interpreter's recursion limit.
    """
    values: list[Number] = []
    # (node, children already evaluated)
    stack: list[tuple[Node, bool]] = [(node, False)]

    while stack:
        current, ready = stack.pop()
        match current:
            case PlainNode():
                values.append(current.value)
            case UnaryNode() if ready:
                values.append(apply_unary(current.action, values.pop()))
            case UnaryNode():
                stack.append((current, True))
                stack.append((current.operand, False))
            case BinaryNode() if ready:
                right = values.pop()
                left = values.pop()
                values.append(apply_binary(current.action, left, right))
            case BinaryNode():
                stack.append((current, True))
                stack.append((current.right, False))
                stack.append((current.left, False))
            case _:
                raise TypeError(f"Unknown node type: {type(current).__name__}")

    return values.pop()


def apply_binary(action: BinaryAction, left: Number, right: Number) -> Number:
    return _BINARY_OPS[action](left, right)


def apply_unary(action: UnaryAction, operand: Number) -> Number:
    match action.kind:
        case UnaryActionKind.NEG:
            return -operand
        case UnaryActionKind.IDEN:
            return operand
        case UnaryActionKind.FUNC:
            assert action.function is not None
            return apply_function(action.function, operand)

    raise TypeError(f"Unknown unary action: {action.kind}")


def apply_function(function: Function, operand: Number) -> Number:
    """Apply a named function; the result is always a float."""
    try:
        result = _FUNCTIONS[function](operand.as_float())
    except ValueError:
        # Outside the function's domain, e.g. asin(2) or sin(inf)
        result = math.nan
    return Number.float_(result)


def calculate(source: str) -> Number:
    """Parse and evaluate an expression string."""
    return evaluate(parse_expr(source))
