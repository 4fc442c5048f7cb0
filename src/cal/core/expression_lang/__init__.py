"""
cal expression language.

Tokenizer, parser and evaluator for calculator expressions.

Usage:
    from cal.core.expression_lang import parse_expr, evaluate

    expr = parse_expr("7 + 6 * 2 - 4 * (8 + 3)")
    result = evaluate(expr)
    # result == Number.int_(-25)
"""

from cal.core.expression_lang.evaluator import calculate, evaluate
from cal.core.expression_lang.parser import Parser, parse_expr, parse_tokens
from cal.core.expression_lang.tokenizer import Operator, Token, TokenKind, tokenize

__all__ = [
    "Operator",
    "Parser",
    "Token",
    "TokenKind",
    "calculate",
    "evaluate",
    "parse_expr",
    "parse_tokens",
    "tokenize",
]
