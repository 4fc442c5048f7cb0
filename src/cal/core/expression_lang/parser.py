"""
Recursive descent parser for cal expressions.

Grammar (precedence low to high):
    expr    → term (("+" | "-") term)*
    term    → power (("*" | "/") power)*
    power   → factor ("^" power)?
    factor  → ("+" | "-")? atomic
    atomic  → INT | FLOAT | "(" expr ")" | IDENT "(" expr ")"

expr and term fold to the left; power is right-associative. A sign
applies to the atomic right after it, so ``-2 ^ 2`` is ``(-2) ^ 2`` and
``--1`` is rejected. Parsing is single pass with one token of lookahead,
and the first error aborts the parse.

Parentheses and powers recurse once per nesting level; input nested
past the interpreter's recursion limit raises ExpressionTooDeep.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from cal.core.errors import (
    CalError,
    ExpectedLeftParenthesis,
    ExpressionTooDeep,
    InvalidUnaryOperator,
    MismatchedRightParenthesis,
    UnexpectedEndOfInput,
    UnexpectedToken,
    UnknownFunction,
)
from cal.core.expression_lang.tokenizer import Operator, Token, TokenKind, tokenize
from cal.core.ir import (
    BinaryAction,
    BinaryNode,
    Function,
    Node,
    Number,
    PlainNode,
    UnaryAction,
    UnaryNode,
)

logger = logging.getLogger(__name__)

_ADDITIVE_OPS: dict[Operator, BinaryAction] = {
    Operator.PLUS: BinaryAction.ADD,
    Operator.MINUS: BinaryAction.SUB,
}

_MULTIPLICATIVE_OPS: dict[Operator, BinaryAction] = {
    Operator.STAR: BinaryAction.MUL,
    Operator.SLASH: BinaryAction.DIV,
}

_POWER_OPS: dict[Operator, BinaryAction] = {
    Operator.CARET: BinaryAction.POW,
}

_SIGN_OPS: dict[Operator, UnaryAction] = {
    Operator.PLUS: UnaryAction.iden(),
    Operator.MINUS: UnaryAction.neg(),
}


class TokenStream:
    """A token iterator with one token of lookahead."""

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens: Iterator[Token] = iter(tokens)
        self._lookahead: Token | None = None
        self._peeked = False
        self.last_pos: int | None = None

    def peek(self) -> Token | None:
        """Return the next token without consuming it, or None at the end."""
        if not self._peeked:
            self._lookahead = next(self._tokens, None)
            self._peeked = True
        return self._lookahead

    def next(self) -> Token | None:
        """Consume and return the next token, or None at the end."""
        tok = self.peek()
        self._lookahead = None
        self._peeked = False
        if tok is not None:
            self.last_pos = tok.pos
        return tok


class Parser:
    """Recursive descent parser producing one AST node per input."""

    def __init__(self, tokens: Iterable[Token], end_pos: int | None = None) -> None:
        """
        Args:
            tokens: Any iterable of tokens; it is consumed once, front to back.
            end_pos: Source offset reported when input runs out, if known.
        """
        self.tokens = TokenStream(tokens)
        self.end_pos = end_pos

    def parse(self) -> Node:
        """Parse the whole stream into a single tree."""
        try:
            node = self.parse_expr()
        except RecursionError:
            raise ExpressionTooDeep(self.tokens.last_pos) from None

        # Ensure all tokens consumed
        tok = self.tokens.next()
        if tok is not None:
            if tok.kind == TokenKind.RPAREN:
                raise MismatchedRightParenthesis(tok.pos)
            raise UnexpectedToken(tok)

        return node

    # -- Helpers --

    def _advance(self) -> Token:
        tok = self.tokens.next()
        if tok is None:
            raise UnexpectedEndOfInput(self.end_pos)
        return tok

    def _match_operator(self, table: dict[Operator, BinaryAction]) -> BinaryAction | None:
        """Consume the next token if it is an operator listed in ``table``."""
        tok = self.tokens.peek()
        if tok is None or tok.kind != TokenKind.OP:
            return None
        action = table.get(tok.value)  # type: ignore[arg-type]
        if action is not None:
            self.tokens.next()
        return action

    # -- Grammar rules --

    def parse_expr(self) -> Node:
        """term (('+' | '-') term)*"""
        left = self.parse_term()
        while (action := self._match_operator(_ADDITIVE_OPS)) is not None:
            right = self.parse_term()
            left = BinaryNode(left=left, action=action, right=right)
        return left

    def parse_term(self) -> Node:
        """power (('*' | '/') power)*"""
        left = self.parse_power()
        while (action := self._match_operator(_MULTIPLICATIVE_OPS)) is not None:
            right = self.parse_power()
            left = BinaryNode(left=left, action=action, right=right)
        return left

    def parse_power(self) -> Node:
        """factor ('^' power)?"""
        base = self.parse_factor()
        if self._match_operator(_POWER_OPS) is None:
            return base
        exponent = self.parse_power()
        return BinaryNode(left=base, action=BinaryAction.POW, right=exponent)

    def parse_factor(self) -> Node:
        """('+' | '-')? atomic"""
        tok = self.tokens.peek()
        if tok is None:
            raise UnexpectedEndOfInput(self.end_pos)

        # Other operators are invalid here; parse_atomic reports them.
        if tok.kind != TokenKind.OP or tok.value not in _SIGN_OPS:
            return self.parse_atomic()

        self.tokens.next()
        operand = self.parse_atomic()
        return UnaryNode(action=_SIGN_OPS[tok.value], operand=operand)  # type: ignore[index]

    def parse_atomic(self) -> Node:
        """INT | FLOAT | '(' expr ')' | IDENT '(' expr ')'"""
        tok = self._advance()

        match tok.kind:
            case TokenKind.INT:
                return PlainNode(value=Number.int_(tok.value))  # type: ignore[arg-type]
            case TokenKind.FLOAT:
                return PlainNode(value=Number.float_(tok.value))  # type: ignore[arg-type]
            case TokenKind.LPAREN:
                return self._parse_paren_tail()
            case TokenKind.IDENT:
                return self._parse_func_call(tok)
            case TokenKind.OP:
                raise InvalidUnaryOperator(tok)
            case TokenKind.RPAREN:
                raise MismatchedRightParenthesis(tok.pos)

        raise UnexpectedToken(tok)

    def _parse_paren_tail(self) -> Node:
        """expr ')' -- the opening parenthesis is already consumed."""
        expr = self.parse_expr()
        tok = self._advance()
        if tok.kind != TokenKind.RPAREN:
            raise MismatchedRightParenthesis(tok.pos)
        return expr

    def _parse_func_call(self, name_tok: Token) -> Node:
        """IDENT '(' expr ')'"""
        name = str(name_tok.value)
        try:
            function = Function(name.lower())
        except ValueError:
            raise UnknownFunction(name, name_tok.pos) from None

        tok = self.tokens.next()
        if tok is None or tok.kind != TokenKind.LPAREN:
            raise ExpectedLeftParenthesis(name, tok.pos if tok is not None else self.end_pos)

        argument = self._parse_paren_tail()
        return UnaryNode(action=UnaryAction.func(function), operand=argument)


def parse_tokens(tokens: Iterable[Token]) -> Node:
    """Parse an already tokenized expression."""
    return Parser(tokens).parse()


def parse_expr(source: str) -> Node:
    """Parse an expression string into an AST.

    Args:
        source: Expression string (e.g., "7 + 6 * 2 - 4 * (8 + 3)")

    Returns:
        Parsed expression AST.

    Raises:
        ParseError: If the expression is invalid.
        TokenizeError: If tokenization fails.
    """
    try:
        tokens = tokenize(source)
        node = Parser(tokens, end_pos=len(source)).parse()
    except CalError as e:
        e.attach_source(source)
        raise

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Parsed %r into %d nodes", source, node.size())
    return node
