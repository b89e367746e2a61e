#!/usr/bin/env python3
"""
Recursive-descent parser for formula strings.

Grammar (lowest to highest precedence)::

    expression := term (('+' | '-') term)*
    term       := unary (('*' | '/' | '%') unary)*
    unary      := ('-' | '+') unary-power | power
    power      := postfix ('^' unary)*          right associative
    postfix    := primary '!'*
    primary    := NUMBER | constant | variable
                | name '(' args ')' | 'f' '(' expr ',' expr ')'
                | '(' expression ')'

Binary operators are handled by precedence climbing; the operand of a
unary sign is parsed at power precedence so that ``-x1^2`` means
``-(x1^2)``.
"""

from typing import List, Optional

from Plot3DKit.core.errors import FormulaError
from Plot3DKit.formula.ast import (BinaryOp, Call, Node, Number, Recurse,
                                   UnaryOp, Variable)
from Plot3DKit.formula.evaluator import EvaluableFormula
from Plot3DKit.formula.functions import CONSTANTS, FUNCTIONS
from Plot3DKit.formula.lexer import Lexer
from Plot3DKit.formula.tokens import Token, TokenType


RECURSION_NAME = 'f'

PRECEDENCE = {
    TokenType.PLUS: 1,
    TokenType.MINUS: 1,
    TokenType.STAR: 2,
    TokenType.SLASH: 2,
    TokenType.PERCENT: 2,
    TokenType.CARET: 3,
}
RIGHT_ASSOCIATIVE = {TokenType.CARET}

OPERATOR_SYMBOLS = {
    TokenType.PLUS: '+',
    TokenType.MINUS: '-',
    TokenType.STAR: '*',
    TokenType.SLASH: '/',
    TokenType.PERCENT: '%',
    TokenType.CARET: '^',
}


class Parser:
    """Build an expression tree from a token list."""

    def __init__(self, tokens: List[Token], source: str = ""):
        self.tokens = tokens
        self.source = source
        self.pos = 0

    def parse(self) -> Node:
        if self._check(TokenType.EOF):
            raise self._error("Empty formula")
        node = self._parse_binary_expr()
        if not self._check(TokenType.EOF):
            raise self._error(f"Unexpected {self._current().lexeme!r}")
        return node

    # ------------------------------------------------------------------
    # token helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        if token.type is not TokenType.EOF:
            self.pos += 1
        return token

    def _check(self, token_type: TokenType) -> bool:
        return self._current().type is token_type

    def _match(self, *types: TokenType) -> Optional[Token]:
        if self._current().type in types:
            return self._advance()
        return None

    def _consume(self, token_type: TokenType, message: str) -> Token:
        if self._check(token_type):
            return self._advance()
        raise self._error(message)

    def _error(self, message: str) -> FormulaError:
        return FormulaError(message, self._current().position, self.source)

    # ------------------------------------------------------------------
    # expressions
    # ------------------------------------------------------------------

    def _parse_binary_expr(self, min_precedence: int = 1) -> Node:
        left = self._parse_unary_expr()
        while True:
            token = self._current()
            precedence = PRECEDENCE.get(token.type)
            if precedence is None or precedence < min_precedence:
                return left
            self._advance()
            if token.type in RIGHT_ASSOCIATIVE:
                next_min = precedence
            else:
                next_min = precedence + 1
            right = self._parse_binary_expr(next_min)
            left = BinaryOp(OPERATOR_SYMBOLS[token.type], left, right)

    def _parse_unary_expr(self) -> Node:
        sign = self._match(TokenType.MINUS, TokenType.PLUS)
        if sign is not None:
            operand = self._parse_binary_expr(PRECEDENCE[TokenType.CARET])
            return UnaryOp(sign.lexeme, operand)
        return self._parse_postfix_expr()

    def _parse_postfix_expr(self) -> Node:
        node = self._parse_primary_expr()
        while self._match(TokenType.BANG):
            node = Call('factorial', (node,))
        return node

    def _parse_primary_expr(self) -> Node:
        token = self._current()

        if token.type is TokenType.NUMBER:
            self._advance()
            return Number(token.value)

        if token.type is TokenType.IDENTIFIER:
            self._advance()
            if self._check(TokenType.LPAREN):
                return self._parse_call(token)
            if token.lexeme in CONSTANTS:
                return Number(CONSTANTS[token.lexeme])
            return Variable(token.lexeme)

        if self._match(TokenType.LPAREN):
            node = self._parse_binary_expr()
            self._consume(TokenType.RPAREN, "Expected ')'")
            return node

        if token.type is TokenType.EOF:
            raise self._error("Unexpected end of formula")
        raise self._error(f"Unexpected {token.lexeme!r}")

    def _parse_call(self, name_token: Token) -> Node:
        name = name_token.lexeme
        self._consume(TokenType.LPAREN, "Expected '('")
        args: List[Node] = []
        if not self._check(TokenType.RPAREN):
            args.append(self._parse_binary_expr())
            while self._match(TokenType.COMMA):
                args.append(self._parse_binary_expr())
        self._consume(TokenType.RPAREN, f"Expected ')' after arguments of {name}")

        if name == RECURSION_NAME:
            if len(args) != 2:
                raise FormulaError(
                    f"f() takes exactly 2 arguments ({len(args)} given)",
                    name_token.position, self.source)
            return Recurse(args[0], args[1])

        if name not in FUNCTIONS:
            raise FormulaError(f"Unknown function {name!r}",
                               name_token.position, self.source)
        _, arity = FUNCTIONS[name]
        if (arity is None and not args) or (arity is not None and len(args) != arity):
            expected = "at least 1" if arity is None else str(arity)
            raise FormulaError(
                f"{name}() takes {expected} argument(s) ({len(args)} given)",
                name_token.position, self.source)
        return Call(name, tuple(args))


def parse_expression(text: str) -> Node:
    """Parse *text* and return the expression tree; raises FormulaError."""
    lexer = Lexer(text)
    return Parser(lexer.tokenize(), lexer.source).parse()


def parse(text: str) -> EvaluableFormula:
    """
    Parse a formula into an evaluable object.

    Never raises: a malformed formula yields an ``EvaluableFormula``
    whose ``error`` attribute holds the ``FormulaError``; evaluating it
    raises that error.

    Parameters
    ----------
    text : str
        Formula in ``x1`` and ``x3``, e.g. ``"sin(x1 * pi) + x3^2"``.

    Returns
    -------
    EvaluableFormula
    """
    try:
        tree = parse_expression(text)
    except FormulaError as exc:
        return EvaluableFormula(text, None, error=exc)
    return EvaluableFormula(text, tree)
