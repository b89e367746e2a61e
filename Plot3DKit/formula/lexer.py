#!/usr/bin/env python3
"""
Tokenizer for formula strings.

The input is case-folded before scanning, so ``SIN(X1)`` and
``sin(x1)`` produce the same tokens.  ``**`` is accepted as an alias
for ``^`` and the ``π`` character as an alias for ``pi``.
"""

from typing import List

from Plot3DKit.core.errors import FormulaError
from Plot3DKit.formula.tokens import SINGLE_CHAR_TOKENS, Token, TokenType


class Lexer:
    """Turn a formula string into a list of tokens."""

    def __init__(self, source: str):
        self.source = source.casefold()
        self.pos = 0
        self.tokens: List[Token] = []

    def tokenize(self) -> List[Token]:
        while not self._at_end():
            char = self._peek()
            if char.isspace():
                self._advance()
            elif char.isdigit() or (char == '.' and self._peek(1).isdigit()):
                self._number()
            elif char.isalpha() or char == '_':
                self._identifier()
            elif char == '*' and self._peek(1) == '*':
                self.tokens.append(Token(TokenType.CARET, '**', self.pos))
                self.pos += 2
            elif char in SINGLE_CHAR_TOKENS:
                self.tokens.append(Token(SINGLE_CHAR_TOKENS[char], char, self.pos))
                self._advance()
            else:
                raise FormulaError(f"Unexpected character {char!r}",
                                   self.pos, self.source)
        self.tokens.append(Token(TokenType.EOF, '', self.pos))
        return self.tokens

    # ------------------------------------------------------------------
    # scanning helpers
    # ------------------------------------------------------------------

    def _at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        if index >= len(self.source):
            return ''
        return self.source[index]

    def _advance(self) -> str:
        char = self.source[self.pos]
        self.pos += 1
        return char

    def _digits(self) -> None:
        while self._peek().isdigit():
            self._advance()

    def _number(self) -> None:
        start = self.pos
        self._digits()
        if self._peek() == '.':
            self._advance()
            self._digits()
        # exponent only when digits follow, otherwise "2e" is 2 followed by e
        if self._peek() == 'e':
            offset = 1
            if self._peek(1) and self._peek(1) in '+-':
                offset = 2
            if self._peek(offset).isdigit():
                self.pos += offset
                self._digits()
        lexeme = self.source[start:self.pos]
        try:
            value = float(lexeme)
        except ValueError:
            raise FormulaError(f"Malformed number {lexeme!r}", start, self.source)
        self.tokens.append(Token(TokenType.NUMBER, lexeme, start, value))

    def _identifier(self) -> None:
        start = self.pos
        while self._peek().isalnum() or self._peek() == '_':
            self._advance()
        lexeme = self.source[start:self.pos]
        if lexeme == 'π':
            lexeme = 'pi'
        self.tokens.append(Token(TokenType.IDENTIFIER, lexeme, start))


def tokenize(source: str) -> List[Token]:
    """Convenience wrapper around :class:`Lexer`."""
    return Lexer(source).tokenize()
