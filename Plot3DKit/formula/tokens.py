#!/usr/bin/env python3
"""Token definitions for the formula language."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class TokenType(Enum):
    NUMBER = auto()
    IDENTIFIER = auto()

    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    CARET = auto()
    BANG = auto()

    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()

    EOF = auto()


SINGLE_CHAR_TOKENS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.STAR,
    '/': TokenType.SLASH,
    '%': TokenType.PERCENT,
    '^': TokenType.CARET,
    '!': TokenType.BANG,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    ',': TokenType.COMMA,
}


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str
    position: int
    value: Optional[float] = None

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.lexeme!r}, pos={self.position})"
