#!/usr/bin/env python3
"""
Expression tree for parsed formulas.

Nodes are immutable dataclasses.  ``Recurse`` is the self-reference
``f(a, b)``; postfix factorial is represented as
``Call("factorial", [operand])``.
"""

from dataclasses import dataclass
from typing import Tuple


class Node:
    """Base class for expression nodes."""

    def accept(self, visitor):
        method = getattr(visitor, f"visit_{type(self).__name__}")
        return method(self)


@dataclass(frozen=True)
class Number(Node):
    value: float


@dataclass(frozen=True)
class Variable(Node):
    name: str


@dataclass(frozen=True)
class BinaryOp(Node):
    op: str
    left: Node
    right: Node


@dataclass(frozen=True)
class UnaryOp(Node):
    op: str
    operand: Node


@dataclass(frozen=True)
class Call(Node):
    name: str
    args: Tuple[Node, ...]


@dataclass(frozen=True)
class Recurse(Node):
    x1: Node
    x3: Node


def walk(node: Node):
    """Yield *node* and all of its descendants, depth first."""
    yield node
    if isinstance(node, BinaryOp):
        yield from walk(node.left)
        yield from walk(node.right)
    elif isinstance(node, UnaryOp):
        yield from walk(node.operand)
    elif isinstance(node, Call):
        for arg in node.args:
            yield from walk(arg)
    elif isinstance(node, Recurse):
        yield from walk(node.x1)
        yield from walk(node.x3)
