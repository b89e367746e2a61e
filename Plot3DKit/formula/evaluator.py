#!/usr/bin/env python3
"""
Evaluation of parsed formulas.

``EvaluableFormula`` wraps an expression tree and evaluates it for
scalar or numpy-array inputs.  Arithmetic follows IEEE semantics
(``nan`` / ``inf``) instead of raising, so a formula such
as ``sqrt(x1 - 0.5)`` simply produces ``nan`` for part of the grid.
"""

from typing import Callable, Dict, Mapping, Optional, Set

import numpy as np

from Plot3DKit.core.errors import FormulaError
from Plot3DKit.formula import ast
from Plot3DKit.formula.functions import FUNCTIONS


INDEPENDENT_VARIABLES = ('x1', 'x3')

_BINARY_UFUNCS = {
    '+': np.add,
    '-': np.subtract,
    '*': np.multiply,
    '/': np.true_divide,
    '%': np.fmod,
    '^': np.power,
}


def _as_float(value):
    array = np.asarray(value, dtype=float)
    if array.ndim == 0:
        return np.float64(array)
    return array


class _TreeEvaluator:
    """Visitor that walks an expression tree for one (x1, x3) input."""

    def __init__(self, x1, x3, recurse: Optional[Callable],
                 variables: Mapping[str, float]):
        self.x1 = x1
        self.x3 = x3
        self.recurse = recurse
        self.variables = variables

    def visit_Number(self, node: ast.Number):
        return np.float64(node.value)

    def visit_Variable(self, node: ast.Variable):
        if node.name == 'x1':
            return self.x1
        if node.name == 'x3':
            return self.x3
        if node.name in self.variables:
            return _as_float(self.variables[node.name])
        raise FormulaError(f"Unknown variable {node.name!r}")

    def visit_BinaryOp(self, node: ast.BinaryOp):
        left = node.left.accept(self)
        right = node.right.accept(self)
        return _BINARY_UFUNCS[node.op](left, right)

    def visit_UnaryOp(self, node: ast.UnaryOp):
        operand = node.operand.accept(self)
        if node.op == '-':
            return np.negative(operand)
        return operand

    def visit_Call(self, node: ast.Call):
        func, _ = FUNCTIONS[node.name]
        return func(*[arg.accept(self) for arg in node.args])

    def visit_Recurse(self, node: ast.Recurse):
        if self.recurse is None:
            raise FormulaError("f(x1, x3) needs a formula session to recurse into")
        a = node.x1.accept(self)
        b = node.x3.accept(self)
        if np.ndim(a) or np.ndim(b):
            return np.vectorize(self.recurse, otypes=[float])(a, b)
        return np.float64(self.recurse(float(a), float(b)))


class EvaluableFormula:
    """
    A parsed formula, ready to be evaluated.

    Parameters
    ----------
    text : str
        The formula as typed by the user.
    tree : ast.Node or None
        Expression tree; None when parsing failed.
    error : FormulaError, optional
        The parse error, re-raised on every evaluation.
    """

    def __init__(self, text: str, tree: Optional[ast.Node],
                 error: Optional[FormulaError] = None):
        self.text = text
        self.tree = tree
        self.error = error

    def __repr__(self) -> str:
        state = "invalid" if self.error else "ok"
        return f"EvaluableFormula({self.text!r}, {state})"

    @property
    def is_valid(self) -> bool:
        return self.error is None

    @property
    def is_recursive(self) -> bool:
        """True when the formula references itself via ``f(...)``."""
        if self.tree is None:
            return False
        return any(isinstance(node, ast.Recurse) for node in ast.walk(self.tree))

    @property
    def free_variables(self) -> Set[str]:
        """Names other than ``x1`` / ``x3`` that must be supplied."""
        if self.tree is None:
            return set()
        return {node.name for node in ast.walk(self.tree)
                if isinstance(node, ast.Variable)
                and node.name not in INDEPENDENT_VARIABLES}

    def __call__(self, x1, x3, recurse: Optional[Callable] = None,
                 variables: Optional[Dict[str, float]] = None):
        """
        Evaluate the formula.

        Parameters
        ----------
        x1, x3 : float or array_like
            Independent variables; arrays broadcast against each other.
        recurse : callable, optional
            ``recurse(x1, x3)`` used for ``f(...)`` self-references.
        variables : dict, optional
            Values for additional named variables.

        Returns
        -------
        float or ndarray
        """
        if self.error is not None:
            raise self.error
        evaluator = _TreeEvaluator(_as_float(x1), _as_float(x3),
                                   recurse, variables or {})
        with np.errstate(all="ignore"):
            result = _as_float(self.tree.accept(evaluator))
        if np.ndim(result) == 0:
            return float(result)
        return result
