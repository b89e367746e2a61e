"""
Formula language – parser, evaluator and memoised recursive sessions.

>>> from Plot3DKit.formula import parse, FormulaSession
>>> formula = parse("x1^2 + sin(x3 * pi)")
>>> formula(0.5, 0.0)
0.25
"""

from Plot3DKit.formula.evaluator import EvaluableFormula
from Plot3DKit.formula.functions import CONSTANTS, FUNCTIONS, factorial, gamma, ln
from Plot3DKit.formula.parser import parse, parse_expression
from Plot3DKit.formula.session import FormulaSession

__all__ = [
    'parse', 'parse_expression',
    'EvaluableFormula', 'FormulaSession',
    'gamma', 'factorial', 'ln',
    'FUNCTIONS', 'CONSTANTS',
]
