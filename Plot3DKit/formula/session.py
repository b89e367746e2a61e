#!/usr/bin/env python3
"""
Memoised evaluation of (possibly recursive) formulas.

A ``FormulaSession`` owns the memo grid and the sticky stop flag that
used to live in global state.  Create one per formula submission, or
call :meth:`FormulaSession.reset` when the formula changes.
"""

import math
import warnings
from typing import Callable, Dict, Optional, Tuple, Union

import numpy as np

from Plot3DKit.core.errors import FormulaError
from Plot3DKit.core.options import Dimensions
from Plot3DKit.formula.evaluator import EvaluableFormula


FormulaLike = Union[EvaluableFormula, Callable]


class FormulaSession:
    """
    Evaluate ``f(x1, x3)`` with a memo table and recursion cut-off.

    Parameters
    ----------
    formula : EvaluableFormula or callable
        A parsed formula, or a plain Python ``callable(x1, x3)``.
    dimensions : Dimensions, optional
        Defines the domain ``[0, x_len] x [0, z_len]`` and the memo
        granularity ``1 / x_res`` by ``1 / z_res``.
    variables : dict, optional
        Values for named variables other than ``x1`` / ``x3``.
    """

    def __init__(self, formula: FormulaLike, dimensions: Optional[Dimensions] = None,
                 variables: Optional[Dict[str, float]] = None):
        self.formula = formula
        self.dimensions = dimensions or Dimensions()
        self.variables = dict(variables or {})
        shape = (math.floor(self.dimensions.x_res * self.dimensions.x_len) + 1,
                 math.floor(self.dimensions.z_res * self.dimensions.z_len) + 1)
        self._values = np.zeros(shape)
        self._computed = np.zeros(shape, dtype=bool)
        self.stop_recursion = False
        self.failure: Optional[BaseException] = None
        self._depth = 0
        self._warned = False

    @property
    def memo_shape(self) -> Tuple[int, int]:
        return self._values.shape

    def reset(self) -> None:
        """Forget all memoised values and clear the stop flag."""
        self._values.fill(0.0)
        self._computed.fill(False)
        self.stop_recursion = False
        self.failure = None
        self._warned = False

    def is_computed(self, x1: float, x3: float) -> bool:
        index = self._index(x1, x3)
        return index is not None and bool(self._computed[index])

    def _index(self, x1: float, x3: float) -> Optional[Tuple[int, int]]:
        dims = self.dimensions
        if not (0 <= x1 <= dims.x_len and 0 <= x3 <= dims.z_len):
            return None
        # small tolerance so that e.g. 0.35 * 20 lands in cell 7
        i = min(math.floor(x1 * dims.x_res + 1e-9), self._values.shape[0] - 1)
        k = min(math.floor(x3 * dims.z_res + 1e-9), self._values.shape[1] - 1)
        return i, k

    @property
    def _caught_errors(self):
        # parsed formulas only fail through recursion or deferred parse errors;
        # a Python callable may raise anything
        if isinstance(self.formula, EvaluableFormula):
            return (RecursionError, FormulaError)
        return Exception

    def _call_formula(self, x1: float, x3: float) -> float:
        if isinstance(self.formula, EvaluableFormula):
            return self.formula(x1, x3, recurse=self.evaluate,
                                variables=self.variables)
        return self.formula(x1, x3)

    def evaluate(self, x1: float, x3: float) -> float:
        """
        Value of the formula at ``(x1, x3)``.

        Points outside the domain evaluate to 0.  The first failure
        (runaway recursion, invalid formula, or any exception raised by a
        Python callable) stops recursion for the rest of the session;
        unresolved points then evaluate to 0.
        """
        index = self._index(x1, x3)
        if index is None:
            return 0.0
        if self._computed[index]:
            return float(self._values[index])

        value = 0.0
        if not self.stop_recursion:
            self._depth += 1
            try:
                value = float(self._call_formula(x1, x3))
            except self._caught_errors as exc:
                self.stop_recursion = True
                self.failure = exc
                value = 0.0
            finally:
                self._depth -= 1

        self._values[index] = value
        self._computed[index] = True
        if self._depth == 0 and self.failure is not None and not self._warned:
            self._warned = True
            warnings.warn(f"Stopped evaluating formula {self._label()}: "
                          f"{type(self.failure).__name__}: {self.failure}. "
                          f"Remaining points evaluate to 0.")
        return value

    def _label(self) -> str:
        if isinstance(self.formula, EvaluableFormula):
            return repr(self.formula.text)
        return getattr(self.formula, '__name__', repr(self.formula))

    # ------------------------------------------------------------------
    # grid sampling
    # ------------------------------------------------------------------

    def vertex_coordinates(self) -> Tuple[np.ndarray, np.ndarray]:
        """x1 and x3 coordinates of the ``(x_res + 1) x (z_res + 1)`` vertices."""
        dims = self.dimensions
        xs = np.linspace(0.0, dims.x_len, dims.x_vertices)
        zs = np.linspace(0.0, dims.z_len, dims.z_vertices)
        return xs, zs

    def sample_grid(self) -> np.ndarray:
        """
        Evaluate the formula on every grid vertex.

        Returns
        -------
        heights : ndarray, shape (x_res + 1, z_res + 1)
            Indexed ``[x_index, z_index]``.
        """
        xs, zs = self.vertex_coordinates()
        formula = self.formula
        if (isinstance(formula, EvaluableFormula) and formula.is_valid
                and not formula.is_recursive):
            grid_x, grid_z = np.meshgrid(xs, zs, indexing='ij')
            try:
                values = formula(grid_x, grid_z, variables=self.variables)
            except FormulaError as exc:
                self.stop_recursion = True
                self.failure = exc
                warnings.warn(f"Stopped evaluating formula {self._label()}: {exc}")
                return np.zeros(grid_x.shape)
            return np.broadcast_to(np.asarray(values, dtype=float), grid_x.shape).copy()

        heights = np.empty((len(xs), len(zs)))
        for i, x1 in enumerate(xs):
            for k, x3 in enumerate(zs):
                heights[i, k] = self.evaluate(float(x1), float(x3))
        return heights

    def sample_rows(self):
        """
        Sample the formula into dataframe rows ``[x1, y, x3]``.

        Uses the points ``(x / x_res, z / z_res)`` for ``x < x_res`` and
        ``z < z_res``, i.e. one row per grid cell.
        """
        dims = self.dimensions
        rows = []
        for x in range(dims.x_res):
            for z in range(dims.z_res):
                x1 = x / dims.x_res
                x3 = z / dims.z_res
                rows.append([x1, self.evaluate(x1, x3), x3])
        return rows
