#!/usr/bin/env python3
"""
BaseMode – abstract base class for every plot mode.

Modes are *stateless*: they receive a ``ModeContext`` (prepared
dataframe, row colours, axis bounds, options) and return a result
record of plain numpy arrays that a renderer can draw.  Carried-over
state is read from and written to the ``PlottingSession`` in the
context.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from Plot3DKit.color.colormap import ColorMap
from Plot3DKit.core.dataframe import PreparedFrame
from Plot3DKit.core.normalization import AxisBounds, Bounds
from Plot3DKit.core.options import Dimensions, PlotOptions
from Plot3DKit.core.session import PlottingSession


AXIS_LENGTHS = {'x1': 'x_len', 'x2': 'y_len', 'x3': 'z_len'}


@dataclass
class ModeContext:
    frame: PreparedFrame
    color_map: ColorMap
    bounds: AxisBounds
    options: PlotOptions
    dimensions: Dimensions
    session: PlottingSession

    def axis_positions(self, axis: str) -> np.ndarray:
        """Column values of *axis*, scaled to ``[0, axis length]`` when normalized."""
        values = self.frame.values(axis)
        if self.options.normalizes(axis):
            length = getattr(self.dimensions, AXIS_LENGTHS[axis])
            return self.bounds.get(axis).normalize(values, length)
        return values


# ----------------------------------------------------------------------
# results
# ----------------------------------------------------------------------

@dataclass
class PlotResult:
    """Fields shared by every mode's output."""
    mode: str
    bounds: AxisBounds
    titles: Tuple[str, str, str] = ("x1", "x2", "x3")
    labels: dict = field(default_factory=dict)


@dataclass
class PointsResult(PlotResult):
    """Scatter plot: one position and colour per dataframe row."""
    positions: np.ndarray = None        # (n, 3) as (x1, x2, x3)
    colors: np.ndarray = None           # (n, 3) RGB
    point_size: float = 0.04

    def __len__(self) -> int:
        return len(self.positions)


@dataclass
class LineResult(PointsResult):
    """Line plot: points plus index pairs of consecutive segments."""
    segments: np.ndarray = None         # (m, 2)


@dataclass
class BarChartResult(PlotResult):
    """Bars on the ``(x_res + 1) x (z_res + 1)`` node grid."""
    heights: np.ndarray = None          # accumulated (raw) heights
    normalized_heights: np.ndarray = None
    counts: np.ndarray = None
    colors: np.ndarray = None           # (nx, nz, 3)
    visible: np.ndarray = None          # bool mask
    x_positions: np.ndarray = None
    z_positions: np.ndarray = None
    bar_width: float = 0.0
    bar_depth: float = 0.0
    height_bounds: Optional[Bounds] = None
    threshold: float = 0.0


@dataclass
class SurfaceResult(PlotResult):
    """Dense height field on the vertex grid."""
    heights: np.ndarray = None          # (nx, nz), raw values
    normalized_heights: np.ndarray = None
    colors: np.ndarray = None           # (nx, nz, 3)
    x_positions: np.ndarray = None
    z_positions: np.ndarray = None
    height_bounds: Optional[Bounds] = None


# ----------------------------------------------------------------------
# base class
# ----------------------------------------------------------------------

class BaseMode(ABC):
    """
    Abstract base for plot modes.

    Dataframe modes implement :meth:`build` and are listed in
    ``MODE_REGISTRY``.  The formula surface is not built from a context;
    its ``build`` raises ``NotImplementedError`` and it lives in
    ``FORMULA_MODES`` instead.
    """

    name: str                           # e.g. "barchart"
    description: str = ""

    @abstractmethod
    def build(self, context: ModeContext) -> PlotResult:
        """
        Turn the prepared data into geometry data.

        Parameters
        ----------
        context : ModeContext

        Returns
        -------
        PlotResult subclass
        """
        ...

    # ------------------------------------------------------------------
    # shared helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _vertex_positions(dimensions: Dimensions) -> Tuple[np.ndarray, np.ndarray]:
        return (np.linspace(0.0, dimensions.x_len, dimensions.x_vertices),
                np.linspace(0.0, dimensions.z_len, dimensions.z_vertices))

    @staticmethod
    def _height_bounds(heights: np.ndarray) -> Bounds:
        finite = heights[np.isfinite(heights)]
        if finite.size == 0:
            return Bounds(0.0, 0.0)
        return Bounds(float(finite.min()), float(finite.max()))

    @staticmethod
    def _normalize_heights(heights: np.ndarray, bounds: Bounds,
                           context_options: PlotOptions, y_len: float) -> np.ndarray:
        if context_options.normalizes('x2'):
            return bounds.normalize(heights, y_len)
        return heights.copy()

    @staticmethod
    def _grid_index(positions: np.ndarray, length: float, res: int) -> np.ndarray:
        """Continuous grid coordinate in ``[0, res]`` of a position in ``[0, length]``."""
        return positions / length * res
