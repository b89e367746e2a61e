#!/usr/bin/env python3
"""
Formula surface – a formula sampled on the vertex grid.

Unlike the dataframe modes this one is driven by a ``FormulaSession``
instead of a dataframe.
"""

import warnings
from typing import Tuple

import numpy as np

from Plot3DKit.color.colors import heat_colors
from Plot3DKit.core.normalization import AxisBounds, Bounds
from Plot3DKit.core.options import Dimensions, PlotOptions
from Plot3DKit.formula.session import FormulaSession
from Plot3DKit.modes.base import BaseMode, SurfaceResult


# the heat range is widened by this share of the height span on both sides
COLOR_MARGIN = 0.15


def replace_non_finite(heights: np.ndarray) -> np.ndarray:
    """Replace ``nan`` / ``inf`` by the first finite value (row-major order)."""
    heights = np.array(heights, dtype=float)
    finite = np.isfinite(heights)
    if finite.all():
        return heights
    if not finite.any():
        warnings.warn("The formula is not finite anywhere on the grid; drawing a flat surface")
        return np.zeros(heights.shape)
    heights[~finite] = heights[finite][0]
    return heights


class PolygonMode(BaseMode):
    name = "polygon"
    description = "Formula evaluated on every grid vertex"

    def build(self, context):
        """Not available: a formula surface has no dataframe, use :meth:`build_surface`."""
        raise NotImplementedError("polygon mode is built from a formula, use build_surface()")

    def build_surface(self, session: FormulaSession, options: PlotOptions,
                      titles: Tuple[str, str, str] = ("x1", "x2", "x3")) -> SurfaceResult:
        dims: Dimensions = session.dimensions
        heights = replace_non_finite(session.sample_grid())
        height_bounds = self._height_bounds(heights)

        margin = COLOR_MARGIN * height_bounds.span
        colors = heat_colors(heights, height_bounds.min - margin,
                             height_bounds.max + margin, options.hue_offset)

        x_positions, z_positions = self._vertex_positions(dims)
        bounds = AxisBounds(x1=Bounds(0.0, dims.x_len), x2=height_bounds,
                            x3=Bounds(0.0, dims.z_len))
        return SurfaceResult(
            mode=self.name,
            bounds=bounds,
            titles=titles,
            heights=heights,
            normalized_heights=self._normalize_heights(heights, height_bounds,
                                                       options, dims.y_len),
            colors=colors,
            x_positions=x_positions,
            z_positions=z_positions,
            height_bounds=height_bounds,
        )
