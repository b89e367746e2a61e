#!/usr/bin/env python3
"""
Bar chart – bilinear splatting of points onto the node grid.

Every data point is distributed over the (up to) four grid nodes that
surround it, weighted by the complement of its fractional distance to
each node, so the weights of one point always sum to 1.  A point lying
exactly on a node contributes to that node only.  Bar heights are the
*sums* of the weighted contributions.
"""

import math
import warnings
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from Plot3DKit.color.colormap import ColorPolicy
from Plot3DKit.color.colors import heat_colors
from Plot3DKit.core.normalization import Bounds
from Plot3DKit.modes.base import BarChartResult, BaseMode, ModeContext


NODE_TOLERANCE = 1e-9


def splat_weights(x: float, z: float) -> List[Tuple[int, int, float]]:
    """
    Bilinear weights of a point at continuous grid coordinates ``(x, z)``.

    Returns
    -------
    list of (i, k, weight)
        Only non-zero weights are returned.
    """
    # snap float noise such as 6.000000000000001 onto the node
    if abs(x - round(x)) < NODE_TOLERANCE:
        x = float(round(x))
    if abs(z - round(z)) < NODE_TOLERANCE:
        z = float(round(z))
    i0 = math.floor(x)
    k0 = math.floor(z)
    fx = x - i0
    fz = z - k0
    candidates = (
        (i0, k0, (1.0 - fx) * (1.0 - fz)),
        (i0 + 1, k0, fx * (1.0 - fz)),
        (i0, k0 + 1, (1.0 - fx) * fz),
        (i0 + 1, k0 + 1, fx * fz),
    )
    return [(i, k, w) for i, k, w in candidates if w > 0]


@dataclass
class BarGrid:
    """Accumulator for bar heights, sample counts and blended colours."""
    heights: np.ndarray
    counts: np.ndarray
    weights: np.ndarray
    colors: np.ndarray

    @classmethod
    def empty(cls, nx: int, nz: int) -> 'BarGrid':
        return cls(heights=np.zeros((nx, nz)),
                   counts=np.zeros((nx, nz), dtype=int),
                   weights=np.zeros((nx, nz)),
                   colors=np.zeros((nx, nz, 3)))

    @property
    def shape(self) -> Tuple[int, int]:
        return self.heights.shape

    @property
    def defined(self) -> np.ndarray:
        return self.counts > 0

    def add(self, i: int, k: int, value: float, weight: float,
            color: Optional[Tuple[float, float, float]] = None) -> None:
        self.heights[i, k] += value * weight
        self.counts[i, k] += 1
        if color is not None:
            total = self.weights[i, k] + weight
            self.colors[i, k] = (self.colors[i, k] * self.weights[i, k]
                                 + np.asarray(color) * weight) / total
        self.weights[i, k] += weight

    def splat(self, x: float, z: float, value: float,
              color: Optional[Tuple[float, float, float]] = None) -> bool:
        """Add one point; False when it falls outside the grid."""
        nx, nz = self.shape
        contributions = splat_weights(x, z)
        if any(not (0 <= i < nx and 0 <= k < nz) for i, k, _ in contributions):
            return False
        for i, k, weight in contributions:
            self.add(i, k, value, weight, color)
        return True


class BarchartMode(BaseMode):
    name = "barchart"
    description = "Heights accumulated on the grid nodes, drawn as bars"

    def build(self, context: ModeContext) -> BarChartResult:
        dims = context.dimensions
        options = context.options
        session = context.session

        grid = session.bar_grid if options.keep_old_plot else None
        if grid is None or grid.shape != (dims.x_vertices, dims.z_vertices):
            grid = BarGrid.empty(dims.x_vertices, dims.z_vertices)

        xs = self._grid_index(context.axis_positions('x1'), dims.x_len, dims.x_res)
        zs = self._grid_index(context.axis_positions('x3'), dims.z_len, dims.z_res)
        ys = context.frame.values('x2')
        blend = context.color_map.policy in (ColorPolicy.LABELED, ColorPolicy.EXPLICIT)
        row_colors = context.color_map.as_array()

        skipped = 0
        outside = 0
        for n, (x, z, y) in enumerate(zip(xs, zs, ys)):
            if not (np.isfinite(x) and np.isfinite(z) and np.isfinite(y)):
                skipped += 1
                continue
            color = tuple(row_colors[n]) if blend else None
            if not grid.splat(float(x), float(z), float(y), color):
                outside += 1
        if skipped:
            warnings.warn(f"{skipped} row(s) with non-numeric values were skipped")
        if outside:
            warnings.warn(f"{outside} point(s) lie outside the grid and were skipped")
        session.bar_grid = grid

        defined = grid.defined
        low = min(0.0, float(grid.heights[defined].min())) if defined.any() else 0.0
        high = max(0.0, float(grid.heights[defined].max())) if defined.any() else 0.0
        height_bounds = Bounds(low, high)
        previous = session.previous_bounds('x2', options.keep_old_plot)
        if previous is not None:
            height_bounds = height_bounds.union(previous)
        context.bounds.update('x2', height_bounds)

        threshold = options.bar_size_threshold * max(abs(height_bounds.max),
                                                     abs(height_bounds.min))
        visible = defined & (np.abs(grid.heights) > threshold)
        normalized = self._normalize_heights(grid.heights, Bounds(0.0, height_bounds.span),
                                             options, dims.y_len)

        if blend:
            colors = grid.colors.copy()
        else:
            colors = heat_colors(grid.heights, height_bounds.min, height_bounds.max,
                                 options.hue_offset)
        colors[~defined] = 0.0

        x_positions, z_positions = self._vertex_positions(dims)
        padding = 1.0 - options.barchart_padding
        return BarChartResult(
            mode=self.name,
            bounds=context.bounds,
            titles=context.frame.titles,
            labels=context.color_map.label_map.to_dict(),
            heights=grid.heights.copy(),
            normalized_heights=np.where(defined, normalized, 0.0),
            counts=grid.counts.copy(),
            colors=colors,
            visible=visible,
            x_positions=x_positions,
            z_positions=z_positions,
            bar_width=padding * dims.x_len / dims.x_vertices,
            bar_depth=padding * dims.z_len / dims.z_vertices,
            height_bounds=height_bounds,
            threshold=threshold,
        )
