#!/usr/bin/env python3
"""
Interpolated surface – sparse samples filled into a dense height grid.

Steps
-----
1. Binning: every sample is assigned to the vertex its truncated grid
   coordinate points at; several samples in one vertex are averaged.
2. Row pass (along x1, for every x3): runs of empty vertices between two
   known values, or between a known value and the grid edge, are filled.
   Short runs are interpolated linearly.  Runs longer than
   ``gap_threshold * x_res`` sag toward the *floor*, the smallest known
   height, so large empty areas do not appear as flat plateaus.  A grid
   edge counts as a bound at floor height.
3. Column pass (along x3, for every x1): remaining runs filled with plain
   linear interpolation.

With at least one valid sample no vertex is left undefined.
"""

import math
import warnings
from typing import Optional, Tuple

import numpy as np

from Plot3DKit.color.colors import heat_colors
from Plot3DKit.modes.base import BaseMode, ModeContext, SurfaceResult


def bin_samples(xs: np.ndarray, zs: np.ndarray, values: np.ndarray,
                shape: Tuple[int, int]) -> np.ndarray:
    """
    Average samples per vertex.

    Parameters
    ----------
    xs, zs : ndarray
        Continuous grid coordinates in ``[0, nx - 1]`` / ``[0, nz - 1]``.
    values : ndarray
        Heights; non-finite samples are ignored.
    shape : (nx, nz)

    Returns
    -------
    ndarray
        Mean height per vertex, ``nan`` where no sample landed.
    """
    sums = np.zeros(shape)
    counts = np.zeros(shape, dtype=int)
    valid = np.isfinite(xs) & np.isfinite(zs) & np.isfinite(values)
    # truncation with a tolerance for float noise just below a node
    i = np.floor(xs[valid] + 1e-9).astype(int)
    k = np.floor(zs[valid] + 1e-9).astype(int)
    inside = (i >= 0) & (i < shape[0]) & (k >= 0) & (k < shape[1])
    np.add.at(sums, (i[inside], k[inside]), values[valid][inside])
    np.add.at(counts, (i[inside], k[inside]), 1)
    with np.errstate(invalid="ignore"):
        return np.where(counts > 0, sums / np.maximum(counts, 1), np.nan)


def fill_gaps_1d(line: np.ndarray, floor: float,
                 long_gap: Optional[int] = None) -> np.ndarray:
    """
    Fill the ``nan`` runs of a 1D array.

    Parameters
    ----------
    line : ndarray
    floor : float
        Bound used beyond either edge, and the level long gaps decay to.
    long_gap : int, optional
        Runs longer than this decay toward *floor*; None means always linear.

    Returns
    -------
    ndarray
        A filled copy; an all-``nan`` line is returned unchanged.
    """
    line = np.array(line, dtype=float)
    missing = np.isnan(line)
    if missing.all() or not missing.any():
        return line

    n = len(line)
    start = 0
    while start < n:
        if not missing[start]:
            start += 1
            continue
        end = start
        while end < n and missing[end]:
            end += 1
        left = line[start - 1] if start > 0 else floor
        right = line[end] if end < n else floor
        length = end - start
        for j in range(length):
            t = (j + 1) / (length + 1)
            value = left + (right - left) * t
            if long_gap is not None and length > long_gap:
                distance = min(j + 1, length - j)
                value = floor + (value - floor) * math.exp(-(distance - 1) / long_gap)
            line[start + j] = value
        start = end
    return line


def fill_surface(grid: np.ndarray, floor: float, long_gap: Optional[int]) -> np.ndarray:
    """Row pass with decay (along axis 0), then linear column pass (axis 1)."""
    filled = np.array(grid, dtype=float)
    for k in range(filled.shape[1]):
        filled[:, k] = fill_gaps_1d(filled[:, k], floor, long_gap)
    for i in range(filled.shape[0]):
        filled[i, :] = fill_gaps_1d(filled[i, :], floor, None)
    return filled


def long_gap_cells(gap_threshold: float, res: int) -> int:
    """Gap length, in cells, above which a run counts as long."""
    return max(2, int(round(gap_threshold * res)))


class InterpolatedSurfaceMode(BaseMode):
    name = "interpolatedpolygon"
    description = "Samples binned on the grid, gaps interpolated"

    def build(self, context: ModeContext) -> SurfaceResult:
        dims = context.dimensions
        options = context.options
        xs = self._grid_index(context.axis_positions('x1'), dims.x_len, dims.x_res)
        zs = self._grid_index(context.axis_positions('x3'), dims.z_len, dims.z_res)
        values = context.frame.values('x2')

        binned = bin_samples(xs, zs, values, (dims.x_vertices, dims.z_vertices))
        if np.isnan(binned).all():
            warnings.warn("No valid samples inside the grid; drawing a flat surface")
            heights = np.zeros(binned.shape)
        else:
            floor = float(np.nanmin(binned))
            heights = fill_surface(binned, floor,
                                   long_gap_cells(options.gap_threshold, dims.x_res))

        return self._surface(context, heights)

    def _surface(self, context: ModeContext, heights: np.ndarray) -> SurfaceResult:
        dims = context.dimensions
        options = context.options
        height_bounds = self._height_bounds(heights)
        # scale against the data's x2 bounds so surfaces and points line up
        scale = context.bounds.get('x2') or height_bounds
        x_positions, z_positions = self._vertex_positions(dims)
        return SurfaceResult(
            mode=self.name,
            bounds=context.bounds,
            titles=context.frame.titles,
            labels=context.color_map.label_map.to_dict(),
            heights=heights,
            normalized_heights=self._normalize_heights(heights, scale,
                                                       options, dims.y_len),
            colors=heat_colors(heights, scale.min, scale.max, options.hue_offset),
            x_positions=x_positions,
            z_positions=z_positions,
            height_bounds=height_bounds,
        )
