#!/usr/bin/env python3
"""
Self-organising map smoothing.

The grid vertices form a 2D map whose only weight is the height.  For
every epoch ``t`` each data point is presented once, in random order:
its best matching vertex (nearest in the x1/x3 plane) is found and all
vertices within the neighbourhood radius are pulled toward the point's
height with

    rate(t)      = 4 / (t + 4)
    radius(t)    = som_radius * 4 / (t + 4)
    influence(d) = max(0, 1 - d / radius(t))

The result is a smooth surface through noisy data; it is a heuristic,
not an exact fit.
"""

import warnings
from typing import Dict, Optional

import numpy as np
from scipy.spatial import cKDTree

from Plot3DKit.modes.base import ModeContext, SurfaceResult
from Plot3DKit.modes.interpolated import InterpolatedSurfaceMode


def learning_rate(epoch: int) -> float:
    return 4.0 / (epoch + 4.0)


def som_heights(points: np.ndarray, values: np.ndarray, x_positions: np.ndarray,
                z_positions: np.ndarray, epochs: int = 80, radius: float = 0.5,
                seed: Optional[int] = None) -> np.ndarray:
    """
    Relax vertex heights toward the data.

    Parameters
    ----------
    points : ndarray, shape (n, 2)
        (x1, x3) positions of the samples, in plot coordinates.
    values : ndarray, shape (n,)
        Sample heights.
    x_positions, z_positions : ndarray
        Vertex coordinates along x1 and x3.
    epochs : int
        Number of passes over the data.
    radius : float
        Initial neighbourhood radius, in plot units.
    seed : int, optional
        Seed for the presentation order.

    Returns
    -------
    ndarray, shape (len(x_positions), len(z_positions))
    """
    grid_x, grid_z = np.meshgrid(x_positions, z_positions, indexing='ij')
    nodes = np.column_stack([grid_x.ravel(), grid_z.ravel()])
    weights = np.full(len(nodes), float(np.mean(values)))

    tree = cKDTree(nodes)
    _, best_matching = tree.query(points)
    distances: Dict[int, np.ndarray] = {}

    rng = np.random.default_rng(seed)
    for epoch in range(epochs):
        rate = learning_rate(epoch)
        reach = radius * rate
        for n in rng.permutation(len(values)):
            bmu = int(best_matching[n])
            if bmu not in distances:
                distances[bmu] = np.linalg.norm(nodes - nodes[bmu], axis=1)
            influence = np.clip(1.0 - distances[bmu] / reach, 0.0, None)
            weights += rate * influence * (values[n] - weights)
    return weights.reshape(grid_x.shape)


class SelfOrganizingMapMode(InterpolatedSurfaceMode):
    name = "selforganizingmap"
    description = "Surface relaxed toward the data by a self-organising map"

    def build(self, context: ModeContext) -> SurfaceResult:
        dims = context.dimensions
        options = context.options
        x1 = context.axis_positions('x1')
        x3 = context.axis_positions('x3')
        values = context.frame.values('x2')
        valid = np.isfinite(x1) & np.isfinite(x3) & np.isfinite(values)

        x_positions, z_positions = self._vertex_positions(dims)
        if not valid.any():
            warnings.warn("No valid samples to train the map on; drawing a flat surface")
            heights = np.zeros((len(x_positions), len(z_positions)))
        else:
            heights = som_heights(np.column_stack([x1[valid], x3[valid]]), values[valid],
                                  x_positions, z_positions, epochs=options.som_epochs,
                                  radius=options.som_radius, seed=options.seed)
        return self._surface(context, heights)
