#!/usr/bin/env python3
"""Scatter plot – one point per dataframe row."""

import warnings

import numpy as np

from Plot3DKit.modes.base import BaseMode, ModeContext, PointsResult


class ScatterplotMode(BaseMode):
    name = "scatterplot"
    description = "One point per row at (x1, x2, x3)"

    def build(self, context: ModeContext) -> PointsResult:
        positions = self._positions(context)
        return PointsResult(
            mode=self.name,
            bounds=context.bounds,
            titles=context.frame.titles,
            labels=context.color_map.label_map.to_dict(),
            positions=positions,
            colors=context.color_map.as_array(),
            point_size=context.options.data_point_size,
        )

    @staticmethod
    def _positions(context: ModeContext) -> np.ndarray:
        positions = np.column_stack([context.axis_positions(axis)
                                     for axis in ('x1', 'x2', 'x3')])
        invalid = int((~np.isfinite(positions).all(axis=1)).sum())
        if invalid:
            warnings.warn(f"{invalid} row(s) have non-numeric coordinates "
                          f"and will not be drawn")
        return positions
