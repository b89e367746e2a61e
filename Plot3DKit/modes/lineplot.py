#!/usr/bin/env python3
"""Line plot – the rows connected in dataframe order."""

import numpy as np

from Plot3DKit.modes.base import LineResult, ModeContext
from Plot3DKit.modes.scatterplot import ScatterplotMode


class LineplotMode(ScatterplotMode):
    name = "lineplot"
    description = "Consecutive rows joined by line segments"

    def build(self, context: ModeContext) -> LineResult:
        positions = self._positions(context)
        valid = np.isfinite(positions).all(axis=1)
        # a segment needs both of its end points
        starts = np.arange(len(positions) - 1)
        keep = valid[:-1] & valid[1:] if len(positions) > 1 else np.zeros(0, dtype=bool)
        segments = np.column_stack([starts[keep], starts[keep] + 1]).astype(int)
        return LineResult(
            mode=self.name,
            bounds=context.bounds,
            titles=context.frame.titles,
            labels=context.color_map.label_map.to_dict(),
            positions=positions,
            colors=context.color_map.as_array(),
            point_size=context.options.data_point_size,
            segments=segments.reshape(-1, 2),
        )
