#!/usr/bin/env python3
"""
PlottingSession – state carried from one plot call to the next.

Only consulted when the caller opts in with ``keep_old_plot`` (or adds
single points).  ``clear()`` forgets everything.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from Plot3DKit.color.colormap import LabelMap
from Plot3DKit.core.dataframe import PreparedFrame
from Plot3DKit.core.normalization import AxisBounds, Bounds
from Plot3DKit.core.options import PlotOptions


@dataclass
class PlottingSession:
    """
    Attributes
    ----------
    bounds : AxisBounds
        Bounds of the last plot per axis.
    color_bounds : Bounds or None
        Heat-scale bounds of the colour column.
    label_map : LabelMap
        Labels seen so far; grows monotonically.
    frame : PreparedFrame or None
        The dataframe of the last plot (with added points appended).
    options : PlotOptions or None
        Options of the last plot, inherited by ``add_data_point``.
    bar_grid : Any
        Accumulator of the last bar chart.
    mode : str or None
        Mode of the last plot.
    """
    bounds: AxisBounds = field(default_factory=AxisBounds)
    color_bounds: Optional[Bounds] = None
    label_map: LabelMap = field(default_factory=LabelMap)
    frame: Optional[PreparedFrame] = None
    options: Optional[PlotOptions] = None
    bar_grid: Any = None
    mode: Optional[str] = None
    history: List[str] = field(default_factory=list)

    def clear(self) -> None:
        """Forget all carried-over state."""
        self.bounds = AxisBounds()
        self.color_bounds = None
        self.label_map = LabelMap()
        self.frame = None
        self.options = None
        self.bar_grid = None
        self.mode = None
        self.history.clear()

    def previous_bounds(self, axis: str, keep_old: bool) -> Optional[Bounds]:
        """Bounds to widen from, or None when starting fresh."""
        return self.bounds.get(axis) if keep_old else None

    def record(self, mode: str, frame: Optional[PreparedFrame],
               options: Optional[PlotOptions]) -> None:
        self.mode = mode
        self.options = options
        if frame is not None and (options is None or options.update_old_data):
            self.frame = frame
        self.history.append(mode)
