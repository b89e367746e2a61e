#!/usr/bin/env python3
"""
Normalization engine – per-axis value bounds.

``get_min_max`` scans one dataframe column.  With keep-old-plot the
scan starts from the bounds of the earlier plot, so bounds only ever
widen while plots are stacked.
"""

import math
import numbers
from dataclasses import asdict, dataclass
from typing import Any, Optional, Sequence

from Plot3DKit.core.errors import NormalizationError


def as_number(value: Any) -> Optional[float]:
    """Return *value* as a float, or None for non-numeric and NaN cells."""
    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number):
        return None
    return number


@dataclass
class Bounds:
    """Closed value range ``[min, max]`` of one axis."""
    min: float
    max: float

    @property
    def span(self) -> float:
        return abs(self.max - self.min)

    @property
    def frac(self) -> float:
        """Span used as divisor when normalizing; 1 for a degenerate range."""
        span = self.span
        if span == 0 or not math.isfinite(span):
            return 1.0
        return span

    def union(self, other: Optional['Bounds']) -> 'Bounds':
        if other is None:
            return Bounds(self.min, self.max)
        return Bounds(min(self.min, other.min), max(self.max, other.max))

    def include(self, value: float) -> 'Bounds':
        return Bounds(min(self.min, value), max(self.max, value))

    def normalize(self, value, length: float = 1.0):
        """Map ``[min, max]`` onto ``[0, length]``; works on arrays too."""
        return (value - self.min) / self.frac * length

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class AxisBounds:
    """Bounds of the three plot axes; None until the axis has been seen."""
    x1: Optional[Bounds] = None
    x2: Optional[Bounds] = None
    x3: Optional[Bounds] = None

    def get(self, axis: str) -> Optional[Bounds]:
        return getattr(self, axis)

    def update(self, axis: str, bounds: Bounds) -> None:
        setattr(self, axis, bounds)

    def to_dict(self) -> dict:
        return {axis: (b.to_dict() if b else None)
                for axis, b in (('x1', self.x1), ('x2', self.x2), ('x3', self.x3))}


def get_min_max(rows: Sequence[Sequence[Any]], column: int,
                previous: Optional[Bounds] = None,
                keep_old: bool = False) -> Bounds:
    """
    Minimum and maximum of a column.

    Parameters
    ----------
    rows : sequence of rows
        Data rows, header removed.
    column : int
        Column index.
    previous : Bounds, optional
        Bounds of the previous plot.
    keep_old : bool
        Start from *previous* instead of the first row, so the result
        contains both the old and the new data.

    Returns
    -------
    Bounds

    Raises
    ------
    NormalizationError
        If the first value of the column is not a number (and there are
        no previous bounds to start from).
    """
    if keep_old and previous is not None:
        low, high = previous.min, previous.max
    else:
        if not rows:
            raise NormalizationError(column, None)
        seed = as_number(rows[0][column])
        if seed is None:
            raise NormalizationError(column, rows[0][column])
        low = high = seed

    for row in rows:
        value = as_number(row[column])
        if value is None:
            continue
        if value > high:
            high = value
        if value < low:
            low = value
    return Bounds(low, high)
