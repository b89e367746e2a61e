"""
Core building blocks: configuration, errors, normalization and dataframe
preparation.  ``PlottingSession`` lives in ``Plot3DKit.core.session``.
"""

from Plot3DKit.core.errors import (ColorClassificationError, FormulaError,
                                   NormalizationError, Plot3DKitError)
from Plot3DKit.core.options import Dimensions, PlotOptions, MODES
from Plot3DKit.core.normalization import AxisBounds, Bounds, get_min_max
from Plot3DKit.core.dataframe import PreparedFrame, prepare_frame, rows_from_arrays

__all__ = [
    'Plot3DKitError', 'FormulaError', 'NormalizationError', 'ColorClassificationError',
    'Dimensions', 'PlotOptions', 'MODES',
    'Bounds', 'AxisBounds', 'get_min_max',
    'PreparedFrame', 'prepare_frame', 'rows_from_arrays',
]
