"""
Plot modes – turn prepared data into geometry data.

MODE_REGISTRY maps the name of every dataframe mode to its class.
FORMULA_MODES holds ``"polygon"``, the formula surface, which is built
from a FormulaSession instead of a dataframe.
"""

from Plot3DKit.modes.base import (BaseMode, BarChartResult, LineResult, ModeContext,
                                  PlotResult, PointsResult, SurfaceResult)
from Plot3DKit.modes.scatterplot import ScatterplotMode
from Plot3DKit.modes.lineplot import LineplotMode
from Plot3DKit.modes.barchart import BarchartMode, BarGrid, splat_weights
from Plot3DKit.modes.interpolated import (InterpolatedSurfaceMode, bin_samples,
                                          fill_gaps_1d, fill_surface)
from Plot3DKit.modes.som import SelfOrganizingMapMode, som_heights
from Plot3DKit.modes.polygon import PolygonMode

MODE_REGISTRY = {
    'scatterplot':         ScatterplotMode,
    'lineplot':            LineplotMode,
    'barchart':            BarchartMode,
    'interpolatedpolygon': InterpolatedSurfaceMode,
    'selforganizingmap':   SelfOrganizingMapMode,
}

FORMULA_MODES = {
    'polygon': PolygonMode,
}

DATAFRAME_MODES = tuple(MODE_REGISTRY)

__all__ = [
    'BaseMode', 'ModeContext',
    'PlotResult', 'PointsResult', 'LineResult', 'BarChartResult', 'SurfaceResult',
    'ScatterplotMode', 'LineplotMode', 'BarchartMode',
    'InterpolatedSurfaceMode', 'SelfOrganizingMapMode', 'PolygonMode',
    'BarGrid', 'splat_weights', 'bin_samples', 'fill_gaps_1d', 'fill_surface',
    'som_heights',
    'MODE_REGISTRY', 'FORMULA_MODES', 'DATAFRAME_MODES',
]
