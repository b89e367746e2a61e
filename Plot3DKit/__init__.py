#!/usr/bin/env python3
"""
Plot3DKit: data-to-geometry pipeline for 3D plots.

Turns formulas and tabular data into renderer-ready geometry data:
normalized point clouds, bar grids and dense height fields, each with
per-point or per-vertex colours.  Rendering itself is left to any 3D
backend (matplotlib, three.js, VTK, ...).

Main Components
---------------
Plot : Entry point
    plot_formula, plot_function, plot_dataframe, plot_arrays, add_data_point
PlotOptions : Per-call options
    mode, colour column, normalization, keep-old-plot, ...
Dimensions : Plot volume
    Grid resolution and axis lengths

Building Blocks
---------------
parse, FormulaSession : Formula language with memoised recursion
get_color_map, LabelMap : Colour/label mapper
get_min_max, Bounds : Normalization engine
MODE_REGISTRY, FORMULA_MODES : Scatter, line, bar chart, interpolated surface, SOM; formula surface

Basic Usage
-----------
>>> from Plot3DKit import Plot, PlotOptions
>>>
>>> plot = Plot()
>>>
>>> # Formula surface
>>> surface = plot.plot_formula("sin(x1 * 2 * pi) * x3")
>>> surface.normalized_heights.shape
(21, 21)
>>>
>>> # Bar chart from rows, coloured by label
>>> rows = [[0.1, 2, 0.4, "a"], [0.5, 1, 0.9, "b"], [0.8, 3, 0.1, "a"]]
>>> bars = plot.plot_dataframe(rows, options=PlotOptions(
...     mode="barchart", color_column=3, labeled=True))
>>> bars.heights.shape
(21, 21)
"""

from Plot3DKit.version import __version__

__author__ = "Plot3DKit Team"

from Plot3DKit.core.errors import (ColorClassificationError, FormulaError,
                                   NormalizationError, Plot3DKitError)
from Plot3DKit.core.options import Dimensions, PlotOptions
from Plot3DKit.core.normalization import AxisBounds, Bounds, get_min_max
from Plot3DKit.core.session import PlottingSession
from Plot3DKit.color import Color, LabelMap, convert_to_heat, get_color_map, parse_color
from Plot3DKit.formula import EvaluableFormula, FormulaSession, factorial, gamma, parse
from Plot3DKit.modes import (FORMULA_MODES, MODE_REGISTRY, BarChartResult, LineResult,
                             PointsResult, SurfaceResult)
from Plot3DKit.plot import Plot


# Define public API
__all__ = [
    # Main classes
    'Plot',
    'PlotOptions',
    'Dimensions',
    'PlottingSession',

    # Formulas
    'parse',
    'EvaluableFormula',
    'FormulaSession',
    'gamma',
    'factorial',

    # Colours
    'Color',
    'LabelMap',
    'parse_color',
    'convert_to_heat',
    'get_color_map',

    # Normalization
    'Bounds',
    'AxisBounds',
    'get_min_max',

    # Results
    'PointsResult',
    'LineResult',
    'BarChartResult',
    'SurfaceResult',
    'MODE_REGISTRY',
    'FORMULA_MODES',

    # Errors
    'Plot3DKitError',
    'FormulaError',
    'NormalizationError',
    'ColorClassificationError',
]


# Package information
def get_version():
    """Get package version."""
    return __version__


def get_info():
    """Get package information."""
    return {
        'name': 'Plot3DKit',
        'version': __version__,
        'description': 'Data-to-geometry pipeline for 3D formula and dataframe plots',
        'author': __author__,
        'modes': list(MODE_REGISTRY) + list(FORMULA_MODES),
    }
