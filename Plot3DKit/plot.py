#!/usr/bin/env python3
"""
Plot – entry point of the data-to-geometry pipeline.

A ``Plot`` owns the plot volume (``Dimensions``), a ``PlottingSession``
that carries bounds, labels and bar accumulators between calls, and the
``FormulaSession`` of the last formula.
"""

import warnings
from typing import Any, Callable, Dict, Optional, Sequence, Union

from Plot3DKit.color.colormap import LabelMap, get_color_map
from Plot3DKit.color.colors import looks_like_color
from Plot3DKit.core.dataframe import (PreparedFrame, clean_rows, prepare_frame,
                                      rows_from_arrays)
from Plot3DKit.core.errors import Plot3DKitError
from Plot3DKit.core.normalization import AxisBounds, as_number, get_min_max
from Plot3DKit.core.options import Dimensions, PlotOptions, quiet_from_env
from Plot3DKit.core.session import PlottingSession
from Plot3DKit.formula.evaluator import EvaluableFormula
from Plot3DKit.formula.parser import parse
from Plot3DKit.formula.session import FormulaSession
from Plot3DKit.modes import FORMULA_MODES, MODE_REGISTRY, ModeContext, PlotResult


OptionsLike = Union[PlotOptions, Dict[str, Any], None]


def resolve_options(options: OptionsLike = None, **overrides) -> PlotOptions:
    """
    Build ``PlotOptions`` from an instance, or from a dict (camelCase
    allowed) on top of the ``PLOT3DKIT_*`` defaults, plus keyword overrides.
    """
    if isinstance(options, PlotOptions):
        values = options.to_dict()
    else:
        values = PlotOptions.from_env().to_dict()
        values.update(options or {})
    values.update(overrides)
    return PlotOptions.from_dict(values)


class Plot:
    """
    Turn formulas and dataframes into renderer-ready geometry data.

    Parameters
    ----------
    dimensions : Dimensions, optional
        Plot volume; defaults to ``Dimensions.from_env()``.
    verbose : bool, optional
        Print a progress line per plot.  Defaults to True unless the
        ``PLOT3DKIT_QUIET`` environment flag is set.

    Examples
    --------
    >>> plot = Plot(verbose=False)
    >>> surface = plot.plot_formula("sin(x1 * pi) * x3")
    >>> surface.heights.shape
    (21, 21)
    >>> points = plot.plot_dataframe([[0, 0, 0], [1, 1, 1], [2, 0, 2]])
    >>> points.positions[:, 0]
    array([0. , 0.5, 1. ])
    """

    def __init__(self, dimensions: Optional[Dimensions] = None,
                 verbose: Optional[bool] = None):
        self.dimensions = dimensions or Dimensions.from_env()
        self.session = PlottingSession()
        self.formula_session: Optional[FormulaSession] = None
        self.verbose = (not quiet_from_env()) if verbose is None else verbose
        self.last_result: Optional[PlotResult] = None

    def __repr__(self) -> str:
        return (f"Plot(x_res={self.dimensions.x_res}, z_res={self.dimensions.z_res}, "
                f"last_mode={self.session.mode!r})")

    def _log(self, message: str) -> None:
        if self.verbose:
            print(f"  ✓ {message}")

    # ------------------------------------------------------------------
    # configuration
    # ------------------------------------------------------------------

    def set_dimensions(self, **changes) -> Dimensions:
        """
        Change resolution or axis lengths (``x_res=40``, ``xLen=2``, ...).

        Carried-over state no longer matches the new grid and is cleared.
        """
        values = self.dimensions.to_dict()
        values.update(changes)
        self.dimensions = Dimensions.from_dict(values)
        self.session.clear()
        self.formula_session = None
        return self.dimensions

    def clear(self) -> None:
        """Forget the previous plots."""
        self.session.clear()
        self.formula_session = None
        self.last_result = None

    # ------------------------------------------------------------------
    # formulas
    # ------------------------------------------------------------------

    def plot_formula(self, formula: Union[str, EvaluableFormula],
                     options: OptionsLike = None,
                     variables: Optional[Dict[str, float]] = None,
                     **overrides) -> PlotResult:
        """
        Plot ``x2 = formula(x1, x3)``.

        Parameters
        ----------
        formula : str or EvaluableFormula
            e.g. ``"x1^2 + sin(x3 * pi)"``; may use ``f(x1, x3)`` to recurse.
        options : PlotOptions or dict, optional
            ``mode`` defaults to ``"polygon"`` (a surface).  Any dataframe
            mode samples the formula into rows ``[x1, x2, x3]`` first and
            colours them by height.
        variables : dict, optional
            Values of additional named variables.

        Returns
        -------
        PlotResult
        """
        parsed = parse(formula) if isinstance(formula, str) else formula
        if not parsed.is_valid:
            warnings.warn(f"Invalid formula {parsed.text!r}: {parsed.error}")
        return self._plot_formula_session(
            FormulaSession(parsed, self.dimensions, variables),
            resolve_options(options, **overrides), parsed.text)

    def plot_function(self, func: Callable[[float, float], float],
                      options: OptionsLike = None, **overrides) -> PlotResult:
        """Like :meth:`plot_formula` for a Python ``callable(x1, x3)``."""
        if not callable(func):
            raise TypeError(f"Expected a callable, got {type(func).__name__}")
        label = getattr(func, '__name__', 'function')
        return self._plot_formula_session(
            FormulaSession(func, self.dimensions),
            resolve_options(options, **overrides), label)

    def _plot_formula_session(self, formula_session: FormulaSession,
                              options: PlotOptions, label: str) -> PlotResult:
        self.formula_session = formula_session
        mode = options.mode or 'polygon'
        if mode != 'polygon':
            color_column = 1 if options.color_column is None else options.color_column
            rows = formula_session.sample_rows()
            return self.plot_dataframe(rows, 0, 1, 2, options.replace(
                mode=mode, header=False, color_column=color_column))

        result = FORMULA_MODES['polygon']().build_surface(
            formula_session, options,
            titles=(options.x1_title or 'x1', options.x2_title or 'x2',
                    options.x3_title or 'x3'))
        self.session.clear()
        self.session.bounds = result.bounds
        self.session.record('polygon', None, options)
        self.last_result = result
        self._log(f"Plotted formula {label} on a {result.heights.shape[0]}x"
                  f"{result.heights.shape[1]} grid")
        return result

    # ------------------------------------------------------------------
    # dataframes
    # ------------------------------------------------------------------

    def plot_dataframe(self, df, x1_column: int = 0, x2_column: int = 1,
                       x3_column: int = 2, options: OptionsLike = None,
                       **overrides) -> PlotResult:
        """
        Plot a dataframe.

        Parameters
        ----------
        df : list of rows, 2D ndarray or pandas.DataFrame
        x1_column, x3_column : int
            Columns spanning the ground plane.
        x2_column : int
            Column used as height.
        options : PlotOptions or dict, optional
            ``mode`` defaults to ``"scatterplot"``.

        Returns
        -------
        PlotResult
            ``PointsResult``, ``LineResult``, ``BarChartResult`` or
            ``SurfaceResult`` depending on the mode.
        """
        options = resolve_options(options, **overrides)
        mode = options.mode or 'scatterplot'
        if mode == 'polygon':
            warnings.warn("polygon mode needs a formula; using interpolatedpolygon")
            mode = 'interpolatedpolygon'
        elif mode not in MODE_REGISTRY:
            warnings.warn(f"Unknown mode '{mode}'. Available: "
                          f"{', '.join(MODE_REGISTRY)}; using scatterplot")
            mode = 'scatterplot'
        options = options.replace(mode=mode)

        frame = prepare_frame(df, x1_column, x2_column, x3_column, options)
        result = self._plot_frame(frame, options)
        self.session.record(mode, frame, options)
        return result

    def plot_arrays(self, x1: Sequence, x2: Sequence, x3: Sequence,
                    labels: Optional[Sequence] = None, options: OptionsLike = None,
                    **overrides) -> PlotResult:
        """
        Plot three equally long arrays; *labels* (optional) become colour column 3.

        Labels that are neither numbers nor colours are treated as
        categories (``labeled=True``).
        """
        options = resolve_options(options, **overrides)
        rows = rows_from_arrays(x1, x2, x3, labels)
        changes = {'header': False}
        if labels is not None and options.color_column is None:
            changes['color_column'] = 3
            first = rows[0][3] if rows else None
            if as_number(first) is None and not looks_like_color(first):
                changes['labeled'] = True
        return self.plot_dataframe(rows, 0, 1, 2, options.replace(**changes))

    def add_data_point(self, point: Sequence[Any], options: OptionsLike = None,
                       renormalize: bool = False, **overrides) -> PlotResult:
        """
        Add one row to the current plot.

        The options of the last plot are inherited.  By default the point
        is placed with the existing bounds on top of the old plot, so the
        old geometry stays valid.  With ``renormalize=True`` the whole,
        extended dataframe is plotted again with fresh bounds.

        Raises
        ------
        Plot3DKitError
            While a formula surface is shown.
        ValueError
            If the point's length differs from the dataframe's column count.
        """
        if self.session.mode == 'polygon':
            raise Plot3DKitError("Cannot add data points to a formula surface")
        old = self.session.frame
        if old is None:
            return self.plot_dataframe([list(point)], options=options, header=False,
                                       **overrides)
        if len(point) != old.n_columns:
            raise ValueError(f"Data point has {len(point)} values, the dataframe "
                             f"has {old.n_columns} columns")

        inherited = self.session.options.to_dict()
        if isinstance(options, PlotOptions):
            inherited.update(options.to_dict())
        elif options is not None:
            inherited.update(options)
        inherited.update(overrides)
        inherited.update(header=False, update_old_data=False, keep_old_plot=True)
        options = PlotOptions.from_dict(inherited)

        row = clean_rows([list(point)])[0]
        columns = dict(header_row=old.header_row, x1_column=old.x1_column,
                       x2_column=old.x2_column, x3_column=old.x3_column,
                       color_column=old.color_column, titles=old.titles)
        extended = PreparedFrame(rows=old.rows + [row], **columns)

        if renormalize:
            result = self._plot_frame(extended, options.replace(keep_old_plot=False))
        else:
            result = self._plot_frame(PreparedFrame(rows=[row], **columns), options,
                                      fixed_bounds=self.session.bounds)
        self.session.frame = extended
        return result

    # ------------------------------------------------------------------
    # pipeline
    # ------------------------------------------------------------------

    def _plot_frame(self, frame: PreparedFrame, options: PlotOptions,
                    fixed_bounds: Optional[AxisBounds] = None) -> PlotResult:
        keep = options.keep_old_plot
        session = self.session
        if not keep:
            session.label_map = LabelMap()
            session.bar_grid = None

        color_map = get_color_map(
            frame.rows, frame.color_column, default_color=options.default_color,
            labeled=options.labeled, header=False, hue_offset=options.hue_offset,
            label_map=session.label_map, filter_color=options.filter_color,
            previous_bounds=session.color_bounds, keep_old=keep)
        if color_map.header:
            # the colour mapper found a header row the axis columns did not reveal
            frame.header_row = frame.rows[0]
            frame.rows = frame.rows[1:]
            color_map.colors = color_map.colors[1:]
            if not frame.rows:
                raise Plot3DKitError("Dataframe contains a header but no data rows")

        if fixed_bounds is not None:
            bounds = AxisBounds(fixed_bounds.x1, fixed_bounds.x2, fixed_bounds.x3)
        else:
            bounds = AxisBounds()
            for axis in ('x1', 'x2', 'x3'):
                bounds.update(axis, get_min_max(frame.rows, frame.column(axis),
                                                session.previous_bounds(axis, keep), keep))

        context = ModeContext(frame=frame, color_map=color_map, bounds=bounds,
                              options=options, dimensions=self.dimensions,
                              session=session)
        result = MODE_REGISTRY[options.mode]().build(context)

        session.bounds = context.bounds
        if color_map.bounds is not None:
            session.color_bounds = color_map.bounds
        self.last_result = result
        self._log(f"Plotted {len(frame)} rows as {options.mode}")
        return result
