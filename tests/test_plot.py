import math

import numpy as np
import pandas as pd
import pytest

import Plot3DKit
from Plot3DKit import (Dimensions, LineResult, Plot, Plot3DKitError, PlotOptions,
                       PointsResult, SurfaceResult)
from Plot3DKit.plot import resolve_options


ROWS = [[0, 0, 0], [1, 1, 1], [2, 0, 2]]


@pytest.fixture
def plot():
    return Plot(Dimensions(), verbose=False)


# ----------------------------------------------------------------------
# dataframes
# ----------------------------------------------------------------------

def test_scatterplot_is_normalized_to_the_unit_cube(plot):
    points = plot.plot_dataframe(ROWS)
    assert isinstance(points, PointsResult)
    np.testing.assert_allclose(points.positions[:, 0], [0.0, 0.5, 1.0])
    np.testing.assert_allclose(points.positions[:, 1], [0.0, 1.0, 0.0])
    np.testing.assert_allclose(points.positions[:, 2], [0.0, 0.5, 1.0])
    assert points.bounds.x1.min == 0 and points.bounds.x1.max == 2
    assert points.colors.shape == (3, 3)


def test_normalization_can_be_switched_off_per_axis(plot):
    points = plot.plot_dataframe(ROWS, normalize_x1=False)
    np.testing.assert_allclose(points.positions[:, 0], [0.0, 1.0, 2.0])
    np.testing.assert_allclose(points.positions[:, 2], [0.0, 0.5, 1.0])


def test_lineplot_connects_consecutive_rows(plot):
    lines = plot.plot_dataframe(ROWS, mode="lineplot")
    assert isinstance(lines, LineResult)
    assert lines.segments.tolist() == [[0, 1], [1, 2]]


def test_pandas_dataframe_and_titles(plot):
    df = pd.DataFrame({"time": [0, 1, 2], "signal": [0, 1, 0], "depth": [0, 1, 2]})
    points = plot.plot_dataframe(df)
    assert points.titles == ("time", "signal", "depth")
    np.testing.assert_allclose(points.positions[:, 0], [0.0, 0.5, 1.0])


def test_camel_case_options_dict(plot):
    points = plot.plot_dataframe(ROWS, options={"mode": "lineplot", "dataPointSize": 0.1})
    assert points.point_size == 0.1


def test_unknown_mode_falls_back_to_scatterplot(plot):
    with pytest.warns(UserWarning, match="Unknown mode"):
        points = plot.plot_dataframe(ROWS, mode="sphere")
    assert points.mode == "scatterplot"


def test_unflagged_labels_colour_every_row(plot):
    rows = [[0, 0, 0, "a"], [1, 1, 1, "b"], [2, 0, 2, "a"]]
    with pytest.warns(UserWarning, match="labels"):
        points = plot.plot_dataframe(rows, color_column=3)
    assert len(points) == 3
    assert points.labels["a"]["number"] == 0
    assert points.labels["b"]["number"] == 1
    np.testing.assert_allclose(points.colors[0], points.colors[2])
    np.testing.assert_allclose(points.positions[:, 0], [0.0, 0.5, 1.0])


def test_header_found_by_the_colour_column(plot):
    rows = [[0, 0, 0, "colour"], [1, 1, 1, "#ff0000"], [2, 0, 2, "#0000ff"]]
    with pytest.warns(UserWarning, match="header"):
        points = plot.plot_dataframe(rows, color_column=3)
    assert len(points) == 2
    np.testing.assert_allclose(points.colors, [[1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
    np.testing.assert_allclose(points.positions[:, 0], [0.0, 1.0])


def test_keep_old_plot_widens_bounds(plot):
    plot.plot_dataframe(ROWS)
    points = plot.plot_dataframe([[4, 0, 0]], keep_old_plot=True)
    assert points.bounds.x1.min == 0 and points.bounds.x1.max == 4
    np.testing.assert_allclose(points.positions[:, 0], [1.0])


def test_plot_arrays_with_labels(plot):
    points = plot.plot_arrays([0, 1, 2], [0, 1, 0], [0, 1, 2], labels=["a", "b", "a"])
    assert set(points.labels) == {"a", "b"}
    np.testing.assert_allclose(points.colors[0], points.colors[2])
    assert not np.allclose(points.colors[0], points.colors[1])


def test_plot_arrays_with_numeric_labels_is_a_heatmap(plot):
    points = plot.plot_arrays([0, 1, 2], [0, 1, 0], [0, 1, 2], labels=[1.0, 2.0, 3.0])
    assert points.labels == {}
    assert plot.session.color_bounds.max == 3.0


# ----------------------------------------------------------------------
# adding points
# ----------------------------------------------------------------------

def test_add_data_point_uses_the_existing_bounds(plot):
    plot.plot_dataframe(ROWS)
    added = plot.add_data_point([1, 1, 1])
    np.testing.assert_allclose(added.positions, [[0.5, 1.0, 0.5]])
    assert len(plot.session.frame) == 4


def test_add_data_point_with_renormalization(plot):
    plot.plot_dataframe(ROWS)
    points = plot.add_data_point([4, 0, 4], renormalize=True)
    np.testing.assert_allclose(points.positions[:, 0], [0.0, 0.25, 0.5, 1.0])


def test_add_data_point_checks_the_row_length(plot):
    plot.plot_dataframe(ROWS)
    with pytest.raises(ValueError):
        plot.add_data_point([1, 2])


def test_add_data_point_without_a_plot_starts_one(plot):
    points = plot.add_data_point([1, 2, 3])
    assert len(points) == 1
    assert plot.session.mode == "scatterplot"


def test_add_data_point_to_a_surface_is_an_error(plot):
    plot.plot_formula("x1")
    with pytest.raises(Plot3DKitError):
        plot.add_data_point([1, 2, 3])


# ----------------------------------------------------------------------
# formulas
# ----------------------------------------------------------------------

def test_formula_surface(plot):
    surface = plot.plot_formula("x1^2")
    assert isinstance(surface, SurfaceResult)
    assert surface.mode == "polygon"
    assert surface.heights.shape == (21, 21)
    xs = np.linspace(0.0, 1.0, 21)
    np.testing.assert_allclose(surface.heights[:, 0], xs ** 2)
    np.testing.assert_allclose(surface.heights[:, 7], xs ** 2)
    assert surface.bounds.x2.max == pytest.approx(1.0)
    np.testing.assert_allclose(surface.normalized_heights, surface.heights)


def test_non_finite_heights_are_replaced(plot):
    surface = plot.plot_formula("sqrt(x1 - 0.475)")
    assert np.isfinite(surface.heights).all()
    assert surface.heights[0, 0] == pytest.approx(math.sqrt(0.025))


def test_invalid_formula_warns_and_draws_a_flat_surface(plot):
    with pytest.warns(UserWarning, match="Invalid formula"):
        surface = plot.plot_formula("sin(")
    assert (surface.heights == 0).all()


def test_recursive_formula_surface():
    plot = Plot(Dimensions(x_res=8, z_res=8), verbose=False)
    surface = plot.plot_formula("f(x1 - 0.125, x3) + 1")
    np.testing.assert_allclose(surface.heights[:, 0], np.arange(1, 10))
    np.testing.assert_allclose(surface.heights[:, 8], np.arange(1, 10))


def test_formula_variables(plot):
    surface = plot.plot_formula("a * x1", variables={"a": 2})
    assert surface.heights[20, 0] == pytest.approx(2.0)


def test_formula_in_a_dataframe_mode(plot):
    points = plot.plot_formula("x1 + x3", mode="scatterplot")
    assert len(points) == 400
    assert plot.session.color_bounds is not None


def test_plot_function(plot):
    surface = plot.plot_function(lambda x1, x3: x1 * x3)
    assert surface.heights[20, 20] == pytest.approx(1.0)
    assert surface.heights[0, 20] == 0.0
    with pytest.raises(TypeError):
        plot.plot_function("x1 * x3")


def test_raising_function_degrades_to_a_flat_surface(plot):
    with pytest.warns(UserWarning, match="Stopped evaluating"):
        surface = plot.plot_function(lambda x1, x3: 1 / x1)
    assert surface.heights.shape == (21, 21)
    assert (surface.heights == 0).all()
    assert plot.formula_session.stop_recursion
    assert isinstance(plot.formula_session.failure, ZeroDivisionError)


# ----------------------------------------------------------------------
# configuration
# ----------------------------------------------------------------------

def test_set_dimensions_clears_the_session(plot):
    plot.plot_dataframe(ROWS)
    plot.set_dimensions(x_res=10)
    assert plot.session.frame is None
    assert plot.plot_formula("x1").heights.shape == (11, 21)


def test_resolve_options_merges_env_and_overrides(monkeypatch):
    monkeypatch.setenv("PLOT3DKIT_HUE_OFFSET", "0.3")
    options = resolve_options({"keepOldPlot": True}, mode="barchart")
    assert options.hue_offset == 0.3
    assert options.keep_old_plot
    assert options.mode == "barchart"
    explicit = PlotOptions(hue_offset=0.1)
    assert resolve_options(explicit).hue_offset == 0.1


def test_progress_output(capsys):
    Plot(verbose=True).plot_dataframe(ROWS)
    assert "✓" in capsys.readouterr().out


def test_quiet_environment_flag(monkeypatch, capsys):
    monkeypatch.setenv("PLOT3DKIT_QUIET", "1")
    plot = Plot()
    assert not plot.verbose
    plot.plot_dataframe(ROWS)
    assert capsys.readouterr().out == ""


def test_package_info():
    info = Plot3DKit.get_info()
    assert info["name"] == "Plot3DKit"
    assert info["version"] == Plot3DKit.get_version()
    assert "barchart" in info["modes"]
    assert "polygon" in info["modes"]


def test_registry_holds_only_dataframe_modes():
    assert "polygon" not in Plot3DKit.MODE_REGISTRY
    assert "polygon" in Plot3DKit.FORMULA_MODES
    with pytest.raises(NotImplementedError):
        Plot3DKit.FORMULA_MODES["polygon"]().build(None)
