import numpy as np
import pytest

from Plot3DKit import Plot
from Plot3DKit.modes.interpolated import (bin_samples, fill_gaps_1d, fill_surface,
                                          long_gap_cells)


NAN = np.nan


def test_short_gap_is_linear():
    np.testing.assert_allclose(fill_gaps_1d([1.0, NAN, 3.0], floor=0.0), [1.0, 2.0, 3.0])


def test_edges_are_bounded_by_the_floor():
    np.testing.assert_allclose(fill_gaps_1d([NAN, 2.0, NAN], floor=0.0), [1.0, 2.0, 1.0])


def test_long_gap_sags_toward_the_floor():
    line = np.array([1.0] + [NAN] * 10 + [1.0])
    filled = fill_gaps_1d(line, floor=0.0, long_gap=2)
    assert filled[1] == pytest.approx(1.0)
    assert filled[10] == pytest.approx(1.0)
    assert filled[5] == pytest.approx(np.exp(-2.0))
    assert (filled >= 0.0).all() and (filled <= 1.0).all()
    # without a long-gap limit the run is a flat line
    np.testing.assert_allclose(fill_gaps_1d(line, floor=0.0), np.ones(12))


def test_all_missing_line_is_unchanged():
    assert np.isnan(fill_gaps_1d([NAN, NAN], floor=0.0)).all()


def test_bin_samples_averages_per_vertex():
    binned = bin_samples(np.array([0.0, 0.2, 1.5]), np.array([0.0, 0.0, 1.0]),
                         np.array([1.0, 3.0, 5.0]), (2, 2))
    assert binned[0, 0] == pytest.approx(2.0)
    assert binned[1, 1] == pytest.approx(5.0)
    assert np.isnan(binned[0, 1]) and np.isnan(binned[1, 0])


def test_bin_samples_ignores_invalid_and_outside_samples():
    binned = bin_samples(np.array([NAN, 5.0, 0.0]), np.array([0.0, 0.0, 0.0]),
                         np.array([1.0, 1.0, 7.0]), (2, 2))
    assert binned[0, 0] == 7.0
    assert np.isnan(binned).sum() == 3


def test_fill_surface_leaves_no_holes():
    grid = np.full((5, 5), NAN)
    grid[2, 2] = 1.0
    grid[0, 4] = 3.0
    filled = fill_surface(grid, floor=1.0, long_gap=2)
    assert np.isfinite(filled).all()
    assert filled.min() >= 1.0
    assert filled[2, 2] == 1.0 and filled[0, 4] == 3.0


def test_long_gap_cells():
    assert long_gap_cells(0.25, 20) == 5
    assert long_gap_cells(0.01, 20) == 2


def test_interpolated_surface_from_points():
    rows = [[0, 0, 0], [1, 1, 1], [2, 0, 2]]
    surface = Plot(verbose=False).plot_dataframe(rows, mode="interpolatedpolygon")
    assert surface.mode == "interpolatedpolygon"
    assert surface.heights.shape == (21, 21)
    assert np.isfinite(surface.heights).all()
    assert surface.heights[10, 10] == pytest.approx(1.0)
    assert surface.heights.min() >= 0.0 and surface.heights.max() <= 1.0
    assert surface.colors.shape == (21, 21, 3)


def test_polygon_on_a_dataframe_falls_back_to_interpolation():
    with pytest.warns(UserWarning, match="interpolatedpolygon"):
        surface = Plot(verbose=False).plot_dataframe([[0, 0, 0], [1, 1, 1]], mode="polygon")
    assert surface.mode == "interpolatedpolygon"
