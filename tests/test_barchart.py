import numpy as np
import pytest

from Plot3DKit import Plot
from Plot3DKit.color.colors import label_color
from Plot3DKit.modes.barchart import BarGrid, splat_weights


ROWS = [[0, 0, 0], [1, 1, 1], [2, 0, 2]]


def _weights(x, z):
    return {(i, k): w for i, k, w in splat_weights(x, z)}


def test_splat_weights_are_bilinear():
    weights = _weights(0.5, 0.25)
    assert weights == {
        (0, 0): pytest.approx(0.375),
        (1, 0): pytest.approx(0.375),
        (0, 1): pytest.approx(0.125),
        (1, 1): pytest.approx(0.125),
    }
    assert sum(weights.values()) == pytest.approx(1.0)


def test_point_on_a_node_hits_only_that_node():
    assert splat_weights(2.0, 3.0) == [(2, 3, 1.0)]
    # float noise from normalization still counts as on the node
    assert splat_weights(6.000000000000001, 3.0) == [(6, 3, 1.0)]


def test_points_outside_the_grid_are_rejected():
    grid = BarGrid.empty(3, 3)
    assert not grid.splat(2.5, 0.0, 1.0)
    assert grid.splat(1.5, 1.0, 2.0)
    assert grid.heights[1, 1] == pytest.approx(1.0)
    assert grid.heights[2, 1] == pytest.approx(1.0)
    assert grid.counts.sum() == 2


def test_bar_chart_of_three_points():
    bars = Plot(verbose=False).plot_dataframe(ROWS, mode="barchart")
    assert bars.heights.shape == (21, 21)
    assert bars.heights[10, 10] == pytest.approx(1.0)
    assert bars.counts[0, 0] == bars.counts[10, 10] == bars.counts[20, 20] == 1
    assert bars.counts.sum() == 3
    assert bars.visible.sum() == 1
    assert bars.normalized_heights[10, 10] == pytest.approx(1.0)
    assert bars.height_bounds.min == 0.0 and bars.height_bounds.max == pytest.approx(1.0)
    assert bars.bar_width == pytest.approx(0.5 / 21)


def test_weights_of_a_point_sum_to_its_height():
    bars = Plot(verbose=False).plot_dataframe(
        [[0.0, 0.0, 0.0], [0.33, 4.0, 0.71], [1.0, 0.0, 1.0]], mode="barchart")
    assert bars.heights.sum() == pytest.approx(4.0)


def test_keep_old_plot_accumulates():
    plot = Plot(verbose=False)
    plot.plot_dataframe(ROWS, mode="barchart")
    bars = plot.plot_dataframe(ROWS, mode="barchart", keep_old_plot=True)
    assert bars.heights[10, 10] == pytest.approx(2.0)
    assert bars.counts[10, 10] == 2

    fresh = plot.plot_dataframe(ROWS, mode="barchart")
    assert fresh.heights[10, 10] == pytest.approx(1.0)


def test_small_bars_are_hidden():
    bars = Plot(verbose=False).plot_dataframe([[0, 10, 0], [1, 1, 1]], mode="barchart",
                                              bar_size_threshold=0.5)
    assert bars.threshold == pytest.approx(5.0)
    assert bars.visible[0, 0]
    assert not bars.visible[20, 20]


def test_labeled_colours_are_blended():
    rows = [[0, 1, 0, "a"], [0, 1, 0, "b"], [1, 1, 1, "a"]]
    bars = Plot(verbose=False).plot_dataframe(rows, mode="barchart", color_column=3,
                                              labeled=True)
    expected = (np.array(label_color(0, 2).as_tuple())
                + np.array(label_color(1, 2).as_tuple())) / 2
    np.testing.assert_allclose(bars.colors[0, 0], expected)
    np.testing.assert_allclose(bars.colors[20, 20], label_color(0, 2).as_tuple())


def test_rows_with_text_heights_are_skipped():
    with pytest.warns(UserWarning, match="skipped"):
        bars = Plot(verbose=False).plot_dataframe([[0, 1, 0], [1, "n/a", 1]],
                                                  mode="barchart")
    assert bars.counts.sum() == 1
