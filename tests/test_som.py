import numpy as np
import pytest

from Plot3DKit import Plot
from Plot3DKit.modes.som import learning_rate, som_heights


GRID = np.linspace(0.0, 1.0, 11)


def test_learning_rate_decays():
    assert learning_rate(0) == 1.0
    assert learning_rate(4) == 0.5
    assert learning_rate(80) < learning_rate(10)


def test_constant_data_gives_a_flat_map():
    points = np.array([[0.1, 0.2], [0.7, 0.4], [0.5, 0.9]])
    heights = som_heights(points, np.full(3, 2.0), GRID, GRID, epochs=10, seed=0)
    assert heights.shape == (11, 11)
    np.testing.assert_allclose(heights, 2.0)


def test_map_is_pulled_toward_nearby_points():
    points = np.array([[0.0, 0.0], [1.0, 1.0]])
    heights = som_heights(points, np.array([1.0, 0.0]), GRID, GRID, epochs=20, seed=0)
    assert heights[0, 0] == pytest.approx(1.0)
    assert heights[-1, -1] == pytest.approx(0.0)
    assert heights[0, 0] > heights[5, 5] > heights[-1, -1]


def test_seed_makes_training_reproducible():
    rng = np.random.default_rng(1)
    points = rng.uniform(size=(30, 2))
    values = rng.normal(size=30)
    first = som_heights(points, values, GRID, GRID, epochs=5, seed=42)
    second = som_heights(points, values, GRID, GRID, epochs=5, seed=42)
    np.testing.assert_array_equal(first, second)


def test_som_mode_through_the_facade():
    rows = [[0, 0, 0], [1, 1, 1], [2, 0, 2], [0, 1, 2]]
    surface = Plot(verbose=False).plot_dataframe(rows, mode="selforganizingmap",
                                                 som_epochs=5, seed=3)
    assert surface.mode == "selforganizingmap"
    assert surface.heights.shape == (21, 21)
    assert np.isfinite(surface.heights).all()
    assert surface.heights.min() >= 0.0 and surface.heights.max() <= 1.0
