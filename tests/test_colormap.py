import pytest

from Plot3DKit.color import colormap
from Plot3DKit.color.colormap import (Classified, ColorPolicy, LabelMap, NeedsRetry,
                                      classify_color_column, get_color_map)
from Plot3DKit.color.colors import Color, convert_to_heat
from Plot3DKit.core.errors import ColorClassificationError, Plot3DKitError
from Plot3DKit.core.normalization import Bounds


LABELED_ROWS = [[0.0, 1.0, 0.0, "a"], [1.0, 2.0, 1.0, "b"], [2.0, 3.0, 2.0, "a"]]


def test_without_color_column_every_row_gets_the_default():
    rows = [[0.0, 1.0, 2.0]] * 4
    result = get_color_map(rows, None, default_color="#00ff00")
    assert result.policy is ColorPolicy.DEFAULT
    assert result.colors == [Color(0.0, 1.0, 0.0)] * 4


def test_numeric_column_is_a_heatmap():
    rows = [[0.0, 0.0, 0.0, 1.0], [0.0, 0.0, 0.0, 2.0], [0.0, 0.0, 0.0, 3.0]]
    result = get_color_map(rows, 3)
    assert result.policy is ColorPolicy.HEATMAP
    assert result.bounds == Bounds(1.0, 3.0)
    assert result.colors[0] == convert_to_heat(1.0, 1.0, 3.0)
    assert result.colors[2] == convert_to_heat(3.0, 1.0, 3.0)


def test_heatmap_bounds_widen_with_keep_old():
    rows = [[1.0], [2.0]]
    result = get_color_map(rows, 0, previous_bounds=Bounds(0.0, 10.0), keep_old=True)
    assert result.bounds == Bounds(0.0, 10.0)
    assert result.colors[1] == convert_to_heat(2.0, 0.0, 10.0)


def test_explicit_color_strings():
    rows = [[0.0, "#ff0000"], [1.0, "rgb(0, 0, 255)"], [2.0, "nope"]]
    with pytest.warns(UserWarning, match="not colours"):
        result = get_color_map(rows, 1, default_color="#00ff00")
    assert result.policy is ColorPolicy.EXPLICIT
    assert result.colors == [Color(1.0, 0.0, 0.0), Color(0.0, 0.0, 1.0), Color(0.0, 1.0, 0.0)]


def test_numbers_as_hex_without_filter():
    result = get_color_map([[float(0xff0000)], [float(0x0000ff)]], 0, filter_color=False)
    assert result.policy is ColorPolicy.HEX
    assert result.colors == [Color(1.0, 0.0, 0.0), Color(0.0, 0.0, 1.0)]


def test_labels_get_ordinal_hues():
    result = get_color_map(LABELED_ROWS, 3, labeled=True)
    assert result.policy is ColorPolicy.LABELED
    assert result.label_count == 2
    assert result.label_map["a"].number == 0
    assert result.label_map["b"].number == 1
    assert result.colors[0] == result.colors[2] == Color.from_hsl(0.0, 0.95, 0.55)
    assert result.colors[1] == Color.from_hsl(0.5, 0.95, 0.55)


def test_label_colors_are_idempotent():
    labels = LabelMap()
    first = get_color_map(LABELED_ROWS, 3, labeled=True, label_map=labels)
    second = get_color_map(LABELED_ROWS, 3, labeled=True, label_map=labels)
    assert first.colors == second.colors
    assert len(labels) == 2


def test_existing_labels_keep_their_color():
    labels = LabelMap()
    get_color_map(LABELED_ROWS, 3, labeled=True, label_map=labels)
    a_color = labels.color_of("a")
    result = get_color_map([[0.0, 0.0, 0.0, "c"], [0.0, 0.0, 0.0, "a"]], 3,
                           labeled=True, label_map=labels)
    assert result.colors[1] == a_color
    assert labels["c"].number == 2
    assert result.colors[0] == Color.from_hsl(2 / 3, 0.95, 0.55)


def test_label_map_keys_integral_floats_like_ints():
    labels = LabelMap()
    labels.add(1.0)
    assert 1 in labels
    assert "1" in labels
    assert labels.to_dict()["1"]["number"] == 0


def test_unrecognised_sample_falls_back_to_header_then_labels():
    rows = [[0.0, 0.0, 0.0, "a"], [1.0, 1.0, 1.0, "b"], [2.0, 0.0, 2.0, "a"]]
    with pytest.warns(UserWarning) as record:
        result = get_color_map(rows, 3)
    assert len(record) == 2
    assert result.policy is ColorPolicy.LABELED
    # the first row is data, not a header
    assert not result.header
    assert len(result.colors) == 3
    assert result.label_map["a"].number == 0
    assert result.label_map["b"].number == 1
    assert result.colors[0] == result.colors[2] == Color.from_hsl(0.0, 0.95, 0.55)


def test_label_fallback_keeps_an_explicit_header():
    rows = [["x", "y", "z", "name"], [0.0, 0.0, 0.0, "foo"], [1.0, 1.0, 1.0, "bar"]]
    with pytest.warns(UserWarning, match="labels"):
        result = get_color_map(rows, 3, header=True, default_color="#0000ff")
    assert result.header
    assert result.colors[0] == Color(0.0, 0.0, 1.0)
    assert "name" not in result.label_map
    assert len(result.label_map) == 2


def test_header_retry_can_end_in_a_heatmap():
    rows = [["value"], [1.0], [2.0]]
    with pytest.warns(UserWarning, match="header"):
        result = get_color_map(rows, 0, default_color="#0000ff")
    assert result.policy is ColorPolicy.HEATMAP
    assert result.header
    assert result.colors[0] == Color(0.0, 0.0, 1.0)
    assert result.bounds == Bounds(1.0, 2.0)


def test_single_unrecognised_row_becomes_a_label():
    with pytest.warns(UserWarning, match="labels"):
        result = get_color_map([["foo"]], 0)
    assert result.policy is ColorPolicy.LABELED


def test_classifier_returns_tagged_results():
    assert classify_color_column([[1.0]], 0) == Classified(ColorPolicy.HEATMAP, False, False)
    retry = classify_color_column([["foo"], ["bar"]], 0)
    assert isinstance(retry, NeedsRetry)
    assert retry.header and not retry.labeled


def test_retries_are_bounded(monkeypatch):
    def never_classified(rows, column, labeled, header, filter_color):
        return NeedsRetry("still unknown", header=header, labeled=labeled)

    monkeypatch.setattr(colormap, "classify_color_column", never_classified)
    with pytest.warns(UserWarning):
        with pytest.raises(ColorClassificationError) as exc:
            get_color_map([[1.0], [2.0]], 0)
    assert exc.value.attempts == colormap.MAX_CLASSIFY_ATTEMPTS


def test_invalid_default_color():
    with pytest.raises(Plot3DKitError):
        get_color_map([[1.0]], None, default_color="not a colour")


def test_out_of_range_column_uses_default():
    with pytest.warns(UserWarning, match="out of range"):
        result = get_color_map([[1.0, 2.0]], 5)
    assert result.policy is ColorPolicy.DEFAULT
