import pandas as pd
import pytest

from Plot3DKit.core.dataframe import (clean_rows, coerce_cell, detect_header,
                                      prepare_frame, rows_from_arrays)
from Plot3DKit.core.errors import Plot3DKitError
from Plot3DKit.core.options import PlotOptions


def test_coerce_cell():
    assert coerce_cell(" 2 ") == 2.0
    assert coerce_cell('"label"') == "label"
    assert coerce_cell("'4'") == 4.0
    assert coerce_cell(None) == ""
    assert coerce_cell(7) == 7.0


def test_clean_rows_pads_and_fills_numeric_gaps():
    rows = clean_rows([["1", " 2 ", '"3"'], ["4", ""]])
    assert rows == [[1.0, 2.0, 3.0], [4.0, 0.0, 0.0]]


def test_detect_header():
    assert detect_header(["x", "y", "z"], [0, 1, 2])
    assert not detect_header([1.0, 2.0, 3.0], [0, 1, 2])
    # only the axis columns count
    assert not detect_header([1.0, 2.0, 3.0, "label"], [0, 1, 2])


def test_header_is_detected_and_used_for_titles():
    frame = prepare_frame([["a", "b", "c"], [1, 2, 3]])
    assert frame.header_row == ["a", "b", "c"]
    assert frame.rows == [[1.0, 2.0, 3.0]]
    assert frame.titles == ("a", "b", "c")


def test_explicit_titles_win():
    frame = prepare_frame([["a", "b", "c"], [1, 2, 3]],
                          options=PlotOptions(x2_title="height"))
    assert frame.titles == ("a", "height", "c")


def test_header_false_keeps_every_row():
    frame = prepare_frame([[1, 2, 3], [4, 5, 6]], options=PlotOptions(header=False))
    assert len(frame) == 2
    assert frame.titles == ("x1", "x2", "x3")


def test_out_of_range_axis_column_is_clamped():
    with pytest.warns(UserWarning, match="out of range"):
        frame = prepare_frame([[1, 2, 3, "label"]], x1_column=7)
    assert frame.x1_column == 2


def test_fraction_keeps_at_least_three_rows():
    rows = [[i, i, i] for i in range(10)]
    assert len(prepare_frame(rows, options=PlotOptions(fraction=0.2))) == 3
    assert len(prepare_frame(rows, options=PlotOptions(fraction=0.5))) == 5


def test_color_column_out_of_range_disables_colors():
    with pytest.warns(UserWarning, match="without colours"):
        frame = prepare_frame([[1, 2, 3]], options=PlotOptions(color_column=9))
    assert frame.color_column is None


def test_pandas_dataframe_columns_become_header():
    df = pd.DataFrame({"x": [0, 1], "y": [1, 2], "z": [3, 4]})
    frame = prepare_frame(df)
    assert frame.header_row == ["x", "y", "z"]
    assert frame.titles == ("x", "y", "z")
    assert frame.rows == [[0.0, 1.0, 3.0], [1.0, 2.0, 4.0]]


def test_axis_values_are_floats_with_nan_for_text():
    frame = prepare_frame([[1, 2, 3], [4, "n/a", 6]])
    values = frame.values("x2")
    assert values[0] == 2.0
    assert values[1] != values[1]


def test_rows_from_arrays():
    assert rows_from_arrays([1, 2], [3, 4], [5, 6], ["a", "b"]) == [[1, 3, 5, "a"], [2, 4, 6, "b"]]
    with pytest.raises(ValueError):
        rows_from_arrays([1, 2], [3], [5, 6])


def test_empty_input():
    with pytest.raises(Plot3DKitError):
        prepare_frame([])
    with pytest.raises(Plot3DKitError):
        prepare_frame([["a", "b", "c"]])
