#!/usr/bin/env python3
"""
Dataframe preparation.

Turns user input (list of rows, 2D numpy array, ``pandas.DataFrame``
or column arrays) into a uniform list of rows of numbers and strings,
and resolves the header row and column selection.
"""

import warnings
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from Plot3DKit.core.errors import Plot3DKitError
from Plot3DKit.core.normalization import as_number
from Plot3DKit.core.options import PlotOptions


AXES = ('x1', 'x2', 'x3')


@dataclass
class PreparedFrame:
    """Rows ready for plotting plus the resolved column selection."""
    rows: List[List[Any]]
    header_row: Optional[List[Any]]
    x1_column: int
    x2_column: int
    x3_column: int
    color_column: Optional[int]
    titles: Tuple[str, str, str]

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def n_columns(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def column(self, axis: str) -> int:
        return getattr(self, f"{axis}_column")

    def values(self, axis: str) -> np.ndarray:
        """Float values of an axis column, ``nan`` for non-numeric cells."""
        col = self.column(axis)
        return np.array([_number_or_nan(row[col]) for row in self.rows], dtype=float)


def _number_or_nan(value: Any) -> float:
    number = as_number(value)
    return np.nan if number is None else number


# ----------------------------------------------------------------------
# cell cleanup
# ----------------------------------------------------------------------

def coerce_cell(value: Any) -> Any:
    """
    Normalise a single cell.

    Numbers (including numeric strings) become floats; other strings are
    stripped of whitespace and surrounding quotes; missing cells become ``''``.
    """
    if value is None:
        return ''
    if isinstance(value, (bool, np.bool_)):
        return str(value)
    if isinstance(value, (int, float, np.integer, np.floating)):
        return float(value)
    text = str(value).strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in '"\'':
        text = text[1:-1].strip()
    number = as_number(text)
    if number is not None:
        return number
    if text.lower() == 'nan':
        return float('nan')
    return text


def clean_rows(rows: Sequence[Sequence[Any]]) -> List[List[Any]]:
    """
    Coerce every cell and give all rows the same column count.

    Short rows are padded; an empty cell directly below a numeric cell
    becomes 0 so that a numeric column stays numeric.
    """
    cleaned = [[coerce_cell(cell) for cell in row] for row in rows]
    if not cleaned:
        return cleaned
    width = max(len(row) for row in cleaned)
    for row in cleaned:
        row.extend([''] * (width - len(row)))
    for previous, row in zip(cleaned, cleaned[1:]):
        for col, cell in enumerate(row):
            if cell == '' and isinstance(previous[col], float):
                row[col] = 0.0
    return cleaned


def detect_header(first_row: Sequence[Any], columns: Sequence[int]) -> bool:
    """A first row with a non-numeric cell in any axis column is a header."""
    return any(as_number(first_row[col]) is None
               for col in columns if 0 <= col < len(first_row))


def rightmost_numeric_column(row: Sequence[Any]) -> int:
    for col in range(len(row) - 1, -1, -1):
        if as_number(row[col]) is not None:
            return col
    return len(row) - 1


# ----------------------------------------------------------------------
# input conversion
# ----------------------------------------------------------------------

def rows_from_arrays(x1, x2, x3, labels=None) -> List[List[Any]]:
    """
    Transpose column arrays into rows ``[x1, x2, x3(, label)]``.

    Raises
    ------
    ValueError
        If the arrays have different lengths.
    """
    columns = [list(np.ravel(x1)), list(np.ravel(x2)), list(np.ravel(x3))]
    if labels is not None:
        columns.append(list(np.ravel(labels)))
    lengths = {len(c) for c in columns}
    if len(lengths) != 1:
        raise ValueError(f"Arrays must have the same length, got {sorted(lengths)}")
    return [list(row) for row in zip(*columns)]


def _split_input(data) -> Tuple[List[List[Any]], Optional[List[Any]]]:
    if isinstance(data, pd.DataFrame):
        return data.values.tolist(), [str(c) for c in data.columns]
    if isinstance(data, np.ndarray):
        if data.ndim != 2:
            raise ValueError(f"Expected a 2D array, got shape {data.shape}")
        return data.tolist(), None
    return [list(row) for row in data], None


def prepare_frame(data, x1_column: int = 0, x2_column: int = 1, x3_column: int = 2,
                  options: Optional[PlotOptions] = None) -> PreparedFrame:
    """
    Clean the input and resolve header, columns and fraction.

    Parameters
    ----------
    data : list of rows, 2D ndarray or pandas.DataFrame
        A DataFrame's column names are used as header row.
    x1_column, x2_column, x3_column : int
        Columns for the two plane axes (x1, x3) and the height (x2).
        Out-of-range columns are replaced by the right-most numeric one.
    options : PlotOptions, optional
        Uses ``header``, ``fraction``, ``color_column`` and the titles.

    Returns
    -------
    PreparedFrame

    Raises
    ------
    Plot3DKitError
        If there are no data rows.
    """
    options = options or PlotOptions()
    raw_rows, header_row = _split_input(data)
    rows = clean_rows(raw_rows)
    if not rows:
        raise Plot3DKitError("Dataframe is empty")

    width = len(rows[0])
    columns = [x1_column, x2_column, x3_column]
    for i, col in enumerate(columns):
        if not isinstance(col, (int, np.integer)) or not 0 <= col < width:
            replacement = rightmost_numeric_column(rows[-1])
            warnings.warn(f"Column {col!r} for {AXES[i]} is out of range "
                          f"(0..{width - 1}); using column {replacement}")
            columns[i] = replacement

    header = options.header
    if header_row is None:
        if header is None:
            header = detect_header(rows[0], columns)
        if header:
            header_row = rows[0]
            rows = rows[1:]
    if not rows:
        raise Plot3DKitError("Dataframe contains a header but no data rows")

    if options.fraction < 1:
        keep = max(min(3, len(rows)), int(len(rows) * options.fraction))
        rows = rows[:keep]

    color_column = options.color_column
    if color_column is not None and not 0 <= color_column < width:
        warnings.warn(f"Colour column {color_column} is out of range "
                      f"(0..{width - 1}); plotting without colours")
        color_column = None

    titles = []
    for axis, col in zip(AXES, columns):
        title = getattr(options, f"{axis}_title")
        if title is None:
            title = str(header_row[col]) if header_row is not None else axis
        titles.append(title)

    return PreparedFrame(rows=rows, header_row=header_row,
                         x1_column=columns[0], x2_column=columns[1],
                         x3_column=columns[2], color_column=color_column,
                         titles=tuple(titles))
