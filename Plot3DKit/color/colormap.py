#!/usr/bin/env python3
"""
Colour/label mapper – one colour per dataframe row.

The colour column is classified into one of four policies:

``DEFAULT``   no colour column, every row gets the default colour
``LABELED``   categorical labels, one hue per distinct label
``EXPLICIT``  colour strings (``#rrggbb``, ``rgb()``, ``hsl()``)
``HEATMAP``   numbers, mapped onto the heat scale between min and max
``HEX``       numbers taken as ``0xRRGGBB`` values (``filter_color=False``)

Classification is a small state machine: when the sample value fits no
policy the mapper warns and retries, first assuming the first row is a
header, then treating the column as labels.  A header found this way is
only kept when the retry ends in colours or numbers; labels colour every
row, the first one included.
"""

import math
import numbers
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

import numpy as np

from Plot3DKit.color.colors import (Color, colors_to_array, convert_to_heat,
                                    label_color, looks_like_color, parse_color)
from Plot3DKit.core.errors import ColorClassificationError, Plot3DKitError
from Plot3DKit.core.normalization import Bounds, get_min_max


MAX_CLASSIFY_ATTEMPTS = 3


class ColorPolicy(Enum):
    DEFAULT = "default"
    LABELED = "labeled"
    EXPLICIT = "explicit"
    HEATMAP = "heatmap"
    HEX = "hex"


# ----------------------------------------------------------------------
# label map
# ----------------------------------------------------------------------

@dataclass
class LabelEntry:
    number: int
    color: Optional[Color] = None


def _label_key(label: Any) -> str:
    if isinstance(label, float) and label.is_integer():
        return str(int(label))
    return str(label).strip()


class LabelMap:
    """
    Ordered mapping ``label -> LabelEntry``.

    Labels are numbered in order of first sighting.  Entries are only
    ever added, and a colour, once assigned, never changes.
    """

    def __init__(self):
        self._entries: Dict[str, LabelEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, label: Any) -> bool:
        return _label_key(label) in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __getitem__(self, label: Any) -> LabelEntry:
        return self._entries[_label_key(label)]

    def items(self):
        return self._entries.items()

    def add(self, label: Any) -> LabelEntry:
        key = _label_key(label)
        entry = self._entries.get(key)
        if entry is None:
            entry = LabelEntry(number=len(self._entries))
            self._entries[key] = entry
        return entry

    def assign_colors(self, hue_offset: float = 0.0) -> None:
        """Give every colourless label a hue spread over the current label count."""
        total = len(self._entries)
        for entry in self._entries.values():
            if entry.color is None:
                entry.color = label_color(entry.number, total, hue_offset)

    def color_of(self, label: Any) -> Optional[Color]:
        entry = self._entries.get(_label_key(label))
        return entry.color if entry else None

    def copy(self) -> 'LabelMap':
        clone = LabelMap()
        clone._entries = {k: LabelEntry(v.number, v.color) for k, v in self._entries.items()}
        return clone

    def to_dict(self) -> dict:
        """Legend-friendly ``{label: {"number": n, "color": "#rrggbb"}}``."""
        return {key: {'number': entry.number,
                      'color': entry.color.to_hex() if entry.color else None}
                for key, entry in self._entries.items()}


# ----------------------------------------------------------------------
# classification
# ----------------------------------------------------------------------

@dataclass
class Classified:
    policy: ColorPolicy
    header: bool
    labeled: bool


@dataclass
class NeedsRetry:
    reason: str
    header: bool
    labeled: bool


def _is_number(value: Any) -> bool:
    return (isinstance(value, numbers.Real) and not isinstance(value, bool)
            and not math.isnan(value))


def classify_color_column(rows: Sequence[Sequence[Any]], column: Optional[int],
                          labeled: bool = False, header: bool = False,
                          filter_color: bool = True) -> Union[Classified, NeedsRetry]:
    """
    Decide how the colour column is to be interpreted.

    Returns
    -------
    Classified or NeedsRetry
        ``NeedsRetry`` carries the reason and the assumptions to retry with.
    """
    first = 1 if header else 0
    if column is None or len(rows) <= first:
        return Classified(ColorPolicy.DEFAULT, header, labeled)
    if labeled:
        return Classified(ColorPolicy.LABELED, header, labeled)

    sample = rows[first][column]
    if looks_like_color(sample):
        return Classified(ColorPolicy.EXPLICIT, header, labeled)
    if _is_number(sample):
        policy = ColorPolicy.HEATMAP if filter_color else ColorPolicy.HEX
        return Classified(policy, header, labeled)

    if not header and len(rows) >= 2:
        return NeedsRetry(
            f"Colour column {column} starts with {sample!r}, which is neither a "
            f"number nor a colour; assuming the first row is a header",
            header=True, labeled=False)
    return NeedsRetry(
        f"Colour column {column} ({sample!r}) is neither numeric nor a colour; "
        f"treating it as labels (pass labeled=True to silence this)",
        header=header, labeled=True)


# ----------------------------------------------------------------------
# mapping
# ----------------------------------------------------------------------

@dataclass
class ColorMap:
    """Result of :func:`get_color_map`."""
    colors: List[Color]
    label_map: LabelMap
    policy: ColorPolicy
    header: bool = False
    bounds: Optional[Bounds] = None

    @property
    def label_count(self) -> int:
        return len(self.label_map)

    def as_array(self) -> np.ndarray:
        return colors_to_array(self.colors)


def get_color_map(rows: Sequence[Sequence[Any]], color_column: Optional[int],
                  default_color: Any = "#000000", labeled: bool = False,
                  header: bool = False, hue_offset: float = 0.0,
                  label_map: Optional[LabelMap] = None, filter_color: bool = True,
                  previous_bounds: Optional[Bounds] = None,
                  keep_old: bool = False) -> ColorMap:
    """
    Compute one colour per row.

    Parameters
    ----------
    rows : sequence of rows
        Dataframe rows (header already removed unless *header* is True).
    color_column : int or None
        Column that drives the colour, None for a uniform colour.
    default_color : colour-like
        Used without a colour column and for unparseable cells.
    labeled : bool
        Treat the column as categorical labels.
    header : bool
        Whether ``rows[0]`` is a header row (it then gets the default colour).
    hue_offset : float
        Rotates every generated hue.
    label_map : LabelMap, optional
        Existing labels; updated in place so labels keep their colour
        across plots.  A new map is used when omitted.
    filter_color : bool
        Map numbers onto the heat scale (True) or read them as ``0xRRGGBB``.
    previous_bounds, keep_old
        Heat-scale bounds of an earlier plot, widened instead of replaced
        when *keep_old* is set.

    Returns
    -------
    ColorMap
    """
    default = parse_color(default_color)
    if default is None:
        raise Plot3DKitError(f"Invalid default_color {default_color!r}")
    if label_map is None:
        label_map = LabelMap()
    if color_column is not None and rows and not 0 <= color_column < len(rows[0]):
        warnings.warn(f"Colour column {color_column} is out of range "
                      f"(0..{len(rows[0]) - 1}); using the default colour")
        color_column = None

    state_labeled, state_header = labeled, header
    for _ in range(MAX_CLASSIFY_ATTEMPTS):
        result = classify_color_column(rows, color_column, state_labeled,
                                       state_header, filter_color)
        if isinstance(result, Classified):
            break
        warnings.warn(result.reason)
        state_labeled, state_header = result.labeled, result.header
    else:
        first = 1 if state_header else 0
        sample = rows[first][color_column] if len(rows) > first else None
        raise ColorClassificationError(color_column, sample, MAX_CLASSIFY_ATTEMPTS)

    policy = result.policy
    # only a header retry that ends in colours or numbers reveals a header;
    # labels colour every row, the first one included
    header_found = result.header and policy in (ColorPolicy.EXPLICIT,
                                                ColorPolicy.HEATMAP,
                                                ColorPolicy.HEX)
    first = 1 if header_found or header else 0
    colors = [default] * min(first, len(rows))
    data = rows[first:]
    bounds = None

    if policy is ColorPolicy.DEFAULT:
        colors += [default] * len(data)

    elif policy is ColorPolicy.LABELED:
        sample = data[0][color_column]
        if looks_like_color(sample):
            warnings.warn(f"Label {sample!r} looks like a colour; pass "
                          f"labeled=False to use the colours directly")
        for row in data:
            label_map.add(row[color_column])
        label_map.assign_colors(hue_offset)
        colors += [label_map.color_of(row[color_column]) for row in data]

    elif policy is ColorPolicy.EXPLICIT:
        failed = 0
        for row in data:
            color = parse_color(row[color_column])
            if color is None:
                failed += 1
                color = default
            colors.append(color)
        if failed:
            warnings.warn(f"{failed} value(s) in colour column {color_column} "
                          f"are not colours; using the default colour for them")

    elif policy is ColorPolicy.HEATMAP:
        bounds = get_min_max(data, color_column, previous_bounds, keep_old)
        for row in data:
            value = row[color_column]
            if _is_number(value):
                colors.append(convert_to_heat(value, bounds.min, bounds.max, hue_offset))
            else:
                colors.append(default)

    else:
        for row in data:
            value = row[color_column]
            color = parse_color(value) if _is_number(value) else None
            colors.append(color or default)

    return ColorMap(colors=colors, label_map=label_map, policy=policy,
                    header=header_found or header, bounds=bounds)
