#!/usr/bin/env python3
"""
Colour values, colour-string parsing and heat colours.

Accepted colour notations:

* integers / numeric strings – ``0xRRGGBB`` values (``16711680`` is red)
* ``"0xff0000"`` and ``"#ff0000"`` (``"#f00"`` too)
* ``"rgb(255, 0, 0)"``, ``"rgb(100%, 0%, 0%)"`` or ``"rgb(1.0, 0.0, 0.0)"``
* ``"hsl(0, 1, 0.5)"`` (fractions) or ``"hsl(0, 100%, 50%)"`` (degrees/percent)

Anything else is *not* a colour; CSS colour names are deliberately
not recognised so that categorical labels such as ``"red"`` stay labels.
"""

import colorsys
import math
import numbers
import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple

import numpy as np
from matplotlib import colors as mcolors


HEAT_SATURATION = 0.95
HEAT_LIGHTNESS = 0.55
HEAT_HOT_HUE = 0.0
HEAT_COLD_HUE = 0.65

_FUNCTIONAL = re.compile(r'^(rgba?|hsla?)\((.*)\)$')


@dataclass(frozen=True)
class Color:
    """An RGB colour with float channels in [0, 1]."""
    r: float
    g: float
    b: float

    @classmethod
    def from_hsl(cls, h: float, s: float, l: float) -> 'Color':
        """Hue wraps around (``1.1`` equals ``0.1``); s and l are clamped."""
        s = min(max(s, 0.0), 1.0)
        l = min(max(l, 0.0), 1.0)
        r, g, b = colorsys.hls_to_rgb(h % 1.0, l, s)
        return cls(r, g, b)

    @classmethod
    def from_int(cls, value: int) -> 'Color':
        value = int(value)
        return cls(((value >> 16) & 255) / 255.0,
                   ((value >> 8) & 255) / 255.0,
                   (value & 255) / 255.0)

    @classmethod
    def from_hex(cls, text: str) -> 'Color':
        return cls(*mcolors.to_rgb(text))

    def to_hex(self) -> str:
        return mcolors.to_hex(self.as_tuple())

    def to_int(self) -> int:
        r, g, b = (int(round(c * 255)) for c in self.as_tuple())
        return (r << 16) + (g << 8) + b

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.r, self.g, self.b)


BLACK = Color(0.0, 0.0, 0.0)


# ----------------------------------------------------------------------
# parsing
# ----------------------------------------------------------------------

def _is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _from_number(value: float) -> Optional[Color]:
    if not math.isfinite(value) or value < 0 or value > 0xFFFFFF:
        return None
    return Color.from_int(math.floor(value))


def _components(body: str):
    parts = [p.strip() for p in body.split(',')]
    if len(parts) not in (3, 4) or any(not p for p in parts):
        return None
    return parts[:3]


def _parse_rgb(parts) -> Optional[Color]:
    values = []
    fractional = False
    for part in parts:
        try:
            if part.endswith('%'):
                values.append(float(part[:-1]) / 100.0)
                continue
            number = float(part)
        except ValueError:
            return None
        fractional = fractional or '.' in part
        values.append(number)
    plain = [v for p, v in zip(parts, values) if not p.endswith('%')]
    if plain and not (fractional and all(v <= 1.0 for v in plain)):
        values = [v / 255.0 if not p.endswith('%') else v
                  for p, v in zip(parts, values)]
    return Color(*(min(max(v, 0.0), 1.0) for v in values))


def _parse_hsl(parts) -> Optional[Color]:
    try:
        hue = float(parts[0].rstrip('°').replace('deg', ''))
        sat = float(parts[1].rstrip('%'))
        light = float(parts[2].rstrip('%'))
    except ValueError:
        return None
    if hue > 1.0 or hue < -1.0:
        hue /= 360.0
    if parts[1].endswith('%'):
        sat /= 100.0
    if parts[2].endswith('%'):
        light /= 100.0
    return Color.from_hsl(hue, sat, light)


def parse_color(value: Any) -> Optional[Color]:
    """
    Interpret *value* as a colour.

    Returns
    -------
    Color or None
        None when *value* is not a colour in any supported notation.
    """
    if isinstance(value, Color):
        return value
    if _is_real(value):
        return _from_number(float(value))
    if not isinstance(value, str):
        return None

    text = value.strip().lower()
    if not text:
        return None
    if text.startswith('#'):
        try:
            return Color.from_hex(text)
        except ValueError:
            return None
    if text.startswith('0x'):
        try:
            return _from_number(int(text, 16))
        except ValueError:
            return None

    match = _FUNCTIONAL.match(text.replace(' ', ''))
    if match:
        parts = _components(match.group(2))
        if parts is None:
            return None
        if match.group(1).startswith('rgb'):
            return _parse_rgb(parts)
        return _parse_hsl(parts)

    try:
        return _from_number(float(text))
    except ValueError:
        return None


def looks_like_color(value: Any) -> bool:
    """True for colour *strings* (numbers are never considered colour-like)."""
    return isinstance(value, str) and parse_color(value) is not None


# ----------------------------------------------------------------------
# heat colours
# ----------------------------------------------------------------------

def convert_to_heat(value: float, min_value: float = -1.0, max_value: float = 1.0,
                    hue_offset: float = 0.0) -> Color:
    """
    Map *value* onto the heat scale.

    ``max_value`` gets the hot hue (``0 + hue_offset``, red) and
    ``min_value`` the cold hue (``0.65 + hue_offset``, blue).  Values
    outside the range are clipped, a degenerate range maps to the middle
    of the scale and ``nan`` maps to the cold end.
    """
    span = max_value - min_value
    if span == 0 or not math.isfinite(span):
        position = 0.5
    else:
        position = (value - min_value) / span
    if not math.isfinite(position):
        position = 0.0
    position = min(max(position, 0.0), 1.0)
    hot = HEAT_HOT_HUE + hue_offset
    cold = HEAT_COLD_HUE + hue_offset
    hue = position * (hot - cold) + cold
    return Color.from_hsl(hue, HEAT_SATURATION, HEAT_LIGHTNESS)


def heat_colors(values: Iterable[float], min_value: float, max_value: float,
                hue_offset: float = 0.0) -> np.ndarray:
    """Vectorised :func:`convert_to_heat`; returns an array of shape ``values.shape + (3,)``."""
    values = np.asarray(values, dtype=float)
    flat = [convert_to_heat(v, min_value, max_value, hue_offset).as_tuple()
            for v in values.ravel()]
    return np.asarray(flat, dtype=float).reshape(values.shape + (3,))


def label_color(number: int, label_count: int, hue_offset: float = 0.0) -> Color:
    """Colour of the *number*-th label when *label_count* labels exist."""
    hue = number / max(label_count, 1) + hue_offset
    return Color.from_hsl(hue, HEAT_SATURATION, HEAT_LIGHTNESS)


def colors_to_array(colors) -> np.ndarray:
    """Stack a list of ``Color`` into an ``(n, 3)`` float array."""
    if not colors:
        return np.zeros((0, 3))
    return np.asarray([c.as_tuple() for c in colors], dtype=float)
