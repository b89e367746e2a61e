#!/usr/bin/env python3
"""
Configuration objects.

Contains:
- Dimensions: grid resolution and axis lengths of the plot volume
- PlotOptions: per-call plotting options

Both can be created from plain dictionaries (``from_dict``) or from
``PLOT3DKIT_*`` environment variables (``from_env``).
"""

import os
import warnings
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Optional


ENV_X_RES = "PLOT3DKIT_X_RES"
ENV_Z_RES = "PLOT3DKIT_Z_RES"
ENV_HUE_OFFSET = "PLOT3DKIT_HUE_OFFSET"
ENV_DEFAULT_COLOR = "PLOT3DKIT_DEFAULT_COLOR"
ENV_BAR_SIZE_THRESHOLD = "PLOT3DKIT_BAR_SIZE_THRESHOLD"
ENV_SOM_EPOCHS = "PLOT3DKIT_SOM_EPOCHS"
ENV_SEED = "PLOT3DKIT_SEED"
ENV_NO_NORMALIZE = "PLOT3DKIT_NO_NORMALIZE"
ENV_QUIET = "PLOT3DKIT_QUIET"

MODES = (
    'scatterplot',
    'lineplot',
    'barchart',
    'polygon',
    'interpolatedpolygon',
    'selforganizingmap',
)


def _env_flag(name: str) -> bool:
    value = os.environ.get(name, "")
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _env_value(name: str, cast):
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name}={raw!r} is not a valid {cast.__name__}")


# ----------------------------------------------------------------------
# dimensions
# ----------------------------------------------------------------------

@dataclass
class Dimensions:
    """Resolution and size of the plotting volume."""
    x_res: int = 20
    z_res: int = 20
    x_len: float = 1.0
    y_len: float = 1.0
    z_len: float = 1.0

    def __post_init__(self):
        for name in ('x_res', 'z_res'):
            value = getattr(self, name)
            if int(value) != value or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
            setattr(self, name, int(value))
        for name in ('x_len', 'y_len', 'z_len'):
            if not getattr(self, name) > 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)!r}")

    @property
    def x_vertices(self) -> int:
        return self.x_res + 1

    @property
    def z_vertices(self) -> int:
        return self.z_res + 1

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'Dimensions':
        """Create from dictionary; accepts ``xRes``-style keys too."""
        aliases = {'xRes': 'x_res', 'zRes': 'z_res', 'xLen': 'x_len',
                   'yLen': 'y_len', 'zLen': 'z_len'}
        return cls(**{aliases.get(k, k): v for k, v in data.items()})

    @classmethod
    def from_env(cls, **overrides) -> 'Dimensions':
        """Defaults, then ``PLOT3DKIT_X_RES`` / ``PLOT3DKIT_Z_RES``, then *overrides*."""
        values: Dict[str, Any] = {}
        for key, env_name in (('x_res', ENV_X_RES), ('z_res', ENV_Z_RES)):
            value = _env_value(env_name, int)
            if value is not None:
                values[key] = value
        values.update(overrides)
        return cls(**values)


# ----------------------------------------------------------------------
# plot options
# ----------------------------------------------------------------------

# camelCase option names (colorCol, keepOldPlot, ...)
OPTION_ALIASES = {
    'colorCol': 'color_column',
    'colorColumn': 'color_column',
    'defaultColor': 'default_color',
    'hueOffset': 'hue_offset',
    'normalizeX1': 'normalize_x1',
    'normalizeX2': 'normalize_x2',
    'normalizeX3': 'normalize_x3',
    'keepOldPlot': 'keep_old_plot',
    'updateOldData': 'update_old_data',
    'filterColor': 'filter_color',
    'barchartPadding': 'barchart_padding',
    'barSizeThreshold': 'bar_size_threshold',
    'dataPointSize': 'data_point_size',
    'gapThreshold': 'gap_threshold',
    'somEpochs': 'som_epochs',
    'somRadius': 'som_radius',
    'x1title': 'x1_title',
    'x2title': 'x2_title',
    'x3title': 'x3_title',
}


@dataclass
class PlotOptions:
    """
    Options for a single plot call.

    Invalid numeric settings are reset to their default with a warning
    rather than rejected, so a plot is always produced.
    """
    mode: Optional[str] = None          # None = "polygon" for formulas, "scatterplot" otherwise
    color_column: Optional[int] = None
    default_color: Any = "#000000"
    labeled: bool = False
    header: Optional[bool] = None       # None = auto-detect
    hue_offset: float = 0.0
    normalize: bool = True
    normalize_x1: Optional[bool] = None  # None = follow ``normalize``
    normalize_x2: Optional[bool] = None
    normalize_x3: Optional[bool] = None
    keep_old_plot: bool = False
    update_old_data: bool = True
    filter_color: bool = True
    fraction: float = 1.0
    barchart_padding: float = 0.5
    bar_size_threshold: float = 0.0
    data_point_size: float = 0.04
    gap_threshold: float = 0.25
    som_epochs: int = 80
    som_radius: float = 0.5
    seed: Optional[int] = None
    title: str = ""
    x1_title: Optional[str] = None
    x2_title: Optional[str] = None
    x3_title: Optional[str] = None

    def __post_init__(self):
        if self.mode is not None:
            self.mode = str(self.mode).strip().lower()
        if self.color_column is False or self.color_column == -1:
            self.color_column = None

        if not 0 <= self.barchart_padding < 1:
            warnings.warn(f"barchart_padding must be in [0, 1), got "
                          f"{self.barchart_padding}; using 0")
            self.barchart_padding = 0.0
        if not 0 <= self.bar_size_threshold <= 1:
            warnings.warn(f"bar_size_threshold must be in [0, 1], got "
                          f"{self.bar_size_threshold}; using 0")
            self.bar_size_threshold = 0.0
        if not 0 < self.fraction <= 1:
            warnings.warn(f"fraction must be in (0, 1], got {self.fraction}; using 1")
            self.fraction = 1.0
        if not self.data_point_size > 0:
            warnings.warn(f"data_point_size must be positive, got "
                          f"{self.data_point_size}; using 0.04")
            self.data_point_size = 0.04
        if not self.gap_threshold > 0:
            warnings.warn(f"gap_threshold must be positive, got "
                          f"{self.gap_threshold}; using 0.25")
            self.gap_threshold = 0.25
        if int(self.som_epochs) != self.som_epochs or self.som_epochs < 1:
            raise ValueError(f"som_epochs must be a positive integer, got {self.som_epochs!r}")
        if not self.som_radius > 0:
            raise ValueError(f"som_radius must be positive, got {self.som_radius!r}")

    def normalizes(self, axis: str) -> bool:
        """Whether axis ``'x1'``, ``'x2'`` or ``'x3'`` is normalized."""
        override = getattr(self, f"normalize_{axis}")
        return self.normalize if override is None else bool(override)

    def replace(self, **changes) -> 'PlotOptions':
        """Return a copy with *changes* applied."""
        return replace(self, **changes)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'PlotOptions':
        """
        Create from dictionary.

        Both snake_case field names and their camelCase spellings
        (``colorCol``, ``keepOldPlot``, ...) are accepted.
        """
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            name = OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown plot option '{key}'. "
                                 f"Available: {', '.join(sorted(known))}")
            values[name] = value
        return cls(**values)

    @classmethod
    def from_env(cls, **overrides) -> 'PlotOptions':
        """Defaults, then ``PLOT3DKIT_*`` variables, then *overrides*."""
        values: Dict[str, Any] = {}
        for key, env_name, cast in (
            ('hue_offset', ENV_HUE_OFFSET, float),
            ('default_color', ENV_DEFAULT_COLOR, str),
            ('bar_size_threshold', ENV_BAR_SIZE_THRESHOLD, float),
            ('som_epochs', ENV_SOM_EPOCHS, int),
            ('seed', ENV_SEED, int),
        ):
            value = _env_value(env_name, cast)
            if value is not None:
                values[key] = value
        if _env_flag(ENV_NO_NORMALIZE):
            values['normalize'] = False
        values.update(overrides)
        return cls.from_dict(values)


def quiet_from_env() -> bool:
    """True when ``PLOT3DKIT_QUIET`` asks for silent progress output."""
    return _env_flag(ENV_QUIET)
