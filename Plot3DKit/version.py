"""Single source of truth for the Plot3DKit version."""

__version__ = "0.3.0"
