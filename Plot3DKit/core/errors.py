#!/usr/bin/env python3
"""
Exception hierarchy for Plot3DKit.

All errors derive from ``ValueError`` so callers that already guard
bad input with ``except ValueError`` keep working.
"""

from typing import Any, Optional


class Plot3DKitError(ValueError):
    """Base class for every error raised by the plotting pipeline."""


class FormulaError(Plot3DKitError):
    """A formula could not be tokenized, parsed or evaluated."""

    def __init__(self, message: str, position: Optional[int] = None,
                 source: str = ""):
        self.message = message
        self.position = position
        self.source = source
        super().__init__(self._format())

    def _format(self) -> str:
        if self.position is None:
            return self.message
        text = f"{self.message} (at position {self.position})"
        if self.source:
            text += f"\n  {self.source}\n  {' ' * self.position}^"
        return text


class NormalizationError(Plot3DKitError):
    """A column meant to be numeric starts with a non-numeric value."""

    def __init__(self, column: int, value: Any):
        self.column = column
        self.value = value
        super().__init__(
            f"Column {column} is not numeric (first value: {value!r}). "
            f"Check the selected column and the separator."
        )


class ColorClassificationError(Plot3DKitError):
    """No colouring policy could be chosen for a colour column."""

    def __init__(self, column: int, value: Any, attempts: int):
        self.column = column
        self.value = value
        self.attempts = attempts
        super().__init__(
            f"Could not classify colour column {column} "
            f"(sample {value!r}) after {attempts} attempts"
        )
