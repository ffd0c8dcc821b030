"""Exception types raised by the parsing, cleaning and export layers."""

from __future__ import annotations

from typing import Optional


class QDataError(Exception):
    """Base class for every error raised by qdata_clean."""


class UnsupportedFormatError(QDataError, ValueError):
    """File extension or export format is not handled by the core."""


class ParseError(QDataError, ValueError):
    """Content does not conform to its declared format."""


class CleaningError(QDataError):
    """A cleaning step failed; no partial result is produced."""

    def __init__(self, step: str, message: str) -> None:
        super().__init__(f"{step}: {message}")
        self.step = step


class DegenerateColumnError(CleaningError):
    """Min-max normalization hit a constant column."""

    def __init__(self, column: str, value: Optional[float] = None) -> None:
        detail = f"column '{column}' is constant"
        if value is not None:
            detail += f" (every value is {value:g})"
        super().__init__("normalize_numbers", detail)
        self.column = column
