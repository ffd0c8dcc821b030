"""Data cleaning package: parsing, column profiling, cleaning, statistics and export.

Public entry points:
    parse(file_name, content)                 -> table (object-dtype DataFrame)
    profile(table)                            -> list of ColumnProfile
    clean(table, options, config=None)        -> cleaned table
    summarize(table, column)                  -> SummaryStats or None
    serialize(table, fmt, options=None, ...)  -> CSV/JSON text (bytes if compressed)
    run_processing_pipeline(file_name, content, options=..., config=...)

Cleaning options (always applied in this order):
    remove_nulls, remove_outliers, normalize_numbers, standardize_format, aggregate_duplicates
"""

__version__ = "0.1.0"

from .data_loader import parse, load_file  # noqa: F401
from .data_profiler import ColumnProfile, DataProfiler, profile  # noqa: F401
from .pipeline import CLEANING_OPTIONS, clean, run_cleaning, run_processing_pipeline  # noqa: F401
from .summary_stats import SummaryStats, summarize  # noqa: F401
from .exporter import ExportOptions, serialize  # noqa: F401
from .errors import (  # noqa: F401
    CleaningError,
    DegenerateColumnError,
    ParseError,
    QDataError,
    UnsupportedFormatError,
)

__all__ = [
    "parse",
    "load_file",
    "profile",
    "ColumnProfile",
    "DataProfiler",
    "CLEANING_OPTIONS",
    "clean",
    "run_cleaning",
    "run_processing_pipeline",
    "summarize",
    "SummaryStats",
    "serialize",
    "ExportOptions",
    "QDataError",
    "UnsupportedFormatError",
    "ParseError",
    "CleaningError",
    "DegenerateColumnError",
]
