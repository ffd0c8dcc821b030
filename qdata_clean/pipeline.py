"""Cleaning pipeline: apply the selected cleaning steps to a table.

Steps always run in CLEANING_OPTIONS order, whatever order the caller lists
them in, because later steps must see the output of earlier ones
(normalization works on outlier-trimmed data).
"""

from pathlib import Path
from typing import Dict, Any, Iterable, List, Optional, Tuple, Union
import logging
import math

import pandas as pd

from .config import section
from .cleaning_utils import (
    _drop_fully_blank_rows,
    format_number,
    to_numeric_series,
)
from .data_loader import parse
from .data_profiler import DataProfiler, numeric_columns
from .errors import CleaningError, DegenerateColumnError
from .summary_stats import summarize

logger = logging.getLogger(__name__)

CLEANING_OPTIONS = (
    "remove_nulls",
    "remove_outliers",
    "normalize_numbers",
    "standardize_format",
    "aggregate_duplicates",
)

# ---------------------------------------------------------------------------
# Steps. Each takes a table, the cleaning config and the report and returns a
# new table; none of them mutates its input.
# ---------------------------------------------------------------------------


def _remove_nulls(df: pd.DataFrame, cfg: Dict[str, Any], report: Dict[str, Any]) -> pd.DataFrame:
    return _drop_fully_blank_rows(df)


def _iqr_keep_mask(df: pd.DataFrame, k: float, report: Dict[str, Any]) -> pd.Series:
    keep = pd.Series(True, index=df.index)
    for column in numeric_columns(df):
        nums = to_numeric_series(df[column])
        valid = nums.dropna()
        if len(valid) < 4:
            continue
        q1, q3 = valid.quantile(0.25), valid.quantile(0.75)
        iqr = q3 - q1
        lower, upper = float(q1 - k * iqr), float(q3 + k * iqr)
        report["outlier_bounds"][column] = {"lower": lower, "upper": upper}
        # NaN compares False on both sides, so non-numeric cells are kept
        outside = (nums < lower) | (nums > upper)
        if outside.any():
            logger.debug("%s: %d outliers outside [%g, %g]", column, int(outside.sum()), lower, upper)
        keep &= ~outside
    return keep


def _remove_outliers(df: pd.DataFrame, cfg: Dict[str, Any], report: Dict[str, Any]) -> pd.DataFrame:
    method = cfg.get("outlier_method", "iqr")
    if method == "tail":
        fraction = float(cfg.get("tail_fraction", 0.05))
        keep_n = math.floor(len(df) * (1.0 - fraction))
        return df.iloc[:keep_n].reset_index(drop=True)
    if method != "iqr":
        raise ValueError(f"outlier_method must be 'iqr' or 'tail', got {method!r}")
    if df.empty:
        return df.copy()
    keep = _iqr_keep_mask(df, float(cfg.get("iqr_multiplier", 1.5)), report)
    return df.loc[keep].reset_index(drop=True)


def _normalize_numbers(df: pd.DataFrame, cfg: Dict[str, Any], report: Dict[str, Any]) -> pd.DataFrame:
    decimals = int(cfg.get("decimals", 4))
    on_degenerate = cfg.get("degenerate_columns", "zero")
    out = df.copy()
    for column in numeric_columns(df):
        nums = to_numeric_series(df[column])
        valid = nums.dropna()
        lo, hi = float(valid.min()), float(valid.max())
        if hi == lo:
            if on_degenerate == "raise":
                raise DegenerateColumnError(column, lo)
            scaled = nums.where(nums.isna(), 0.0)
        else:
            scaled = (nums - lo) / (hi - lo)
        mask = scaled.notna()
        out.loc[mask, column] = scaled[mask].map(lambda v: format_number(v, decimals))
        report["normalized_columns"].append(column)
    return out


def _passthrough(df: pd.DataFrame, cfg: Dict[str, Any], report: Dict[str, Any]) -> pd.DataFrame:
    # accepted option with no transformation defined yet
    return df.copy()


_STEPS = {
    "remove_nulls": _remove_nulls,
    "remove_outliers": _remove_outliers,
    "normalize_numbers": _normalize_numbers,
    "standardize_format": _passthrough,
    "aggregate_duplicates": _passthrough,
}


def _ordered_steps(options: Iterable[str]) -> List[str]:
    selected = set()
    for opt in options:
        if opt not in _STEPS:
            raise ValueError(
                f"Unknown cleaning option {opt!r}; expected one of {', '.join(CLEANING_OPTIONS)}"
            )
        selected.add(opt)
    return [step for step in CLEANING_OPTIONS if step in selected]


def run_cleaning(
    df: pd.DataFrame,
    options: Optional[Iterable[str]] = None,
    config: Optional[Dict[str, Any]] = None,
) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    """Apply the selected cleaning steps and build a cleaning report.

    Parameters
    ----------
    df : pd.DataFrame
        Input table; never modified.
    options : iterable of str, optional
        Names from CLEANING_OPTIONS. Defaults to the configured options.
    config : dict, optional
        Full config dict (only the ``cleaning`` section is read).

    Returns
    -------
    (cleaned table, report) where report holds rows_before, rows_after, steps,
    rows_dropped, normalized_columns and outlier_bounds.

    Raises
    ------
    ValueError
        An option name is not in the catalog.
    CleaningError
        A step failed; its ``step`` attribute names it.
    """
    cfg = section(config, "cleaning")
    steps = _ordered_steps(cfg["options"] if options is None else options)

    report: Dict[str, Any] = {
        "rows_before": int(df.shape[0]),
        "rows_after": None,
        "steps": steps,
        "rows_dropped": {},
        "normalized_columns": [],
        "outlier_bounds": {},
    }

    current = df
    for step in steps:
        before = len(current)
        try:
            current = _STEPS[step](current, cfg, report)
        except CleaningError:
            raise
        except Exception as exc:
            raise CleaningError(step, str(exc)) from exc
        report["rows_dropped"][step] = before - len(current)
        logger.debug("%s: %d -> %d rows", step, before, len(current))

    if current is df:
        current = df.copy()
    report["rows_after"] = int(current.shape[0])
    logger.info(
        "cleaned %d -> %d rows with %s",
        report["rows_before"],
        report["rows_after"],
        ", ".join(steps) or "no steps",
    )
    return current, report


def clean(
    df: pd.DataFrame,
    options: Optional[Iterable[str]] = None,
    config: Optional[Dict[str, Any]] = None,
) -> pd.DataFrame:
    """Cleaned copy of ``df``; see run_cleaning."""
    return run_cleaning(df, options, config)[0]


def run_processing_pipeline(
    file_name: str,
    content: Union[str, bytes],
    *,
    options: Optional[Iterable[str]] = None,
    config: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Primary orchestrator: parse -> profile -> clean -> summarize.

    Returns
    -------
    dict with keys: raw_df, cleaned_df, profile, cleaning_report, statistics
    """
    raw_df = parse(Path(file_name).name, content)
    profile = DataProfiler().profile_dataframe(raw_df)
    cleaned_df, cleaning_report = run_cleaning(raw_df, options, config)
    statistics = {}
    for column in numeric_columns(cleaned_df):
        stats = summarize(cleaned_df, column)
        if stats is not None:
            statistics[column] = stats.to_dict()
    return {
        "raw_df": raw_df,
        "cleaned_df": cleaned_df,
        "profile": profile,
        "cleaning_report": cleaning_report,
        "statistics": statistics,
    }
