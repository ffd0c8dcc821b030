"""Cell-level helpers shared by the parser, profiler and cleaning steps.

Only the pieces the pipeline needs:
  - Header naming (build_headers, _dedupe_headers)
  - Missing-value detection (missing_mask, _drop_fully_blank_rows)
  - Numeric coercion (to_numeric_series, is_numeric_candidate)
  - Cell rendering for text output (format_number, format_cell)

A cell is missing (None, NaN or ""), numeric (a finite number or a string
pandas converts to one) or text. Numeric convertibility is resolved per
column in one vectorized pass, so callers never test cells one by one.
"""

from __future__ import annotations

from typing import Any, Dict, List
import json
import math

import numpy as np
import pandas as pd


def _is_missing_scalar(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, (list, tuple, dict, set)):
        return False
    return bool(pd.isna(value))


def missing_mask(series: pd.Series) -> pd.Series:
    """Boolean mask of missing cells (None, NaN or empty string)."""
    if series.empty:
        return pd.Series(False, index=series.index, dtype=bool)
    return series.map(_is_missing_scalar).astype(bool)


def _drop_fully_blank_rows(df: pd.DataFrame) -> pd.DataFrame:
    """Drop rows where every value is missing; surviving rows keep their order."""
    if df.shape[1] == 0:
        # a row with no values at all is blank
        return df.iloc[0:0].reset_index(drop=True)
    if df.empty:
        return df.copy()
    is_blank = df.apply(missing_mask, axis=0)
    keep_mask = ~is_blank.all(axis=1)
    return df.loc[keep_mask].reset_index(drop=True)


def to_numeric_series(series: pd.Series) -> pd.Series:
    """Float view of a column; NaN where the cell is missing or not numeric."""
    out = pd.Series(np.nan, index=series.index, dtype=float)
    if series.empty:
        return out
    # bools are text, matching how they render
    keep = [
        not (_is_missing_scalar(v) or isinstance(v, (bool, np.bool_)))
        for v in series.tolist()
    ]
    present = series[keep]
    if present.empty:
        return out
    as_text = present.map(lambda v: v if isinstance(v, (int, float)) else str(v).strip())
    nums = pd.to_numeric(as_text, errors="coerce").astype(float)
    nums = nums.replace([np.inf, -np.inf], np.nan)
    out.loc[nums.index] = nums
    return out


def is_numeric_candidate(series: pd.Series) -> bool:
    """True when at least one non-missing cell converts to a number."""
    return bool(to_numeric_series(series).notna().any())


def format_number(value: float, decimals: int = 4) -> str:
    return f"{value:.{decimals}f}"


def format_cell(value: Any) -> str:
    """Render a cell the way it should appear in delimited text."""
    if _is_missing_scalar(value):
        return ""
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return str(int(value))
    if isinstance(value, np.generic):
        return str(value.item())
    if isinstance(value, (list, dict)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _dedupe_headers(headers: List[str]) -> List[str]:
    seen: Dict[str, int] = {}
    out: List[str] = []
    for h in headers:
        if h in seen:
            seen[h] += 1
            out.append(f"{h}_{seen[h]}")
        else:
            seen[h] = 0
            out.append(h)
    return out


def build_headers(raw: List[str]) -> List[str]:
    """Trim header names, name blanks Column_<n> and de-duplicate."""
    headers: List[str] = []
    for i, val in enumerate(raw):
        s = str(val).strip()
        headers.append(s or f"Column_{i+1}")
    return _dedupe_headers(headers)


__all__ = [
    "build_headers",
    "missing_mask",
    "_drop_fully_blank_rows",
    "to_numeric_series",
    "is_numeric_candidate",
    "format_number",
    "format_cell",
]
