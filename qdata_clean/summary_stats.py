"""Descriptive statistics and chart points for one column of a table."""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from .cleaning_utils import missing_mask, to_numeric_series


@dataclass(frozen=True)
class SummaryStats:
    count: int
    mean: float
    median: float
    min: float
    max: float
    std: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def summarize(df: pd.DataFrame, column: str) -> Optional[SummaryStats]:
    """Statistics over the numeric cells of ``column``.

    Missing and non-numeric cells are skipped. Returns None (no data) when
    the column is absent or holds no numeric value. The median is the upper
    median (``sorted[n // 2]``) and the standard deviation is the
    population one (divides by n).
    """
    if column not in df.columns:
        return None
    values = to_numeric_series(df[column]).dropna().to_numpy(dtype=float)
    if values.size == 0:
        return None

    ordered = np.sort(values)
    return SummaryStats(
        count=int(values.size),
        mean=float(values.mean()),
        median=float(ordered[values.size // 2]),
        min=float(ordered[0]),
        max=float(ordered[-1]),
        std=float(values.std(ddof=0)),
    )


def summarize_numeric_columns(df: pd.DataFrame) -> Dict[str, SummaryStats]:
    out: Dict[str, SummaryStats] = {}
    for column in df.columns:
        stats = summarize(df, column)
        if stats is not None:
            out[str(column)] = stats
    return out


def prepare_chart_data(
    df: pd.DataFrame, x: Optional[str], y: Optional[str], limit: int = 100
) -> List[Dict[str, Any]]:
    """(x, y) points for the charting layer, capped at the first ``limit`` rows.

    x falls back to the row position when the cell is missing; y falls back
    to 0 when the cell is missing or not numeric.
    """
    if not x or not y or x not in df.columns or y not in df.columns:
        return []

    head = df.iloc[:limit]
    xs = head[x]
    x_missing = missing_mask(xs)
    ys = to_numeric_series(head[y]).fillna(0.0)
    points = []
    for i, (xv, is_missing, yv) in enumerate(zip(xs.tolist(), x_missing.tolist(), ys.tolist())):
        points.append({"x": i if is_missing else xv, "y": yv, "name": f"Point {i + 1}"})
    return points
