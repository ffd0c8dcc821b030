from dataclasses import dataclass, asdict
from typing import Dict, Any, List

import pandas as pd

from .cleaning_utils import is_numeric_candidate, missing_mask

NUMERIC = "numeric"
TEXT = "text"


@dataclass(frozen=True)
class ColumnProfile:
    name: str
    inferred_type: str
    missing_count: int
    distinct_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class DataProfiler:
    """Profiling engine producing per-column metadata and a quality score.

    Columns are the union of keys across all rows in order of first
    appearance; a row without a key counts as missing for that column.
    Profiles are recomputed on every call and never cached.
    """

    def profile_dataframe(self, df: pd.DataFrame) -> Dict[str, Any]:
        """Generate the profile payload for a table."""

        return {
            "dataset_info": self._get_dataset_info(df),
            "columns": [p.to_dict() for p in self.profile_columns(df)],
            "quality_score": self.quality_score(df),
        }

    def profile_columns(self, df: pd.DataFrame) -> List[ColumnProfile]:
        if df.empty:
            return []
        return [self._profile_column(df[column]) for column in df.columns]

    def _get_dataset_info(self, df: pd.DataFrame) -> Dict[str, Any]:
        return {
            "total_rows": len(df),
            "total_columns": len(df.columns),
            "column_names": [str(c) for c in df.columns],
        }

    def _profile_column(self, series: pd.Series) -> ColumnProfile:
        missing = missing_mask(series)
        present = series[~missing]
        numeric = is_numeric_candidate(series)
        return ColumnProfile(
            name=str(series.name),
            inferred_type=NUMERIC if numeric else TEXT,
            missing_count=int(missing.sum()),
            # exact equality: "1" and 1 are different values
            distinct_count=len(set(present.tolist())),
        )

    def quality_score(self, df: pd.DataFrame) -> int:
        """Percentage of rows without any missing value."""

        if df.empty:
            return 0
        complete = ~df.apply(missing_mask, axis=0).any(axis=1)
        return int(round(complete.sum() / len(df) * 100))


def profile(df: pd.DataFrame) -> List[ColumnProfile]:
    """Per-column profiles of a table, in column order."""
    return DataProfiler().profile_columns(df)


def all_columns(df: pd.DataFrame) -> List[str]:
    return [str(c) for c in df.columns] if len(df) else []


def numeric_columns(df: pd.DataFrame) -> List[str]:
    return [p.name for p in profile(df) if p.inferred_type == NUMERIC]


def quality_score(df: pd.DataFrame) -> int:
    return DataProfiler().quality_score(df)
