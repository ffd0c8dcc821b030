"""Render a table as CSV text or a JSON document for download.

CSV output does not quote values, so a cell containing a comma or newline
produces a row with a shifted column count. This mirrors the parser, which
does not understand quoting either.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import io
import json
import logging
import zipfile

import numpy as np
import pandas as pd

from .cleaning_utils import _is_missing_scalar, format_cell
from .errors import UnsupportedFormatError
from .summary_stats import summarize_numeric_columns

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("csv", "json")
EXTERNAL_FORMATS = ("xlsx", "png")


@dataclass(frozen=True)
class ExportOptions:
    include_metadata: bool = True
    include_statistics: bool = False
    compress: bool = False

    @classmethod
    def from_config(cls, cfg: Optional[Dict[str, Any]]) -> "ExportOptions":
        cfg = cfg or {}
        return cls(
            include_metadata=bool(cfg.get("include_metadata", True)),
            include_statistics=bool(cfg.get("include_statistics", False)),
            compress=bool(cfg.get("compress", False)),
        )


def export_file_name(name: str, fmt: str, when: Optional[datetime] = None) -> str:
    """``<base>_processed_<YYYY-MM-DD>.<fmt>`` for an uploaded file name."""
    when = when or datetime.now(timezone.utc)
    base = Path(name).stem if Path(name).suffix else name
    return f"{base}_processed_{when.strftime('%Y-%m-%d')}.{fmt}"


def format_file_size(size: int) -> str:
    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    i = 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {units[i]}"


def _to_csv(df: pd.DataFrame) -> str:
    if df.empty:
        return ""
    headers = [str(c) for c in df.columns]
    lines = [",".join(headers)]
    for row in df.itertuples(index=False, name=None):
        lines.append(",".join(format_cell(v) for v in row))
    return "\n".join(lines)


def _json_default(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, (datetime, pd.Timestamp)):
        return value.isoformat()
    return str(value)


def table_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Row dicts with missing cells (None/NaN) as None; empty strings kept."""
    if df.empty:
        return []
    return [
        {
            str(k): (None if _is_missing_scalar(v) and not isinstance(v, str) else v)
            for k, v in row.items()
        }
        for row in df.astype(object).to_dict(orient="records")
    ]


def estimate_export_size(df: pd.DataFrame) -> int:
    """Bytes of the compact JSON encoding of the rows, as a download size hint."""
    text = json.dumps(
        table_records(df), separators=(",", ":"), default=_json_default, ensure_ascii=False
    )
    return len(text.encode("utf-8"))


def _to_json(
    df: pd.DataFrame, opts: ExportOptions, name: str, processed: bool, when: datetime
) -> str:
    doc: Dict[str, Any] = {}
    if opts.include_metadata:
        doc["metadata"] = {
            "originalFile": name,
            "processedAt": when.isoformat(),
            "recordCount": int(len(df)),
            "processed": bool(processed),
        }
    if opts.include_statistics:
        doc["statistics"] = {
            column: stats.to_dict()
            for column, stats in summarize_numeric_columns(df).items()
        }
    doc["data"] = table_records(df)
    return json.dumps(doc, indent=2, default=_json_default, ensure_ascii=False)


def _zip(entry_name: str, text: str) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(entry_name, text)
    return buf.getvalue()


def serialize(
    df: pd.DataFrame,
    fmt: str,
    options: Optional[ExportOptions] = None,
    *,
    name: str = "data",
    processed: bool = False,
    when: Optional[datetime] = None,
) -> Union[str, bytes]:
    """Serialize a table to ``fmt`` ('csv' or 'json').

    Metadata and statistics only apply to JSON. With ``compress`` the
    document is returned as the bytes of a ZIP archive holding one file.

    Raises
    ------
    UnsupportedFormatError
        ``fmt`` is not csv/json (xlsx and png need external renderers).
    """
    opts = options or ExportOptions()
    fmt = fmt.lower()
    if fmt in EXTERNAL_FORMATS:
        raise UnsupportedFormatError(f"{fmt} export needs an external renderer")
    if fmt not in EXPORT_FORMATS:
        raise UnsupportedFormatError(f"Unsupported export format: {fmt}")

    when = when or datetime.now(timezone.utc)
    if fmt == "csv":
        if opts.include_metadata or opts.include_statistics:
            logger.debug("metadata/statistics options are ignored for csv export")
        text = _to_csv(df)
    else:
        text = _to_json(df, opts, name, processed, when)

    if opts.compress:
        return _zip(export_file_name(name, fmt, when), text)
    return text
