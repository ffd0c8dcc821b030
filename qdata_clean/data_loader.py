"""Turn uploaded CSV / JSON content into a table (an object-dtype DataFrame).

CSV handling is deliberately permissive and simple: the content is split on
newlines and commas with no quoting or escaping support, so a value that
contains a comma cannot be represented. Short lines are padded with empty
strings and long lines are truncated to the header width.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Union
import json
import logging

import pandas as pd

from .cleaning_utils import build_headers
from .errors import ParseError, UnsupportedFormatError

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("csv", "json")


def detect_format(file_name: str) -> str:
    ext = Path(file_name).suffix.lower()
    if ext[1:] in SUPPORTED_FORMATS:
        return ext[1:]
    raise UnsupportedFormatError(
        f"Unsupported file type: {ext or '(none)'} (expected .csv or .json)"
    )


def _decode(content: Union[str, bytes]) -> str:
    if isinstance(content, str):
        return content
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ParseError(f"File is not valid UTF-8 text: {exc}") from exc


def _make_table(rows: List[Dict[str, Any]]) -> pd.DataFrame:
    if not rows:
        return pd.DataFrame(dtype=object)
    # columns are the union of keys, in order of first appearance
    return pd.DataFrame(rows, dtype=object)


def _parse_csv(text: str) -> pd.DataFrame:
    lines = [line for line in text.split("\n") if line.strip()]
    if not lines:
        raise ParseError("CSV content has no header line")

    headers = build_headers(lines[0].split(","))
    width = len(headers)
    rows = []
    for line in lines[1:]:
        values = [v.strip() for v in line.split(",")][:width]
        values += [""] * (width - len(values))
        rows.append(values)

    if not rows:
        return pd.DataFrame(columns=headers, dtype=object)
    return pd.DataFrame(rows, columns=headers, dtype=object)


def _opaque(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return value


def _is_export_envelope(doc: Dict[str, Any]) -> bool:
    # without a metadata block the document is an ordinary single record
    return (
        set(doc.keys()) <= {"metadata", "statistics", "data"}
        and isinstance(doc.get("metadata"), dict)
        and isinstance(doc.get("data"), list)
        and all(isinstance(rec, dict) for rec in doc["data"])
    )


def _parse_json(text: str) -> pd.DataFrame:
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Invalid JSON: {exc}") from exc

    if isinstance(doc, dict):
        # documents written by the exporter re-import as their rows
        records = doc["data"] if _is_export_envelope(doc) else [doc]
    elif isinstance(doc, list):
        records = doc
    else:
        raise ParseError(
            f"JSON root must be an object or an array of objects, got {type(doc).__name__}"
        )

    rows = []
    for i, rec in enumerate(records):
        if not isinstance(rec, dict):
            raise ParseError(
                f"JSON array item {i} is {type(rec).__name__}, expected an object"
            )
        rows.append({str(k): _opaque(v) for k, v in rec.items()})
    return _make_table(rows)


def parse(file_name: str, content: Union[str, bytes]) -> pd.DataFrame:
    """Parse uploaded file content into a table.

    Parameters
    ----------
    file_name : str
        Declared file name; only its extension is used.
    content : str or bytes
        Raw file content (bytes are decoded as UTF-8).

    Raises
    ------
    UnsupportedFormatError
        The extension is neither .csv nor .json.
    ParseError
        The content does not conform to the declared format.
    """
    kind = detect_format(file_name)
    text = _decode(content)
    df = _parse_csv(text) if kind == "csv" else _parse_json(text)
    logger.debug(
        "parsed %s as %s: %d rows x %d columns", file_name, kind, df.shape[0], df.shape[1]
    )
    return df


def load_file(path: Union[str, Path]) -> pd.DataFrame:
    """Read a file from disk and parse it."""
    path = Path(path)
    detect_format(path.name)
    return parse(path.name, path.read_bytes())


__all__ = ["SUPPORTED_FORMATS", "detect_format", "parse", "load_file"]
