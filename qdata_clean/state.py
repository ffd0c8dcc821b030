"""In-memory collection of uploaded files.

AppState is immutable: every operation returns a new state, so a failed
parse or cleaning run leaves the caller's state exactly as it was. Nothing
is persisted; uploads live as long as the state object does.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional, Tuple, Union
import logging
import mimetypes
import uuid

import pandas as pd

from .data_loader import parse
from .pipeline import clean

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadRecord:
    id: str
    name: str
    size: int
    table: pd.DataFrame = field(repr=False, compare=False)
    processed: bool = False
    uploaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    content_type: str = "application/octet-stream"

    @property
    def rows(self) -> int:
        return int(len(self.table))


@dataclass(frozen=True)
class AppState:
    uploads: Tuple[UploadRecord, ...] = ()
    active_id: Optional[str] = None

    def get(self, record_id: str) -> UploadRecord:
        for rec in self.uploads:
            if rec.id == record_id:
                return rec
        raise KeyError(record_id)

    @property
    def active(self) -> Optional[UploadRecord]:
        return self.get(self.active_id) if self.active_id else None

    def _replace_record(self, record: UploadRecord) -> "AppState":
        uploads = tuple(record if r.id == record.id else r for r in self.uploads)
        return replace(self, uploads=uploads, active_id=record.id)


def upload(
    state: AppState, name: str, content: Union[str, bytes], size: Optional[int] = None
) -> AppState:
    """Parse an uploaded file and add it as the active upload."""
    table = parse(name, content)
    if size is None:
        size = len(content.encode("utf-8")) if isinstance(content, str) else len(content)
    record = UploadRecord(
        id=uuid.uuid4().hex[:9],
        name=name,
        size=int(size),
        table=table,
        content_type=mimetypes.guess_type(name)[0] or "application/octet-stream",
    )
    logger.info("uploaded %s (%d rows) as %s", name, record.rows, record.id)
    return replace(state, uploads=state.uploads + (record,), active_id=record.id)


def process(
    state: AppState,
    record_id: str,
    options: Optional[Iterable[str]] = None,
    config: Optional[Dict[str, Any]] = None,
) -> AppState:
    """Clean one upload; its table is replaced and it is marked processed."""
    record = state.get(record_id)
    cleaned = clean(record.table, options, config)
    return state._replace_record(replace(record, table=cleaned, processed=True))


def select(state: AppState, record_id: str) -> AppState:
    state.get(record_id)
    return replace(state, active_id=record_id)


def remove(state: AppState, record_id: str) -> AppState:
    state.get(record_id)
    uploads = tuple(r for r in state.uploads if r.id != record_id)
    active_id = state.active_id
    if active_id == record_id:
        active_id = uploads[-1].id if uploads else None
    return replace(state, uploads=uploads, active_id=active_id)
