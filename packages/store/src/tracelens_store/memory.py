"""InMemoryTraceStore — serves traces from a list or a JSON export.

Used for offline review of an exported trace list (`tracelens list --json`
writes one) and as the backend in tests. The data format is either a JSON
array of trace dicts or an object with an ``items`` array, i.e. a saved
/traces/list response.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from tracelens_store.base import BaseTraceStore, TraceStoreError
from tracelens_store.models import TracePage, TraceRecord, TraceStatus, record_from_dict

logger = logging.getLogger(__name__)


class InMemoryTraceStore(BaseTraceStore):
    """Pages over a fixed list of records.

    ``order="desc"`` serves the list back to front, mirroring the service's
    newest-first default. Feedback is kept in ``self.feedback`` rather than
    sent anywhere.
    """

    def __init__(self, records: list[TraceRecord] | None = None):
        self._records = list(records or [])
        self.feedback: list[tuple[str, str]] = []
        self.calls = 0

    @classmethod
    def from_json_file(cls, path: str) -> InMemoryTraceStore:
        p = Path(path)
        if not p.exists():
            raise TraceStoreError(f"Traces file not found: {path}")
        try:
            data = json.loads(p.read_text())
        except json.JSONDecodeError as e:
            raise TraceStoreError(f"Traces file is not valid JSON: {e}") from e
        if isinstance(data, dict):
            data = data.get("items") or []
        records = [record_from_dict(d) for d in data if isinstance(d, dict)]
        logger.debug("Loaded %d trace(s) from %s", len(records), path)
        return cls(records)

    def list_page(self, offset: int, limit: int, order: str = "desc") -> TracePage:
        self.calls += 1
        ordered = self._records if order == "asc" else list(reversed(self._records))
        items = ordered[offset : offset + limit]
        return TracePage(items=items, offset=offset, limit=limit, total=len(ordered))

    def ask(self, trace_id: str, question: str) -> str:
        record = self._find(trace_id)
        failed = sum(1 for r in record.requirements if not r.satisfied)
        severities = ", ".join(sorted({i.severity for i in record.issues})) or "none"
        return (
            f"Offline store: no analyst available to answer {question!r}.\n"
            f"{failed} of {len(record.requirements)} requirement(s) failed; issue severities: {severities}."
        )

    def submit_feedback(self, trace_id: str, feedback: str) -> None:
        self._find(trace_id)
        self.feedback.append((trace_id, feedback))

    def get_status(self, trace_id: str) -> TraceStatus:
        record = self._find(trace_id)
        return TraceStatus(
            trace_id=record.trace_id,
            analysis_status="completed",
            has_analyzer_eval=bool(record.issues),
            has_correctness_eval=record.correctness is not None,
            ready_for_review=True,
        )

    def _find(self, trace_id: str) -> TraceRecord:
        for record in self._records:
            if record.trace_id == trace_id:
                return record
        raise TraceStoreError(f"Unknown trace: {trace_id}")
