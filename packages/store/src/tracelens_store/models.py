"""Trace data models.

Decoupled from tracelens_core so the store layer can be used on its own
(one-shot CLI commands, exports) without pulling in the review controller.
Records are immutable once fetched; a re-fetch replaces them wholesale.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Requirement:
    """One requirement-satisfaction result derived from a trace."""

    summary: str
    satisfied: bool
    failure_summary: str | None = None  # only present when unsatisfied


@dataclass(frozen=True)
class Issue:
    """A tool issue found in a trace."""

    severity: str  # "CRITICAL" | "HIGH" | "MEDIUM" | "LOW" | anything else
    description: str
    summary: str | None = None  # shorter text shown in summarized mode


@dataclass(frozen=True)
class TraceRecord:
    """One reviewable trace: transcript plus derived issues and requirements.

    ``position`` and ``total`` are what the server reported at fetch time.
    They are informational only; navigation never relies on them.
    """

    trace_id: str
    task: str
    messages: str
    correctness: bool | None = None
    requirements: tuple[Requirement, ...] = ()
    issues: tuple[Issue, ...] = ()
    position: int = 0
    total: int = 0


@dataclass
class TracePage:
    """One page of the remote trace list."""

    items: list[TraceRecord] = field(default_factory=list)
    offset: int = 0
    limit: int = 0
    total: int = 0


@dataclass
class TraceStatus:
    """Analysis/review readiness for a single trace."""

    trace_id: str
    analysis_status: str
    review_status: str | None = None
    has_analyzer_eval: bool = False
    has_correctness_eval: bool = False
    ready_for_review: bool = False
    created_at: str | None = None


def record_from_dict(d: dict) -> TraceRecord:
    """Build a TraceRecord from the server's JSON shape.

    Missing keys decode to empty defaults so a partially analysed trace is
    still reviewable.
    """
    return TraceRecord(
        trace_id=str(d.get("trace_id", "")),
        task=d.get("task") or "",
        messages=d.get("messages") or "",
        correctness=d.get("correctness"),
        requirements=tuple(
            Requirement(
                summary=r.get("requirement_summary", ""),
                satisfied=bool(r.get("satisfied", False)),
                failure_summary=r.get("failure_summary"),
            )
            for r in d.get("requirements") or []
        ),
        issues=tuple(
            Issue(
                severity=i.get("severity") or "",
                description=i.get("description") or "",
                summary=i.get("summary"),
            )
            for i in d.get("issues") or []
        ),
        position=d.get("position", 0),
        total=d.get("total_pending", 0),
    )


def record_to_dict(record: TraceRecord) -> dict:
    return {
        "trace_id": record.trace_id,
        "task": record.task,
        "messages": record.messages,
        "correctness": record.correctness,
        "requirements": [
            {
                "requirement_summary": r.summary,
                "satisfied": r.satisfied,
                "failure_summary": r.failure_summary,
            }
            for r in record.requirements
        ],
        "issues": [{"severity": i.severity, "description": i.description, "summary": i.summary} for i in record.issues],
        "position": record.position,
        "total_pending": record.total,
    }


def page_from_dict(d: dict) -> TracePage:
    items = [record_from_dict(item) for item in d.get("items") or []]
    return TracePage(
        items=items,
        offset=d.get("offset", 0),
        limit=d.get("limit", len(items)),
        total=d.get("total", 0),
    )


def status_from_dict(d: dict) -> TraceStatus:
    return TraceStatus(
        trace_id=d.get("trace_id", ""),
        analysis_status=d.get("analysis_status", "unknown"),
        review_status=d.get("review_status"),
        has_analyzer_eval=bool(d.get("has_analyzer_eval", False)),
        has_correctness_eval=bool(d.get("has_correctness_eval", False)),
        ready_for_review=bool(d.get("ready_for_review", False)),
        created_at=d.get("created_at"),
    )
