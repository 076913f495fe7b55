"""Styled line production for the excerpt, details and transcript panes.

A line is a tuple of Segments; each segment carries a style tag that the
terminal adapter maps to colours. Sources are restartable: every iteration
re-derives the lines from the record, so a pane can recount its content
whenever the fold flag or the record changes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Sequence

if TYPE_CHECKING:
    from tracelens_store.models import Issue, Requirement, TraceRecord

# Style tags understood by the adapter.
PLAIN = "plain"
TITLE = "title"
LABEL = "label"
TIMESTAMP = "timestamp"
ERROR = "error"
BADGE = "severity-badge"
MUTED = "muted"
OK = "ok"
FAIL = "fail"

TRACE_TITLE = "◆ Trace Excerpt"
DETAILS_TITLE = "◆ Review Details"
ISSUES_TITLE = "• Tool Issues"
REQ_OK = "●"
REQ_BAD = "○"

SEVERITY_ORDER = {"CRITICAL": 0, "HIGH": 1, "MEDIUM": 2, "LOW": 3}
SEVERITY_LABELS = {"CRITICAL": "CRIT", "HIGH": "HIGH", "MEDIUM": "MED", "LOW": "LOW"}

_TIMESTAMP_RE = re.compile(r"^\[\d{4}-\d{2}-\d{2}[^\]]*\]\s*(.*)$")
_LABEL_RE = re.compile(r"^(\s*)([A-Za-z ]+):\s*(.*)$")
_ERROR_RE = re.compile(r"\b(error|exception|traceback)\b", re.IGNORECASE)


@dataclass(frozen=True)
class Segment:
    text: str
    style: str = PLAIN
    # For BADGE segments: the upper-cased severity, so the adapter can colour it.
    severity: str = ""


Line = tuple[Segment, ...]


def plain(text: str, style: str = PLAIN) -> Line:
    return (Segment(text, style),)


def line_text(line: Line) -> str:
    return "".join(s.text for s in line)


def severity_label(severity: str) -> str:
    key = (severity or "").upper()
    return SEVERITY_LABELS.get(key, key[:4])


def classify_message_line(raw: str) -> Line:
    """Style one transcript line: timestamp, role label, error, or plain.

    Message bodies are never rewritten; only styling is added.
    """
    trimmed = raw.strip()
    ts = _TIMESTAMP_RE.match(trimmed)
    if ts:
        rest = ts.group(1) or ""
        stamp = trimmed[: len(trimmed) - len(rest)]
        return (Segment(stamp, TIMESTAMP), Segment(rest))

    label = _LABEL_RE.match(raw)
    if label:
        indent, name, rest = label.group(1), label.group(2).strip().upper(), label.group(3)
        segments = [Segment(indent), Segment(f"{name}:", LABEL)]
        if rest:
            segments.append(Segment(f" {rest}"))
        return tuple(segments)

    if _ERROR_RE.search(raw):
        return plain(raw, ERROR)
    return plain(raw)


def sort_issues(issues: Sequence[Issue]) -> list[Issue]:
    return sorted(
        issues,
        key=lambda i: (
            SEVERITY_ORDER.get((i.severity or "").upper(), 99),
            i.summary or i.description or "",
        ),
    )


def issue_line(issue: Issue, folded: bool) -> Line:
    severity = (issue.severity or "").upper()
    body = (issue.summary or issue.description) if folded else issue.description
    return (
        Segment(severity_label(severity), BADGE, severity=severity),
        Segment(" "),
        Segment(body),
    )


def requirement_line(requirement: Requirement) -> Line:
    style = OK if requirement.satisfied else FAIL
    segments = [
        Segment(REQ_OK if requirement.satisfied else REQ_BAD, style),
        Segment(" "),
        Segment(requirement.summary, style),
    ]
    if not requirement.satisfied and requirement.failure_summary:
        segments.append(Segment(f" ({requirement.failure_summary})"))
    return tuple(segments)


def message_lines(messages: str) -> Iterator[Line]:
    yield plain(TRACE_TITLE, TITLE)
    for raw in messages.split("\n"):
        yield classify_message_line(raw)


def requirement_lines(requirements: Sequence[Requirement], folded: bool) -> Iterator[Line]:
    if not requirements:
        return
    satisfied = sum(1 for r in requirements if r.satisfied)
    yield plain("Requirements", TITLE)
    yield plain(f"{satisfied}/{len(requirements)} satisfied", OK if satisfied == len(requirements) else FAIL)
    shown = [r for r in requirements if not r.satisfied] if folded else list(requirements)
    for requirement in shown:
        yield requirement_line(requirement)


def issue_lines(issues: Sequence[Issue], folded: bool, empty_text: str = "None") -> Iterator[Line]:
    yield plain(ISSUES_TITLE, TITLE)
    if not issues:
        yield plain(empty_text, MUTED)
        return
    for issue in sort_issues(issues):
        yield issue_line(issue, folded)


class LineSource:
    """Restartable, finite sequence of lines for one pane.

    Iterating calls the producer afresh; nothing is cached between passes.
    """

    def __init__(self, produce):
        self._produce = produce

    def __iter__(self) -> Iterator[Line]:
        return iter(self._produce())

    def materialize(self) -> list[Line]:
        return list(self)


def excerpt_source(record: TraceRecord) -> LineSource:
    return LineSource(lambda: message_lines(record.messages))


def details_source(record: TraceRecord, folded: bool) -> LineSource:
    def produce() -> Iterator[Line]:
        yield plain(DETAILS_TITLE, TITLE)
        yield from issue_lines(record.issues, folded, empty_text="No tool issues recorded")
        yield from requirement_lines(record.requirements, folded)

    return LineSource(produce)


def transcript_source(record: TraceRecord, folded: bool) -> LineSource:
    def produce() -> Iterator[Line]:
        yield from message_lines(record.messages)
        yield from requirement_lines(record.requirements, folded)
        yield from issue_lines(record.issues, folded)

    return LineSource(produce)
