"""Tests for the render model built from a session."""

from tracelens_core.commands import AskAnswered, PageFailed, PageLoaded
from tracelens_core.frame import (
    COMPOSE_HINTS,
    ERROR_HINTS,
    NAVIGATION_HINTS,
    TRANSCRIPT_HINTS,
    build_frame,
    position_text,
)
from tracelens_core.keys import KeyEvent, char
from tracelens_core.lines import line_text
from tracelens_core.session import DETAILS, EXCERPT, TRANSCRIPT, Mode, ReviewSession
from tracelens_store.models import Issue, Requirement, TracePage, TraceRecord


def _make_record(trace_id, failed=0, lines=2):
    return TraceRecord(
        trace_id=trace_id,
        task=f"task {trace_id}",
        messages="\n".join(f"line {i}" for i in range(lines)),
        correctness=False,
        requirements=tuple(Requirement("req", False) for _ in range(failed)),
        issues=(Issue("LOW", "minor"),),
    )


def _loaded(records, total=None, **kwargs):
    session = ReviewSession(**kwargs)
    (fetch,) = session.start()
    page = TracePage(items=records, offset=0, limit=25, total=len(records) if total is None else total)
    session.dispatch(PageLoaded(fetch.generation, page))
    return session


def test_loading_frame_before_first_page():
    session = ReviewSession()
    session.start()
    frame = build_frame(session)
    assert frame.loading
    assert not frame.empty
    assert frame.header is None
    assert frame.panes == []


def test_empty_frame():
    frame = build_frame(_loaded([]))
    assert frame.empty
    assert not frame.loading
    assert frame.hints == NAVIGATION_HINTS


def test_error_frame_without_records():
    session = ReviewSession()
    (fetch,) = session.start()
    session.dispatch(PageFailed(fetch.generation, "boom"))
    frame = build_frame(session)
    assert frame.error == "boom"
    assert not frame.empty
    assert frame.hints == ERROR_HINTS


def test_navigation_frame():
    session = _loaded([_make_record("a"), _make_record("b")], total=40)
    frame = build_frame(session)
    assert frame.header.trace_id == "a"
    assert frame.header.position == "Viewing [1/40]"
    assert frame.header.correctness is False
    assert [p.name for p in frame.panes] == [EXCERPT, DETAILS]
    assert frame.panes[0].focused
    assert not frame.panes[1].focused
    assert line_text(frame.panes[0].lines[0]) == "◆ Trace Excerpt"
    assert frame.compose_label is None
    assert frame.hints == NAVIGATION_HINTS


def test_pane_window_respects_height():
    session = _loaded([_make_record("a", lines=100)])
    pane = build_frame(session).panes[0]
    assert len(pane.lines) == pane.height == session.layout.excerpt_rows
    assert pane.above == 0
    assert pane.below == 101 - pane.height


def test_failures_only_position_marks_unfinished_count():
    session = _loaded([_make_record("a", failed=1), _make_record("b")], total=50, failures_only=True)
    assert position_text(session) == "Failures [1/1+]"


def test_compose_frame():
    session = _loaded([_make_record("a")])
    session.dispatch(char("a"))
    for c in "why":
        session.dispatch(char(c))
    frame = build_frame(session)
    assert frame.compose_label == "Ask:"
    assert frame.draft == "why"
    assert frame.hints == COMPOSE_HINTS

    session.dispatch(KeyEvent(escape=True))
    assert build_frame(session).confirm_discard


def test_awaiting_answer_shows_asking():
    session = _loaded([_make_record("a")])
    session.dispatch(char("a"))
    session.dispatch(char("?"))
    session.dispatch(KeyEvent(enter=True))
    assert build_frame(session).notice == "Asking…"

    session.dispatch(AskAnswered("a", "line one\nline two"))
    frame = build_frame(session)
    assert frame.notice is None
    assert frame.answer_lines == ["line one", "line two"]
    assert frame.answer_visible
    assert frame.answer_rows == session.layout.answer_rows == 3


def test_transcript_frame():
    session = _loaded([_make_record("a")])
    session.dispatch(char("t"))
    frame = build_frame(session)
    assert frame.mode is Mode.TRANSCRIPT
    assert [p.name for p in frame.panes] == [TRANSCRIPT]
    assert not frame.panes[0].focused
    assert frame.hints == TRANSCRIPT_HINTS


def test_fetch_error_while_composing_keeps_draft_visible():
    session = _loaded([_make_record("a")], total=40)
    session.dispatch(char("f"))
    (fetch,) = session.dispatch(KeyEvent(right=True))
    for c in "draft":
        session.dispatch(char(c))
    session.dispatch(PageFailed(fetch.generation, "boom"))
    session.dispatch(char("r"))

    frame = build_frame(session)
    assert frame.compose_label == "Feedback:"
    assert frame.draft == "draftr"
    assert frame.hints == COMPOSE_HINTS
    assert frame.error is None
    assert frame.notice == "Fetch failed: boom"
    assert [p.name for p in frame.panes] == [EXCERPT, DETAILS]

    for _ in range(3):
        session.dispatch(KeyEvent(escape=True))
    frame = build_frame(session)
    assert frame.mode is Mode.NAVIGATION
    assert frame.error == "boom"
    assert frame.hints == ERROR_HINTS
