"""Pure render model for one screen refresh.

build_frame() reads a ReviewSession and returns plain data: header fields,
the visible slice of each pane, compose state, notice and answer. The
terminal adapter turns a Frame into rich renderables and does nothing else,
so everything a reviewer sees can be asserted on without a terminal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tracelens_core.lines import Line
from tracelens_core.session import DETAILS, EXCERPT, TRANSCRIPT, Mode

if TYPE_CHECKING:
    from tracelens_core.session import ReviewSession
    from tracelens_store.models import TraceRecord

NAVIGATION_HINTS = (
    "[←/→] trace  [↑/↓/PgUp/PgDn] scroll  [Tab] pane  [a]sk  [f]eedback  "
    "[t]ranscript  [s]ummaries  [x] failures only  [v] answer  [q]uit"
)
COMPOSE_HINTS = "[Enter] send  [Esc] cancel"
ERROR_HINTS = "[r] retry  [←/→] trace  [q]uit"
TRANSCRIPT_HINTS = "[↑/↓/PgUp/PgDn/j/k/g] scroll  [←/→][Tab/Shift+Tab][h/l] nav  [t] exit  [s] fold  [q] quit"
DISCARD_PROMPT = "Discard draft? Press Esc to confirm, Enter to keep."
ANSWER_HIDDEN = "Answer hidden (press v to view)"


@dataclass
class Header:
    trace_id: str
    task: str
    correctness: bool | None
    position: str


@dataclass
class PaneFrame:
    name: str
    lines: list[Line]
    offset: int
    above: int
    below: int
    height: int
    focused: bool = False


@dataclass
class Frame:
    mode: Mode
    rows: int
    cols: int
    header: Header | None = None
    panes: list[PaneFrame] = field(default_factory=list)
    compose_label: str | None = None
    draft: str = ""
    confirm_discard: bool = False
    notice: str | None = None
    notice_level: str = "info"
    answer_lines: list[str] = field(default_factory=list)
    answer_visible: bool = False
    answer_rows: int = 0
    error: str | None = None
    loading: bool = False
    empty: bool = False
    failures_only: bool = False
    hints: str = NAVIGATION_HINTS


def position_text(session: ReviewSession) -> str:
    """Viewing [i/n] — n is the server total in normal mode, the loaded match count in failures-only mode."""
    shown = session.index + 1 if session.view else 0
    if session.failures_only:
        suffix = "" if session.pool.exhausted else "+"
        return f"Failures [{shown}/{len(session.view)}{suffix}]"
    total = session.pool.total if session.pool.total is not None else len(session.view)
    return f"Viewing [{shown}/{total}]"


def _header(record: TraceRecord, session: ReviewSession) -> Header:
    return Header(
        trace_id=record.trace_id,
        task=record.task,
        correctness=record.correctness,
        position=position_text(session),
    )


def _pane(session: ReviewSession, name: str) -> PaneFrame:
    viewport = session.panes[name]
    source = session.source_for(name)
    lines = viewport.window(source.materialize()) if source is not None else []
    return PaneFrame(
        name=name,
        lines=lines,
        offset=viewport.offset,
        above=viewport.above,
        below=viewport.below,
        height=viewport.visible_rows,
        focused=session.focus == name and session.mode is not Mode.TRANSCRIPT,
    )


def build_frame(session: ReviewSession) -> Frame:
    notifier = session.notifier
    frame = Frame(
        mode=session.mode,
        rows=session.rows,
        cols=session.cols,
        notice=notifier.notice,
        notice_level=notifier.notice_level,
        failures_only=session.failures_only,
    )

    record = session.current
    if record is None:
        # Nothing to show until the first page lands, or the view is empty.
        frame.loading = session.loading
        frame.empty = not session.loading and session.error is None
        frame.error = session.error
        frame.hints = ERROR_HINTS if session.error else NAVIGATION_HINTS
        return frame

    frame.header = _header(record, session)

    if session.mode is Mode.TRANSCRIPT:
        frame.panes = [_pane(session, TRANSCRIPT)]
        frame.hints = TRANSCRIPT_HINTS
        return frame

    if session.error is not None:
        if session.mode is Mode.NAVIGATION:
            frame.error = session.error
            frame.hints = ERROR_HINTS
            return frame
        # Keys still go to the draft; the error view returns with navigation mode.
        if frame.notice is None:
            frame.notice = f"Fetch failed: {session.error}"
            frame.notice_level = "error"

    frame.panes = [_pane(session, EXCERPT), _pane(session, DETAILS)]
    frame.loading = session.loading
    if notifier.answer is not None:
        frame.answer_lines = notifier.answer.split("\n")
        frame.answer_visible = notifier.answer_visible
        frame.answer_rows = session.layout.answer_rows
    if session.awaiting_answer and frame.notice is None:
        frame.notice = "Asking…"

    if session.mode is Mode.COMPOSE_ASK:
        frame.compose_label = "Ask:"
    elif session.mode is Mode.COMPOSE_FEEDBACK:
        frame.compose_label = "Feedback:"
    if frame.compose_label is not None:
        frame.draft = session.draft
        frame.confirm_discard = session.confirm_discard
        frame.hints = COMPOSE_HINTS
    return frame
