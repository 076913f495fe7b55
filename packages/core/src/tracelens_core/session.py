"""Review session controller.

One ReviewSession per review screen. It owns the page pool, the projected
view and cursor, one Viewport per pane, the compose state, and the notifier.
All mutation happens inside dispatch(), which handles exactly one event and
returns the commands (fetch, submit, timer, quit) the runtime should carry
out. Outcomes of those commands come back later as events.

Modes:
  navigation        arrows move between traces and scroll panes
  compose_feedback  typed characters build a feedback draft
  compose_ask       typed characters build a question
  transcript        full-screen transcript with its own scroll position

While a draft is non-empty, navigation keys are swallowed so an arrow press
cannot silently lose it. Discarding a draft takes two Escape presses. Keys
other than Escape and Enter in between are swallowed and leave the discard
prompt armed; Enter dismisses the prompt and keeps the draft.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

from tracelens_core.commands import (
    AskAnswered,
    AskFailed,
    Command,
    FeedbackFailed,
    FeedbackSent,
    PageFailed,
    PageLoaded,
    Quit,
    Resize,
    SubmitAsk,
    SubmitFeedback,
    TimerFired,
)
from tracelens_core.keys import KeyEvent
from tracelens_core.layout import compute_layout
from tracelens_core.lines import details_source, excerpt_source, transcript_source
from tracelens_core.notify import ANSWER_TIMEOUT, NOTICE_TIMEOUT, Notifier
from tracelens_core.pool import Advance, PagePool
from tracelens_core.projector import clamp_index, project
from tracelens_core.viewport import Viewport

if TYPE_CHECKING:
    from tracelens_core.lines import LineSource
    from tracelens_store.models import TraceRecord

logger = logging.getLogger(__name__)


class Mode(str, enum.Enum):
    NAVIGATION = "navigation"
    COMPOSE_FEEDBACK = "compose_feedback"
    COMPOSE_ASK = "compose_ask"
    TRANSCRIPT = "transcript"


EXCERPT = "excerpt"
DETAILS = "details"
TRANSCRIPT = "transcript"
MAIN_PANES = (EXCERPT, DETAILS)

END_OF_LIST = "End of list"
START_OF_LIST = "Start of list"


class ReviewSession:
    def __init__(
        self,
        order: str = "desc",
        failures_only: bool = False,
        show_summaries: bool = True,
        rows: int = 24,
        cols: int = 80,
        answer_timeout: float = ANSWER_TIMEOUT,
        notice_timeout: float = NOTICE_TIMEOUT,
    ):
        self.pool = PagePool(order=order)
        self.failures_only = failures_only
        # One flag for every pane, transcript included.
        self.show_summaries = show_summaries
        self.view: tuple[TraceRecord, ...] = ()
        self.index = 0
        self.pending_target: int | None = None
        self.error: str | None = None
        self._failed_target = 0

        self.mode = Mode.NAVIGATION
        self.draft = ""
        self.confirm_discard = False
        self.awaiting_answer = False

        self.notifier = Notifier(answer_timeout=answer_timeout, notice_timeout=notice_timeout)
        self.panes = {EXCERPT: Viewport(), DETAILS: Viewport(), TRANSCRIPT: Viewport()}
        self.focus = EXCERPT
        self.rows = rows
        self.cols = cols
        self.layout = compute_layout(rows)
        self.closed = False
        self._sync()

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    @property
    def current(self) -> TraceRecord | None:
        if not self.view:
            return None
        return self.view[self.index]

    @property
    def loading(self) -> bool:
        return self.pool.loading

    def start(self) -> list[Command]:
        """Issue the initial page request. Rendering shows a loading state until it lands."""
        return self._request(0)

    def teardown(self) -> None:
        """Leave the review screen. Late completions become no-ops."""
        self.closed = True
        self.pool.invalidate()

    def dispatch(self, event) -> list[Command]:
        if self.closed:
            return []
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unhandled event type: {type(event).__name__}")
        commands = handler(self, event)
        self._sync()
        self._check_invariants()
        return commands

    def source_for(self, pane: str) -> LineSource | None:
        """Line source for ``pane`` given the current record and fold flag."""
        record = self.current
        if record is None:
            return None
        if pane == EXCERPT:
            return excerpt_source(record)
        if pane == DETAILS:
            return details_source(record, self.show_summaries)
        return transcript_source(record, self.show_summaries)

    # ------------------------------------------------------------------ #
    # Paging                                                               #
    # ------------------------------------------------------------------ #

    def _request(self, target: int) -> list[Command]:
        status, command = self.pool.advance(target, len(self.view))
        if status is Advance.READY:
            self._move_to(target)
            return []
        if status is Advance.END:
            self.pending_target = None
            if self.view:
                return [self.notifier.post(END_OF_LIST)]
            return []
        if status is Advance.PENDING:
            self.pending_target = target
            return []
        self.pending_target = target
        return [command]

    def _on_page_loaded(self, event: PageLoaded) -> list[Command]:
        if not self.pool.complete(event.generation, event.page):
            return []
        self.error = None
        self._reproject()
        target, self.pending_target = self.pending_target, None
        if target is None:
            return []
        # Failures-only may need several pages before a matching record turns
        # up; _request chains another fetch until satisfied or exhausted.
        return self._request(target)

    def _on_page_failed(self, event: PageFailed) -> list[Command]:
        if not self.pool.fail(event.generation):
            return []
        logger.warning("Page fetch failed: %s", event.error)
        self.error = event.error
        self._failed_target = self.pending_target if self.pending_target is not None else self.index
        self.pending_target = None
        return []

    def _reproject(self) -> None:
        self.view = project(self.pool.items, self.failures_only)
        self.index = clamp_index(self.index, len(self.view))

    def _move_to(self, target: int) -> None:
        # A page landing later only moves the cursor the user is still waiting on.
        self.pending_target = None
        if target == self.index:
            return
        self.index = target
        self.notifier.clear()
        for viewport in self.panes.values():
            viewport.top()

    def _next(self) -> list[Command]:
        return self._request(self.index + 1 if self.view else 0)

    def _previous(self) -> list[Command]:
        self.pending_target = None
        if self.index == 0:
            return [self.notifier.post(START_OF_LIST)] if self.view else []
        self._move_to(self.index - 1)
        return []

    # ------------------------------------------------------------------ #
    # Keys                                                                 #
    # ------------------------------------------------------------------ #

    def _on_key(self, key: KeyEvent) -> list[Command]:
        if self.mode is Mode.TRANSCRIPT:
            return self._transcript_key(key)
        if self.mode in (Mode.COMPOSE_FEEDBACK, Mode.COMPOSE_ASK):
            return self._compose_key(key)
        if self.error is not None:
            return self._error_key(key)
        return self._navigation_key(key)

    def _navigation_key(self, key: KeyEvent) -> list[Command]:
        if key.is_char("q"):
            return [Quit()]
        if key.tab or key.shift_tab:
            self._cycle_focus(-1 if key.shift_tab else 1)
            return []
        if key.left or key.right or key.is_scroll:
            return self._navigate(key, self.panes[self.focus])
        if key.is_char("h"):
            return self._previous()
        if key.is_char("l"):
            return self._next()
        if key.is_char("j", "k", "g"):
            self._scroll(self.panes[self.focus], key)
            return []
        if key.is_char("a"):
            self._enter_compose(Mode.COMPOSE_ASK)
        elif key.is_char("f"):
            self._enter_compose(Mode.COMPOSE_FEEDBACK)
        elif key.is_char("t") or (key.ctrl and key.char == "t"):
            if self.current is not None:
                self.mode = Mode.TRANSCRIPT
                self.panes[TRANSCRIPT].top()
        elif key.is_char("s"):
            return self._toggle_summaries()
        elif key.is_char("v"):
            self.notifier.toggle_answer()
        elif key.is_char("x"):
            return self._toggle_failures_only()
        return []

    def _navigate(self, key: KeyEvent, viewport: Viewport) -> list[Command]:
        """Arrow/page keys shared by navigation and empty-draft compose."""
        if key.left:
            return self._previous()
        if key.right:
            return self._next()
        self._scroll(viewport, key)
        return []

    def _error_key(self, key: KeyEvent) -> list[Command]:
        """While a fetch error replaces the view, only quit and retry respond."""
        if key.is_char("q"):
            return [Quit()]
        if key.is_char("r"):
            self.error = None
            return self._request(self._failed_target)
        if key.left or key.is_char("h"):
            self.error = None
            return self._previous()
        if key.right or key.is_char("l"):
            self.error = None
            return self._next()
        return []

    def _compose_key(self, key: KeyEvent) -> list[Command]:
        if key.escape:
            return self._escape()
        if key.enter:
            if self.confirm_discard:
                self.confirm_discard = False
                return []
            return self._submit()
        if self.confirm_discard:
            return []
        if key.backspace:
            if self.draft:
                self.draft = self.draft[:-1]
            elif self.mode is Mode.COMPOSE_ASK:
                self.mode = Mode.COMPOSE_FEEDBACK
            return []
        if key.is_navigation:
            if self.draft:
                return []
            if key.tab or key.shift_tab:
                self._cycle_focus(-1 if key.shift_tab else 1)
                return []
            return self._navigate(key, self.panes[self.focus])
        if key.printable:
            self.draft += key.char
        return []

    def _escape(self) -> list[Command]:
        if not self.draft:
            self.confirm_discard = False
            self.mode = Mode.NAVIGATION
            return []
        if not self.confirm_discard:
            self.confirm_discard = True
            return []
        self.draft = ""
        self.confirm_discard = False
        self.mode = Mode.COMPOSE_FEEDBACK
        return []

    def _transcript_key(self, key: KeyEvent) -> list[Command]:
        if key.is_char("q"):
            return [Quit()]
        if key.escape or key.is_char("t") or (key.ctrl and key.char == "t"):
            self.mode = Mode.NAVIGATION
            return []
        if key.left or key.shift_tab or key.is_char("h"):
            return self._previous()
        if key.right or key.tab or key.is_char("l"):
            return self._next()
        if key.is_scroll or key.is_char("j", "k", "g"):
            self._scroll(self.panes[TRANSCRIPT], key)
            return []
        if key.is_char("s"):
            return self._toggle_summaries()
        return []

    def _scroll(self, viewport: Viewport, key: KeyEvent) -> None:
        if key.up or key.is_char("k"):
            viewport.scroll_by(-1)
        elif key.down or key.is_char("j"):
            viewport.scroll_by(1)
        elif key.page_up:
            viewport.page_up()
        elif key.page_down:
            viewport.page_down()
        elif key.home or key.is_char("g"):
            viewport.top()

    def _cycle_focus(self, step: int) -> None:
        position = MAIN_PANES.index(self.focus)
        self.focus = MAIN_PANES[(position + step) % len(MAIN_PANES)]

    def _enter_compose(self, mode: Mode) -> None:
        self.mode = mode
        self.draft = ""
        self.confirm_discard = False

    def _toggle_summaries(self) -> list[Command]:
        self.show_summaries = not self.show_summaries
        return [self.notifier.post("Showing summaries" if self.show_summaries else "Showing full details")]

    def _toggle_failures_only(self) -> list[Command]:
        self.failures_only = not self.failures_only
        self.pending_target = None
        self._reproject()
        for viewport in self.panes.values():
            viewport.top()
        commands = [self.notifier.post("Failures only" if self.failures_only else "All traces")]
        if not self.view:
            commands.extend(self._request(0))
        return commands

    # ------------------------------------------------------------------ #
    # Submission                                                           #
    # ------------------------------------------------------------------ #

    def _submit(self) -> list[Command]:
        text = self.draft.strip()
        if not text:
            return []
        record = self.current
        mode = self.mode
        self.draft = ""
        self.confirm_discard = False
        self.mode = Mode.NAVIGATION
        if record is None:
            return [self.notifier.post("No trace selected", "error")]
        if mode is Mode.COMPOSE_ASK:
            self.awaiting_answer = True
            logger.debug("Asking about %s", record.trace_id)
            return [SubmitAsk(trace_id=record.trace_id, question=text)]
        logger.debug("Sending feedback for %s", record.trace_id)
        return [SubmitFeedback(trace_id=record.trace_id, feedback=text)]

    def _on_ask_answered(self, event: AskAnswered) -> list[Command]:
        self.awaiting_answer = False
        record = self.current
        if record is None or record.trace_id != event.trace_id:
            logger.info("Dropping answer for %s, no longer the current trace", event.trace_id)
            return []
        return [self.notifier.show_answer(event.answer)]

    def _on_ask_failed(self, event: AskFailed) -> list[Command]:
        self.awaiting_answer = False
        logger.warning("Ask failed for %s: %s", event.trace_id, event.error)
        return [self.notifier.post(f"Ask failed: {event.error}", "error")]

    def _on_feedback_sent(self, event: FeedbackSent) -> list[Command]:
        return [self.notifier.post("Noted.")]

    def _on_feedback_failed(self, event: FeedbackFailed) -> list[Command]:
        logger.warning("Feedback failed for %s: %s", event.trace_id, event.error)
        return [self.notifier.post(f"Feedback failed: {event.error}", "error")]

    def _on_timer(self, event: TimerFired) -> list[Command]:
        self.notifier.expire(event.kind, event.token)
        return []

    def _on_resize(self, event: Resize) -> list[Command]:
        self.rows = event.rows
        self.cols = event.cols
        return []

    # ------------------------------------------------------------------ #
    # Bounds                                                               #
    # ------------------------------------------------------------------ #

    def _sync(self) -> None:
        """Re-clamp every pane against the current layout and content."""
        answer = self.notifier.answer
        self.layout = compute_layout(
            self.rows,
            answer_lines=len(answer.split("\n")) if answer is not None else None,
            answer_visible=self.notifier.answer_visible,
        )
        self.panes[EXCERPT].resize(self.layout.excerpt_rows)
        self.panes[DETAILS].resize(self.layout.details_rows)
        self.panes[TRANSCRIPT].resize(self.layout.transcript_rows)
        for name, viewport in self.panes.items():
            source = self.source_for(name)
            viewport.set_content(len(source.materialize()) if source is not None else 0)

    def _check_invariants(self) -> None:
        if self.view:
            assert 0 <= self.index < len(self.view), f"cursor {self.index} outside view of {len(self.view)}"
        else:
            assert self.index == 0
        for name, viewport in self.panes.items():
            assert 0 <= viewport.offset <= viewport.max_offset, f"{name} pane offset {viewport.offset} out of range"

    _handlers = {
        KeyEvent: _on_key,
        Resize: _on_resize,
        PageLoaded: _on_page_loaded,
        PageFailed: _on_page_failed,
        AskAnswered: _on_ask_answered,
        AskFailed: _on_ask_failed,
        FeedbackSent: _on_feedback_sent,
        FeedbackFailed: _on_feedback_failed,
        TimerFired: _on_timer,
    }
