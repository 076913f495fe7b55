"""Textual front end for the review session.

The app is a thin runtime around ReviewSession: key presses and resizes
become session events, the commands the session returns are carried out
(store calls on worker threads, timers on the app's clock), and after each
event the screen is redrawn from build_frame(). No review logic lives here.
"""

from __future__ import annotations

import logging
from functools import partial

from rich.console import Group
from rich.rule import Rule
from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.widgets import Static
from textual.worker import get_current_worker

from tracelens_core.commands import (
    ArmTimer,
    AskAnswered,
    AskFailed,
    FeedbackFailed,
    FeedbackSent,
    FetchPage,
    PageFailed,
    PageLoaded,
    Quit,
    Resize,
    SubmitAsk,
    SubmitFeedback,
    TimerFired,
)
from tracelens_core.frame import ANSWER_HIDDEN, DISCARD_PROMPT, Frame, PaneFrame, build_frame
from tracelens_core.keys import KeyEvent
from tracelens_core.lines import BADGE, ERROR, FAIL, LABEL, MUTED, OK, TIMESTAMP, TITLE, Line
from tracelens_core.session import Mode, ReviewSession
from tracelens_store.base import BaseTraceStore, TraceStoreError

logger = logging.getLogger(__name__)

# textual key name -> KeyEvent flag
_SPECIAL_KEYS = {
    "left": "left",
    "right": "right",
    "up": "up",
    "down": "down",
    "pageup": "page_up",
    "pagedown": "page_down",
    "home": "home",
    "tab": "tab",
    "shift+tab": "shift_tab",
    "escape": "escape",
    "enter": "enter",
    "backspace": "backspace",
}

_SEGMENT_STYLES = {
    TITLE: "bold cyan",
    LABEL: "bold",
    TIMESTAMP: "dim",
    ERROR: "red",
    MUTED: "dim",
    OK: "green",
    FAIL: "red",
}

_SEVERITY_STYLES = {
    "CRITICAL": "bold white on red",
    "HIGH": "bold red",
    "MEDIUM": "yellow",
    "LOW": "blue",
}

_NOTICE_STYLES = {"info": "cyan", "error": "bold red"}


def to_key_event(key: str, character: str | None) -> KeyEvent | None:
    """Translate a textual key press. Returns None for keys the session ignores."""
    flag = _SPECIAL_KEYS.get(key)
    if flag is not None:
        return KeyEvent(**{flag: True})
    if key.startswith("ctrl+"):
        rest = key[len("ctrl+") :]
        if len(rest) == 1:
            return KeyEvent(char=rest, ctrl=True)
        return None
    if character and character.isprintable():
        return KeyEvent(char=character)
    return None


def _text(*parts, style: str = "") -> Text:
    text = Text(no_wrap=True, overflow="ellipsis", style=style)
    for part in parts:
        if isinstance(part, tuple):
            text.append(*part)
        else:
            text.append(part)
    return text


def render_line(line: Line) -> Text:
    text = _text()
    for segment in line:
        if segment.style == BADGE:
            style = _SEVERITY_STYLES.get(segment.severity, "bold")
        else:
            style = _SEGMENT_STYLES.get(segment.style, "")
        text.append(segment.text, style)
    return text


def _correctness(value: bool | None) -> tuple[str, str]:
    if value is True:
        return "✓ correct", "green"
    if value is False:
        return "✗ incorrect", "red"
    return "? unknown", "yellow"


def _header(frame: Frame) -> list:
    header = frame.header
    position = (f"  {header.position}", "dim")
    mode = ("  [failures only]", "yellow") if frame.failures_only else ""
    return [
        _text(("Trace ", "bold"), header.trace_id, position, mode),
        _text(("Task: ", "bold"), header.task.replace("\n", " ")),
        _text(("Correctness: ", "bold"), _correctness(header.correctness)),
        Rule(style="dim"),
    ]


def _pane(pane: PaneFrame) -> list:
    rendered = [render_line(line) for line in pane.lines]
    rendered.extend(_text() for _ in range(pane.height - len(pane.lines)))
    status = f"── {pane.name}"
    if pane.above:
        status += f"  ↑{pane.above}"
    if pane.below:
        status += f"  ↓{pane.below}"
    rendered.append(_text(status, style="bold cyan" if pane.focused else "dim"))
    return rendered


def _answer(frame: Frame) -> list:
    if frame.answer_rows <= 0:
        return []
    if not frame.answer_visible:
        return [_text(ANSWER_HIDDEN, style="dim")]
    rendered = [_text(("Answer:", "bold green"))]
    rendered.extend(_text(line) for line in frame.answer_lines)
    return rendered[: frame.answer_rows]


def _footer(frame: Frame) -> list:
    if frame.confirm_discard:
        prompt = _text(DISCARD_PROMPT, style="bold yellow")
    elif frame.compose_label is not None:
        prompt = _text((f"{frame.compose_label} ", "bold"), frame.draft, ("█", "blink"))
    else:
        prompt = _text(frame.hints, style="dim")
    notice = _text()
    if frame.notice:
        notice = _text(frame.notice, style=_NOTICE_STYLES.get(frame.notice_level, ""))
    elif frame.loading and frame.header is not None:
        notice = _text("Loading more traces…", style="dim")
    return [Rule(style="dim"), prompt, Rule(style="dim"), notice]


def render_frame(frame: Frame) -> Group:
    """Turn a Frame into one rich renderable filling the screen top to bottom."""
    if frame.header is None:
        if frame.error:
            body = _text(("Error: ", "bold red"), frame.error)
        elif frame.loading:
            body = _text("Loading traces…", style="dim")
        else:
            body = _text("No traces to review.", style="yellow")
        return Group(body, _text(), _text(frame.hints, style="dim"))

    parts = _header(frame)
    if frame.mode is Mode.TRANSCRIPT:
        for pane in frame.panes:
            parts.extend(_pane(pane))
        parts.append(_text(frame.hints, style="dim"))
        return Group(*parts)

    if frame.error is not None:
        parts.append(_text(("Error: ", "bold red"), frame.error))
        parts.append(_text(frame.hints, style="dim"))
        return Group(*parts)

    for pane in frame.panes:
        parts.extend(_pane(pane))
    parts.extend(_answer(frame))
    parts.extend(_footer(frame))
    return Group(*parts)


class ReviewApp(App):
    """Full-screen review of one ReviewSession against one store."""

    CSS = """
    Screen {
        overflow: hidden;
    }
    #frame {
        width: 100%;
        height: 100%;
    }
    """
    ENABLE_COMMAND_PALETTE = False

    def __init__(self, session: ReviewSession, store: BaseTraceStore):
        super().__init__()
        self.session = session
        self.store = store

    def compose(self) -> ComposeResult:
        yield Static(id="frame")

    def on_mount(self) -> None:
        self.session.dispatch(Resize(rows=self.size.height, cols=self.size.width))
        self._execute(self.session.start())
        self._redraw()

    def on_unmount(self) -> None:
        self.session.teardown()

    def on_resize(self, event) -> None:
        self._dispatch(Resize(rows=event.size.height, cols=event.size.width))

    def on_key(self, event) -> None:
        key = to_key_event(event.key, event.character)
        if key is None:
            return
        event.stop()
        event.prevent_default()
        self._dispatch(key)

    def _dispatch(self, event) -> None:
        self._execute(self.session.dispatch(event))
        self._redraw()

    def _redraw(self) -> None:
        self.query_one("#frame", Static).update(render_frame(build_frame(self.session)))

    def _execute(self, commands) -> None:
        for command in commands:
            if isinstance(command, FetchPage):
                self._fetch_page(command)
            elif isinstance(command, SubmitAsk):
                self._ask(command)
            elif isinstance(command, SubmitFeedback):
                self._send_feedback(command)
            elif isinstance(command, ArmTimer):
                self.set_timer(command.seconds, partial(self._dispatch, TimerFired(command.kind, command.token)))
            elif isinstance(command, Quit):
                self.session.teardown()
                self.exit()

    def _post(self, event) -> None:
        # Results that land after the app has shut down are dropped.
        if not get_current_worker().is_cancelled:
            self.call_from_thread(self._dispatch, event)

    @work(thread=True, group="fetch")
    def _fetch_page(self, command: FetchPage) -> None:
        try:
            page = self.store.list_page(command.offset, command.limit, command.order)
        except TraceStoreError as e:
            logger.warning("Page fetch at offset %d failed: %s", command.offset, e)
            self._post(PageFailed(command.generation, str(e)))
            return
        self._post(PageLoaded(command.generation, page))

    @work(thread=True, group="ask")
    def _ask(self, command: SubmitAsk) -> None:
        try:
            answer = self.store.ask(command.trace_id, command.question)
        except TraceStoreError as e:
            logger.warning("Ask for %s failed: %s", command.trace_id, e)
            self._post(AskFailed(command.trace_id, str(e)))
            return
        self._post(AskAnswered(command.trace_id, answer))

    @work(thread=True, group="feedback")
    def _send_feedback(self, command: SubmitFeedback) -> None:
        try:
            self.store.submit_feedback(command.trace_id, command.feedback)
        except TraceStoreError as e:
            logger.warning("Feedback for %s failed: %s", command.trace_id, e)
            self._post(FeedbackFailed(command.trace_id, str(e)))
            return
        self._post(FeedbackSent(command.trace_id))
