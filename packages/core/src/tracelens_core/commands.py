"""Events consumed and commands produced by the review session.

The session is a reducer: ReviewSession.dispatch(event) mutates session state
synchronously and returns the side effects it wants performed, as commands.
The terminal adapter executes commands (network calls, timers, exit) and
feeds their outcomes back in as events. Nothing in tracelens_core performs
I/O.
"""

from __future__ import annotations

from dataclasses import dataclass

from tracelens_store.models import TracePage

# ---------------------------------------------------------------------------
# Commands (session -> runtime)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FetchPage:
    generation: int
    offset: int
    limit: int
    order: str = "desc"


@dataclass(frozen=True)
class SubmitAsk:
    trace_id: str
    question: str


@dataclass(frozen=True)
class SubmitFeedback:
    trace_id: str
    feedback: str


@dataclass(frozen=True)
class ArmTimer:
    """Fire TimerFired(kind, token) after ``seconds``.

    Timers are never cancelled by the runtime. A newer timer of the same kind
    simply carries a newer token, and the stale one is ignored when it fires.
    """

    kind: str
    token: int
    seconds: float


@dataclass(frozen=True)
class Quit:
    pass


Command = FetchPage | SubmitAsk | SubmitFeedback | ArmTimer | Quit

# ---------------------------------------------------------------------------
# Events (runtime -> session)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Resize:
    rows: int
    cols: int


@dataclass(frozen=True)
class PageLoaded:
    generation: int
    page: TracePage


@dataclass(frozen=True)
class PageFailed:
    generation: int
    error: str


@dataclass(frozen=True)
class AskAnswered:
    trace_id: str
    answer: str


@dataclass(frozen=True)
class AskFailed:
    trace_id: str
    error: str


@dataclass(frozen=True)
class FeedbackSent:
    trace_id: str


@dataclass(frozen=True)
class FeedbackFailed:
    trace_id: str
    error: str


@dataclass(frozen=True)
class TimerFired:
    kind: str
    token: int
