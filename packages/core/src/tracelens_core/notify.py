"""Transient notices and the auto-hiding ask answer.

Each of the two slots owns a token. Arming a timer hands out a fresh token;
when a timer fires, its effect applies only if its token is still current.
A newer notice or answer therefore supersedes an older timer without anything
being cancelled, and a timer firing after the state moved on is a no-op.
"""

from __future__ import annotations

from tracelens_core.commands import ArmTimer

NOTICE = "notice"
ANSWER = "answer"

ANSWER_TIMEOUT = 20.0
NOTICE_TIMEOUT = 2.5


class Notifier:
    def __init__(self, answer_timeout: float = ANSWER_TIMEOUT, notice_timeout: float = NOTICE_TIMEOUT):
        self.answer_timeout = answer_timeout
        self.notice_timeout = notice_timeout
        self.notice: str | None = None
        self.notice_level = "info"
        self.answer: str | None = None
        self.answer_visible = False
        self._notice_token = 0
        self._answer_token = 0

    def post(self, text: str, level: str = "info") -> ArmTimer:
        self.notice = text
        self.notice_level = level
        self._notice_token += 1
        return ArmTimer(NOTICE, self._notice_token, self.notice_timeout)

    def show_answer(self, text: str) -> ArmTimer:
        self.answer = text
        self.answer_visible = True
        self._answer_token += 1
        return ArmTimer(ANSWER, self._answer_token, self.answer_timeout)

    def toggle_answer(self) -> bool:
        """Flip answer visibility. The pending auto-hide timer stays armed."""
        if self.answer is None:
            return False
        self.answer_visible = not self.answer_visible
        return True

    def expire(self, kind: str, token: int) -> bool:
        """Apply a fired timer. Returns False when the timer was superseded."""
        if kind == NOTICE and token == self._notice_token and self.notice is not None:
            self.notice = None
            self.notice_level = "info"
            return True
        if kind == ANSWER and token == self._answer_token and self.answer_visible:
            self.answer_visible = False
            return True
        return False

    def clear(self) -> None:
        """Drop any shown notice and answer (on record change).

        Tokens advance so timers already armed for them become no-ops.
        """
        self.notice = None
        self.notice_level = "info"
        self.answer = None
        self.answer_visible = False
        self._notice_token += 1
        self._answer_token += 1
