"""Abstract trace store interface.

The remote evaluation service is one implementation; a JSON export served
from memory is another. The review controller never talks to a backend
directly: the CLI executes the controller's commands against a BaseTraceStore,
so backends are swappable without touching controller code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tracelens_store.models import TracePage, TraceStatus


class TraceStoreError(Exception):
    """Any failure talking to a trace store.

    The only exception type that crosses the store boundary. Callers decide
    whether it becomes an inline error, a transient notice, or an exit code.
    """


class BaseTraceStore(ABC):
    """Read-mostly access to stored traces.

    Implementations never retry: a failed call raises TraceStoreError and
    retrying is always a user-initiated action.
    """

    @abstractmethod
    def list_page(self, offset: int, limit: int, order: str = "desc") -> TracePage:
        """Return up to ``limit`` traces starting at ``offset``.

        ``total`` on the returned page is the server's latest count and may
        change between calls.
        """

    @abstractmethod
    def ask(self, trace_id: str, question: str) -> str:
        """Ask a free-form question about a trace and return the answer text."""

    @abstractmethod
    def submit_feedback(self, trace_id: str, feedback: str) -> None:
        """Record reviewer feedback for a trace."""

    @abstractmethod
    def get_status(self, trace_id: str) -> TraceStatus:
        """Return analysis/review readiness for a trace."""

    def close(self) -> None:
        """Release any resources held by the store (connections, file handles).

        Default is a no-op so callers can always call close() safely.
        """
