"""Page pool — every trace fetched so far, plus the pagination cursor.

The pool is append-only: records arrive in fetch order and are never
reordered or dropped for the life of a session. Fetching is single-flight.
While one page request is outstanding, further advance() calls report
PENDING instead of issuing a second request.

The pool does not perform I/O itself. advance() hands back a FetchPage
command; whoever executes it reports the outcome through complete() or
fail(), tagged with the generation the request was issued under. invalidate()
bumps the generation so responses that land after a teardown are ignored.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

from tracelens_core.commands import FetchPage

if TYPE_CHECKING:
    from tracelens_store.models import TracePage, TraceRecord

logger = logging.getLogger(__name__)

PAGE_SIZE = 25


class Advance(enum.Enum):
    READY = "ready"  # requested index already in the view
    END = "end"  # store exhausted, nothing more to fetch
    PENDING = "pending"  # a fetch is already in flight
    FETCH = "fetch"  # a new fetch was issued


class PagePool:
    def __init__(self, order: str = "desc", page_size: int = PAGE_SIZE):
        self.order = order
        self.page_size = page_size
        self.items: list[TraceRecord] = []
        self.offset = 0
        self.total: int | None = None
        self.loading = False
        self.generation = 0
        self.fetches = 0
        # A page that comes back empty ends the list even if the server's
        # total says otherwise; otherwise a stale total would refetch forever.
        self._drained = False

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> TraceRecord:
        return self.items[index]

    @property
    def exhausted(self) -> bool:
        if self._drained:
            return True
        return self.total is not None and self.offset >= self.total

    def advance(self, target: int, view_length: int) -> tuple[Advance, FetchPage | None]:
        """Make ``target`` (an index into the current view) available.

        Returns the outcome and, for FETCH, the command to execute.
        """
        assert target >= 0, f"negative view index {target}"
        if target < view_length:
            return Advance.READY, None
        if self.exhausted:
            return Advance.END, None
        if self.loading:
            return Advance.PENDING, None
        self.loading = True
        self.fetches += 1
        logger.debug("Requesting page at offset %d (generation %d)", self.offset, self.generation)
        return Advance.FETCH, FetchPage(
            generation=self.generation,
            offset=self.offset,
            limit=self.page_size,
            order=self.order,
        )

    def complete(self, generation: int, page: TracePage) -> bool:
        """Append a fetched page. Returns False if the response is stale."""
        if generation != self.generation:
            logger.debug("Dropping stale page (generation %d, current %d)", generation, self.generation)
            return False
        self.loading = False
        self.items.extend(page.items)
        self.offset += len(page.items)
        self.total = page.total
        if not page.items:
            self._drained = True
        return True

    def fail(self, generation: int) -> bool:
        """Clear the in-flight flag after a failed fetch. Contents are untouched."""
        if generation != self.generation:
            return False
        self.loading = False
        return True

    def invalidate(self) -> None:
        """Mark any in-flight fetch as stale."""
        self.generation += 1
        self.loading = False
