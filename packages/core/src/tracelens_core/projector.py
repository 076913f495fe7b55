"""View projection: the sequence the reviewer actually steps through."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from tracelens_core.tiering import matches_failures_only, sort_for_triage

if TYPE_CHECKING:
    from tracelens_store.models import TraceRecord


def project(items: Sequence[TraceRecord], failures_only: bool) -> tuple[TraceRecord, ...]:
    """Derive the navigable view from the pool.

    Always a full recompute: the pool in fetch order, or its tier 0-2 records
    in triage order.
    """
    if not failures_only:
        return tuple(items)
    return tuple(sort_for_triage(r for r in items if matches_failures_only(r)))


def clamp_index(index: int, view_length: int) -> int:
    """Pull a cursor back inside ``[0, view_length - 1]`` (0 for an empty view)."""
    if view_length == 0:
        return 0
    return max(0, min(index, view_length - 1))
