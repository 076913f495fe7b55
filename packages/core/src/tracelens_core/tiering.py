"""Triage tiers for failures-only review.

Every trace lands in one of four tiers, computed only from its requirements
and issue severities:

  0  any unsatisfied requirement, or any CRITICAL issue
  1  any HIGH issue
  2  any MEDIUM issue
  3  LOW-only or clean (excluded from failures-only mode)

Within a tier the order is by the tier's own count, descending; beyond that
records keep fetch order. The comparator is a preorder, so callers must sort
stably (``sorted``/``list.sort`` are).
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from tracelens_store.models import TraceRecord

FAILURES_ONLY_MAX_TIER = 2


@dataclass(frozen=True)
class SeverityCounts:
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0


def count_failed_requirements(record: TraceRecord) -> int:
    return sum(1 for r in record.requirements if not r.satisfied)


def severity_counts(record: TraceRecord) -> SeverityCounts:
    """Tally issues by severity. Unrecognised severities are not counted."""
    critical = high = medium = low = 0
    for issue in record.issues:
        if issue.severity == "CRITICAL":
            critical += 1
        elif issue.severity == "HIGH":
            high += 1
        elif issue.severity == "MEDIUM":
            medium += 1
        elif issue.severity == "LOW":
            low += 1
    return SeverityCounts(critical=critical, high=high, medium=medium, low=low)


def tier(record: TraceRecord) -> int:
    counts = severity_counts(record)
    if count_failed_requirements(record) > 0 or counts.critical > 0:
        return 0
    if counts.high > 0:
        return 1
    if counts.medium > 0:
        return 2
    return 3


def matches_failures_only(record: TraceRecord) -> bool:
    return tier(record) <= FAILURES_ONLY_MAX_TIER


def compare(a: TraceRecord, b: TraceRecord) -> int:
    """Three-way comparison for failures-only ordering (negative = a first)."""
    ta, tb = tier(a), tier(b)
    if ta != tb:
        return ta - tb

    ca, cb = severity_counts(a), severity_counts(b)
    if ta == 0:
        fa, fb = count_failed_requirements(a), count_failed_requirements(b)
        if fa != fb:
            return fb - fa
        if ca.critical != cb.critical:
            return cb.critical - ca.critical
    elif ta == 1:
        if ca.high != cb.high:
            return cb.high - ca.high
    elif ta == 2:
        if ca.medium != cb.medium:
            return cb.medium - ca.medium
    return 0


sort_key = functools.cmp_to_key(compare)


def sort_for_triage(records: Iterable[TraceRecord]) -> list[TraceRecord]:
    """Return records in triage order. Ties keep their input order."""
    return sorted(records, key=sort_key)
