"""Tests for the page pool and view projection."""

from tracelens_core.commands import FetchPage
from tracelens_core.pool import PAGE_SIZE, Advance, PagePool
from tracelens_core.projector import clamp_index, project
from tracelens_store.models import Issue, Requirement, TracePage, TraceRecord


def _make_record(trace_id, failed=0, severities=()):
    return TraceRecord(
        trace_id=trace_id,
        task="task",
        messages="",
        requirements=tuple(Requirement("r", False) for _ in range(failed)),
        issues=tuple(Issue(severity=s, description=s) for s in severities),
    )


def _page(ids, offset=0, total=None):
    items = [_make_record(i) for i in ids]
    return TracePage(items=items, offset=offset, limit=PAGE_SIZE, total=len(items) if total is None else total)


class TestPagePool:
    def test_first_advance_issues_fetch(self):
        pool = PagePool(order="asc")
        status, command = pool.advance(0, 0)
        assert status is Advance.FETCH
        assert command == FetchPage(generation=0, offset=0, limit=PAGE_SIZE, order="asc")
        assert pool.loading

    def test_single_flight(self):
        pool = PagePool()
        pool.advance(0, 0)
        status, command = pool.advance(0, 0)
        assert status is Advance.PENDING
        assert command is None
        assert pool.fetches == 1

    def test_ready_when_index_in_view(self):
        pool = PagePool()
        _, command = pool.advance(0, 0)
        pool.complete(command.generation, _page(["a", "b"], total=10))
        assert pool.advance(1, 2) == (Advance.READY, None)

    def test_complete_appends_and_advances_offset(self):
        pool = PagePool()
        _, command = pool.advance(0, 0)
        assert pool.complete(command.generation, _page(["a", "b"], total=4))
        _, command = pool.advance(2, 2)
        assert command.offset == 2
        pool.complete(command.generation, _page(["c", "d"], offset=2, total=4))
        assert [r.trace_id for r in pool.items] == ["a", "b", "c", "d"]
        assert len(pool) == 4
        assert pool[3].trace_id == "d"
        assert pool.exhausted
        assert pool.advance(4, 4) == (Advance.END, None)

    def test_empty_page_exhausts_even_with_stale_total(self):
        pool = PagePool()
        _, command = pool.advance(0, 0)
        pool.complete(command.generation, TracePage(items=[], offset=0, limit=25, total=40))
        assert pool.exhausted
        assert pool.advance(0, 0) == (Advance.END, None)

    def test_stale_generation_dropped(self):
        pool = PagePool()
        _, command = pool.advance(0, 0)
        pool.invalidate()
        assert not pool.complete(command.generation, _page(["a"]))
        assert pool.items == []
        assert not pool.loading

    def test_fail_clears_loading_and_allows_retry(self):
        pool = PagePool()
        _, command = pool.advance(0, 0)
        assert pool.fail(command.generation)
        assert not pool.loading
        status, retry = pool.advance(0, 0)
        assert status is Advance.FETCH
        assert retry.offset == 0

    def test_stale_fail_ignored(self):
        pool = PagePool()
        _, command = pool.advance(0, 0)
        pool.invalidate()
        _, fresh = pool.advance(0, 0)
        assert not pool.fail(command.generation)
        assert pool.loading
        assert fresh.generation == 1


class TestProjector:
    def test_all_mode_keeps_fetch_order(self):
        items = [_make_record("a"), _make_record("b", failed=1)]
        assert project(items, failures_only=False) == tuple(items)

    def test_failures_only_filters_and_sorts(self):
        items = [
            _make_record("clean"),
            _make_record("medium", severities=("MEDIUM",)),
            _make_record("low", severities=("LOW",)),
            _make_record("failed", failed=1),
            _make_record("high", severities=("HIGH",)),
        ]
        view = project(items, failures_only=True)
        assert [r.trace_id for r in view] == ["failed", "high", "medium"]

    def test_clamp_index(self):
        assert clamp_index(5, 0) == 0
        assert clamp_index(5, 3) == 2
        assert clamp_index(-1, 3) == 0
        assert clamp_index(1, 3) == 1
