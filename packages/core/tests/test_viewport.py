"""Tests for the clamped scroll viewport and the screen row budget."""

import pytest

from tracelens_core.layout import compute_layout
from tracelens_core.viewport import Viewport


class TestViewport:
    def test_scroll_clamps_at_both_ends(self):
        vp = Viewport(visible_rows=10, content_lines=25)
        assert vp.scroll_by(-3) == 0
        assert vp.scroll_by(100) == 15
        assert vp.below == 0
        assert vp.above == 15

    def test_short_content_never_scrolls(self):
        vp = Viewport(visible_rows=10, content_lines=4)
        assert vp.page_down() == 0
        assert vp.max_offset == 0

    def test_paging_moves_by_visible_rows(self):
        vp = Viewport(visible_rows=5, content_lines=30)
        assert vp.page_down() == 5
        assert vp.page_down() == 10
        assert vp.page_up() == 5

    def test_zero_height_still_pages_by_one(self):
        vp = Viewport(visible_rows=0, content_lines=3)
        assert vp.page_down() == 1

    def test_resize_reclamps(self):
        vp = Viewport(visible_rows=10, content_lines=50)
        vp.scroll_by(40)
        vp.resize(30)
        assert vp.offset == 20

    def test_shrinking_content_reclamps(self):
        vp = Viewport(visible_rows=10, content_lines=50)
        vp.scroll_by(40)
        vp.set_content(12)
        assert vp.offset == 2

    @pytest.mark.parametrize("content,rows", [(0, 5), (3, 5), (5, 5), (40, 7), (7, 0)])
    def test_clamp_is_idempotent_and_bounded(self, content, rows):
        vp = Viewport(visible_rows=rows, content_lines=content)
        for x in range(-10, 60):
            once = vp.clamp(x)
            assert vp.clamp(once) == once
            assert 0 <= once <= max(0, content - rows)

    def test_window(self):
        vp = Viewport(visible_rows=3, content_lines=6)
        vp.scroll_by(2)
        assert vp.window(list("abcdef")) == ["c", "d", "e"]
        assert vp.above == 2
        assert vp.below == 1

    def test_window_rejects_unsynced_content(self):
        vp = Viewport(visible_rows=3, content_lines=6)
        with pytest.raises(AssertionError):
            vp.window(["a"])


class TestLayout:
    def test_default_split(self):
        layout = compute_layout(24)
        assert layout.answer_rows == 0
        assert layout.excerpt_rows == 8
        assert layout.details_rows == 6
        assert layout.transcript_rows == 18

    def test_visible_answer_takes_rows(self):
        layout = compute_layout(40, answer_lines=2, answer_visible=True)
        assert layout.answer_rows == 3
        assert layout.excerpt_rows + layout.details_rows == 40 - 8 - 3 - 2

    def test_long_answer_capped_at_a_third(self):
        layout = compute_layout(40, answer_lines=50, answer_visible=True)
        assert layout.answer_rows == 32 // 3

    def test_hidden_answer_takes_one_row(self):
        assert compute_layout(40, answer_lines=50, answer_visible=False).answer_rows == 1

    def test_tiny_terminal_never_negative(self):
        layout = compute_layout(3, answer_lines=5, answer_visible=True)
        assert layout.excerpt_rows == 0
        assert layout.details_rows == 0
        assert layout.answer_rows == 0
        assert layout.transcript_rows == 1
