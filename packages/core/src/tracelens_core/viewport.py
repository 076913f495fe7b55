"""Clamped scroll window over a sequence of lines.

One Viewport per scrollable pane. The invariant

    0 <= offset <= max(0, content_lines - visible_rows)

holds after every public call. Changing either bound (terminal resize,
layout change, new content) re-clamps immediately, never on a later render.
"""

from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")


class Viewport:
    def __init__(self, visible_rows: int = 1, content_lines: int = 0):
        assert visible_rows >= 0 and content_lines >= 0
        self.visible_rows = visible_rows
        self.content_lines = content_lines
        self.offset = 0

    @property
    def max_offset(self) -> int:
        return max(0, self.content_lines - self.visible_rows)

    def clamp(self, offset: int) -> int:
        return max(0, min(offset, self.max_offset))

    def scroll_by(self, delta: int) -> int:
        self.offset = self.clamp(self.offset + delta)
        return self.offset

    def page_down(self) -> int:
        return self.scroll_by(max(1, self.visible_rows))

    def page_up(self) -> int:
        return self.scroll_by(-max(1, self.visible_rows))

    def top(self) -> None:
        self.offset = 0

    def resize(self, visible_rows: int) -> None:
        assert visible_rows >= 0, f"negative pane height {visible_rows}"
        self.visible_rows = visible_rows
        self.offset = self.clamp(self.offset)

    def set_content(self, content_lines: int) -> None:
        assert content_lines >= 0
        self.content_lines = content_lines
        self.offset = self.clamp(self.offset)

    @property
    def above(self) -> int:
        """Lines hidden above the window."""
        return self.offset

    @property
    def below(self) -> int:
        """Lines hidden below the window."""
        return max(0, self.content_lines - self.offset - self.visible_rows)

    def window(self, lines: Sequence[T]) -> list[T]:
        assert len(lines) == self.content_lines, "content changed without set_content()"
        return list(lines[self.offset : self.offset + self.visible_rows])
