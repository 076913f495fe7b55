"""Discrete key-press events, independent of any terminal library."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class KeyEvent:
    """One key press.

    ``char`` is the printable character, if any. Special keys are flags; at
    most one is normally set. ``ctrl`` accompanies ``char`` for chords such as
    ctrl+t.
    """

    char: str = ""
    left: bool = False
    right: bool = False
    up: bool = False
    down: bool = False
    page_up: bool = False
    page_down: bool = False
    home: bool = False
    tab: bool = False
    shift_tab: bool = False
    escape: bool = False
    enter: bool = False
    backspace: bool = False
    ctrl: bool = False

    @property
    def printable(self) -> bool:
        return bool(self.char) and not self.ctrl and self.char.isprintable()

    def is_char(self, *chars: str) -> bool:
        return not self.ctrl and self.char in chars

    @property
    def is_scroll(self) -> bool:
        return self.up or self.down or self.page_up or self.page_down or self.home

    @property
    def is_navigation(self) -> bool:
        return self.left or self.right or self.tab or self.shift_tab or self.is_scroll


def char(c: str) -> KeyEvent:
    return KeyEvent(char=c)


def ctrl(c: str) -> KeyEvent:
    return KeyEvent(char=c, ctrl=True)
