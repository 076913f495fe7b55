"""Row budget for the review screen.

Main view, top to bottom:
  header (3 lines + rule)
  excerpt pane + its status line
  details pane + its status line
  ask answer (only while one exists)
  compose bar (rule, prompt or hints, rule, message)

Transcript view: header (3 lines + rule), transcript pane + status line, hints.
"""

from __future__ import annotations

from dataclasses import dataclass

HEADER_ROWS = 4
FOOTER_ROWS = 4
PANE_CHROME = 1
HINT_ROWS = 1
EXCERPT_SHARE = 3 / 5
MIN_ANSWER_ROWS = 3


@dataclass(frozen=True)
class Layout:
    excerpt_rows: int
    details_rows: int
    answer_rows: int
    transcript_rows: int


def compute_layout(rows: int, answer_lines: int | None = None, answer_visible: bool = False) -> Layout:
    """Split ``rows`` terminal lines between the panes.

    ``answer_lines`` is the line count of the current ask answer, or None
    when there is none. A hidden answer still takes one row for its hint.
    """
    body = max(0, rows - HEADER_ROWS - FOOTER_ROWS)

    answer_rows = 0
    if answer_lines is not None:
        if answer_visible:
            answer_rows = min(answer_lines + 1, max(MIN_ANSWER_ROWS, body // 3))
        else:
            answer_rows = 1
        answer_rows = min(answer_rows, body)
    body -= answer_rows

    pane_rows = max(0, body - 2 * PANE_CHROME)
    excerpt_rows = int(pane_rows * EXCERPT_SHARE)
    details_rows = pane_rows - excerpt_rows

    transcript_rows = max(1, rows - HEADER_ROWS - PANE_CHROME - HINT_ROWS)
    return Layout(
        excerpt_rows=excerpt_rows,
        details_rows=details_rows,
        answer_rows=answer_rows,
        transcript_rows=transcript_rows,
    )
