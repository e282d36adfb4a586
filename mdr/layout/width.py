"""Unicode display-width lookup used by every layout computation.

East Asian wide/fullwidth characters take two cells, combining marks take
none, and everything else (including characters without a defined width)
takes one.
"""

from __future__ import annotations

import unicodedata


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character."""
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def text_display_width(text: str) -> int:
    """Return the summed display width of ``text``."""
    return sum(char_display_width(ch) for ch in text)


def char_widths(text: str) -> list[int]:
    """Return per-character widths, index-aligned with ``text``."""
    return [char_display_width(ch) for ch in text]


def clip_to_width(text: str, max_cols: int) -> str:
    """Trim plain ``text`` to at most ``max_cols`` display columns."""
    if max_cols <= 0:
        return ""
    out: list[str] = []
    col = 0
    for ch in text:
        w = char_display_width(ch)
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
    return "".join(out)
