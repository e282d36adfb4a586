"""Saturating scroll arithmetic for the content viewport."""

from __future__ import annotations

WHEEL_STEP = 3


def max_scroll(total_rows: int, viewport_height: int) -> int:
    """Return the largest valid scroll row."""
    return max(0, total_rows - max(0, viewport_height))


def page_size(viewport_height: int) -> int:
    """Rows moved by one page step; keeps one row of context."""
    return max(1, viewport_height - 1)


def clamp_scroll(scroll_row: int, total_rows: int, viewport_height: int) -> int:
    """Clamp ``scroll_row`` into ``[0, max_scroll]``."""
    return max(0, min(scroll_row, max_scroll(total_rows, viewport_height)))


def scroll_by(scroll_row: int, delta: int, limit: int) -> int:
    """Move by ``delta`` rows, saturating at ``0`` and ``limit``."""
    return max(0, min(scroll_row + delta, max(0, limit)))


def scroll_percent(scroll_row: int, limit: int) -> int:
    """Return scroll progress in whole percent."""
    if limit <= 0:
        return 100
    return min(100, (scroll_row * 100) // limit)
