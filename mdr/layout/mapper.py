"""Translation between logical character positions and rendered rows/columns.

A ``CoordinateMapper`` is rebuilt every frame from the current wrap table.
It answers the two directions needed by the viewer: screen cell to character
(hover, click) and character to screen row (search jumps, link-open).
"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from .width import char_display_width
from .wrap import LineWrap, build_wraps


class LinkLike(Protocol):
    line_index: int
    start_char: int
    end_char: int
    url: str


@dataclass(frozen=True)
class CoordinateMapper:
    """Frame-local lookup tables over wrapped lines."""

    lines_text: tuple[str, ...]
    wraps: tuple[LineWrap, ...]
    offsets: tuple[int, ...]
    total_rows: int

    @classmethod
    def build(cls, lines_text: Sequence[str], width: int) -> CoordinateMapper:
        """Wrap ``lines_text`` to ``width`` and index the result."""
        wraps, offsets = build_wraps(list(lines_text), width)
        total = sum(max(1, len(wrap)) for wrap in wraps)
        return cls(
            lines_text=tuple(lines_text),
            wraps=tuple(wraps),
            offsets=tuple(offsets),
            total_rows=total,
        )

    def locate_row(self, rendered_row: int) -> tuple[int, int] | None:
        """Return ``(line_index, row_in_line)`` for an absolute rendered row."""
        if not self.offsets or rendered_row < 0 or rendered_row >= self.total_rows:
            return None
        line_index = bisect_right(self.offsets, rendered_row) - 1
        return line_index, rendered_row - self.offsets[line_index]

    def char_at(self, line_index: int, row_in_line: int, column: int) -> int | None:
        """Return the character index drawn at ``column`` of a wrapped row.

        Columns past the row's content resolve to ``None``.
        """
        if not (0 <= line_index < len(self.wraps)) or column < 0:
            return None
        wrap = self.wraps[line_index]
        if not (0 <= row_in_line < len(wrap)):
            return None
        row = wrap[row_in_line]
        if row.is_empty:
            return None
        text = self.lines_text[line_index]
        col = 0
        for idx in range(row.start_char, row.end_char):
            width = char_display_width(text[idx])
            if width and col <= column < col + width:
                return idx
            col += width
        return None

    def first_row_of(self, line_index: int, char_index: int) -> int:
        """Return the absolute rendered row showing ``char_index``.

        Falls back to the line's first row when the index is not covered
        (for example the end position of a line).
        """
        base = self.offsets[line_index]
        for row_idx, row in enumerate(self.wraps[line_index]):
            if char_index in row:
                return base + row_idx
        return base

    def position_of(self, rendered_row: int, column: int) -> tuple[int, int] | None:
        """Resolve a content-area cell to ``(line_index, char_index)``."""
        located = self.locate_row(rendered_row)
        if located is None:
            return None
        line_index, row_in_line = located
        char_index = self.char_at(line_index, row_in_line, column)
        if char_index is None:
            return None
        return line_index, char_index


def link_at(links: Sequence[LinkLike], line_index: int, char_index: int) -> LinkLike | None:
    """Return the link whose half-open range on ``line_index`` holds ``char_index``."""
    for link in links:
        if link.line_index == line_index and link.start_char <= char_index < link.end_char:
            return link
    return None


def link_at_position(
    mapper: CoordinateMapper,
    links: Sequence[LinkLike],
    rendered_row: int,
    column: int,
) -> str | None:
    """Return the URL drawn at ``(rendered_row, column)``, if any."""
    if not links:
        return None
    position = mapper.position_of(rendered_row, column)
    if position is None:
        return None
    link = link_at(links, *position)
    return link.url if link is not None else None


def link_at_scroll(
    mapper: CoordinateMapper,
    links: Sequence[LinkLike],
    scroll_row: int,
) -> str | None:
    """Return the first link starting at or below ``scroll_row``.

    When every link is above the viewport the document's first link is used.
    """
    if not links:
        return None
    for link in links:
        if not (0 <= link.line_index < len(mapper.wraps)):
            continue
        if mapper.first_row_of(link.line_index, link.start_char) >= scroll_row:
            return link.url
    return links[0].url
