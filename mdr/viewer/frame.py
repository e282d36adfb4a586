"""Per-frame layout: convert, overlay, wrap, and resolve search matches.

Everything produced here is rebuilt from scratch on every frame and never
mutated afterwards. Only the search session and scroll row persist.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..layout.mapper import CoordinateMapper
from ..markdown.converter import LinkRange, render_markdown, render_plain
from ..render.help import help_lines
from ..search.engine import SearchSession
from ..text.overlay import apply_beeline, apply_search_highlight
from ..text.styled import StyledLine, lines_text
from ..theme import Theme


@dataclass(frozen=True)
class ContentArea:
    """Screen rectangle (0-based cells) where document rows are drawn."""

    x: int
    y: int
    width: int
    height: int

    def contains(self, col: int, row: int) -> bool:
        return self.x <= col < self.x + self.width and self.y <= row < self.y + self.height


@dataclass(frozen=True)
class ScreenLayout:
    """Fixed screen geometry: one-cell margin, bordered box, footer row."""

    columns: int
    rows: int

    @property
    def box_width(self) -> int:
        return max(2, self.columns - 2)

    @property
    def box_height(self) -> int:
        return max(2, self.rows - 3)

    @property
    def footer_row(self) -> int:
        return 1 + self.box_height

    @property
    def scrollbar_col(self) -> int:
        return self.box_width - 1

    @property
    def content(self) -> ContentArea:
        # Box inner area minus the scrollbar column.
        return ContentArea(
            x=2,
            y=2,
            width=max(1, self.box_width - 3),
            height=max(1, self.box_height - 2),
        )


@dataclass(frozen=True)
class Frame:
    lines: tuple[StyledLine, ...]
    links: tuple[LinkRange, ...]
    mapper: CoordinateMapper

    @property
    def total_rows(self) -> int:
        return self.mapper.total_rows


def _finish(
    lines: Sequence[StyledLine],
    links: Sequence[LinkRange],
    width: int,
    theme: Theme,
    search: SearchSession | None,
) -> Frame:
    mapper = CoordinateMapper.build(lines_text(lines), width)
    if search is not None:
        search.refresh(mapper.lines_text, mapper)
        lines = apply_search_highlight(lines, search.matches, search.active_index, theme)
    return Frame(lines=tuple(lines), links=tuple(links), mapper=mapper)


def build_frame(
    text: str,
    width: int,
    theme: Theme,
    search: SearchSession,
    *,
    plain_mode: bool = False,
    beeline: bool = True,
    code_style: str | None = None,
) -> Frame:
    """Lay out one document for a content area ``width`` columns wide."""
    if plain_mode:
        lines: list[StyledLine] = render_plain(text)
        links: list[LinkRange] = []
    else:
        lines, links = render_markdown(text, width, theme, code_style)
        if beeline:
            lines = apply_beeline(lines, theme)
    return _finish(lines, links, width, theme, search)


def build_help_frame(width: int, theme: Theme) -> Frame:
    """Lay out the static help listing; it has no links and no search."""
    return _finish(help_lines(theme), [], width, theme, None)
