"""Style overlays layered onto converted lines before painting.

The beeline gradient tints uncolored text so the eye can follow a line across
the screen; the search overlay paints query matches.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

from .styled import Color, Style, StyledLine, coalesce

if TYPE_CHECKING:
    from ..theme import Theme


class MatchLike(Protocol):
    line_index: int
    char_start: int
    char_end: int


def lerp_u8(a: int, b: int, t: float) -> int:
    value = a + (b - a) * t
    return max(0, min(255, int(value + 0.5)))


def lerp_color(start: Color, end: Color, t: float) -> Color:
    return (
        lerp_u8(start[0], end[0], t),
        lerp_u8(start[1], end[1], t),
        lerp_u8(start[2], end[2], t),
    )


def _beeline_line(line: StyledLine, line_index: int, start: Color, end: Color) -> StyledLine:
    length = len(line)
    if length == 0:
        return line
    reverse = line_index % 2 == 1
    out: list[tuple[str, Style]] = []
    for pos, (ch, style) in enumerate(line.styled_chars()):
        if style.fg is not None:
            out.append((ch, style))
            continue
        t = pos / (length - 1) if length > 1 else 0.0
        if reverse:
            t = 1.0 - t
        out.append((ch, style.with_fg(lerp_color(start, end, t))))
    return coalesce(out)


def apply_beeline(lines: Sequence[StyledLine], theme: Theme) -> list[StyledLine]:
    """Return ``lines`` with a left-right gradient on characters lacking fg.

    Odd-indexed lines run the gradient right to left.
    """
    start, end = theme.beeline_start, theme.beeline_end
    if start is None or end is None:
        return list(lines)
    return [_beeline_line(line, idx, start, end) for idx, line in enumerate(lines)]


def apply_search_highlight(
    lines: Sequence[StyledLine],
    matches: Sequence[MatchLike],
    active_index: int | None,
    theme: Theme,
) -> list[StyledLine]:
    """Paint match ranges; the active match gets a distinct color pair."""
    if not matches:
        return list(lines)

    plain = Style(fg=theme.search_fg, bg=theme.search_bg, bold=not theme.colored)
    active = Style(
        fg=theme.search_fg_active,
        bg=theme.search_bg_active,
        bold=True,
        underline=not theme.colored,
    )

    by_line: dict[int, list[tuple[int, int, bool]]] = {}
    for idx, match in enumerate(matches):
        by_line.setdefault(match.line_index, []).append(
            (match.char_start, match.char_end, idx == active_index)
        )

    result = list(lines)
    for line_index, ranges in by_line.items():
        if not (0 <= line_index < len(result)):
            continue
        chars = list(result[line_index].styled_chars())
        marks: list[Style | None] = [None] * len(chars)
        for start, end, is_active in ranges:
            for pos in range(max(0, start), min(end, len(chars))):
                # Active wins over an overlapping non-active match.
                if is_active or marks[pos] is None:
                    marks[pos] = active if is_active else plain
        result[line_index] = coalesce(
            (ch, style.patch(mark) if mark is not None else style)
            for (ch, style), mark in zip(chars, marks)
        )
    return result
