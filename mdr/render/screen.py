"""Full-frame painter for the viewer.

Composes one ANSI string per frame (bordered document box with title,
wrapped content rows, scrollbar, footer, and optional picker / go-to
overlays) and writes it to stdout in a single call.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from dataclasses import dataclass

from ..layout.scroll import max_scroll, scroll_percent
from ..layout.width import clip_to_width, text_display_width
from ..text.styled import Span, Style, StyledLine
from ..theme import Theme
from ..viewer.frame import Frame, ScreenLayout
from ..viewer.modes import GoToMode, PickerMode, SearchMode
from ..viewer.state import ViewerState
from .ansi import RESET, clip_line, line_to_ansi, pad_line

FOOTER_HINT = "Press h for commands • / search • q quit"
STATUS_WIDTH = 24
PICKER_TITLE = "Open Markdown (Filesystem)"
PICKER_HINT = "Enter open/enter dir  Backspace up  Esc close"
PICKER_EMPTY = "No markdown files or directories found"
GOTO_TITLE = "Go To Document"
GOTO_HINT = "Enter go  Esc close  Up/Down select"
GOTO_EMPTY = "Queue is empty"


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int


def _move(row: int, col: int) -> str:
    return f"\x1b[{row + 1};{col + 1}H"


class _Canvas:
    """Accumulates positioned writes for one frame."""

    def __init__(self) -> None:
        self.out: list[str] = ["\x1b[H\x1b[2J"]

    def put(self, row: int, col: int, line: StyledLine) -> None:
        self.out.append(_move(row, col) + line_to_ansi(line))

    def put_text(self, row: int, col: int, text: str, style: Style) -> None:
        self.put(row, col, StyledLine.raw(text, style))

    def render(self) -> str:
        return "".join(self.out) + RESET


def centered_rect(width_percent: int, height_percent: int, area: Rect) -> Rect:
    width = max(3, area.width * width_percent // 100)
    height = max(3, area.height * height_percent // 100)
    return Rect(
        x=area.x + (area.width - width) // 2,
        y=area.y + (area.height - height) // 2,
        width=width,
        height=height,
    )


def _draw_box(canvas: _Canvas, rect: Rect, title: str, theme: Theme, *, clear: bool) -> None:
    border = Style(fg=theme.border)
    inner = max(0, rect.width - 2)
    title_text = clip_to_width(title, inner)
    top = "┌" + title_text + "─" * (inner - text_display_width(title_text)) + "┐"
    canvas.put(
        rect.y,
        rect.x,
        StyledLine.of(
            Span(top[0], border),
            Span(title_text, Style(fg=theme.title, bold=True)),
            Span(top[1 + len(title_text) :], border),
        ),
    )
    for row in range(rect.y + 1, rect.y + rect.height - 1):
        if clear:
            canvas.put(row, rect.x, StyledLine.of(Span("│", border), Span(" " * inner), Span("│", border)))
        else:
            canvas.put_text(row, rect.x, "│", border)
            canvas.put_text(row, rect.x + rect.width - 1, "│", border)
    canvas.put_text(rect.y + rect.height - 1, rect.x, "└" + "─" * inner + "┘", border)


def visible_row(frame: Frame, rendered_row: int) -> StyledLine | None:
    """Return the styled slice shown at absolute ``rendered_row``."""
    located = frame.mapper.locate_row(rendered_row)
    if located is None:
        return None
    line_index, row_in_line = located
    wrap = frame.mapper.wraps[line_index]
    if row_in_line >= len(wrap):
        return StyledLine()
    row = wrap[row_in_line]
    return frame.lines[line_index].slice(row.start_char, row.end_char)


def _draw_content(canvas: _Canvas, state: ViewerState) -> None:
    frame = state.frame
    if frame is None:
        return
    area = state.content_area
    for offset in range(area.height):
        line = visible_row(frame, state.scroll_row + offset)
        if line is None:
            break
        if not line.is_blank:
            canvas.put(area.y + offset, area.x, clip_line(line, area.width))


def scrollbar_thumb(total_rows: int, viewport: int, scroll_row: int) -> tuple[int, int]:
    """Return ``(start, length)`` of the scrollbar thumb within ``viewport`` cells."""
    if total_rows <= viewport or viewport <= 0:
        return 0, viewport
    length = max(1, viewport * viewport // total_rows)
    limit = max_scroll(total_rows, viewport)
    start = (scroll_row * (viewport - length)) // limit if limit else 0
    return start, length


def _draw_scrollbar(canvas: _Canvas, state: ViewerState, layout: ScreenLayout, theme: Theme) -> None:
    area = state.content_area
    total = state.total_rows
    if total <= area.height:
        return
    start, length = scrollbar_thumb(total, area.height, state.scroll_row)
    col = layout.scrollbar_col
    for offset in range(area.height):
        if start <= offset < start + length:
            canvas.put_text(area.y + offset, col, "█", Style(fg=theme.scrollbar_thumb))
        else:
            canvas.put_text(area.y + offset, col, "│", Style(fg=theme.scrollbar_track))


def footer_text(state: ViewerState) -> str:
    if isinstance(state.mode, SearchMode):
        return f"/{state.search.query}"
    if state.hover_link is not None:
        return f"link: {state.hover_link}"
    return FOOTER_HINT


def status_text(state: ViewerState) -> str:
    """Right-hand footer status; empty when the document fits the viewport."""
    total = max(1, state.total_rows)
    if state.total_rows <= state.viewport_height:
        return ""
    parts = [f"{state.scroll_row + 1}/{total}"]
    if state.search.query:
        matches = state.search.matches
        parts.append(f"{state.search.active_index + 1}/{len(matches)}" if matches else "no matches")
    parts.append(f"{scroll_percent(state.scroll_row, state.max_scroll)}%")
    return " ".join(parts)


def _draw_footer(canvas: _Canvas, state: ViewerState, layout: ScreenLayout, theme: Theme) -> None:
    style = Style(fg=theme.footer, dim=True)
    width = layout.box_width
    status = clip_to_width(status_text(state), min(STATUS_WIDTH, max(0, width - 1)))
    status_cols = text_display_width(status)
    # One column of separation between the hint and the status.
    left_cols = max(1, width - status_cols - (1 if status else 0))
    canvas.put(layout.footer_row, 1, clip_line(StyledLine.raw(footer_text(state), style), left_cols))
    if status:
        canvas.put_text(layout.footer_row, 1 + width - status_cols, status, style)


def _selected_style(theme: Theme) -> Style:
    return Style(
        fg=theme.search_fg_active,
        bg=theme.search_bg_active,
        bold=True,
        underline=not theme.colored,
    )


def _list_window(selected: int, count: int, visible: int) -> range:
    visible = max(1, visible)
    start = max(0, selected - (visible - 1))
    return range(start, min(count, start + visible))


def _draw_picker(canvas: _Canvas, mode: PickerMode, box: Rect, theme: Theme) -> None:
    rect = centered_rect(80, 70, box)
    _draw_box(canvas, rect, PICKER_TITLE, theme, clear=True)
    x, y = rect.x + 1, rect.y + 1
    width, height = rect.width - 2, rect.height - 2
    if height <= 0:
        return
    dim = Style(fg=theme.footer, dim=True)
    plain = Style(fg=theme.footer)
    rows: list[StyledLine] = [
        StyledLine.raw(f"dir: {mode.directory}", dim),
        StyledLine.raw(f"query: {mode.query}", plain),
    ]
    visible = height - 3
    if not mode.entries:
        rows.append(StyledLine.raw(PICKER_EMPTY, dim))
    else:
        for idx in _list_window(mode.selected, len(mode.entries), visible):
            label = mode.entries[idx].label
            if idx == mode.selected:
                rows.append(pad_line(StyledLine.raw(label, _selected_style(theme)), width, _selected_style(theme)))
            else:
                rows.append(StyledLine.raw(label, plain))
    for offset, line in enumerate(rows[: max(0, height - 1)]):
        canvas.put(y + offset, x, clip_line(line, width))
    canvas.put(y + height - 1, x, clip_line(StyledLine.raw(PICKER_HINT, dim), width))


def _draw_go_to(
    canvas: _Canvas,
    mode: GoToMode,
    paths: Sequence[str],
    box: Rect,
    theme: Theme,
) -> None:
    rect = centered_rect(70, 60, box)
    _draw_box(canvas, rect, GOTO_TITLE, theme, clear=True)
    x, y = rect.x + 1, rect.y + 1
    width, height = rect.width - 2, rect.height - 2
    if height <= 0:
        return
    dim = Style(fg=theme.footer, dim=True)
    plain = Style(fg=theme.footer)
    rows: list[StyledLine] = []
    if not paths:
        rows.append(StyledLine.raw(GOTO_EMPTY, dim))
    else:
        for idx in _list_window(mode.selected, len(paths), height - 1):
            text = f"[{idx + 1}/{len(paths)}] {paths[idx]}"
            if idx == mode.selected:
                rows.append(pad_line(StyledLine.raw(text, _selected_style(theme)), width, _selected_style(theme)))
            else:
                rows.append(StyledLine.raw(text, plain))
    for offset, line in enumerate(rows[: max(0, height - 1)]):
        canvas.put(y + offset, x, clip_line(line, width))
    canvas.put(y + height - 1, x, clip_line(StyledLine.raw(GOTO_HINT, dim), width))


def compose_screen(
    state: ViewerState,
    layout: ScreenLayout,
    theme: Theme,
    title: str,
    queue_paths: Sequence[str],
) -> str:
    """Build the complete ANSI frame for the current state."""
    canvas = _Canvas()
    box = Rect(1, 1, layout.box_width, layout.box_height)
    _draw_box(canvas, box, title, theme, clear=False)
    _draw_content(canvas, state)
    _draw_scrollbar(canvas, state, layout, theme)
    _draw_footer(canvas, state, layout, theme)
    mode = state.mode
    if isinstance(mode, PickerMode):
        _draw_picker(canvas, mode, box, theme)
    elif isinstance(mode, GoToMode):
        _draw_go_to(canvas, mode, queue_paths, box, theme)
    return canvas.render()


def render_screen(
    state: ViewerState,
    layout: ScreenLayout,
    theme: Theme,
    title: str,
    queue_paths: Sequence[str],
) -> None:
    out = compose_screen(state, layout, theme, title, queue_paths)
    os.write(sys.stdout.fileno(), out.encode("utf-8", errors="replace"))


def render_document_text(frame: Frame, max_cols: int, *, color: bool) -> str:
    """Return every wrapped row of ``frame`` for non-interactive output."""
    out: list[str] = []
    for rendered_row in range(frame.total_rows):
        line = visible_row(frame, rendered_row) or StyledLine()
        line = clip_line(line, max_cols)
        out.append(line_to_ansi(line) if color else line.text)
    return "\n".join(out) + "\n"


__all__ = [
    "compose_screen",
    "render_document_text",
    "render_screen",
    "scrollbar_thumb",
    "status_text",
    "footer_text",
    "visible_row",
]
