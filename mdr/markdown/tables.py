"""Pipe-table layout for GFM tables.

Column widths are measured in display columns and shrunk proportionally when
the table is wider than the available width. Cells are hard-wrapped.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..layout.width import char_display_width, text_display_width
from ..text.styled import PLAIN, Style, StyledLine

HEADER_STYLE = Style(bold=True)


def pad_row(row: list[str], columns: int) -> list[str]:
    """Return ``row`` extended with empty cells up to ``columns``."""
    if len(row) >= columns:
        return row
    return row + [""] * (columns - len(row))


def fit_table_widths(widths: Sequence[int], max_width: int) -> list[int]:
    """Shrink desired column widths so the rendered table fits ``max_width``.

    Each column costs three columns of padding and separator plus one for the
    leading ``|``. When even one-wide columns cannot fit every column gets 1.
    """
    col_count = len(widths)
    if max_width <= 0 or col_count == 0:
        return list(widths)
    overhead = 1 + col_count * 3
    if overhead >= max_width:
        return [1] * col_count
    available = max_width - overhead
    desired = sum(widths)
    if desired <= available:
        return list(widths)

    fitted = [max(1, (w * available) // desired) for w in widths]
    remaining = available - sum(fitted)
    while remaining > 0:
        best_idx, best_need = 0, 0
        for idx, (want, have) in enumerate(zip(widths, fitted)):
            need = want - have
            if need > best_need:
                best_idx, best_need = idx, need
        if best_need == 0:
            break
        fitted[best_idx] += 1
        remaining -= 1
    return fitted


def wrap_cell(cell: str, width: int) -> list[str]:
    """Hard-wrap ``cell`` into chunks at most ``width`` display columns wide."""
    if width <= 0:
        return [""]
    chunks: list[str] = []
    current: list[str] = []
    used = 0
    for ch in cell:
        w = char_display_width(ch)
        if used + w > width and current:
            chunks.append("".join(current))
            current = []
            used = 0
        current.append(ch)
        used += w
    if current or not chunks:
        chunks.append("".join(current))
    return chunks


def _format_row(row: Sequence[str], widths: Sequence[int]) -> list[str]:
    wrapped = [wrap_cell(row[idx] if idx < len(row) else "", max(1, w)) for idx, w in enumerate(widths)]
    height = max((len(cell) for cell in wrapped), default=1)
    out: list[str] = []
    for line_idx in range(height):
        parts = ["|"]
        for cell_lines, w in zip(wrapped, widths):
            text = cell_lines[line_idx] if line_idx < len(cell_lines) else ""
            pad = max(0, w - text_display_width(text))
            parts.append(f" {text}{' ' * pad} |")
        out.append("".join(parts))
    return out


def render_table(
    header: Sequence[str],
    rows: Sequence[Sequence[str]],
    max_width: int,
    column_hint: int = 0,
) -> list[StyledLine]:
    """Lay out a table as plain pipe-delimited lines."""
    col_count = max([column_hint, len(header), *(len(row) for row in rows)])
    if col_count == 0:
        return []

    widths = [0] * col_count
    for row in (header, *rows):
        for idx, cell in enumerate(row):
            widths[idx] = max(widths[idx], text_display_width(cell))
    widths = fit_table_widths([max(1, w) for w in widths], max_width)

    lines: list[StyledLine] = []
    if header:
        lines.extend(StyledLine.raw(text, HEADER_STYLE) for text in _format_row(header, widths))
        separator = "|" + "".join(f" {'-' * max(1, w)} |" for w in widths)
        lines.append(StyledLine.raw(separator, PLAIN))
    for row in rows:
        lines.extend(StyledLine.raw(text) for text in _format_row(row, widths))
    return lines
