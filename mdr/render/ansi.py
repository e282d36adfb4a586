"""SGR encoding of styled lines.

Every styled run is emitted as ``SGR + text + reset`` so a clipped or
partially painted row can never leak attributes into the next cell.
"""

from __future__ import annotations

from ..layout.width import char_display_width, text_display_width
from ..text.styled import Span, Style, StyledLine

RESET = "\x1b[0m"


def style_sgr(style: Style) -> str:
    """Return the SGR escape for ``style`` (empty for the plain style)."""
    codes: list[str] = []
    if style.bold:
        codes.append("1")
    if style.dim:
        codes.append("2")
    if style.italic:
        codes.append("3")
    if style.underline:
        codes.append("4")
    if style.strikethrough:
        codes.append("9")
    if style.fg is not None:
        r, g, b = style.fg
        codes.append(f"38;2;{r};{g};{b}")
    if style.bg is not None:
        r, g, b = style.bg
        codes.append(f"48;2;{r};{g};{b}")
    if not codes:
        return ""
    return f"\x1b[{';'.join(codes)}m"


def line_to_ansi(line: StyledLine) -> str:
    out: list[str] = []
    for span in line.spans:
        sgr = style_sgr(span.style)
        if sgr:
            out.append(sgr + span.text + RESET)
        else:
            out.append(span.text)
    return "".join(out)


def clip_line(line: StyledLine, max_cols: int) -> StyledLine:
    """Trim ``line`` to at most ``max_cols`` display columns."""
    if max_cols <= 0:
        return StyledLine()
    spans: list[Span] = []
    col = 0
    for span in line.spans:
        if col + text_display_width(span.text) <= max_cols:
            spans.append(span)
            col += text_display_width(span.text)
            continue
        kept: list[str] = []
        for ch in span.text:
            w = char_display_width(ch)
            if col + w > max_cols:
                break
            kept.append(ch)
            col += w
        if kept:
            spans.append(Span("".join(kept), span.style))
        break
    return StyledLine(tuple(spans))


def pad_line(line: StyledLine, cols: int, style: Style | None = None) -> StyledLine:
    """Clip or right-pad ``line`` with spaces to exactly ``cols`` columns."""
    clipped = clip_line(line, cols)
    used = text_display_width(clipped.text)
    if used >= cols:
        return clipped
    filler = Span(" " * (cols - used), style if style is not None else Style())
    return StyledLine(clipped.spans + (filler,))
