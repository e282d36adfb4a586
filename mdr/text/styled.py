"""Styled text model shared by the converter, overlays, and painter.

A ``StyledLine`` is one logical (unwrapped) line made of ``Span`` runs. All
types are immutable; overlays build new lines instead of editing old ones.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace

Color = tuple[int, int, int]


@dataclass(frozen=True)
class Style:
    """Foreground/background colors plus emphasis flags."""

    fg: Color | None = None
    bg: Color | None = None
    bold: bool = False
    dim: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False

    def patch(self, other: Style) -> Style:
        """Return this style with every attribute ``other`` sets layered on top."""
        return Style(
            fg=other.fg if other.fg is not None else self.fg,
            bg=other.bg if other.bg is not None else self.bg,
            bold=self.bold or other.bold,
            dim=self.dim or other.dim,
            italic=self.italic or other.italic,
            underline=self.underline or other.underline,
            strikethrough=self.strikethrough or other.strikethrough,
        )

    def with_fg(self, fg: Color | None) -> Style:
        return replace(self, fg=fg)


PLAIN = Style()


@dataclass(frozen=True)
class Span:
    text: str
    style: Style = PLAIN


@dataclass(frozen=True)
class StyledLine:
    """Ordered spans forming one logical line."""

    spans: tuple[Span, ...] = ()

    @classmethod
    def of(cls, *spans: Span) -> StyledLine:
        return cls(tuple(span for span in spans if span.text))

    @classmethod
    def raw(cls, text: str, style: Style = PLAIN) -> StyledLine:
        return cls((Span(text, style),) if text else ())

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)

    def __len__(self) -> int:
        return sum(len(span.text) for span in self.spans)

    @property
    def is_blank(self) -> bool:
        return not self.spans

    def styled_chars(self) -> Iterator[tuple[str, Style]]:
        """Yield ``(char, style)`` pairs in order."""
        for span in self.spans:
            for ch in span.text:
                yield ch, span.style

    def slice(self, start: int, end: int) -> StyledLine:
        """Return the spans covering character range ``[start, end)``."""
        out: list[Span] = []
        pos = 0
        for span in self.spans:
            span_end = pos + len(span.text)
            lo = max(start, pos)
            hi = min(end, span_end)
            if lo < hi:
                out.append(Span(span.text[lo - pos : hi - pos], span.style))
            pos = span_end
            if pos >= end:
                break
        return StyledLine(tuple(out))


def coalesce(chars: Iterable[tuple[str, Style]]) -> StyledLine:
    """Merge adjacent characters with identical style back into single spans."""
    spans: list[Span] = []
    buffer: list[str] = []
    current: Style | None = None
    for ch, style in chars:
        if style == current:
            buffer.append(ch)
            continue
        if buffer and current is not None:
            spans.append(Span("".join(buffer), current))
        buffer = [ch]
        current = style
    if buffer and current is not None:
        spans.append(Span("".join(buffer), current))
    return StyledLine(tuple(spans))


def lines_text(lines: Iterable[StyledLine]) -> list[str]:
    """Return the plain text of each line."""
    return [line.text for line in lines]
