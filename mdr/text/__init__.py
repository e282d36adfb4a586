"""Styled text model and overlays."""

from .overlay import apply_beeline, apply_search_highlight
from .styled import PLAIN, Span, Style, StyledLine, coalesce, lines_text

__all__ = [
    "PLAIN",
    "Span",
    "Style",
    "StyledLine",
    "apply_beeline",
    "apply_search_highlight",
    "coalesce",
    "lines_text",
]
