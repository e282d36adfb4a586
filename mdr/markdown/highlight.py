"""Syntax highlighting of fenced code blocks through Pygments.

Lexers and style tables are cached after first use. Unknown languages fall
back to the plain-text lexer; unknown style names fall back to ``monokai``.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.styles import get_style_by_name
from pygments.token import _TokenType
from pygments.util import ClassNotFound

from ..text.styled import Color, Span, Style, StyledLine

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "monokai"
CODE_INDENT = "    "
FALLBACK_CODE_STYLE = Style(fg=(230, 230, 230))


@lru_cache(maxsize=None)
def normalize_style(style: str | None) -> str:
    """Validate a Pygments style name, falling back to the default."""
    if not style:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        logger.debug("unknown pygments style %r, using %s", style, DEFAULT_STYLE)
        return DEFAULT_STYLE
    return style


@lru_cache(maxsize=64)
def _lexer_for(language: str | None) -> Lexer:
    if language:
        try:
            return get_lexer_by_name(language, stripnl=False, ensurenl=True)
        except ClassNotFound:
            logger.debug("no lexer for %r, using plain text", language)
    return TextLexer(stripnl=False, ensurenl=True)


def _hex_to_rgb(value: str) -> Color | None:
    value = value.lstrip("#")
    if len(value) != 6:
        return None
    try:
        return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))
    except ValueError:
        return None


class _StyleTable:
    """Per-token-type ``Style`` lookup for one Pygments style."""

    def __init__(self, style_name: str) -> None:
        self._style = get_style_by_name(style_name)
        self._cache: dict[_TokenType, Style] = {}

    def lookup(self, token_type: _TokenType) -> Style:
        cached = self._cache.get(token_type)
        if cached is not None:
            return cached
        info = self._style.style_for_token(token_type)
        color = _hex_to_rgb(info.get("color") or "")
        resolved = Style(
            fg=color if color is not None else FALLBACK_CODE_STYLE.fg,
            bold=bool(info.get("bold")),
            italic=bool(info.get("italic")),
            underline=bool(info.get("underline")),
        )
        self._cache[token_type] = resolved
        return resolved


@lru_cache(maxsize=None)
def _style_table(style_name: str) -> _StyleTable:
    return _StyleTable(style_name)


def _split_code_lines(code: str) -> list[str]:
    text = code.expandtabs(4)
    if text.endswith("\n"):
        text = text[:-1]
    return text.split("\n")


def plain_code_lines(code: str, style: Style = FALLBACK_CODE_STYLE) -> list[StyledLine]:
    """Indent code without tokenizing it."""
    if not code:
        return []
    return [
        StyledLine.of(Span(CODE_INDENT, style), Span(line, style))
        for line in _split_code_lines(code)
    ]


def highlight_code(code: str, language: str | None, style: str | None = None) -> list[StyledLine]:
    """Return highlighted, indented lines for one code block.

    One output line per source line; the trailing newline of the block does
    not produce an extra line.
    """
    if not code:
        return []
    lexer = _lexer_for((language or "").strip().lower() or None)
    table = _style_table(normalize_style(style))
    source = "\n".join(_split_code_lines(code)) + "\n"

    lines: list[StyledLine] = []
    spans: list[Span] = [Span(CODE_INDENT, FALLBACK_CODE_STYLE)]
    for token_type, value in lexer.get_tokens(source):
        parts = value.split("\n")
        for idx, part in enumerate(parts):
            if idx > 0:
                lines.append(StyledLine.of(*spans))
                spans = [Span(CODE_INDENT, FALLBACK_CODE_STYLE)]
            if part:
                spans.append(Span(part, table.lookup(token_type)))
    # ensurenl leaves a dangling indent-only line after the last newline.
    expected = source.count("\n")
    return lines[:expected]
