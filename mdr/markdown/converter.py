"""Markdown to styled-line conversion.

Walks the flat markdown-it token stream (open/close pairs, with inline
content in ``token.children``) and threads an explicit ``_LineAccumulator``
through it. Output lines are logical lines; wrapping happens later.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from functools import lru_cache

from markdown_it import MarkdownIt
from markdown_it.token import Token

from ..text.styled import PLAIN, Span, Style, StyledLine
from ..theme import Theme
from .highlight import highlight_code, plain_code_lines
from .tables import pad_row, render_table

logger = logging.getLogger(__name__)

RULE_WIDTH = 32
LIST_INDENT = "  "


@dataclass(frozen=True)
class LinkRange:
    """Clickable character range ``[start_char, end_char)`` on one logical line."""

    line_index: int
    start_char: int
    end_char: int
    url: str


@lru_cache(maxsize=1)
def _parser() -> MarkdownIt:
    return MarkdownIt("commonmark").enable(["table", "strikethrough"])


@dataclass
class _ListFrame:
    ordered: bool
    next_number: int = 1


@dataclass
class _PendingLink:
    url: str
    line_index: int
    start_char: int
    has_text: bool = False


@dataclass
class _TableBuilder:
    columns: int = 0
    in_head: bool = False
    header: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)
    row: list[str] = field(default_factory=list)

    def end_row(self) -> None:
        row = pad_row(self.row, self.columns)
        if self.in_head and not self.header:
            self.header = row
        elif not self.in_head:
            self.rows.append(row)
        self.row = []


class _LineAccumulator:
    """Mutable conversion state for one document."""

    def __init__(self, theme: Theme, column_width: int, code_style: str | None) -> None:
        self.theme = theme
        self.column_width = column_width
        self.code_style_name = code_style
        self.lines: list[StyledLine] = []
        self.links: list[LinkRange] = []
        self.current: list[Span] = []
        self.current_chars = 0
        self.style_stack: list[Style] = []
        self.style = PLAIN
        self.heading_level: int | None = None
        self.lists: list[_ListFrame] = []
        self.quote_depth = 0
        self.link: _PendingLink | None = None
        self.table: _TableBuilder | None = None

        self.quote_style = Style(fg=theme.quote)
        self.inline_code_style = Style(fg=theme.code, dim=True)
        self.link_style = Style(fg=theme.link, underline=True)

    # line plumbing

    def flush_line(self) -> None:
        if self.current:
            self.lines.append(StyledLine.of(*self.current))
            self.current = []
        self.current_chars = 0

    def push_blank(self) -> None:
        """Add a separating blank line unless the previous line is already blank."""
        if self.lines and not self.lines[-1].is_blank:
            self.lines.append(StyledLine())
        self.current_chars = 0

    def end_block(self) -> None:
        self.flush_line()
        self.lines.append(StyledLine())

    def push_span(self, text: str, style: Style = PLAIN) -> None:
        if not text:
            return
        self.current.append(Span(text, style))
        self.current_chars += len(text)

    def ensure_line_prefix(self) -> None:
        if self.quote_depth and not self.current:
            self.push_span("> " * self.quote_depth, self.quote_style)

    def text_style(self, base: Style) -> Style:
        style = base
        level = self.heading_level
        if level is not None:
            if level == 1:
                style = style.patch(Style(fg=self.theme.title, bold=True, underline=True))
            elif level == 2:
                style = style.patch(Style(fg=self.theme.heading, bold=True, underline=True))
            else:
                style = style.patch(Style(fg=self.theme.heading, bold=True))
        if self.link is not None:
            style = style.patch(self.link_style)
            self.link.has_text = True
        return style

    def push_text(self, text: str, base: Style | None = None) -> None:
        if not text:
            return
        self.ensure_line_prefix()
        style = self.text_style(self.style if base is None else base)
        self.push_span(text.replace("\t", "    "), style)

    # inline emphasis

    def push_style(self, extra: Style) -> None:
        self.style_stack.append(self.style)
        self.style = self.style.patch(extra)

    def pop_style(self) -> None:
        self.style = self.style_stack.pop() if self.style_stack else PLAIN

    # links

    def open_link(self, url: str) -> None:
        self.ensure_line_prefix()
        self.link = _PendingLink(url=url, line_index=len(self.lines), start_char=self.current_chars)

    def close_link(self) -> None:
        link, self.link = self.link, None
        if link is None or not link.has_text:
            return
        # A hard break inside the label moves the text to another line.
        if link.line_index != len(self.lines) or self.current_chars <= link.start_char:
            logger.debug("dropping link %s split across lines", link.url)
            return
        self.links.append(
            LinkRange(
                line_index=link.line_index,
                start_char=link.start_char,
                end_char=self.current_chars,
                url=link.url,
            )
        )

    # blocks

    def start_list_item(self) -> None:
        self.flush_line()
        self.ensure_line_prefix()
        depth = len(self.lists)
        if depth > 1:
            self.push_span(LIST_INDENT * (depth - 1))
        marker = "- "
        if self.lists and self.lists[-1].ordered:
            frame = self.lists[-1]
            marker = f"{frame.next_number}. "
            frame.next_number += 1
        self.push_span(marker, Style(fg=self.theme.list_bullet))

    def code_block(self, code: str, info: str) -> None:
        self.flush_line()
        self.push_blank()
        language = info.strip().split()[0] if info.strip() else None
        if self.theme.colored:
            self.lines.extend(highlight_code(code, language, self.code_style_name))
        else:
            self.lines.extend(plain_code_lines(code, PLAIN))
        self.lines.append(StyledLine())

    def rule(self) -> None:
        self.flush_line()
        self.push_blank()
        self.lines.append(StyledLine.raw("-" * RULE_WIDTH, Style(fg=self.theme.rule)))
        self.lines.append(StyledLine())

    def finish_table(self) -> None:
        table, self.table = self.table, None
        if table is None:
            return
        self.flush_line()
        self.lines.extend(render_table(table.header, table.rows, self.column_width, table.columns))
        self.lines.append(StyledLine())


def _cell_text(token: Token) -> str:
    parts: list[str] = []
    for child in token.children or []:
        if child.type in {"text", "code_inline"}:
            parts.append(child.content)
        elif child.type in {"softbreak", "hardbreak"}:
            parts.append(" ")
        elif child.type == "image":
            parts.append(child.content)
    return "".join(parts).strip()


def _render_inline(acc: _LineAccumulator, token: Token) -> None:
    for child in token.children or []:
        kind = child.type
        if kind == "text":
            acc.push_text(child.content)
        elif kind == "softbreak":
            acc.push_span(" ")
        elif kind == "hardbreak":
            acc.flush_line()
        elif kind == "code_inline":
            acc.push_text(f"`{child.content}`", acc.inline_code_style)
        elif kind == "strong_open":
            acc.push_style(Style(bold=True))
        elif kind == "em_open":
            acc.push_style(Style(italic=True))
        elif kind == "s_open":
            acc.push_style(Style(strikethrough=True))
        elif kind in {"strong_close", "em_close", "s_close"}:
            acc.pop_style()
        elif kind == "link_open":
            acc.open_link(str(child.attrGet("href") or ""))
        elif kind == "link_close":
            acc.close_link()
        elif kind == "image":
            acc.push_text(child.content, acc.style.patch(Style(italic=True)))


def _handle_table_token(acc: _LineAccumulator, token: Token) -> None:
    """Collect cell text while a table is open."""
    table = acc.table
    if table is None:
        return
    kind = token.type
    if kind == "table_close":
        acc.finish_table()
        return
    if kind == "thead_open":
        table.in_head = True
    elif kind == "thead_close":
        table.in_head = False
    elif kind == "tr_open":
        table.row = []
    elif kind == "tr_close":
        if table.in_head:
            table.columns = max(table.columns, len(table.row))
        table.end_row()
    elif kind == "inline":
        table.row.append(_cell_text(token))


def _convert(tokens: Sequence[Token], acc: _LineAccumulator) -> None:
    for token in tokens:
        if acc.table is not None:
            _handle_table_token(acc, token)
            continue

        kind = token.type
        if kind == "heading_open":
            acc.flush_line()
            acc.push_blank()
            acc.heading_level = int(token.tag[1:])
        elif kind == "heading_close":
            acc.heading_level = None
            acc.end_block()
        elif kind == "paragraph_close":
            if token.hidden:
                acc.flush_line()
            else:
                acc.end_block()
        elif kind in {"bullet_list_open", "ordered_list_open"}:
            acc.flush_line()
            if not acc.lists:
                acc.push_blank()
            ordered = kind == "ordered_list_open"
            start = token.attrGet("start") if ordered else None
            acc.lists.append(_ListFrame(ordered=ordered, next_number=1 if start is None else int(start)))
        elif kind in {"bullet_list_close", "ordered_list_close"}:
            acc.flush_line()
            if acc.lists:
                acc.lists.pop()
            if not acc.lists:
                acc.push_blank()
        elif kind == "list_item_open":
            acc.start_list_item()
        elif kind == "list_item_close":
            acc.flush_line()
        elif kind == "blockquote_open":
            acc.flush_line()
            acc.quote_depth += 1
        elif kind == "blockquote_close":
            acc.flush_line()
            acc.quote_depth = max(0, acc.quote_depth - 1)
            acc.push_blank()
        elif kind in {"fence", "code_block"}:
            acc.code_block(token.content, token.info or "")
        elif kind == "hr":
            acc.rule()
        elif kind == "table_open":
            acc.flush_line()
            acc.table = _TableBuilder()
        elif kind == "inline":
            _render_inline(acc, token)


def render_markdown(
    text: str,
    column_width: int,
    theme: Theme,
    code_style: str | None = None,
) -> tuple[list[StyledLine], list[LinkRange]]:
    """Convert markdown ``text`` into styled logical lines and link ranges.

    ``column_width`` is only used to fit tables; paragraphs are left unwrapped.
    """
    acc = _LineAccumulator(theme, column_width, code_style)
    _convert(_parser().parse(text), acc)
    acc.flush_line()
    while acc.lines and acc.lines[-1].is_blank:
        acc.lines.pop()
    return acc.lines, acc.links


def render_plain(text: str) -> list[StyledLine]:
    """Return the raw source lines, unstyled."""
    return [StyledLine.raw(line.expandtabs(4)) for line in text.splitlines()]
