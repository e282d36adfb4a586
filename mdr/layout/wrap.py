"""Word wrapping of logical lines into fixed-width display rows.

Rows are character-index ranges into the original line rather than copies of
the text, so hit-testing can map a screen cell straight back to a character.
"""

from __future__ import annotations

from dataclasses import dataclass

from .width import char_widths


@dataclass(frozen=True)
class WrapRow:
    """Half-open character range ``[start_char, end_char)`` shown on one row."""

    start_char: int
    end_char: int

    def __contains__(self, char_index: object) -> bool:
        return isinstance(char_index, int) and self.start_char <= char_index < self.end_char

    @property
    def is_empty(self) -> bool:
        return self.end_char <= self.start_char


LineWrap = tuple[WrapRow, ...]

EMPTY_LINE_WRAP: LineWrap = (WrapRow(0, 0),)


def _tokenize(text: str) -> list[tuple[int, int]]:
    """Split ``text`` into maximal whitespace / non-whitespace runs."""
    tokens: list[tuple[int, int]] = []
    start = 0
    in_ws = text[0].isspace()
    for idx, ch in enumerate(text):
        is_ws = ch.isspace()
        if is_ws != in_ws:
            tokens.append((start, idx))
            start = idx
            in_ws = is_ws
    tokens.append((start, len(text)))
    return tokens


def wrap_line(text: str, column_budget: int) -> LineWrap:
    """Wrap one logical line into rows no wider than ``column_budget`` columns.

    Tokens are packed greedily; a token that does not fit closes the current
    row and is retried on a fresh one. A token wider than the whole budget is
    split character by character. The only row that may exceed the budget is
    one holding a single character that is itself wider than the budget.
    """
    budget = max(1, column_budget)
    if not text:
        return EMPTY_LINE_WRAP

    widths = char_widths(text)
    rows: list[WrapRow] = []
    row_open = False
    row_start = 0
    row_end = 0
    used_width = 0

    for tok_start, tok_end in _tokenize(text):
        start = tok_start
        token_width = sum(widths[start:tok_end])
        while True:
            if used_width + token_width <= budget:
                if not row_open:
                    row_start = start
                    row_open = True
                used_width += token_width
                row_end = tok_end
                break

            if used_width > 0:
                rows.append(WrapRow(row_start, row_end))
                row_open = False
                used_width = 0
                continue

            consumed = 0
            split_end = start
            while split_end < tok_end:
                w = widths[split_end]
                if consumed + w > budget and consumed > 0:
                    break
                consumed += w
                split_end += 1
                if consumed >= budget:
                    break
            # Combining marks stay on the row of their base character.
            while split_end < tok_end and widths[split_end] == 0:
                split_end += 1
            chunk_end = max(split_end, start + 1)
            rows.append(WrapRow(row_start if row_open else start, chunk_end))
            row_open = False
            start = chunk_end
            if start >= tok_end:
                break
            token_width = sum(widths[start:tok_end])

    if row_open:
        rows.append(WrapRow(row_start, row_end))
    return tuple(rows)


def build_wraps(lines: list[str], width: int) -> tuple[list[LineWrap], list[int]]:
    """Wrap every line and build the cumulative vertical offset table.

    Each line contributes ``max(1, rows)`` rendered rows, so an empty line
    never collapses to zero height.
    """
    wraps: list[LineWrap] = []
    offsets: list[int] = []
    current = 0
    for line in lines:
        offsets.append(current)
        wrap = wrap_line(line, width)
        wraps.append(wrap)
        current += max(1, len(wrap))
    return wraps, offsets


def row_width(text: str, row: WrapRow) -> int:
    """Return display width of the characters covered by ``row``."""
    return sum(char_widths(text[row.start_char : row.end_char]))
