"""Incremental case-insensitive search over rendered document text.

Matching runs over the UTF-8 bytes of each line with ASCII-only case folding,
reporting every (possibly overlapping) occurrence. Rows for scroll targets are
resolved against the current frame's ``CoordinateMapper``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from ..layout.mapper import CoordinateMapper


@dataclass(frozen=True)
class SearchMatch:
    """One query occurrence on one logical line."""

    line_index: int
    byte_start: int
    byte_end: int
    char_start: int
    char_end: int
    resolved_row: int = 0


def _ascii_fold(data: bytes) -> bytes:
    return data.lower()


def match_ranges(text: str, query: str) -> list[tuple[int, int]]:
    """Return byte ranges of every occurrence of ``query`` in ``text``.

    Only ASCII letters are case-folded; overlapping occurrences are all kept.
    """
    needle = _ascii_fold(query.encode("utf-8"))
    hay = _ascii_fold(text.encode("utf-8"))
    if not needle or len(needle) > len(hay):
        return []
    ranges: list[tuple[int, int]] = []
    start = hay.find(needle)
    while start >= 0:
        ranges.append((start, start + len(needle)))
        start = hay.find(needle, start + 1)
    return ranges


def find_matches(lines: Sequence[str], query: str) -> list[SearchMatch]:
    """Scan all lines, returning matches ordered by ``(line_index, byte_start)``."""
    if not query:
        return []
    matches: list[SearchMatch] = []
    for line_index, line in enumerate(lines):
        ranges = match_ranges(line, query)
        if not ranges:
            continue
        encoded = line.encode("utf-8")
        for start, end in ranges:
            char_start = len(encoded[:start].decode("utf-8", errors="ignore"))
            char_end = char_start + len(encoded[start:end].decode("utf-8", errors="ignore"))
            matches.append(
                SearchMatch(
                    line_index=line_index,
                    byte_start=start,
                    byte_end=end,
                    char_start=char_start,
                    char_end=char_end,
                )
            )
    return matches


def resolve_matches(matches: Sequence[SearchMatch], mapper: CoordinateMapper) -> list[SearchMatch]:
    """Attach the rendered row of each match's first character."""
    resolved: list[SearchMatch] = []
    for match in matches:
        if 0 <= match.line_index < len(mapper.wraps):
            row = mapper.first_row_of(match.line_index, match.char_start)
        else:
            row = 0
        resolved.append(replace(match, resolved_row=row))
    return resolved


@dataclass
class SearchSession:
    """Query buffer, current matches, and the active-match cursor."""

    query: str = ""
    matches: list[SearchMatch] = field(default_factory=list)
    active_index: int = 0

    def clear(self) -> None:
        self.query = ""
        self.reset_matches()

    def reset_matches(self) -> None:
        self.matches = []
        self.active_index = 0

    def append(self, ch: str) -> None:
        """Extend the query; matches are recomputed on the next frame."""
        self.query += ch
        self.reset_matches()

    def backspace(self) -> None:
        self.query = self.query[:-1]
        self.reset_matches()

    def refresh(self, lines: Sequence[str], mapper: CoordinateMapper) -> None:
        """Recompute matches against the current frame's text and wrap table."""
        if not self.query:
            self.reset_matches()
            return
        self.matches = resolve_matches(find_matches(lines, self.query), mapper)
        if self.active_index >= len(self.matches):
            self.active_index = 0

    @property
    def active(self) -> SearchMatch | None:
        if 0 <= self.active_index < len(self.matches):
            return self.matches[self.active_index]
        return None

    def _target(self, limit: int) -> int | None:
        active = self.active
        if active is None:
            return None
        return min(active.resolved_row, max(0, limit))

    def confirm_target(self, limit: int) -> int | None:
        """Scroll target for confirming a search: the first match, if any."""
        if not self.matches:
            return None
        return min(self.matches[0].resolved_row, max(0, limit))

    def next(self, limit: int) -> int | None:
        """Advance circularly and return the new scroll target."""
        if not self.matches:
            return None
        self.active_index = (self.active_index + 1) % len(self.matches)
        return self._target(limit)

    def previous(self, limit: int) -> int | None:
        """Retreat circularly and return the new scroll target."""
        if not self.matches:
            return None
        self.active_index = (self.active_index - 1) % len(self.matches)
        return self._target(limit)
