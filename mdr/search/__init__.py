"""Search over rendered document text."""

from .engine import SearchMatch, SearchSession, find_matches, match_ranges, resolve_matches

__all__ = [
    "SearchMatch",
    "SearchSession",
    "find_matches",
    "match_ranges",
    "resolve_matches",
]
