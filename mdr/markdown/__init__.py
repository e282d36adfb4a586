"""Markdown conversion into styled logical lines."""

from .converter import LinkRange, render_markdown, render_plain
from .highlight import highlight_code

__all__ = ["LinkRange", "highlight_code", "render_markdown", "render_plain"]
