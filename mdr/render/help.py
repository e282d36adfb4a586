"""Static key reference shown in help mode."""

from __future__ import annotations

from ..text.styled import Style, StyledLine
from ..theme import Theme

HELP_TITLE = "mdr - help"

HELP_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "Navigation:",
        (
            ("Up/Down", "Scroll line by line"),
            ("PageUp/PageDown", "Scroll by page"),
            ("Space/Tab", "Page down"),
            ("Shift+Tab", "Page up"),
            ("Home/End", "Jump to top/bottom"),
            ("]", "Next document"),
            ("[", "Previous document"),
            ("Mouse wheel", "Scroll"),
        ),
    ),
    (
        "Search:",
        (
            ("/", "Start search"),
            ("Enter", "Jump to first match"),
            ("Esc", "Cancel search"),
            ("n / N", "Next/previous match"),
        ),
    ),
    (
        "Links:",
        (
            ("Enter", "Open first link in view"),
            ("Click", "Open link under pointer"),
        ),
    ),
    (
        "Modes:",
        (
            ("b", "Toggle BeeLine"),
            ("m", "Toggle plain mode"),
        ),
    ),
    (
        "General:",
        (
            ("g", "Go to document"),
            ("o", "Open markdown filesystem browser"),
            ("h / Esc", "Toggle help"),
            ("q", "Quit"),
        ),
    ),
)


def help_lines(theme: Theme) -> list[StyledLine]:
    """Return the help listing as styled lines."""
    heading = Style(fg=theme.heading, bold=True)
    lines = [StyledLine.raw(HELP_TITLE, Style(fg=theme.title, bold=True)), StyledLine()]
    for title, rows in HELP_SECTIONS:
        lines.append(StyledLine.raw(title, heading))
        for key, action in rows:
            lines.append(StyledLine.raw(f"  {key:<20} {action}"))
        lines.append(StyledLine())
    lines.pop()
    return lines
