"""Persistent viewer state carried across frames."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..layout.mapper import link_at_position
from ..layout.scroll import clamp_scroll, max_scroll, page_size
from ..search.engine import SearchSession
from .frame import ContentArea, Frame
from .modes import HelpMode, NormalMode, ViewerMode


@dataclass
class ViewerState:
    """Mode, scroll position, search session, and hover tracking."""

    mode: ViewerMode = field(default_factory=NormalMode)
    scroll_row: int = 0
    viewport_height: int = 0
    search: SearchSession = field(default_factory=SearchSession)
    hover_link: str | None = None
    beeline_enabled: bool = True
    plain_mode: bool = False
    content_area: ContentArea = ContentArea(0, 0, 0, 0)
    last_mouse_pos: tuple[int, int] | None = None
    hover_pending: bool = False
    frame: Frame | None = None

    @property
    def total_rows(self) -> int:
        return self.frame.total_rows if self.frame is not None else 0

    @property
    def max_scroll(self) -> int:
        return max_scroll(self.total_rows, self.viewport_height)

    @property
    def page(self) -> int:
        return page_size(self.viewport_height)

    def apply_frame(self, frame: Frame, area: ContentArea) -> None:
        """Install a freshly laid-out frame and clamp scroll to it."""
        self.frame = frame
        self.content_area = area
        self.viewport_height = area.height
        self.scroll_row = clamp_scroll(self.scroll_row, frame.total_rows, area.height)
        if self.hover_pending:
            self.hover_pending = False
            if self.last_mouse_pos is not None:
                self.hover_link = self.link_under(*self.last_mouse_pos)

    def link_under(self, col: int, row: int) -> str | None:
        """Return the URL drawn at screen cell ``(col, row)`` (0-based)."""
        frame = self.frame
        if frame is None or isinstance(self.mode, HelpMode):
            return None
        area = self.content_area
        if not area.contains(col, row):
            return None
        return link_at_position(
            frame.mapper,
            frame.links,
            self.scroll_row + (row - area.y),
            col - area.x,
        )

    def reset_for_document(self) -> None:
        """Forget everything tied to the previous document."""
        self.mode = NormalMode()
        self.scroll_row = 0
        self.search.clear()
        self.hover_link = None
        self.frame = None
