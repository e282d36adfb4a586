"""Viewer input modes; exactly one is active at a time."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from ..documents.picker import PickerEntry


@dataclass
class NormalMode:
    pass


@dataclass
class SearchMode:
    """Query entry; the query itself lives in the shared search session."""


@dataclass
class HelpMode:
    saved_scroll: int


@dataclass
class PickerMode:
    directory: Path
    query: str = ""
    entries: list[PickerEntry] = field(default_factory=list)
    selected: int = 0

    def clamp_selection(self) -> None:
        if self.selected >= len(self.entries):
            self.selected = max(0, len(self.entries) - 1)


@dataclass
class GoToMode:
    total: int
    selected: int = 0


ViewerMode = Union[NormalMode, SearchMode, HelpMode, PickerMode, GoToMode]

OVERLAY_MODES = (PickerMode, GoToMode)
