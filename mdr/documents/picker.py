"""Directory listing for the open-file picker overlay."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from pathlib import Path

from .discovery import is_markdown_path


class PickerEntryKind(enum.IntEnum):
    # Values give the listing order.
    PARENT = 0
    DIRECTORY = 1
    FILE = 2


@dataclass(frozen=True)
class PickerEntry:
    path: Path
    kind: PickerEntryKind
    label: str


def canonical_dir(directory: Path) -> Path:
    try:
        return directory.resolve(strict=True)
    except OSError:
        return directory.absolute()


def list_entries(directory: Path, query: str = "") -> list[PickerEntry]:
    """List the parent link, sub-directories and markdown files of ``directory``.

    Hidden names are skipped. ``query`` filters names by case-insensitive
    substring. Raises ``OSError`` if ``directory`` is not a readable directory.
    """
    directory = canonical_dir(Path(directory))
    if not directory.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")
    needle = query.strip().lower()

    entries: list[PickerEntry] = []
    if directory.parent != directory:
        entries.append(PickerEntry(directory.parent, PickerEntryKind.PARENT, "../"))

    listed: list[PickerEntry] = []
    with os.scandir(directory) as it:
        for entry in it:
            name = entry.name
            if name.startswith("."):
                continue
            if needle and needle not in name.lower():
                continue
            path = Path(entry.path)
            try:
                if entry.is_dir():
                    listed.append(PickerEntry(path, PickerEntryKind.DIRECTORY, f"{name}/"))
                elif entry.is_file() and is_markdown_path(path):
                    listed.append(PickerEntry(path, PickerEntryKind.FILE, name))
            except OSError:
                continue
    listed.sort(key=lambda item: (item.kind, item.label.lower()))
    entries.extend(listed)
    return entries
