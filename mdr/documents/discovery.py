"""Expansion of command-line inputs into markdown file paths."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = frozenset({"md", "markdown", "mdown", "mdx"})


def is_markdown_path(path: Path) -> bool:
    """Return whether ``path`` carries a markdown extension (case-insensitive)."""
    return path.suffix[1:].lower() in MARKDOWN_EXTENSIONS


def _canonical(path: Path) -> Path:
    try:
        return path.resolve(strict=True)
    except OSError:
        return path.absolute()


def _walk_markdown(root: Path) -> list[Path]:
    """Collect markdown files below ``root`` using an explicit directory stack."""
    found: list[Path] = []
    stack: list[Path] = [root]
    while stack:
        directory = stack.pop()
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as exc:
            logger.debug("skipping unreadable directory %s: %s", directory, exc)
            continue
        subdirs: list[Path] = []
        for entry in entries:
            path = Path(entry.path)
            try:
                if entry.is_dir():
                    subdirs.append(path)
                elif entry.is_file() and is_markdown_path(path):
                    found.append(_canonical(path))
            except OSError:
                continue
        # Reversed so the lexicographically first directory is visited next.
        stack.extend(reversed(subdirs))
    return found


def discover_markdown_paths(inputs: Iterable[Path | str]) -> list[Path]:
    """Expand files and directories into a sorted, de-duplicated path list.

    Raises ``FileNotFoundError`` for an input that is neither a directory nor
    an existing markdown file.
    """
    discovered: list[Path] = []
    for raw in inputs:
        path = Path(raw).expanduser()
        if path.is_dir():
            discovered.extend(_walk_markdown(path))
            continue
        if path.is_file() and is_markdown_path(path):
            discovered.append(_canonical(path))
            continue
        raise FileNotFoundError(f"Path not found or unsupported: {raw}")
    return sorted(set(discovered))
