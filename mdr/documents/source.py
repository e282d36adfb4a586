"""Document loading with tolerant decoding and control-byte neutralization."""

from __future__ import annotations

import re
from pathlib import Path

from .queue import QueuedDocument

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def read_text(path: Path) -> str:
    """Read text as UTF-8 (a leading BOM is dropped), falling back to latin-1.

    Raises ``OSError`` if the file cannot be read at all.
    """
    try:
        return path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError:
        return path.read_text(encoding="latin-1")


def sanitize_terminal_text(source: str) -> str:
    """Escape control characters so document text cannot drive the terminal."""
    if _CONTROL_RE.search(source) is None:
        return source
    return _CONTROL_RE.sub(lambda m: f"\\x{ord(m.group()):02x}", source)


def load_document(path: Path) -> QueuedDocument:
    """Read ``path`` into a queue entry; ``OSError`` propagates."""
    return QueuedDocument(path=path, content=sanitize_terminal_text(read_text(path)))
