"""Ordered list of loaded documents with a focus cursor."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class QueuedDocument:
    path: Path
    content: str

    @property
    def display_path(self) -> str:
        return str(self.path)


class DocumentQueue:
    """Non-empty document list; ``next``/``prev`` wrap around."""

    def __init__(self, documents: Iterable[QueuedDocument]) -> None:
        self._documents = list(documents)
        if not self._documents:
            raise ValueError("Document queue cannot be empty")
        self._current = 0

    def __len__(self) -> int:
        return len(self._documents)

    @property
    def current_index(self) -> int:
        return self._current

    @property
    def documents(self) -> tuple[QueuedDocument, ...]:
        return tuple(self._documents)

    def current(self) -> QueuedDocument:
        return self._documents[self._current]

    def next(self) -> bool:
        """Focus the following document; returns whether focus moved."""
        if len(self._documents) <= 1:
            return False
        self._current = (self._current + 1) % len(self._documents)
        return True

    def prev(self) -> bool:
        """Focus the preceding document; returns whether focus moved."""
        if len(self._documents) <= 1:
            return False
        self._current = (self._current - 1) % len(self._documents)
        return True

    def focus_index(self, index: int) -> bool:
        if 0 <= index < len(self._documents):
            self._current = index
            return True
        return False

    def focus_path(self, path: Path) -> bool:
        """Focus an already queued document by path."""
        for idx, doc in enumerate(self._documents):
            if doc.path == path:
                self._current = idx
                return True
        return False

    def push_and_focus(self, document: QueuedDocument) -> None:
        self._documents.append(document)
        self._current = len(self._documents) - 1

    def label(self) -> str:
        """Title label ``[current/total] path`` for the viewer frame."""
        total = max(1, len(self._documents))
        current = min(self._current + 1, total)
        return f"[{current}/{total}] {self.current().display_path}"
