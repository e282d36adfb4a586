"""Document queue, discovery, picker listing, and loading."""

from .discovery import MARKDOWN_EXTENSIONS, discover_markdown_paths, is_markdown_path
from .picker import PickerEntry, PickerEntryKind, list_entries
from .queue import DocumentQueue, QueuedDocument
from .source import load_document, read_text

__all__ = [
    "DocumentQueue",
    "MARKDOWN_EXTENSIONS",
    "PickerEntry",
    "PickerEntryKind",
    "QueuedDocument",
    "discover_markdown_paths",
    "is_markdown_path",
    "list_entries",
    "load_document",
    "read_text",
]
