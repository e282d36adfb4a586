"""Viewer state machine: key and mouse token dispatch per mode.

``handle_key`` mutates ``ViewerState`` (and the document queue on document
switches) and returns ``True`` when the application should quit. Layout is
never recomputed here; the loop rebuilds the frame after every token.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ..documents.picker import PickerEntryKind, canonical_dir, list_entries
from ..documents.queue import DocumentQueue, QueuedDocument
from ..layout.mapper import link_at_scroll
from ..layout.scroll import WHEEL_STEP, scroll_by
from ..runtime.input import parse_mouse_token
from .keys import ENTER_KEYS, KeyComboBinding, KeyComboRegistry, is_enter, is_printable
from .modes import OVERLAY_MODES, GoToMode, HelpMode, NormalMode, PickerMode, SearchMode
from .state import ViewerState

logger = logging.getLogger(__name__)

QUIT_KEYS = ("CTRL_C",)


@dataclass(frozen=True)
class ViewerCallbacks:
    """Side effects the state machine delegates to the runtime."""

    open_url: Callable[[str], None]
    load_document: Callable[[Path], QueuedDocument]


class ViewerController:
    """Dispatch input tokens to the handler for the active mode."""

    def __init__(
        self,
        state: ViewerState,
        queue: DocumentQueue,
        picker_root: Path,
        callbacks: ViewerCallbacks,
    ) -> None:
        self.state = state
        self.queue = queue
        self.picker_root = picker_root
        self.callbacks = callbacks
        self._normal_keys = KeyComboRegistry().register_bindings(
            KeyComboBinding(("q",), self._quit),
            KeyComboBinding(("/",), self._start_search),
            KeyComboBinding(("h",), self._open_help),
            KeyComboBinding(("ESC",), self._clear_search),
            KeyComboBinding(("b",), self._toggle_beeline),
            KeyComboBinding(("m",), self._toggle_plain_mode),
            KeyComboBinding(("]",), self._next_document),
            KeyComboBinding(("[",), self._previous_document),
            KeyComboBinding(("g",), self._open_go_to),
            KeyComboBinding(("o",), self._open_picker),
            KeyComboBinding(("n",), self._next_match),
            KeyComboBinding(("N",), self._previous_match),
            KeyComboBinding(ENTER_KEYS, self._open_link_in_view),
            *self._scroll_bindings(),
        )
        self._help_keys = KeyComboRegistry().register_bindings(
            KeyComboBinding(("q",), self._quit),
            KeyComboBinding(("h", "ESC"), self._close_help),
            KeyComboBinding(("b",), self._toggle_beeline),
            KeyComboBinding(("m",), self._toggle_plain_mode),
            *self._scroll_bindings(),
        )
        self._search_scroll_keys = KeyComboRegistry().register_bindings(
            *(
                binding
                for binding in self._scroll_bindings()
                if " " not in binding.combos and "TAB" not in binding.combos
            )
        )

    # dispatch

    def handle_key(self, key: str) -> bool:
        """Handle one input token; return ``True`` when the viewer should quit."""
        if not key:
            return False
        if key in QUIT_KEYS:
            return True
        if key == "FOCUS_OUT":
            self.state.hover_link = None
            return False
        if key == "FOCUS_IN":
            self.state.hover_pending = True
            return False
        mouse = parse_mouse_token(key)
        if mouse is not None:
            self._handle_mouse(*mouse)
            return False
        if key == "MOUSE":
            return False

        mode = self.state.mode
        if isinstance(mode, PickerMode):
            self._handle_picker_key(mode, key)
            return False
        if isinstance(mode, GoToMode):
            self._handle_go_to_key(mode, key)
            return False
        if isinstance(mode, SearchMode):
            self._handle_search_key(key)
            return False
        registry = self._help_keys if isinstance(mode, HelpMode) else self._normal_keys
        return bool(registry.dispatch(key))

    # scrolling

    def _scroll_bindings(self) -> tuple[KeyComboBinding, ...]:
        return (
            KeyComboBinding(("UP",), lambda: self._scroll(-1)),
            KeyComboBinding(("DOWN",), lambda: self._scroll(1)),
            KeyComboBinding(("PAGE_DOWN", " ", "TAB"), lambda: self._scroll(self.state.page)),
            KeyComboBinding(("PAGE_UP", "BACKTAB"), lambda: self._scroll(-self.state.page)),
            KeyComboBinding(("HOME",), self._scroll_home),
            KeyComboBinding(("END",), self._scroll_end),
        )

    def _scroll(self, delta: int) -> None:
        state = self.state
        state.scroll_row = scroll_by(state.scroll_row, delta, state.max_scroll)

    def _scroll_home(self) -> None:
        self.state.scroll_row = 0

    def _scroll_end(self) -> None:
        self.state.scroll_row = self.state.max_scroll

    def _jump_to(self, target: int | None) -> None:
        if target is not None:
            self.state.scroll_row = target

    # normal mode actions

    def _quit(self) -> bool:
        return True

    def _start_search(self) -> None:
        self.state.search.clear()
        self.state.mode = SearchMode()

    def _clear_search(self) -> None:
        self.state.search.clear()

    def _open_help(self) -> None:
        state = self.state
        state.mode = HelpMode(saved_scroll=state.scroll_row)
        state.scroll_row = 0
        state.hover_link = None

    def _close_help(self) -> None:
        mode = self.state.mode
        if isinstance(mode, HelpMode):
            self.state.scroll_row = mode.saved_scroll
        self.state.mode = NormalMode()

    def _toggle_beeline(self) -> None:
        self.state.beeline_enabled = not self.state.beeline_enabled

    def _toggle_plain_mode(self) -> None:
        self.state.plain_mode = not self.state.plain_mode
        self.state.hover_link = None

    def _next_document(self) -> None:
        if self.queue.next():
            self.state.reset_for_document()

    def _previous_document(self) -> None:
        if self.queue.prev():
            self.state.reset_for_document()

    def _next_match(self) -> None:
        self._jump_to(self.state.search.next(self.state.max_scroll))

    def _previous_match(self) -> None:
        self._jump_to(self.state.search.previous(self.state.max_scroll))

    def _open_link_in_view(self) -> None:
        frame = self.state.frame
        if frame is None:
            return
        url = link_at_scroll(frame.mapper, frame.links, self.state.scroll_row)
        if url is not None:
            self.callbacks.open_url(url)

    # search mode

    def _handle_search_key(self, key: str) -> None:
        search = self.state.search
        if is_enter(key):
            self.state.mode = NormalMode()
            self._jump_to(search.confirm_target(self.state.max_scroll))
        elif key == "ESC":
            search.clear()
            self.state.mode = NormalMode()
        elif key == "BACKSPACE":
            search.backspace()
        elif is_printable(key):
            search.append(key)
        else:
            self._search_scroll_keys.dispatch(key)

    # picker overlay

    def _open_picker(self) -> None:
        state = self.state
        state.hover_link = None
        mode = PickerMode(directory=canonical_dir(self.picker_root))
        self._refresh_picker(mode)
        state.mode = mode

    def _refresh_picker(self, mode: PickerMode) -> None:
        try:
            mode.entries = list_entries(mode.directory, mode.query)
        except OSError as exc:
            logger.debug("cannot list %s: %s", mode.directory, exc)
            mode.entries = []
        mode.clamp_selection()

    def _handle_picker_key(self, mode: PickerMode, key: str) -> None:
        if key == "ESC":
            self.state.mode = NormalMode()
        elif key in {"UP", "BACKTAB"}:
            mode.selected = max(0, mode.selected - 1)
        elif key in {"DOWN", "TAB"}:
            if mode.entries:
                mode.selected = min(mode.selected + 1, len(mode.entries) - 1)
        elif key == "HOME":
            mode.selected = 0
        elif key == "END":
            mode.selected = max(0, len(mode.entries) - 1)
        elif key == "BACKSPACE":
            if mode.query:
                mode.query = mode.query[:-1]
            elif mode.directory.parent != mode.directory:
                mode.directory = mode.directory.parent
                mode.selected = 0
            self._refresh_picker(mode)
        elif is_enter(key):
            self._activate_picker_entry(mode)
        elif is_printable(key):
            mode.query += key
            self._refresh_picker(mode)

    def _activate_picker_entry(self, mode: PickerMode) -> None:
        if not (0 <= mode.selected < len(mode.entries)):
            return
        entry = mode.entries[mode.selected]
        if entry.kind in (PickerEntryKind.PARENT, PickerEntryKind.DIRECTORY):
            mode.directory = entry.path
            mode.query = ""
            mode.selected = 0
            self._refresh_picker(mode)
            return
        self.state.mode = NormalMode()
        self._open_path(entry.path)

    def _open_path(self, path: Path) -> None:
        if not self.queue.focus_path(path):
            try:
                document = self.callbacks.load_document(path)
            except OSError as exc:
                logger.debug("cannot open %s: %s", path, exc)
                return
            self.queue.push_and_focus(document)
        self.state.reset_for_document()

    # go-to overlay

    def _open_go_to(self) -> None:
        total = len(self.queue)
        if total == 0:
            return
        state = self.state
        state.hover_link = None
        state.mode = GoToMode(total=total, selected=min(self.queue.current_index, total - 1))

    def _handle_go_to_key(self, mode: GoToMode, key: str) -> None:
        if key == "ESC":
            self.state.mode = NormalMode()
        elif key in {"UP", "BACKTAB"}:
            mode.selected = max(0, mode.selected - 1)
        elif key in {"DOWN", "TAB"}:
            mode.selected = min(mode.selected + 1, max(0, mode.total - 1))
        elif key == "HOME":
            mode.selected = 0
        elif key == "END":
            mode.selected = max(0, mode.total - 1)
        elif is_enter(key):
            self.state.mode = NormalMode()
            if self.queue.focus_index(mode.selected):
                self.state.reset_for_document()

    # mouse

    def _handle_mouse(self, kind: str, col: int, row: int) -> None:
        state = self.state
        # SGR reports are 1-based.
        pos = (col - 1, row - 1)
        state.last_mouse_pos = pos
        mode = state.mode
        if isinstance(mode, OVERLAY_MODES):
            return
        in_help = isinstance(mode, HelpMode)

        if kind == "MOUSE_WHEEL_UP":
            self._scroll(-WHEEL_STEP)
        elif kind == "MOUSE_WHEEL_DOWN":
            self._scroll(WHEEL_STEP)
        elif kind == "MOUSE_LEFT_DOWN":
            if in_help or isinstance(mode, SearchMode):
                return
            if not state.content_area.contains(*pos):
                return
            state.hover_link = state.link_under(*pos)
            if state.hover_link is not None:
                self.callbacks.open_url(state.hover_link)
            return
        elif kind not in {"MOUSE_MOVE", "MOUSE_LEFT_UP"}:
            return

        if not in_help:
            state.hover_link = state.link_under(*pos)
