"""Main interactive event loop for the viewer.

Paints a frame only when state changed, reads one input token, and hands it
to the controller. Terminal resizes are picked up by polling the terminal
size between reads.
"""

from __future__ import annotations

import logging
import shutil
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ..documents.queue import DocumentQueue
from ..documents.source import load_document
from ..render.screen import render_screen
from ..theme import Theme
from ..viewer.controller import ViewerCallbacks, ViewerController
from ..viewer.frame import ScreenLayout, build_frame, build_help_frame
from ..viewer.modes import HelpMode
from ..viewer.state import ViewerState
from .input import read_key
from .launcher import open_url as launch_url
from .terminal import TerminalController

logger = logging.getLogger(__name__)

POLL_TIMEOUT_MS = 100
PRIMING_POLL_MS = 80


@dataclass(frozen=True)
class ViewerSettings:
    theme: Theme
    code_style: str | None = None


def layout_frame(
    state: ViewerState,
    queue: DocumentQueue,
    layout: ScreenLayout,
    settings: ViewerSettings,
) -> None:
    """Rebuild the frame for the current mode and install it on ``state``."""
    area = layout.content
    if isinstance(state.mode, HelpMode):
        frame = build_help_frame(area.width, settings.theme)
    else:
        frame = build_frame(
            queue.current().content,
            area.width,
            settings.theme,
            state.search,
            plain_mode=state.plain_mode,
            beeline=state.beeline_enabled,
            code_style=settings.code_style,
        )
    state.apply_frame(frame, area)


def run_viewer(
    queue: DocumentQueue,
    *,
    picker_root: Path,
    settings: ViewerSettings,
    state: ViewerState | None = None,
    open_url: Callable[[str], None] = launch_url,
) -> None:
    """Run the interactive viewer until the user quits."""
    state = state if state is not None else ViewerState()
    controller = ViewerController(
        state,
        queue,
        picker_root,
        ViewerCallbacks(open_url=open_url, load_document=load_document),
    )
    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    last_size: tuple[int, int] | None = None
    dirty = True
    primed = False
    skip_next_lf = False

    with terminal.raw_mode():
        while True:
            term = shutil.get_terminal_size((80, 24))
            size = (term.columns, term.lines)
            if size != last_size:
                if last_size is not None:
                    logger.debug("terminal resized to %sx%s", *size)
                    state.hover_pending = True
                    terminal.rearm_mouse_reporting()
                last_size = size
                dirty = True

            layout = ScreenLayout(*size)
            if dirty:
                layout_frame(state, queue, layout, settings)
                render_screen(
                    state,
                    layout,
                    settings.theme,
                    queue.label(),
                    [document.display_path for document in queue.documents],
                )
                dirty = False

            if not primed:
                # Input may already be buffered; mouse capture is re-armed
                # after the first bounded poll either way.
                key = read_key(stdin_fd, timeout_ms=PRIMING_POLL_MS)
                terminal.rearm_mouse_reporting()
                primed = True
            else:
                key = read_key(stdin_fd, timeout_ms=POLL_TIMEOUT_MS)
            if key == "":
                continue

            if skip_next_lf and key == "ENTER_LF":
                skip_next_lf = False
                continue
            skip_next_lf = key == "ENTER_CR"

            if key == "FOCUS_IN":
                terminal.rearm_mouse_reporting()
            if controller.handle_key(key):
                break
            dirty = True

