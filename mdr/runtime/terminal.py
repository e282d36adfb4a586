"""Terminal control helpers for the viewer session.

Owns raw-mode lifecycle, alternate-screen switching, and mouse/focus
reporting toggles.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

_MOUSE_ON = b"\x1b[?1000h\x1b[?1003h\x1b[?1006h"
_MOUSE_OFF = b"\x1b[?1000l\x1b[?1003l\x1b[?1006l"
_FOCUS_ON = b"\x1b[?1004h"
_FOCUS_OFF = b"\x1b[?1004l"


class TerminalController:
    """Manage terminal mode transitions for the full-screen viewer."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with mouse and focus reporting."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        # Alternate screen, hidden cursor, any-motion SGR mouse, focus events.
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l" + _MOUSE_ON + _FOCUS_ON)

    def disable_tui_mode(self) -> None:
        """Restore normal terminal state and disable reporting."""
        os.write(self.stdout_fd, _MOUSE_OFF + _FOCUS_OFF + b"\x1b[0m\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def rearm_mouse_reporting(self) -> None:
        """Send disable then enable; some terminals drop capture after focus changes."""
        os.write(self.stdout_fd, _MOUSE_OFF + _MOUSE_ON)

    @contextlib.contextmanager
    def raw_mode(self):
        """Run the body in TUI mode; the terminal is restored even on error."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
