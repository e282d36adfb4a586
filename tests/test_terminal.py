"""Tests for terminal mode control sequences and the URL launcher.

Verifies raw-mode lifecycle safety and expected escape-command payloads.
These guard the low-level terminal contract used by the runtime loop.
"""

from __future__ import annotations

import subprocess
import termios
import unittest
from unittest import mock

from mdr.runtime.launcher import open_url, opener_command
from mdr.runtime.terminal import TerminalController

MOUSE_ON = b"\x1b[?1000h\x1b[?1003h\x1b[?1006h"
MOUSE_OFF = b"\x1b[?1000l\x1b[?1003l\x1b[?1006l"


class TerminalBehaviorTests(unittest.TestCase):
    def test_enable_and_disable_tui_mode_use_alternate_screen_sequences(self) -> None:
        saved_state = [1, 2, 3]

        with mock.patch("mdr.runtime.terminal.termios.tcgetattr", return_value=saved_state), mock.patch(
            "mdr.runtime.terminal.tty.setraw"
        ) as setraw_mock, mock.patch("mdr.runtime.terminal.os.write") as write_mock, mock.patch(
            "mdr.runtime.terminal.termios.tcsetattr"
        ) as setattr_mock:
            controller = TerminalController(stdin_fd=0, stdout_fd=1)
            controller.enable_tui_mode()
            controller.disable_tui_mode()

        setraw_mock.assert_called_once_with(0, termios.TCSAFLUSH)
        self.assertEqual(
            write_mock.call_args_list[0].args,
            (1, b"\x1b[?1049h\x1b[?25l" + MOUSE_ON + b"\x1b[?1004h"),
        )
        self.assertEqual(
            write_mock.call_args_list[1].args,
            (1, MOUSE_OFF + b"\x1b[?1004l\x1b[0m\x1b[?25h\x1b[?1049l"),
        )
        setattr_mock.assert_called_once_with(0, termios.TCSAFLUSH, saved_state)

    def test_rearm_sends_disable_then_enable(self) -> None:
        with mock.patch("mdr.runtime.terminal.termios.tcgetattr", return_value=[0]):
            controller = TerminalController(stdin_fd=0, stdout_fd=1)

        with mock.patch("mdr.runtime.terminal.os.write") as write_mock:
            controller.rearm_mouse_reporting()

        write_mock.assert_called_once_with(1, MOUSE_OFF + MOUSE_ON)

    def test_raw_mode_restores_terminal_after_exception(self) -> None:
        with mock.patch("mdr.runtime.terminal.termios.tcgetattr", return_value=[0]):
            controller = TerminalController(stdin_fd=0, stdout_fd=1)

        with mock.patch.object(controller, "enable_tui_mode") as enable_mock, mock.patch.object(
            controller, "disable_tui_mode"
        ) as disable_mock:
            with self.assertRaises(RuntimeError):
                with controller.raw_mode():
                    raise RuntimeError("boom")

        enable_mock.assert_called_once()
        disable_mock.assert_called_once()


class LauncherTests(unittest.TestCase):
    def test_opener_command_per_platform(self) -> None:
        url = "https://example.com"

        self.assertEqual(opener_command(url, "darwin"), ["open", url])
        self.assertEqual(opener_command(url, "win32"), ["cmd", "/C", "start", "", url])
        self.assertEqual(opener_command(url, "linux"), ["xdg-open", url])

    def test_open_url_spawns_detached_without_waiting(self) -> None:
        with mock.patch("mdr.runtime.launcher.subprocess.Popen") as popen:
            open_url("https://example.com")

        popen.assert_called_once()
        kwargs = popen.call_args.kwargs
        self.assertTrue(kwargs["start_new_session"])
        self.assertEqual(kwargs["stdout"], subprocess.DEVNULL)
        popen.return_value.wait.assert_not_called()

    def test_open_url_swallows_missing_opener(self) -> None:
        with mock.patch("mdr.runtime.launcher.subprocess.Popen", side_effect=FileNotFoundError("xdg-open")):
            with self.assertLogs("mdr.runtime.launcher", level="DEBUG") as logs:
                open_url("https://example.com")

        self.assertIn("failed to open", logs.output[0])


if __name__ == "__main__":
    unittest.main()
