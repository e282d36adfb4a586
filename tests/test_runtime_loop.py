"""Event-loop wiring tests with a fake terminal and scripted key input."""

from __future__ import annotations

import os
import unittest
from contextlib import contextmanager
from pathlib import Path
from unittest import mock

from mdr.documents.queue import DocumentQueue, QueuedDocument
from mdr.runtime.loop import PRIMING_POLL_MS, ViewerSettings, layout_frame, run_viewer
from mdr.theme import PASTEL_THEME
from mdr.viewer.frame import ScreenLayout
from mdr.viewer.modes import HelpMode
from mdr.viewer.state import ViewerState

DOC = "# Title\n\n" + "\n\n".join(f"para {idx} [x](https://example.com/{idx})" for idx in range(50))


class _FakeTerminal:
    instances: list["_FakeTerminal"] = []

    def __init__(self, *_args) -> None:
        self.entered = 0
        self.exited = 0
        self.rearms = 0
        _FakeTerminal.instances.append(self)

    @contextmanager
    def raw_mode(self):
        self.entered += 1
        try:
            yield
        finally:
            self.exited += 1

    def rearm_mouse_reporting(self) -> None:
        self.rearms += 1


class RunViewerTests(unittest.TestCase):
    def setUp(self) -> None:
        _FakeTerminal.instances.clear()
        self.queue = DocumentQueue([QueuedDocument(Path("/docs/a.md"), DOC)])
        self.settings = ViewerSettings(theme=PASTEL_THEME)

    def _run(self, keys: list[str], sizes: list[tuple[int, int]] | None = None, **kwargs) -> tuple[ViewerState, mock.Mock, mock.Mock]:
        state = ViewerState()
        size_iter = iter(sizes or [])
        last = [(80, 24)]

        def terminal_size(_fallback=None):
            last[0] = next(size_iter, last[0])
            return os.terminal_size(last[0])

        with mock.patch("mdr.runtime.loop.TerminalController", _FakeTerminal), mock.patch(
            "mdr.runtime.loop.sys"
        ), mock.patch("mdr.runtime.loop.read_key", side_effect=keys) as read_key, mock.patch(
            "mdr.runtime.loop.render_screen"
        ) as render, mock.patch("mdr.runtime.loop.shutil.get_terminal_size", side_effect=terminal_size):
            run_viewer(self.queue, picker_root=Path("/"), settings=self.settings, state=state, **kwargs)
        return state, read_key, render

    def test_quits_on_q_and_restores_terminal(self) -> None:
        _state, read_key, render = self._run(["", "DOWN", "q"])

        terminal = _FakeTerminal.instances[0]
        self.assertEqual((terminal.entered, terminal.exited), (1, 1))
        self.assertEqual(read_key.call_args_list[0].kwargs["timeout_ms"], PRIMING_POLL_MS)
        # Initial paint plus one repaint after DOWN; the empty poll paints nothing.
        self.assertEqual(render.call_count, 2)

    def test_priming_poll_rearms_mouse_capture(self) -> None:
        self._run(["q"])

        self.assertEqual(_FakeTerminal.instances[0].rearms, 1)

    def test_keys_reach_the_state_machine(self) -> None:
        state, _read_key, _render = self._run(["DOWN", "DOWN", "h", "q"])

        self.assertIsInstance(state.mode, HelpMode)
        self.assertEqual(state.mode.saved_scroll, 2)

    def test_lf_after_cr_is_ignored(self) -> None:
        opened: list[str] = []

        self._run(["ENTER_CR", "ENTER_LF", "q"], open_url=opened.append)

        self.assertEqual(opened, ["https://example.com/0"])

    def test_resize_triggers_relayout_and_rearm(self) -> None:
        state, _read_key, render = self._run(["", "q"], sizes=[(80, 24), (50, 20)])

        self.assertEqual(render.call_count, 2)
        self.assertEqual(state.content_area.width, ScreenLayout(50, 20).content.width)
        self.assertEqual(_FakeTerminal.instances[0].rearms, 2)

    def test_focus_in_rearms_mouse_capture(self) -> None:
        self._run(["FOCUS_IN", "q"])

        self.assertEqual(_FakeTerminal.instances[0].rearms, 2)


class LayoutFrameTests(unittest.TestCase):
    def test_help_mode_lays_out_help_listing(self) -> None:
        queue = DocumentQueue([QueuedDocument(Path("/docs/a.md"), DOC)])
        state = ViewerState(mode=HelpMode(saved_scroll=4))

        layout_frame(state, queue, ScreenLayout(80, 24), ViewerSettings(theme=PASTEL_THEME))

        assert state.frame is not None
        self.assertEqual(state.frame.links, ())
        self.assertTrue(state.frame.mapper.lines_text[0].startswith("mdr"))

    def test_scroll_is_clamped_to_new_frame(self) -> None:
        queue = DocumentQueue([QueuedDocument(Path("/docs/a.md"), "short")])
        state = ViewerState(scroll_row=99)

        layout_frame(state, queue, ScreenLayout(80, 24), ViewerSettings(theme=PASTEL_THEME))

        self.assertEqual(state.scroll_row, 0)


if __name__ == "__main__":
    unittest.main()
