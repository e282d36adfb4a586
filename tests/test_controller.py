"""Viewer state machine tests.

Drives ``ViewerController`` with key tokens the way the runtime loop does,
re-laying out the frame after every token.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from mdr.documents.queue import DocumentQueue, QueuedDocument
from mdr.runtime.loop import ViewerSettings, layout_frame
from mdr.theme import PASTEL_THEME
from mdr.viewer.controller import ViewerCallbacks, ViewerController
from mdr.viewer.frame import ScreenLayout
from mdr.viewer.modes import GoToMode, HelpMode, NormalMode, PickerMode, SearchMode
from mdr.viewer.state import ViewerState

LONG_DOC = "\n\n".join(f"Paragraph {idx} with some filler words." for idx in range(40))
LINK_DOC = "Intro line.\n\nVisit [the site](https://example.com) today.\n"


def _document(name: str, content: str) -> QueuedDocument:
    return QueuedDocument(Path(f"/docs/{name}"), content)


class ControllerHarness(unittest.TestCase):
    layout = ScreenLayout(40, 12)

    def make(self, *documents: QueuedDocument, picker_root: Path | None = None) -> None:
        self.queue = DocumentQueue(documents or [_document("long.md", LONG_DOC)])
        self.state = ViewerState()
        self.open_url = mock.Mock()
        self.load_document = mock.Mock()
        self.controller = ViewerController(
            self.state,
            self.queue,
            picker_root or Path("/"),
            ViewerCallbacks(open_url=self.open_url, load_document=self.load_document),
        )
        self.settings = ViewerSettings(theme=PASTEL_THEME)
        self.relayout()

    def relayout(self) -> None:
        layout_frame(self.state, self.queue, self.layout, self.settings)

    def press(self, *keys: str) -> bool:
        quit_requested = False
        for key in keys:
            quit_requested = self.controller.handle_key(key)
            self.relayout()
            if quit_requested:
                break
        return quit_requested


class NormalModeTests(ControllerHarness):
    def setUp(self) -> None:
        self.make()

    def test_q_and_ctrl_c_quit(self) -> None:
        self.assertTrue(self.press("q"))
        self.assertTrue(self.press("CTRL_C"))

    def test_line_page_and_edge_scrolling(self) -> None:
        self.press("DOWN", "DOWN")
        self.assertEqual(self.state.scroll_row, 2)
        self.press("PAGE_DOWN")
        self.assertEqual(self.state.scroll_row, 2 + self.state.page)
        self.press("END")
        self.assertEqual(self.state.scroll_row, self.state.max_scroll)
        self.press("DOWN")
        self.assertEqual(self.state.scroll_row, self.state.max_scroll)
        self.press("HOME", "UP")
        self.assertEqual(self.state.scroll_row, 0)

    def test_space_tab_and_backtab_page(self) -> None:
        self.press(" ")
        self.assertEqual(self.state.scroll_row, self.state.page)
        self.press("TAB")
        self.assertEqual(self.state.scroll_row, 2 * self.state.page)
        self.press("BACKTAB")
        self.assertEqual(self.state.scroll_row, self.state.page)

    def test_toggles(self) -> None:
        self.press("b")
        self.assertFalse(self.state.beeline_enabled)
        self.press("m")
        self.assertTrue(self.state.plain_mode)
        self.press("m", "b")
        self.assertFalse(self.state.plain_mode)
        self.assertTrue(self.state.beeline_enabled)

    def test_unbound_key_is_ignored(self) -> None:
        self.assertFalse(self.press("z"))
        self.assertIsInstance(self.state.mode, NormalMode)


class SearchModeTests(ControllerHarness):
    def setUp(self) -> None:
        self.make()

    def test_typing_then_enter_jumps_to_first_match(self) -> None:
        self.press("/", *"Paragraph 30")
        self.assertIsInstance(self.state.mode, SearchMode)
        self.assertEqual(self.state.search.query, "Paragraph 30")

        self.press("ENTER_CR")

        self.assertIsInstance(self.state.mode, NormalMode)
        match = self.state.search.matches[0]
        self.assertEqual(self.state.scroll_row, min(match.resolved_row, self.state.max_scroll))
        self.assertGreater(self.state.scroll_row, 0)

    def test_q_is_part_of_the_query(self) -> None:
        self.assertFalse(self.press("/", "q"))
        self.assertEqual(self.state.search.query, "q")

    def test_backspace_and_escape(self) -> None:
        self.press("/", "a", "b", "BACKSPACE")
        self.assertEqual(self.state.search.query, "a")

        self.press("ESC")

        self.assertIsInstance(self.state.mode, NormalMode)
        self.assertEqual(self.state.search.query, "")
        self.assertEqual(self.state.search.matches, [])

    def test_enter_without_matches_keeps_scroll(self) -> None:
        self.press("DOWN", "/", *"zzzz", "ENTER_CR")

        self.assertEqual(self.state.scroll_row, 1)

    def test_n_and_shift_n_cycle_matches(self) -> None:
        self.press("/", *"Paragraph 1", "ENTER_CR")
        count = len(self.state.search.matches)
        self.assertGreater(count, 1)

        self.press("n")
        self.assertEqual(self.state.search.active_index, 1)
        self.press("N", "N")
        self.assertEqual(self.state.search.active_index, count - 1)

    def test_arrow_keys_scroll_while_typing(self) -> None:
        self.press("/", "DOWN")

        self.assertIsInstance(self.state.mode, SearchMode)
        self.assertEqual(self.state.scroll_row, 1)


class HelpModeTests(ControllerHarness):
    def setUp(self) -> None:
        self.make()
        self.press("DOWN", "DOWN", "DOWN")

    def test_h_restores_scroll(self) -> None:
        self.press("h")
        self.assertIsInstance(self.state.mode, HelpMode)
        self.assertEqual(self.state.scroll_row, 0)
        self.press("DOWN")

        self.press("h")

        self.assertIsInstance(self.state.mode, NormalMode)
        self.assertEqual(self.state.scroll_row, 3)

    def test_escape_restores_scroll(self) -> None:
        self.press("h", "END", "ESC")

        self.assertIsInstance(self.state.mode, NormalMode)
        self.assertEqual(self.state.scroll_row, 3)

    def test_search_does_not_start_from_help(self) -> None:
        self.press("h", "/")

        self.assertIsInstance(self.state.mode, HelpMode)

    def test_beeline_and_plain_toggles_work_in_help(self) -> None:
        self.press("h", "b", "m")

        self.assertIsInstance(self.state.mode, HelpMode)
        self.assertFalse(self.state.beeline_enabled)
        self.assertTrue(self.state.plain_mode)


class DocumentSwitchTests(ControllerHarness):
    def setUp(self) -> None:
        self.make(_document("a.md", LONG_DOC), _document("b.md", LINK_DOC))

    def test_switch_resets_scroll_search_and_hover(self) -> None:
        self.press("DOWN", "/", "P", "ENTER_CR")
        self.state.hover_link = "https://stale.example"

        self.press("]")

        self.assertEqual(self.queue.current_index, 1)
        self.assertEqual(self.state.scroll_row, 0)
        self.assertEqual(self.state.search.query, "")
        self.assertEqual(self.state.search.matches, [])
        self.assertIsNone(self.state.hover_link)

    def test_previous_wraps_to_last(self) -> None:
        self.press("[")

        self.assertEqual(self.queue.current_index, 1)

    def test_single_document_switch_keeps_state(self) -> None:
        self.make(_document("only.md", LONG_DOC))
        self.press("DOWN")

        self.press("]")

        self.assertEqual(self.state.scroll_row, 1)


class GoToOverlayTests(ControllerHarness):
    def setUp(self) -> None:
        self.make(_document("a.md", "A"), _document("b.md", "B"), _document("c.md", "C"))

    def test_preselects_current_and_jumps_on_enter(self) -> None:
        self.press("]")
        self.press("g")
        mode = self.state.mode
        assert isinstance(mode, GoToMode)
        self.assertEqual(mode.selected, 1)

        self.press("DOWN", "ENTER_CR")

        self.assertIsInstance(self.state.mode, NormalMode)
        self.assertEqual(self.queue.current_index, 2)

    def test_selection_saturates_and_escape_closes(self) -> None:
        self.press("g", "UP", "UP", "END", "DOWN", "TAB")
        mode = self.state.mode
        assert isinstance(mode, GoToMode)
        self.assertEqual(mode.selected, 2)

        self.press("ESC")

        self.assertIsInstance(self.state.mode, NormalMode)
        self.assertEqual(self.queue.current_index, 0)

    def test_overlay_suppresses_quit_and_search(self) -> None:
        self.assertFalse(self.press("g", "q", "/"))

        self.assertIsInstance(self.state.mode, GoToMode)

    def test_picker_key_inside_go_to_does_not_stack_overlays(self) -> None:
        self.press("g", "o")

        self.assertIsInstance(self.state.mode, GoToMode)

    def test_confirmed_search_survives_go_to_escape(self) -> None:
        self.press("/", "A", "ENTER_CR", "g", "ESC")

        self.assertEqual(self.state.search.query, "A")
        self.assertEqual(len(self.state.search.matches), 1)


class PickerOverlayTests(ControllerHarness):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        (self.root / "sub").mkdir()
        (self.root / "sub" / "inner.md").write_text("# Inner\n", encoding="utf-8")
        (self.root / "top.md").write_text("# Top\n", encoding="utf-8")
        self.make(_document("start.md", LONG_DOC), picker_root=self.root)
        self.load_document.side_effect = lambda path: QueuedDocument(path, path.read_text(encoding="utf-8"))

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _mode(self) -> PickerMode:
        mode = self.state.mode
        assert isinstance(mode, PickerMode)
        return mode

    def test_opens_at_canonical_root(self) -> None:
        self.press("o")

        mode = self._mode()
        self.assertEqual(mode.directory, self.root)
        self.assertEqual([entry.label for entry in mode.entries], ["../", "sub/", "top.md"])

    def test_enter_directory_then_open_file(self) -> None:
        self.press("o", "DOWN", "ENTER_CR")
        self.assertEqual(self._mode().directory, self.root / "sub")

        self.press("DOWN", "ENTER_CR")

        self.assertIsInstance(self.state.mode, NormalMode)
        self.assertEqual(self.queue.current().path, self.root / "sub" / "inner.md")
        self.assertEqual(len(self.queue), 2)

    def test_query_filters_and_backspace_climbs_when_empty(self) -> None:
        self.press("o", "t", "o", "p")
        self.assertEqual([entry.label for entry in self._mode().entries], ["../", "top.md"])

        self.press("BACKSPACE", "BACKSPACE", "BACKSPACE")
        self.assertEqual(self._mode().query, "")
        self.press("BACKSPACE")

        self.assertEqual(self._mode().directory, self.root.parent)

    def test_escape_leaves_document_untouched(self) -> None:
        self.press("DOWN", "o", "ESC")

        self.assertIsInstance(self.state.mode, NormalMode)
        self.assertEqual(self.queue.current().path, Path("/docs/start.md"))
        self.assertEqual(self.state.scroll_row, 1)

    def test_confirmed_search_survives_picker_escape(self) -> None:
        self.press("/", *"Paragraph 30", "ENTER_CR")
        scroll_row = self.state.scroll_row

        self.press("o", "ESC")

        self.assertEqual(self.state.search.query, "Paragraph 30")
        self.assertTrue(self.state.search.matches)
        self.assertEqual(self.state.scroll_row, scroll_row)

    def test_reopening_a_queued_file_focuses_it(self) -> None:
        self.press("o", "END", "ENTER_CR")
        self.press("[", "o", "END", "ENTER_CR")

        self.assertEqual(len(self.queue), 2)
        self.assertEqual(self.load_document.call_count, 1)

    def test_unreadable_file_is_ignored(self) -> None:
        self.load_document.side_effect = PermissionError("denied")

        self.press("o", "END", "ENTER_CR")

        self.assertEqual(len(self.queue), 1)
        self.assertIsInstance(self.state.mode, NormalMode)


class LinkAndMouseTests(ControllerHarness):
    def setUp(self) -> None:
        self.make(_document("links.md", LINK_DOC))

    def _cell_of(self, text: str) -> tuple[int, int]:
        """Return the 1-based SGR coordinates of ``text`` on screen."""
        area = self.state.content_area
        frame = self.state.frame
        assert frame is not None
        for row in range(frame.total_rows):
            located = frame.mapper.locate_row(row)
            assert located is not None
            line = frame.mapper.lines_text[located[0]]
            col = line.find(text)
            if col >= 0:
                return area.x + col + 1, area.y + row - self.state.scroll_row + 1
        raise AssertionError(f"{text!r} not on screen")

    def test_enter_opens_first_link_in_view(self) -> None:
        self.press("ENTER_CR")

        self.open_url.assert_called_once_with("https://example.com")

    def test_click_on_link_opens_it(self) -> None:
        col, row = self._cell_of("the site")

        self.press(f"MOUSE_LEFT_DOWN:{col}:{row}")

        self.open_url.assert_called_once_with("https://example.com")

    def test_click_elsewhere_opens_nothing(self) -> None:
        col, row = self._cell_of("Intro")

        self.press(f"MOUSE_LEFT_DOWN:{col}:{row}")

        self.open_url.assert_not_called()

    def test_hover_tracks_pointer_and_focus_loss_clears_it(self) -> None:
        col, row = self._cell_of("the site")

        self.press(f"MOUSE_MOVE:{col}:{row}")
        self.assertEqual(self.state.hover_link, "https://example.com")

        self.press("FOCUS_OUT")
        self.assertIsNone(self.state.hover_link)

        self.press("FOCUS_IN")
        self.assertEqual(self.state.hover_link, "https://example.com")

    def test_click_in_search_mode_does_not_open(self) -> None:
        col, row = self._cell_of("the site")

        self.press("/", f"MOUSE_LEFT_DOWN:{col}:{row}")

        self.open_url.assert_not_called()

    def test_help_has_no_hover_links(self) -> None:
        col, row = self._cell_of("the site")

        self.press("h", f"MOUSE_MOVE:{col}:{row}", f"MOUSE_LEFT_DOWN:{col}:{row}")

        self.assertIsNone(self.state.hover_link)
        self.open_url.assert_not_called()

    def test_wheel_scrolls_three_rows_and_saturates(self) -> None:
        self.make()

        self.press("MOUSE_WHEEL_DOWN:5:5")
        self.assertEqual(self.state.scroll_row, 3)
        self.press("MOUSE_WHEEL_UP:5:5", "MOUSE_WHEEL_UP:5:5")
        self.assertEqual(self.state.scroll_row, 0)

    def test_mouse_is_ignored_under_overlays(self) -> None:
        self.make()

        self.press("g", "MOUSE_WHEEL_DOWN:5:5")

        self.assertEqual(self.state.scroll_row, 0)


if __name__ == "__main__":
    unittest.main()
