import curses
import io
import unittest
from unittest.mock import MagicMock, call, patch

from modal_pad.events import ClosedEvent, Key, KeyEvent, ResizeEvent
from modal_pad.render import CursorStyle, Frame
from modal_pad.terminal import (
    CURSOR_RESET_SEQUENCE,
    CURSOR_SEQUENCES,
    CursesScreen,
    decode_key,
    hex_to_xterm,
    read_event,
)


class TestHexToXterm(unittest.TestCase):

    def test_grays_and_cube(self):
        self.assertEqual(hex_to_xterm("#000000"), 16)
        self.assertEqual(hex_to_xterm("#FFFFFF"), 231)
        self.assertEqual(hex_to_xterm("#FF0000"), 196)

    def test_invalid_values_fall_back_to_white(self):
        self.assertEqual(hex_to_xterm("#FFF"), 255)
        self.assertEqual(hex_to_xterm("#GGGGGG"), 255)


class TestDecodeKey(unittest.TestCase):

    def test_printable(self):
        self.assertEqual(decode_key("x"), KeyEvent(Key.CHAR, "x"))
        self.assertEqual(decode_key("é"), KeyEvent(Key.CHAR, "é"))

    def test_enter_and_backspace(self):
        for key in ("\n", "\r", curses.KEY_ENTER):
            self.assertIs(decode_key(key).key, Key.ENTER)
        for key in ("\x7f", "\x08", curses.KEY_BACKSPACE, 127):
            self.assertIs(decode_key(key).key, Key.BACKSPACE)

    def test_control_letters(self):
        event = decode_key("\x03")
        self.assertEqual(event, KeyEvent(Key.CHAR, "c", ctrl=True))
        self.assertFalse(event.is_printable)

    def test_function_keys_are_other(self):
        self.assertIs(decode_key(curses.KEY_UP).key, Key.OTHER)
        self.assertIs(decode_key(curses.KEY_F1).key, Key.OTHER)


class TestReadEvent(unittest.TestCase):

    def setUp(self):
        self.stdscr = MagicMock()

    def test_plain_key(self):
        self.stdscr.get_wch.return_value = "a"
        self.assertEqual(read_event(self.stdscr), KeyEvent(Key.CHAR, "a"))

    def test_input_error_means_closed(self):
        self.stdscr.get_wch.side_effect = curses.error("no input")
        self.assertIsInstance(read_event(self.stdscr), ClosedEvent)

    @patch("modal_pad.terminal.curses.update_lines_cols")
    def test_resize(self, mock_update):
        self.stdscr.get_wch.return_value = curses.KEY_RESIZE
        self.stdscr.getmaxyx.return_value = (30, 100)
        self.assertEqual(read_event(self.stdscr), ResizeEvent(cols=100, rows=30))
        mock_update.assert_called_once()

    def test_lone_escape(self):
        self.stdscr.get_wch.side_effect = ["\x1b", curses.error("timeout")]
        self.assertEqual(read_event(self.stdscr, escape_delay=10), KeyEvent(Key.ESC))
        self.stdscr.timeout.assert_has_calls([call(10), call(-1)])

    def test_alt_chord(self):
        self.stdscr.get_wch.side_effect = ["\x1b", "x"]
        self.assertEqual(read_event(self.stdscr), KeyEvent(Key.CHAR, "x", alt=True))

    @patch("modal_pad.terminal.curses.ungetch")
    def test_escape_then_special_key_is_pushed_back(self, mock_ungetch):
        self.stdscr.get_wch.side_effect = ["\x1b", curses.KEY_UP]
        self.assertEqual(read_event(self.stdscr), KeyEvent(Key.ESC))
        mock_ungetch.assert_called_once_with(curses.KEY_UP)


class TestCursesScreen(unittest.TestCase):

    def setUp(self):
        self.stdscr = MagicMock()
        self.stdscr.getmaxyx.return_value = (5, 20)
        self.tty = io.StringIO()
        patcher = patch("modal_pad.terminal.curses.has_colors", return_value=False)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.screen = CursesScreen(self.stdscr, {}, tty=self.tty)

    def make_frame(self, style=CursorStyle.BLOCK, is_error=False):
        return Frame(
            lines=["hello", "world"],
            status_line="Normal",
            message_line="Error: no file name" if is_error else "",
            message_is_error=is_error,
            cursor=(1, 3),
            cursor_style=style,
            rows=5,
            cols=20,
        )

    def test_monochrome_without_colors(self):
        self.assertEqual(self.screen.colors["status"], curses.A_REVERSE)

    def test_size(self):
        self.assertEqual(self.screen.size(), (20, 5))

    @patch("modal_pad.terminal.curses.doupdate")
    def test_paint(self, mock_doupdate):
        self.screen.paint(self.make_frame(is_error=True))
        self.stdscr.erase.assert_called_once()
        self.stdscr.addnstr.assert_any_call(0, 0, "hello", 20, curses.A_NORMAL)
        self.stdscr.addnstr.assert_any_call(1, 0, "world", 20, curses.A_NORMAL)
        self.stdscr.addnstr.assert_any_call(3, 0, "Normal".ljust(20), 20, curses.A_REVERSE)
        self.stdscr.addnstr.assert_any_call(4, 0, "Error: no file name", 20, curses.A_BOLD)
        self.stdscr.move.assert_called_once_with(1, 3)
        mock_doupdate.assert_called_once()

    @patch("modal_pad.terminal.curses.doupdate")
    def test_paint_survives_curses_errors(self, mock_doupdate):
        self.stdscr.addnstr.side_effect = curses.error("bottom-right")
        self.screen.paint(self.make_frame())
        self.stdscr.move.assert_called_once_with(1, 3)

    @patch("modal_pad.terminal.curses.doupdate")
    def test_cursor_style_written_only_on_change(self, mock_doupdate):
        self.screen.paint(self.make_frame(CursorStyle.BLOCK))
        self.screen.paint(self.make_frame(CursorStyle.BLOCK))
        self.screen.paint(self.make_frame(CursorStyle.BAR))
        self.assertEqual(self.tty.getvalue(),
                         CURSOR_SEQUENCES[CursorStyle.BLOCK] + CURSOR_SEQUENCES[CursorStyle.BAR])

    def test_restore_cursor_style(self):
        self.screen.set_cursor_style(CursorStyle.BAR)
        self.screen.restore_cursor_style()
        self.assertTrue(self.tty.getvalue().endswith(CURSOR_RESET_SEQUENCE))


if __name__ == '__main__':
    unittest.main()
