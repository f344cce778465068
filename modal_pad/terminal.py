#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Modal-Pad is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
curses side of the editor: turning ``get_wch()`` results into events and
painting `Frame` objects.
"""

import curses
import logging
import sys
from typing import Any, Dict, Optional, TextIO, Tuple, Union

from .events import ClosedEvent, Event, Key, KeyEvent, ResizeEvent
from .render import CursorStyle, Frame

logger = logging.getLogger(__name__)

ESC = "\x1b"
_ENTER_CHARS = {"\n", "\r"}
_BACKSPACE_CHARS = {"\x7f", "\x08"}
_BACKSPACE_CODES = {curses.KEY_BACKSPACE, 8, 127}

# DECSCUSR: steady block / steady bar
CURSOR_SEQUENCES = {
    CursorStyle.BLOCK: "\x1b[2 q",
    CursorStyle.BAR: "\x1b[6 q",
}
CURSOR_RESET_SEQUENCE = "\x1b[0 q"


def hex_to_xterm(hex_color: str) -> int:
    """
    Converts a hex color string to the nearest xterm-256 color index.
    """
    hex_color = hex_color.lstrip('#')
    if len(hex_color) != 6:
        return 255  # Default to white on error

    try:
        r, g, b = int(hex_color[0:2], 16), int(hex_color[2:4], 16), int(hex_color[4:6], 16)
    except ValueError:
        return 255

    # Simple grayscale check
    if r == g == b:
        if r < 8:
            return 16
        if r > 248:
            return 231
        return round(((r - 8) / 247) * 24) + 232

    # Color cube
    color_index = 16
    color_index += 36 * round(r / 255 * 5)
    color_index += 6 * round(g / 255 * 5)
    color_index += round(b / 255 * 5)
    return int(color_index)


# ───────────────────── Input ─────────────────────
def decode_key(key: Union[str, int]) -> KeyEvent:
    """
    Translate one ``get_wch()`` result into a `KeyEvent`.

    ``KEY_RESIZE`` and the ESC/Alt ambiguity are handled by `read_event`,
    which has access to the window.

    Example:
        >>> decode_key("x")
        KeyEvent(key=<Key.CHAR: 'char'>, char='x', ctrl=False, alt=False)
        >>> decode_key("\\x01").ctrl
        True
    """
    if isinstance(key, int):
        if key in _BACKSPACE_CODES:
            return KeyEvent(Key.BACKSPACE)
        if key == curses.KEY_ENTER:
            return KeyEvent(Key.ENTER)
        return KeyEvent(Key.OTHER)

    if key in _ENTER_CHARS:
        return KeyEvent(Key.ENTER)
    if key in _BACKSPACE_CHARS:
        return KeyEvent(Key.BACKSPACE)
    if key == ESC:
        return KeyEvent(Key.ESC)
    if len(key) == 1 and 1 <= ord(key) <= 26:
        return KeyEvent(Key.CHAR, chr(ord("a") + ord(key) - 1), ctrl=True)
    if len(key) == 1:
        return KeyEvent(Key.CHAR, key)
    return KeyEvent(Key.OTHER)


def read_event(stdscr: Any, escape_delay: int = 25) -> Event:
    """
    Block until the next terminal event.

    A lone ESC is reported as `Key.ESC`; ESC followed by a character within
    *escape_delay* milliseconds is reported as that character with
    ``alt=True``. A failing ``get_wch()`` means the input is gone and yields
    `ClosedEvent`.
    """
    try:
        key = stdscr.get_wch()
    except curses.error as exc:
        logger.info("read_event: input closed (%s)", exc)
        return ClosedEvent()

    if key == curses.KEY_RESIZE:
        try:
            curses.update_lines_cols()
        except curses.error:
            pass
        rows, cols = stdscr.getmaxyx()
        return ResizeEvent(cols=cols, rows=rows)

    if key == ESC:
        return _read_after_escape(stdscr, escape_delay)

    return decode_key(key)


def _read_after_escape(stdscr: Any, escape_delay: int) -> KeyEvent:
    stdscr.timeout(escape_delay)
    try:
        next_key = stdscr.get_wch()
    except curses.error:
        # timeout: a plain Esc
        return KeyEvent(Key.ESC)
    finally:
        stdscr.timeout(-1)

    if isinstance(next_key, str) and next_key.isprintable():
        return KeyEvent(Key.CHAR, next_key, alt=True)

    # not part of an Alt chord; leave it for the next read
    try:
        if isinstance(next_key, int):
            curses.ungetch(next_key)
        else:
            curses.unget_wch(next_key)
    except curses.error as exc:
        logger.debug("Could not push back key %r after ESC: %s", next_key, exc)
    return KeyEvent(Key.ESC)


# ───────────────────── Output ─────────────────────
class CursesScreen:
    """
    Paints `Frame` objects onto a curses window.

    Args:
        stdscr: The root window from ``curses.wrapper``.
        config (dict): Application config; the ``[colors]`` section is used.
        tty (TextIO | None): Stream that receives cursor-shape escapes
            (defaults to ``sys.stdout``).
    """

    def __init__(self, stdscr: Any, config: Optional[Dict[str, Any]] = None,
                 tty: Optional[TextIO] = None) -> None:
        self.stdscr = stdscr
        self.config = config or {}
        self.tty = tty if tty is not None else sys.stdout
        self.colors: Dict[str, int] = {}
        self._cursor_style: Optional[CursorStyle] = None
        self.init_colors()

    def init_colors(self) -> None:
        """
        Builds color attributes for the status, message and error lines from
        the ``[colors]`` section, falling back to monochrome attributes on
        terminals without 256 colors.
        """
        monochrome = {
            "status": curses.A_REVERSE,
            "message": curses.A_NORMAL,
            "error": curses.A_BOLD,
        }
        try:
            if not curses.has_colors() or curses.COLORS < 256:
                logger.warning("Terminal does not support 256 colors. Using default attributes.")
                self.colors = monochrome
                return
            curses.start_color()
            curses.use_default_colors()
        except (curses.error, AttributeError) as exc:
            logger.debug("Colors unavailable (%s); using monochrome attributes.", exc)
            self.colors = monochrome
            return

        user_colors = self.config.get("colors", {})
        for pair_id, name in enumerate(("status", "message", "error"), start=1):
            hex_code = user_colors.get(name, "#C9D1D9")
            try:
                curses.init_pair(pair_id, hex_to_xterm(hex_code), -1)
                attr = curses.color_pair(pair_id)
                if name == "status":
                    attr |= curses.A_REVERSE
                elif name == "error":
                    attr |= curses.A_BOLD
                self.colors[name] = attr
                logger.debug(f"Color '{name}': Hex {hex_code} -> Pair {pair_id}")
            except curses.error as e:
                logger.error(f"Failed to initialize color for '{name}' with hex '{hex_code}': {e}")
                self.colors[name] = monochrome[name]

    def size(self) -> Tuple[int, int]:
        """Return ``(cols, rows)``."""
        rows, cols = self.stdscr.getmaxyx()
        return cols, rows

    def paint(self, frame: Frame) -> None:
        """Redraw the whole screen from *frame*."""
        self.stdscr.erase()
        for row, line in enumerate(frame.lines):
            self._put(row, line, curses.A_NORMAL, frame.cols)
        self._put(frame.status_row, frame.status_line.ljust(frame.cols), self.colors["status"], frame.cols)
        message_attr = self.colors["error"] if frame.message_is_error else self.colors["message"]
        self._put(frame.message_row, frame.message_line, message_attr, frame.cols)

        try:
            self.stdscr.move(*frame.cursor)
        except curses.error:
            logger.debug("Could not move cursor to %r", frame.cursor)

        try:
            self.stdscr.noutrefresh()
            curses.doupdate()
        except curses.error as e:
            logger.error(f"Curses doupdate error: {e}")
        self.set_cursor_style(frame.cursor_style)

    def set_cursor_style(self, style: CursorStyle) -> None:
        if style is self._cursor_style:
            return
        self._cursor_style = style
        try:
            self.tty.write(CURSOR_SEQUENCES[style])
            self.tty.flush()
        except (OSError, ValueError) as exc:
            logger.debug("Could not set cursor style: %s", exc)

    def restore_cursor_style(self) -> None:
        """Return the terminal cursor to its default shape."""
        self._cursor_style = None
        try:
            self.tty.write(CURSOR_RESET_SEQUENCE)
            self.tty.flush()
        except (OSError, ValueError) as exc:
            logger.debug("Could not reset cursor style: %s", exc)

    def _put(self, row: int, text: str, attr: int, cols: int) -> None:
        # writing the bottom-right cell always raises in curses
        try:
            self.stdscr.addnstr(row, 0, text, cols, attr)
        except curses.error:
            logger.debug("curses.error in addnstr at row %d: %r", row, text)
