#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Modal-Pad is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Session startup and the main event loop.
"""

import argparse
import curses
import locale
import logging
import os
import signal
import sys
from typing import Any, Callable, Dict, List, Optional

from . import __version__
from .buffer import TextBuffer
from .config import load_config
from .events import ClosedEvent, Event, KeyEvent, ResizeEvent
from .log_setup import KEY_LOGGER_NAME, setup_logging
from .modes import KeyDispatcher
from .render import Frame, build_frame, visible_rows_for
from .state import EditorState
from .terminal import CursesScreen, read_event

# ──────────────────────────── Global loggers ────────────────────────────
logger = logging.getLogger("modal_pad")  # main application logger
KEY_LOGGER = logging.getLogger(KEY_LOGGER_NAME)  # per-event trace


class Editor:
    """
    Owns one `EditorState` and feeds it events.

    The terminal is not touched here except through the ``screen`` and
    ``read`` arguments of `run`, so the whole session can be driven from
    tests with plain event objects.

    Attributes:
        state (EditorState): The session state.
        dispatcher (KeyDispatcher): Mode-aware key handling bound to ``state``.
        cols (int): Last known terminal width.
        rows (int): Last known terminal height.
    """

    def __init__(self, state: Optional[EditorState] = None, config: Optional[Dict[str, Any]] = None,
                 cols: int = 80, rows: int = 24) -> None:
        self.config = config if config is not None else load_config()
        self.state = state if state is not None else EditorState()
        self.dispatcher = KeyDispatcher(self.state)
        self.cols = cols
        self.rows = rows
        self.state.position.resize(visible_rows_for(rows))

    @classmethod
    def open_path(cls, path: Optional[str], config: Optional[Dict[str, Any]] = None,
                  cols: int = 80, rows: int = 24) -> "Editor":
        """
        Start a session for *path*.

        An existing file is loaded; a missing one gives an empty buffer that
        will be created on the first successful ``:w``; no path gives an
        empty unnamed buffer.

        Raises:
            OSError: If the file exists but cannot be read.
            UnicodeDecodeError: If its contents cannot be decoded.
        """
        if config is None:
            config = load_config()
        editor_config = config.get("editor", {})
        encoding = editor_config.get("encoding", "utf-8")

        if path and os.path.exists(path):
            buffer = TextBuffer.read_from(
                path,
                default_encoding=encoding,
                detect_encoding=editor_config.get("detect_encoding", True),
            )
            status = f'"{path}" {buffer.line_count()}L, {buffer.char_count()}C'
        else:
            buffer = TextBuffer(encoding=encoding)
            status = f'"{path}" [New]' if path else ""
            if path:
                logger.info("'%s' does not exist yet; it will be created on save", path)

        state = EditorState(buffer, filename=path)
        state.set_status(status)
        return cls(state, config=config, cols=cols, rows=rows)

    # ───────────────────── Events ─────────────────────
    def resize(self, cols: int, rows: int) -> None:
        self.cols = cols
        self.rows = rows
        self.state.position.resize(visible_rows_for(rows))

    def handle_event(self, event: Event) -> bool:
        """
        Apply one terminal event.

        Returns:
            bool: False when the session must end (quit command or closed input).
        """
        if isinstance(event, ClosedEvent):
            logger.info("Input closed; ending session.")
            running = False
        elif isinstance(event, ResizeEvent):
            self.resize(event.cols, event.rows)
            running = True
        elif isinstance(event, KeyEvent):
            running = self.dispatcher.handle_key(event)
        else:
            logger.warning("Ignoring unknown event %r", event)
            running = True

        KEY_LOGGER.debug("Got event %r; shift_row %d; line count %d; size %dx%d",
                         event, self.state.shift_row, self.state.buffer.line_count(),
                         self.cols, self.rows)
        return running

    def frame(self) -> Frame:
        return build_frame(self.state, self.cols, self.rows)

    def run(self, screen: CursesScreen, read: Callable[[], Event]) -> None:
        """
        The main loop: size, draw, block for one event, apply it.

        Args:
            screen (CursesScreen): Painter for frames.
            read (Callable[[], Event]): Blocking source of the next event.
        """
        logger.info("Editor main loop started.")
        while True:
            cols, rows = screen.size()
            if (cols, rows) != (self.cols, self.rows):
                self.resize(cols, rows)
            screen.paint(self.frame())
            if not self.handle_event(read()):
                break
        logger.info("Editor main loop finished.")


def run_curses(stdscr: Any, editor: Editor) -> None:
    """
    Body passed to ``curses.wrapper``: prepares the terminal and runs *editor*.
    """
    stdscr.keypad(True)
    curses.raw()
    curses.noecho()
    try:
        curses.curs_set(1)
    except curses.error:
        logger.debug("Terminal cannot change cursor visibility.")

    screen = CursesScreen(stdscr, editor.config)
    escape_delay = int(editor.config.get("editor", {}).get("escape_delay", 25))
    try:
        editor.run(screen, lambda: read_event(stdscr, escape_delay))
    finally:
        screen.restore_cursor_style()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="modal-pad", description="A small modal text editor.")
    parser.add_argument("filename", nargs="?", help="file to edit (created on first save if missing)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Console entry point.

    Loads configuration and logging, opens the file named on the command
    line and runs the editor inside ``curses.wrapper`` so the terminal is
    restored however the session ends.

    Returns:
        int: Process exit status.
    """
    args = parse_args(argv)

    if hasattr(signal, "SIGTSTP"):
        try:
            signal.signal(signal.SIGTSTP, signal.SIG_IGN)
        except (OSError, ValueError) as e:
            print(f"Warning: Could not set SIGTSTP to ignore: {e}", file=sys.stderr)

    config = load_config()
    setup_logging(config)
    logger.info("Modal-Pad %s starting up...", __version__)

    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error as e_locale:
        logger.error(f"Failed to set system locale: {e_locale}.", exc_info=True)

    escape_delay = int(config.get("editor", {}).get("escape_delay", 25))
    os.environ.setdefault("ESCDELAY", str(escape_delay))

    try:
        editor = Editor.open_path(args.filename, config)
    except (OSError, UnicodeError) as exc:
        logger.critical("Cannot open '%s': %s", args.filename, exc, exc_info=True)
        print(f"modal-pad: cannot open '{args.filename}': {exc}", file=sys.stderr)
        return 1

    try:
        curses.wrapper(run_curses, editor)
    except Exception:
        logger.critical("Unhandled exception during editor execution.", exc_info=True)
        raise
    logger.info("Modal-Pad shut down gracefully.")
    return 0
