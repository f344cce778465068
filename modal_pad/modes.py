#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Modal-Pad is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Modal key dispatch.

`KeyDispatcher` routes each key event to Normal, Insert or Command mode
handling and applies the result to the `EditorState` it was built with.
"""

import logging
from typing import Callable, Dict

from .commands import CommandResult, execute_command, parse_command
from .events import Key, KeyEvent
from .state import EditorState, Mode

logger = logging.getLogger(__name__)


## ==================== KeyDispatcher Class ====================
class KeyDispatcher:
    """
    Translates key events into editor actions according to the current mode.

    Normal mode keys are looked up in an action map; Insert and Command mode
    treat printable characters as text and handle Backspace, Enter and Esc
    explicitly. Key/mode pairs without a handler are ignored.

    Methods:
    1. handle_key
    2. _setup_normal_actions
    3. _handle_normal / _handle_insert / _handle_command
    """

    def __init__(self, state: EditorState) -> None:
        self.state = state
        self.normal_actions = self._setup_normal_actions()

    # ───────────────────── Handle Input ─────────────────────
    def handle_key(self, event: KeyEvent) -> bool:
        """
        Apply one key event.

        Args:
            event (KeyEvent): The key pressed.

        Returns:
            bool: False if the key ended the session (``:q``, ``:q!``,
            a successful ``:wq``), True otherwise.

        Example:
            >>> dispatcher.handle_key(events.char("i"))
            True
            >>> dispatcher.state.mode
            <Mode.INSERT: 'Insert'>
        """
        mode = self.state.mode
        logger.debug("handle_key: %r in %s mode", event, mode.value)
        if mode is Mode.NORMAL:
            self._handle_normal(event)
            return True
        if mode is Mode.INSERT:
            self._handle_insert(event)
            return True
        return self._handle_command(event)

    # ───────────────────── Normal mode ─────────────────────
    def _setup_normal_actions(self) -> Dict[str, Callable[[], None]]:
        position = self.state.position
        return {
            "h": position.move_left,
            "l": position.move_right,
            "j": position.move_down,
            "k": position.move_up,
            "i": self.insert_before,
            "a": self.insert_after,
            "I": self.insert_line_start,
            "A": self.insert_line_end,
            "o": self.open_line_below,
            "O": self.open_line_above,
            ":": self.enter_command_mode,
        }

    def _handle_normal(self, event: KeyEvent) -> None:
        if not event.is_printable or event.char not in self.normal_actions:
            logger.debug("Unmapped key in Normal mode: %r", event)
            return
        self.normal_actions[event.char]()

    def insert_before(self) -> None:
        self.state.position.sticky_column = None
        self._enter_insert_mode()

    def insert_after(self) -> None:
        position = self.state.position
        position.set_column(position.cursor_col + 1)
        self._enter_insert_mode()

    def insert_line_start(self) -> None:
        self.state.position.set_column(0)
        self._enter_insert_mode()

    def insert_line_end(self) -> None:
        position = self.state.position
        position.set_column(position.current_line_length())
        self._enter_insert_mode()

    def open_line_below(self) -> None:
        position = self.state.position
        line_end = position.buffer.line_start(position.line_index) + position.current_line_length()
        self.state.buffer.insert_newline(line_end)
        position.next_line()
        self.state.dirty = True
        self._enter_insert_mode()

    def open_line_above(self) -> None:
        position = self.state.position
        self.state.buffer.insert_newline(position.buffer.line_start(position.line_index))
        position.set_column(0)
        self.state.dirty = True
        self._enter_insert_mode()

    def _enter_insert_mode(self) -> None:
        self.state.set_status("")
        self.state.set_mode(Mode.INSERT)

    def enter_command_mode(self) -> None:
        state = self.state
        state.position.sticky_column = None
        state.saved_cursor = state.position.snapshot()
        state.command_buffer = ":"
        state.command_cursor = 1
        state.set_status("")
        state.set_mode(Mode.COMMAND)

    # ───────────────────── Insert mode ─────────────────────
    def _handle_insert(self, event: KeyEvent) -> None:
        if event.is_printable:
            self.insert_char(event.char)
        elif event.key is Key.BACKSPACE:
            self.backspace()
        elif event.key is Key.ENTER:
            self.newline()
        elif event.key is Key.ESC:
            self.state.set_status("")
            self.state.set_mode(Mode.NORMAL)
        else:
            logger.debug("Unmapped key in Insert mode: %r", event)

    def insert_char(self, ch: str) -> None:
        position = self.state.position
        self.state.buffer.insert_char(position.offset(), ch)
        position.sticky_column = None
        position.cursor_col += 1
        self.state.dirty = True

    def backspace(self) -> None:
        """Delete the character before the cursor, joining lines at column 0."""
        position = self.state.position
        if position.line_index == 0 and position.cursor_col == 0:
            return
        offset = position.offset()
        if position.cursor_col > 0:
            position.set_column(position.cursor_col - 1)
        else:
            # lands on the join point: the previous line's length before the merge
            position.previous_line_end()
        self.state.buffer.delete_range(offset - 1, offset)
        self.state.dirty = True

    def newline(self) -> None:
        position = self.state.position
        self.state.buffer.insert_newline(position.offset())
        position.next_line()
        self.state.dirty = True

    # ───────────────────── Command mode ─────────────────────
    def _handle_command(self, event: KeyEvent) -> bool:
        state = self.state
        if event.is_printable:
            cursor = state.command_cursor
            state.command_buffer = state.command_buffer[:cursor] + event.char + state.command_buffer[cursor:]
            state.command_cursor += 1
        elif event.key is Key.BACKSPACE:
            cursor = state.command_cursor
            if cursor > 1:
                state.command_buffer = state.command_buffer[:cursor - 1] + state.command_buffer[cursor:]
                state.command_cursor -= 1
            if len(state.command_buffer) <= 1 or cursor <= 1:
                self._leave_command_mode()
        elif event.key is Key.ESC:
            self._leave_command_mode()
        elif event.key is Key.ENTER:
            return self.run_command()
        else:
            logger.debug("Unmapped key in Command mode: %r", event)
        return True

    def run_command(self) -> bool:
        text = self.state.command_buffer
        logger.info("Command line: '%s'", text)
        result = execute_command(self.state, parse_command(text))
        if result is CommandResult.EXIT:
            return False
        self._leave_command_mode()
        return True

    def _leave_command_mode(self) -> None:
        state = self.state
        state.command_buffer = ""
        state.command_cursor = 0
        if state.saved_cursor is not None:
            state.position.restore(state.saved_cursor)
            state.saved_cursor = None
        state.set_mode(Mode.NORMAL)
