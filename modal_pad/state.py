#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Modal-Pad is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Editor session state shared by the dispatcher, the command interpreter and the renderer."""

import enum
import logging
from typing import Optional

from .buffer import TextBuffer
from .position import CursorSnapshot, Position

logger = logging.getLogger(__name__)


class Mode(enum.Enum):
    NORMAL = "Normal"
    INSERT = "Insert"
    COMMAND = "Command"


class EditorState:
    """
    Everything one editing session knows about.

    A single instance is created at startup and owned by the main loop for
    the whole session; handlers receive it explicitly.

    Attributes:
        buffer (TextBuffer): The document.
        filename (Optional[str]): Path used by ``:w``; ``None`` for an unnamed buffer.
        position (Position): Cursor, scroll offset and sticky column.
        mode (Mode): Current input mode.
        command_buffer (str): Text typed in Command mode, starting with ``":"``.
        command_cursor (int): Insertion point inside ``command_buffer``.
        saved_cursor (Optional[CursorSnapshot]): Cursor taken when ``:`` was pressed.
        dirty (bool): True iff the buffer changed since the last successful save.
        status_message (str): Text for the message line outside Command mode.
    """

    def __init__(self, buffer: Optional[TextBuffer] = None, filename: Optional[str] = None,
                 visible_rows: int = 1) -> None:
        self.buffer = buffer if buffer is not None else TextBuffer()
        self.filename = filename
        self.position = Position(self.buffer, visible_rows)
        self.mode = Mode.NORMAL
        self.command_buffer = ""
        self.command_cursor = 0
        self.saved_cursor: Optional[CursorSnapshot] = None
        self.dirty = False
        self.status_message = ""

    # Shortcuts onto the position model
    @property
    def cursor_row(self) -> int:
        return self.position.cursor_row

    @property
    def cursor_col(self) -> int:
        return self.position.cursor_col

    @property
    def shift_row(self) -> int:
        return self.position.shift_row

    @property
    def sticky_column(self) -> Optional[int]:
        return self.position.sticky_column

    def set_mode(self, mode: Mode) -> None:
        if mode is not self.mode:
            logger.debug("Mode %s -> %s", self.mode.value, mode.value)
        self.mode = mode

    def set_status(self, message: str) -> None:
        if message:
            logger.debug("Status message: '%s'", message)
        self.status_message = message
