#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Modal-Pad is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Cursor position and vertical scrolling.

The cursor is stored in screen-relative terms (``cursor_row``,
``cursor_col``) plus the index of the first visible buffer line
(``shift_row``). The buffer line under the cursor is always
``shift_row + cursor_row``.
"""

import logging
from typing import NamedTuple, Optional

from .buffer import TextBuffer

logger = logging.getLogger(__name__)


class CursorSnapshot(NamedTuple):
    cursor_row: int
    cursor_col: int
    shift_row: int
    sticky_column: Optional[int]


class Position:
    """
    Keeps ``(cursor_row, cursor_col, shift_row)`` on a valid buffer location.

    All motions saturate at the buffer edges and report whether anything
    moved. Vertical motions remember the column they started from in
    ``sticky_column`` so that passing over a short line does not lose the
    intended column; every other motion forgets it.

    Attributes:
        buffer (TextBuffer): The document being navigated.
        visible_rows (int): Number of text rows on screen (at least 1).
        sticky_column (Optional[int]): Column remembered across consecutive
            vertical motions, ``None`` outside such a sequence.
    """

    def __init__(self, buffer: TextBuffer, visible_rows: int = 1) -> None:
        self.buffer = buffer
        self.cursor_row = 0
        self.cursor_col = 0
        self.shift_row = 0
        self.sticky_column: Optional[int] = None
        self.visible_rows = max(1, visible_rows)

    # ───────────────────── Derived values ─────────────────────
    @property
    def line_index(self) -> int:
        return self.shift_row + self.cursor_row

    def current_line(self) -> str:
        return self.buffer.line(self.line_index)

    def current_line_length(self) -> int:
        return self.buffer.line_length(self.line_index)

    def offset(self) -> int:
        """Absolute character offset of the cursor."""
        return self.buffer.line_start(self.line_index) + self.cursor_col

    # ───────────────────── Horizontal ─────────────────────
    def move_left(self) -> bool:
        self.sticky_column = None
        if self.cursor_col == 0:
            return False
        self.cursor_col -= 1
        logger.debug("cursor ← (%d,%d)", self.line_index, self.cursor_col)
        return True

    def move_right(self) -> bool:
        # the line length is the bound; the terminal width only clamps the display
        self.sticky_column = None
        if self.cursor_col >= self.current_line_length():
            return False
        self.cursor_col += 1
        logger.debug("cursor → (%d,%d)", self.line_index, self.cursor_col)
        return True

    def set_column(self, col: int) -> None:
        """Place the cursor at *col*, clamped to ``[0, current_line_length()]``."""
        self.sticky_column = None
        self.cursor_col = max(0, min(col, self.current_line_length()))

    # ───────────────────── Vertical ─────────────────────
    def move_up(self) -> bool:
        if self.sticky_column is None:
            self.sticky_column = self.cursor_col
        moved = self._step_up()
        self.cursor_col = min(self.sticky_column, self.current_line_length())
        if moved:
            logger.debug("cursor ↑ (%d,%d), shift_row: %d", self.line_index, self.cursor_col, self.shift_row)
        return moved

    def move_down(self) -> bool:
        if self.sticky_column is None:
            self.sticky_column = self.cursor_col
        moved = self._step_down()
        self.cursor_col = min(self.sticky_column, self.current_line_length())
        if moved:
            logger.debug("cursor ↓ (%d,%d), shift_row: %d", self.line_index, self.cursor_col, self.shift_row)
        return moved

    def next_line(self) -> bool:
        """Move to column 0 of the following line, scrolling when at the bottom row."""
        self.sticky_column = None
        moved = self._step_down()
        if moved:
            self.cursor_col = 0
        return moved

    def previous_line_end(self) -> bool:
        """Move to the end of the preceding line, scrolling when at the top row."""
        self.sticky_column = None
        moved = self._step_up()
        if moved:
            self.cursor_col = self.current_line_length()
        return moved

    def _step_up(self) -> bool:
        if self.cursor_row > 0:
            self.cursor_row -= 1
        elif self.shift_row > 0:
            self.shift_row -= 1
        else:
            return False
        return True

    def _step_down(self) -> bool:
        if self.line_index + 1 >= self.buffer.line_count():
            return False
        if self.cursor_row < self.visible_rows - 1:
            self.cursor_row += 1
        else:
            self.shift_row += 1
        return True

    # ───────────────────── Viewport ─────────────────────
    def resize(self, visible_rows: int) -> None:
        """
        Adopt a new number of visible rows.

        If the cursor row falls outside the smaller window, the view scrolls
        so the cursor stays on the same buffer line.
        """
        self.visible_rows = max(1, visible_rows)
        excess = self.cursor_row - (self.visible_rows - 1)
        if excess > 0:
            self.shift_row += excess
            self.cursor_row -= excess
            logger.debug("Resize moved shift_row to %d to keep line %d visible",
                         self.shift_row, self.line_index)

    def snapshot(self) -> CursorSnapshot:
        return CursorSnapshot(self.cursor_row, self.cursor_col, self.shift_row, self.sticky_column)

    def restore(self, snap: CursorSnapshot) -> None:
        self.cursor_row, self.cursor_col, self.shift_row, self.sticky_column = snap
        self.resize(self.visible_rows)
