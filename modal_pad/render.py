#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Modal-Pad is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Projection of the editor state onto a terminal of a given size.

`build_frame` is a pure function: it reads an `EditorState` and returns a
`Frame` that a terminal painter can draw as-is. It never mutates state.
"""

import enum
import logging
import os
from dataclasses import dataclass
from typing import List, Tuple

from wcwidth import wcwidth

from .state import EditorState, Mode

logger = logging.getLogger(__name__)

RESERVED_ROWS = 2  # status line + message/command line
TAB_SIZE = 8  # curses tab stops
CONTROL_PLACEHOLDER = "?"


class CursorStyle(enum.Enum):
    BLOCK = "block"
    BAR = "bar"


@dataclass(frozen=True)
class Frame:
    """
    A complete screen description.

    Attributes:
        lines (List[str]): Buffer lines from ``shift_row``, clipped to the width.
        status_line (str): ``mode [| filename] [| +]``.
        message_line (str): Command line text in Command mode, status message otherwise.
        message_is_error (bool): True when the message line reports an error.
        cursor (Tuple[int, int]): Screen (row, column) of the cursor.
        cursor_style (CursorStyle): Block in Normal mode, bar otherwise.
        rows (int): Terminal rows the frame was built for.
        cols (int): Terminal columns the frame was built for.
    """
    lines: List[str]
    status_line: str
    message_line: str
    message_is_error: bool
    cursor: Tuple[int, int]
    cursor_style: CursorStyle
    rows: int
    cols: int

    @property
    def status_row(self) -> int:
        return max(0, self.rows - 2)

    @property
    def message_row(self) -> int:
        return max(0, self.rows - 1)


def visible_rows_for(rows: int) -> int:
    """Number of text rows left once the status and message lines are reserved."""
    return max(1, rows - RESERVED_ROWS)


def expand_line(text: str, tab_size: int = TAB_SIZE) -> str:
    """
    Return *text* the way it is painted.

    Tabs become spaces up to the next multiple of *tab_size* cells and other
    non-printable characters become a one-cell ``?``. Every width and
    cursor calculation goes through this function, so the frame and the
    painted screen agree.

    Example:
        >>> expand_line("\\tab")
        '        ab'
    """
    if text.isascii() and text.isprintable():
        return text
    out: List[str] = []
    consumed = 0
    for ch in text:
        if ch == "\t":
            pad = tab_size - consumed % tab_size
            out.append(" " * pad)
            consumed += pad
            continue
        w = wcwidth(ch)
        if w < 0 or ch == "\x00":
            out.append(CONTROL_PLACEHOLDER)
            consumed += 1
        else:
            out.append(ch)
            consumed += w
    return "".join(out)


def display_width(text: str) -> int:
    """Return the printable width of *text* in terminal cells, tabs expanded."""
    expanded = expand_line(text)
    if expanded.isascii():
        return len(expanded)
    return sum(wcwidth(ch) for ch in expanded)


def truncate_string(s: str, max_width: int) -> str:
    """Return *s* expanded and clipped to at most *max_width* cells, never splitting a wide character."""
    result: List[str] = []
    consumed = 0
    for ch in expand_line(s):
        w = wcwidth(ch)
        if consumed + w > max_width:
            break
        result.append(ch)
        consumed += w
    return "".join(result)


def status_line_for(state: EditorState) -> str:
    parts = [state.mode.value]
    if state.filename:
        parts.append(os.path.basename(state.filename))
    if state.dirty:
        parts.append("+")
    return " | ".join(parts)


def build_frame(state: EditorState, cols: int, rows: int) -> Frame:
    """
    Describe what the terminal should show for *state*.

    The text area is ``rows - 2`` rows tall (at least one row); each line
    is clipped to *cols* cells. In Command mode the cursor sits on the
    message line after the typed command; otherwise it sits on the text
    area, at the display width of the line prefix before ``cursor_col``
    (tabs expanded by `expand_line`, as the lines themselves are),
    clamped to the last column.

    Args:
        state (EditorState): The session to draw.
        cols (int): Terminal width in cells.
        rows (int): Terminal height in rows.

    Returns:
        Frame: The renderable description.
    """
    cols = max(1, cols)
    rows = max(1, rows)
    position = state.position
    buffer = state.buffer

    text_rows = visible_rows_for(rows)
    end = min(position.shift_row + text_rows, buffer.line_count())
    lines = [truncate_string(buffer.line(i), cols) for i in range(position.shift_row, end)]

    status_line = truncate_string(status_line_for(state), cols)

    if state.mode is Mode.COMMAND:
        message_line = state.command_buffer
        message_is_error = False
        cursor_x = display_width(state.command_buffer[:state.command_cursor])
        cursor = (max(0, rows - 1), min(cursor_x, cols - 1))
    else:
        message_line = state.status_message
        message_is_error = message_line.lower().startswith("error")
        prefix = position.current_line()[:position.cursor_col]
        cursor_x = display_width(prefix)
        cursor = (min(position.cursor_row, text_rows - 1), min(cursor_x, cols - 1))

    cursor_style = CursorStyle.BLOCK if state.mode is Mode.NORMAL else CursorStyle.BAR

    return Frame(
        lines=lines,
        status_line=status_line,
        message_line=truncate_string(message_line, cols),
        message_is_error=message_is_error,
        cursor=cursor,
        cursor_style=cursor_style,
        rows=rows,
        cols=cols,
    )
