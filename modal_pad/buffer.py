#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Modal-Pad is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Text storage for the editor.

`TextBuffer` is the only place that touches raw document text. Everything
above it talks in line indices, columns and absolute character offsets.
"""

import bisect
import logging
import os
from typing import List, Optional, Tuple

import chardet

logger = logging.getLogger(__name__)

CHARDET_SAMPLE_SIZE = 1024 * 20
CHARDET_MIN_CONFIDENCE = 0.75


class TextBuffer:
    """
    An editable document addressed by line and by absolute character offset.

    The document is kept as a list of lines without their ``\\n`` terminators,
    so ``"hi\\n"`` is ``["hi", ""]`` and an empty document is ``[""]``.
    Offsets count Unicode scalars; every line boundary counts as one
    character.

    Out-of-range lines or offsets raise ``IndexError``. Callers are expected
    to clamp before calling.

    Line start offsets are cached as a prefix sum that is only extended as far
    as it is queried; an edit drops the entries after the edited line.
    """

    def __init__(self, text: str = "", encoding: str = "utf-8") -> None:
        self.lines: List[str] = text.split("\n")
        self.encoding = encoding
        self._starts: List[int] = [0]

    # ───────────────────── Queries ─────────────────────
    def line_count(self) -> int:
        return len(self.lines)

    def line(self, index: int) -> str:
        """Return line *index* without its trailing newline."""
        self._check_line(index)
        return self.lines[index]

    def line_length(self, index: int) -> int:
        return len(self.line(index))

    def line_start(self, index: int) -> int:
        """Absolute offset of the first character of line *index*."""
        self._check_line(index)
        self._extend_starts(index)
        return self._starts[index]

    def char_offset(self, line: int, col: int) -> int:
        """Convert a (line, column) pair to an absolute offset."""
        if not 0 <= col <= self.line_length(line):
            raise IndexError(f"column {col} out of range for line {line}")
        return self.line_start(line) + col

    def char_count(self) -> int:
        last = len(self.lines) - 1
        return self.line_start(last) + len(self.lines[last])

    def offset_to_position(self, offset: int) -> Tuple[int, int]:
        """
        Convert an absolute offset to a (line, column) pair.

        An offset pointing at a line's terminator maps to the column just
        past the line's last character.
        """
        if offset < 0:
            raise IndexError(f"offset {offset} out of range")
        starts = self._starts
        index = bisect.bisect_right(starts, offset) - 1
        while offset > starts[index] + len(self.lines[index]) and index + 1 < len(self.lines):
            index += 1
            self._extend_starts(index)
        if offset > starts[index] + len(self.lines[index]):
            raise IndexError(f"offset {offset} out of range (0..{self.char_count()})")
        return index, offset - starts[index]

    def text(self) -> str:
        return "\n".join(self.lines)

    # ───────────────────── Mutations ─────────────────────
    def insert_char(self, offset: int, ch: str) -> None:
        """Insert a single character at *offset*. ``"\\n"`` splits the line."""
        if len(ch) != 1:
            raise ValueError(f"insert_char expects one character, got {ch!r}")
        if ch == "\n":
            self.insert_newline(offset)
            return
        line, col = self.offset_to_position(offset)
        current = self.lines[line]
        self.lines[line] = current[:col] + ch + current[col:]
        self._forget_starts_after(line)

    def insert_newline(self, offset: int) -> None:
        line, col = self.offset_to_position(offset)
        current = self.lines[line]
        self.lines[line:line + 1] = [current[:col], current[col:]]
        self._forget_starts_after(line)

    def delete_range(self, start: int, end: int) -> None:
        """
        Delete the half-open range ``[start, end)``.

        Deleting across a line boundary joins the two lines.
        """
        if start > end:
            raise ValueError(f"delete_range: start {start} > end {end}")
        if start == end:
            return
        start_line, start_col = self.offset_to_position(start)
        end_line, end_col = self.offset_to_position(end)
        head = self.lines[start_line][:start_col]
        tail = self.lines[end_line][end_col:]
        self.lines[start_line:end_line + 1] = [head + tail]
        self._forget_starts_after(start_line)

    # ───────────────────── File I/O ─────────────────────
    def write_to(self, path: str) -> int:
        """
        Overwrite *path* with the buffer contents.

        The text is encoded before the file is opened, so an encoding error
        leaves the file on disk as it was.

        Returns:
            int: Number of bytes written.

        Raises:
            OSError: If the file cannot be opened or written.
            UnicodeEncodeError: If the text cannot be encoded.
        """
        data = self.text().encode(self.encoding)
        with open(path, "wb") as fh:
            fh.write(data)
        logger.debug("Wrote %d bytes to '%s' (encoding %s)", len(data), path, self.encoding)
        return len(data)

    @classmethod
    def read_from(cls, path: str, default_encoding: str = "utf-8",
                  detect_encoding: bool = True) -> "TextBuffer":
        """
        Load *path* into a new buffer.

        Encodings are tried in order: a confident ``chardet`` guess (when
        *detect_encoding* is set), *default_encoding*, ``utf-8``, ``latin-1``.
        Line endings are normalised to ``\\n``.

        Raises:
            OSError: If the file cannot be read.
            UnicodeDecodeError: If no candidate encoding can decode it.
        """
        with open(path, "rb") as fh:
            raw = fh.read()

        candidates: List[str] = []
        if detect_encoding and raw:
            guess = chardet.detect(raw[:CHARDET_SAMPLE_SIZE])
            encoding_guess: Optional[str] = guess.get("encoding")
            confidence = guess.get("confidence") or 0.0
            logger.debug("chardet guessed '%s' (confidence %.2f) for '%s'",
                         encoding_guess, confidence, path)
            if encoding_guess and encoding_guess.lower() == "ascii":
                # ascii files gain non-ascii text while being edited
                encoding_guess = "utf-8"
            if encoding_guess and confidence >= CHARDET_MIN_CONFIDENCE:
                candidates.append(encoding_guess)
        for fallback in (default_encoding, "utf-8", "latin-1"):
            if fallback not in candidates:
                candidates.append(fallback)

        last_error: Optional[UnicodeDecodeError] = None
        for encoding in candidates:
            try:
                decoded = raw.decode(encoding)
            except (UnicodeDecodeError, LookupError) as exc:
                logger.warning("Could not decode '%s' as %s: %s", path, encoding, exc)
                if isinstance(exc, UnicodeDecodeError):
                    last_error = exc
                continue
            text = decoded.replace("\r\n", "\n").replace("\r", "\n")
            logger.info("Loaded '%s' (%d bytes, encoding %s)", os.path.basename(path), len(raw), encoding)
            return cls(text, encoding=encoding)

        raise last_error or LookupError(f"No usable encoding for '{path}'")

    def _check_line(self, index: int) -> None:
        if not 0 <= index < len(self.lines):
            raise IndexError(f"line {index} out of range (0..{len(self.lines) - 1})")

    def _extend_starts(self, index: int) -> None:
        starts = self._starts
        while len(starts) <= index:
            prev = len(starts) - 1
            starts.append(starts[prev] + len(self.lines[prev]) + 1)

    def _forget_starts_after(self, line: int) -> None:
        # an edit on *line* never moves its own start
        del self._starts[line + 1:]
