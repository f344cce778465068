#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Modal-Pad is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Terminal input events, independent of the terminal library that produced them."""

import enum
from dataclasses import dataclass
from typing import Union


class Key(enum.Enum):
    CHAR = "char"
    BACKSPACE = "backspace"
    ENTER = "enter"
    ESC = "esc"
    OTHER = "other"


@dataclass(frozen=True)
class KeyEvent:
    key: Key
    char: str = ""
    ctrl: bool = False
    alt: bool = False

    @property
    def is_printable(self) -> bool:
        """A plain character with no modifier that can be inserted as text."""
        return (self.key is Key.CHAR and not self.ctrl and not self.alt
                and len(self.char) == 1 and self.char.isprintable())


@dataclass(frozen=True)
class ResizeEvent:
    cols: int
    rows: int


@dataclass(frozen=True)
class ClosedEvent:
    """The input stream ended; the session must terminate."""


Event = Union[KeyEvent, ResizeEvent, ClosedEvent]


def char(ch: str) -> KeyEvent:
    return KeyEvent(Key.CHAR, ch)


BACKSPACE = KeyEvent(Key.BACKSPACE)
ENTER = KeyEvent(Key.ENTER)
ESC = KeyEvent(Key.ESC)
