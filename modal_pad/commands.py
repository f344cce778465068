#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Modal-Pad is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
The ``:`` command line.

`parse_command` turns the captured text into one of the command variants
below without touching any state; `execute_command` applies a variant to
an `EditorState` and tells the caller whether the session goes on.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Union

from .state import EditorState

logger = logging.getLogger(__name__)

DIRTY_QUIT_MESSAGE = "No write since last change (add ! to override)"
NO_FILENAME_MESSAGE = "Error: no file name"
TOO_MANY_ARGUMENTS_MESSAGE = "Error: too many arguments"


# ───────────────────── Command variants ─────────────────────
@dataclass(frozen=True)
class Write:
    path: Optional[str] = None


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class ForceQuit:
    pass


@dataclass(frozen=True)
class WriteQuit:
    path: Optional[str] = None


@dataclass(frozen=True)
class Unknown:
    text: str


@dataclass(frozen=True)
class TooManyArguments:
    name: str


@dataclass(frozen=True)
class Empty:
    pass


Command = Union[Write, Quit, ForceQuit, WriteQuit, Unknown, TooManyArguments, Empty]

_WRITE_NAMES = {"w", "write"}
_QUIT_NAMES = {"q", "quit"}
_FORCE_QUIT_NAMES = {"q!", "quit!"}
_WRITE_QUIT_NAMES = {"wq"}


class CommandResult(enum.Enum):
    CONTINUE = "continue"
    EXIT = "exit"


def parse_command(text: str) -> Command:
    """
    Parse a command line such as ``":w notes.txt"``.

    Args:
        text (str): The captured command line, normally starting with ``":"``.

    Returns:
        Command: The matching variant. Write-type commands take at most one
        path argument, quit-type commands take none; anything more yields
        `TooManyArguments`. Unrecognised names yield `Unknown` carrying the
        original text verbatim.

    Example:
        >>> parse_command(":w notes.txt")
        Write(path='notes.txt')
        >>> parse_command(":q!")
        ForceQuit()
        >>> parse_command(":e foo")
        Unknown(text=':e foo')
    """
    body = text[1:] if text.startswith(":") else text
    tokens = body.split()
    if not tokens:
        return Empty()

    name, args = tokens[0], tokens[1:]
    if name in _WRITE_NAMES or name in _WRITE_QUIT_NAMES:
        if len(args) > 1:
            return TooManyArguments(name)
        path = args[0] if args else None
        return Write(path) if name in _WRITE_NAMES else WriteQuit(path)
    if name in _QUIT_NAMES or name in _FORCE_QUIT_NAMES:
        if args:
            return TooManyArguments(name)
        return Quit() if name in _QUIT_NAMES else ForceQuit()
    return Unknown(text)


def save_buffer(state: EditorState, path: Optional[str] = None) -> bool:
    """
    Write the buffer to *path*, or to the state's current filename.

    A given *path* becomes the buffer's filename even if the write then
    fails. Every outcome leaves a status message; the buffer stays dirty
    unless the write succeeded.

    Returns:
        bool: True if the file was written.
    """
    if path:
        state.filename = path
    if not state.filename:
        state.set_status(NO_FILENAME_MESSAGE)
        logger.warning("Save requested for an unnamed buffer")
        return False

    try:
        state.buffer.write_to(state.filename)
    except (OSError, UnicodeError, LookupError) as exc:
        state.set_status(f'Error writing "{state.filename}": {exc}')
        logger.error("Failed to write '%s': %s", state.filename, exc, exc_info=True)
        return False

    state.dirty = False
    state.set_status(f'"{state.filename}" written')
    logger.info("Saved '%s' (%d lines)", state.filename, state.buffer.line_count())
    return True


def execute_command(state: EditorState, command: Command) -> CommandResult:
    """Apply *command* to *state*. Only `CommandResult.EXIT` ends the session."""
    logger.debug("Executing command %r", command)

    if isinstance(command, Write):
        save_buffer(state, command.path)
        return CommandResult.CONTINUE

    if isinstance(command, WriteQuit):
        if save_buffer(state, command.path):
            return CommandResult.EXIT
        return CommandResult.CONTINUE

    if isinstance(command, Quit):
        if state.dirty:
            state.set_status(DIRTY_QUIT_MESSAGE)
            return CommandResult.CONTINUE
        return CommandResult.EXIT

    if isinstance(command, ForceQuit):
        if state.dirty:
            logger.info("Force quit discarding unsaved changes")
        return CommandResult.EXIT

    if isinstance(command, TooManyArguments):
        state.set_status(TOO_MANY_ARGUMENTS_MESSAGE)
        return CommandResult.CONTINUE

    if isinstance(command, Unknown):
        state.set_status(f"Unrecognized command {command.text}")
        return CommandResult.CONTINUE

    # Empty
    return CommandResult.CONTINUE
