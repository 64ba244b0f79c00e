"""Logical line reading with comments and backslash continuations."""

from __future__ import annotations

import weakref
from collections.abc import Iterator
from typing import TextIO

# Longest chunk of a logical line returned by one read.
_LINE_MAX = 4094

# Characters read ahead from a stream but not yet consumed.
_pending: "weakref.WeakKeyDictionary[TextIO, str]" = weakref.WeakKeyDictionary()


class _CharReader:
    def __init__(self, stream: TextIO, pending: str = "") -> None:
        self.stream = stream
        self.pending = pending

    def getc(self) -> str:
        if self.pending:
            char, self.pending = self.pending, ""
            return char
        return self.stream.read(1)

    def ungetc(self, char: str) -> None:
        self.pending = char


def _read_line(reader: _CharReader) -> str | None:
    chars: list[str] = []
    quoted = False
    comment_at_eof = False
    char = None

    while len(chars) < _LINE_MAX:
        char = reader.getc()
        if char == "":
            break

        if char == "\\" and not quoted:
            quoted = True
            continue

        if char == "#":
            if not quoted:
                char = reader.getc()
                while char not in ("\n", ""):
                    char = reader.getc()
                if char == "\n":
                    chars.append(char)
                else:
                    comment_at_eof = True
                break
            # an escaped '#' is dropped together with its backslash
            quoted = False
            continue

        if char == "\n":
            if quoted:
                following = reader.getc()
                while following in ("\t", " "):
                    following = reader.getc()
                reader.ungetc(following)
                quoted = False
                continue
            chars.append(char)
            break

        if char == "\r":
            chars.append("\n")
            following = reader.getc()
            if following == "\n":
                if quoted:
                    quoted = False
                    continue
                break
            reader.ungetc(following)
            if quoted:
                quoted = False
                continue
            break

        if quoted:
            chars.append("\\")
            quoted = False
        chars.append(char)

    if char == "" and not chars and not comment_at_eof:
        return None

    line = "".join(chars)
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


def _take_pending(stream: TextIO) -> str:
    try:
        return _pending.pop(stream, "")
    except TypeError:
        return ""


def _store_pending(stream: TextIO, pending: str) -> None:
    if not pending:
        return
    try:
        _pending[stream] = pending
    except TypeError:
        pass


def read_line(stream: TextIO) -> str | None:
    """Read one logical line from ``stream``; return None at end of input.

    Comments starting with '#' are removed, a backslash before a newline
    joins the next line (dropping its leading blanks), and CR, LF or CRLF
    end a line.  Very long lines are returned in several pieces.
    """
    reader = _CharReader(stream, _take_pending(stream))
    line = _read_line(reader)
    _store_pending(stream, reader.pending)
    return line


def iter_lines(stream: TextIO) -> Iterator[str]:
    """Yield every logical line of ``stream``."""
    reader = _CharReader(stream, _take_pending(stream))
    try:
        while (line := _read_line(reader)) is not None:
            yield line
    finally:
        _store_pending(stream, reader.pending)