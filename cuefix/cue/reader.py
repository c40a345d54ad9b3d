"""Line access for cue sheet text and files.

Lines are terminated by ``\\n``; a single ``\\r`` left before it (CRLF
sheets) is dropped. A lone ``\\r`` is not a terminator.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import TextIO

from cuefix.exceptions import SheetIOError


def chomp(line: str) -> str:
    """Remove one trailing line terminator (``\\n`` or ``\\r\\n``)."""
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


def split_lines(text: str) -> list[str]:
    """Split sheet text into lines without terminators.

    A missing terminator on the final line is accepted; an empty
    string has no lines.
    """
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def open_sheet(path: Path, encoding: str) -> TextIO:
    """Open a sheet for reading, reporting failures as the ``open`` phase."""
    try:
        return open(path, encoding=encoding, newline="\n")
    except OSError as e:
        raise SheetIOError("open", path, str(e)) from e


def iter_sheet_lines(handle: TextIO, path: Path) -> Iterator[str]:
    """Yield the lines of an open sheet, reporting failures as the ``read`` phase."""
    while True:
        try:
            raw = handle.readline()
        except (OSError, UnicodeDecodeError) as e:
            raise SheetIOError("read", path, str(e)) from e
        if not raw:
            return
        yield chomp(raw)
