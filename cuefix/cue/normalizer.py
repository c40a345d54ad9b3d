"""INDEX 01 timestamp normalizer.

Some rippers write track start positions as ``HH:MM:SS`` (hours, minutes
and the CD frame field). shnsplit reads them as ``MM:SS:FF`` and gets the
positions wrong, so the hours are folded into the minutes and the
position is rewritten in the ``MM:SS.mmm`` form shnsplit also accepts::

    INDEX 01 01:30:12  ->  INDEX 01 90:12.000

The last field is copied verbatim. Every other line passes through
untouched, one output line per input line.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from pathlib import Path

from cuefix.config import DEFAULT_FIXED_SUFFIX
from cuefix.cue.reader import iter_sheet_lines, open_sheet, split_lines
from cuefix.exceptions import SheetIOError

logger = logging.getLogger(__name__)

INDEX_PATTERN = re.compile(r"INDEX 01\s+([0-9]+):([0-9]+):([0-9]+)")


def _lenient_int(text: str) -> int:
    """Parse a timestamp field, treating anything unparsable as zero."""
    try:
        return int(text)
    except ValueError:
        return 0


def _rewrite(match: re.Match[str]) -> str:
    hours, minutes, seconds = match.groups()
    total_minutes = _lenient_int(hours) * 60 + _lenient_int(minutes)
    return f"INDEX 01 {total_minutes:02d}:{seconds}.000"


def normalize_line(line: str) -> str:
    """Rewrite every ``INDEX 01 H:M:S`` token in a line.

    Lines without a match are returned unchanged.
    """
    result = INDEX_PATTERN.sub(_rewrite, line)
    if result != line:
        logger.debug("Rewrote %r -> %r", line, result)
    return result


def normalize_lines(lines: Iterable[str]) -> Iterator[str]:
    """Normalize lines one by one, keeping their order."""
    for line in lines:
        yield normalize_line(line)


def normalize(text: str) -> str:
    """Normalize a whole sheet given as text.

    Each output line ends with exactly one ``\\n``, whether or not the
    input's last line had a terminator.
    """
    return "".join(f"{line}\n" for line in normalize_lines(split_lines(text)))


def fixed_sheet_path(path: str | Path, suffix: str = DEFAULT_FIXED_SUFFIX) -> Path:
    """Return the path of the corrected sheet written next to *path*."""
    return Path(f"{path}{suffix}")


def normalize_file(src: str | Path, dst: str | Path, encoding: str = "utf-8") -> int:
    """Normalize the sheet at *src* into *dst*.

    Args:
        src: Original cue sheet.
        dst: Destination for the corrected sheet (overwritten).
        encoding: Encoding for both files.

    Returns:
        Number of lines written.

    Raises:
        SheetIOError: If opening, creating, reading, writing or flushing
            fails. A partially written *dst* is removed.
    """
    src = Path(src)
    dst = Path(dst)

    with open_sheet(src, encoding) as source:
        try:
            target = open(dst, "w", encoding=encoding, newline="\n")
        except OSError as e:
            raise SheetIOError("create", dst, str(e)) from e

        count = 0
        try:
            try:
                for line in normalize_lines(iter_sheet_lines(source, src)):
                    try:
                        target.write(f"{line}\n")
                    except (OSError, UnicodeEncodeError) as e:
                        raise SheetIOError("write", dst, str(e)) from e
                    count += 1

                try:
                    target.flush()
                except OSError as e:
                    raise SheetIOError("flush", dst, str(e)) from e
            finally:
                try:
                    target.close()
                except OSError as e:
                    raise SheetIOError("flush", dst, str(e)) from e
        except SheetIOError:
            dst.unlink(missing_ok=True)
            raise

    logger.info("Wrote %d lines to %s", count, dst)
    return count
