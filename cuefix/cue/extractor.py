"""Track extraction from a normalized cue sheet.

The grammar is positional: a track header line is always followed by
its TITLE line and then its PERFORMER line::

    \tTRACK 03 AUDIO
    \t\tTITLE "Song Name"
    \t\tPERFORMER "Artist X"

The two lines after a header are consumed without checking what they
contain. A line that does not carry the expected field gives an empty
value, and a consumed line is never re-read as a header.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from cuefix.cue.reader import iter_sheet_lines, open_sheet, split_lines

logger = logging.getLogger(__name__)

# One indent unit (tab, or two spaces), then TRACK and its number
TRACK_HEADER_PATTERN = re.compile(r"^(?:\t|  )TRACK\s+(\S+)")


@dataclass(frozen=True)
class TrackRecord:
    """One track block of a cue sheet.

    ``number`` is kept as written in the sheet (``"03"`` stays ``"03"``).
    """

    number: str
    title: str = ""
    performer: str = ""


@lru_cache(maxsize=None)
def _field_pattern(field: str) -> re.Pattern[str]:
    return re.compile(rf'{re.escape(field)} "(.+)"')


def extract_field(field: str, line: str) -> str:
    """Return the quoted value following *field* in *line*, or ``""``."""
    match = _field_pattern(field).search(line)
    if match is None:
        return ""
    return match.group(1)


def track_number(line: str) -> str | None:
    """Return the track number if *line* is a track header."""
    match = TRACK_HEADER_PATTERN.match(line)
    if match is None:
        return None
    return match.group(1)


def extract_lines(lines: Iterable[str]) -> list[TrackRecord]:
    """Extract track records from sheet lines, in file order."""
    records: list[TrackRecord] = []
    it = iter(lines)
    for line in it:
        number = track_number(line)
        if number is None:
            continue
        title_line = next(it, "")
        performer_line = next(it, "")
        records.append(
            TrackRecord(
                number=number,
                title=extract_field("TITLE", title_line),
                performer=extract_field("PERFORMER", performer_line),
            )
        )
    logger.debug("Extracted %d tracks: %s", len(records), records)
    return records


def extract(text: str) -> list[TrackRecord]:
    """Extract track records from sheet text."""
    return extract_lines(split_lines(text))


def extract_file(path: str | Path, encoding: str = "utf-8") -> list[TrackRecord]:
    """Extract track records from a sheet file.

    Raises:
        SheetIOError: If the file cannot be opened or read.
    """
    path = Path(path)
    with open_sheet(path, encoding) as handle:
        return extract_lines(iter_sheet_lines(handle, path))
