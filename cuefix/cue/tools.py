"""External tools: shnsplit for splitting, metaflac for tagging.

The splitter names its output files itself (``-t %n-%t``) and its output
is never read back. The files to tag are found by rebuilding the same
names from the extracted track records, so ``track_filename`` must agree
byte for byte with shnsplit:

* ``%n`` is the track number padded to two digits;
* ``%t`` is the title, after the ``-m`` character map if one is set.

shnsplit may alter titles in other ways (for instance characters the
filesystem rejects). Those tracks will not be found; enable
``verify_outputs`` to report them instead of handing metaflac a missing
file.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from cuefix.config import Config
from cuefix.cue.extractor import TrackRecord
from cuefix.exceptions import SplitError, TagError

logger = logging.getLogger(__name__)


def check_tools_available(config: Config) -> list[str]:
    """Return the configured tools that cannot be found on PATH."""
    return [tool for tool in (config.splitter, config.tagger) if shutil.which(tool) is None]


def build_split_command(cue_path: Path, audio_path: Path, config: Config) -> list[str]:
    """Build the splitter command line for one sheet/audio pair."""
    cmd = [
        config.splitter,
        "-O",
        "always",
        "-f",
        str(cue_path),
        "-o",
        config.output_format,
        "-t",
        config.name_template,
    ]
    if config.char_map:
        cmd.extend(["-m", config.char_map])
    cmd.append(str(audio_path))
    return cmd


def split_audio(
    cue_path: Path,
    audio_path: Path,
    config: Config,
    cwd: Path | None = None,
) -> None:
    """Split *audio_path* into per-track files in *cwd*.

    Existing files with the same names are overwritten.

    Raises:
        SplitError: If the splitter cannot be run or exits non-zero.
    """
    cmd = build_split_command(cue_path, audio_path, config)
    logger.debug("%s: %s", config.splitter, cmd)
    try:
        proc = subprocess.run(
            cmd,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except OSError as e:
        raise SplitError(config.splitter, None, str(e)) from e

    if proc.returncode != 0:
        raise SplitError(config.splitter, proc.returncode, proc.stdout or "")
    logger.debug("%s output: %s", config.splitter, proc.stdout)


def _apply_char_map(title: str, char_map: str | None) -> str:
    if not char_map:
        return title
    table = str.maketrans(char_map[0::2], char_map[1::2])
    return title.translate(table)


def track_filename(record: TrackRecord, config: Config) -> str:
    """Rebuild the filename the splitter gives *record*'s track.

    Format: ``{number:0>2}-{title}.{output_format}``.
    """
    number = record.number.rjust(2, "0")
    title = _apply_char_map(record.title, config.char_map)
    return f"{number}-{title}.{config.output_format}"


def build_tag_command(
    file_path: Path,
    record: TrackRecord,
    album: str,
    config: Config,
) -> list[str]:
    """Build the tag writer command that replaces all tags of one file."""
    return [
        config.tagger,
        "--remove-all-tags",
        f"--set-tag=TITLE={record.title}",
        f"--set-tag=ARTIST={record.performer}",
        f"--set-tag=ALBUM={album}",
        str(file_path),
    ]


def tag_track(file_path: Path, record: TrackRecord, album: str, config: Config) -> None:
    """Tag one split track.

    Raises:
        TagError: If the tag writer cannot be run or exits non-zero.
    """
    cmd = build_tag_command(file_path, record, album, config)
    logger.debug("Tagging: %s", cmd)
    try:
        proc = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except OSError as e:
        raise TagError(config.tagger, file_path, None, str(e)) from e

    if proc.returncode != 0:
        raise TagError(config.tagger, file_path, proc.returncode, proc.stdout or "")
