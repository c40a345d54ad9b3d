"""Fix, split and tag one cue sheet / audio file pair.

Phases run in order and each file-level phase must succeed before the
next starts:

1. normalize the sheet into ``<sheet><fixed_suffix>``
2. split the audio with the corrected sheet
3. extract track records from the corrected sheet
4. tag each reconstructed track file

A failure in phases 1-3 ends the run; files already written stay on
disk. Tagging failures are recorded per track and the remaining tracks
are still tagged. Nothing is retried.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

from cuefix.config import Config
from cuefix.cue.extractor import TrackRecord, extract_file, extract_lines
from cuefix.cue.normalizer import fixed_sheet_path, normalize_file, normalize_lines
from cuefix.cue.reader import iter_sheet_lines, open_sheet
from cuefix.cue.tools import split_audio, tag_track, track_filename
from cuefix.exceptions import SheetIOError, SplitError, TagError

logger = logging.getLogger(__name__)


@dataclass
class TagResult:
    """Outcome of tagging one track file."""

    record: TrackRecord
    path: Path
    ok: bool = True
    error: str | None = None


@dataclass
class RunResult:
    """Outcome of processing one cue/audio pair."""

    cue_path: Path
    fixed_cue_path: Path
    audio_path: Path
    album: str
    tracks: list[TrackRecord] = field(default_factory=list)
    tag_results: list[TagResult] = field(default_factory=list)
    status: str = "ok"  # ok, partial, error
    error: str | None = None

    @property
    def tagged_count(self) -> int:
        return sum(1 for r in self.tag_results if r.ok)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.tag_results if not r.ok)


def _tag_one(record: TrackRecord, album: str, config: Config, workdir: Path) -> TagResult:
    path = workdir / track_filename(record, config)
    if config.verify_outputs and not path.exists():
        logger.warning("Split output not found: %s", path)
        return TagResult(record=record, path=path, ok=False, error=f"File not found: {path}")

    try:
        tag_track(path, record, album, config)
    except TagError as e:
        logger.warning("Failed to apply metadata for %s: %s", path.name, e)
        return TagResult(record=record, path=path, ok=False, error=str(e))
    return TagResult(record=record, path=path)


def tag_tracks(
    records: list[TrackRecord],
    album: str,
    config: Config,
    workdir: Path,
) -> list[TagResult]:
    """Tag every record's file, isolating failures per track.

    With ``config.tag_workers > 1`` the tag writer runs in a thread pool.
    Results are returned in record order either way.
    """
    if config.tag_workers <= 1 or len(records) <= 1:
        return [_tag_one(record, album, config, workdir) for record in records]

    results: list[TagResult | None] = [None] * len(records)
    executor = ThreadPoolExecutor(max_workers=config.tag_workers)
    try:
        future_to_index = {
            executor.submit(_tag_one, record, album, config, workdir): idx
            for idx, record in enumerate(records)
        }
        for future in as_completed(future_to_index):
            results[future_to_index[future]] = future.result()
    finally:
        executor.shutdown(wait=True, cancel_futures=True)

    return [r for r in results if r is not None]


def preview_tracks(cue_path: Path, encoding: str = "utf-8") -> list[TrackRecord]:
    """Normalize and extract in memory, without writing the corrected sheet.

    Raises:
        SheetIOError: If the sheet cannot be opened or read.
    """
    with open_sheet(cue_path, encoding) as handle:
        return extract_lines(normalize_lines(iter_sheet_lines(handle, cue_path)))


def process(
    cue_path: Path,
    audio_path: Path,
    album: str,
    config: Config,
    *,
    workdir: Path | None = None,
    dry_run: bool = False,
) -> RunResult:
    """Fix the sheet, split the audio and tag the resulting tracks.

    Args:
        cue_path: Original cue sheet.
        audio_path: Audio file the sheet describes.
        album: Value for every track's ALBUM tag.
        config: Application configuration.
        workdir: Directory the splitter writes tracks into (default: cwd).
        dry_run: Only extract the tracks; write, split and tag nothing.

    Returns:
        RunResult with status and per-track details.
    """
    cue_path = Path(cue_path)
    audio_path = Path(audio_path)
    workdir = Path(workdir) if workdir is not None else Path.cwd()

    result = RunResult(
        cue_path=cue_path,
        fixed_cue_path=fixed_sheet_path(cue_path, config.fixed_suffix),
        audio_path=audio_path,
        album=album,
    )

    if dry_run:
        try:
            result.tracks = preview_tracks(cue_path, config.encoding)
        except SheetIOError as e:
            result.status = "error"
            result.error = f"Failed to parse cue sheet: {e}"
        return result

    try:
        normalize_file(cue_path, result.fixed_cue_path, config.encoding)
    except SheetIOError as e:
        result.status = "error"
        result.error = f"Failed to fix cue sheet: {e}"
        return result

    try:
        split_audio(result.fixed_cue_path.absolute(), audio_path.absolute(), config, cwd=workdir)
    except SplitError as e:
        result.status = "error"
        result.error = f"Failed to split {audio_path.name}: {e}"
        return result
    logger.info("Split done: %s", audio_path)

    try:
        result.tracks = extract_file(result.fixed_cue_path, config.encoding)
    except SheetIOError as e:
        result.status = "error"
        result.error = f"Failed to parse cue sheet: {e}"
        return result
    logger.info("Parsed %d tracks from %s", len(result.tracks), result.fixed_cue_path)

    result.tag_results = tag_tracks(result.tracks, album, config, workdir)
    result.status = "partial" if result.failed_count else "ok"
    return result
