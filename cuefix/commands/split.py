"""Split command: fix the sheet, split the audio, tag every track."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.markup import escape

from cuefix.commands._common import with_overrides
from cuefix.config import Config
from cuefix.context import Context, pass_context
from cuefix.cue.pipeline import RunResult, process
from cuefix.cue.tools import check_tools_available, track_filename
from cuefix.utils.output import error, info, success, verbose, warning

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_TAG_FAILURES = 3


def _report_dry_run(result: RunResult, config: Config) -> None:
    info(f"{escape(result.cue_path.name)} -> {escape(result.audio_path.name)}")
    info(f"  Corrected sheet: {escape(str(result.fixed_cue_path))}")
    info(f"  Tracks: {len(result.tracks)}")
    for record in result.tracks:
        verbose(f"    {escape(track_filename(record, config))}")


def _report_tags(result: RunResult) -> None:
    for tag_result in result.tag_results:
        name = escape(tag_result.path.name)
        if tag_result.ok:
            verbose(f"Tagged {name}")
        else:
            error(f"Failed to apply metadata for {name}: {escape(tag_result.error or '')}")


def _exit_code(result: RunResult, strict: bool) -> int:
    if not strict:
        return EXIT_SUCCESS
    if result.status == "error":
        return EXIT_ERROR
    if result.status == "partial":
        return EXIT_TAG_FAILURES
    return EXIT_SUCCESS


@click.command("split")
@click.argument("sheet", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("audio", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("album")
@click.option(
    "--dry-run",
    "-n",
    is_flag=True,
    default=False,
    help="Show the tracks that would be split and tagged without running any tool.",
)
@click.option(
    "--workers",
    "-j",
    type=click.IntRange(min=1),
    default=None,
    help="Number of tracks tagged in parallel (default: from config, 1).",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Exit non-zero when a phase fails (1) or any track fails to tag (3).",
)
@click.option(
    "--encoding",
    type=str,
    default=None,
    help="Character encoding of the cue sheet (default: from config, utf-8).",
)
@pass_context
def cli(
    ctx: Context,
    sheet: Path,
    audio: Path,
    album: str,
    dry_run: bool,
    workers: int | None,
    strict: bool,
    encoding: str | None,
) -> None:
    """Fix SHEET, split AUDIO with it and tag the tracks with ALBUM.

    The corrected sheet is written next to SHEET (SHEET-fixed.cue by
    default). Tracks are written to the current directory as NN-Title.flac
    and tagged with TITLE, ARTIST and ALBUM.

    Failures are reported on stderr. Unless --strict is given the exit
    status is 0 even when some tracks could not be tagged.

    Examples:

    \b
      cuefix split album.cue album.flac "Live at Somewhere"

    \b
      # Preview the track list
      cuefix split --dry-run -v album.cue album.flac "Live at Somewhere"
    """
    config = with_overrides(ctx.config, tag_workers=workers, encoding=encoding)

    if not dry_run:
        missing = check_tools_available(config)
        if missing:
            warning(f"Tools not found on PATH: {escape(', '.join(missing))}")

    result = process(sheet, audio, album, config, dry_run=dry_run)

    if result.status == "error":
        error(escape(result.error or "Processing failed"))
        sys.exit(_exit_code(result, strict))

    if dry_run:
        _report_dry_run(result, config)
        sys.exit(EXIT_SUCCESS)

    verbose(f"Corrected sheet written to {escape(str(result.fixed_cue_path))}")
    _report_tags(result)

    if result.failed_count:
        warning(f"Done: {result.tagged_count} tagged, {result.failed_count} failed")
    else:
        success(f"Done: {result.tagged_count} tracks split and tagged")

    sys.exit(_exit_code(result, strict))
