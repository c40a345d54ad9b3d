"""Tracks command: list the tracks of a sheet."""

from __future__ import annotations

from pathlib import Path

import click
from rich.markup import escape

from cuefix.commands._common import with_overrides
from cuefix.context import Context, pass_context
from cuefix.cue.extractor import extract_file
from cuefix.cue.pipeline import preview_tracks
from cuefix.cue.tools import track_filename
from cuefix.exceptions import SheetIOError
from cuefix.utils.output import console, create_table, error, info


@click.command("tracks")
@click.argument("sheet", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--raw",
    is_flag=True,
    default=False,
    help="Read SHEET as already corrected instead of fixing it in memory first.",
)
@click.option(
    "--encoding",
    type=str,
    default=None,
    help="Character encoding of the cue sheet (default: from config, utf-8).",
)
@pass_context
def cli(ctx: Context, sheet: Path, raw: bool, encoding: str | None) -> None:
    """List the tracks of SHEET and the filenames they split into."""
    config = with_overrides(ctx.config, encoding=encoding)

    try:
        if raw:
            records = extract_file(sheet, config.encoding)
        else:
            records = preview_tracks(sheet, config.encoding)
    except SheetIOError as e:
        error(escape(str(e)))
        raise SystemExit(1)

    if not records:
        info("No tracks found.")
        return

    table = create_table(title=escape(sheet.name))
    table.add_column("#", style="track.number")
    table.add_column("Title", style="track.title")
    table.add_column("Performer")
    table.add_column("File", style="path")
    for record in records:
        table.add_row(
            escape(record.number),
            escape(record.title),
            escape(record.performer),
            escape(track_filename(record, config)),
        )
    console.print(table)
