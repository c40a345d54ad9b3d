"""Fix command: write the corrected sheet only."""

from __future__ import annotations

from pathlib import Path

import click
from rich.markup import escape

from cuefix.commands._common import with_overrides
from cuefix.context import Context, pass_context
from cuefix.cue.normalizer import fixed_sheet_path, normalize_file
from cuefix.exceptions import SheetIOError
from cuefix.utils.output import error, success


@click.command("fix")
@click.argument("sheet", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to write the corrected sheet (default: SHEET-fixed.cue).",
)
@click.option(
    "--encoding",
    type=str,
    default=None,
    help="Character encoding of the cue sheet (default: from config, utf-8).",
)
@pass_context
def cli(ctx: Context, sheet: Path, output: Path | None, encoding: str | None) -> None:
    """Rewrite HH:MM:SS INDEX 01 positions of SHEET as MM:SS.000.

    All other lines are copied unchanged.
    """
    config = with_overrides(ctx.config, encoding=encoding)
    target = output if output is not None else fixed_sheet_path(sheet, config.fixed_suffix)

    try:
        count = normalize_file(sheet, target, config.encoding)
    except SheetIOError as e:
        error(escape(str(e)))
        raise SystemExit(1)

    success(f"Wrote {count} lines to {escape(str(target))}")
