"""Check availability of external tool dependencies."""

from __future__ import annotations

import shutil

import click
from rich.table import Table

from cuefix.context import Context, pass_context
from cuefix.utils.output import console, error, info, success


@click.command("check-deps")
@pass_context
def cli(ctx: Context) -> None:
    """Check that the splitter and tag writer are on PATH.

    Exits with code 1 if either is missing.
    """
    config = ctx.config
    tools = [
        (config.splitter, "Split the audio file by cue sheet", "split"),
        (config.tagger, "Write FLAC tags", "split"),
    ]

    table = Table(title="External Dependencies", show_lines=False)
    table.add_column("Tool", style="bold")
    table.add_column("Status")
    table.add_column("Path")
    table.add_column("Purpose")
    table.add_column("Used By")

    missing: list[str] = []
    for name, purpose, used_by in tools:
        path = shutil.which(name)
        if path is not None:
            status = "[green]found[/green]"
        else:
            status = "[red]MISSING[/red]"
            missing.append(name)
        table.add_row(name, status, path or "", purpose, used_by)

    console.print(table)
    console.print()

    if missing:
        error(f"Missing {len(missing)} required tool(s): {', '.join(missing)}")
        info("shnsplit ships with shntool; metaflac ships with flac.")
        raise SystemExit(1)

    success("All required tools are available.")
