"""Command-line interface for cuefix."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click
from rich.logging import RichHandler

from cuefix import __version__
from cuefix.config import load_config
from cuefix.context import Context
from cuefix.exceptions import ConfigError
from cuefix.utils.output import (
    error,
    error_console,
    set_color,
    set_verbosity,
    warning,
)


def _configure_logging(verbose: bool, debug: bool) -> None:
    """Route library log records to stderr through rich."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.ERROR

    root = logging.getLogger("cuefix")
    root.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        handler = RichHandler(console=error_console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False, path_type=Path),
    help="Path to config file (default: ~/.config/cuefix/config.toml)",
)
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug output (implies --verbose)",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    default=False,
    help="Suppress non-error output",
)
@click.version_option(version=__version__, prog_name="cuefix")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    no_color: bool,
    verbose: bool,
    debug: bool,
    quiet: bool,
) -> None:
    """cuefix: Repair CUE sheet timestamps, then split and tag the album.

    Rewrites hour-based INDEX 01 positions (HH:MM:SS) into the MM:SS.000
    form understood by shnsplit, splits the audio file into per-track
    FLAC files and tags each of them with metaflac.

    Configuration is loaded from ~/.config/cuefix/config.toml by default.
    Use --config to specify an alternative configuration file.

    Examples:

        # Fix, split and tag an album
        cuefix split album.cue album.flac "Live at Somewhere"

        # Only write the corrected sheet
        cuefix fix album.cue
    """
    ctx.ensure_object(Context)
    app_ctx = ctx.obj
    app_ctx.verbose = verbose or debug
    app_ctx.debug = debug
    app_ctx.quiet = quiet

    set_verbosity(verbose=verbose, debug=debug, quiet=quiet)
    _configure_logging(verbose, debug)

    # Configure color output: disabled by --no-color, NO_COLOR env, or config
    disable_color = no_color or os.environ.get("NO_COLOR") is not None

    if disable_color:
        set_color(False)

    try:
        loaded_config, warnings = load_config(config)
        app_ctx.config = loaded_config

        if not disable_color and not loaded_config.colored_output:
            set_color(False)

        # The missing-file notice is only shown in verbose mode
        if not quiet:
            for warn in warnings:
                if warn.startswith("No config file found") and not app_ctx.verbose:
                    continue
                warning(warn)

    except (ConfigError, OSError) as e:
        error(str(e))
        ctx.exit(1)


def register_commands() -> None:
    """Register all commands from the commands package."""
    from cuefix.commands import discover_commands

    for command in discover_commands():
        cli.add_command(command)


def main() -> None:
    """Console script entry point."""
    cli(prog_name="cuefix")


# Register commands on import
register_commands()
