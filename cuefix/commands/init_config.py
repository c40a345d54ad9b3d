"""Initialize configuration file for cuefix."""

from __future__ import annotations

from pathlib import Path

import click

from cuefix.config import Config, get_default_config_path, save_config
from cuefix.context import Context, pass_context
from cuefix.utils.output import error, info, success


@click.command("init-config")
@click.option(
    "--force",
    "-f",
    is_flag=True,
    default=False,
    help="Overwrite existing config file",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output path for config file (default: ~/.config/cuefix/config.toml)",
)
@pass_context
def cli(ctx: Context, force: bool, output: Path | None) -> None:
    """Create a new configuration file with default settings.

    Examples:

    \b
      # Create config at default location
      cuefix init-config

    \b
      # Create config at custom location
      cuefix init-config --output ./cuefix.toml
    """
    config_path = output if output is not None else get_default_config_path()
    config_path = config_path.expanduser().resolve()

    if config_path.exists() and not force:
        error(
            f"Config file already exists: {config_path}",
            hint="Use --force to overwrite",
        )
        raise SystemExit(1)

    try:
        written = save_config(Config(), config_path)
    except OSError as e:
        error(f"Failed to write config file: {e}")
        raise SystemExit(1)

    success(f"Created config file: {written}")
    info("Edit it to change the fixed-sheet suffix, tool names or tagging workers.")
