"""Shared click context for cuefix commands."""

from __future__ import annotations

import click

from cuefix.config import Config


class Context:
    """Shared context for all commands."""

    def __init__(self) -> None:
        self.config: Config = Config()
        self.verbose: bool = False
        self.debug: bool = False
        self.quiet: bool = False


pass_context = click.make_pass_decorator(Context, ensure=True)
