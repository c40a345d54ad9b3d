"""Shared pytest fixtures."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from cuefix.utils.output import set_color, set_verbosity

if TYPE_CHECKING:
    from collections.abc import Generator

HOUR_SHEET = (
    'PERFORMER "Various"\n'
    'TITLE "Night Set"\n'
    'FILE "set.flac" WAVE\n'
    "\tTRACK 01 AUDIO\n"
    '\t\tTITLE "Intro"\n'
    '\t\tPERFORMER "DJ One"\n'
    "\t\tINDEX 01 00:00:00\n"
    "\tTRACK 02 AUDIO\n"
    '\t\tTITLE "Deep Cut"\n'
    '\t\tPERFORMER "DJ Two"\n'
    "\t\tINDEX 01 00:59:30\n"
    "\tTRACK 03 AUDIO\n"
    '\t\tTITLE "Song Name"\n'
    '\t\tPERFORMER "Artist X"\n'
    "\t\tINDEX 01 01:30:12\n"
)


@pytest.fixture(autouse=True)
def reset_output() -> Generator[None, None, None]:
    """Reset module-level output flags between tests."""
    set_verbosity()
    set_color(True)
    yield
    set_verbosity()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    path = Path(tempfile.mkdtemp())
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def sample_config(temp_dir: Path) -> Path:
    """Create a sample config file."""
    config_path = temp_dir / "config.toml"
    config_path.write_text("""[sheet]
fixed_suffix = ".corrected.cue"

[tools]
splitter = "/opt/bin/shnsplit"

[tag]
workers = 4
verify_outputs = true

[display]
colored_output = false
""")
    return config_path


@pytest.fixture
def hour_sheet(temp_dir: Path) -> Path:
    """A three-track sheet with HH:MM:SS INDEX 01 positions."""
    path = temp_dir / "set.cue"
    path.write_text(HOUR_SHEET, encoding="utf-8")
    return path
