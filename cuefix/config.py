"""Configuration management for cuefix."""

from __future__ import annotations

import codecs
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w

from cuefix.exceptions import (
    ConfigParseError,
    ConfigValidationError,
)

DEFAULT_FIXED_SUFFIX = "-fixed.cue"
DEFAULT_NAME_TEMPLATE = "%n-%t"


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".config" / "cuefix" / "config.toml"


@dataclass
class Config:
    """Application configuration.

    Attributes:
        fixed_suffix: Appended to the original sheet path to name the
            corrected sheet written next to it.
        encoding: Text encoding used to read and write cue sheets.
        splitter: Executable used to split the audio file (shnsplit).
        tagger: Executable used to write tags (metaflac).
        output_format: Splitter output format; also the extension of the
            reconstructed track filenames.
        name_template: Splitter output filename template.
        char_map: Optional splitter character map (``shnsplit -m``), pairs
            of characters where each first character is replaced by the
            second in track titles.
        tag_workers: Number of tag writer processes run in parallel.
        verify_outputs: Report a track as failed without running the tag
            writer when its reconstructed file does not exist.
        colored_output: Whether to use colored terminal output.
        config_path: Path where config was loaded from (None if defaults).
    """

    fixed_suffix: str = DEFAULT_FIXED_SUFFIX
    encoding: str = "utf-8"
    splitter: str = "shnsplit"
    tagger: str = "metaflac"
    output_format: str = "flac"
    name_template: str = DEFAULT_NAME_TEMPLATE
    char_map: str | None = None
    tag_workers: int = 1
    verify_outputs: bool = False
    colored_output: bool = True
    config_path: Path | None = None

    def validate(self) -> list[str]:
        """Validate configuration values.

        Returns:
            List of warning messages for non-fatal issues.

        Raises:
            ConfigValidationError: If a critical validation fails.
        """
        warnings: list[str] = []

        if not self.fixed_suffix:
            raise ConfigValidationError(
                "sheet.fixed_suffix", self.fixed_suffix, "must not be empty"
            )

        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ConfigValidationError("sheet.encoding", self.encoding, "unknown encoding") from e

        if self.tag_workers < 1:
            raise ConfigValidationError("tag.workers", self.tag_workers, "must be at least 1")

        if self.char_map is not None and len(self.char_map) % 2 != 0:
            raise ConfigValidationError(
                "split.char_map", self.char_map, "must contain pairs of characters"
            )

        # The filename reconstruction only knows the default template
        if self.name_template != DEFAULT_NAME_TEMPLATE:
            warnings.append(
                f"split.name_template={self.name_template!r} differs from "
                f"{DEFAULT_NAME_TEMPLATE!r}; tagging will look for files named "
                f"NN-Title.{self.output_format}"
            )

        return warnings


def load_config(config_path: Path | None = None) -> tuple[Config, list[str]]:
    """Load configuration from file or use defaults.

    Args:
        config_path: Explicit config file path. If None, uses default location.

    Returns:
        Tuple of (Config object, list of warning messages).

    Raises:
        ConfigParseError: If config file exists but has invalid syntax.
        ConfigValidationError: If config values are invalid.
    """
    warnings: list[str] = []

    if config_path is None:
        config_path = get_default_config_path()

    config_path = config_path.expanduser().resolve()

    if not config_path.exists():
        # Use defaults
        config = Config()
        warnings.append(
            f"No config file found at {config_path}. Using defaults. "
            f"Create config with: cuefix init-config"
        )
        config_warnings = config.validate()
        return config, warnings + config_warnings

    # Load from file
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(config_path, str(e)) from e

    config = _parse_config_dict(data, config_path)
    config_warnings = config.validate()

    return config, warnings + config_warnings


def _get_str(section: dict[str, Any], key: str, name: str, *, nullable: bool = False) -> Any:
    value = section[key]
    if value is None and nullable:
        return None
    if not isinstance(value, str):
        reason = "must be a string or null" if nullable else "must be a string"
        raise ConfigValidationError(name, value, reason)
    return value


def _parse_config_dict(data: dict[str, Any], config_path: Path) -> Config:
    """Parse configuration dictionary into Config object."""
    config = Config(config_path=config_path)

    # Parse [sheet] section
    sheet = data.get("sheet", {})
    if "fixed_suffix" in sheet:
        config.fixed_suffix = _get_str(sheet, "fixed_suffix", "sheet.fixed_suffix")
    if "encoding" in sheet:
        config.encoding = _get_str(sheet, "encoding", "sheet.encoding")

    # Parse [tools] section
    tools = data.get("tools", {})
    if "splitter" in tools:
        config.splitter = _get_str(tools, "splitter", "tools.splitter")
    if "tagger" in tools:
        config.tagger = _get_str(tools, "tagger", "tools.tagger")

    # Parse [split] section
    split = data.get("split", {})
    if "output_format" in split:
        config.output_format = _get_str(split, "output_format", "split.output_format")
    if "name_template" in split:
        config.name_template = _get_str(split, "name_template", "split.name_template")
    if "char_map" in split:
        config.char_map = _get_str(split, "char_map", "split.char_map", nullable=True)

    # Parse [tag] section
    tag = data.get("tag", {})
    if "workers" in tag:
        value = tag["workers"]
        # bool is an int subclass
        if not isinstance(value, int) or isinstance(value, bool):
            raise ConfigValidationError("tag.workers", value, "must be an integer")
        config.tag_workers = value

    if "verify_outputs" in tag:
        value = tag["verify_outputs"]
        if not isinstance(value, bool):
            raise ConfigValidationError("tag.verify_outputs", value, "must be a boolean")
        config.verify_outputs = value

    # Parse [display] section
    display = data.get("display", {})
    if "colored_output" in display:
        value = display["colored_output"]
        if not isinstance(value, bool):
            raise ConfigValidationError("display.colored_output", value, "must be a boolean")
        config.colored_output = value

    return config


def save_config(config: Config, config_path: Path | None = None) -> Path:
    """Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Path to save to. If None, uses config.config_path or default.

    Returns:
        The path the configuration was written to.
    """
    if config_path is None:
        config_path = config.config_path or get_default_config_path()

    config_path = config_path.expanduser().resolve()

    # Ensure directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    # Build TOML structure
    data: dict[str, Any] = {
        "sheet": {
            "fixed_suffix": config.fixed_suffix,
            "encoding": config.encoding,
        },
        "tools": {
            "splitter": config.splitter,
            "tagger": config.tagger,
        },
        "split": {
            "output_format": config.output_format,
            "name_template": config.name_template,
        },
        "tag": {
            "workers": config.tag_workers,
            "verify_outputs": config.verify_outputs,
        },
        "display": {
            "colored_output": config.colored_output,
        },
    }

    if config.char_map is not None:
        data["split"]["char_map"] = config.char_map

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)

    return config_path
