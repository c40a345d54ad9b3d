"""Helpers shared by command modules."""

from __future__ import annotations

import dataclasses
import sys

from cuefix.config import Config
from cuefix.exceptions import ConfigValidationError
from cuefix.utils.output import error


def with_overrides(config: Config, **overrides: object) -> Config:
    """Return *config* with the non-None command-line overrides applied.

    Exits with status 1 if an override is invalid.
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config

    updated = dataclasses.replace(config, **changes)
    try:
        updated.validate()
    except ConfigValidationError as e:
        error(str(e))
        sys.exit(1)
    return updated
