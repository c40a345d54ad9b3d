"""Exception hierarchy for cuefix."""

from pathlib import Path


class CuefixError(Exception):
    """Base exception for all cuefix errors.

    All exceptions in this package inherit from this class,
    allowing callers to catch all cuefix errors with
    a single except clause.
    """

    pass


# Configuration Errors
class ConfigError(CuefixError):
    """Configuration-related errors."""

    pass


class ConfigParseError(ConfigError):
    """Configuration file has invalid syntax."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config at {path}: {detail}")


class ConfigValidationError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


# Sheet I/O Errors
class SheetIOError(CuefixError):
    """Reading or writing a cue sheet failed.

    ``phase`` names the step that failed: ``open``, ``create``,
    ``read``, ``write`` or ``flush``.
    """

    def __init__(self, phase: str, path: Path, reason: str) -> None:
        self.phase = phase
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot {phase} {path}: {reason}")


# External Tool Errors
class ToolError(CuefixError):
    """An external tool exited with an error."""

    def __init__(self, tool: str, returncode: int | None, output: str) -> None:
        self.tool = tool
        self.returncode = returncode
        self.output = output
        if returncode is None:
            message = f"{tool} could not be run: {output}"
        else:
            message = f"{tool} exited with status {returncode}"
            if output:
                message += f": {output.strip()}"
        super().__init__(message)


class SplitError(ToolError):
    """The audio splitter failed; no tracks were produced."""

    pass


class TagError(ToolError):
    """The tag writer failed for a single track file."""

    def __init__(self, tool: str, path: Path, returncode: int | None, output: str) -> None:
        self.path = path
        super().__init__(tool, returncode, output)
