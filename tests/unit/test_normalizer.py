"""Unit tests for the INDEX 01 timestamp normalizer."""

from __future__ import annotations

import builtins
from pathlib import Path
from unittest.mock import patch

import pytest

from cuefix.cue.normalizer import (
    _lenient_int,
    fixed_sheet_path,
    normalize,
    normalize_file,
    normalize_line,
)
from cuefix.exceptions import SheetIOError

# --- normalize_line ---


def test_hours_fold_into_minutes() -> None:
    assert normalize_line("\tINDEX 01 01:30:12") == "\tINDEX 01 90:12.000"


def test_zero_hours() -> None:
    assert normalize_line("    INDEX 01 00:03:45") == "    INDEX 01 03:45.000"


def test_minutes_padded_to_two_digits() -> None:
    assert normalize_line("INDEX 01 0:0:00") == "INDEX 01 00:00.000"
    assert normalize_line("INDEX 01 00:07:00") == "INDEX 01 07:00.000"


def test_wide_minutes_not_truncated() -> None:
    assert normalize_line("INDEX 01 2:5:7") == "INDEX 01 125:7.000"


@pytest.mark.parametrize(
    ("hours", "minutes", "seconds"),
    [(0, 0, "00"), (0, 59, "59"), (1, 0, "01"), (3, 12, "75"), (10, 7, "123")],
)
def test_timestamp_formula(hours: int, minutes: int, seconds: str) -> None:
    line = f"INDEX 01 {hours:02d}:{minutes:02d}:{seconds}"
    expected = f"INDEX 01 {hours * 60 + minutes:02d}:{seconds}.000"
    assert normalize_line(line) == expected


def test_seconds_field_copied_verbatim() -> None:
    # Not re-padded, not interpreted
    assert normalize_line("INDEX 01 00:01:5") == "INDEX 01 01:5.000"
    assert normalize_line("INDEX 01 00:01:007") == "INDEX 01 01:007.000"


def test_trailing_content_kept() -> None:
    assert normalize_line("\t\tINDEX 01 01:00:00 ; x") == "\t\tINDEX 01 60:00.000 ; x"


def test_tab_between_index_and_timestamp() -> None:
    assert normalize_line("INDEX 01\t01:00:00") == "INDEX 01 60:00.000"


def test_other_index_numbers_untouched() -> None:
    line = "\t\tINDEX 00 01:29:50"
    assert normalize_line(line) == line


def test_non_index_lines_untouched() -> None:
    for line in ['TITLE "01:02:03"', "REM DATE 1999", "", "   ", "\tTRACK 01 AUDIO"]:
        assert normalize_line(line) == line


def test_already_normalized_line_untouched() -> None:
    line = "\t\tINDEX 01 90:12.000"
    assert normalize_line(line) == line


def test_lenient_int_falls_back_to_zero() -> None:
    assert _lenient_int("42") == 42
    assert _lenient_int("") == 0
    assert _lenient_int("x1") == 0


# --- normalize ---


SHEET = (
    'FILE "set.flac" WAVE\n'
    "\tTRACK 01 AUDIO\n"
    '\t\tTITLE "A"\n'
    "\t\tINDEX 01 00:00:00\n"
    "\tTRACK 02 AUDIO\n"
    '\t\tTITLE "B"\n'
    "\t\tINDEX 01 01:30:12\n"
)


def test_normalize_sheet() -> None:
    out = normalize(SHEET)
    assert out.splitlines() == [
        'FILE "set.flac" WAVE',
        "\tTRACK 01 AUDIO",
        '\t\tTITLE "A"',
        "\t\tINDEX 01 00:00.000",
        "\tTRACK 02 AUDIO",
        '\t\tTITLE "B"',
        "\t\tINDEX 01 90:12.000",
    ]


def test_line_count_and_passthrough_preserved() -> None:
    source = SHEET + "\n   \nREM trailing\n"
    in_lines = source.split("\n")[:-1]
    out_lines = normalize(source).split("\n")[:-1]
    assert len(out_lines) == len(in_lines)
    for before, after in zip(in_lines, out_lines):
        if "INDEX 01" not in before:
            assert before == after


def test_missing_final_newline_is_added() -> None:
    assert normalize("A\nINDEX 01 01:00:00") == "A\nINDEX 01 60:00.000\n"


def test_crlf_lines() -> None:
    assert normalize("A\r\nINDEX 01 00:01:00\r\n") == "A\nINDEX 01 01:00.000\n"


def test_empty_input() -> None:
    assert normalize("") == ""


def test_blank_lines_kept() -> None:
    assert normalize("\n\n") == "\n\n"


def test_second_pass_changes_nothing() -> None:
    once = normalize(SHEET)
    assert normalize(once) == once


# --- files ---


def test_fixed_sheet_path() -> None:
    assert fixed_sheet_path(Path("/music/a.cue")) == Path("/music/a.cue-fixed.cue")
    assert fixed_sheet_path("/music/a.cue", ".new") == Path("/music/a.cue.new")


def test_normalize_file(hour_sheet: Path) -> None:
    dst = fixed_sheet_path(hour_sheet)
    count = normalize_file(hour_sheet, dst)
    assert count == 15
    text = dst.read_text(encoding="utf-8")
    assert "\t\tINDEX 01 00:00.000\n" in text
    assert "\t\tINDEX 01 59:30.000\n" in text
    assert "\t\tINDEX 01 90:12.000\n" in text
    # Original untouched
    assert "INDEX 01 01:30:12" in hour_sheet.read_text(encoding="utf-8")


def test_normalize_file_overwrites(hour_sheet: Path, temp_dir: Path) -> None:
    dst = temp_dir / "out.cue"
    dst.write_text("stale\n" * 100)
    normalize_file(hour_sheet, dst)
    assert "stale" not in dst.read_text(encoding="utf-8")


def test_normalize_file_latin1(temp_dir: Path) -> None:
    src = temp_dir / "latin.cue"
    src.write_bytes('\tTITLE "Caf\xe9"\n\tINDEX 01 01:00:00\n'.encode("latin-1"))
    dst = temp_dir / "latin.cue-fixed.cue"
    normalize_file(src, dst, encoding="latin-1")
    assert dst.read_bytes() == '\tTITLE "Caf\xe9"\n\tINDEX 01 60:00.000\n'.encode("latin-1")


def test_missing_source_is_open_error(temp_dir: Path) -> None:
    dst = temp_dir / "out.cue"
    with pytest.raises(SheetIOError) as exc_info:
        normalize_file(temp_dir / "missing.cue", dst)
    assert exc_info.value.phase == "open"
    assert not dst.exists()


def test_unwritable_destination_is_create_error(hour_sheet: Path, temp_dir: Path) -> None:
    dst = temp_dir / "no" / "such" / "dir" / "out.cue"
    with pytest.raises(SheetIOError) as exc_info:
        normalize_file(hour_sheet, dst)
    assert exc_info.value.phase == "create"
    assert exc_info.value.path == dst


def test_undecodable_source_is_read_error(temp_dir: Path) -> None:
    src = temp_dir / "bad.cue"
    src.write_bytes(b"\tTRACK 01 AUDIO\n\t\tTITLE \"\xff\xfe\"\n")
    dst = temp_dir / "bad.cue-fixed.cue"
    with pytest.raises(SheetIOError) as exc_info:
        normalize_file(src, dst)
    assert exc_info.value.phase == "read"
    # Partial output removed
    assert not dst.exists()


class _FailingTarget:
    """Real file handle whose write, flush or close raises ENOSPC."""

    def __init__(self, handle, fail_on: str) -> None:
        self._handle = handle
        self._fail_on = fail_on

    def _maybe_fail(self, name: str) -> None:
        if self._fail_on == name:
            raise OSError(28, "No space left on device")

    def write(self, text: str) -> int:
        self._maybe_fail("write")
        return self._handle.write(text)

    def flush(self) -> None:
        self._maybe_fail("flush")
        self._handle.flush()

    def close(self) -> None:
        self._handle.close()
        self._maybe_fail("close")


def _open_failing(fail_on: str):
    def _open(*args, **kwargs):
        return _FailingTarget(builtins.open(*args, **kwargs), fail_on)

    return _open


@pytest.mark.parametrize(
    ("fail_on", "phase"),
    [("write", "write"), ("flush", "flush"), ("close", "flush")],
)
def test_target_failure_phase_and_cleanup(
    hour_sheet: Path, temp_dir: Path, fail_on: str, phase: str
) -> None:
    dst = temp_dir / "out.cue"
    with patch("cuefix.cue.normalizer.open", _open_failing(fail_on), create=True):
        with pytest.raises(SheetIOError) as exc_info:
            normalize_file(hour_sheet, dst)

    assert exc_info.value.phase == phase
    assert exc_info.value.path == dst
    assert "No space left on device" in str(exc_info.value)
    assert not dst.exists()
    # Source untouched
    assert "INDEX 01 01:30:12" in hour_sheet.read_text(encoding="utf-8")
