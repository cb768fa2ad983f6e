"""Tests for the marker scanner state machine."""

from __future__ import annotations

from lookatni.markers import StartEndFormat, default_config, split_lines
from lookatni.scanner import EMPTY_FILENAME_MESSAGE, MarkerScanner, detect_separator

FS = chr(28)


def _marker(name: str, separator: str = FS) -> str:
    return f"//{separator}/ {name} /{separator}//"


def _scan(text: str, **kwargs):
    return MarkerScanner().scan(split_lines(text), default_config().compile(), **kwargs)


def test_scan_collects_records_in_order() -> None:
    text = "\n".join(
        [_marker("a.txt"), "alpha", "", _marker("dir/b.txt"), "beta 1", "beta 2", ""]
    )

    result = _scan(text)

    assert result.filenames == ["a.txt", "dir/b.txt"]
    first, second = result.records
    assert first.content == "alpha"
    assert (first.start_line, first.end_line) == (1, 3)
    assert second.content == "beta 1\nbeta 2"
    assert (second.start_line, second.end_line) == (4, 6)
    assert result.total_markers == 2
    assert result.total_files == 2
    assert result.total_bytes == len("alpha") + len("beta 1\nbeta 2")
    assert result.errors == []


def test_leading_blank_lines_are_kept_and_trailing_ones_trimmed() -> None:
    text = "\n".join([_marker("a.txt"), "", "", "body", "", "", ""])

    record = _scan(text).records[0]

    assert record.content == "\n\nbody"


def test_lines_before_the_first_marker_are_ignored() -> None:
    text = "\n".join(["preamble", "more", _marker("a.txt"), "x"])

    result = _scan(text)

    assert result.filenames == ["a.txt"]
    assert result.records[0].start_line == 3


def test_empty_filename_marker_is_counted_and_reported() -> None:
    text = "\n".join([_marker("a.txt"), "alpha", f"//{FS}/    /{FS}//", "orphan", _marker("b.txt"), "beta"])

    result = _scan(text)

    assert result.filenames == ["a.txt", "b.txt"]
    assert result.records[0].content == "alpha"
    assert result.records[0].end_line == 2
    assert result.total_markers == 3
    assert result.total_files == 2
    assert len(result.errors) == 1
    assert result.errors[0].line == 3
    assert result.errors[0].message == EMPTY_FILENAME_MESSAGE
    assert result.errors[0].severity == "error"


def test_marker_with_no_content_yields_empty_record() -> None:
    result = _scan("\n".join([_marker("empty.txt"), _marker("full.txt"), "x"]))

    assert result.get("empty.txt") is not None
    assert result.get("empty.txt").content == ""
    assert result.get("empty.txt").size == 0
    assert result.get("full.txt").content == "x"


def test_carriage_returns_are_ignored_on_markers_but_kept_in_content() -> None:
    text = _marker("win.txt") + "\r\nline one\r\nline two\r\n"

    record = _scan(text).records[0]

    assert record.filename == "win.txt"
    assert record.content == "line one\r\nline two\r"


def test_sizes_are_utf8_byte_counts() -> None:
    record = _scan("\n".join([_marker("u.txt"), "héllo 🔥"])).records[0]

    assert record.size == len("héllo 🔥".encode("utf-8"))


def test_line_offset_shifts_reported_positions() -> None:
    text = "\n".join([_marker("a.txt"), "x", f"//{FS}/   /{FS}//"])

    result = _scan(text, line_offset=4)

    assert result.records[0].start_line == 5
    assert result.records[0].end_line == 6
    assert result.errors[0].line == 7


def test_leading_header_record_is_lifted_into_metadata() -> None:
    text = "\n".join(
        [_marker("PROJECT_INFO"), "Project: demo", "Total Files: 1", "", _marker("a.txt"), "x"]
    )

    result = _scan(text, header_name="PROJECT_INFO")

    assert result.metadata == {"Project": "demo", "Total Files": "1"}
    assert result.filenames == ["a.txt"]
    assert result.total_markers == 1
    assert result.total_files == 1


def test_header_name_is_a_regular_record_when_not_first() -> None:
    text = "\n".join([_marker("a.txt"), "x", _marker("PROJECT_INFO"), "Project: demo"])

    result = _scan(text, header_name="PROJECT_INFO")

    assert result.filenames == ["a.txt", "PROJECT_INFO"]
    assert result.metadata == {}
    assert result.total_markers == 2


def test_custom_config_matcher() -> None:
    config = StartEndFormat(start="<<", end=">>")
    lines = ["<< one.py >>", "print(1)", "<< two.py >>", "print(2)"]

    result = MarkerScanner().scan(lines, config.compile())

    assert result.filenames == ["one.py", "two.py"]
    assert result.records[1].content == "print(2)"


def test_detect_separator_finds_first_classic_marker() -> None:
    lines = ["intro", _marker("a.txt", chr(29)), _marker("b.txt", FS)]

    assert detect_separator(lines) == chr(29)
    assert detect_separator([_marker("a.txt", chr(30)) + "\r"]) == chr(30)


def test_detect_separator_requires_symmetric_markers() -> None:
    assert detect_separator([f"//{chr(29)}/ a.txt /{chr(30)}//"]) is None
    assert detect_separator(["// a.txt //", "nothing here"]) is None


def test_detect_separator_skips_carriage_return_markers() -> None:
    lines = ["intro", "//\r/ a.txt /\r//", _marker("b.txt", chr(29))]

    assert detect_separator(["//\r/ a.txt /\r//"]) is None
    assert detect_separator(lines) == chr(29)


def test_empty_header_is_lifted_only_once() -> None:
    text = "\n".join([_marker("PROJECT_INFO"), _marker("PROJECT_INFO"), "Project: demo"])

    result = _scan(text, header_name="PROJECT_INFO")

    assert result.metadata == {}
    assert result.filenames == ["PROJECT_INFO"]
    assert result.records[0].content == "Project: demo"
    assert result.total_markers == 1
