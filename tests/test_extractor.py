"""Tests for writing parsed records to disk."""

from __future__ import annotations

from pathlib import Path

from lookatni.extractor import Extractor
from lookatni.models import ExtractOptions, FileRecord, ParseError, ParseResult


def _parsed(*records: tuple[str, str]) -> ParseResult:
    result = ParseResult()
    for index, (name, content) in enumerate(records):
        result.records.append(
            FileRecord(
                filename=name,
                content=content,
                start_line=index * 2 + 1,
                end_line=index * 2 + 2,
                size=len(content.encode("utf-8")),
            )
        )
    result.total_markers = result.total_files = len(records)
    return result


def test_extract_writes_records_verbatim(tmp_path: Path) -> None:
    parsed = _parsed(("a.txt", "alpha"), ("deep/dir/b.txt", "beta\r\nline"))
    out = tmp_path / "out"

    result = Extractor().extract(parsed, out)

    assert result.success is True
    assert result.errors == []
    assert result.extracted_files == [str(out / "a.txt"), str(out / "deep/dir/b.txt")]
    assert (out / "a.txt").read_bytes() == b"alpha"
    assert (out / "deep/dir/b.txt").read_bytes() == b"beta\r\nline"


def test_dry_run_touches_nothing(tmp_path: Path) -> None:
    parsed = _parsed(("a.txt", "alpha"), ("nested/b.txt", "beta"))
    out = tmp_path / "out"

    result = Extractor().extract(parsed, out, ExtractOptions(dry_run=True))

    assert result.success is True
    assert result.extracted_files == [str(out / "a.txt"), str(out / "nested/b.txt")]
    assert not out.exists()


def test_existing_files_are_skipped_without_overwrite(tmp_path: Path) -> None:
    out = tmp_path / "out"
    out.mkdir()
    (out / "a.txt").write_text("original", encoding="utf-8")
    parsed = _parsed(("a.txt", "replacement"), ("b.txt", "new"))

    result = Extractor().extract(parsed, out)

    assert result.success is True
    assert result.skipped_files == [str(out / "a.txt")]
    assert result.errors == [f"File exists (use --overwrite): {out / 'a.txt'}"]
    assert result.extracted_files == [str(out / "b.txt")]
    assert (out / "a.txt").read_text(encoding="utf-8") == "original"


def test_dry_run_reports_conflicts_in_advisory_wording(tmp_path: Path) -> None:
    out = tmp_path / "out"
    out.mkdir()
    (out / "a.txt").write_text("original", encoding="utf-8")

    result = Extractor().extract(_parsed(("a.txt", "x")), out, ExtractOptions(dry_run=True))

    assert result.errors == [f"Would skip existing file: {out / 'a.txt'}"]
    assert result.skipped_files == [str(out / "a.txt")]
    assert result.extracted_files == []


def test_overwrite_replaces_existing_files(tmp_path: Path) -> None:
    out = tmp_path / "out"
    out.mkdir()
    (out / "a.txt").write_text("original", encoding="utf-8")

    result = Extractor().extract(_parsed(("a.txt", "replacement")), out, ExtractOptions(overwrite=True))

    assert result.success is True
    assert (out / "a.txt").read_text(encoding="utf-8") == "replacement"


def test_missing_parents_fail_without_create_dirs(tmp_path: Path) -> None:
    out = tmp_path / "out"
    out.mkdir()

    result = Extractor().extract(
        _parsed(("a.txt", "a"), ("missing/b.txt", "b")), out, ExtractOptions(create_dirs=False)
    )

    assert result.success is False
    assert result.extracted_files == [str(out / "a.txt")]
    assert len(result.errors) == 1
    assert result.errors[0].startswith("Failed to write")


def test_paths_escaping_the_output_root_are_refused(tmp_path: Path) -> None:
    out = tmp_path / "out"

    result = Extractor().extract(_parsed(("../evil.txt", "x"), ("ok.txt", "ok")), out)

    assert result.success is False
    assert result.errors[0].startswith("Refusing to write outside")
    assert not (tmp_path / "evil.txt").exists()
    assert (out / "ok.txt").exists()


def test_parse_errors_are_carried_over(tmp_path: Path) -> None:
    parsed = _parsed(("a.txt", "a"))
    parsed.errors.append(ParseError(line=7, message="Empty filename in marker"))

    result = Extractor().extract(parsed, tmp_path / "out")

    assert result.errors == ["Line 7: Empty filename in marker"]
    assert result.success is True
