"""Materialize parsed records as files under an output directory."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .logging import get_logger
from .models import ExtractOptions, ExtractResult, ParseResult


def _is_within(root: Path, target: Path) -> bool:
    return target.resolve().is_relative_to(root.resolve())


class Extractor:
    """Writes every record of a parse result below one output root."""

    def __init__(self) -> None:
        self.logger = get_logger("extractor")

    def extract(
        self,
        parsed: ParseResult,
        output_dir: str | Path,
        options: Optional[ExtractOptions] = None,
    ) -> ExtractResult:
        options = options or ExtractOptions()
        root = Path(output_dir).expanduser()
        result = ExtractResult()

        for error in parsed.errors:
            result.errors.append(f"Line {error.line}: {error.message}")

        for record in parsed.records:
            target = root / record.filename
            if not _is_within(root, target):
                result.errors.append(f"Refusing to write outside {root}: {record.filename}")
                result.success = False
                continue

            if not options.overwrite and target.exists():
                if options.dry_run:
                    result.errors.append(f"Would skip existing file: {target}")
                else:
                    result.errors.append(f"File exists (use --overwrite): {target}")
                result.skipped_files.append(str(target))
                continue

            if options.dry_run:
                result.extracted_files.append(str(target))
                continue

            if options.create_dirs:
                try:
                    target.parent.mkdir(parents=True, exist_ok=True)
                except OSError as exc:
                    result.errors.append(f"Failed to create directory {target.parent}: {exc}")
                    result.success = False
                    continue

            try:
                target.write_bytes(record.content.encode("utf-8"))
            except OSError as exc:
                result.errors.append(f"Failed to write {target}: {exc}")
                result.success = False
                self.logger.warning("Failed to write %s: %s", target, exc)
                continue

            self.logger.debug("Extracted %s", target)
            result.extracted_files.append(str(target))

        self.logger.info(
            "%s %d files to %s (%d skipped)",
            "Would extract" if options.dry_run else "Extracted",
            len(result.extracted_files),
            root,
            len(result.skipped_files),
        )
        return result


__all__ = ["Extractor"]
