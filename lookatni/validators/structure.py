"""Structural validation of parsed artifacts."""

from __future__ import annotations

from collections import Counter
from pathlib import PurePosixPath
from typing import Dict, List, Sequence

from ..logging import get_logger
from ..markers.dialect import Classic
from ..models import (
    SEVERITY_ERROR,
    SEVERITY_WARNING,
    ParseResult,
    ValidationError,
    ValidationResult,
    ValidationStatistics,
)
from .filenames import filename_problem

MALFORMED_MARKER_MESSAGE = "Malformed marker line (strict mode)"


class ArtifactValidator:
    """Applies the structural policy to one parse result.

    An artifact is valid when it holds at least one marker, every filename is
    portable and unique, and no error-severity finding was recorded. Records
    with empty content are reported as warnings without failing the verdict.
    """

    def __init__(self) -> None:
        self.logger = get_logger("validator")

    def validate(
        self,
        parsed: ParseResult,
        *,
        strict: bool = False,
        lines: Sequence[str] = (),
        line_offset: int = 0,
    ) -> ValidationResult:
        """Return the report for ``parsed``.

        ``lines`` and ``line_offset`` describe the artifact body that was
        scanned; they are only needed for the strict malformed-marker pass.
        """
        errors: List[ValidationError] = [
            ValidationError(line=error.line, message=error.message, severity=error.severity)
            for error in parsed.errors
        ]
        statistics = ValidationStatistics(
            total_markers=parsed.total_markers,
            total_files=parsed.total_files,
            total_bytes=parsed.total_bytes,
            file_types=_file_types(parsed),
        )

        if strict:
            errors.extend(self._malformed_markers(parsed, lines, line_offset))

        invalid: List[str] = []
        counts = Counter(record.filename for record in parsed.records)
        duplicates = [name for name in counts if counts[name] > 1]
        seen: Dict[str, int] = {}
        for record in parsed.records:
            seen[record.filename] = seen.get(record.filename, 0) + 1

            if not record.content.strip():
                statistics.empty_markers += 1
                errors.append(
                    ValidationError(
                        line=record.start_line,
                        message=f"Empty content for {record.filename}",
                        severity=SEVERITY_WARNING,
                    )
                )

            problem = filename_problem(record.filename)
            if problem is not None:
                if record.filename not in invalid:
                    invalid.append(record.filename)
                errors.append(
                    ValidationError(
                        line=record.start_line,
                        message=f"Invalid filename {record.filename!r}: {problem}",
                    )
                )

            if seen[record.filename] == 2:
                errors.append(
                    ValidationError(
                        line=record.start_line,
                        message=f"Duplicate filename {record.filename!r}",
                    )
                )

        has_errors = any(error.severity == SEVERITY_ERROR for error in errors)
        is_valid = (
            parsed.total_markers > 0 and not invalid and not duplicates and not has_errors
        )
        self.logger.debug(
            "Validated %d markers: valid=%s duplicates=%d invalid=%d",
            parsed.total_markers,
            is_valid,
            len(duplicates),
            len(invalid),
        )
        return ValidationResult(
            is_valid=is_valid,
            errors=sorted(errors, key=lambda error: error.line),
            duplicate_filenames=duplicates,
            invalid_filenames=invalid,
            statistics=statistics,
        )

    @staticmethod
    def _malformed_markers(
        parsed: ParseResult, lines: Sequence[str], line_offset: int
    ) -> List[ValidationError]:
        if parsed.config is None:
            return []
        matcher = parsed.config.compile()
        tokens = parsed.config.tokens()
        separator = parsed.dialect.separator if isinstance(parsed.dialect, Classic) else None

        found: List[ValidationError] = []
        for index, line in enumerate(lines, start=line_offset + 1):
            looks_like = any(token in line for token in tokens)
            if separator is not None and separator in line and "//" in line:
                looks_like = True
            if looks_like and not matcher.matches(line):
                found.append(ValidationError(line=index, message=MALFORMED_MARKER_MESSAGE))
        return found


def _file_types(parsed: ParseResult) -> Dict[str, int]:
    breakdown: Dict[str, int] = {}
    for record in parsed.records:
        suffix = PurePosixPath(record.filename).suffix or "no-extension"
        breakdown[suffix] = breakdown.get(suffix, 0) + 1
    return breakdown


__all__ = ["ArtifactValidator", "MALFORMED_MARKER_MESSAGE"]
