"""Line-oriented scanner that recovers file records from artifact text."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .logging import get_logger
from .markers.config import CompiledMatcher
from .markers.dialect import parse_header_fields
from .models import SEVERITY_ERROR, FileRecord, ParseError, ParseResult

# Control characters accepted as a separator (CR and LF excluded), used on both sides.
_GENERIC_MARKER = re.compile(r"^//([\x00-\x09\x0b\x0c\x0e-\x1f])/ (.+?) /\1//$")

EMPTY_FILENAME_MESSAGE = "Empty filename in marker"


def detect_separator(lines: Sequence[str]) -> Optional[str]:
    """Return the separator of the first classic-looking marker line, if any."""
    for line in lines:
        found = _GENERIC_MARKER.match(line[:-1] if line.endswith("\r") else line)
        if found is not None:
            return found.group(1)
    return None


@dataclass
class _OpenRecord:
    filename: str
    start_line: int
    is_header: bool = False
    lines: List[str] = field(default_factory=list)


class MarkerScanner:
    """Two-state (idle/collecting) scanner over a buffered line sequence.

    The scanner keeps no state between calls; the matcher is passed in so
    that separator detection never leaks from one artifact into another.
    """

    def __init__(self) -> None:
        self.logger = get_logger("scanner")

    def scan(
        self,
        lines: Sequence[str],
        matcher: CompiledMatcher,
        *,
        line_offset: int = 0,
        header_name: Optional[str] = None,
    ) -> ParseResult:
        """Scan ``lines`` and return the records and diagnostics they contain.

        ``line_offset`` is the number of artifact lines preceding ``lines`` so
        reported positions refer to the whole artifact. When ``header_name`` is
        given, a leading record with that name is lifted into
        ``ParseResult.metadata`` instead of being returned as a file.
        """
        result = ParseResult()
        current: Optional[_OpenRecord] = None
        header_seen = False
        line_number = line_offset

        for line in lines:
            line_number += 1
            filename = matcher.match(line)
            if filename is None:
                if current is not None:
                    current.lines.append(line)
                continue

            if current is not None:
                self._finalize(current, result, end_line=line_number - 1)
                current = None

            result.total_markers += 1
            if not filename:
                result.errors.append(
                    ParseError(line=line_number, message=EMPTY_FILENAME_MESSAGE, severity=SEVERITY_ERROR)
                )
                self.logger.debug("Empty filename in marker at line %d", line_number)
                continue

            is_header = (
                header_name is not None
                and filename == header_name
                and not result.records
                and not header_seen
            )
            if is_header:
                header_seen = True
                result.total_markers -= 1
            current = _OpenRecord(filename=filename, start_line=line_number, is_header=is_header)

        if current is not None:
            self._finalize(current, result, end_line=line_number)

        return result

    @staticmethod
    def _finalize(record: _OpenRecord, result: ParseResult, *, end_line: int) -> None:
        content = "\n".join(record.lines).rstrip("\n")
        if record.is_header:
            result.metadata = parse_header_fields(content)
            return
        size = len(content.encode("utf-8"))
        result.records.append(
            FileRecord(
                filename=record.filename,
                content=content,
                start_line=record.start_line,
                end_line=end_line,
                size=size,
            )
        )
        result.total_files += 1
        result.total_bytes += size


__all__ = ["EMPTY_FILENAME_MESSAGE", "MarkerScanner", "detect_separator"]
