"""Core data models shared across lookatni components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .markers.config import MarkerConfig
    from .markers.dialect import ArtifactDialect

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"


@dataclass(frozen=True)
class FileRecord:
    """One file recovered from an artifact."""

    filename: str
    content: str
    start_line: int
    end_line: int
    size: int


@dataclass
class ParseError:
    """Per-line anomaly found while scanning an artifact."""

    line: int
    message: str
    severity: str = SEVERITY_ERROR


@dataclass
class ParseResult:
    """Ordered records and diagnostics produced by one scan."""

    records: List[FileRecord] = field(default_factory=list)
    errors: List[ParseError] = field(default_factory=list)
    total_markers: int = 0
    total_files: int = 0
    total_bytes: int = 0
    metadata: Dict[str, str] = field(default_factory=dict)
    config: Optional["MarkerConfig"] = None
    dialect: Optional["ArtifactDialect"] = None

    @property
    def filenames(self) -> List[str]:
        return [record.filename for record in self.records]

    def get(self, filename: str) -> Optional[FileRecord]:
        """Return the first record stored under ``filename``."""
        for record in self.records:
            if record.filename == filename:
                return record
        return None


@dataclass
class ValidationError:
    """Structural problem reported by the validator."""

    line: int
    message: str
    severity: str = SEVERITY_ERROR


@dataclass
class ValidationStatistics:
    total_markers: int = 0
    empty_markers: int = 0
    total_files: int = 0
    total_bytes: int = 0
    file_types: Dict[str, int] = field(default_factory=dict)


@dataclass
class ValidationResult:
    """Verdict and findings for one artifact."""

    is_valid: bool
    errors: List[ValidationError] = field(default_factory=list)
    duplicate_filenames: List[str] = field(default_factory=list)
    invalid_filenames: List[str] = field(default_factory=list)
    statistics: ValidationStatistics = field(default_factory=ValidationStatistics)


@dataclass
class SkippedFile:
    """A source file left out of an artifact on purpose."""

    path: str
    reason: str


@dataclass
class GenerateResult:
    """Outcome of packing a directory into an artifact."""

    success: bool = True
    total_files: int = 0
    total_bytes: int = 0
    errors: List[str] = field(default_factory=list)
    skipped_files: List[SkippedFile] = field(default_factory=list)
    file_types: Dict[str, int] = field(default_factory=dict)


@dataclass
class ExtractOptions:
    """Switches for materializing records on disk."""

    overwrite: bool = False
    create_dirs: bool = True
    dry_run: bool = False


@dataclass
class ExtractResult:
    """Outcome of writing an artifact's records to a directory."""

    success: bool = True
    extracted_files: List[str] = field(default_factory=list)
    skipped_files: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
