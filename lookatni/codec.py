"""Adaptive front end: the generate/parse/validate/extract operations."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Tuple

from .extractor import Extractor
from .logging import get_logger
from .markers.config import (
    DEFAULT_SEPARATOR,
    MarkerConfig,
    config_from_mapping,
    default_config,
    uses_default_format,
)
from .markers.dialect import (
    FRONTMATTER_KEY,
    HEADER_RECORD_NAME,
    Adaptive,
    ArtifactDialect,
    Classic,
    split_frontmatter,
    split_lines,
)
from .models import ExtractOptions, ExtractResult, GenerateResult, ParseResult, ValidationResult
from .packer import Packer
from .scanner import MarkerScanner, detect_separator
from .validators import ArtifactValidator


@dataclass(frozen=True)
class ResolvedArtifact:
    """Artifact lines together with the dialect chosen for them."""

    dialect: ArtifactDialect
    lines: List[str]
    body_start: int

    @property
    def body(self) -> List[str]:
        return self.lines[self.body_start:]


def resolve_dialect(text: str) -> ResolvedArtifact:
    """Pick the dialect of ``text`` once, before any scanning happens."""
    lines = split_lines(text)
    frontmatter, body_start = split_frontmatter(lines)
    if frontmatter is not None and frontmatter.get(FRONTMATTER_KEY) is not None:
        mapping = frontmatter[FRONTMATTER_KEY]
        config = config_from_mapping(mapping)
        if uses_default_format(mapping):
            separator = detect_separator(lines[body_start:])
            if separator is not None:
                config = default_config(separator)
        dialect: ArtifactDialect = Adaptive(config)
    else:
        separator = detect_separator(lines[body_start:]) or DEFAULT_SEPARATOR
        dialect = Classic(separator=separator)
    return ResolvedArtifact(dialect=dialect, lines=lines, body_start=body_start)


def dialect_for(config: Optional[MarkerConfig] = None, separator: Optional[str] = None) -> ArtifactDialect:
    """Dialect used when packing: frontmatter for a config, classic otherwise."""
    if config is not None:
        return Adaptive(config)
    return Classic(separator=separator or DEFAULT_SEPARATOR)


def read_artifact(source: str | Path | bytes) -> str:
    """Load artifact text from a path or raw bytes without newline translation."""
    if isinstance(source, bytes):
        return source.decode("utf-8")
    return Path(source).expanduser().read_bytes().decode("utf-8")


class MarkerCodec:
    """Coordinates the packer, scanner, validator and extractor.

    Matcher and separator state is resolved per call and never stored on the
    instance, so one codec can serve concurrent callers.
    """

    def __init__(
        self,
        scanner: MarkerScanner | None = None,
        packer: Packer | None = None,
        validator: ArtifactValidator | None = None,
        extractor: Extractor | None = None,
    ) -> None:
        self.scanner = scanner or MarkerScanner()
        self.packer = packer or Packer()
        self.validator = validator or ArtifactValidator()
        self.extractor = extractor or Extractor()
        self.logger = get_logger("codec")

    def generate(
        self,
        source_dir: str | Path,
        output_file: str | Path,
        exclude_patterns: Sequence[str] = (),
        config: Optional[MarkerConfig] = None,
        *,
        separator: Optional[str] = None,
        metadata: Optional[Mapping[str, str]] = None,
    ) -> GenerateResult:
        """Pack ``source_dir`` into ``output_file``."""
        dialect = dialect_for(config, separator)
        self.logger.info("Generating %s from %s", output_file, source_dir)
        return self.packer.generate(
            source_dir, output_file, dialect, exclude_patterns, metadata=metadata
        )

    def render(
        self,
        source_dir: str | Path,
        exclude_patterns: Sequence[str] = (),
        config: Optional[MarkerConfig] = None,
        *,
        separator: Optional[str] = None,
        metadata: Optional[Mapping[str, str]] = None,
    ) -> Tuple[str, GenerateResult]:
        """Return the artifact for ``source_dir`` without writing it."""
        dialect = dialect_for(config, separator)
        return self.packer.render(source_dir, dialect, exclude_patterns, metadata=metadata)

    def parse(self, source: str | Path | bytes) -> ParseResult:
        """Parse an artifact given by path or raw bytes."""
        return self.parse_text(read_artifact(source))

    def parse_text(self, text: str) -> ParseResult:
        return self._scan(resolve_dialect(text))

    def validate(self, artifact_path: str | Path, strict: bool = False) -> ValidationResult:
        """Parse ``artifact_path`` and certify its structure."""
        return self.validate_text(read_artifact(artifact_path), strict=strict)

    def validate_text(self, text: str, strict: bool = False) -> ValidationResult:
        resolved = resolve_dialect(text)
        parsed = self._scan(resolved)
        report = self.validator.validate(
            parsed,
            strict=strict,
            lines=resolved.body,
            line_offset=resolved.body_start,
        )
        self.logger.info(
            "Validation %s: %d markers, %d findings",
            "passed" if report.is_valid else "failed",
            report.statistics.total_markers,
            len(report.errors),
        )
        return report

    def extract(
        self,
        artifact_path: str | Path,
        output_dir: str | Path,
        options: Optional[ExtractOptions] = None,
    ) -> ExtractResult:
        """Parse ``artifact_path`` and write its records below ``output_dir``."""
        parsed = self.parse(artifact_path)
        if parsed.errors:
            self.logger.warning("Found %d parse errors in %s", len(parsed.errors), artifact_path)
        return self.extractor.extract(parsed, output_dir, options)

    def _scan(self, resolved: ResolvedArtifact) -> ParseResult:
        dialect = resolved.dialect
        config = dialect.config
        header_name = HEADER_RECORD_NAME if isinstance(dialect, Classic) else None
        parsed = self.scanner.scan(
            resolved.body,
            config.compile(),
            line_offset=resolved.body_start,
            header_name=header_name,
        )
        parsed.config = config
        parsed.dialect = dialect
        self.logger.debug(
            "Parsed %d records (%d markers, %d errors) using %s dialect",
            parsed.total_files,
            parsed.total_markers,
            len(parsed.errors),
            type(dialect).__name__.lower(),
        )
        return parsed


def generate(
    source_dir: str | Path,
    output_file: str | Path,
    exclude_patterns: Sequence[str] = (),
    config: Optional[MarkerConfig] = None,
) -> GenerateResult:
    return MarkerCodec().generate(source_dir, output_file, exclude_patterns, config)


def parse(source: str | Path | bytes) -> ParseResult:
    return MarkerCodec().parse(source)


def validate(artifact_path: str | Path, strict: bool = False) -> ValidationResult:
    return MarkerCodec().validate(artifact_path, strict=strict)


def extract(
    artifact_path: str | Path,
    output_dir: str | Path,
    options: Optional[ExtractOptions] = None,
) -> ExtractResult:
    return MarkerCodec().extract(artifact_path, output_dir, options)


__all__ = [
    "MarkerCodec",
    "ResolvedArtifact",
    "dialect_for",
    "extract",
    "generate",
    "parse",
    "read_artifact",
    "resolve_dialect",
    "validate",
]
