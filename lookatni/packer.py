"""Directory packing: walk a source tree and emit a marked artifact."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import UTC, datetime
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Callable, Iterator, List, Mapping, Optional, Sequence, Tuple

from .logging import get_logger
from .markers.dialect import (
    HEADER_RECORD_NAME,
    Adaptive,
    ArtifactDialect,
    Classic,
    render_classic_header,
    render_frontmatter,
)
from .models import GenerateResult, SkippedFile
from .version import GENERATOR_NAME

_BINARY_SNIFF_BYTES = 1024
_NO_EXTENSION = "no-extension"


@dataclass
class _PackedFile:
    rel_path: str
    text: str


def _is_excluded(rel_path: str, patterns: Sequence[str]) -> bool:
    basename = rel_path.rsplit("/", 1)[-1]
    for pattern in patterns:
        if not pattern:
            continue
        if fnmatchcase(basename, pattern) or fnmatchcase(rel_path, pattern):
            return True
        if pattern in rel_path:
            return True
    return False


def _is_binary(data: bytes) -> bool:
    return b"\x00" in data[:_BINARY_SNIFF_BYTES]


def _file_type(rel_path: str) -> str:
    suffix = Path(rel_path).suffix
    return suffix if suffix else _NO_EXTENSION


def _utc_now() -> datetime:
    return datetime.now(UTC)


class Packer:
    """Serializes a directory tree into one artifact."""

    def __init__(
        self,
        *,
        max_file_size_kb: float = -1,
        skip_binary: bool = True,
        clock: Callable[[], datetime] = _utc_now,
        generator: str = GENERATOR_NAME,
    ) -> None:
        self.max_file_size_kb = max_file_size_kb
        self.skip_binary = skip_binary
        self.clock = clock
        self.generator = generator
        self.logger = get_logger("packer")

    def generate(
        self,
        source_dir: str | Path,
        output_file: str | Path,
        dialect: ArtifactDialect,
        exclude_patterns: Sequence[str] = (),
        *,
        metadata: Optional[Mapping[str, str]] = None,
    ) -> GenerateResult:
        """Pack ``source_dir`` into ``output_file``."""
        output_path = Path(output_file).expanduser()
        artifact, result = self.render(
            source_dir,
            dialect,
            exclude_patterns,
            metadata=metadata,
            output_file=output_path,
        )
        with output_path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(artifact)
        self.logger.info("Artifact written to %s", output_path)
        return result

    def render(
        self,
        source_dir: str | Path,
        dialect: ArtifactDialect,
        exclude_patterns: Sequence[str] = (),
        *,
        metadata: Optional[Mapping[str, str]] = None,
        output_file: Optional[Path] = None,
    ) -> Tuple[str, GenerateResult]:
        """Return the artifact text for ``source_dir`` and its statistics."""
        root = Path(source_dir).expanduser()
        if not root.exists():
            raise FileNotFoundError(f"Source directory not found: {source_dir}")
        if not root.is_dir():
            raise NotADirectoryError(f"Source path is not a directory: {source_dir}")

        self.logger.info("Packing %s", root)
        result = GenerateResult()
        config = dialect.config
        matcher = config.compile()
        skip_path = output_file.resolve() if output_file is not None else None

        packed: List[_PackedFile] = []
        for path in self._iter_files(root, root, result.errors):
            rel_path = path.relative_to(root).as_posix()
            if skip_path is not None and path.resolve() == skip_path:
                self.logger.debug("Skipping output artifact %s", rel_path)
                continue
            if _is_excluded(rel_path, exclude_patterns):
                self.logger.debug("Excluding %s", rel_path)
                continue
            if isinstance(dialect, Classic) and rel_path == HEADER_RECORD_NAME:
                result.errors.append(
                    f"Reserved filename {HEADER_RECORD_NAME} cannot be packed: {rel_path}"
                )
                continue
            text = self._read(path, rel_path, result)
            if text is None:
                continue
            for line in text.split("\n"):
                if matcher.matches(line):
                    self.logger.warning(
                        "%s contains a marker-like line and will not round-trip cleanly", rel_path
                    )
                    break
            packed.append(_PackedFile(rel_path=rel_path, text=text))

        parts: List[str] = [self._header(root, source_dir, dialect, len(packed), metadata)]
        for item in packed:
            parts.append(config.format_marker(item.rel_path) + "\n")
            parts.append(item.text)
            if item.text and not item.text.endswith("\n"):
                parts.append("\n")
            result.total_files += 1
            file_type = _file_type(item.rel_path)
            result.file_types[file_type] = result.file_types.get(file_type, 0) + 1

        artifact = "".join(parts)
        result.total_bytes = len(artifact.encode("utf-8"))
        result.success = not result.errors
        self.logger.info(
            "Packed %d files (%d bytes, %d skipped, %d errors)",
            result.total_files,
            result.total_bytes,
            len(result.skipped_files),
            len(result.errors),
        )
        return artifact, result

    def _header(
        self,
        root: Path,
        source_dir: str | Path,
        dialect: ArtifactDialect,
        total_files: int,
        metadata: Optional[Mapping[str, str]],
    ) -> str:
        if isinstance(dialect, Adaptive):
            return render_frontmatter(dialect.config)
        generated = self.clock().astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
        return render_classic_header(
            dialect.separator,
            project=root.resolve().name,
            generated=generated,
            total_files=total_files,
            source=str(source_dir),
            generator=self.generator,
            extra=metadata,
        )

    def _read(self, path: Path, rel_path: str, result: GenerateResult) -> Optional[str]:
        try:
            size = path.stat().st_size
            if self.max_file_size_kb != -1 and size / 1024 > self.max_file_size_kb:
                reason = f"File too large ({size / 1024:.1f} KB > {self.max_file_size_kb} KB)"
                result.skipped_files.append(SkippedFile(path=rel_path, reason=reason))
                self.logger.debug("Skipping %s: %s", rel_path, reason)
                return None
            data = path.read_bytes()
        except OSError as exc:
            result.errors.append(f"Failed to read {rel_path}: {exc}")
            self.logger.warning("Failed to read %s: %s", rel_path, exc)
            return None

        if self.skip_binary and _is_binary(data):
            result.skipped_files.append(SkippedFile(path=rel_path, reason="Binary file"))
            self.logger.debug("Skipping binary file %s", rel_path)
            return None
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            result.errors.append(f"Failed to decode {rel_path} as utf-8: {exc}")
            self.logger.warning("Failed to decode %s as utf-8", rel_path)
            return None

    def _iter_files(self, root: Path, directory: Path, errors: List[str]) -> Iterator[Path]:
        """Yield regular files in lexical order, interleaving files and subdirectories."""
        try:
            with os.scandir(directory) as iterator:
                entries = sorted(iterator, key=lambda entry: entry.name)
        except OSError as exc:
            errors.append(f"Error accessing {directory}: {exc}")
            self.logger.warning("Cannot read directory %s: %s", directory, exc)
            return

        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    yield from self._iter_files(root, Path(entry.path), errors)
                elif entry.is_file():
                    yield Path(entry.path)
            except OSError as exc:
                errors.append(f"Error accessing {entry.path}: {exc}")


__all__ = ["Packer"]
