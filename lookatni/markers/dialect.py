"""Artifact dialects: YAML frontmatter (adaptive) and the classic header record."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import yaml

from .config import DEFAULT_SEPARATOR, MarkerConfig, StartEndFormat, default_config

FRONTMATTER_DELIMITER = "---"
FRONTMATTER_KEY = "lookatni"

HEADER_RECORD_NAME = "PROJECT_INFO"
MARKER_SPEC_VERSION = "v1"
ARTIFACT_ENCODING = "utf-8"


class FrontmatterError(ValueError):
    """Raised when an artifact's leading frontmatter block is malformed."""


@dataclass(frozen=True)
class Classic:
    """Fixed ``//<c>/ name /<c>//`` markers preceded by a ``PROJECT_INFO`` record."""

    separator: str = DEFAULT_SEPARATOR

    @property
    def config(self) -> StartEndFormat:
        return default_config(self.separator)


@dataclass(frozen=True)
class Adaptive:
    """Markers declared by a frontmatter block at the top of the artifact."""

    config: MarkerConfig


ArtifactDialect = Union[Classic, Adaptive]


def split_lines(text: str) -> List[str]:
    """Split artifact text on ``\\n`` only.

    ``str.splitlines`` also breaks on the control characters used as marker
    separators, so it must never be used on artifact text.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def split_frontmatter(lines: Sequence[str]) -> Tuple[Optional[Dict[str, Any]], int]:
    """Return the parsed frontmatter mapping and the index of the first body line."""
    if not lines or lines[0].rstrip("\r") != FRONTMATTER_DELIMITER:
        return None, 0

    for index in range(1, len(lines)):
        if lines[index].strip() == FRONTMATTER_DELIMITER:
            break
    else:
        raise FrontmatterError("Malformed frontmatter: missing closing ---")

    try:
        loaded = yaml.safe_load("\n".join(lines[1:index]))
    except yaml.YAMLError as exc:
        raise FrontmatterError(f"Failed to parse frontmatter: {exc}") from exc
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise FrontmatterError("Frontmatter must contain a mapping at the root")
    return loaded, index + 1


def render_frontmatter(config: MarkerConfig) -> str:
    body = yaml.safe_dump(
        {FRONTMATTER_KEY: config.to_mapping()},
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
    return f"{FRONTMATTER_DELIMITER}\n{body}{FRONTMATTER_DELIMITER}\n"


def render_classic_header(
    separator: str,
    *,
    project: str,
    generated: str,
    total_files: int,
    source: str,
    generator: str,
    extra: Optional[Mapping[str, str]] = None,
) -> str:
    """Render the ``PROJECT_INFO`` pseudo-record that opens a classic artifact."""
    code = ord(separator)
    lines = [
        default_config(separator).format_marker(HEADER_RECORD_NAME),
        f"Project: {project}",
        f"Generated: {generated}",
        f"Total Files: {total_files}",
        f"Source: {source}",
        f"Generator: {generator}",
        f"MarkerSpec: {MARKER_SPEC_VERSION}",
        f"FS: {code}",
        f"MarkerTokens: //\\x{code:02X}/ <path> /\\x{code:02X}//",
        f"Encoding: {ARTIFACT_ENCODING}",
    ]
    for key, value in (extra or {}).items():
        lines.append(f"{_single_line(str(key))}: {_single_line(str(value))}")
    return "\n".join(lines) + "\n\n"


def parse_header_fields(content: str) -> Dict[str, str]:
    """Read ``Key: value`` lines from a classic header record body."""
    fields: Dict[str, str] = {}
    for line in content.split("\n"):
        if ": " not in line:
            continue
        key, value = line.split(": ", 1)
        key = key.strip()
        if key:
            fields[key] = value.strip()
    return fields


def _single_line(value: str) -> str:
    return " ".join(value.splitlines())
