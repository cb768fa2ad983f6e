"""Marker syntax variants and the regex compiler that recognizes them."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional, Tuple

FILENAME_PLACEHOLDER = "{filename}"
START_PLACEHOLDER = "{start}"
END_PLACEHOLDER = "{end}"

DEFAULT_SEPARATOR = chr(28)
DEFAULT_VERSION = "2.0"
DEFAULT_FORMAT = f"{START_PLACEHOLDER} {FILENAME_PLACEHOLDER} {END_PLACEHOLDER}"
MARKER_SYNTAX_KEYS = ("pattern", "start", "end", "format")

_CAPTURE_GROUP = "(.+?)"
_BOUNDARY_PATTERN = re.compile(r"\{(start|end)\}")


class InvalidConfig(ValueError):
    """Raised when a marker configuration cannot produce a usable matcher."""


class MarkerConfig(ABC):
    """Base for the closed set of marker syntax variants.

    Every variant reduces to an effective template with exactly one
    ``{filename}`` placeholder. The literal text on each side of that
    placeholder drives both marker rendering and line matching.
    """

    version: str

    @abstractmethod
    def template(self) -> str:
        """Return the effective template with one filename placeholder."""

    @abstractmethod
    def to_mapping(self) -> Dict[str, str]:
        """Return the frontmatter mapping for this config."""

    @abstractmethod
    def tokens(self) -> Tuple[str, ...]:
        """Literal fragments that identify marker-like lines in strict mode."""

    def affixes(self) -> Tuple[str, str]:
        """Return the literal text before and after the filename placeholder."""
        template = self.template()
        count = template.count(FILENAME_PLACEHOLDER)
        if count != 1:
            raise InvalidConfig(
                f"Marker template must contain exactly one {FILENAME_PLACEHOLDER} "
                f"placeholder, found {count}: {template!r}"
            )
        prefix, suffix = template.split(FILENAME_PLACEHOLDER)
        if not prefix.strip() and not suffix.strip():
            raise InvalidConfig(
                f"Marker template needs literal text around {FILENAME_PLACEHOLDER}: {template!r}"
            )
        return prefix, suffix

    def format_marker(self, filename: str) -> str:
        prefix, suffix = self.affixes()
        return f"{prefix}{filename}{suffix}"

    def compile(self) -> "CompiledMatcher":
        return compile_matcher(self)


@dataclass(frozen=True)
class SingleTemplate(MarkerConfig):
    """Marker described by one template such as ``<!-- FILE: {filename} -->``."""

    pattern: str
    version: str = DEFAULT_VERSION

    def __post_init__(self) -> None:
        self.affixes()

    def template(self) -> str:
        return self.pattern

    def to_mapping(self) -> Dict[str, str]:
        return {"version": self.version, "pattern": self.pattern}

    def tokens(self) -> Tuple[str, ...]:
        prefix, suffix = self.affixes()
        return tuple(token for token in (prefix.strip(), suffix.strip()) if token)


@dataclass(frozen=True)
class StartEndFormat(MarkerConfig):
    """Marker assembled from ``start`` and ``end`` tokens placed by ``format``."""

    start: str
    end: str
    format: str = DEFAULT_FORMAT
    version: str = DEFAULT_VERSION

    def __post_init__(self) -> None:
        self.affixes()

    def template(self) -> str:
        # Single pass: braces inside start/end are not re-expanded.
        values = {"start": self.start, "end": self.end}
        return _BOUNDARY_PATTERN.sub(lambda match: values[match.group(1)], self.format)

    def to_mapping(self) -> Dict[str, str]:
        return {
            "version": self.version,
            "start": self.start,
            "end": self.end,
            "format": self.format,
        }

    def tokens(self) -> Tuple[str, ...]:
        return tuple(token for token in (self.start.strip(), self.end.strip()) if token)

    @property
    def separator(self) -> Optional[str]:
        """The control character of a classic ``//<c>/`` config, if this is one."""
        if self.format != DEFAULT_FORMAT or len(self.start) != 4:
            return None
        candidate = self.start[2]
        if ord(candidate) < 32 and self.start == f"//{candidate}/" and self.end == f"/{candidate}//":
            return candidate
        return None


@dataclass(frozen=True)
class CompiledMatcher:
    """Anchored single-line matcher bound to one marker configuration."""

    config: MarkerConfig
    regex: "re.Pattern[str]"

    def match(self, line: str) -> Optional[str]:
        """Return the trimmed filename when ``line`` is a marker, else ``None``."""
        found = self.regex.match(_strip_cr(line))
        if found is None:
            return None
        return found.group(1).strip()

    def matches(self, line: str) -> bool:
        return self.regex.match(_strip_cr(line)) is not None


@lru_cache(maxsize=64)
def compile_matcher(config: MarkerConfig) -> CompiledMatcher:
    """Build (or reuse) the anchored regex for ``config``."""
    prefix, suffix = config.affixes()
    regex = re.compile(f"^{re.escape(prefix)}{_CAPTURE_GROUP}{re.escape(suffix)}$")
    if regex.groups != 1:  # pragma: no cover - literals are escaped
        raise InvalidConfig(f"Marker regex must have exactly one group: {regex.pattern!r}")
    return CompiledMatcher(config=config, regex=regex)


def default_config(separator: str = DEFAULT_SEPARATOR) -> StartEndFormat:
    """Return the classic invisible marker config built around ``separator``."""
    if len(separator) != 1 or ord(separator) >= 32 or separator in "\n\r":
        raise InvalidConfig(
            f"Separator must be a single control character other than CR/LF, got {separator!r}"
        )
    return StartEndFormat(start=f"//{separator}/", end=f"/{separator}//")


def config_from_mapping(data: Optional[Mapping[str, Any]]) -> MarkerConfig:
    """Build a marker config from a frontmatter or project-config mapping."""
    if data is None:
        return default_config()
    if not isinstance(data, Mapping):
        raise InvalidConfig("Marker configuration must be a mapping")

    version = _as_str(data.get("version")) or DEFAULT_VERSION
    pattern = _as_str(data.get("pattern"))
    start = _as_str(data.get("start"))
    end = _as_str(data.get("end"))
    fmt = _as_str(data.get("format"))
    has_triple = any(value is not None for value in (start, end, fmt))

    if pattern is not None and has_triple:
        raise InvalidConfig("Marker configuration sets both 'pattern' and 'start'/'end'/'format'")
    if pattern is not None:
        return SingleTemplate(pattern=pattern, version=version)
    if has_triple:
        return StartEndFormat(
            start=start or "",
            end=end or "",
            format=fmt or DEFAULT_FORMAT,
            version=version,
        )
    return default_config()


def uses_default_format(data: Optional[Mapping[str, Any]]) -> bool:
    """True when ``data`` sets none of the marker syntax keys."""
    if data is None:
        return True
    return isinstance(data, Mapping) and all(_as_str(data.get(key)) is None for key in MARKER_SYNTAX_KEYS)


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _strip_cr(line: str) -> str:
    return line[:-1] if line.endswith("\r") else line
