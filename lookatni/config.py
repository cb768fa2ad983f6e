"""Configuration loading for lookatni (.lookatni.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .markers.config import InvalidConfig, MarkerConfig, config_from_mapping
from .markers.presets import get_preset

CONFIG_FILENAME = ".lookatni.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class GenerateSettings:
    """Packing defaults."""

    exclude: List[str] = field(default_factory=list)
    max_file_size_kb: float = -1
    skip_binary: bool = True
    preset: Optional[str] = None


@dataclass
class ExtractSettings:
    """Extraction defaults."""

    overwrite: bool = False
    create_dirs: bool = True


@dataclass
class ValidateSettings:
    """Validation defaults."""

    strict: bool = False


@dataclass
class LookatniConfig:
    """Represents the settings defined in .lookatni.yml."""

    root: Path
    generate: GenerateSettings = field(default_factory=GenerateSettings)
    extract: ExtractSettings = field(default_factory=ExtractSettings)
    validate: ValidateSettings = field(default_factory=ValidateSettings)
    markers: Optional[Dict[str, Any]] = None

    def marker_config(self, preset: Optional[str] = None) -> Optional[MarkerConfig]:
        """Resolve the marker config for packing; ``None`` selects the classic dialect."""
        chosen = preset or self.generate.preset
        try:
            if chosen:
                return get_preset(chosen).config
            if self.markers:
                return config_from_mapping(self.markers)
        except InvalidConfig as exc:
            raise ConfigError(f"Invalid marker configuration: {exc}") from exc
        return None


def load_config(config_path: Path) -> LookatniConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return LookatniConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    generate_data = _as_dict(data.get("generate"))
    generate = GenerateSettings()
    if generate_data:
        generate.exclude = _as_str_list(generate_data.get("exclude"))
        max_size = _as_float(generate_data.get("max_file_size_kb"))
        if max_size is not None:
            generate.max_file_size_kb = max_size
        skip_binary = _as_bool(generate_data.get("skip_binary"))
        if skip_binary is not None:
            generate.skip_binary = skip_binary
        generate.preset = _as_str(generate_data.get("preset"))

    extract_data = _as_dict(data.get("extract"))
    extract = ExtractSettings()
    if extract_data:
        overwrite = _as_bool(extract_data.get("overwrite"))
        if overwrite is not None:
            extract.overwrite = overwrite
        create_dirs = _as_bool(extract_data.get("create_dirs"))
        if create_dirs is not None:
            extract.create_dirs = create_dirs

    validate_data = _as_dict(data.get("validate"))
    validate = ValidateSettings()
    if validate_data:
        validate.strict = _as_bool(validate_data.get("strict")) or False

    markers = _as_dict(data.get("markers")) or None

    return LookatniConfig(
        root=root,
        generate=generate,
        extract=extract,
        validate=validate,
        markers=markers,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}

    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
