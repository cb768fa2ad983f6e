"""Marker syntax model: configs, presets and artifact dialects."""

from .config import (
    DEFAULT_FORMAT,
    DEFAULT_SEPARATOR,
    DEFAULT_VERSION,
    FILENAME_PLACEHOLDER,
    CompiledMatcher,
    InvalidConfig,
    MarkerConfig,
    SingleTemplate,
    StartEndFormat,
    compile_matcher,
    config_from_mapping,
    default_config,
    uses_default_format,
)
from .dialect import (
    HEADER_RECORD_NAME,
    Adaptive,
    ArtifactDialect,
    Classic,
    FrontmatterError,
    render_frontmatter,
    split_frontmatter,
    split_lines,
)
from .presets import PRESETS, MarkerPreset, get_preset, preset_names

__all__ = [
    "DEFAULT_FORMAT",
    "DEFAULT_SEPARATOR",
    "DEFAULT_VERSION",
    "FILENAME_PLACEHOLDER",
    "HEADER_RECORD_NAME",
    "PRESETS",
    "Adaptive",
    "ArtifactDialect",
    "Classic",
    "CompiledMatcher",
    "FrontmatterError",
    "InvalidConfig",
    "MarkerConfig",
    "MarkerPreset",
    "SingleTemplate",
    "StartEndFormat",
    "compile_matcher",
    "config_from_mapping",
    "default_config",
    "get_preset",
    "preset_names",
    "render_frontmatter",
    "split_frontmatter",
    "split_lines",
    "uses_default_format",
]
