"""lookatni: pack directory trees into marked text artifacts and back."""

from .codec import MarkerCodec, extract, generate, parse, validate
from .markers import (
    InvalidConfig,
    MarkerConfig,
    SingleTemplate,
    StartEndFormat,
    default_config,
    get_preset,
)
from .models import (
    ExtractOptions,
    ExtractResult,
    FileRecord,
    GenerateResult,
    ParseError,
    ParseResult,
    ValidationError,
    ValidationResult,
)
from .version import __version__

__all__ = [
    "ExtractOptions",
    "ExtractResult",
    "FileRecord",
    "GenerateResult",
    "InvalidConfig",
    "MarkerCodec",
    "MarkerConfig",
    "ParseError",
    "ParseResult",
    "SingleTemplate",
    "StartEndFormat",
    "ValidationError",
    "ValidationResult",
    "__version__",
    "default_config",
    "extract",
    "generate",
    "get_preset",
    "parse",
    "validate",
]
