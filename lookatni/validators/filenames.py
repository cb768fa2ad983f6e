"""Portable filename policy for records recovered from artifacts."""

from __future__ import annotations

from typing import Optional

_INVALID_CHARACTERS = ("<", ">", ":", '"', "|", "?", "*")
_RESERVED_NAMES = frozenset(
    ["CON", "PRN", "AUX", "NUL"]
    + [f"COM{index}" for index in range(1, 10)]
    + [f"LPT{index}" for index in range(1, 10)]
)


def filename_problem(filename: str) -> Optional[str]:
    """Describe why ``filename`` is not portable, or return ``None`` when it is."""
    if not filename.strip():
        return "empty filename"

    for char in _INVALID_CHARACTERS:
        if char in filename:
            return f"contains invalid character {char!r}"

    normalized = filename.replace("\\", "/")
    if normalized.startswith("/"):
        return "absolute path"

    for part in normalized.split("/"):
        if part == "..":
            return "parent directory reference"
        stem = part.split(".", 1)[0]
        if stem.upper() in _RESERVED_NAMES:
            return f"reserved device name {stem.upper()}"
    return None


def is_valid_filename(filename: str) -> bool:
    return filename_problem(filename) is None


__all__ = ["filename_problem", "is_valid_filename"]
