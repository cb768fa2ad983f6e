"""Validation package for lookatni artifacts."""

from .filenames import filename_problem, is_valid_filename
from .structure import MALFORMED_MARKER_MESSAGE, ArtifactValidator

__all__ = [
    "ArtifactValidator",
    "MALFORMED_MARKER_MESSAGE",
    "filename_problem",
    "is_valid_filename",
]
