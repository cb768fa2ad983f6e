"""Helper utilities for constructing temporary source trees in tests."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Mapping, Optional, Sequence

from lookatni.codec import MarkerCodec
from lookatni.markers import MarkerConfig
from lookatni.models import GenerateResult
from lookatni.packer import Packer

FIXED_TIME = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)


class SourceTree:
    """Utility for writing files into a throwaway directory and packing it."""

    def __init__(self, tmp_path: Path) -> None:
        self.workdir = tmp_path
        self.root = tmp_path / "project"
        self.root.mkdir()
        self.codec = MarkerCodec(packer=Packer(clock=lambda: FIXED_TIME))

    def write(self, files: Mapping[str, str | bytes]) -> None:
        """Write `path -> contents` entries verbatim into the tree."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            data = content if isinstance(content, bytes) else content.encode("utf-8")
            path.write_bytes(data)

    def pack(
        self,
        name: str = "artifact.txt",
        *,
        exclude: Sequence[str] = (),
        config: Optional[MarkerConfig] = None,
        separator: Optional[str] = None,
    ) -> tuple[Path, GenerateResult]:
        """Pack the tree into an artifact next to it and return both."""
        output = self.workdir / name
        result = self.codec.generate(
            self.root, output, exclude, config, separator=separator
        )
        return output, result

    def path(self) -> Path:
        """Return the source tree root path."""
        return self.root


__all__ = ["FIXED_TIME", "SourceTree"]
