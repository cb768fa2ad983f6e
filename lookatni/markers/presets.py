"""Built-in marker presets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from .config import InvalidConfig, MarkerConfig, SingleTemplate, StartEndFormat, default_config


@dataclass(frozen=True)
class MarkerPreset:
    """Named, documented marker configuration."""

    key: str
    name: str
    description: str
    config: MarkerConfig


PRESETS: Dict[str, MarkerPreset] = {
    preset.key: preset
    for preset in (
        MarkerPreset(
            key="default",
            name="Default (ASCII 28)",
            description="Classic invisible markers using the ASCII File Separator",
            config=default_config(),
        ),
        MarkerPreset(
            key="html",
            name="HTML Comments",
            description="HTML-friendly comment markers",
            config=SingleTemplate(pattern="<!-- FILE: {filename} -->"),
        ),
        MarkerPreset(
            key="markdown",
            name="Markdown Invisible",
            description="Markdown link-reference comments that never render",
            config=SingleTemplate(pattern="[//]: # (FILE: {filename})"),
        ),
        MarkerPreset(
            key="code",
            name="Code Comments",
            description="Programming language comment style",
            config=StartEndFormat(start="// === FILE:", end="==="),
        ),
        MarkerPreset(
            key="visual",
            name="Visual Separators",
            description="Highly visible decorative markers",
            config=StartEndFormat(start="\U0001F525\U0001F525\U0001F525 FILE:", end="\U0001F525\U0001F525\U0001F525"),
        ),
    )
}


def get_preset(key: str) -> MarkerPreset:
    try:
        return PRESETS[key]
    except KeyError:
        known = ", ".join(sorted(PRESETS))
        raise InvalidConfig(f"Unknown marker preset {key!r} (known: {known})") from None


def preset_names() -> List[str]:
    return sorted(PRESETS)
