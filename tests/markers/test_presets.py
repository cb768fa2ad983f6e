"""Tests for the built-in marker presets."""

from __future__ import annotations

import pytest

from lookatni.markers import PRESETS, InvalidConfig, default_config, get_preset, preset_names


def test_preset_names_are_sorted() -> None:
    assert preset_names() == ["code", "default", "html", "markdown", "visual"]


def test_default_preset_is_the_classic_marker() -> None:
    assert get_preset("default").config == default_config()


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("html", "<!-- FILE: src/app.ts -->"),
        ("markdown", "[//]: # (FILE: src/app.ts)"),
        ("code", "// === FILE: src/app.ts ==="),
        ("visual", "\U0001F525\U0001F525\U0001F525 FILE: src/app.ts \U0001F525\U0001F525\U0001F525"),
    ],
)
def test_presets_render_expected_markers(key: str, expected: str) -> None:
    assert get_preset(key).config.format_marker("src/app.ts") == expected


@pytest.mark.parametrize("key", sorted(PRESETS))
def test_preset_markers_match_their_own_output(key: str) -> None:
    config = get_preset(key).config
    line = config.format_marker("nested/dir/file name.txt")

    assert config.compile().match(line) == "nested/dir/file name.txt"


def test_unknown_preset_raises() -> None:
    with pytest.raises(InvalidConfig, match="Unknown marker preset"):
        get_preset("neon")
