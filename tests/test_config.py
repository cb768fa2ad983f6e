"""Tests for lookatni.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from lookatni.config import ConfigError, LookatniConfig, load_config
from lookatni.markers import SingleTemplate, StartEndFormat, get_preset


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, LookatniConfig)
    assert config.root == tmp_path.resolve()
    assert config.generate.exclude == []
    assert config.generate.max_file_size_kb == -1
    assert config.generate.skip_binary is True
    assert config.generate.preset is None
    assert config.extract.overwrite is False
    assert config.extract.create_dirs is True
    assert config.validate.strict is False
    assert config.markers is None
    assert config.marker_config() is None


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".lookatni.yml"
    config_file.write_text(
        """
generate:
  exclude:
    - ".git"
    - "*.pyc"
  max_file_size_kb: 500
  skip_binary: "no"
extract:
  overwrite: true
  create_dirs: false
validate:
  strict: yes
markers:
  start: "<<"
  end: ">>"
  format: "{start}{filename}{end}"
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.generate.exclude == [".git", "*.pyc"]
    assert config.generate.max_file_size_kb == 500.0
    assert config.generate.skip_binary is False
    assert config.extract.overwrite is True
    assert config.extract.create_dirs is False
    assert config.validate.strict is True
    assert config.marker_config() == StartEndFormat(
        start="<<", end=">>", format="{start}{filename}{end}"
    )


def test_single_exclude_string_is_accepted(tmp_path: Path) -> None:
    (tmp_path / ".lookatni.yml").write_text("generate:\n  exclude: node_modules\n", encoding="utf-8")

    assert load_config(tmp_path).generate.exclude == ["node_modules"]


def test_preset_takes_precedence_over_markers(tmp_path: Path) -> None:
    (tmp_path / ".lookatni.yml").write_text(
        "generate:\n  preset: html\nmarkers:\n  pattern: '# {filename}'\n",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.marker_config() == get_preset("html").config
    assert config.marker_config("markdown") == get_preset("markdown").config


def test_inline_pattern_markers(tmp_path: Path) -> None:
    (tmp_path / ".lookatni.yml").write_text("markers:\n  pattern: '# FILE {filename}'\n", encoding="utf-8")

    assert load_config(tmp_path).marker_config() == SingleTemplate(pattern="# FILE {filename}")


def test_invalid_marker_settings_raise_config_error(tmp_path: Path) -> None:
    (tmp_path / ".lookatni.yml").write_text(
        "markers:\n  pattern: '# {filename}'\n  start: '<<'\n", encoding="utf-8"
    )
    config = load_config(tmp_path)

    with pytest.raises(ConfigError, match="Invalid marker configuration"):
        config.marker_config()
    with pytest.raises(ConfigError, match="Unknown marker preset"):
        config.marker_config("neon")


def test_non_mapping_root_is_rejected(tmp_path: Path) -> None:
    (tmp_path / ".lookatni.yml").write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_yaml_errors_are_wrapped(tmp_path: Path) -> None:
    (tmp_path / ".lookatni.yml").write_text("generate: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)


def test_empty_file_yields_defaults(tmp_path: Path) -> None:
    (tmp_path / ".lookatni.yml").write_text("\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.generate.exclude == []
    assert config.marker_config() is None
