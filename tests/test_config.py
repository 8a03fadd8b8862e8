"""Tests for codelens.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from codelens.config import CodeLensConfig, ConfigError, load_config
from codelens.diagnostics import DiagnosticsConfig
from codelens.languages import LanguageTag
from codelens.models import FormatOptions


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, CodeLensConfig)
    assert config.root == tmp_path.resolve()
    assert config.language is None
    assert config.format == FormatOptions()
    assert config.diagnostics == DiagnosticsConfig()


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".codelens.yml"
    config_file.write_text(
        """
language: py
format:
  indent_size: 4
  use_tabs: "no"
  max_line_length: 100
  preserve_blank_lines: false
diagnostics:
  max_line_length: 120
  disabled:
    - console_log
    - long_line
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.language is LanguageTag.PYTHON
    assert config.format == FormatOptions(
        indent_size=4, use_tabs=False, max_line_length=100, preserve_blank_lines=False
    )
    assert config.diagnostics.max_line_length == 120
    assert config.diagnostics.disabled == frozenset({"console_log", "long_line"})


def test_load_config_from_sibling_file_path(tmp_path: Path) -> None:
    (tmp_path / ".codelens.yml").write_text("format:\n  indent_size: 8\n", encoding="utf-8")
    source = tmp_path / "main.js"
    source.write_text("", encoding="utf-8")

    assert load_config(source).format.indent_size == 8


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    (tmp_path / ".codelens.yml").write_text("\n", encoding="utf-8")
    assert load_config(tmp_path).format == FormatOptions()


def test_non_mapping_root_is_rejected(tmp_path: Path) -> None:
    (tmp_path / ".codelens.yml").write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(tmp_path)


def test_unknown_language_is_rejected(tmp_path: Path) -> None:
    (tmp_path / ".codelens.yml").write_text("language: cobol\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="cobol"):
        load_config(tmp_path)


def test_invalid_yaml_is_reported(tmp_path: Path) -> None:
    (tmp_path / ".codelens.yml").write_text("format: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)


def test_invalid_values_are_reported(tmp_path: Path) -> None:
    (tmp_path / ".codelens.yml").write_text("format:\n  indent_size: 0\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="indent_size"):
        load_config(tmp_path)


def test_wrongly_typed_values_fall_back_to_defaults(tmp_path: Path) -> None:
    (tmp_path / ".codelens.yml").write_text(
        "format:\n  indent_size: true\n  max_line_length: wide\n", encoding="utf-8"
    )
    assert load_config(tmp_path).format == FormatOptions()
