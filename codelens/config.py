"""Configuration loading for codelens (.codelens.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .diagnostics import DiagnosticsConfig
from .languages import LanguageTag, lookup_language
from .models import FormatOptions

CONFIG_FILENAME = ".codelens.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class CodeLensConfig:
    """Represents the settings defined in .codelens.yml."""

    root: Path
    language: Optional[LanguageTag] = None
    format: FormatOptions = field(default_factory=FormatOptions)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)


def load_config(config_path: Path) -> CodeLensConfig:
    """Load configuration from disk; a missing file yields the defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return CodeLensConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    language = None
    language_name = _as_str(data.get("language"))
    if language_name:
        language = lookup_language(language_name)
        if language is None:
            raise ConfigError(f"Unknown language in {CONFIG_FILENAME}: {language_name}")

    format_data = _as_dict(data.get("format"))
    diagnostics_data = _as_dict(data.get("diagnostics"))
    try:
        options = FormatOptions.from_mapping(
            {
                key: value
                for key, value in (
                    ("indent_size", _as_int(format_data.get("indent_size"))),
                    ("use_tabs", _as_bool(format_data.get("use_tabs"))),
                    ("max_line_length", _as_int(format_data.get("max_line_length"))),
                    ("preserve_blank_lines", _as_bool(format_data.get("preserve_blank_lines"))),
                )
                if value is not None
            }
        )
        diagnostics = DiagnosticsConfig.from_mapping(
            {
                key: value
                for key, value in (
                    ("max_line_length", _as_int(diagnostics_data.get("max_line_length"))),
                    ("disabled", _as_str_list(diagnostics_data.get("disabled"))),
                )
                if value is not None
            }
        )
    except ValueError as exc:
        raise ConfigError(f"Invalid value in {CONFIG_FILENAME}: {exc}") from exc

    return CodeLensConfig(
        root=root,
        language=language,
        format=options,
        diagnostics=diagnostics,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
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


__all__ = ["CONFIG_FILENAME", "CodeLensConfig", "ConfigError", "load_config"]
