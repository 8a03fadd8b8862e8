"""Language aware code formatting."""

from __future__ import annotations

from .context import FormatContext
from .jsonfix import format_json, repair_json
from .pipeline import PIPELINES, Formatter, format_code, validate_code

__all__ = [
    "FormatContext",
    "Formatter",
    "PIPELINES",
    "format_code",
    "format_json",
    "repair_json",
    "validate_code",
]
