"""Multi-language source code intelligence: detect, highlight, check, measure, format."""

from __future__ import annotations

from .engine import (
    analyze_metrics,
    detect_errors,
    detect_language,
    format_code,
    highlight,
    validate_code,
)
from .languages import LanguageTag
from .models import FormatOptions

__version__ = "0.1.0"

__all__ = [
    "FormatOptions",
    "LanguageTag",
    "analyze_metrics",
    "detect_errors",
    "detect_language",
    "format_code",
    "highlight",
    "validate_code",
]
