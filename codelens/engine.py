"""The six public analysis entry points behind one import."""

from __future__ import annotations

from typing import Optional

from . import metrics
from .detection import detect_language
from .diagnostics import DiagnosticsConfig, detect_errors
from .formatting import format_code, validate_code
from .highlighting import highlight
from .languages import LanguageTag, lookup_language, resolve_language
from .models import MetricsReport


def analyze_metrics(code: str, language: object = LanguageTag.JAVASCRIPT) -> MetricsReport:
    """Quality, complexity and structure figures for ``code``."""
    return metrics.analyze(code, language)


def resolve_for_analysis(code: str, language: Optional[object], filename: Optional[str] = None) -> LanguageTag:
    """Pick a tag: an explicit language wins, otherwise detect.

    Unresolved detection stays ``auto`` so callers can apply their own default.
    """
    if language is not None and lookup_language(language) is not LanguageTag.AUTO:
        return resolve_language(language)
    return detect_language(code, filename)


__all__ = [
    "DiagnosticsConfig",
    "analyze_metrics",
    "detect_errors",
    "detect_language",
    "format_code",
    "highlight",
    "resolve_for_analysis",
    "validate_code",
]
