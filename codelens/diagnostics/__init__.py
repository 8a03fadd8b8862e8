"""Diagnostic rule sets and the engine that runs them."""

from __future__ import annotations

from .base import RuleSet
from .engine import DiagnosticEngine, DiagnosticsConfig, detect_errors
from .registry import ENTRY_POINT_GROUP, RuleRegistry, discover_rules

__all__ = [
    "DiagnosticEngine",
    "DiagnosticsConfig",
    "ENTRY_POINT_GROUP",
    "RuleRegistry",
    "RuleSet",
    "detect_errors",
    "discover_rules",
]
