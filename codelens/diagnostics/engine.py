"""Compose delimiter, language and common rules into one diagnostic pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, List, Mapping, Optional, Sequence

from ..languages import PROFILES, resolve_language
from ..logging import get_logger
from ..models import Diagnostic, DiagnosticResult, SourceText
from ..scanner import DelimiterScanner
from .base import RuleSet
from .common import DEFAULT_MAX_LINE_LENGTH, CommonRules
from .registry import RuleRegistry

logger = get_logger(__name__)


@dataclass(frozen=True)
class DiagnosticsConfig:
    """Tunable knobs for a diagnostic run."""

    max_line_length: int = DEFAULT_MAX_LINE_LENGTH
    disabled: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if self.max_line_length < 1:
            raise ValueError("max_line_length must be a positive integer")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "DiagnosticsConfig":
        if not data:
            return cls()
        disabled = data.get("disabled") or ()
        if isinstance(disabled, str):
            disabled = (disabled,)
        return cls(
            max_line_length=int(data.get("max_line_length", DEFAULT_MAX_LINE_LENGTH)),
            disabled=frozenset(str(kind) for kind in disabled),
        )


class DiagnosticEngine:
    """Stateless diagnostic runner; each ``detect`` call is a fresh scan."""

    def __init__(
        self,
        config: Optional[DiagnosticsConfig] = None,
        rule_sets: Optional[Sequence[RuleSet]] = None,
    ) -> None:
        self.config = config or DiagnosticsConfig()
        self.registry = RuleRegistry(rule_sets) if rule_sets is not None else RuleRegistry.default()
        self._common = CommonRules(self.config.max_line_length)

    def detect(self, code: str, language: object) -> DiagnosticResult:
        if not code or not code.strip():
            return DiagnosticResult()

        tag = resolve_language(language)
        profile = PROFILES[tag]
        source = SourceText.from_text(code)

        diagnostics: List[Diagnostic] = []
        if profile.bracket_pairs:
            scanner = DelimiterScanner(profile.bracket_pairs, profile.string_delimiters)
            diagnostics.extend(scanner.scan(code))
        for rule_set in self.registry.for_language(tag, self.config.disabled):
            diagnostics.extend(rule_set.check(source, tag))
        diagnostics.extend(self._common.check(source, tag))

        if self.config.disabled:
            diagnostics = [item for item in diagnostics if item.kind not in self.config.disabled]
        result = DiagnosticResult.from_diagnostics(diagnostics)
        logger.debug("Diagnostics for %s: %s", tag.value, result.summary)
        return result


def detect_errors(
    code: str,
    language: object = "javascript",
    settings: Optional[DiagnosticsConfig] = None,
) -> DiagnosticResult:
    """Run every applicable rule over ``code`` and split the findings by severity."""
    return DiagnosticEngine(settings).detect(code, language)


__all__ = ["DiagnosticEngine", "DiagnosticsConfig", "detect_errors"]
