"""Base classes for diagnostic rule plugins."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import FrozenSet, Iterable

from ..languages import LanguageTag
from ..models import Diagnostic, Severity, SourceText


class RuleSet(ABC):
    """Contract for rule sets that emit diagnostics for one or more languages.

    An empty ``languages`` set means the rule set applies to every language.
    ``kinds`` lists the diagnostic kinds it can report, so a run that
    disables all of them can skip the rule set entirely.
    """

    name: str = ""
    languages: FrozenSet[LanguageTag] = frozenset()
    kinds: FrozenSet[str] = frozenset()

    def supports(self, language: LanguageTag) -> bool:
        """Return True when this rule set should run for ``language``."""
        return not self.languages or language in self.languages

    @abstractmethod
    def check(self, source: SourceText, language: LanguageTag) -> Iterable[Diagnostic]:
        """Yield diagnostics for ``source``; never raise for malformed input."""


def error(line: int, column: int, kind: str, message: str, suggestion: str) -> Diagnostic:
    return Diagnostic(line, column, Severity.ERROR, kind, message, suggestion)


def warning(line: int, column: int, kind: str, message: str, suggestion: str) -> Diagnostic:
    return Diagnostic(line, column, Severity.WARNING, kind, message, suggestion)


__all__ = ["RuleSet", "error", "warning"]
