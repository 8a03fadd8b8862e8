"""Rules applied to every language."""

from __future__ import annotations

from typing import Iterable, List

from ..languages import LanguageTag
from ..models import Diagnostic, SourceText
from .base import RuleSet, warning

DEFAULT_MAX_LINE_LENGTH = 100


class CommonRules(RuleSet):
    name = "common"
    kinds = frozenset({"trailing_whitespace", "long_line"})

    def __init__(self, max_line_length: int = DEFAULT_MAX_LINE_LENGTH) -> None:
        self.max_line_length = max_line_length

    def check(self, source: SourceText, language: LanguageTag) -> Iterable[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        for number, line in source.numbered():
            if line.endswith((" ", "\t")):
                diagnostics.append(
                    warning(
                        number,
                        len(line),
                        "trailing_whitespace",
                        "Trailing whitespace",
                        "Remove trailing spaces",
                    )
                )
        for number, line in source.numbered():
            if len(line) > self.max_line_length:
                diagnostics.append(
                    warning(
                        number,
                        self.max_line_length + 1,
                        "long_line",
                        "Line too long",
                        "Break long line into multiple lines",
                    )
                )
        return diagnostics


__all__ = ["CommonRules", "DEFAULT_MAX_LINE_LENGTH"]
