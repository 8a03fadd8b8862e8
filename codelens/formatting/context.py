"""Shared state handed to every formatting pass."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List

from ..languages import LanguageProfile
from ..models import FormatOptions
from ..segments import Segmenter


@dataclass(frozen=True)
class FormatContext:
    profile: LanguageProfile
    options: FormatOptions

    def segmenter(self) -> Segmenter:
        """Return a fresh segmenter; passes walk the document from the top."""
        return Segmenter.for_profile(self.profile)

    def indent(self, depth: int) -> str:
        return self.options.indent_unit * max(0, depth)


Pass = Callable[[List[str], FormatContext], List[str]]


def leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


__all__ = ["FormatContext", "Pass", "leading_whitespace"]
