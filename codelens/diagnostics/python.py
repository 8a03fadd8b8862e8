"""Python indentation and block-header rules."""

from __future__ import annotations

import re
from typing import Iterable, List

from ..languages import PROFILES, LanguageTag
from ..models import Diagnostic, SourceText
from ..segments import Segmenter, code_only
from .base import RuleSet, error, warning

_BLOCK_HEADER = re.compile(
    r"^(?:async\s+)?(?:def|class|if|elif|for|while|except|with)\b|^(?:else|try|finally)\b"
)
_PRINT_STATEMENT = re.compile(r"^print\s+[^\s(=]")
_OPENERS = "([{"
_CLOSERS = ")]}"


class PythonRules(RuleSet):
    name = "python"
    languages = frozenset({LanguageTag.PYTHON})
    kinds = frozenset({"unexpected_indent", "missing_colon", "mixed_indentation", "python2_print"})

    def check(self, source: SourceText, language: LanguageTag) -> Iterable[Diagnostic]:
        segmenter = Segmenter.for_profile(PROFILES[LanguageTag.PYTHON])
        diagnostics: List[Diagnostic] = []
        indent_stack = [0]
        depth = 0
        continued = False
        header_line = 0
        header_has_colon = False

        for number, line in source.numbered():
            inside_string = segmenter.pending_kind is not None
            segments = segmenter.split(line)
            code = code_only(segments)
            stripped = line.strip()
            is_continuation = inside_string or depth > 0 or continued

            if not is_continuation and stripped and not stripped.startswith("#"):
                leading = line[: len(line) - len(line.lstrip())]
                if " " in leading and "\t" in leading:
                    diagnostics.append(
                        warning(
                            number,
                            1,
                            "mixed_indentation",
                            "Mixed tabs and spaces in indentation",
                            "Use either tabs or spaces consistently for indentation",
                        )
                    )

                if not _indent_matches(indent_stack, len(leading)):
                    diagnostics.append(
                        error(
                            number,
                            1,
                            "unexpected_indent",
                            "Unexpected indentation",
                            "Fix indentation to match previous levels",
                        )
                    )

                if _PRINT_STATEMENT.match(stripped):
                    diagnostics.append(
                        warning(
                            number,
                            1,
                            "python2_print",
                            "Python 2 print statement detected",
                            "Use print() function for Python 3 compatibility",
                        )
                    )

                if _BLOCK_HEADER.match(stripped):
                    header_line = number
                    header_has_colon = False

            depth, has_colon = _scan_depth(code, depth)
            if header_line:
                header_has_colon = header_has_colon or has_colon
            continued = code.rstrip().endswith("\\")

            if header_line and depth == 0 and not continued and not segmenter.in_literal:
                if not header_has_colon:
                    diagnostics.append(
                        error(
                            header_line,
                            len(source.line(header_line).rstrip()),
                            "missing_colon",
                            "Missing colon at end of statement",
                            "Add colon : at the end of the statement",
                        )
                    )
                header_line = 0
        return diagnostics


def _indent_matches(stack: List[int], indent: int) -> bool:
    """Update ``stack`` for ``indent``; False when a dedent lands between levels."""
    if indent > stack[-1]:
        stack.append(indent)
        return True
    while len(stack) > 1 and stack[-1] > indent:
        stack.pop()
    return stack[-1] == indent


def _scan_depth(code: str, depth: int) -> tuple[int, bool]:
    """Return the bracket depth after ``code`` and whether a colon sits at depth 0."""
    has_colon = False
    for char in code:
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth = max(0, depth - 1)
        elif char == ":" and depth == 0:
            has_colon = True
    return depth, has_colon


__all__ = ["PythonRules"]
