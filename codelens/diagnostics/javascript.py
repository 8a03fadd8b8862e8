"""JavaScript and TypeScript line rules."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from ..heuristics import undefined_names
from ..languages import PROFILES, LanguageTag
from ..models import Diagnostic, SourceText
from ..segments import Segmenter, mask
from .base import RuleSet, error, warning

_IF_OPEN = re.compile(r"\bif\s*\(")
_BARE_ASSIGNMENT = re.compile(r"(?<![=!<>+\-*/%&|^])=(?![=>])")
_FUNCTION_NAME = re.compile(r"\bfunction\s+[A-Za-z_$][\w$]*")
_FUNCTION_WITH_PARENS = re.compile(r"\bfunction\s+[A-Za-z_$][\w$]*\s*\(")
# A slash starts a regex literal only after an operator, an opening bracket,
# a separator or ``return``.
_REGEX_LITERAL = re.compile(
    r"(?:^|(?<=[=(,:!&|?;{}\[])|(?<=\breturn))\s*"
    r"/(?![/*])((?:\\.|\[(?:\\.|[^\]\\])*\]|[^/\\\n\[])+)/([a-z]*)"
)
_NAMED_GROUP = re.compile(r"\(\?<(?=[A-Za-z_])")


class JavaScriptRules(RuleSet):
    name = "javascript"
    languages = frozenset({LanguageTag.JAVASCRIPT, LanguageTag.TYPESCRIPT})
    kinds = frozenset(
        {
            "assignment_in_condition",
            "missing_parentheses",
            "invalid_regex",
            "unclosed_template_literal",
            "console_log",
            "undefined_variable",
        }
    )

    def check(self, source: SourceText, language: LanguageTag) -> Iterable[Diagnostic]:
        profile = PROFILES[language]
        segmenter = Segmenter.for_profile(profile)
        diagnostics: List[Diagnostic] = []
        template_open: Optional[int] = None
        template_column = 0

        for number, line in source.numbered():
            segments = segmenter.split(line)
            masked = mask(segments)

            column = _assignment_in_condition(masked)
            if column:
                diagnostics.append(
                    warning(
                        number,
                        column,
                        "assignment_in_condition",
                        "Possible assignment in conditional statement",
                        "Use === for comparison instead of =",
                    )
                )

            declaration = _FUNCTION_NAME.search(masked)
            if declaration and not _FUNCTION_WITH_PARENS.search(masked):
                diagnostics.append(
                    error(
                        number,
                        declaration.start() + 1,
                        "missing_parentheses",
                        "Missing parentheses in function declaration",
                        "Add parentheses after function name: function name() {}",
                    )
                )

            column = _invalid_regex_column(line, masked)
            if column:
                diagnostics.append(
                    error(
                        number,
                        column,
                        "invalid_regex",
                        "Invalid regular expression",
                        "Check regex syntax and escape special characters",
                    )
                )

            if line.count("`") % 2:
                if template_open is None:
                    template_open = number
                    template_column = line.rindex("`") + 1
                else:
                    template_open = None

        if template_open is not None:
            diagnostics.append(
                error(
                    template_open,
                    template_column,
                    "unclosed_template_literal",
                    "Unclosed template literal",
                    "Add closing backtick `",
                )
            )

        if "console.log" in source.text:
            diagnostics.append(
                warning(
                    0,
                    0,
                    "console_log",
                    "Console.log statements found in code",
                    "Remove console.log statements for production code",
                )
            )

        for name, _line in undefined_names(source.text, profile):
            diagnostics.append(
                warning(
                    0,
                    0,
                    "undefined_variable",
                    f"Possible undefined variable: {name}",
                    f"Declare variable {name} with var, let, or const",
                )
            )
        return diagnostics


def _assignment_in_condition(masked: str) -> int:
    match = _IF_OPEN.search(masked)
    if not match:
        return 0
    start = match.end()
    condition = masked[start : _condition_end(masked, start)]
    assignment = _BARE_ASSIGNMENT.search(condition)
    if not assignment:
        return 0
    return start + assignment.start() + 1


def _condition_end(masked: str, start: int) -> int:
    """Index of the paren closing the condition that opens at ``start - 1``."""
    depth = 1
    for index in range(start, len(masked)):
        if masked[index] == "(":
            depth += 1
        elif masked[index] == ")":
            depth -= 1
            if depth == 0:
                return index
    return len(masked)


def _invalid_regex_column(line: str, masked: str) -> int:
    stripped = line.lstrip()
    if "/" not in line or stripped.startswith("//") or stripped.startswith("/*"):
        return 0
    for match in _REGEX_LITERAL.finditer(line):
        slash = match.start(1) - 1
        # the literal must start in code, not inside a string or comment
        if masked[slash] != "/":
            continue
        try:
            re.compile(_NAMED_GROUP.sub("(?P<", match.group(1)))
        except re.error:
            return slash + 1
    return 0


def has_regex_literal(line: str, masked: str) -> bool:
    """True when ``line`` holds a regex literal that starts in code."""
    if "/" not in masked:
        return False
    return any(masked[match.start(1) - 1] == "/" for match in _REGEX_LITERAL.finditer(line))


__all__ = ["JavaScriptRules", "has_regex_literal"]
