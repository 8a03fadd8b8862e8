"""Java and C++ statement rules."""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence

from ..languages import PROFILES, LanguageTag
from ..models import Diagnostic, SourceText
from ..segments import Segmenter, code_only
from .base import RuleSet, error, warning

_CONTROL = re.compile(r"^(?:\}\s*)?(?:if|for|while|else|do|switch|try|catch|finally|case|default)\b")
_DECLARATION = re.compile(
    r"^(?:(?:public|private|protected|abstract|final|static|sealed|export)\s+)*"
    r"(?:class|interface|enum|struct|union|namespace|template|record)\b"
)
_CLASS_HEADER = re.compile(
    r"^(?:(?:public|private|protected|abstract|final|static|sealed)\s+)*class\s+\w+"
)
_CONTINUATION_ENDINGS = (",", "(", "[", "+", "-", "*", "/", "%", "=", "&&", "||", "?", ":", ".", "<<", ">>", "&", "|", "\\")
_INCLUDE = re.compile(r"#include\s*[<\"][^>\"]+[>\"]")
_MODIFIER_ONLY_METHOD = re.compile(
    r"^(?:(?:public|private|protected)\s+)(?:(?:static|final|abstract|synchronized|native)\s+)*"
    r"(\w+)\s*\([^)]*\)\s*(?:throws\s+[\w.,\s]+)?\{?\s*$"
)
_CLASS_NAME = re.compile(r"\b(?:class|enum|record)\s+(\w+)")


class _CFamilyRules(RuleSet):
    def check(self, source: SourceText, language: LanguageTag) -> Iterable[Diagnostic]:
        segmenter = Segmenter.for_profile(PROFILES[language])
        code_lines = [code_only(segmenter.split(line)).strip() for line in source.lines]
        diagnostics: List[Diagnostic] = []
        depth = 0

        for index, code in enumerate(code_lines):
            number = index + 1
            starts_nested = depth > 0
            for char in code:
                if char in "([":
                    depth += 1
                elif char in ")]":
                    depth = max(0, depth - 1)

            if code and not starts_nested and depth == 0 and _needs_semicolon(code, _next_code(code_lines, index)):
                diagnostics.append(
                    error(
                        number,
                        len(source.line(number).rstrip()),
                        "missing_semicolon",
                        "Missing semicolon",
                        "Add ; at the end of the statement",
                    )
                )

            if _CLASS_HEADER.match(code) and "{" not in code and not code.endswith(";"):
                if "{" not in _next_code(code_lines, index):
                    diagnostics.append(
                        error(
                            number,
                            len(source.line(number).rstrip()),
                            "missing_brace",
                            "Missing opening brace for class",
                            "Add { after class declaration",
                        )
                    )

            diagnostics.extend(self.check_line(number, code, code_lines))
        return diagnostics

    def check_line(self, number: int, code: str, code_lines: Sequence[str]) -> Iterable[Diagnostic]:
        return ()


class JavaRules(_CFamilyRules):
    name = "java"
    languages = frozenset({LanguageTag.JAVA})
    kinds = frozenset({"missing_semicolon", "missing_brace", "missing_return_type"})

    def check_line(self, number: int, code: str, code_lines: Sequence[str]) -> Iterable[Diagnostic]:
        match = _MODIFIER_ONLY_METHOD.match(code)
        if not match:
            return ()
        # a modifier followed directly by the class name is a constructor
        if match.group(1) in _class_names(code_lines):
            return ()
        return (
            warning(
                number,
                1,
                "missing_return_type",
                "Method missing return type",
                "Specify return type for method",
            ),
        )


class CppRules(_CFamilyRules):
    name = "cpp"
    languages = frozenset({LanguageTag.CPP})
    kinds = frozenset({"missing_semicolon", "missing_brace", "invalid_include"})

    def check_line(self, number: int, code: str, code_lines: Sequence[str]) -> Iterable[Diagnostic]:
        if code.startswith("#include") and not _INCLUDE.match(code):
            return (
                error(
                    number,
                    1,
                    "invalid_include",
                    "Invalid include directive",
                    'Use #include <header> or #include "header"',
                ),
            )
        return ()


def _needs_semicolon(code: str, next_code: str) -> bool:
    if code.endswith((";", "{", "}")):
        return False
    if code.startswith(("#", "@", "*")):
        return False
    if _CONTROL.match(code) or _DECLARATION.match(code):
        return False
    if code.endswith(_CONTINUATION_ENDINGS):
        return False
    if next_code.startswith(("{", ".", "+", "-", "*", "/", "?", ":", "&&", "||", "<<", ">>", "extends", "implements", "throws")):
        return False
    return True


def _next_code(code_lines: Sequence[str], index: int) -> str:
    for code in code_lines[index + 1:]:
        if code:
            return code
    return ""


def _class_names(code_lines: Sequence[str]) -> set[str]:
    names: set[str] = set()
    for code in code_lines:
        names.update(_CLASS_NAME.findall(code))
    return names


__all__ = ["CppRules", "JavaRules"]
