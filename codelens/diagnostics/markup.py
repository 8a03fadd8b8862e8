"""HTML tag-structure and CSS declaration rules."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List

from ..languages import PROFILES, LanguageTag
from ..models import Diagnostic, SourceText
from ..segments import Segmenter, code_only
from .base import RuleSet, error, warning

VOID_TAGS = frozenset(
    {
        "area", "base", "br", "col", "embed", "hr", "img", "input",
        "link", "meta", "param", "source", "track", "wbr",
    }
)
DEPRECATED_TAGS = ("center", "font", "marquee", "blink")

_TAG = re.compile(r"<(/?)([A-Za-z][\w-]*)[^>]*?(/?)>")
_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)
_DOCTYPE = re.compile(r"<!doctype", re.IGNORECASE)
_DEPRECATED = re.compile(r"<(%s)\b" % "|".join(DEPRECATED_TAGS), re.IGNORECASE)

PROPERTY_TYPOS: Dict[str, str] = {
    "colour": "color",
    "font-color": "color",
    "text-color": "color",
    "bgcolor": "background-color",
}


@dataclass(frozen=True)
class _OpenTag:
    name: str
    line: int
    column: int


class HtmlRules(RuleSet):
    name = "html"
    languages = frozenset({LanguageTag.HTML})
    kinds = frozenset(
        {
            "mismatched_tags",
            "unclosed_tag",
            "unexpected_closing_tag",
            "missing_doctype",
            "missing_alt",
            "deprecated_tag",
        }
    )

    def check(self, source: SourceText, language: LanguageTag) -> Iterable[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        diagnostics.extend(_tag_structure(source.text))

        if not _DOCTYPE.search(source.text):
            diagnostics.append(
                warning(
                    1,
                    1,
                    "missing_doctype",
                    "Missing DOCTYPE declaration",
                    "Add <!DOCTYPE html> at the beginning",
                )
            )

        for number, line in source.numbered():
            position = line.find("<img")
            if position != -1 and "alt=" not in line:
                diagnostics.append(
                    warning(
                        number,
                        position + 1,
                        "missing_alt",
                        "Image missing alt attribute",
                        "Add alt attribute for accessibility",
                    )
                )
            for match in _DEPRECATED.finditer(line):
                tag = f"<{match.group(1).lower()}>"
                diagnostics.append(
                    warning(
                        number,
                        match.start() + 1,
                        "deprecated_tag",
                        f"Deprecated HTML tag: {tag}",
                        f"Use CSS instead of {tag}",
                    )
                )
        return diagnostics


def _tag_structure(code: str) -> List[Diagnostic]:
    # Blank comments so tags inside them are ignored while offsets stay put.
    masked = _COMMENT.sub(lambda match: re.sub(r"[^\n]", " ", match.group()), code)
    diagnostics: List[Diagnostic] = []
    stack: List[_OpenTag] = []

    for match in _TAG.finditer(masked):
        closing, name, self_closing = match.group(1), match.group(2), match.group(3)
        line = masked.count("\n", 0, match.start()) + 1
        column = match.start() - (masked.rfind("\n", 0, match.start()) + 1) + 1
        lowered = name.lower()

        if not closing:
            if self_closing or lowered in VOID_TAGS:
                continue
            stack.append(_OpenTag(lowered, line, column))
            continue

        if not stack:
            diagnostics.append(
                error(
                    line,
                    column,
                    "unexpected_closing_tag",
                    f"Unexpected closing tag: </{name}>",
                    f"Remove extra closing tag or add opening <{name}>",
                )
            )
            continue
        last = stack.pop()
        if last.name != lowered:
            diagnostics.append(
                error(
                    line,
                    column,
                    "mismatched_tags",
                    f"Mismatched tags: expected </{last.name}> but found </{name}>",
                    f"Change to </{last.name}> or fix opening tag",
                )
            )

    for opened in stack:
        diagnostics.append(
            error(
                opened.line,
                opened.column,
                "unclosed_tag",
                f"Unclosed tag: <{opened.name}>",
                f"Add closing </{opened.name}> tag",
            )
        )
    return diagnostics


class CssRules(RuleSet):
    name = "css"
    languages = frozenset({LanguageTag.CSS})
    kinds = frozenset({"missing_semicolon", "invalid_property"})

    def check(self, source: SourceText, language: LanguageTag) -> Iterable[Diagnostic]:
        segmenter = Segmenter.for_profile(PROFILES[LanguageTag.CSS])
        code_lines = [code_only(segmenter.split(line)).strip() for line in source.lines]
        diagnostics: List[Diagnostic] = []
        depth = 0

        for index, code in enumerate(code_lines):
            number = index + 1
            line = source.line(number)
            inside_block = depth > 0
            depth = max(0, depth + code.count("{") - code.count("}"))
            if not code:
                continue

            if inside_block and _missing_semicolon(code, _next_code(code_lines, index)):
                diagnostics.append(
                    error(
                        number,
                        len(line.rstrip()),
                        "missing_semicolon",
                        "Missing semicolon",
                        "Add ; at the end of the declaration",
                    )
                )

            if ":" in code:
                prop = code.split(":", 1)[0].strip().lower()
                if prop in PROPERTY_TYPOS:
                    diagnostics.append(
                        warning(
                            number,
                            line.lower().find(prop) + 1,
                            "invalid_property",
                            f"Possible invalid property: {prop}",
                            f"Did you mean '{PROPERTY_TYPOS[prop]}'?",
                        )
                    )
        return diagnostics


def _missing_semicolon(code: str, next_code: str) -> bool:
    if code.endswith(("{", "}", ";", ",")) or code.startswith("@"):
        return False
    return not next_code.startswith("{")


def _next_code(code_lines: List[str], index: int) -> str:
    for code in code_lines[index + 1:]:
        if code:
            return code
    return ""


__all__ = ["CssRules", "DEPRECATED_TAGS", "HtmlRules", "PROPERTY_TYPOS", "VOID_TAGS"]
