"""Whitespace normalization that only ever touches code segments."""

from __future__ import annotations

import re
from typing import List, Pattern, Sequence, Tuple

from ..diagnostics.javascript import has_regex_literal
from ..languages import LanguageTag
from ..segments import Segment, mask
from .context import FormatContext, leading_whitespace

_OPERATOR = re.compile(
    r">>>=|<<=|>>=|\*\*=|//=|\?\?=|&&=|\|\|=|===|!==|==|!=|<=|>=|=>|:=|&&|\|\||[-+*/%&|^]=|="
)
_BRACE_RULES: Sequence[Tuple[Pattern[str], str]] = (
    (re.compile(r"\)\s*\{"), ") {"),
    (re.compile(r"\}\s*(else|catch|finally|while)\b"), r"} \1"),
    (re.compile(r"\b(else|try|do|finally)\{"), r"\1 {"),
    (re.compile(r"\b(if|for|while|switch|catch)\("), r"\1 ("),
)
_SCRIPT_LANGUAGES = (LanguageTag.JAVASCRIPT, LanguageTag.TYPESCRIPT)


class SpacingWalker:
    """Pads operators and commas while tracking bracket nesting across lines.

    ``python`` switches on keyword-argument handling (no padding around ``=``
    inside parentheses) and colon spacing outside subscripts.
    """

    def __init__(self, *, python: bool = False) -> None:
        self.python = python
        self.stack: List[str] = []

    def code(self, text: str) -> str:
        out: List[str] = []
        index = 0
        length = len(text)
        while index < length:
            char = text[index]
            if char in "([{":
                self.stack.append(char)
                out.append(char)
                index += 1
                continue
            if char in ")]}":
                if self.stack:
                    self.stack.pop()
                out.append(char)
                index += 1
                continue
            if char == ",":
                _trim(out)
                out.append(",")
                index = _skip_spaces(text, index + 1)
                if index >= length or text[index] not in ")]":
                    out.append(" ")
                continue
            if self.python and char == ":" and not text.startswith(":=", index):
                if not self.stack or self.stack[-1] != "[":
                    _trim(out)
                    out.append(": ")
                    index = _skip_spaces(text, index + 1)
                    continue

            match = _OPERATOR.match(text, index)
            if match:
                operator = match.group()
                index = _skip_spaces(text, match.end())
                _trim(out)
                if self.python and operator == "=" and self.stack and self.stack[-1] == "(":
                    out.append("=")
                else:
                    out.append(f" {operator} ")
                continue

            if char in " \t":
                if not out or not out[-1].endswith(" "):
                    out.append(" ")
                index += 1
                continue
            out.append(char)
            index += 1
        return "".join(out)


def normalize_spacing(lines: List[str], ctx: FormatContext) -> List[str]:
    """Pad operators, space commas and brace keywords, collapse repeated spaces."""
    return _respace(lines, ctx, SpacingWalker(), _BRACE_RULES)


def normalize_python_spacing(lines: List[str], ctx: FormatContext) -> List[str]:
    return _respace(lines, ctx, SpacingWalker(python=True), ())


def strip_trailing(lines: List[str], ctx: FormatContext) -> List[str]:
    segmenter = ctx.segmenter()
    result: List[str] = []
    for line in lines:
        # whitespace inside an open multi-line literal belongs to the literal
        result.append(line if segmenter.pending_kind else line.rstrip())
        segmenter.split(line)
    return result


def _respace(
    lines: List[str],
    ctx: FormatContext,
    walker: SpacingWalker,
    rules: Sequence[Tuple[Pattern[str], str]],
) -> List[str]:
    segmenter = ctx.segmenter()
    scripted = ctx.profile.tag in _SCRIPT_LANGUAGES
    result: List[str] = []
    for line in lines:
        pending = segmenter.pending_kind
        segments = segmenter.split(line)
        if pending:
            result.append(line)
            continue
        stripped = line.strip()
        if not stripped or (stripped.startswith("#") and not walker.python):
            # preprocessor directives keep their own spacing
            result.append(line.rstrip())
            continue
        if scripted and has_regex_literal(line, mask(segments)):
            result.append(line.rstrip())
            continue
        indent = leading_whitespace(line)
        body = _respace_segments(segments, walker, rules, skip=len(indent))
        result.append((indent + body).rstrip())
    return result


def _respace_segments(
    segments: List[Segment],
    walker: SpacingWalker,
    rules: Sequence[Tuple[Pattern[str], str]],
    *,
    skip: int,
) -> str:
    parts: List[str] = []
    for segment in segments:
        text = segment.text
        if segment.start < skip:
            text = text[skip - segment.start :]
        if not text:
            continue
        if segment.is_code:
            spaced = walker.code(text)
            for pattern, replacement in rules:
                spaced = pattern.sub(replacement, spaced)
            if not parts:
                spaced = spaced.lstrip()
            parts.append(spaced)
        else:
            parts.append(text)
    return "".join(parts)


def _trim(out: List[str]) -> None:
    while out:
        last = out.pop()
        kept = last.rstrip(" ")
        if kept:
            out.append(kept)
            return


def _skip_spaces(text: str, index: int) -> int:
    while index < len(text) and text[index] in " \t":
        index += 1
    return index


__all__ = ["SpacingWalker", "normalize_python_spacing", "normalize_spacing", "strip_trailing"]
