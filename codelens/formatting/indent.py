"""Re-indentation passes: bracket depth, Python block structure and HTML tags."""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from ..diagnostics.markup import VOID_TAGS
from ..segments import COMMENT, STRING, mask
from .context import FormatContext, leading_whitespace

_OPENERS = "([{"
_CLOSERS = ")]}"
_TAG_NAME = re.compile(r"<([A-Za-z][\w:-]*)")
_SELF_CONTAINED = re.compile(r"^<([A-Za-z][\w:-]*)\b[^>]*>.*</\1\s*>$")


def reindent_brackets(lines: List[str], ctx: FormatContext) -> List[str]:
    """Indent each line by the number of source lines holding an open bracket.

    Several brackets opened on the same line count as one level, so ``foo({``
    indents its body once. Lines that start with closers are emitted after
    their brackets are popped.
    """
    segmenter = ctx.segmenter()
    keep_blank = ctx.options.preserve_blank_lines
    stack: List[int] = []
    result: List[str] = []

    for number, line in enumerate(lines):
        pending = segmenter.pending_kind
        segments = segmenter.split(line)
        trimmed = line.strip()

        if pending == STRING:
            result.append(line)
            continue
        if not trimmed:
            if keep_blank:
                result.append("")
            continue
        if pending == COMMENT:
            prefix = " " if trimmed.startswith("*") else ""
            result.append(ctx.indent(_levels(stack)) + prefix + trimmed)
            continue

        code = mask(segments).strip()
        index = 0
        while index < len(code) and code[index] in _CLOSERS:
            if stack:
                stack.pop()
            index += 1
            while index < len(code) and code[index] == " ":
                index += 1
        result.append(ctx.indent(_levels(stack)) + trimmed)

        for char in code[index:]:
            if char in _OPENERS:
                stack.append(number)
            elif char in _CLOSERS and stack:
                stack.pop()
    return result


def reindent_python(lines: List[str], ctx: FormatContext) -> List[str]:
    """Map the source's indentation levels onto the configured indent unit.

    Continuation lines inside brackets or after a backslash get one extra
    level; lines inside triple-quoted strings are left untouched. A block
    header whose body is not indented in the source gets its first body line
    pushed one level deeper.
    """
    segmenter = ctx.segmenter()
    keep_blank = ctx.options.preserve_blank_lines
    levels: List[int] = [0]
    depth = 0
    continued = False
    header: Optional[Tuple[int, int]] = None
    logical: Tuple[int, int] = (0, 0)
    result: List[str] = []

    for line in lines:
        pending = segmenter.pending_kind
        segments = segmenter.split(line)
        trimmed = line.strip()

        if pending == STRING:
            result.append(line)
            continue
        if not trimmed:
            if keep_blank:
                result.append("")
            continue

        code = mask(segments).rstrip()
        width = len(leading_whitespace(line).expandtabs(4))

        if depth > 0 or continued:
            result.append(ctx.indent(logical[1] + 1) + trimmed)
        elif all(segment.kind == COMMENT for segment in segments):
            result.append(ctx.indent(_nearest_level(levels, width)) + trimmed)
            continue
        else:
            level = _track_level(levels, width)
            if header is not None and width <= header[0]:
                level = header[1] + 1
            logical = (width, level)
            result.append(ctx.indent(level) + trimmed)

        for char in code:
            if char in _OPENERS:
                depth += 1
            elif char in _CLOSERS and depth:
                depth -= 1
        continued = code.endswith("\\")
        if depth == 0 and not continued:
            header = logical if code.endswith(":") else None
    return result


def reindent_markup(lines: List[str], ctx: FormatContext) -> List[str]:
    """Indent HTML by tag nesting: closing tags dedent, open tags indent."""
    keep_blank = ctx.options.preserve_blank_lines
    depth = 0
    result: List[str] = []
    for line in lines:
        trimmed = line.strip()
        if not trimmed:
            if keep_blank:
                result.append("")
            continue
        if trimmed.startswith("</"):
            depth = max(0, depth - 1)
        result.append(ctx.indent(depth) + trimmed)
        if _opens_block(trimmed):
            depth += 1
    return result


def _opens_block(trimmed: str) -> bool:
    if not trimmed.startswith("<") or trimmed.startswith(("</", "<!", "<?")):
        return False
    if trimmed.endswith("/>") or "</" in trimmed or _SELF_CONTAINED.match(trimmed):
        return False
    match = _TAG_NAME.match(trimmed)
    return bool(match) and match.group(1).lower() not in VOID_TAGS


def _levels(stack: List[int]) -> int:
    return len(set(stack))


def _track_level(levels: List[int], width: int) -> int:
    while len(levels) > 1 and levels[-1] > width:
        levels.pop()
    if width > levels[-1]:
        levels.append(width)
    return len(levels) - 1


def _nearest_level(levels: List[int], width: int) -> int:
    level = 0
    for index, known in enumerate(levels):
        if known <= width:
            level = index
    return level


__all__ = ["reindent_brackets", "reindent_markup", "reindent_python"]
