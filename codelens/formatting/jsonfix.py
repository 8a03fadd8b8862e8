"""JSON pretty printing with a best-effort repair pass for near-JSON input."""

from __future__ import annotations

import json
import re
from typing import Any, List, Optional, Union

from ..logging import get_logger

logger = get_logger(__name__)

_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")
_LITERALS = {"True": "true", "False": "false", "None": "null"}


def format_json(code: str, indent: Union[int, str]) -> str:
    """Pretty print ``code``; fall back to repairing it, then to the input."""
    try:
        return _dump(json.loads(code), indent)
    except json.JSONDecodeError as exc:
        logger.debug("JSON did not parse (%s); attempting repair", exc)

    repaired = repair_json(code)
    try:
        return _dump(json.loads(repaired), indent)
    except json.JSONDecodeError as exc:
        logger.debug("Repaired JSON still invalid: %s", exc)
        return code


def repair_json(code: str) -> str:
    """Fix the usual hand-written JSON mistakes.

    Handles trailing commas, single-quoted strings, unquoted keys, comments
    and Python literals. Double-quoted strings are copied through verbatim.
    """
    out: List[str] = []
    index = 0
    length = len(code)
    while index < length:
        char = code[index]
        if char == '"':
            end = _string_end(code, index, '"')
            out.append(code[index:end])
            index = end
        elif char == "'":
            end = _string_end(code, index, "'")
            inner = code[index + 1 : end - 1] if end - index >= 2 else code[index + 1 : end]
            out.append(_double_quoted(inner))
            index = end
        elif code.startswith("//", index):
            newline = code.find("\n", index)
            index = length if newline == -1 else newline
        elif code.startswith("/*", index):
            closing = code.find("*/", index + 2)
            index = length if closing == -1 else closing + 2
        elif char == ",":
            following = _next_significant(code, index + 1)
            if following not in ("}", "]"):
                out.append(char)
            index += 1
        elif _IDENTIFIER.match(code, index) and not _continues_number(code, index):
            word = _IDENTIFIER.match(code, index).group()
            index += len(word)
            if _next_significant(code, index) == ":":
                out.append(json.dumps(word))
            else:
                out.append(_LITERALS.get(word, word))
        else:
            out.append(char)
            index += 1
    return "".join(out)


def _dump(value: Any, indent: Union[int, str]) -> str:
    return json.dumps(value, indent=indent, ensure_ascii=False)


def _double_quoted(inner: str) -> str:
    """Re-quote a single-quoted body, keeping its escapes and escaping bare ``"``."""
    out = ['"']
    index = 0
    while index < len(inner):
        char = inner[index]
        if char == "\\":
            if index + 1 == len(inner):
                out.append("\\\\")
                break
            escaped = inner[index + 1]
            out.append("'" if escaped == "'" else char + escaped)
            index += 2
            continue
        out.append('\\"' if char == '"' else char)
        index += 1
    out.append('"')
    return "".join(out)


def _string_end(code: str, start: int, quote: str) -> int:
    index = start + 1
    while index < len(code):
        if code[index] == "\\":
            index += 2
            continue
        if code[index] == quote:
            return index + 1
        index += 1
    return len(code)


def _next_significant(code: str, index: int) -> Optional[str]:
    while index < len(code):
        char = code[index]
        if not char.isspace():
            if code.startswith("//", index):
                newline = code.find("\n", index)
                if newline == -1:
                    return None
                index = newline
                continue
            if code.startswith("/*", index):
                closing = code.find("*/", index + 2)
                if closing == -1:
                    return None
                index = closing + 2
                continue
            return char
        index += 1
    return None


def _continues_number(code: str, index: int) -> bool:
    # exponent markers such as the "e" in 1e5 belong to the number
    return index > 0 and (code[index - 1].isdigit() or code[index - 1] == ".")


__all__ = ["format_json", "repair_json"]
