"""Low-confidence name heuristics shared by diagnostics and metrics.

Nothing here resolves scopes. Names are collected with regular expressions
over source whose strings and comments have been blanked out, so results are
hints, not facts.
"""

from __future__ import annotations

import builtins
import re
from typing import Dict, FrozenSet, List, Set, Tuple

from .languages import LanguageProfile, LanguageTag
from .models import split_lines
from .segments import mask_lines

_IDENTIFIER = re.compile(r"(?<![\w$.])([A-Za-z_$][\w$]*)")
_WORD = re.compile(r"[A-Za-z_$][\w$]*")
_ASSIGNMENT = re.compile(r"([A-Za-z_$][\w$]*)\s*(?:[-+*/%&|^]|\*\*|//|<<|>>)?=(?![=>])")

_JS_DECLARATIONS = (
    re.compile(r"\b(?:var|let|const)\s+([A-Za-z_$][\w$]*)"),
    re.compile(r"\bfunction\s*\*?\s*([A-Za-z_$][\w$]*)"),
    re.compile(r"\bclass\s+([A-Za-z_$][\w$]*)"),
    re.compile(r"\bcatch\s*\(\s*([A-Za-z_$][\w$]*)"),
    re.compile(r"\bimport\s+([A-Za-z_$][\w$]*)"),
    re.compile(r"\bas\s+([A-Za-z_$][\w$]*)"),
    re.compile(r"([A-Za-z_$][\w$]*)\s*=>"),
)
_JS_NAME_LISTS = (
    re.compile(r"\b(?:var|let|const)\s*[{\[]([^}\]]*)[}\]]"),
    re.compile(r"\bfunction\s*\*?\s*[\w$]*\s*\(([^)]*)\)"),
    re.compile(r"\(([^()]*)\)\s*=>"),
    re.compile(r"\bimport\s*\{([^}]*)\}"),
    re.compile(r"^\s*(?:async\s+)?[A-Za-z_$][\w$]*\s*\(([^)]*)\)\s*\{", re.MULTILINE),
)
_JS_METHOD = re.compile(r"^\s*(?:async\s+|static\s+|get\s+|set\s+)*([A-Za-z_$][\w$]*)\s*\([^)]*\)\s*\{", re.MULTILINE)
_JS_KEY = re.compile(r"\s*:(?!:)")

_PY_DECLARATIONS = (
    re.compile(r"\b(?:def|class)\s+(\w+)"),
    re.compile(r"\bimport\s+(\w+)"),
    re.compile(r"\bas\s+(\w+)"),
    re.compile(r"\bglobal\s+(\w+)"),
    re.compile(r"\bnonlocal\s+(\w+)"),
    re.compile(r"^[ \t]*(\w+)[ \t]*:(?!=)", re.MULTILINE),
)
_PY_NAME_LISTS = (
    re.compile(r"\bdef\s+\w+\s*\(([^)]*)\)"),
    re.compile(r"\blambda\s+([^:]*):"),
    re.compile(r"\bfor\s+([\w \t,()]+?)\s+in\b"),
    re.compile(r"\bfrom\s+[\w.]+\s+import\s+\(?([\w\s,]+)\)?"),
    re.compile(r"^[ \t]*([\w \t,]+?)[ \t]*=(?!=)", re.MULTILINE),
)

JS_GLOBALS: FrozenSet[str] = frozenset(
    {
        "Array", "Boolean", "Date", "Error", "JSON", "Map", "Math", "Number",
        "Object", "Promise", "Proxy", "Reflect", "RegExp", "Set", "String",
        "Symbol", "TypeError", "WeakMap", "WeakSet", "arguments", "clearInterval",
        "clearTimeout", "console", "document", "exports", "fetch", "globalThis",
        "isNaN", "module", "parseFloat", "parseInt", "process", "require",
        "setInterval", "setTimeout", "window", "NaN", "Infinity", "undefined",
    }
)
PYTHON_BUILTINS: FrozenSet[str] = frozenset(name for name in dir(builtins) if not name.startswith("_")) | frozenset(
    {"self", "cls", "__name__", "__file__", "__init__", "__main__"}
)

_UNDEFINED_LANGUAGES = frozenset({LanguageTag.JAVASCRIPT, LanguageTag.TYPESCRIPT, LanguageTag.PYTHON})


def supports_name_heuristics(profile: LanguageProfile) -> bool:
    return profile.tag in _UNDEFINED_LANGUAGES


def undefined_names(code: str, profile: LanguageProfile) -> List[Tuple[str, int]]:
    """Return ``(name, first_line)`` for identifiers used but never declared.

    Each name is reported once, at its first use, in order of appearance.
    Only javascript, typescript and python carry declaration patterns; other
    languages always return an empty list.
    """
    if not supports_name_heuristics(profile):
        return []

    lines = mask_lines(split_lines(code), profile)
    masked = "\n".join(lines)
    is_python = profile.tag is LanguageTag.PYTHON
    declared = _python_declarations(masked) if is_python else _js_declarations(masked)
    ignored = _ignored_names(profile)

    found: Dict[str, int] = {}
    for number, line in enumerate(lines, start=1):
        for match in _IDENTIFIER.finditer(line):
            name = match.group(1)
            if len(name) < 2 or name in found or name in declared or name in ignored:
                continue
            if not is_python and _JS_KEY.match(line, match.end()) and not _in_ternary(line, match.start()):
                continue
            if is_python and _is_keyword_argument(line, match.end()):
                continue
            found[name] = number
    return list(found.items())


def _js_declarations(masked: str) -> Set[str]:
    names: Set[str] = set()
    for pattern in _JS_DECLARATIONS:
        names.update(match.group(1) for match in pattern.finditer(masked))
    for pattern in _JS_NAME_LISTS:
        for match in pattern.finditer(masked):
            names.update(_WORD.findall(match.group(1)))
    names.update(match.group(1) for match in _JS_METHOD.finditer(masked))
    names.update(match.group(1) for match in _ASSIGNMENT.finditer(masked))
    return names


def _python_declarations(masked: str) -> Set[str]:
    names: Set[str] = set()
    for pattern in _PY_DECLARATIONS:
        names.update(match.group(1) for match in pattern.finditer(masked))
    for pattern in _PY_NAME_LISTS:
        for match in pattern.finditer(masked):
            names.update(_WORD.findall(match.group(1)))
    names.update(match.group(1) for match in _ASSIGNMENT.finditer(masked))
    return names


def _ignored_names(profile: LanguageProfile) -> FrozenSet[str]:
    names = set(profile.keywords) | set(profile.reserved)
    if profile.tag is LanguageTag.PYTHON:
        names |= PYTHON_BUILTINS
    else:
        names |= JS_GLOBALS
    return frozenset(names)


def _in_ternary(line: str, position: int) -> bool:
    return "?" in line[:position]


def _is_keyword_argument(line: str, end: int) -> bool:
    rest = line[end:].lstrip()
    return rest.startswith("=") and not rest.startswith("==")


__all__ = ["JS_GLOBALS", "PYTHON_BUILTINS", "supports_name_heuristics", "undefined_names"]
