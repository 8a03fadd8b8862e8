"""Language specific formatting passes.

Every pass takes the document as a list of lines plus the shared
``FormatContext`` and returns the new list of lines.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from ..diagnostics.markup import VOID_TAGS
from ..segments import STRING, Segment, mask
from .context import FormatContext, leading_whitespace

# -- JavaScript ---------------------------------------------------------------

_STATEMENT_HEADS = re.compile(
    r"^(?:if|for|while|switch|else|do|try|catch|finally|function|class|interface|enum|namespace|module"
    r"|export\s+(?:default\s+)?(?:async\s+)?(?:function|class|interface|enum))\b"
)
_CONTROL_HEAD = re.compile(r"^(?:\}\s*)?(?:if|for|while|switch|catch|with|else\s+if)\b")
_CONTINUATION_ENDINGS = (
    ",", "(", "[", "{", ".", "+", "-", "*", "/", "%", "=", "&", "|", "^", "?", ":", "<", ">", "!", "~", ";",
)
_CONTINUATION_STARTS = (".", "?", ":", "&&", "||", "{", ")", "]")
_OBJECT_PREFIX = re.compile(r"(?:[=:(,\[?!&|]|\breturn|\bdefault)\s*$")
_ARROW_RULES = (
    (re.compile(r"\(\s*\)\s*=>"), "() =>"),
    (re.compile(r"\(\s*([A-Za-z_$][\w$]*)\s*\)\s*=>"), r"(\1) =>"),
    (re.compile(r"([\w$)])\s*=>\s*"), r"\1 => "),
)


def insert_semicolons(lines: List[str], ctx: FormatContext) -> List[str]:
    """Terminate statement lines that end without a semicolon.

    A line is left alone when it continues onto the next line, sits inside
    an expression bracket, opens or closes a block, or is only a comment.
    """
    segmenter = ctx.segmenter()
    masked: List[Optional[str]] = []
    for line in lines:
        pending = segmenter.pending_kind
        segments = segmenter.split(line)
        # lines that start or end inside a literal are never touched
        masked.append(None if pending or segmenter.in_literal else mask(segments, keep_quotes=True).rstrip())

    stack: List[str] = []
    previous_code = ""
    result: List[str] = []
    for index, line in enumerate(lines):
        code = masked[index]
        if code is None or not code.strip():
            result.append(line)
            continue
        stripped = code.strip()
        closed_object = _track_braces(stripped, stack, previous_code)
        previous_code = stripped
        if _needs_semicolon(stripped, stack, closed_object, _next_code(masked, index)):
            result.append(line[: len(code)] + ";" + line[len(code) :])
        else:
            result.append(line)
    return result


def space_arrow_functions(lines: List[str], ctx: FormatContext) -> List[str]:
    return _map_code(lines, ctx, _ARROW_RULES)


def break_object_literals(lines: List[str], ctx: FormatContext) -> List[str]:
    """Split over-long single-line object literals one property per line."""
    limit = ctx.options.max_line_length
    segmenter = ctx.segmenter()
    result: List[str] = []
    for line in lines:
        pending = segmenter.pending_kind
        segments = segmenter.split(line)
        if pending or segmenter.in_literal or len(line) <= limit:
            result.append(line)
            continue
        result.extend(_break_object(line, mask(segments), ctx) or [line])
    return result


def _track_braces(code: str, stack: List[str], previous_code: str) -> bool:
    """Update the bracket stack; return True if the last closer ended an object."""
    closed_object = False
    for position, char in enumerate(code):
        if char == "{":
            before = code[:position].rstrip() or previous_code
            is_object = bool(_OBJECT_PREFIX.search(before)) and not before.endswith("=>")
            stack.append("object" if is_object else "block")
        elif char in "([":
            stack.append(char)
        elif char in ")]}":
            opened = stack.pop() if stack else None
            closed_object = char != "}" or opened == "object"
    return closed_object


def _needs_semicolon(code: str, stack: List[str], closed_object: bool, next_code: str) -> bool:
    if stack and stack[-1] != "block":
        return False
    if code.startswith(("@", "#!")):
        return False
    if code.endswith(_CONTINUATION_ENDINGS) and not code.endswith(("++", "--")):
        return False
    if code.endswith("}") and not closed_object:
        return False
    if code.endswith("=>") or code in ("else", "do", "try", "finally"):
        return False
    if _STATEMENT_HEADS.match(code) and not code.endswith(")"):
        return False
    if code.endswith(")") and _CONTROL_HEAD.match(code):
        return False
    if re.match(r"^(?:case\b|default\s*:)", code):
        return False
    return not next_code.startswith(_CONTINUATION_STARTS)


def _next_code(masked: List[Optional[str]], index: int) -> str:
    for candidate in masked[index + 1 :]:
        if candidate is None:
            return ""
        if candidate.strip():
            return candidate.strip()
    return ""


def _break_object(line: str, masked: str, ctx: FormatContext) -> Optional[List[str]]:
    opening = _object_opening(masked)
    if opening is None:
        return None
    depth = 0
    commas: List[int] = []
    closing = -1
    for position in range(opening, len(masked)):
        char = masked[position]
        if char in "([{":
            depth += 1
        elif char in ")]}":
            depth -= 1
            if depth == 0:
                closing = position
                break
        elif char == "," and depth == 1:
            commas.append(position)
    if closing == -1 or not commas:
        return None

    indent = leading_whitespace(line)
    inner = indent + ctx.options.indent_unit
    bounds = [opening] + commas + [closing]
    properties = [line[bounds[i] + 1 : bounds[i + 1]].strip() for i in range(len(bounds) - 1)]
    properties = [prop for prop in properties if prop]
    broken = [line[: opening + 1].rstrip()]
    broken.extend(f"{inner}{prop}," for prop in properties[:-1])
    broken.append(f"{inner}{properties[-1]}")
    broken.append(indent + line[closing:].strip())
    return broken


def _object_opening(masked: str) -> Optional[int]:
    for match in re.finditer(r"\{", masked):
        if _OBJECT_PREFIX.search(masked[: match.start()].rstrip()):
            return match.start()
    return None


# -- Python -------------------------------------------------------------------

_IMPORT_LINE = re.compile(r"^(?:import|from)\s+[\w.]")


def sort_python_imports(lines: List[str], ctx: FormatContext) -> List[str]:
    """Gather single-line top-level imports into one sorted block.

    The block goes after any shebang, leading comments and module docstring,
    with ``from __future__`` imports first. Multi-line imports leave the
    document untouched.
    """
    segmenter = ctx.segmenter()
    imports: List[str] = []
    body: List[Tuple[int, str]] = []
    header_end = 0
    in_header = True
    depth = 0
    for index, line in enumerate(lines):
        pending = segmenter.pending_kind
        code = mask(segmenter.split(line)).rstrip()
        if in_header and (pending or not line.strip() or line.startswith("#") or _is_docstring(line)):
            header_end = index + 1
            body.append((index, line))
            continue
        in_header = False
        if not pending and depth == 0 and _IMPORT_LINE.match(line):
            if code.endswith(("(", "\\")):
                return lines
            imports.append(line.rstrip())
        else:
            body.append((index, line))
        if not pending:
            depth = max(0, depth + sum(code.count(c) for c in "([{") - sum(code.count(c) for c in ")]}"))

    if not imports:
        return lines
    future = sorted(line for line in imports if line.startswith("from __future__"))
    rest = sorted(line for line in imports if not line.startswith("from __future__"))
    head = [line for index, line in body if index < header_end]
    tail = [line for index, line in body if index >= header_end]
    if head and head[-1].strip():
        head.append("")
    return head + future + rest + tail


def _is_docstring(line: str) -> bool:
    stripped = line.strip()
    return stripped.startswith(('"""', "'''", 'r"""'))


def prefer_double_quotes(lines: List[str], ctx: FormatContext) -> List[str]:
    """Rewrite single-quoted one-line strings with double quotes when safe."""
    segmenter = ctx.segmenter()
    result: List[str] = []
    for line in lines:
        pending = segmenter.pending_kind
        segments = segmenter.split(line)
        parts = [_requote(segment) for segment in segments]
        if pending and segments:
            # the first segment continues a literal opened on an earlier line
            parts[0] = segments[0].text
        result.append("".join(parts))
    return result


def _requote(segment: Segment) -> str:
    text = segment.text
    if segment.kind != STRING or len(text) < 2 or text[0] != "'" or text[-1] != "'":
        return text
    if text.startswith("'''"):
        return text
    inner = text[1:-1]
    if '"' in inner or inner.endswith("\\"):
        return text
    return '"' + inner.replace("\\'", "'") + '"'


# -- Java and C++ -------------------------------------------------------------

_MODIFIER_RUNS = (
    (re.compile(r"\b(public|private|protected|static|final|abstract|synchronized)\s+"), r"\1 "),
    (re.compile(r"(\S)\s*\{$"), r"\1 {"),
)
_INCLUDE = re.compile(r"^(\s*)#\s*include\s*(<\s*(.+?)\s*>|\"(.+?)\")")


def tidy_modifiers(lines: List[str], ctx: FormatContext) -> List[str]:
    return _map_code(lines, ctx, _MODIFIER_RUNS)


def normalize_includes(lines: List[str], ctx: FormatContext) -> List[str]:
    result: List[str] = []
    for line in lines:
        match = _INCLUDE.match(line)
        if match:
            target = f"<{match.group(3)}>" if match.group(3) else f'"{match.group(4)}"'
            line = f"{match.group(1)}#include {target}{line[match.end():]}"
        result.append(line)
    return result


# -- HTML ---------------------------------------------------------------------

_TAG = re.compile(r"<(?!!--)[A-Za-z/][^<>]*>")
_QUOTED = re.compile(r"(\"[^\"]*\"|'[^']*')")
_UNQUOTED_ATTRIBUTE = re.compile(r"(\s[\w:-]+)=([^\s\"'>/][^\s\"'>]*)")
_VOID_TAG = re.compile(r"<(%s)\b([^<>]*?)\s*/?>" % "|".join(sorted(VOID_TAGS)), re.IGNORECASE)


def tidy_tags(lines: List[str], ctx: FormatContext) -> List[str]:
    """Collapse whitespace inside tags and tighten ``=`` around attributes."""
    return [_TAG.sub(_tidy_tag, line).rstrip() for line in lines]


def _tidy_tag(match: "re.Match[str]") -> str:
    parts = _QUOTED.split(match.group())
    for index in range(0, len(parts), 2):
        chunk = re.sub(r"\s+", " ", parts[index])
        chunk = re.sub(r"\s*=\s*", "=", chunk)
        parts[index] = chunk
    tidy = "".join(parts)
    tidy = re.sub(r"^<\s*(/?)\s*", r"<\1", tidy)
    return re.sub(r"\s*(/?)>$", lambda m: (" />" if m.group(1) else ">"), tidy)


def quote_attributes(lines: List[str], ctx: FormatContext) -> List[str]:
    return [_TAG.sub(_quote_tag, line) for line in lines]


def _quote_tag(match: "re.Match[str]") -> str:
    parts = _QUOTED.split(match.group())
    for index in range(0, len(parts), 2):
        parts[index] = _UNQUOTED_ATTRIBUTE.sub(r'\1="\2"', parts[index])
    return "".join(parts)


def close_void_tags(lines: List[str], ctx: FormatContext) -> List[str]:
    return [_VOID_TAG.sub(lambda m: f"<{m.group(1)}{m.group(2).rstrip()} />", line) for line in lines]


# -- CSS ----------------------------------------------------------------------

_DECLARATION = re.compile(r"^([\w-]+)\s*:\s*(.*)$")


def split_css_rules(lines: List[str], ctx: FormatContext) -> List[str]:
    """Put every ``{``, declaration and ``}`` on its own line."""
    segmenter = ctx.segmenter()
    result: List[str] = []
    for line in lines:
        pending = segmenter.pending_kind
        segments = segmenter.split(line)
        if pending or not line.strip():
            result.append(line)
            continue
        masked = mask(segments)
        pieces: List[str] = []
        start = 0
        parens = 0
        for position, char in enumerate(masked):
            if char == "(":
                parens += 1
            elif char == ")":
                parens = max(0, parens - 1)
            elif char == "{":
                pieces.append(line[start:position].rstrip() + " {")
                start = position + 1
            elif char == ";" and parens == 0:
                pieces.append(line[start : position + 1])
                start = position + 1
            elif char == "}":
                pieces.append(line[start:position])
                pieces.append("}")
                start = position + 1
        pieces.append(line[start:])
        cleaned = [piece.strip() for piece in pieces if piece.strip()]
        if cleaned and cleaned[0] == "{" and result and result[-1].strip():
            result[-1] = result[-1].rstrip() + " {"
            cleaned = cleaned[1:]
        result.extend(_fix_selector_brace(piece) for piece in cleaned)
    return result


def _fix_selector_brace(piece: str) -> str:
    if piece.endswith("{") and piece != "{":
        return piece[:-1].rstrip() + " {"
    return piece


def space_declarations(lines: List[str], ctx: FormatContext) -> List[str]:
    """Write declarations as ``property: value``."""
    return [_space_declaration(line, depth) for line, depth in _with_css_depth(lines, ctx)]


def _space_declaration(line: str, depth: int) -> str:
    stripped = line.strip()
    if depth == 0 or stripped.endswith(("{", ",")) or stripped.startswith(("/*", "*", "@")):
        return line
    match = _DECLARATION.match(stripped)
    if not match:
        return line
    return f"{leading_whitespace(line)}{match.group(1)}: {match.group(2)}"


def terminate_declarations(lines: List[str], ctx: FormatContext) -> List[str]:
    result: List[str] = []
    for line, depth in _with_css_depth(lines, ctx):
        stripped = line.rstrip()
        code = stripped.strip()
        if (
            depth > 0
            and ":" in code
            and not code.endswith((";", "{", "}", ",", "*/"))
            and not code.startswith(("/*", "*", "@"))
        ):
            stripped += ";"
        result.append(stripped)
    return result


def _with_css_depth(lines: List[str], ctx: FormatContext) -> List[Tuple[str, int]]:
    """Pair each line with the brace depth in effect when it starts."""
    segmenter = ctx.segmenter()
    depth = 0
    paired: List[Tuple[str, int]] = []
    for line in lines:
        pending = segmenter.pending_kind
        code = mask(segmenter.split(line))
        paired.append((line, 0 if pending else depth))
        depth = max(0, depth + code.count("{") - code.count("}"))
    return paired


# -- shared -------------------------------------------------------------------


def _map_code(lines: List[str], ctx: FormatContext, rules) -> List[str]:
    """Apply regex rules to the code segments of every line."""
    segmenter = ctx.segmenter()
    result: List[str] = []
    for line in lines:
        pending = segmenter.pending_kind
        segments = segmenter.split(line)
        if pending:
            result.append(line)
            continue
        indent = leading_whitespace(line)
        parts: List[str] = []
        for segment in segments:
            text = segment.text
            if segment.is_code:
                head = text[: len(indent)] if segment.start == 0 else ""
                body = text[len(head) :]
                for pattern, replacement in rules:
                    body = pattern.sub(replacement, body)
                text = head + body
            parts.append(text)
        result.append("".join(parts).rstrip())
    return result


__all__ = [
    "break_object_literals",
    "close_void_tags",
    "insert_semicolons",
    "normalize_includes",
    "prefer_double_quotes",
    "quote_attributes",
    "sort_python_imports",
    "space_arrow_functions",
    "space_declarations",
    "split_css_rules",
    "terminate_declarations",
    "tidy_modifiers",
    "tidy_tags",
]
