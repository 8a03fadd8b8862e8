"""Single-pass tokenizer and HTML highlighter.

Every line is scanned once from left to right. At each position the candidate
token classes are tried in priority order and the first match consumes its
text, so no character can end up inside two spans.
"""

from __future__ import annotations

import html
import re
from typing import List, Optional

from .failsafe import guarded
from .languages import LanguageProfile, LanguageTag, get_profile
from .models import Token, TokenKind, split_lines

_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")
_NUMBER = re.compile(r"0[xX][0-9a-fA-F]+|\d+(?:\.\d+)?(?:[eE][+-]?\d+)?")
_OPERATOR = re.compile(r"===|!==|==|!=|<=|>=|=>|&&|\|\||\+\+|--|[+\-*/%]=?|[=!<>?:&|^~]")
_PUNCTUATION = re.compile(r"[{}()\[\].,;]")
_SPACE = re.compile(r"\s+")

_FUNCTION_INTRODUCERS = frozenset({"def", "function", "fn", "func"})
_CLASS_INTRODUCERS = frozenset(
    {"class", "interface", "struct", "extends", "implements", "new", "enum", "trait"}
)

_HTML_TAG_OPEN = re.compile(r"</?[A-Za-z][A-Za-z0-9:-]*")
_HTML_DOCTYPE = re.compile(r"<!doctype[^>]*>", re.IGNORECASE)
_HTML_ATTRIBUTE = re.compile(r"[A-Za-z_:@][-A-Za-z0-9_:.]*")

_CSS_DECLARATION = re.compile(r"^\s*[-A-Za-z]+\s*:(?!:)")
_CSS_AT_RULE = re.compile(r"@[-A-Za-z]+")
_CSS_SELECTOR = re.compile(r"[^{},/\"']+")
_CSS_PROPERTY = re.compile(r"-?[A-Za-z][-A-Za-z0-9]*")
_CSS_NUMBER = re.compile(r"-?(?:\d*\.\d+|\d+)(?:px|em|rem|%|vh|vw|vmin|vmax|pt|s|ms|deg|fr)?\b%?")
_CSS_VALUE = re.compile(r"[^;}\s\"'/]+")


def tokenize_line(line: str, language: object = LanguageTag.JAVASCRIPT) -> List[Token]:
    """Return the classified, non-overlapping spans of ``line`` ordered by start."""
    profile = get_profile(language)
    if profile.tag is LanguageTag.HTML:
        return _tokenize_html(line)
    if profile.tag is LanguageTag.CSS:
        return _tokenize_css(line)
    return _tokenize_code(line, profile)


def highlight_line(line: str, language: object = LanguageTag.JAVASCRIPT) -> str:
    """Escape ``line`` and wrap each token in ``<span class="token KIND">``."""
    if not line.strip():
        return html.escape(line)
    parts: List[str] = []
    cursor = 0
    for token in tokenize_line(line, language):
        if token.start > cursor:
            parts.append(html.escape(line[cursor:token.start]))
        parts.append(f'<span class="token {token.kind.value}">{html.escape(token.text)}</span>')
        cursor = token.end
    parts.append(html.escape(line[cursor:]))
    return "".join(parts)


def _escape_all(code: str, language: object = None) -> str:
    return html.escape(code or "")


@guarded(_escape_all, operation="highlight")
def highlight(code: str, language: object = LanguageTag.JAVASCRIPT) -> str:
    """Highlight every line of ``code``; unknown languages use javascript rules."""
    if not code or not code.strip():
        return html.escape(code or "")
    return "\n".join(highlight_line(line, language) for line in split_lines(code))


def _tokenize_code(line: str, profile: LanguageProfile) -> List[Token]:
    tokens: List[Token] = []
    keywords = _keyword_set(profile)
    previous_keyword: Optional[str] = None
    position = 0
    length = len(line)
    block_opener = profile.block_comment[0] if profile.block_comment else None
    block_closer = profile.block_comment[1] if profile.block_comment else None

    # A leading "*" continues a C-style block comment started on an earlier line.
    stripped = line.lstrip()
    if block_opener == "/*" and (stripped.startswith("* ") or stripped in ("*", "*/")):
        start = length - len(stripped)
        return [Token(TokenKind.COMMENT, line[start:], start, length)]

    while position < length:
        char = line[position]

        space = _SPACE.match(line, position)
        if space:
            position = space.end()
            continue

        comment_end = _match_comment(line, position, profile.line_comments, block_opener, block_closer)
        if comment_end is not None:
            tokens.append(Token(TokenKind.COMMENT, line[position:comment_end], position, comment_end))
            position = comment_end
            previous_keyword = None
            continue

        if char in profile.string_delimiters:
            end = _string_end(line, position)
            tokens.append(Token(TokenKind.STRING, line[position:end], position, end))
            position = end
            previous_keyword = None
            continue

        identifier = _IDENTIFIER.match(line, position)
        if identifier:
            word = identifier.group()
            end = identifier.end()
            lookup = word.lower() if profile.keywords_ignore_case else word
            if lookup in keywords:
                tokens.append(Token(TokenKind.KEYWORD, word, position, end))
                previous_keyword = lookup
            else:
                kind = _classify_identifier(line, end, previous_keyword)
                if kind is not None:
                    tokens.append(Token(kind, word, position, end))
                previous_keyword = None
            position = end
            continue

        number = _NUMBER.match(line, position)
        if number:
            tokens.append(Token(TokenKind.NUMBER, number.group(), position, number.end()))
            position = number.end()
            previous_keyword = None
            continue

        operator = _OPERATOR.match(line, position)
        if operator:
            tokens.append(Token(TokenKind.OPERATOR, operator.group(), position, operator.end()))
            position = operator.end()
            previous_keyword = None
            continue

        if _PUNCTUATION.match(line, position):
            tokens.append(Token(TokenKind.PUNCTUATION, char, position, position + 1))
        position += 1
        previous_keyword = None
    return tokens


def _classify_identifier(line: str, end: int, previous_keyword: Optional[str]) -> Optional[TokenKind]:
    if previous_keyword in _CLASS_INTRODUCERS:
        return TokenKind.CLASS
    if previous_keyword in _FUNCTION_INTRODUCERS:
        return TokenKind.FUNCTION
    rest = line[end:].lstrip()
    if rest.startswith("("):
        return TokenKind.FUNCTION
    return None


def _keyword_set(profile: LanguageProfile) -> frozenset:
    if profile.keywords_ignore_case:
        return frozenset(word.lower() for word in profile.keywords)
    return frozenset(profile.keywords)


def _match_comment(
    line: str,
    position: int,
    line_comments: tuple,
    block_opener: Optional[str],
    block_closer: Optional[str],
) -> Optional[int]:
    for marker in line_comments:
        if line.startswith(marker, position):
            return len(line)
    if block_opener and line.startswith(block_opener, position):
        closing = line.find(block_closer, position + len(block_opener))
        if closing == -1:
            return len(line)
        return closing + len(block_closer)
    return None


def _string_end(line: str, position: int) -> int:
    """Index just past the closing quote, or the end of line when unterminated."""
    quote = line[position]
    index = position + 1
    while index < len(line):
        if line[index] == "\\":
            index += 2
            continue
        if line[index] == quote:
            return index + 1
        index += 1
    return len(line)


# ----------------------------------------------------------------------
# HTML


def _tokenize_html(line: str) -> List[Token]:
    tokens: List[Token] = []
    position = 0
    length = len(line)
    in_tag = False

    while position < length:
        char = line[position]

        if line.startswith("<!--", position):
            closing = line.find("-->", position + 4)
            end = length if closing == -1 else closing + 3
            tokens.append(Token(TokenKind.COMMENT, line[position:end], position, end))
            position = end
            continue

        if not in_tag:
            doctype = _HTML_DOCTYPE.match(line, position)
            if doctype:
                tokens.append(Token(TokenKind.KEYWORD, doctype.group(), position, doctype.end()))
                position = doctype.end()
                continue
            tag = _HTML_TAG_OPEN.match(line, position)
            if tag:
                tokens.append(Token(TokenKind.TAG, tag.group(), position, tag.end()))
                position = tag.end()
                in_tag = True
                continue
            position += 1
            continue

        if char == ">" or line.startswith("/>", position):
            end = position + (1 if char == ">" else 2)
            tokens.append(Token(TokenKind.PUNCTUATION, line[position:end], position, end))
            position = end
            in_tag = False
            continue
        if char in "\"'":
            end = _string_end(line, position)
            tokens.append(Token(TokenKind.STRING, line[position:end], position, end))
            position = end
            continue
        if char == "=":
            tokens.append(Token(TokenKind.OPERATOR, char, position, position + 1))
            position += 1
            continue
        attribute = _HTML_ATTRIBUTE.match(line, position)
        if attribute:
            tokens.append(Token(TokenKind.ATTRIBUTE, attribute.group(), position, attribute.end()))
            position = attribute.end()
            continue
        position += 1
    return tokens


# ----------------------------------------------------------------------
# CSS


def _tokenize_css(line: str) -> List[Token]:
    tokens: List[Token] = []
    position = 0
    length = len(line)
    if "{" in line or not _CSS_DECLARATION.match(line):
        state = "selector"
    else:
        state = "property"

    while position < length:
        char = line[position]

        if char.isspace():
            position += 1
            continue
        if line.startswith("/*", position):
            closing = line.find("*/", position + 2)
            end = length if closing == -1 else closing + 2
            tokens.append(Token(TokenKind.COMMENT, line[position:end], position, end))
            position = end
            continue
        if char in "\"'":
            end = _string_end(line, position)
            tokens.append(Token(TokenKind.STRING, line[position:end], position, end))
            position = end
            continue
        at_rule = _CSS_AT_RULE.match(line, position)
        if at_rule:
            tokens.append(Token(TokenKind.KEYWORD, at_rule.group(), position, at_rule.end()))
            position = at_rule.end()
            continue
        if char in "{}":
            tokens.append(Token(TokenKind.PUNCTUATION, char, position, position + 1))
            state = "property" if char == "{" else "selector"
            position += 1
            continue
        if char in ",;":
            tokens.append(Token(TokenKind.PUNCTUATION, char, position, position + 1))
            if char == ";":
                state = "property"
            position += 1
            continue

        if state == "selector":
            selector = _CSS_SELECTOR.match(line, position)
            if selector:
                text = selector.group().rstrip()
                end = position + len(text)
                tokens.append(Token(TokenKind.SELECTOR, text, position, end))
                position = end
                continue
        elif state == "property":
            if char == ":":
                tokens.append(Token(TokenKind.PUNCTUATION, char, position, position + 1))
                state = "value"
                position += 1
                continue
            prop = _CSS_PROPERTY.match(line, position)
            if prop:
                tokens.append(Token(TokenKind.PROPERTY, prop.group(), position, prop.end()))
                position = prop.end()
                continue
        else:
            number = _CSS_NUMBER.match(line, position)
            if number and (position == 0 or not line[position - 1].isalnum()):
                tokens.append(Token(TokenKind.NUMBER, number.group(), position, number.end()))
                position = number.end()
                continue
            if line.startswith("!important", position):
                end = position + len("!important")
                tokens.append(Token(TokenKind.KEYWORD, line[position:end], position, end))
                position = end
                continue
            value = _CSS_VALUE.match(line, position)
            if value:
                tokens.append(Token(TokenKind.VALUE, value.group(), position, value.end()))
                position = value.end()
                continue
        position += 1
    return tokens


__all__ = ["highlight", "highlight_line", "tokenize_line"]
