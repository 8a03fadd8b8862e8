"""Split source lines into code, string and comment segments.

The segmenter keeps state between lines so block comments, template literals
and triple-quoted strings that span several lines stay classified.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .languages import LanguageProfile, LanguageTag

CODE = "code"
STRING = "string"
COMMENT = "comment"

_TRIPLE_QUOTES = ('"""', "'''")


@dataclass(frozen=True)
class Segment:
    kind: str
    text: str
    start: int

    @property
    def end(self) -> int:
        return self.start + len(self.text)

    @property
    def is_code(self) -> bool:
        return self.kind == CODE


class Segmenter:
    """Line-by-line segmenter; create one per document."""

    def __init__(
        self,
        quotes: Iterable[str] = ('"', "'", "`"),
        line_comments: Sequence[str] = ("//",),
        block_comment: Optional[Tuple[str, str]] = ("/*", "*/"),
        *,
        triple_quotes: bool = False,
        multiline_quotes: Iterable[str] = ("`",),
    ) -> None:
        self.quotes = frozenset(quotes)
        self.line_comments = tuple(line_comments)
        self.block_comment = block_comment
        self.triple_quotes = triple_quotes
        self.multiline_quotes = frozenset(multiline_quotes) & self.quotes
        self._pending: Optional[Tuple[str, str]] = None

    @classmethod
    def for_profile(cls, profile: LanguageProfile) -> "Segmenter":
        return cls(
            quotes=profile.string_delimiters,
            line_comments=profile.line_comments,
            block_comment=profile.block_comment,
            triple_quotes=profile.tag is LanguageTag.PYTHON,
            multiline_quotes=("`",) if profile.tag in (LanguageTag.JAVASCRIPT, LanguageTag.TYPESCRIPT, LanguageTag.GO) else (),
        )

    @property
    def in_literal(self) -> bool:
        """True while a multi-line string or comment is still open."""
        return self._pending is not None

    @property
    def pending_kind(self) -> Optional[str]:
        return self._pending[0] if self._pending else None

    def split(self, line: str) -> List[Segment]:
        segments: List[Segment] = []
        index = 0
        length = len(line)

        if self._pending is not None:
            kind, closer = self._pending
            end = self._find_closer(line, 0, closer)
            if end == -1:
                return [Segment(kind, line, 0)] if line else []
            segments.append(Segment(kind, line[:end], 0))
            self._pending = None
            index = end

        code_start = index
        while index < length:
            marker = self._line_comment_at(line, index)
            if marker:
                _flush(segments, line, code_start, index)
                segments.append(Segment(COMMENT, line[index:], index))
                return segments

            if self.block_comment and line.startswith(self.block_comment[0], index):
                _flush(segments, line, code_start, index)
                opener, closer = self.block_comment
                closing = line.find(closer, index + len(opener))
                if closing == -1:
                    segments.append(Segment(COMMENT, line[index:], index))
                    self._pending = (COMMENT, closer)
                    return segments
                end = closing + len(closer)
                segments.append(Segment(COMMENT, line[index:end], index))
                index = code_start = end
                continue

            triple = self._triple_at(line, index)
            if triple:
                _flush(segments, line, code_start, index)
                end = self._find_closer(line, index + 3, triple)
                if end == -1:
                    segments.append(Segment(STRING, line[index:], index))
                    self._pending = (STRING, triple)
                    return segments
                segments.append(Segment(STRING, line[index:end], index))
                index = code_start = end
                continue

            char = line[index]
            if char in self.quotes:
                _flush(segments, line, code_start, index)
                end = self._find_closer(line, index + 1, char)
                if end == -1:
                    segments.append(Segment(STRING, line[index:], index))
                    if char in self.multiline_quotes:
                        self._pending = (STRING, char)
                    return segments
                segments.append(Segment(STRING, line[index:end], index))
                index = code_start = end
                continue
            index += 1

        _flush(segments, line, code_start, length)
        return segments

    def _line_comment_at(self, line: str, index: int) -> Optional[str]:
        for marker in self.line_comments:
            if line.startswith(marker, index):
                return marker
        return None

    def _triple_at(self, line: str, index: int) -> Optional[str]:
        if not self.triple_quotes:
            return None
        for triple in _TRIPLE_QUOTES:
            if line.startswith(triple, index):
                return triple
        return None

    @staticmethod
    def _find_closer(line: str, index: int, closer: str) -> int:
        """Index just past ``closer`` honoring backslash escapes, or -1."""
        while index < len(line):
            if line[index] == "\\" and closer != "*/" and closer != "-->":
                index += 2
                continue
            if line.startswith(closer, index):
                return index + len(closer)
            index += 1
        return -1


def _flush(segments: List[Segment], line: str, start: int, end: int) -> None:
    if end > start:
        segments.append(Segment(CODE, line[start:end], start))


def code_only(segments: Iterable[Segment]) -> str:
    """Concatenate code segments, dropping strings and comments."""
    return "".join(segment.text for segment in segments if segment.is_code)


def mask(segments: Iterable[Segment], *, keep_quotes: bool = False) -> str:
    """Rebuild the line with string and comment text blanked out.

    Column positions are preserved. With ``keep_quotes`` the delimiters of each
    string stay in place so the masked text still shows where literals are.
    """
    parts: List[str] = []
    for segment in segments:
        if segment.is_code:
            parts.append(segment.text)
        elif keep_quotes and segment.kind == STRING and len(segment.text) >= 2:
            parts.append(segment.text[0] + " " * (len(segment.text) - 2) + segment.text[-1])
        else:
            parts.append(" " * len(segment.text))
    return "".join(parts)


def mask_lines(lines: Iterable[str], profile: LanguageProfile) -> List[str]:
    segmenter = Segmenter.for_profile(profile)
    return [mask(segmenter.split(line)) for line in lines]


__all__ = [
    "CODE",
    "COMMENT",
    "STRING",
    "Segment",
    "Segmenter",
    "code_only",
    "mask",
    "mask_lines",
]
