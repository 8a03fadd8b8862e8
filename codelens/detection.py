"""Heuristic language detection from file names and source content."""

from __future__ import annotations

from typing import Dict, Optional

from .languages import PROFILES, LanguageTag, lookup_extension
from .logging import get_logger
from .models import split_lines

logger = get_logger(__name__)

_MAX_LINES = 50
_MIN_SCORE = 3
_PATTERN_WEIGHT = 2
_KEYWORD_WEIGHT = 1

_SHEBANGS = (
    ("python", LanguageTag.PYTHON),
    ("node", LanguageTag.JAVASCRIPT),
    # Shell scripts are reported as javascript on purpose; the shebang only
    # has to beat the keyword heuristics, not classify the shell dialect.
    ("bash", LanguageTag.JAVASCRIPT),
    ("sh", LanguageTag.JAVASCRIPT),
)


def detect_from_filename(filename: Optional[str]) -> LanguageTag:
    """Return the language implied by ``filename``'s extension, or ``auto``."""
    if not filename or "." not in filename:
        return LanguageTag.AUTO
    extension = filename.rsplit(".", 1)[1].lower()
    tag = lookup_extension(extension)
    return tag if tag is not None else LanguageTag.AUTO


def detect_from_code(code: Optional[str]) -> LanguageTag:
    """Score the first lines of ``code`` against every language heuristic."""
    if not code or not code.strip():
        return LanguageTag.AUTO

    lines = split_lines(code)[:_MAX_LINES]
    scores: Dict[LanguageTag, int] = {
        tag: 0 for tag, profile in PROFILES.items() if profile.detect_patterns or profile.detect_keywords
    }

    for line in lines:
        trimmed = line.strip()
        if not trimmed:
            continue
        for tag in scores:
            profile = PROFILES[tag]
            for pattern in profile.detect_patterns:
                if pattern.search(trimmed):
                    scores[tag] += _PATTERN_WEIGHT
            for keyword in profile.detect_keywords:
                if keyword in trimmed:
                    scores[tag] += _KEYWORD_WEIGHT

    first_line = lines[0].strip()
    if first_line.startswith("#!"):
        for needle, tag in _SHEBANGS:
            if needle in first_line:
                logger.debug("Shebang %r selects %s", first_line, tag.value)
                return tag

    best_tag = LanguageTag.AUTO
    best_score = 0
    # dict order is table order, so strict comparison keeps the earlier language on ties
    for tag, score in scores.items():
        if score > best_score:
            best_tag, best_score = tag, score

    logger.debug(
        "Detection scores: %s",
        ", ".join(f"{tag.value}={score}" for tag, score in scores.items() if score),
    )
    if best_score < _MIN_SCORE:
        return LanguageTag.AUTO
    return best_tag


def detect_language(code: Optional[str], filename: Optional[str] = None) -> LanguageTag:
    """Detect by file name first, then by content."""
    if filename:
        from_name = detect_from_filename(filename)
        if from_name is not LanguageTag.AUTO:
            return from_name
    return detect_from_code(code)


__all__ = ["detect_from_code", "detect_from_filename", "detect_language"]
