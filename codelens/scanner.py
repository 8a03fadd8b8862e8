"""Bracket and quote balance scanning over raw source text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from .models import Diagnostic, Severity, split_lines

DEFAULT_PAIRS = "()[]{}<>"
DEFAULT_QUOTES = "\"'`"


@dataclass(frozen=True)
class _Open:
    char: str
    line: int
    column: int


class DelimiterScanner:
    """Single pass bracket matcher that ignores brackets inside quotes.

    ``pairs`` is a flat string of opener/closer characters, e.g. ``"()[]{}"``.
    Backslash escapes are not special-cased, so ``"a\\"b"`` ends the string
    early; this is a known approximation.
    """

    def __init__(self, pairs: str = DEFAULT_PAIRS, quotes: Iterable[str] = DEFAULT_QUOTES) -> None:
        if len(pairs) % 2:
            raise ValueError("pairs must contain opener/closer characters in pairs")
        self.closers: Dict[str, str] = {pairs[i + 1]: pairs[i] for i in range(0, len(pairs), 2)}
        self.openers = frozenset(self.closers.values())
        self.quotes = frozenset(quotes)

    def scan(self, code: str) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        if not self.closers:
            return diagnostics

        stack: List[_Open] = []
        quote: str | None = None
        for line, text in enumerate(split_lines(code), start=1):
            for column, char in enumerate(text, start=1):
                if char in self.quotes:
                    if quote is None:
                        quote = char
                    elif quote == char:
                        quote = None
                    continue
                if quote is not None:
                    continue

                if char in self.openers:
                    stack.append(_Open(char, line, column))
                elif char in self.closers:
                    expected = self.closers[char]
                    if stack and stack[-1].char == expected:
                        stack.pop()
                        continue
                    diagnostics.append(
                        Diagnostic(
                            line=line,
                            column=column,
                            severity=Severity.ERROR,
                            kind="unmatched_bracket",
                            message=f"Unmatched {char}",
                            suggestion=f"Check for missing opening {expected}",
                        )
                    )

        for opened in stack:
            closer = next(close for close, open_ in self.closers.items() if open_ == opened.char)
            diagnostics.append(
                Diagnostic(
                    line=opened.line,
                    column=opened.column,
                    severity=Severity.ERROR,
                    kind="unclosed_bracket",
                    message=f"Unclosed {opened.char}",
                    suggestion=f"Add closing {closer}",
                )
            )
        return diagnostics


def bracket_balance(code: str) -> Tuple[List[str], List[str]]:
    """Return ``(bad_closers, remaining_openers)`` ignoring strings entirely.

    This is the coarse check used by ``validate_code``; it does not know about
    quotes or comments.
    """
    pairs = {")": "(", "]": "[", "}": "{"}
    stack: List[str] = []
    bad: List[str] = []
    for char in code:
        if char in "([{":
            stack.append(char)
        elif char in pairs:
            last = stack.pop() if stack else None
            if last != pairs[char]:
                bad.append(char)
    return bad, stack


__all__ = ["DEFAULT_PAIRS", "DEFAULT_QUOTES", "DelimiterScanner", "bracket_balance"]
