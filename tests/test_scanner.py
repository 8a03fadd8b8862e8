"""Delimiter scanner and the coarse bracket balance helper."""

from __future__ import annotations

import pytest

from codelens.models import Severity
from codelens.scanner import DelimiterScanner, bracket_balance


def _scanner() -> DelimiterScanner:
    return DelimiterScanner("()[]{}", "\"'`")


def test_balanced_code_has_no_findings() -> None:
    assert _scanner().scan("if (a[0]) { call(b); }") == []


def test_unclosed_bracket_reports_opener_position() -> None:
    [diagnostic] = _scanner().scan("function foo(")
    assert diagnostic.kind == "unclosed_bracket"
    assert diagnostic.severity is Severity.ERROR
    assert (diagnostic.line, diagnostic.column) == (1, 13)
    assert diagnostic.message == "Unclosed ("
    assert diagnostic.suggestion == "Add closing )"


def test_unmatched_closer_reports_its_position() -> None:
    [diagnostic] = _scanner().scan("x = 1\ny)")
    assert diagnostic.kind == "unmatched_bracket"
    assert (diagnostic.line, diagnostic.column) == (2, 2)
    assert diagnostic.suggestion == "Check for missing opening ("


def test_line_numbers_follow_every_line_break_style() -> None:
    [diagnostic] = _scanner().scan("a = 1\rb = 2\r\nc)")
    assert (diagnostic.line, diagnostic.column) == (3, 2)


def test_brackets_inside_quotes_are_ignored() -> None:
    assert _scanner().scan("const s = '(' + \"[\" + `{`;") == []


def test_mismatched_closer_keeps_opener_on_stack() -> None:
    kinds = [item.kind for item in _scanner().scan("(]")]
    assert kinds == ["unmatched_bracket", "unclosed_bracket"]


def test_odd_pairs_are_rejected() -> None:
    with pytest.raises(ValueError):
        DelimiterScanner("(")


def test_empty_pairs_disable_scanning() -> None:
    assert DelimiterScanner("", "").scan("((((") == []


def test_bracket_balance_pops_on_mismatch() -> None:
    assert bracket_balance("(]") == (["]"], [])
    assert bracket_balance("{[") == ([], ["{", "["])
    assert bracket_balance("')'") == ([")"], [])
