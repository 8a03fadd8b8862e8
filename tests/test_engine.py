"""Package-level entry points."""

from __future__ import annotations

import codelens
from codelens.engine import resolve_for_analysis
from codelens.languages import LanguageTag


def test_package_exports_the_six_operations() -> None:
    for name in (
        "detect_language",
        "highlight",
        "detect_errors",
        "analyze_metrics",
        "format_code",
        "validate_code",
    ):
        assert callable(getattr(codelens, name))


def test_explicit_language_wins() -> None:
    assert resolve_for_analysis("def f(): pass", "javascript") is LanguageTag.JAVASCRIPT
    assert resolve_for_analysis("x", "cobol") is LanguageTag.JAVASCRIPT


def test_auto_and_missing_language_detect() -> None:
    assert resolve_for_analysis("", "auto", "x.py") is LanguageTag.PYTHON
    assert resolve_for_analysis("", None) is LanguageTag.AUTO


def test_end_to_end_round_through_entry_points() -> None:
    code = "def f()\n    return 1\n"
    language = codelens.detect_language(code, "f.py")
    assert language is LanguageTag.PYTHON
    assert not codelens.detect_errors(code, language).is_valid
    assert codelens.analyze_metrics(code, language).structure.functions == 1
    assert codelens.validate_code(code, language).is_valid
    assert 'class="token keyword">def<' in codelens.highlight(code, language)
