"""Engine composition, settings and result shape."""

from __future__ import annotations

import pytest

from codelens.diagnostics import DiagnosticEngine, DiagnosticsConfig, detect_errors
from codelens.diagnostics.base import RuleSet, error
from codelens.models import DiagnosticResult


class _AlwaysFails(RuleSet):
    name = "always"

    def check(self, source, language):
        return [error(1, 1, "always", "Always reported", "Ignore me")]


def test_common_rules_apply_to_every_language() -> None:
    settings = DiagnosticsConfig(max_line_length=10)
    result = detect_errors("select 1;   \nselect a_long_column_name;\n", "sql", settings)
    kinds = [(item.kind, item.line, item.column) for item in result.warnings]
    assert ("trailing_whitespace", 1, 12) in kinds
    assert ("long_line", 2, 11) in kinds


def test_disabled_kinds_are_filtered() -> None:
    settings = DiagnosticsConfig(disabled=frozenset({"console_log"}))
    result = detect_errors("console.log(1);\n", "javascript", settings)
    assert "console_log" not in [item.kind for item in result.warnings]


def test_unknown_language_uses_javascript_rules() -> None:
    result = detect_errors("function foo {\n}\n", "cobol")
    assert [item.kind for item in result.errors] == ["missing_parentheses"]


def test_rule_sets_can_be_injected() -> None:
    engine = DiagnosticEngine(rule_sets=[_AlwaysFails()])
    result = engine.detect("anything", "go")
    assert [item.kind for item in result.errors] == ["always"]


def test_result_dictionary_shape() -> None:
    result = detect_errors("function foo(\n", "javascript")
    data = result.to_dict()
    assert set(data) == {"errors", "warnings", "is_valid", "error_count", "warning_count", "summary"}
    assert data["is_valid"] is False
    assert data["errors"][0]["severity"] == "error"
    assert data["summary"] == "1 error"


def test_summary_pluralizes() -> None:
    engine = DiagnosticEngine(rule_sets=[_AlwaysFails()], config=DiagnosticsConfig(max_line_length=3))
    result = engine.detect("abcd  \nefgh\n", "go")
    assert result.summary == "1 error and 3 warnings"
    assert DiagnosticResult().summary == "No syntax issues detected"


def test_invalid_line_length_is_rejected() -> None:
    with pytest.raises(ValueError):
        DiagnosticsConfig(max_line_length=0)


def test_config_from_mapping() -> None:
    config = DiagnosticsConfig.from_mapping({"max_line_length": "120", "disabled": "long_line"})
    assert config.max_line_length == 120
    assert config.disabled == frozenset({"long_line"})
    assert DiagnosticsConfig.from_mapping(None) == DiagnosticsConfig()
