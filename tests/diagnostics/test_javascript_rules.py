"""JavaScript and TypeScript diagnostics."""

from __future__ import annotations

from codelens.diagnostics import detect_errors


def _kinds(items) -> list[str]:
    return [item.kind for item in items]


def test_unclosed_function_call_is_the_only_error() -> None:
    result = detect_errors("function foo(", "javascript")
    assert _kinds(result.errors) == ["unclosed_bracket"]
    assert result.errors[0].line == 1
    assert result.warnings == ()
    assert not result.is_valid


def test_assignment_in_condition_warns() -> None:
    result = detect_errors("if (x = 1) {\n}\n", "javascript")
    [warning] = [item for item in result.warnings if item.kind == "assignment_in_condition"]
    assert (warning.line, warning.column) == (1, 7)
    assert result.is_valid


def test_comparison_in_condition_is_fine() -> None:
    result = detect_errors("let x = 2;\nif (x === 1 || x >= 2) {\n}\n", "javascript")
    assert "assignment_in_condition" not in _kinds(result.warnings)


def test_assignment_in_if_body_is_not_a_condition() -> None:
    result = detect_errors("if (ok) { y = f(); }\n", "javascript")
    assert "assignment_in_condition" not in _kinds(result.warnings)


def test_assignment_inside_nested_condition_parens() -> None:
    result = detect_errors("if ((m = re.exec(s))) { use(m); }\n", "javascript")
    [warning] = [item for item in result.warnings if item.kind == "assignment_in_condition"]
    assert (warning.line, warning.column) == (1, 8)


def test_function_without_parentheses() -> None:
    result = detect_errors("function foo {\n}\n", "javascript")
    assert _kinds(result.errors) == ["missing_parentheses"]
    assert (result.errors[0].line, result.errors[0].column) == (1, 1)


def test_invalid_regex_literal() -> None:
    result = detect_errors("const r = /(abc/;\n", "javascript")
    [regex_error] = [item for item in result.errors if item.kind == "invalid_regex"]
    assert regex_error.column == 11


def test_division_is_not_a_regex() -> None:
    result = detect_errors("const half = total / 2 / 1;\n", "javascript")
    assert "invalid_regex" not in _kinds(result.errors)


def test_unclosed_template_literal() -> None:
    result = detect_errors("const s = `abc\nconst t = 1;\n", "javascript")
    assert "unclosed_template_literal" in _kinds(result.errors)


def test_closed_multiline_template_literal() -> None:
    result = detect_errors("const s = `abc\ndef`;\n", "javascript")
    assert "unclosed_template_literal" not in _kinds(result.errors)


def test_console_log_and_undefined_variable_are_file_level() -> None:
    result = detect_errors("const a = 1;\nconsole.log(total);\n", "javascript")
    by_kind = {item.kind: item for item in result.warnings}
    assert by_kind["console_log"].line == 0
    assert by_kind["undefined_variable"].message == "Possible undefined variable: total"
    assert by_kind["undefined_variable"].line == 0


def test_typescript_uses_the_same_rules() -> None:
    result = detect_errors("function foo {\n}\n", "typescript")
    assert _kinds(result.errors) == ["missing_parentheses"]


def test_blank_input_is_valid() -> None:
    result = detect_errors("   \n", "javascript")
    assert result.is_valid
    assert result.summary == "No syntax issues detected"
