"""Quality, complexity and structure metrics."""

from __future__ import annotations

import pytest

from codelens.engine import analyze_metrics
from codelens.metrics import complexity_level, quality_level, structure_score
from codelens.models import MetricsReport
from tests._fixtures.source_tree import dedent

BRANCHY_JS = dedent(
    """
    function check(a) {
      if (a > 1) {
        return 1;
      }
      if (a > 2) {
        return 2;
      }
      if (a > 3) {
        return 3;
      }
      for (let i = 0; i < a; i++) {
        a += i;
      }
      return 0;
    }
    """
)


def test_blank_code_gives_empty_report() -> None:
    report = analyze_metrics("  \n", "javascript")
    assert report == MetricsReport()
    assert report.overall == 0


def test_javascript_complexity_and_structure() -> None:
    report = analyze_metrics(BRANCHY_JS, "javascript")
    assert report.complexity.control_structures == 4
    assert report.complexity.cyclomatic_complexity == 5
    assert report.complexity.complexity_level == "Low"
    assert report.complexity.max_nesting == 1
    assert report.structure.functions == 1
    assert report.structure.max_function_length == 15
    assert report.structure.structure_score == 70


def test_basic_line_counts() -> None:
    code = "// header\n\nconst a = 1;\n"
    basic = analyze_metrics(code, "javascript").basic
    assert basic.total_lines == 4
    assert basic.code_lines == 2
    assert basic.empty_lines == 2
    assert basic.comment_lines == 1
    assert basic.comment_ratio == pytest.approx(0.5)
    assert basic.total_characters == len(code)


def test_carriage_returns_count_as_line_breaks() -> None:
    basic = analyze_metrics("const a = 1;\rconst b = 2;\r\nconst c = 3;", "javascript").basic
    assert basic.total_lines == 3
    assert basic.code_lines == 3


def test_python_structure() -> None:
    code = dedent(
        """
        import os
        from sys import argv

        class Runner:
            def run(self):
                return os.getcwd()

        if __name__ == "__main__":
            Runner().run()
        """
    )
    structure = analyze_metrics(code, "python").structure
    assert structure.functions == 1
    assert structure.max_function_length == 2
    assert structure.classes == 1
    assert structure.imports == 2
    assert structure.has_main_function is True


def test_keywords_in_strings_do_not_count_as_control_flow() -> None:
    report = analyze_metrics('const s = "if for while";\n', "javascript")
    assert report.complexity.control_structures == 0


def test_issue_summary_collects_quality_and_code_issues() -> None:
    code = "total = 1\n" + "x" * 120 + ";\n"
    issues = analyze_metrics(code, "javascript").issues
    assert issues.by_category["long_line"] == 1
    assert issues.by_category["missing_semicolon"] == 1
    assert issues.by_severity["low"] >= 2
    assert issues.total_issues == len(issues.issues)


def test_potential_undefined_is_medium_severity() -> None:
    issues = analyze_metrics("console.log(total);\n", "javascript").issues
    [undefined] = [item for item in issues.issues if item.type == "potential_undefined"]
    assert undefined.severity == "medium"
    assert undefined.line == 1


def test_scores_stay_in_range() -> None:
    huge = "\n".join(f"if (a{i} && b{i} || c{i}) {{ x{i} = {i} }}" for i in range(200))
    report = analyze_metrics(huge, "javascript")
    for value in (
        report.overall,
        report.quality.maintainability_index,
        report.quality.readability_score,
        report.structure.structure_score,
    ):
        assert 0 <= value <= 100
    assert report.complexity.complexity_level == "Very High"


def test_report_serializes_to_plain_dict() -> None:
    data = analyze_metrics(BRANCHY_JS, "javascript").to_dict()
    assert set(data) == {"basic", "complexity", "quality", "structure", "issues", "overall"}
    assert data["complexity"]["cyclomatic_complexity"] == 5


@pytest.mark.parametrize(
    ("cyclomatic", "level"),
    [(1, "Low"), (5, "Low"), (6, "Medium"), (10, "Medium"), (11, "High"), (21, "Very High")],
)
def test_complexity_levels(cyclomatic: int, level: str) -> None:
    assert complexity_level(cyclomatic) == level


def test_quality_levels() -> None:
    assert quality_level(90, 0) == "Excellent"
    assert quality_level(90, 1) == "Good"
    assert quality_level(50, 4) == "Fair"
    assert quality_level(30, 0) == "Needs Improvement"


def test_structure_score_bounds() -> None:
    assert structure_score(0, 0, 0.0) == 50
    assert structure_score(3, 1, 10.0) == 80
    assert structure_score(12, 0, 60.0) == 0
