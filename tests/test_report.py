"""Plain-text report rendering."""

from __future__ import annotations

from pathlib import Path

from codelens.diagnostics import detect_errors
from codelens.engine import analyze_metrics
from codelens.report import ReportRenderer


def test_diagnostics_report_lists_findings_with_hints() -> None:
    result = detect_errors("function foo(\n", "javascript")
    text = ReportRenderer().diagnostics(result, source="app.js", language="javascript")
    lines = text.splitlines()
    assert lines[0] == "app.js (javascript): 1 error"
    assert lines[1] == "app.js:1:13: error [unclosed_bracket] Unclosed ("
    assert lines[2] == "    hint: Add closing )"


def test_clean_diagnostics_report() -> None:
    result = detect_errors("const a = 1;\n", "javascript")
    text = ReportRenderer().diagnostics(result, source="-", language="javascript")
    assert text.strip() == "- (javascript): No syntax issues detected"


def test_metrics_report_sections() -> None:
    report = analyze_metrics("console.log(total);\n", "javascript")
    text = ReportRenderer().metrics(report, source="app.js", language="javascript")
    assert text.startswith(f"app.js (javascript): overall {report.overall}/100\n")
    assert "Complexity   cyclomatic 1 (Low), max nesting 0" in text
    assert "[medium] potential_undefined (line 1): Potential undefined variable 'total'" in text


def test_custom_templates_override_bundled_ones(tmp_path: Path) -> None:
    (tmp_path / "diagnostics.txt.j2").write_text("{{ result.error_count }} errors in {{ source }}\n", encoding="utf-8")
    renderer = ReportRenderer(templates_dir=tmp_path)
    result = detect_errors("(", "javascript")
    assert renderer.diagnostics(result, source="x.js", language="javascript") == "1 errors in x.js\n"
    assert "overall" in renderer.metrics(analyze_metrics("a;", "javascript"), source="x.js", language="javascript")
