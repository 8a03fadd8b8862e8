"""Plain-text reports rendered from Jinja2 templates."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader

from .models import DiagnosticResult, MetricsReport

TEMPLATES_DIR = Path(__file__).with_name("templates")


class ReportRenderer:
    """Renders diagnostics and metrics for terminal output.

    ``templates_dir`` is searched before the bundled templates, so a project
    can override either report by dropping a same-named file there.
    """

    def __init__(self, templates_dir: Optional[Path] = None) -> None:
        directories = [str(templates_dir)] if templates_dir else []
        directories.append(str(TEMPLATES_DIR))
        self.env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def diagnostics(self, result: DiagnosticResult, *, source: str, language: str) -> str:
        template = self.env.get_template("diagnostics.txt.j2")
        return template.render(result=result, source=source, language=language)

    def metrics(self, report: MetricsReport, *, source: str, language: str) -> str:
        template = self.env.get_template("metrics.txt.j2")
        return template.render(report=report, source=source, language=language)


__all__ = ["ReportRenderer", "TEMPLATES_DIR"]
