"""Per-language formatting pipelines and the quick structural validator."""

from __future__ import annotations

import json
from typing import Dict, List, Optional, Sequence

from ..failsafe import guarded
from ..languages import LanguageTag, get_profile, resolve_language
from ..logging import get_logger
from ..models import FormatOptions, ValidationIssue, ValidationResult, split_lines
from ..scanner import bracket_balance
from . import passes
from .context import FormatContext, Pass
from .indent import reindent_brackets, reindent_markup, reindent_python
from .jsonfix import format_json
from .spacing import normalize_python_spacing, normalize_spacing, strip_trailing

logger = get_logger(__name__)


_BRACE_PIPELINE: Sequence[Pass] = (reindent_brackets, normalize_spacing)

PIPELINES: Dict[LanguageTag, Sequence[Pass]] = {
    LanguageTag.JAVASCRIPT: (
        reindent_brackets,
        normalize_spacing,
        passes.insert_semicolons,
        passes.space_arrow_functions,
        passes.break_object_literals,
    ),
    LanguageTag.PYTHON: (
        reindent_python,
        normalize_python_spacing,
        passes.sort_python_imports,
        passes.prefer_double_quotes,
    ),
    LanguageTag.JAVA: (reindent_brackets, normalize_spacing, passes.tidy_modifiers),
    LanguageTag.CPP: (reindent_brackets, normalize_spacing, passes.normalize_includes),
    LanguageTag.HTML: (
        passes.tidy_tags,
        passes.quote_attributes,
        passes.close_void_tags,
        reindent_markup,
    ),
    LanguageTag.CSS: (
        passes.split_css_rules,
        passes.space_declarations,
        passes.terminate_declarations,
        reindent_brackets,
    ),
    LanguageTag.PHP: _BRACE_PIPELINE,
    LanguageTag.GO: _BRACE_PIPELINE,
    LanguageTag.RUST: _BRACE_PIPELINE,
    # keyword-delimited blocks: keep the author's indentation
    LanguageTag.RUBY: (normalize_spacing,),
    LanguageTag.SQL: (normalize_spacing,),
    # whitespace is significant in these
    LanguageTag.BASH: (strip_trailing,),
    LanguageTag.YAML: (strip_trailing,),
    LanguageTag.MARKDOWN: (strip_trailing,),
}
PIPELINES[LanguageTag.TYPESCRIPT] = PIPELINES[LanguageTag.JAVASCRIPT]


class Formatter:
    """Runs the pipeline registered for a language over normalized lines."""

    def __init__(self, options: Optional[FormatOptions] = None) -> None:
        self.options = options or FormatOptions()

    def format(self, code: str, language: object) -> str:
        if not code or not code.strip():
            return code
        tag = resolve_language(language)
        lines = split_lines(code)
        if tag is LanguageTag.JSON:
            return format_json("\n".join(lines), "\t" if self.options.use_tabs else self.options.indent_size)

        ctx = FormatContext(profile=get_profile(tag), options=self.options)
        for step in PIPELINES.get(tag, _BRACE_PIPELINE):
            lines = step(lines, ctx)
        logger.debug("Formatted %d line(s) as %s", len(lines), tag.value)
        return "\n".join(lines)


def _unformatted(code: str, language: object = None, options: Optional[FormatOptions] = None) -> str:
    return code


@guarded(_unformatted, operation="format")
def format_code(code: str, language: object = "javascript", options: Optional[FormatOptions] = None) -> str:
    """Reformat ``code``; any internal failure returns the input unchanged."""
    return Formatter(options).format(code, language)


def validate_code(code: str, language: object = "javascript") -> ValidationResult:
    """Coarse structural check: JSON parse plus a quote-blind bracket balance."""
    if not code or not code.strip():
        return ValidationResult()

    issues: List[ValidationIssue] = []
    if resolve_language(language) is LanguageTag.JSON:
        try:
            json.loads(code)
        except json.JSONDecodeError:
            issues.append(
                ValidationIssue(
                    type="invalid_json",
                    message="Invalid JSON format",
                    suggestion="Check for syntax errors like missing quotes or commas",
                )
            )

    bad_closers, unclosed = bracket_balance(code)
    for char in bad_closers:
        issues.append(
            ValidationIssue(
                type="unbalanced_brackets",
                message=f"Unbalanced bracket: {char}",
                suggestion="Check for matching opening and closing brackets",
            )
        )
    if unclosed:
        issues.append(
            ValidationIssue(
                type="unclosed_brackets",
                message="Unclosed brackets detected",
                suggestion="Add closing brackets for all opened brackets",
            )
        )
    return ValidationResult(issues=tuple(issues))


__all__ = ["Formatter", "PIPELINES", "format_code", "validate_code"]
