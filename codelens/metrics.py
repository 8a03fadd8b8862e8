"""Line-based quality, complexity and structure metrics."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Pattern, Sequence, Tuple

from .heuristics import undefined_names
from .languages import LanguageProfile, LanguageTag, get_profile
from .logging import get_logger
from .models import (
    BasicMetrics,
    CodeIssue,
    ComplexityMetrics,
    IssueSummary,
    MetricsReport,
    QualityMetrics,
    StructureMetrics,
    split_lines,
)
from .segments import mask_lines

logger = get_logger(__name__)

LONG_LINE = 100
DEEP_NESTING = 3

_SEMICOLON_EXEMPT_START = ("//", "/*", "*", "}", "function", "const", "let", "var", "class")
_SEMICOLON_EXEMPT_END = ("{", "}", ";")
_LOOP_WORDS = re.compile(r"\b(?:if|for|while)\b")


@dataclass(frozen=True)
class FunctionSpan:
    name: str
    line: int
    length: int


def analyze(code: str, language: object = LanguageTag.JAVASCRIPT) -> MetricsReport:
    """Compute the full metrics report; blank input gives the empty report."""
    if not code or not code.strip():
        return MetricsReport()

    profile = get_profile(language)
    lines = split_lines(code)
    masked = mask_lines(lines, profile)

    basic = basic_metrics(code, lines, profile)
    complexity = complexity_metrics(masked, profile)
    quality_issues = detect_quality_issues(lines, complexity.max_nesting)
    quality = quality_metrics(lines, profile, basic, complexity, quality_issues)
    structure = structure_metrics(code, masked, profile)
    issues = summarize_issues(quality_issues + detect_code_issues(code, masked, profile))

    report = MetricsReport(
        basic=basic,
        complexity=complexity,
        quality=quality,
        structure=structure,
        issues=issues,
        overall=overall_score(quality, complexity, structure, issues),
    )
    logger.debug("Metrics for %s: overall=%d", profile.tag.value, report.overall)
    return report


def basic_metrics(code: str, lines: Sequence[str], profile: LanguageProfile) -> BasicMetrics:
    total_lines = len(lines)
    code_lines = sum(1 for line in lines if line.strip())
    comment_lines = sum(1 for line in lines if profile.is_comment_line(line))
    return BasicMetrics(
        total_lines=total_lines,
        code_lines=code_lines,
        empty_lines=total_lines - code_lines,
        comment_lines=comment_lines,
        comment_ratio=comment_lines / code_lines if code_lines else 0.0,
        total_characters=len(code),
        non_whitespace_characters=len(re.sub(r"\s", "", code)),
        average_line_length=len(code) / total_lines if total_lines else 0.0,
    )


def complexity_metrics(lines: Sequence[str], profile: LanguageProfile) -> ComplexityMetrics:
    start_patterns, end_patterns = _control_patterns(profile.tag)
    control_structures = 0
    nesting = 0
    max_nesting = 0

    for line in lines:
        trimmed = line.strip()
        if not trimmed:
            continue
        for pattern in start_patterns:
            if pattern.search(trimmed):
                control_structures += 1
                nesting += 1
                max_nesting = max(max_nesting, nesting)
        for pattern in end_patterns:
            if pattern.search(trimmed):
                nesting = max(0, nesting - 1)

    cyclomatic = control_structures + 1
    return ComplexityMetrics(
        control_structures=control_structures,
        max_nesting=max_nesting,
        cyclomatic_complexity=cyclomatic,
        complexity_level=complexity_level(cyclomatic),
    )


def complexity_level(cyclomatic: int) -> str:
    if cyclomatic <= 5:
        return "Low"
    if cyclomatic <= 10:
        return "Medium"
    if cyclomatic <= 20:
        return "High"
    return "Very High"


def quality_metrics(
    lines: Sequence[str],
    profile: LanguageProfile,
    basic: BasicMetrics,
    complexity: ComplexityMetrics,
    issues: Sequence[CodeIssue],
) -> QualityMetrics:
    logical_lines = sum(1 for line in lines if line.strip() and not profile.is_comment_line(line))
    maintainability = _clamp(
        _js_round(100 - logical_lines * 0.1 - complexity.cyclomatic_complexity * 2)
    )
    long_line_penalty = max(0.0, (basic.average_line_length - 40) * 2)
    readability = _clamp(_js_round(100 - long_line_penalty + basic.comment_ratio * 20))
    return QualityMetrics(
        maintainability_index=maintainability,
        readability_score=readability,
        quality_issues=len(issues),
        issue_breakdown=tuple(issues),
        quality_level=quality_level(maintainability, len(issues)),
    )


def quality_level(maintainability: int, issue_count: int) -> str:
    if maintainability >= 80 and issue_count == 0:
        return "Excellent"
    if maintainability >= 60 and issue_count <= 2:
        return "Good"
    if maintainability >= 40 and issue_count <= 5:
        return "Fair"
    return "Needs Improvement"


def structure_metrics(code: str, masked: Sequence[str], profile: LanguageProfile) -> StructureMetrics:
    masked_code = "\n".join(masked)
    functions = function_spans(masked, profile)
    classes = len(profile.class_pattern.findall(masked_code)) if profile.class_pattern else 0
    imports = len(profile.import_pattern.findall(masked_code)) if profile.import_pattern else 0
    lengths = [span.length for span in functions]
    average = sum(lengths) / len(lengths) if lengths else 0.0
    return StructureMetrics(
        functions=len(functions),
        classes=classes,
        imports=imports,
        avg_function_length=average,
        max_function_length=max(lengths, default=0),
        has_main_function=bool(profile.main_pattern and profile.main_pattern.search(code)),
        structure_score=structure_score(len(functions), classes, average),
    )


def function_spans(masked: Sequence[str], profile: LanguageProfile) -> List[FunctionSpan]:
    """Locate function definitions and measure how many lines each spans."""
    if profile.function_pattern is None:
        return []
    masked_code = "\n".join(masked)
    keywords = frozenset(word.lower() for word in profile.keywords)
    spans: List[FunctionSpan] = []

    for match in profile.function_pattern.finditer(masked_code):
        name = next((group for group in match.groups() if group), "anonymous")
        if name.lower() in keywords:
            continue
        line_index = masked_code.count("\n", 0, match.start())
        if profile.block_style == "indent":
            length = _indent_span(masked, line_index)
        else:
            length = _brace_span(masked_code, match.start(), line_index)
        spans.append(FunctionSpan(name=name, line=line_index + 1, length=length))
    return spans


def structure_score(functions: int, classes: int, average_length: float) -> int:
    score = 50
    if 0 < functions <= 10:
        score += 20
    if functions > 10:
        score -= 10
    if classes > 0:
        score += 10
    if average_length > 30:
        score -= 20
    if average_length > 50:
        score -= 20
    return _clamp(score)


def detect_quality_issues(lines: Sequence[str], max_nesting: int) -> List[CodeIssue]:
    issues: List[CodeIssue] = []
    for number, line in enumerate(lines, start=1):
        if len(line) > LONG_LINE:
            issues.append(
                CodeIssue(
                    type="long_line",
                    severity="low",
                    message=f"Line {number} is too long ({len(line)} characters)",
                    line=number,
                )
            )
    if max_nesting > DEEP_NESTING:
        issues.append(
            CodeIssue(
                type="deep_nesting",
                severity="medium",
                message=f"Code has deep nesting ({max_nesting} levels)",
                line=0,
            )
        )
    return issues


def detect_code_issues(code: str, masked: Sequence[str], profile: LanguageProfile) -> List[CodeIssue]:
    """Crude language heuristics; every finding here is a hint, not a fact."""
    if not profile.is_code:
        return []
    issues: List[CodeIssue] = []

    if profile.tag in (LanguageTag.JAVASCRIPT, LanguageTag.TYPESCRIPT):
        for number, line in enumerate(masked, start=1):
            trimmed = line.strip()
            if not trimmed or trimmed.startswith(_SEMICOLON_EXEMPT_START):
                continue
            if trimmed.endswith(_SEMICOLON_EXEMPT_END) or _LOOP_WORDS.search(trimmed):
                continue
            issues.append(
                CodeIssue(
                    type="missing_semicolon",
                    severity="low",
                    message=f"Possible missing semicolon at line {number}",
                    line=number,
                )
            )

    for name, number in undefined_names(code, profile):
        issues.append(
            CodeIssue(
                type="potential_undefined",
                severity="medium",
                message=f"Potential undefined variable '{name}'",
                line=number,
            )
        )
    return issues


def summarize_issues(issues: Sequence[CodeIssue]) -> IssueSummary:
    by_severity = {"high": 0, "medium": 0, "low": 0}
    by_category: Dict[str, int] = {}
    for issue in issues:
        by_severity[issue.severity] = by_severity.get(issue.severity, 0) + 1
        by_category[issue.type] = by_category.get(issue.type, 0) + 1
    return IssueSummary(
        total_issues=len(issues),
        by_severity=by_severity,
        by_category=by_category,
        issues=tuple(issues),
    )


def overall_score(
    quality: QualityMetrics,
    complexity: ComplexityMetrics,
    structure: StructureMetrics,
    issues: IssueSummary,
) -> int:
    score = quality.maintainability_index * 0.30
    score += quality.readability_score * 0.25
    score += max(0, 100 - complexity.cyclomatic_complexity * 5) * 0.20
    score += structure.structure_score * 0.15
    score -= min(30, issues.total_issues * 5) * 0.10
    return _clamp(_js_round(score))


@lru_cache(maxsize=None)
def _control_patterns(tag: LanguageTag) -> Tuple[Tuple[Pattern[str], ...], Tuple[Pattern[str], ...]]:
    profile = get_profile(tag)
    return (
        tuple(_keyword_pattern(word) for word in profile.control_start),
        tuple(_keyword_pattern(word) for word in profile.control_end),
    )


def _keyword_pattern(keyword: str) -> Pattern[str]:
    if re.fullmatch(r"\w+", keyword):
        return re.compile(rf"\b{re.escape(keyword)}\b")
    return re.compile(re.escape(keyword))


def _brace_span(masked_code: str, start: int, line_index: int) -> int:
    opening = masked_code.find("{", start)
    terminator = masked_code.find(";", start)
    # a prototype ends at ";" before any body opens
    if opening == -1 or -1 < terminator < opening:
        return 1
    depth = 0
    for position in range(opening, len(masked_code)):
        char = masked_code[position]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return masked_code.count("\n", 0, position) - line_index + 1
    return masked_code.count("\n") - line_index + 1


def _indent_span(lines: Sequence[str], line_index: int) -> int:
    header = lines[line_index]
    indent = len(header) - len(header.lstrip())
    last = line_index
    for index in range(line_index + 1, len(lines)):
        line = lines[index]
        if not line.strip():
            continue
        if len(line) - len(line.lstrip()) <= indent:
            break
        last = index
    return last - line_index + 1


def _js_round(value: float) -> int:
    # half-up rounding, unlike round() which rounds half to even
    return int(math.floor(value + 0.5))


def _clamp(value: int, low: int = 0, high: int = 100) -> int:
    return max(low, min(high, value))


__all__ = [
    "FunctionSpan",
    "analyze",
    "basic_metrics",
    "complexity_level",
    "complexity_metrics",
    "function_spans",
    "overall_score",
    "quality_level",
    "structure_score",
]
