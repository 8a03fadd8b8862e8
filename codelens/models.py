"""Core data models shared across codelens components."""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence, Tuple

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> List[str]:
    """Split on any line break (CRLF, CR or LF); every component numbers lines this way."""
    return _LINE_BREAK.split(text)


class TokenKind(str, Enum):
    """Classification attached to a highlighted span."""

    COMMENT = "comment"
    STRING = "string"
    KEYWORD = "keyword"
    NUMBER = "number"
    FUNCTION = "function"
    CLASS = "class"
    OPERATOR = "operator"
    PUNCTUATION = "punctuation"
    TAG = "tag"
    ATTRIBUTE = "attribute"
    SELECTOR = "selector"
    PROPERTY = "property"
    VALUE = "value"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class SourceText:
    """Immutable line view over a piece of source code."""

    text: str
    lines: Tuple[str, ...]

    @classmethod
    def from_text(cls, text: str) -> "SourceText":
        return cls(text=text, lines=tuple(split_lines(text)))

    def line(self, number: int) -> str:
        """Return the 1-indexed line ``number``."""
        return self.lines[number - 1]

    def numbered(self) -> Sequence[Tuple[int, str]]:
        return [(index + 1, line) for index, line in enumerate(self.lines)]

    def is_blank(self) -> bool:
        return not self.text.strip()


@dataclass(frozen=True)
class Token:
    """A classified span ``[start, end)`` of a single line."""

    kind: TokenKind
    text: str
    start: int
    end: int


@dataclass(frozen=True)
class Diagnostic:
    """A single reported issue. ``line == 0`` marks a file-level finding."""

    line: int
    column: int
    severity: Severity
    kind: str
    message: str
    suggestion: str

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["severity"] = self.severity.value
        return data


@dataclass(frozen=True)
class DiagnosticResult:
    errors: Tuple[Diagnostic, ...] = ()
    warnings: Tuple[Diagnostic, ...] = ()

    @classmethod
    def from_diagnostics(cls, diagnostics: Sequence[Diagnostic]) -> "DiagnosticResult":
        errors = tuple(item for item in diagnostics if item.is_error)
        warnings = tuple(item for item in diagnostics if not item.is_error)
        return cls(errors=errors, warnings=warnings)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def summary(self) -> str:
        if not self.errors and not self.warnings:
            return "No syntax issues detected"
        parts: List[str] = []
        if self.errors:
            parts.append(_plural(self.error_count, "error"))
        if self.warnings:
            parts.append(_plural(self.warning_count, "warning"))
        return " and ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "errors": [item.to_dict() for item in self.errors],
            "warnings": [item.to_dict() for item in self.warnings],
            "is_valid": self.is_valid,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "summary": self.summary,
        }


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


@dataclass(frozen=True)
class FormatOptions:
    """Formatter configuration."""

    indent_size: int = 2
    use_tabs: bool = False
    max_line_length: int = 80
    preserve_blank_lines: bool = True

    def __post_init__(self) -> None:
        if self.indent_size < 1:
            raise ValueError("indent_size must be a positive integer")
        if self.max_line_length < 1:
            raise ValueError("max_line_length must be a positive integer")

    @property
    def indent_unit(self) -> str:
        return "\t" if self.use_tabs else " " * self.indent_size

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "FormatOptions":
        """Build options from config or request data, ignoring unknown keys."""
        if not data:
            return cls()
        defaults = cls()
        return cls(
            indent_size=int(data.get("indent_size", defaults.indent_size)),
            use_tabs=bool(data.get("use_tabs", defaults.use_tabs)),
            max_line_length=int(data.get("max_line_length", defaults.max_line_length)),
            preserve_blank_lines=bool(
                data.get("preserve_blank_lines", defaults.preserve_blank_lines)
            ),
        )


@dataclass(frozen=True)
class ValidationIssue:
    type: str
    message: str
    suggestion: str


@dataclass(frozen=True)
class ValidationResult:
    issues: Tuple[ValidationIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.issues

    def to_dict(self) -> Dict[str, Any]:
        return {"is_valid": self.is_valid, "issues": [asdict(issue) for issue in self.issues]}


# ----------------------------------------------------------------------
# Metrics


@dataclass(frozen=True)
class BasicMetrics:
    total_lines: int = 0
    code_lines: int = 0
    empty_lines: int = 0
    comment_lines: int = 0
    comment_ratio: float = 0.0
    total_characters: int = 0
    non_whitespace_characters: int = 0
    average_line_length: float = 0.0


@dataclass(frozen=True)
class ComplexityMetrics:
    control_structures: int = 0
    max_nesting: int = 0
    cyclomatic_complexity: int = 0
    complexity_level: str = "Low"


@dataclass(frozen=True)
class CodeIssue:
    """A metrics-level finding; severity is one of high, medium or low."""

    type: str
    severity: str
    message: str
    line: int


@dataclass(frozen=True)
class QualityMetrics:
    maintainability_index: int = 0
    readability_score: int = 0
    quality_issues: int = 0
    issue_breakdown: Tuple[CodeIssue, ...] = ()
    quality_level: str = "Unknown"


@dataclass(frozen=True)
class StructureMetrics:
    functions: int = 0
    classes: int = 0
    imports: int = 0
    avg_function_length: float = 0.0
    max_function_length: int = 0
    has_main_function: bool = False
    structure_score: int = 0


@dataclass(frozen=True)
class IssueSummary:
    total_issues: int = 0
    by_severity: Dict[str, int] = field(
        default_factory=lambda: {"high": 0, "medium": 0, "low": 0}
    )
    by_category: Dict[str, int] = field(default_factory=dict)
    issues: Tuple[CodeIssue, ...] = ()


@dataclass(frozen=True)
class MetricsReport:
    basic: BasicMetrics = field(default_factory=BasicMetrics)
    complexity: ComplexityMetrics = field(default_factory=ComplexityMetrics)
    quality: QualityMetrics = field(default_factory=QualityMetrics)
    structure: StructureMetrics = field(default_factory=StructureMetrics)
    issues: IssueSummary = field(default_factory=IssueSummary)
    overall: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = [
    "BasicMetrics",
    "CodeIssue",
    "ComplexityMetrics",
    "Diagnostic",
    "DiagnosticResult",
    "FormatOptions",
    "IssueSummary",
    "MetricsReport",
    "QualityMetrics",
    "Severity",
    "SourceText",
    "StructureMetrics",
    "Token",
    "TokenKind",
    "ValidationIssue",
    "ValidationResult",
    "split_lines",
]
