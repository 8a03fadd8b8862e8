"""Per-language configuration shared by every codelens component.

Each supported language is described once by a :class:`LanguageProfile`.
Detection, highlighting, diagnostics, metrics and formatting all read from the
same table instead of switching on the language tag themselves.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Pattern, Tuple


class LanguageTag(str, Enum):
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    JAVA = "java"
    CPP = "cpp"
    HTML = "html"
    CSS = "css"
    PHP = "php"
    RUBY = "ruby"
    GO = "go"
    RUST = "rust"
    TYPESCRIPT = "typescript"
    SQL = "sql"
    JSON = "json"
    MARKDOWN = "markdown"
    YAML = "yaml"
    BASH = "bash"
    AUTO = "auto"


@dataclass(frozen=True)
class LanguageProfile:
    """Everything the engine needs to know about one language."""

    tag: LanguageTag
    display_name: str
    extensions: Tuple[str, ...]
    family: str = "code"
    line_comments: Tuple[str, ...] = ()
    block_comment: Optional[Tuple[str, str]] = None
    keywords: Tuple[str, ...] = ()
    keywords_ignore_case: bool = False
    control_start: Tuple[str, ...] = ()
    control_end: Tuple[str, ...] = ()
    function_pattern: Optional[Pattern[str]] = None
    class_pattern: Optional[Pattern[str]] = None
    import_pattern: Optional[Pattern[str]] = None
    main_pattern: Optional[Pattern[str]] = None
    block_style: str = "brace"
    bracket_pairs: str = "()[]{}"
    detect_patterns: Tuple[Pattern[str], ...] = ()
    detect_keywords: Tuple[str, ...] = ()
    string_delimiters: Tuple[str, ...] = ('"', "'", "`")
    reserved: Tuple[str, ...] = field(default=())

    @property
    def is_code(self) -> bool:
        return self.family == "code"

    def is_comment_line(self, line: str) -> bool:
        """Return True when ``line`` looks like a comment in this language."""
        trimmed = line.strip()
        if not trimmed:
            return False
        if any(trimmed.startswith(marker) for marker in self.line_comments):
            return True
        if self.block_comment is not None:
            opener, closer = self.block_comment
            if trimmed.startswith(opener) or closer in trimmed:
                return True
            if opener == "/*" and trimmed.startswith("*"):
                return True
        return False


def _compile(*patterns: str, flags: int = 0) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(pattern, flags) for pattern in patterns)


_C_BLOCK = ("/*", "*/")
_JS_CONTROL_START = ("if", "for", "while", "switch", "case", "catch", "&&", "||", "?")
_JS_CONTROL_END = ("else", "}", "break", "continue")
_C_CONTROL_START = ("if", "for", "while", "switch", "case", "catch", "&&", "||")

_JS_KEYWORDS = (
    "function", "var", "let", "const", "if", "else", "for", "while", "do", "return",
    "class", "import", "export", "from", "default", "extends", "async", "await",
    "try", "catch", "finally", "throw", "new", "this", "super", "typeof",
    "instanceof", "in", "of", "void", "delete", "switch", "case", "break",
    "continue", "yield", "static", "true", "false", "null", "undefined",
)
_JS_FUNCTION = re.compile(
    r"function\s+(\w+)\s*\([^)]*\)"
    r"|const\s+(\w+)\s*=\s*(?:\([^)]*\)\s*=>|function)"
    r"|let\s+(\w+)\s*=\s*(?:\([^)]*\)\s*=>|function)"
    r"|(\w+)\s*\([^)]*\)\s*\{"
)

_PROFILES: Tuple[LanguageProfile, ...] = (
    LanguageProfile(
        tag=LanguageTag.JAVASCRIPT,
        display_name="JavaScript",
        extensions=("js", "jsx", "mjs", "cjs"),
        line_comments=("//",),
        block_comment=_C_BLOCK,
        keywords=_JS_KEYWORDS,
        control_start=_JS_CONTROL_START,
        control_end=_JS_CONTROL_END,
        function_pattern=_JS_FUNCTION,
        class_pattern=re.compile(r"\bclass\s+(\w+)"),
        import_pattern=re.compile(r"\bimport\s+[^;\n]+|\brequire\s*\("),
        main_pattern=re.compile(r"function\s+main\s*\(|const\s+main\s*="),
        detect_patterns=_compile(
            r"import\s+.*\s+from\s+['\"]",
            r"export\s+(default\s+)?(function|class|const|let)",
            r"console\.log",
            r"function\s+\w+\s*\(",
            r"const\s+\w+\s*=\s*\(\)\s*=>",
            r"document\.getElementById",
            r"React\.",
            r"useState\(\)",
            r"require\(['\"]",
        ),
        detect_keywords=("function", "const", "let", "var", "return", "import", "export", "console"),
        reserved=("console", "log", "NaN", "Infinity", "window", "document", "require", "module"),
    ),
    LanguageProfile(
        tag=LanguageTag.PYTHON,
        display_name="Python",
        extensions=("py", "pyw", "pyx"),
        line_comments=("#",),
        keywords=(
            "def", "class", "if", "elif", "else", "for", "while", "return", "import",
            "from", "as", "try", "except", "finally", "with", "lambda", "None", "True",
            "False", "and", "or", "not", "in", "is", "pass", "break", "continue",
            "raise", "yield", "async", "await", "global", "nonlocal", "del", "assert",
        ),
        control_start=("if", "for", "while", "elif", "except", "and", "or"),
        control_end=("else", "elif"),
        function_pattern=re.compile(r"^\s*(?:async\s+)?def\s+(\w+)\s*\(", re.MULTILINE),
        class_pattern=re.compile(r"^\s*class\s+(\w+)", re.MULTILINE),
        import_pattern=re.compile(r"^\s*(?:import\s+\w+|from\s+[\w.]+\s+import\b)", re.MULTILINE),
        main_pattern=re.compile(r"def\s+main\s*\(|if\s+__name__\s*==\s*['\"]__main__['\"]"),
        block_style="indent",
        detect_patterns=_compile(
            r"^def\s+\w+\s*\(",
            r"^class\s+\w+",
            r"import\s+\w+",
            r"from\s+\w+\s+import",
            r"print\(",
            r"if\s+__name__\s*==\s*['\"]__main__['\"]",
            r":\s*$",
            r"#.*$",
        ),
        detect_keywords=("def", "class", "import", "from", "print", "if", "else", "for", "while"),
        string_delimiters=('"', "'"),
        reserved=("self", "cls", "print", "len", "range", "str", "int", "dict", "list", "set"),
    ),
    LanguageProfile(
        tag=LanguageTag.JAVA,
        display_name="Java",
        extensions=("java",),
        line_comments=("//",),
        block_comment=_C_BLOCK,
        keywords=(
            "public", "private", "protected", "class", "interface", "enum", "extends",
            "implements", "static", "final", "abstract", "void", "int", "String",
            "boolean", "char", "byte", "short", "long", "float", "double", "if", "else",
            "for", "while", "do", "switch", "case", "default", "return", "try", "catch",
            "finally", "throw", "throws", "new", "this", "super", "import", "package",
            "break", "continue", "true", "false", "null",
        ),
        control_start=_C_CONTROL_START,
        control_end=_JS_CONTROL_END,
        function_pattern=re.compile(r"(?:public|private|protected)\s+(?:\w+\s+)*(\w+)\s*\([^)]*\)\s*\{"),
        class_pattern=re.compile(r"\b(?:class|interface|enum)\s+(\w+)"),
        import_pattern=re.compile(r"^\s*import\s+[^;]+;", re.MULTILINE),
        main_pattern=re.compile(r"public\s+static\s+void\s+main\s*\("),
        detect_patterns=_compile(
            r"public\s+class\s+\w+",
            r"public\s+static\s+void\s+main",
            r"System\.out\.println",
            r"import\s+java\.",
            r"private\s+\w+\s+\w+;",
            r"@Override",
            r"new\s+\w+\(\)",
        ),
        detect_keywords=("public", "class", "static", "void", "main", "import", "System.out.println"),
        string_delimiters=('"', "'"),
        reserved=("System", "out", "println", "String", "Math"),
    ),
    LanguageProfile(
        tag=LanguageTag.CPP,
        display_name="C++",
        extensions=("cpp", "cc", "cxx", "h", "hpp"),
        line_comments=("//",),
        block_comment=_C_BLOCK,
        keywords=(
            "auto", "bool", "break", "case", "catch", "char", "class", "const",
            "continue", "default", "delete", "do", "double", "else", "enum", "explicit",
            "false", "float", "for", "friend", "if", "inline", "int", "long",
            "namespace", "new", "nullptr", "private", "protected", "public", "return",
            "short", "signed", "sizeof", "static", "struct", "switch", "template",
            "this", "throw", "true", "try", "typedef", "typename", "unsigned", "using",
            "virtual", "void", "while",
        ),
        control_start=_C_CONTROL_START,
        control_end=_JS_CONTROL_END,
        function_pattern=re.compile(r"(?:\w+\s+)*(\w+)\s*\([^)]*\)\s*\{"),
        class_pattern=re.compile(r"\b(?:class|struct)\s+(\w+)"),
        import_pattern=re.compile(r"^\s*#include\s*[<\"]", re.MULTILINE),
        main_pattern=re.compile(r"int\s+main\s*\("),
        detect_patterns=_compile(
            r"#include\s*<.*>",
            r"using\s+namespace\s+std;",
            r"std::",
            r"cout\s*<<",
            r"cin\s*>>",
            r"int\s+main\(\)",
            r"return\s+0;",
        ),
        detect_keywords=("#include", "using namespace", "std::", "cout", "cin", "int main()"),
        string_delimiters=('"', "'"),
        reserved=("std", "cout", "cin", "endl", "string", "vector", "main"),
    ),
    LanguageProfile(
        tag=LanguageTag.HTML,
        display_name="HTML",
        extensions=("html", "htm"),
        family="markup",
        block_comment=("<!--", "-->"),
        bracket_pairs="",
        detect_patterns=_compile(
            r"<!DOCTYPE html>",
            r"<html.*>",
            r"<head>.*</head>",
            r"<body>.*</body>",
            r"<div.*>",
            r"<script.*>",
            r"<style.*>",
        ),
        detect_keywords=("<html>", "<head>", "<body>", "<div>", "<script>", "<style>"),
        string_delimiters=('"', "'"),
    ),
    LanguageProfile(
        tag=LanguageTag.CSS,
        display_name="CSS",
        extensions=("css",),
        family="markup",
        block_comment=_C_BLOCK,
        import_pattern=re.compile(r"@import\b"),
        detect_patterns=_compile(
            r".*\{[^}]*\}",
            r"@media",
            r"@keyframes",
            r"\.\w+\s*\{",
            r"#\w+\s*\{",
            r":\s*(hover|focus|active)",
        ),
        detect_keywords=("{", "}", ";", ".class", "#id", "@media"),
        string_delimiters=('"', "'"),
    ),
    LanguageProfile(
        tag=LanguageTag.PHP,
        display_name="PHP",
        extensions=("php",),
        line_comments=("//", "#"),
        block_comment=_C_BLOCK,
        keywords=(
            "abstract", "array", "as", "break", "case", "catch", "class", "const",
            "continue", "default", "do", "echo", "else", "elseif", "extends", "false",
            "finally", "for", "foreach", "function", "if", "implements", "include",
            "interface", "namespace", "new", "null", "private", "protected", "public",
            "require", "return", "static", "switch", "throw", "trait", "true", "try",
            "use", "while",
        ),
        control_start=("if", "elseif", "for", "foreach", "while", "switch", "case", "catch", "&&", "||", "?"),
        control_end=_JS_CONTROL_END,
        function_pattern=re.compile(r"function\s+(\w+)\s*\("),
        class_pattern=re.compile(r"\b(?:class|interface|trait)\s+(\w+)"),
        import_pattern=re.compile(r"^\s*(?:use|require|require_once|include|include_once)\b", re.MULTILINE),
        detect_patterns=_compile(
            r"<\?php",
            r"\$[a-zA-Z_]\w*\s*=",
            r"echo\s+.+;",
            r"function\s+\w+\s*\(",
            r"->\w+\s*\(",
        ),
        detect_keywords=("<?php", "?>", "$", "echo", "function", "->"),
    ),
    LanguageProfile(
        tag=LanguageTag.RUBY,
        display_name="Ruby",
        extensions=("rb",),
        line_comments=("#",),
        keywords=(
            "alias", "and", "begin", "break", "case", "class", "def", "do", "else",
            "elsif", "end", "ensure", "false", "for", "if", "in", "module", "next",
            "nil", "not", "or", "puts", "redo", "rescue", "retry", "return", "self",
            "super", "then", "true", "unless", "until", "when", "while", "yield",
        ),
        control_start=("if", "elsif", "unless", "while", "until", "for", "when", "rescue", "&&", "||"),
        control_end=("end", "else"),
        function_pattern=re.compile(r"^\s*def\s+(?:self\.)?(\w+[?!]?)", re.MULTILINE),
        class_pattern=re.compile(r"^\s*(?:class|module)\s+(\w+)", re.MULTILINE),
        import_pattern=re.compile(r"^\s*require(?:_relative)?\b", re.MULTILINE),
        block_style="indent",
        detect_patterns=_compile(
            r"def\s+\w+",
            r"class\s+\w+",
            r"puts\s+",
            r"end$",
            r"@\w+",
            r":\w+=>",
        ),
        detect_keywords=("def", "class", "end", "puts", "@var", "=>"),
    ),
    LanguageProfile(
        tag=LanguageTag.GO,
        display_name="Go",
        extensions=("go",),
        line_comments=("//",),
        block_comment=_C_BLOCK,
        keywords=(
            "break", "case", "chan", "const", "continue", "default", "defer", "else",
            "fallthrough", "for", "func", "go", "goto", "if", "import", "interface",
            "map", "package", "range", "return", "select", "struct", "switch", "type",
            "var", "true", "false", "nil",
        ),
        control_start=("if", "for", "switch", "case", "select", "&&", "||"),
        control_end=_JS_CONTROL_END,
        function_pattern=re.compile(r"\bfunc\s+(?:\([^)]*\)\s*)?(\w+)\s*\("),
        class_pattern=re.compile(r"\btype\s+(\w+)\s+(?:struct|interface)\b"),
        import_pattern=re.compile(r"^\s*import\b", re.MULTILINE),
        main_pattern=re.compile(r"func\s+main\s*\("),
        detect_patterns=_compile(
            r"package\s+main",
            r"import\s*\(",
            r"func\s+main\(\)",
            r"fmt\.Print",
            r":=\s*",
            r"go\s+func\(\)",
        ),
        detect_keywords=("package", "import", "func", ":=", "go func()"),
    ),
    LanguageProfile(
        tag=LanguageTag.RUST,
        display_name="Rust",
        extensions=("rs",),
        line_comments=("//",),
        block_comment=_C_BLOCK,
        keywords=(
            "as", "async", "await", "break", "const", "continue", "crate", "else",
            "enum", "extern", "false", "fn", "for", "if", "impl", "in", "let", "loop",
            "match", "mod", "move", "mut", "pub", "ref", "return", "self", "Self",
            "static", "struct", "super", "trait", "true", "type", "unsafe", "use",
            "where", "while",
        ),
        control_start=("if", "for", "while", "loop", "match", "&&", "||"),
        control_end=_JS_CONTROL_END,
        function_pattern=re.compile(r"\bfn\s+(\w+)"),
        class_pattern=re.compile(r"\b(?:struct|enum|trait)\s+(\w+)"),
        import_pattern=re.compile(r"^\s*use\s+", re.MULTILINE),
        main_pattern=re.compile(r"fn\s+main\s*\("),
        detect_patterns=_compile(
            r"fn\s+main\(\)",
            r"let\s+mut\s+\w+",
            r"println!",
            r"\.unwrap\(\)",
            r"->\s*\w+",
        ),
        detect_keywords=("fn", "let mut", "println!", "unwrap()", "->"),
        string_delimiters=('"',),
    ),
    LanguageProfile(
        tag=LanguageTag.TYPESCRIPT,
        display_name="TypeScript",
        extensions=("ts", "tsx"),
        line_comments=("//",),
        block_comment=_C_BLOCK,
        keywords=_JS_KEYWORDS + (
            "interface", "type", "enum", "implements", "private", "public",
            "protected", "readonly", "declare", "namespace", "abstract", "as",
        ),
        control_start=_JS_CONTROL_START,
        control_end=_JS_CONTROL_END,
        function_pattern=_JS_FUNCTION,
        class_pattern=re.compile(r"\b(?:class|interface)\s+(\w+)"),
        import_pattern=re.compile(r"\bimport\s+[^;\n]+|\brequire\s*\("),
        main_pattern=re.compile(r"function\s+main\s*\(|const\s+main\s*="),
        reserved=("console", "log", "NaN", "Infinity", "window", "document", "require", "module"),
    ),
    LanguageProfile(
        tag=LanguageTag.SQL,
        display_name="SQL",
        extensions=("sql",),
        family="data",
        line_comments=("--",),
        block_comment=_C_BLOCK,
        keywords=(
            "select", "from", "where", "insert", "into", "values", "update", "set",
            "delete", "create", "table", "drop", "alter", "index", "view", "join",
            "inner", "left", "right", "outer", "on", "group", "by", "order", "having",
            "limit", "offset", "and", "or", "not", "null", "is", "in", "as", "distinct",
            "union", "case", "when", "then", "else", "end", "primary", "key",
            "foreign", "references", "function", "procedure", "begin", "return",
        ),
        keywords_ignore_case=True,
        function_pattern=re.compile(
            r"create\s+(?:or\s+replace\s+)?(?:function|procedure)\s+(\w+)", re.IGNORECASE
        ),
        string_delimiters=("'", '"'),
    ),
    LanguageProfile(
        tag=LanguageTag.JSON,
        display_name="JSON",
        extensions=("json",),
        family="data",
        keywords=("true", "false", "null"),
        string_delimiters=('"',),
    ),
    LanguageProfile(
        tag=LanguageTag.MARKDOWN,
        display_name="Markdown",
        extensions=("md", "markdown"),
        family="prose",
        block_comment=("<!--", "-->"),
        bracket_pairs="",
        string_delimiters=(),
    ),
    LanguageProfile(
        tag=LanguageTag.YAML,
        display_name="YAML",
        extensions=("yaml", "yml"),
        family="data",
        line_comments=("#",),
        keywords=("true", "false", "null", "yes", "no", "on", "off"),
        block_style="indent",
        bracket_pairs="",
        string_delimiters=('"', "'"),
    ),
    LanguageProfile(
        tag=LanguageTag.BASH,
        display_name="Bash",
        extensions=("sh", "bash", "zsh"),
        line_comments=("#",),
        keywords=(
            "if", "then", "else", "elif", "fi", "for", "while", "until", "do", "done",
            "case", "esac", "in", "function", "return", "local", "export", "echo",
            "exit", "readonly", "shift", "source",
        ),
        control_start=("if", "elif", "for", "while", "until", "case", "&&", "||"),
        control_end=("fi", "done", "esac", "else"),
        # case arms close with a lone ")"
        bracket_pairs="[]{}",
        function_pattern=re.compile(r"^\s*(?:function\s+)?(\w+)\s*\(\)\s*\{?", re.MULTILINE),
        import_pattern=re.compile(r"^\s*(?:source|\.)\s+\S", re.MULTILINE),
    ),
)

PROFILES: Dict[LanguageTag, LanguageProfile] = {profile.tag: profile for profile in _PROFILES}

# Aliases cover both file extensions and common spellings of language names.
ALIASES: Dict[str, LanguageTag] = {
    "js": LanguageTag.JAVASCRIPT,
    "jsx": LanguageTag.JAVASCRIPT,
    "mjs": LanguageTag.JAVASCRIPT,
    "cjs": LanguageTag.JAVASCRIPT,
    "node": LanguageTag.JAVASCRIPT,
    "ts": LanguageTag.TYPESCRIPT,
    "tsx": LanguageTag.TYPESCRIPT,
    "py": LanguageTag.PYTHON,
    "python3": LanguageTag.PYTHON,
    "c++": LanguageTag.CPP,
    "cxx": LanguageTag.CPP,
    "cc": LanguageTag.CPP,
    "h": LanguageTag.CPP,
    "hpp": LanguageTag.CPP,
    "rb": LanguageTag.RUBY,
    "rs": LanguageTag.RUST,
    "golang": LanguageTag.GO,
    "sh": LanguageTag.BASH,
    "shell": LanguageTag.BASH,
    "yml": LanguageTag.YAML,
    "md": LanguageTag.MARKDOWN,
    "htm": LanguageTag.HTML,
}

_EXTENSIONS: Dict[str, LanguageTag] = {
    extension: profile.tag for profile in _PROFILES for extension in profile.extensions
}

DEFAULT_LANGUAGE = LanguageTag.JAVASCRIPT


def lookup_extension(extension: str) -> Optional[LanguageTag]:
    """Map a bare file extension (no dot) to a tag, or None when unknown."""
    key = extension.strip().lower()
    if not key:
        return None
    if key in ALIASES:
        return ALIASES[key]
    if key in _EXTENSIONS:
        return _EXTENSIONS[key]
    return _tag_by_name(key)


def lookup_language(value: object) -> Optional[LanguageTag]:
    """Return the tag named by ``value`` (tag, name or alias) or None."""
    if isinstance(value, LanguageTag):
        return value
    if not isinstance(value, str):
        return None
    key = value.strip().lower()
    if key == LanguageTag.AUTO.value:
        return LanguageTag.AUTO
    if key in ALIASES:
        return ALIASES[key]
    return _tag_by_name(key)


def resolve_language(value: object) -> LanguageTag:
    """Return a concrete tag for ``value``, falling back to javascript."""
    tag = lookup_language(value)
    if tag is None or tag is LanguageTag.AUTO:
        return DEFAULT_LANGUAGE
    return tag


def get_profile(language: object) -> LanguageProfile:
    return PROFILES[resolve_language(language)]


def display_name(language: object) -> str:
    tag = lookup_language(language)
    if tag is LanguageTag.AUTO:
        return "Auto-detect"
    if tag is None:
        return str(language)
    return PROFILES[tag].display_name


def supported_languages() -> Tuple[LanguageTag, ...]:
    return tuple(profile.tag for profile in _PROFILES)


def is_supported(language: object) -> bool:
    tag = lookup_language(language)
    return tag is not None and tag is not LanguageTag.AUTO


def _tag_by_name(name: str) -> Optional[LanguageTag]:
    for tag in PROFILES:
        if tag.value == name:
            return tag
    return None


__all__ = [
    "ALIASES",
    "DEFAULT_LANGUAGE",
    "LanguageProfile",
    "LanguageTag",
    "PROFILES",
    "display_name",
    "get_profile",
    "is_supported",
    "lookup_extension",
    "lookup_language",
    "resolve_language",
    "supported_languages",
]
