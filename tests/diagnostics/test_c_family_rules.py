"""Java and C++ statement diagnostics."""

from __future__ import annotations

from codelens.diagnostics import detect_errors
from tests._fixtures.source_tree import dedent


def test_java_missing_semicolon() -> None:
    code = dedent(
        """
        public class Main {
          public static void main(String[] args) {
            int x = 1
            System.out.println(x);
          }
        }
        """
    )
    result = detect_errors(code, "java")
    assert [(item.kind, item.line, item.column) for item in result.errors] == [
        ("missing_semicolon", 3, 13)
    ]


def test_java_chained_call_continues_statement() -> None:
    code = dedent(
        """
        class Builder {
          void run() {
            items.stream()
              .filter(x -> x > 0)
              .count();
          }
        }
        """
    )
    assert detect_errors(code, "java").errors == ()


def test_java_method_without_return_type() -> None:
    code = dedent(
        """
        public class Shape {
          public Shape() {
          }
          public area() {
            return 1;
          }
        }
        """
    )
    warnings = [(item.kind, item.line) for item in detect_errors(code, "java").warnings]
    assert warnings == [("missing_return_type", 4)]


def test_java_class_without_brace() -> None:
    result = detect_errors("public class Main\n  int x;\n", "java")
    assert [item.kind for item in result.errors] == ["missing_brace"]


def test_cpp_invalid_include() -> None:
    code = "#include iostream\n#include <vector>\nint main() {\n  return 0;\n}\n"
    result = detect_errors(code, "cpp")
    assert [(item.kind, item.line) for item in result.errors] == [("invalid_include", 1)]
