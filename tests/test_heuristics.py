"""Undefined-name heuristics."""

from __future__ import annotations

from codelens.heuristics import supports_name_heuristics, undefined_names
from codelens.languages import PROFILES, LanguageTag
from tests._fixtures.source_tree import dedent

JS = PROFILES[LanguageTag.JAVASCRIPT]
PY = PROFILES[LanguageTag.PYTHON]


def test_reports_first_use_of_undeclared_javascript_name() -> None:
    code = "const a = 1;\nconsole.log(total);\nconsole.log(total);"
    assert undefined_names(code, JS) == [("total", 2)]


def test_javascript_declarations_are_recognized() -> None:
    code = dedent(
        """
        import { readFile } from "fs";
        function load(path, options) {
          const { encoding } = options;
          try {
            return readFile(path, encoding);
          } catch (error) {
            return null;
          }
        }
        const double = (value) => value * 2;
        """
    )
    assert undefined_names(code, JS) == []


def test_object_keys_are_not_names() -> None:
    assert undefined_names("const point = { left: 1, right: 2 };", JS) == []


def test_names_inside_strings_are_ignored() -> None:
    assert undefined_names('const greeting = "hello there";', JS) == []


def test_python_names() -> None:
    code = dedent(
        """
        import os
        def build(path, mode="r"):
            for entry in os.listdir(path):
                print(entry, missing_name)
            return open(path, mode=mode)
        """
    )
    assert undefined_names(code, PY) == [("missing_name", 4)]


def test_other_languages_are_skipped() -> None:
    assert not supports_name_heuristics(PROFILES[LanguageTag.GO])
    assert undefined_names("x := unknownThing()", PROFILES[LanguageTag.GO]) == []
