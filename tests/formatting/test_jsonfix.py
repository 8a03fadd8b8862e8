"""JSON pretty printing and repair."""

from __future__ import annotations

import json

from codelens.formatting import format_code, format_json, repair_json
from codelens.models import FormatOptions


def test_trailing_comma_is_repaired() -> None:
    formatted = format_code('{"a":1,}', "json")
    assert formatted == '{\n  "a": 1\n}'
    assert format_code(formatted, "json") == formatted


def test_javascript_style_object_is_repaired() -> None:
    formatted = format_code("{name: 'x', ok: True}", "json")
    assert formatted == '{\n  "name": "x",\n  "ok": true\n}'


def test_tabs_indent_nested_values() -> None:
    formatted = format_code('{"a":[1,2]}', "json", FormatOptions(use_tabs=True))
    assert formatted == '{\n\t"a": [\n\t\t1,\n\t\t2\n\t]\n}'


def test_indent_size_is_honored() -> None:
    formatted = format_code('{"a":1}', "json", FormatOptions(indent_size=4))
    assert formatted == '{\n    "a": 1\n}'


def test_comments_are_stripped_during_repair() -> None:
    code = '{\n  // note\n  "a": 1, /* trailing */\n}'
    assert json.loads(format_json(code, 2)) == {"a": 1}


def test_double_quoted_strings_are_copied_verbatim() -> None:
    repaired = repair_json('{"url": "http://x/*y*/", \'k\': None}')
    assert json.loads(repaired) == {"url": "http://x/*y*/", "k": None}


def test_exponents_stay_numbers() -> None:
    assert json.loads(format_json('{"n": 1e5,}', 2)) == {"n": 1e5}


def test_hopeless_input_is_returned_unchanged() -> None:
    assert format_json("{{{", 2) == "{{{"


def test_unicode_is_not_escaped() -> None:
    assert format_json('{"name":"café"}', 2) == '{\n  "name": "café"\n}'


def test_single_quoted_escapes_survive_requoting() -> None:
    repaired = repair_json(r"{'text': 'line\none\ttab', 'path': 'C:\\tmp'}")
    assert json.loads(repaired) == {"text": "line\none\ttab", "path": "C:\\tmp"}


def test_single_quoted_strings_escape_double_quotes() -> None:
    repaired = repair_json(r"""{'q': 'say "hi" and it\'s done'}""")
    assert json.loads(repaired) == {"q": "say \"hi\" and it's done"}
