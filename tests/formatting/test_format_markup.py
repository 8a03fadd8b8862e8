"""HTML and CSS formatting."""

from __future__ import annotations

from codelens.formatting import format_code


def test_html_tags_are_tidied_and_nested() -> None:
    code = '<div class = "a">\n<img src=logo.png>\n<p>Hi</p>\n</div>'
    expected = '<div class="a">\n  <img src="logo.png" />\n  <p>Hi</p>\n</div>'
    assert format_code(code, "html") == expected


def test_html_void_tags_are_closed_once() -> None:
    once = format_code("<br>\n<hr/>", "html")
    assert once == "<br />\n<hr />"
    assert format_code(once, "html") == once


def test_html_quoted_attribute_values_are_preserved() -> None:
    code = '<a title="a  =  b" href=x>link</a>'
    assert format_code(code, "html") == '<a title="a  =  b" href="x">link</a>'


def test_css_rule_is_expanded() -> None:
    expected = "a {\n  color: red;\n  background: blue;\n}"
    assert format_code("a{color:red;background:blue}", "css") == expected


def test_css_formatting_is_stable() -> None:
    once = format_code("a{color:red;background:blue}", "css")
    assert format_code(once, "css") == once


def test_css_url_semicolons_inside_parentheses() -> None:
    formatted = format_code('a{background:url("data:image/png;base64,xx")}', "css")
    assert formatted.split("\n")[1] == '  background: url("data:image/png;base64,xx");'


def test_whitespace_only_languages_strip_trailing_spaces() -> None:
    assert format_code("key:   value   \nlist:\n  - a  ", "yaml") == "key:   value\nlist:\n  - a"
