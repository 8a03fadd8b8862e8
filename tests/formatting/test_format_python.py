"""Python formatting pipeline."""

from __future__ import annotations

from codelens.formatting import format_code
from codelens.models import FormatOptions
from tests._fixtures.source_tree import dedent

FOUR = FormatOptions(indent_size=4)


def test_imports_sorted_quotes_and_commas_normalized() -> None:
    code = "import sys\nimport os\ndef greet(name='world'):\n    print('hello',name)"
    expected = 'import os\nimport sys\ndef greet(name="world"):\n    print("hello", name)'
    assert format_code(code, "python", FOUR) == expected


def test_keyword_arguments_stay_tight() -> None:
    assert format_code("f(a = 1, b=2)", "python") == "f(a=1, b=2)"


def test_indentation_levels_are_remapped() -> None:
    code = "if x:\n  a = 1\nelif y:\n  b = 2\nelse:\n  c = 3"
    expected = "if x:\n    a = 1\nelif y:\n    b = 2\nelse:\n    c = 3"
    assert format_code(code, "python", FOUR) == expected


def test_unindented_block_body_is_pushed_in() -> None:
    assert format_code("if True:\nprint(1)", "python", FOUR) == "if True:\n    print(1)"


def test_docstrings_are_left_alone() -> None:
    code = dedent(
        '''
        def f():
            """Doc  'quoted'
               second  line
            """
            return 1
        '''
    )
    assert format_code(code, "python", FOUR) == code


def test_quotes_containing_double_quotes_are_kept() -> None:
    assert format_code("""s = 'say "hi"'""", "python") == """s = 'say "hi"'"""


def test_future_imports_come_first_after_docstring() -> None:
    code = dedent(
        '''
        """Module docstring."""
        import sys
        from __future__ import annotations
        value = sys.argv
        '''
    )
    assert format_code(code, "python") == dedent(
        '''
        """Module docstring."""

        from __future__ import annotations
        import sys
        value = sys.argv
        '''
    )


def test_multiline_imports_leave_order_untouched() -> None:
    code = "import sys\nfrom os import (\n    path,\n)\nimport abc"
    assert format_code(code, "python", FOUR).split("\n")[0] == "import sys"


def test_dict_colons_are_spaced_but_slices_are_not() -> None:
    assert format_code("d = {'a':1}", "python") == 'd = {"a": 1}'
    assert format_code("x = items[1:2]", "python") == "x = items[1:2]"
