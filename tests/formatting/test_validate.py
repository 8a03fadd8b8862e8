"""Quick structural validation."""

from __future__ import annotations

from codelens.formatting import validate_code


def _types(result) -> list[str]:
    return [issue.type for issue in result.issues]


def test_blank_code_is_valid() -> None:
    result = validate_code("   ")
    assert result.is_valid
    assert result.to_dict() == {"is_valid": True, "issues": []}


def test_mismatched_closer() -> None:
    result = validate_code("(]", "javascript")
    assert _types(result) == ["unbalanced_brackets"]
    assert result.issues[0].message == "Unbalanced bracket: ]"


def test_unclosed_opener() -> None:
    result = validate_code("function f() {", "javascript")
    assert _types(result) == ["unclosed_brackets"]
    assert not result.is_valid


def test_invalid_json() -> None:
    result = validate_code('{"a":}', "json")
    assert _types(result) == ["invalid_json"]
    assert result.issues[0].suggestion == "Check for syntax errors like missing quotes or commas"


def test_valid_json() -> None:
    assert validate_code('{"a": [1, 2]}', "json").is_valid


def test_brackets_in_strings_are_still_counted() -> None:
    assert _types(validate_code('const s = "(";', "javascript")) == ["unclosed_brackets"]


def test_result_dictionary_shape() -> None:
    data = validate_code("}", "python").to_dict()
    assert data == {
        "is_valid": False,
        "issues": [
            {
                "type": "unbalanced_brackets",
                "message": "Unbalanced bracket: }",
                "suggestion": "Check for matching opening and closing brackets",
            }
        ],
    }
