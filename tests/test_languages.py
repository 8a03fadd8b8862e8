"""Language table lookups."""

from __future__ import annotations

from codelens.languages import (
    PROFILES,
    LanguageTag,
    display_name,
    get_profile,
    is_supported,
    lookup_extension,
    lookup_language,
    resolve_language,
    supported_languages,
)


def test_every_supported_language_has_a_profile() -> None:
    tags = supported_languages()
    assert LanguageTag.AUTO not in tags
    assert set(tags) == set(PROFILES)
    assert tags[0] is LanguageTag.JAVASCRIPT


def test_lookup_language_accepts_names_aliases_and_tags() -> None:
    assert lookup_language("Python") is LanguageTag.PYTHON
    assert lookup_language(" c++ ") is LanguageTag.CPP
    assert lookup_language("golang") is LanguageTag.GO
    assert lookup_language(LanguageTag.RUST) is LanguageTag.RUST
    assert lookup_language("auto") is LanguageTag.AUTO
    assert lookup_language("cobol") is None
    assert lookup_language(42) is None


def test_resolve_language_falls_back_to_javascript() -> None:
    assert resolve_language("cobol") is LanguageTag.JAVASCRIPT
    assert resolve_language("auto") is LanguageTag.JAVASCRIPT
    assert resolve_language(None) is LanguageTag.JAVASCRIPT
    assert get_profile("unknown").tag is LanguageTag.JAVASCRIPT


def test_lookup_extension_covers_aliases() -> None:
    assert lookup_extension("PY") is LanguageTag.PYTHON
    assert lookup_extension("yml") is LanguageTag.YAML
    assert lookup_extension("hpp") is LanguageTag.CPP
    assert lookup_extension("tsx") is LanguageTag.TYPESCRIPT
    assert lookup_extension("") is None
    assert lookup_extension("exe") is None


def test_display_names() -> None:
    assert display_name("cpp") == "C++"
    assert display_name(LanguageTag.AUTO) == "Auto-detect"
    assert display_name("cobol") == "cobol"


def test_is_supported_excludes_auto() -> None:
    assert is_supported("json")
    assert not is_supported("auto")
    assert not is_supported("cobol")


def test_comment_line_recognition() -> None:
    javascript = PROFILES[LanguageTag.JAVASCRIPT]
    assert javascript.is_comment_line("  // note")
    assert javascript.is_comment_line(" * continued block")
    assert not javascript.is_comment_line("const x = 1;")
    assert not javascript.is_comment_line("   ")
    assert PROFILES[LanguageTag.PYTHON].is_comment_line("# note")
