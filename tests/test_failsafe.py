"""Failure boundary decorator."""

from __future__ import annotations

import logging

from codelens.failsafe import guarded


def _fallback(value: str, *, suffix: str = "") -> str:
    return f"fallback:{value}{suffix}"


@guarded(_fallback, operation="shout")
def _shout(value: str, *, suffix: str = "") -> str:
    if not value:
        raise ValueError("nothing to shout")
    return value.upper() + suffix


def test_passes_through_successful_results() -> None:
    assert _shout("hi", suffix="!") == "HI!"


def test_failure_uses_fallback_with_same_arguments(caplog) -> None:
    with caplog.at_level(logging.WARNING):
        assert _shout("", suffix="?") == "fallback:?"
    assert "shout failed, using fallback: nothing to shout" in caplog.text


def test_wrapper_keeps_metadata() -> None:
    assert _shout.__name__ == "_shout"
