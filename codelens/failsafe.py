"""Failure boundaries for operations that must never raise to the caller."""

from __future__ import annotations

import functools
from typing import Callable, TypeVar

from .logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def guarded(
    fallback: Callable[..., T],
    *,
    operation: str,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Wrap ``func`` so any exception is logged and ``fallback`` answers instead.

    ``fallback`` receives the same arguments as the wrapped callable.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                logger.warning("%s failed, using fallback: %s", operation, _format_reason(exc))
                logger.debug("%s failure details", operation, exc_info=True)
                return fallback(*args, **kwargs)

        return wrapper

    return decorator


def _format_reason(reason: object) -> str:
    cleaned = " ".join(str(reason).strip().split())
    if not cleaned:
        return type(reason).__name__
    return cleaned[:200] + ("…" if len(cleaned) > 200 else "")


__all__ = ["guarded"]
