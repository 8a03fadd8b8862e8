from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.source_tree import SourceTree


@pytest.fixture
def source_tree(tmp_path: Path) -> SourceTree:
    """Provide a writable source tree rooted at the pytest tmp_path."""
    return SourceTree(tmp_path)


@pytest.fixture(autouse=True)
def _reset_codelens_logger():
    """CLI runs reconfigure the package logger; restore propagation for caplog."""
    yield
    logger = logging.getLogger("codelens")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
