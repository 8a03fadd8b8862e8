from __future__ import annotations

import logging
from pathlib import Path

from codelens.logging import configure_logging, get_logger


def test_get_logger_nests_under_codelens() -> None:
    assert get_logger().name == "codelens"
    assert get_logger("codelens.engine").name == "codelens.engine"
    assert get_logger("plugins.rules").name == "codelens.plugins.rules"


def test_configure_logging_replaces_handlers(tmp_path: Path) -> None:
    configure_logging()
    logger = configure_logging(verbose=True, log_file=tmp_path / "run.log")
    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert [type(handler) for handler in logger.handlers] == [
        logging.StreamHandler,
        logging.FileHandler,
    ]
