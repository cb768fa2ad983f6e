"""Tests for lookatni.logging."""

from __future__ import annotations

import logging
from pathlib import Path

from lookatni.logging import configure_logging, console_level, get_logger


def test_get_logger_nests_under_package() -> None:
    assert get_logger().name == "lookatni"
    assert get_logger("packer").name == "lookatni.packer"


def test_console_level_selection() -> None:
    assert console_level() == logging.INFO
    assert console_level(quiet=True) == logging.WARNING
    assert console_level(verbose=True, quiet=True) == logging.DEBUG


def test_configure_logging_replaces_handlers() -> None:
    configure_logging()
    logger = configure_logging(quiet=True)

    assert len(logger.handlers) == 1
    assert logger.handlers[0].level == logging.WARNING
    assert logger.propagate is False


def test_log_file_records_debug_messages(tmp_path: Path) -> None:
    log_file = tmp_path / "lookatni.log"
    logger = configure_logging(quiet=True, log_file=log_file)

    get_logger("scanner").debug("scanned %d lines", 12)
    for handler in logger.handlers:
        handler.flush()

    assert "lookatni.scanner: scanned 12 lines" in log_file.read_text(encoding="utf-8")
    configure_logging()
