"""Tests for logging configuration."""

import logging

from taleleaf.logging_setup import setup_logging


def test_level_and_console_handler():
    setup_logging("debug")

    logger = logging.getLogger("taleleaf")
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_unknown_level_falls_back_to_info():
    setup_logging("chatty")

    assert logging.getLogger("taleleaf").level == logging.INFO


def test_repeat_setup_does_not_duplicate_handlers():
    setup_logging("INFO")
    setup_logging("INFO")

    assert len(logging.getLogger("taleleaf").handlers) == 1


def test_file_handler_writes_child_records(tmp_path):
    log_file = tmp_path / "logs" / "taleleaf.log"
    setup_logging("INFO", str(log_file))

    logging.getLogger("taleleaf.retrieval.service").info("Refused out-of-window page 80")

    assert len(logging.getLogger("taleleaf").handlers) == 2
    assert "Refused out-of-window page 80" in log_file.read_text(encoding="utf-8")
