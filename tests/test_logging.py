"""Tests for timestamper.logging_setup."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from timestamper.logging_setup import setup_logging


class TestSetupLogging:
    def test_console_only_by_default(self, clean_logger: logging.Logger) -> None:
        logger = setup_logging()
        assert logger is clean_logger
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_adds_rotating_file_handler(self, tmp_path: Path, clean_logger: logging.Logger) -> None:
        log_file = tmp_path / "logs" / "timestamper.log"
        logger = setup_logging(logging.DEBUG, log_file)
        assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
        logging.getLogger("timestamper.commands").debug("no new line")
        assert "DEBUG - no new line" in log_file.read_text(encoding="utf-8")

    def test_second_call_keeps_handlers(self, clean_logger: logging.Logger) -> None:
        setup_logging()
        logger = setup_logging(logging.DEBUG)
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
