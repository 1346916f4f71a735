"""Tests for the logger module."""

import logging
from logging.handlers import RotatingFileHandler

import pytest
from rich.logging import RichHandler

from weblookup.core.config import LoggingConfig
from weblookup.core.logger import get_logger, setup_logging

pytestmark = pytest.mark.usefixtures("reset_logging")


class TestGetLogger:
    """Tests for the get_logger function."""

    def test_get_logger_returns_correct_instance(self):
        """Test that get_logger returns a correctly named Logger instance."""
        logger = get_logger("test_name")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "weblookup.test_name"

    def test_get_logger_is_cached(self):
        """Test that multiple calls with the same name return the same logger instance."""
        logger1 = get_logger("cached_name")
        logger2 = get_logger("cached_name")
        assert logger1 is logger2


class TestSetupLogging:
    """Tests for the setup_logging function."""

    def test_setup_logging_levels(self):
        """Test that setup_logging correctly sets the logger level."""
        setup_logging(LoggingConfig(level="DEBUG"))
        assert logging.getLogger("weblookup").level == logging.DEBUG

        setup_logging(LoggingConfig(level="WARNING"))
        assert logging.getLogger("weblookup").level == logging.WARNING

    def test_setup_logging_defaults(self):
        setup_logging()
        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_handlers(self, tmp_path):
        """Test that the correct handlers are configured."""
        # 1. Console logging only
        setup_logging(LoggingConfig(log_file=None))
        root_handlers = logging.getLogger().handlers
        assert len(root_handlers) == 1
        assert isinstance(root_handlers[0], RichHandler)

        # 2. With file logging; previous handlers are replaced
        log_file = tmp_path / "logs" / "test.log"
        setup_logging(LoggingConfig(log_file=str(log_file)))
        root_handlers = logging.getLogger().handlers
        assert len(root_handlers) == 2
        assert any(isinstance(h, RichHandler) for h in root_handlers)
        assert any(isinstance(h, RotatingFileHandler) for h in root_handlers)

    def test_file_logging_writes_to_file(self, tmp_path):
        """Test that file logging actually writes messages to the specified file."""
        log_file = tmp_path / "test.log"
        setup_logging(LoggingConfig(level="INFO", log_file=str(log_file)))

        logger = get_logger("file_test")
        test_message = "This is a test message for the log file."
        logger.info(test_message)

        assert log_file.exists()
        assert test_message in log_file.read_text()
