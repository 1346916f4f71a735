"""Logging utilities for WebLookup.

This module provides centralized logging configuration with support for:
- Rich formatting for console output
- Optional rotating file logging

Library modules only call :func:`get_logger`; configuring handlers is left to
the application (the CLI calls :func:`setup_logging`).
"""

from __future__ import annotations

import logging
from contextlib import suppress
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from .config import LoggingConfig

# Global logger registry
_loggers: dict[str, logging.Logger] = {}
_configured = False

ROOT_LOGGER_NAME = "weblookup"

console = Console(stderr=True)


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Setup logging configuration for the entire application.

    Args:
        config: LoggingConfig instance. If None, uses defaults.
    """
    global _configured

    if config is None:
        config = LoggingConfig()

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        with suppress(Exception):
            handler.flush()
        with suppress(Exception):
            handler.close()
    root_logger.handlers.clear()

    level_value = getattr(logging, config.level)
    root_logger.setLevel(level_value)
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level_value)

    console_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(level_value)
    root_logger.addHandler(console_handler)

    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
            delay=True,
        )
        file_handler.setLevel(level_value)
        file_handler.setFormatter(logging.Formatter(config.format))
        root_logger.addHandler(file_handler)

    _configured = True

    logger = get_logger("setup")
    logger.debug("Logging configured: level=%s", config.level)
    if config.log_file:
        logger.debug("Log file: %s", config.log_file)


def get_logger(name: str) -> logging.Logger:
    """Get or create a logger under the ``weblookup`` namespace.

    Args:
        name: Logger name (typically the dotted module path below the package)

    Returns:
        Logger instance
    """
    if name not in _loggers:
        _loggers[name] = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return _loggers[name]
