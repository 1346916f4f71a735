"""Base utilities and shared imports for CLI module."""

from __future__ import annotations

import argparse
from pathlib import Path

from ..core import WebLookupConfig, get_logger, setup_logging

logger = get_logger("cli")


def load_config(args: argparse.Namespace) -> WebLookupConfig:
    """Load configuration for a command and configure logging.

    The YAML file named by ``--config`` is used when given; otherwise settings
    come from ``WEBLOOKUP_*`` environment variables and defaults.
    """
    config_path = getattr(args, "config", None)
    if config_path:
        config = WebLookupConfig.from_yaml(Path(config_path))
    else:
        config = WebLookupConfig()

    if getattr(args, "debug", False):
        config.logging.level = "DEBUG"
    setup_logging(config.logging)
    return config


__all__ = [
    "load_config",
    "logger",
]
