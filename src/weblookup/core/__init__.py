"""Core modules for WebLookup.

This package contains the shared infrastructure:
- Configuration management
- Logging utilities
- Exception hierarchy
"""

from .config import (
    BackoffConfig,
    GoogleEngineConfig,
    HttpConfig,
    LoggingConfig,
    ProviderConfig,
    SearchConfig,
    SitemapConfig,
    WebLookupConfig,
)
from .exceptions import ConfigurationError, SearchProviderError, WebLookupError
from .logger import get_logger, setup_logging

__all__ = [
    "BackoffConfig",
    "ConfigurationError",
    "GoogleEngineConfig",
    "HttpConfig",
    "LoggingConfig",
    "ProviderConfig",
    "SearchConfig",
    "SearchProviderError",
    "SitemapConfig",
    "WebLookupConfig",
    "WebLookupError",
    "get_logger",
    "setup_logging",
]
