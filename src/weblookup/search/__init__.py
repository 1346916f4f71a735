"""Web search across multiple providers.

This module provides a unified interface for web search across:
- DuckDuckGo (free, no API key required)
- Google Custom Search
- Mojeek
- SearchApi.io
- Tavily

Features:
- Concurrent fan-out with per-provider failure isolation
- Merge in provider order with URL deduplication
- Shared per-host rate-limit backoff
"""

from .base import HttpSearchProvider, SearchOptions, SearchProvider, SearchResult
from .client import WebSearchClient, normalize_url

__all__ = [
    "HttpSearchProvider",
    "SearchOptions",
    "SearchProvider",
    "SearchResult",
    "WebSearchClient",
    "normalize_url",
]
