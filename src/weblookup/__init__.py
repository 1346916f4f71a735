"""WebLookup: multi-provider web search and site exploration.

Features:
- Concurrent search across DuckDuckGo, Google, Mojeek, SearchApi and Tavily
- Per-provider failure isolation and URL deduplication
- Shared per-host backoff on ``429 Too Many Requests``
- robots.txt policy evaluation and streaming sitemap crawling

Example:
    ```python
    from weblookup import WebLookupBuilder

    async with WebLookupBuilder().add_duckduckgo().build_search_client() as client:
        results = await client.search("python asyncio")

    async with WebLookupBuilder().build_site_explorer() as explorer:
        policy = await explorer.get_robots("https://example.com")
        allowed = policy.is_allowed("/private")
    ```
"""

from importlib.metadata import PackageNotFoundError, version

from .builder import GoogleSearchBuilder, WebLookupBuilder
from .core import (
    ConfigurationError,
    SearchProviderError,
    WebLookupConfig,
    WebLookupError,
    get_logger,
    setup_logging,
)
from .http import BackoffTransport, create_async_client
from .search import SearchOptions, SearchProvider, SearchResult, WebSearchClient
from .site import RobotsPolicy, SiteExplorer, SitemapEntry, parse_robots

__all__ = [
    "__version__",
    "BackoffTransport",
    "ConfigurationError",
    "GoogleSearchBuilder",
    "RobotsPolicy",
    "SearchOptions",
    "SearchProvider",
    "SearchProviderError",
    "SearchResult",
    "SiteExplorer",
    "SitemapEntry",
    "WebLookupBuilder",
    "WebLookupConfig",
    "WebLookupError",
    "WebSearchClient",
    "create_async_client",
    "get_logger",
    "parse_robots",
    "setup_logging",
]

try:  # pragma: no cover - best-effort during development
    __version__ = version("weblookup")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
