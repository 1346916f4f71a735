"""Multi-provider web search with failure isolation and URL deduplication."""

from __future__ import annotations

import asyncio
import time
from types import TracebackType
from urllib.parse import urlsplit

import httpx

from ..core.logger import get_logger
from .base import SearchOptions, SearchProvider, SearchResult

logger = get_logger("search.client")

_DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_url(url: str) -> str:
    """Canonical form of ``url`` used as the deduplication key.

    Scheme and host are lower-cased, the scheme's default port is dropped,
    trailing slashes are removed from the path and the fragment is discarded.
    The query string is kept verbatim. Anything that is not an absolute URL
    is simply lower-cased.
    """
    try:
        parsed = urlsplit(url)
        port = parsed.port
    except ValueError:
        return url.lower()

    host = parsed.hostname
    if not parsed.scheme or not host:
        return url.lower()

    scheme = parsed.scheme.lower()
    if ":" in host:
        host = f"[{host}]"
    port_part = "" if port is None or port == _DEFAULT_PORTS.get(scheme) else f":{port}"
    path = parsed.path.rstrip("/")
    query = f"?{parsed.query}" if parsed.query else ""

    return f"{scheme}://{host}{port_part}{path}{query}"


class WebSearchClient:
    """Run one query against several providers and merge the results.

    Features:
    - Concurrent fan-out to every configured provider
    - A failing provider contributes no results instead of failing the query
    - Results merged in provider order and deduplicated by normalized URL

    Example:
        ```python
        async with WebSearchClient(DuckDuckGoProvider(), MojeekProvider(api_key)) as client:
            results = await client.search("python asyncio")
        ```
    """

    def __init__(
        self,
        *providers: SearchProvider,
        options: SearchOptions | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            *providers: Search providers in fan-out (and merge) order
            options: Default options for :meth:`search`
            http_client: Shared HTTP client owned by this object, closed by :meth:`aclose`
        """
        self._providers = tuple(providers)
        self.options = options or SearchOptions()
        self._http_client = http_client

        logger.debug(
            "WebSearchClient initialized (providers=%s)",
            ", ".join(provider.name for provider in self._providers),
        )

    @property
    def providers(self) -> tuple[SearchProvider, ...]:
        return self._providers

    async def search(
        self,
        query: str,
        options: SearchOptions | None = None,
    ) -> list[SearchResult]:
        """Search every provider concurrently and merge the results.

        Args:
            query: Search query string
            options: Overrides the client's default options for this call

        Returns:
            Deduplicated results; provider order first, then each provider's order
        """
        effective = options or self.options
        count = effective.max_results_per_provider
        start_time = time.monotonic()

        batches = await asyncio.gather(
            *(self._safe_search(provider, query, count) for provider in self._providers)
        )

        seen: set[str] = set()
        results: list[SearchResult] = []
        for batch in batches:
            for result in batch:
                key = normalize_url(result.url)
                if key in seen:
                    continue
                seen.add(key)
                results.append(result)

        logger.info(
            "Search completed: %d results from %d providers in %.2fms",
            len(results),
            len(self._providers),
            (time.monotonic() - start_time) * 1000,
        )
        return results

    @staticmethod
    async def _safe_search(
        provider: SearchProvider,
        query: str,
        count: int,
    ) -> list[SearchResult]:
        # asyncio.CancelledError is a BaseException and is not caught here.
        try:
            return list(await provider.search(query, count))
        except Exception as exc:
            logger.warning("Provider %s failed: %s", provider.name, exc)
            return []

    async def aclose(self) -> None:
        """Close every provider and the owned HTTP client.

        Every provider is closed even if an earlier one fails; the first
        failure is re-raised once the HTTP client is closed too.
        """
        first_error: Exception | None = None
        try:
            for provider in self._providers:
                try:
                    await provider.aclose()
                except Exception as exc:
                    logger.warning("Failed to close provider %s: %s", provider.name, exc)
                    if first_error is None:
                        first_error = exc
        finally:
            if self._http_client is not None:
                http_client, self._http_client = self._http_client, None
                await http_client.aclose()

        if first_error is not None:
            raise first_error

    async def __aenter__(self) -> WebSearchClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
