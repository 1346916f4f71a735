"""Tavily search provider - AI-optimized search engine."""

from __future__ import annotations

import httpx

from ...core.config import BackoffConfig, HttpConfig
from ...core.exceptions import ConfigurationError
from ...core.logger import get_logger
from ..base import HttpSearchProvider, SearchResult

logger = get_logger("search.tavily")

TAVILY_API_BASE = "https://api.tavily.com"
TAVILY_SEARCH_URL = f"{TAVILY_API_BASE}/search"


class TavilySearchProvider(HttpSearchProvider):
    """Tavily search provider."""

    def __init__(
        self,
        api_key: str,
        client: httpx.AsyncClient | None = None,
        *,
        http: HttpConfig | None = None,
        backoff: BackoffConfig | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ConfigurationError("Tavily API key is required", provider="Tavily")
        super().__init__(client, http=http, backoff=backoff)
        self.api_key = api_key

    @property
    def name(self) -> str:
        return "Tavily"

    async def search(self, query: str, count: int = 10) -> list[SearchResult]:
        logger.debug("Tavily search: %s", query[:100])
        data = await self._post_json(
            TAVILY_SEARCH_URL,
            {"api_key": self.api_key, "query": query, "max_results": count},
        )
        results = self._results_from_items(
            self._get_list(data, "results"),
            url_key="url",
            title_key="title",
            description_key="content",
        )
        logger.debug("Tavily returned %d results", len(results))
        return results
