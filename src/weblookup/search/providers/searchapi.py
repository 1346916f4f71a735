"""SearchApi.io provider (proxied Google, Bing and other engines)."""

from __future__ import annotations

import httpx

from ...core.config import BackoffConfig, HttpConfig
from ...core.exceptions import ConfigurationError
from ..base import HttpSearchProvider, SearchResult

SEARCHAPI_URL = "https://www.searchapi.io/api/v1/search"


class SearchApiProvider(HttpSearchProvider):
    """SearchApi.io provider.

    Args:
        api_key: SearchApi bearer token
        engine: Backing engine name (``google`` by default)
    """

    def __init__(
        self,
        api_key: str,
        engine: str = "google",
        client: httpx.AsyncClient | None = None,
        *,
        http: HttpConfig | None = None,
        backoff: BackoffConfig | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ConfigurationError("SearchApi API key is required", provider="SearchApi")
        if not engine or not engine.strip():
            raise ConfigurationError("SearchApi engine is required", provider="SearchApi")
        super().__init__(client, http=http, backoff=backoff)
        self.api_key = api_key
        self.engine = engine

    @property
    def name(self) -> str:
        return "SearchApi"

    async def search(self, query: str, count: int = 10) -> list[SearchResult]:
        data = await self._get_json(
            SEARCHAPI_URL,
            params={"engine": self.engine, "q": query, "num": count},
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        return self._results_from_items(
            self._get_list(data, "organic_results"),
            url_key="link",
            title_key="title",
            description_key="snippet",
        )
