"""Mojeek search provider."""

from __future__ import annotations

import httpx

from ...core.config import BackoffConfig, HttpConfig
from ...core.exceptions import ConfigurationError
from ..base import HttpSearchProvider, SearchResult

MOJEEK_SEARCH_URL = "https://www.mojeek.com/search"


class MojeekProvider(HttpSearchProvider):
    """Mojeek independent search engine (JSON API)."""

    def __init__(
        self,
        api_key: str,
        client: httpx.AsyncClient | None = None,
        *,
        http: HttpConfig | None = None,
        backoff: BackoffConfig | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ConfigurationError("Mojeek API key is required", provider="Mojeek")
        super().__init__(client, http=http, backoff=backoff)
        self.api_key = api_key

    @property
    def name(self) -> str:
        return "Mojeek"

    async def search(self, query: str, count: int = 10) -> list[SearchResult]:
        data = await self._get_json(
            MOJEEK_SEARCH_URL,
            params={"api_key": self.api_key, "q": query, "t": count, "fmt": "json"},
        )
        return self._results_from_items(
            self._get_list(data, "response", "results"),
            url_key="url",
            title_key="title",
            description_key="desc",
        )
