"""Google Custom Search provider."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import httpx

from ...core.config import BackoffConfig, GoogleEngineConfig, HttpConfig
from ...core.exceptions import ConfigurationError
from ...core.logger import get_logger
from ..base import HttpSearchProvider, SearchResult

logger = get_logger("search.google")

GOOGLE_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"
MAX_RESULTS_PER_REQUEST = 10


class GoogleSearchProvider(HttpSearchProvider):
    """Google Programmable Search provider.

    Every configured engine (API key + ``cx``) is queried concurrently. An
    engine that fails contributes no results; the remaining engines still
    answer. Results are merged in engine order without duplicate URLs.
    """

    def __init__(
        self,
        engines: Sequence[GoogleEngineConfig],
        client: httpx.AsyncClient | None = None,
        *,
        http: HttpConfig | None = None,
        backoff: BackoffConfig | None = None,
    ) -> None:
        if not engines:
            raise ConfigurationError("At least one engine must be added.", provider="Google")
        super().__init__(client, http=http, backoff=backoff)
        self.engines = tuple(engines)

    @property
    def name(self) -> str:
        return "Google"

    async def search(self, query: str, count: int = 10) -> list[SearchResult]:
        num = min(count, MAX_RESULTS_PER_REQUEST)
        batches = await asyncio.gather(
            *(self._search_engine(engine, query, num) for engine in self.engines)
        )

        seen: set[str] = set()
        results: list[SearchResult] = []
        for batch in batches:
            for result in batch:
                key = result.url.casefold()
                if key in seen:
                    continue
                seen.add(key)
                results.append(result)
        return results

    async def _search_engine(
        self,
        engine: GoogleEngineConfig,
        query: str,
        num: int,
    ) -> list[SearchResult]:
        try:
            data = await self._get_json(
                GOOGLE_SEARCH_URL,
                params={"key": engine.api_key, "cx": engine.cx, "q": query, "num": num},
            )
        except Exception as exc:
            logger.warning("Google engine %s failed: %s", engine.cx, exc)
            return []

        return self._results_from_items(
            self._get_list(data, "items"),
            url_key="link",
            title_key="title",
            description_key="snippet",
        )
