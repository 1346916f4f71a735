"""DuckDuckGo search provider - free, no API key required.

Results are scraped from the HTML endpoint, since DuckDuckGo offers no
official web-search API.
"""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

import httpx
from bs4 import BeautifulSoup

from ...core.config import BackoffConfig, HttpConfig
from ...core.logger import get_logger
from ..base import HttpSearchProvider, SearchResult

logger = get_logger("search.duckduckgo")

DUCKDUCKGO_HTML_URL = "https://html.duckduckgo.com/html/"
PROVIDER_NAME = "DuckDuckGo"


def decode_result_url(raw_href: str) -> str | None:
    """Resolve a DuckDuckGo result link to the target URL.

    Redirect links carry the target in the ``uddg`` parameter. Only absolute
    http(s) URLs are accepted.
    """
    try:
        target = parse_qs(urlsplit(raw_href).query).get("uddg")
        url = target[0] if target else raw_href
        parsed = urlsplit(url)
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return url


def parse_results(page: str) -> list[SearchResult]:
    """Extract results from a DuckDuckGo HTML results page."""
    soup = BeautifulSoup(page, "html.parser")
    results: list[SearchResult] = []

    for block in soup.select(".result"):
        link = block.select_one(".result__a")
        if link is None:
            continue

        url = decode_result_url(str(link.get("href", "")))
        if url is None:
            continue

        title = link.get_text().strip()
        if not title:
            continue

        description: str | None = None
        snippet = block.select_one(".result__snippet")
        if snippet is not None:
            description = snippet.get_text().strip() or None

        results.append(
            SearchResult(url=url, title=title, description=description, provider=PROVIDER_NAME)
        )

    return results


class DuckDuckGoProvider(HttpSearchProvider):
    """DuckDuckGo search provider.

    Features:
    - Free to use, no API key required
    - Optional region (``kl`` parameter, e.g. ``us-en``)
    """

    def __init__(
        self,
        region: str | None = None,
        client: httpx.AsyncClient | None = None,
        *,
        http: HttpConfig | None = None,
        backoff: BackoffConfig | None = None,
    ) -> None:
        """Initialize DuckDuckGo provider.

        Args:
            region: Region for search results
            client: Shared HTTP client (optional)
            http: Settings for a self-created client
            backoff: Backoff settings for a self-created client
        """
        super().__init__(client, http=http, backoff=backoff)
        self.region = region

    @property
    def name(self) -> str:
        return PROVIDER_NAME

    async def search(self, query: str, count: int = 10) -> list[SearchResult]:
        logger.debug("DuckDuckGo search: %s", query[:100])

        form = {"q": query}
        if self.region:
            form["kl"] = self.region

        response = await self._request(
            "POST",
            DUCKDUCKGO_HTML_URL,
            data=form,
            headers={"Referer": "https://html.duckduckgo.com/"},
        )
        results = parse_results(response.text)
        return results[:count]
