"""Site exploration facade: robots.txt retrieval and sitemap access."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from types import TracebackType
from urllib.parse import urljoin

import httpx

from ..core.config import BackoffConfig, HttpConfig
from ..core.logger import get_logger
from ..http.backoff import RateLimitCallback
from ..http.client import create_async_client
from .robots import ALLOW_ALL, DISALLOW_ALL, RobotsPolicy, parse_robots
from .sitemap import DEFAULT_MAX_DEPTH, SitemapCrawler, SitemapEntry

logger = get_logger("site.explorer")


class SiteExplorer:
    """Retrieve robots policies and sitemaps for websites.

    When no client is supplied, one is created lazily (with per-host backoff)
    and closed by :meth:`aclose`. An injected client is left open.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        http: HttpConfig | None = None,
        backoff: BackoffConfig | None = None,
        on_rate_limited: RateLimitCallback | None = None,
    ) -> None:
        """Initialize the explorer.

        Args:
            client: Shared HTTP client (optional)
            max_depth: Sitemap index nesting limit
            http: Settings for a self-created client
            backoff: Backoff settings for a self-created client
            on_rate_limited: 429 observer for a self-created client
        """
        self._client = client
        self._owns_client = client is None
        self._http = http
        self._backoff = backoff
        self._on_rate_limited = on_rate_limited
        self.max_depth = max_depth

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = create_async_client(
                self._http,
                self._backoff,
                on_rate_limited=self._on_rate_limited,
            )
        return self._client

    async def get_robots(self, base_url: str) -> RobotsPolicy:
        """Fetch and parse ``/robots.txt`` for the site of ``base_url``.

        A missing file (404) allows everything. Any other failure status or a
        transport error disallows everything.
        """
        robots_url = urljoin(base_url, "/robots.txt")

        try:
            response = await self.client.get(robots_url)
        except httpx.HTTPError as exc:
            logger.info("robots.txt request failed for %s: %s; disallowing", robots_url, exc)
            return DISALLOW_ALL

        if response.status_code == 404:
            logger.debug("robots.txt not found for %s; allowing", robots_url)
            return ALLOW_ALL

        if not response.is_success:
            logger.info(
                "robots.txt returned %d for %s; disallowing",
                response.status_code,
                robots_url,
            )
            return DISALLOW_ALL

        return parse_robots(response.text)

    async def get_sitemap(self, sitemap_url: str) -> list[SitemapEntry]:
        """Collect every entry reachable from ``sitemap_url``."""
        return await self._crawler().collect(sitemap_url)

    def stream_sitemap(self, sitemap_url: str) -> AsyncGenerator[SitemapEntry, None]:
        """Stream entries reachable from ``sitemap_url``."""
        return self._crawler().stream(sitemap_url)

    async def discover_sitemaps(self, base_url: str) -> list[str]:
        """List sitemap URLs declared in robots.txt, or the conventional default."""
        policy = await self.get_robots(base_url)
        if policy.sitemaps:
            return list(policy.sitemaps)
        return [urljoin(base_url, "/sitemap.xml")]

    def _crawler(self) -> SitemapCrawler:
        return SitemapCrawler(self.client, max_depth=self.max_depth)

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> SiteExplorer:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
