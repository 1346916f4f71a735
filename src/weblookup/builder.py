"""Fluent wiring for search clients and site explorers.

Example:
    ```python
    client = (
        WebLookupBuilder()
        .add_duckduckgo()
        .add_mojeek("MOJEEK_KEY")
        .add_google(lambda google: google.add_engine("KEY", "CX"))
        .build_search_client()
    )
    ```
"""

from __future__ import annotations

from collections.abc import Callable

import httpx

from .core.config import (
    BackoffConfig,
    GoogleEngineConfig,
    HttpConfig,
    ProviderConfig,
    WebLookupConfig,
)
from .core.exceptions import ConfigurationError
from .core.logger import get_logger
from .http.backoff import RateLimitCallback
from .http.client import create_async_client
from .search.base import SearchOptions, SearchProvider
from .search.client import WebSearchClient
from .search.providers import (
    DuckDuckGoProvider,
    GoogleSearchProvider,
    MojeekProvider,
    SearchApiProvider,
    TavilySearchProvider,
)
from .site.explorer import SiteExplorer
from .site.sitemap import DEFAULT_MAX_DEPTH

logger = get_logger("builder")

ProviderFactory = Callable[[httpx.AsyncClient], SearchProvider]


def _require(value: str | None, what: str) -> str:
    if value is None or not value.strip():
        raise ConfigurationError(f"{what} must not be empty")
    return value


class GoogleSearchBuilder:
    """Collects Google Programmable Search engines."""

    def __init__(self) -> None:
        self._engines: list[GoogleEngineConfig] = []

    def add_engine(self, api_key: str, cx: str) -> GoogleSearchBuilder:
        self._engines.append(
            GoogleEngineConfig(api_key=_require(api_key, "api_key"), cx=_require(cx, "cx"))
        )
        return self

    def build(self) -> list[GoogleEngineConfig]:
        if not self._engines:
            raise ConfigurationError("At least one engine must be added.", provider="Google")
        return list(self._engines)


class WebLookupBuilder:
    """Register providers, then build a :class:`WebSearchClient`.

    All providers built by one builder share a single HTTP client and
    therefore a single per-host backoff table.
    """

    def __init__(self) -> None:
        self._factories: list[ProviderFactory] = []
        self._options = SearchOptions()
        self._http = HttpConfig()
        self._backoff = BackoffConfig()
        self._max_depth = DEFAULT_MAX_DEPTH
        self._on_rate_limited: RateLimitCallback | None = None

    @property
    def provider_count(self) -> int:
        return len(self._factories)

    def add_duckduckgo(self, region: str | None = None) -> WebLookupBuilder:
        self._factories.append(lambda client: DuckDuckGoProvider(region=region, client=client))
        return self

    def add_mojeek(self, api_key: str) -> WebLookupBuilder:
        api_key = _require(api_key, "api_key")
        self._factories.append(lambda client: MojeekProvider(api_key, client=client))
        return self

    def add_search_api(self, api_key: str, engine: str = "google") -> WebLookupBuilder:
        api_key = _require(api_key, "api_key")
        engine = _require(engine, "engine")
        self._factories.append(lambda client: SearchApiProvider(api_key, engine, client=client))
        return self

    def add_tavily(self, api_key: str) -> WebLookupBuilder:
        api_key = _require(api_key, "api_key")
        self._factories.append(lambda client: TavilySearchProvider(api_key, client=client))
        return self

    def add_google(self, configure: Callable[[GoogleSearchBuilder], object]) -> WebLookupBuilder:
        google = GoogleSearchBuilder()
        configure(google)
        engines = google.build()
        self._factories.append(lambda client: GoogleSearchProvider(engines, client=client))
        return self

    def add_provider(self, provider: ProviderConfig) -> WebLookupBuilder:
        """Register a provider described by configuration (disabled ones are skipped)."""
        if not provider.enabled:
            logger.debug("Skipping disabled provider: %s", provider.provider)
            return self

        if provider.provider == "duckduckgo":
            return self.add_duckduckgo(region=provider.region)
        if provider.provider == "mojeek":
            return self.add_mojeek(provider.api_key or "")
        if provider.provider == "searchapi":
            return self.add_search_api(provider.api_key or "", provider.engine)
        if provider.provider == "tavily":
            return self.add_tavily(provider.api_key or "")
        if provider.provider == "google":
            engines = list(provider.engines)

            def configure(google: GoogleSearchBuilder) -> None:
                for engine in engines:
                    google.add_engine(engine.api_key, engine.cx)

            return self.add_google(configure)

        raise ConfigurationError(f"Unknown provider type: {provider.provider}")

    def with_options(self, options: SearchOptions) -> WebLookupBuilder:
        self._options = options
        return self

    def with_http(self, http: HttpConfig) -> WebLookupBuilder:
        self._http = http
        return self

    def with_backoff(
        self,
        backoff: BackoffConfig,
        on_rate_limited: RateLimitCallback | None = None,
    ) -> WebLookupBuilder:
        self._backoff = backoff
        self._on_rate_limited = on_rate_limited
        return self

    def with_max_sitemap_depth(self, max_depth: int) -> WebLookupBuilder:
        if max_depth < 0:
            raise ConfigurationError("max_depth must be >= 0")
        self._max_depth = max_depth
        return self

    def create_client(self) -> httpx.AsyncClient:
        """Create an HTTP client with this builder's timeout, User-Agent and backoff."""
        return create_async_client(
            self._http,
            self._backoff,
            on_rate_limited=self._on_rate_limited,
        )

    def build_search_client(self, client: httpx.AsyncClient | None = None) -> WebSearchClient:
        """Build the search client.

        Args:
            client: Shared HTTP client, left open on close. When omitted, one
                is created and closed together with the returned client.
        """
        owned = client is None
        http_client = client or self.create_client()
        providers = [factory(http_client) for factory in self._factories]
        logger.info(
            "Built search client with providers: %s",
            ", ".join(provider.name for provider in providers) or "(none)",
        )
        return WebSearchClient(
            *providers,
            options=self._options,
            http_client=http_client if owned else None,
        )

    def build_site_explorer(self, client: httpx.AsyncClient | None = None) -> SiteExplorer:
        if client is not None:
            return SiteExplorer(client, max_depth=self._max_depth)
        return SiteExplorer(
            max_depth=self._max_depth,
            http=self._http,
            backoff=self._backoff,
            on_rate_limited=self._on_rate_limited,
        )

    @classmethod
    def from_config(cls, config: WebLookupConfig) -> WebLookupBuilder:
        """Create a builder populated from a :class:`WebLookupConfig`."""
        builder = (
            cls()
            .with_options(
                SearchOptions(max_results_per_provider=config.search.max_results_per_provider)
            )
            .with_http(config.http)
            .with_backoff(config.backoff)
            .with_max_sitemap_depth(config.sitemap.max_depth)
        )
        for provider in config.search.providers:
            builder.add_provider(provider)
        return builder
