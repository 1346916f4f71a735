"""Base classes and interfaces for search providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

from ..core.config import BackoffConfig, HttpConfig
from ..core.exceptions import SearchProviderError
from ..http.client import create_async_client


class SearchResult(BaseModel):
    """Standardized search result from any provider.

    Attributes:
        url: Result URL
        title: Result title
        description: Text snippet, if the provider returned one
        provider: Name of the provider that produced the result
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="Result URL")
    title: str = Field(description="Result title")
    description: str | None = Field(default=None, description="Snippet or description")
    provider: str | None = Field(default=None, description="Source provider name")


class SearchOptions(BaseModel):
    """Per-query options for the search orchestrator."""

    model_config = ConfigDict(frozen=True)

    max_results_per_provider: int = Field(
        default=10,
        ge=1,
        description="Results requested from each provider",
    )


class SearchProvider(ABC):
    """Abstract base class for search providers.

    A provider turns a query into a list of results. The orchestrator only
    relies on :attr:`name` and :meth:`search`.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the provider name."""

    @abstractmethod
    async def search(self, query: str, count: int = 10) -> list[SearchResult]:
        """Perform a search query.

        Args:
            query: Search query string
            count: Maximum number of results to request

        Returns:
            Results in provider order

        Raises:
            SearchProviderError: If the provider request fails
        """

    async def aclose(self) -> None:
        """Release resources held by the provider."""


class HttpSearchProvider(SearchProvider):
    """Search provider backed by an ``httpx.AsyncClient``.

    An injected client is shared and never closed here. Without one, the
    provider lazily creates its own client over a backoff transport and closes
    it in :meth:`aclose`.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        http: HttpConfig | None = None,
        backoff: BackoffConfig | None = None,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._http = http
        self._backoff = backoff

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = create_async_client(self._http, self._backoff)
        return self._client

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise SearchProviderError(
                f"{self.name} request failed: {exc}",
                provider=self.name,
            ) from exc

        if not response.is_success:
            raise SearchProviderError(
                f"{self.name} API error: {response.status_code}",
                provider=self.name,
                status_code=response.status_code,
            )
        return response

    def _decode_json(self, response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise SearchProviderError(
                f"{self.name} returned invalid JSON",
                provider=self.name,
            ) from exc
        if not isinstance(data, dict):
            raise SearchProviderError(
                f"{self.name} returned an unexpected payload",
                provider=self.name,
            )
        return data

    async def _get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        response = await self._request("GET", url, params=params, headers=headers)
        return self._decode_json(response)

    async def _post_json(
        self,
        url: str,
        body: dict[str, Any],
        *,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        response = await self._request("POST", url, json=body, headers=headers)
        return self._decode_json(response)

    @staticmethod
    def _get_string(item: Any, key: str) -> str | None:
        """Return ``item[key]`` only when it is a string."""
        if not isinstance(item, dict):
            return None
        value = item.get(key)
        return value if isinstance(value, str) else None

    @staticmethod
    def _get_list(data: Any, *path: str) -> list[Any]:
        """Walk nested dict keys and return the list found there, or []."""
        current = data
        for key in path:
            if not isinstance(current, dict):
                return []
            current = current.get(key)
        return current if isinstance(current, list) else []

    def _results_from_items(
        self,
        items: list[Any],
        *,
        url_key: str,
        title_key: str,
        description_key: str,
    ) -> list[SearchResult]:
        results: list[SearchResult] = []
        for item in items:
            url = self._get_string(item, url_key)
            title = self._get_string(item, title_key)
            if url is None or title is None:
                continue
            results.append(
                SearchResult(
                    url=url,
                    title=title,
                    description=self._get_string(item, description_key),
                    provider=self.name,
                )
            )
        return results

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
