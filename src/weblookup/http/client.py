"""Factory for the shared async HTTP client."""

from __future__ import annotations

import httpx

from ..core.config import BackoffConfig, HttpConfig
from .backoff import BackoffTransport, RateLimitCallback


def create_backoff_transport(
    backoff: BackoffConfig | None = None,
    *,
    on_rate_limited: RateLimitCallback | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> BackoffTransport:
    """Build a :class:`BackoffTransport` from configuration."""
    backoff = backoff or BackoffConfig()
    return BackoffTransport(
        transport,
        max_retries=backoff.max_retries,
        max_backoff=backoff.max_backoff_seconds,
        on_rate_limited=on_rate_limited,
    )


def create_async_client(
    http: HttpConfig | None = None,
    backoff: BackoffConfig | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    on_rate_limited: RateLimitCallback | None = None,
) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` whose requests go through per-host backoff.

    Args:
        http: Timeout and User-Agent settings
        backoff: Retry budget and delay ceiling
        transport: Inner transport to decorate (defaults to the network transport)
        on_rate_limited: Observer for 429 responses

    Returns:
        Configured AsyncClient; the caller owns it and must close it
    """
    http = http or HttpConfig()
    return httpx.AsyncClient(
        transport=create_backoff_transport(
            backoff,
            on_rate_limited=on_rate_limited,
            transport=transport,
        ),
        timeout=http.timeout,
        headers={"User-Agent": http.user_agent},
        follow_redirects=True,
    )
