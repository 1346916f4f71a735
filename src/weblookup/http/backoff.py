"""Per-host rate-limit backoff transport.

``BackoffTransport`` decorates any ``httpx.AsyncBaseTransport``. Each
destination host gets a :class:`BackoffState` that counts consecutive
``429 Too Many Requests`` responses. Before every attempt the transport waits
for the delay the state dictates (a server-supplied ``Retry-After`` value
takes precedence over the exponential schedule), then forwards the request.

Only 429 responses are retried. Network errors from the inner transport
propagate unchanged, and cancellation aborts both the wait and the request.
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

import httpx

from ..core.logger import get_logger

logger = get_logger("http.backoff")

UNKNOWN_HOST = "unknown"
DEFAULT_MAX_BACKOFF = 30.0
TOO_MANY_REQUESTS = 429

RateLimitCallback = Callable[[str, float | None], None]


def parse_retry_after(value: str | None, now: datetime | None = None) -> float | None:
    """Parse a ``Retry-After`` header value into a delay in seconds.

    Args:
        value: Header value, either delta-seconds or an HTTP-date
        now: Reference time for HTTP-date values (defaults to current UTC time)

    Returns:
        Non-negative delay in seconds, or None if the value is absent or invalid
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None

    if value.isdigit():
        return float(int(value))

    try:
        target = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None

    if target.tzinfo is None:
        target = target.replace(tzinfo=UTC)
    reference = now or datetime.now(UTC)
    return max((target - reference).total_seconds(), 0.0)


class BackoffState:
    """Failure bookkeeping for one destination host."""

    def __init__(self, max_backoff: float = DEFAULT_MAX_BACKOFF) -> None:
        self.max_backoff = max_backoff
        self._lock = threading.Lock()
        self._consecutive_failures = 0
        self._retry_after_override: float | None = None

    @property
    def consecutive_failures(self) -> int:
        with self._lock:
            return self._consecutive_failures

    @property
    def retry_after_override(self) -> float | None:
        with self._lock:
            return self._retry_after_override

    def next_delay(self) -> float:
        """Return the delay before the next attempt, consuming any override."""
        with self._lock:
            if self._retry_after_override is not None:
                delay = self._retry_after_override
                self._retry_after_override = None
                return delay

            if self._consecutive_failures == 0:
                return 0.0

            # Exponent is bounded so huge failure counts cannot overflow a float.
            exponent = min(self._consecutive_failures - 1, 64)
            return min(2.0**exponent, self.max_backoff)

    def record_failure(self, retry_after: float | None = None) -> None:
        """Record a rate-limited response."""
        with self._lock:
            self._consecutive_failures += 1
            if retry_after is not None:
                self._retry_after_override = retry_after

    def reset(self) -> None:
        """Clear failures after any non rate-limited response."""
        with self._lock:
            self._consecutive_failures = 0
            self._retry_after_override = None


class BackoffTransport(httpx.AsyncBaseTransport):
    """Async transport that retries 429 responses with per-host backoff.

    The transport is meant to be long-lived and shared: every client built on
    the same instance shares the per-host state table.
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport | None = None,
        *,
        max_retries: int = 3,
        on_rate_limited: RateLimitCallback | None = None,
        max_backoff: float = DEFAULT_MAX_BACKOFF,
        sleep: Callable[[float], Awaitable[object]] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            transport: Inner transport (defaults to ``httpx.AsyncHTTPTransport``)
            max_retries: Retries after a 429 before the 429 is returned
            on_rate_limited: Observer called with (host, retry_after_seconds)
            max_backoff: Ceiling for the exponential delay in seconds
            sleep: Awaitable sleep used for delays (test hook)
            clock: Current-time source for HTTP-date Retry-After values (test hook)
        """
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if max_backoff <= 0:
            raise ValueError("max_backoff must be > 0")

        self.max_retries = max_retries
        self.max_backoff = max_backoff
        self.on_rate_limited = on_rate_limited

        self._transport = transport or httpx.AsyncHTTPTransport()
        self._sleep = sleep or asyncio.sleep
        self._clock = clock or (lambda: datetime.now(UTC))

        self._states: dict[str, BackoffState] = {}
        self._states_lock = threading.Lock()

    def state_for(self, host: str) -> BackoffState:
        """Return the state for ``host``, creating it on first use."""
        with self._states_lock:
            state = self._states.get(host)
            if state is None:
                state = BackoffState(max_backoff=self.max_backoff)
                self._states[host] = state
            return state

    @property
    def hosts(self) -> list[str]:
        """Hosts that have been contacted through this transport."""
        with self._states_lock:
            return list(self._states)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host or UNKNOWN_HOST
        state = self.state_for(host)

        for attempt in range(self.max_retries + 1):
            delay = state.next_delay()
            if delay > 0:
                logger.debug(
                    "Backing off %.2fs before %s %s (attempt %d/%d)",
                    delay,
                    request.method,
                    host,
                    attempt + 1,
                    self.max_retries + 1,
                )
                await self._sleep(delay)

            response = await self._transport.handle_async_request(request)

            if response.status_code != TOO_MANY_REQUESTS:
                state.reset()
                return response

            retry_after = parse_retry_after(
                response.headers.get("Retry-After"),
                now=self._clock(),
            )
            logger.info(
                "Rate limited by %s (retry_after=%s, attempt %d/%d)",
                host,
                retry_after,
                attempt + 1,
                self.max_retries + 1,
            )
            state.record_failure(retry_after)
            if self.on_rate_limited:
                try:
                    self.on_rate_limited(host, retry_after)
                except Exception:
                    logger.exception("on_rate_limited callback failed for %s", host)

            if attempt < self.max_retries:
                await response.aclose()
                continue

            logger.warning(
                "Giving up on %s after %d rate-limited attempts",
                host,
                self.max_retries + 1,
            )
            return response

        # This should never be reached: the final attempt always returns.
        raise RuntimeError("Unexpected retry loop exit")

    async def aclose(self) -> None:
        await self._transport.aclose()
