"""HTTP plumbing shared by search providers and site exploration."""

from .backoff import BackoffState, BackoffTransport, parse_retry_after
from .client import create_async_client, create_backoff_transport

__all__ = [
    "BackoffState",
    "BackoffTransport",
    "create_async_client",
    "create_backoff_transport",
    "parse_retry_after",
]
