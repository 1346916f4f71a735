"""Exception hierarchy for WebLookup."""

from __future__ import annotations


class WebLookupError(Exception):
    """Base exception for WebLookup errors."""

    def __init__(self, message: str, provider: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Error message
            provider: Name of the search provider involved, if any
        """
        self.provider = provider
        super().__init__(message)


class SearchProviderError(WebLookupError):
    """A search provider request failed or returned an unusable payload."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message, provider=provider)


class ConfigurationError(WebLookupError):
    """Invalid builder or configuration input."""
