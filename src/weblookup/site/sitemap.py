"""Streaming sitemap crawler.

Sitemaps are fetched and yielded entry by entry. Sitemap index documents are
followed depth-first and sequentially, down to a fixed depth. A sitemap that
cannot be fetched or parsed contributes no entries; its siblings and parents
are unaffected. Cancellation is never swallowed.
"""

from __future__ import annotations

import gzip
import re
import xml.etree.ElementTree as ET
from collections.abc import AsyncGenerator, Iterator
from datetime import UTC, datetime
from urllib.parse import urlsplit

import httpx
from pydantic import BaseModel, ConfigDict, Field

from ..core.logger import get_logger

logger = get_logger("site.sitemap")

DEFAULT_MAX_DEPTH = 10

_GZIP_MAGIC = b"\x1f\x8b"
_DECIMAL = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_PARTIAL_DATE_FORMATS = ("%Y-%m", "%Y")


class SitemapEntry(BaseModel):
    """One ``<url>`` element of a sitemap."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="Page location")
    last_modified: datetime | None = Field(default=None, description="<lastmod>")
    change_frequency: str | None = Field(default=None, description="<changefreq>")
    priority: float | None = Field(default=None, description="<priority>")


def parse_lastmod(value: str | None) -> datetime | None:
    """Parse a W3C datetime, returning None when it is not understood.

    Values without an offset are taken as UTC.
    """
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None

    parsed: datetime | None = None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        for fmt in _PARTIAL_DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def parse_priority(value: str | None) -> float | None:
    """Parse a ``<priority>`` value with a ``.`` decimal point."""
    if value is None:
        return None
    text = value.strip()
    if not _DECIMAL.match(text):
        return None
    return float(text)


def _split_tag(tag: str) -> tuple[str, str]:
    """Split ``{namespace}local`` into (namespace, local)."""
    if tag.startswith("{"):
        namespace, _, local = tag[1:].partition("}")
        return namespace, local
    return "", tag


def _is_absolute_url(url: str) -> bool:
    try:
        parsed = urlsplit(url)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


class SitemapCrawler:
    """Fetch sitemaps and stream their entries.

    Example:
        ```python
        async with httpx.AsyncClient() as client:
            crawler = SitemapCrawler(client)
            async for entry in crawler.stream("https://example.com/sitemap.xml"):
                print(entry.url)
        ```
    """

    def __init__(self, client: httpx.AsyncClient, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        """Initialize the crawler.

        Args:
            client: HTTP client used for every fetch (not closed by the crawler)
            max_depth: Deepest sitemap index nesting that is still fetched
        """
        if max_depth < 0:
            raise ValueError("max_depth must be >= 0")
        self._client = client
        self.max_depth = max_depth

    async def collect(self, url: str) -> list[SitemapEntry]:
        """Fetch every entry reachable from ``url`` into a list."""
        return [entry async for entry in self.stream(url)]

    async def stream(self, url: str, depth: int = 0) -> AsyncGenerator[SitemapEntry, None]:
        """Yield entries from ``url``, recursing into sitemap indexes.

        Args:
            url: Absolute sitemap URL
            depth: Current nesting level (0 for the entry point)

        Yields:
            SitemapEntry values in document order
        """
        if depth > self.max_depth:
            logger.debug("Sitemap depth limit reached at %s (depth=%d)", url, depth)
            return

        try:
            root = await self._fetch_root(url)
        except Exception as exc:
            logger.warning("Skipping sitemap %s: %s", url, exc)
            return

        namespace, local_name = _split_tag(root.tag)

        if local_name == "sitemapindex":
            children = list(self._child_sitemaps(root, namespace))
            logger.debug("Sitemap index %s lists %d child sitemaps", url, len(children))
            for child_url in children:
                async for entry in self.stream(child_url, depth + 1):
                    yield entry
        else:
            for entry in self._entries(root, namespace):
                yield entry

    async def _fetch_root(self, url: str) -> ET.Element:
        response = await self._client.get(url)
        response.raise_for_status()
        body = response.content

        if self._is_compressed(url, response) and body[:2] == _GZIP_MAGIC:
            body = gzip.decompress(body)

        return ET.fromstring(body)

    @staticmethod
    def _is_compressed(url: str, response: httpx.Response) -> bool:
        # httpx already decodes a declared gzip Content-Encoding, so callers
        # check the magic bytes before decompressing again.
        if urlsplit(url).path.lower().endswith(".gz"):
            return True
        encoding = response.headers.get("Content-Encoding", "")
        return "gzip" in encoding.lower()

    @staticmethod
    def _child_sitemaps(root: ET.Element, namespace: str) -> Iterator[str]:
        ns = f"{{{namespace}}}" if namespace else ""
        for sitemap in root.findall(f"{ns}sitemap"):
            loc = sitemap.findtext(f"{ns}loc")
            if loc is None:
                continue
            loc = loc.strip()
            if _is_absolute_url(loc):
                yield loc

    @staticmethod
    def _entries(root: ET.Element, namespace: str) -> Iterator[SitemapEntry]:
        ns = f"{{{namespace}}}" if namespace else ""
        for element in root.findall(f"{ns}url"):
            loc = element.findtext(f"{ns}loc")
            if loc is None or not loc.strip():
                continue

            yield SitemapEntry(
                url=loc.strip(),
                last_modified=parse_lastmod(element.findtext(f"{ns}lastmod")),
                change_frequency=element.findtext(f"{ns}changefreq"),
                priority=parse_priority(element.findtext(f"{ns}priority")),
            )
