"""Tests for SiteExplorer."""

from __future__ import annotations

from datetime import timedelta

import httpx
import pytest
from pytest_httpx import HTTPXMock

from weblookup.site import ALLOW_ALL, DISALLOW_ALL, SiteExplorer

ROBOTS_URL = "https://example.com/robots.txt"

SITEMAP_XML = """<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
    <url><loc>https://example.com/page1</loc><priority>0.8</priority></url>
    <url><loc>https://example.com/page2</loc></url>
</urlset>
"""


class TestGetRobots:
    """Tests for robots.txt retrieval."""

    @pytest.mark.asyncio
    async def test_success_is_parsed(self, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            url=ROBOTS_URL,
            text=(
                "User-agent: *\n"
                "Disallow: /private\n"
                "Crawl-delay: 2\n"
                "Sitemap: https://example.com/sitemap.xml\n"
            ),
        )

        async with SiteExplorer() as explorer:
            policy = await explorer.get_robots("https://example.com")

        assert not policy.is_allowed("/private")
        assert policy.is_allowed("/public")
        assert policy.crawl_delay == timedelta(seconds=2)
        assert policy.sitemaps == ("https://example.com/sitemap.xml",)

    @pytest.mark.asyncio
    async def test_not_found_allows_all(self, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=ROBOTS_URL, status_code=404)

        async with SiteExplorer() as explorer:
            assert await explorer.get_robots("https://example.com") == ALLOW_ALL

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [401, 403, 500, 503])
    async def test_other_errors_disallow_all(self, httpx_mock: HTTPXMock, status_code):
        httpx_mock.add_response(url=ROBOTS_URL, status_code=status_code)

        async with SiteExplorer() as explorer:
            policy = await explorer.get_robots("https://example.com")

        assert policy == DISALLOW_ALL
        assert not policy.is_allowed("/")

    @pytest.mark.asyncio
    async def test_transport_error_disallows_all(self, httpx_mock: HTTPXMock):
        httpx_mock.add_exception(httpx.ConnectError("connection refused"), url=ROBOTS_URL)

        async with SiteExplorer() as explorer:
            assert await explorer.get_robots("https://example.com") == DISALLOW_ALL

    @pytest.mark.asyncio
    async def test_robots_requested_at_site_root(self, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=ROBOTS_URL, text="")

        async with SiteExplorer() as explorer:
            await explorer.get_robots("https://example.com/some/deep/page?x=1")

        assert str(httpx_mock.get_requests()[0].url) == ROBOTS_URL


class TestSitemaps:
    """Tests for sitemap access through the explorer."""

    @pytest.mark.asyncio
    async def test_get_sitemap(self, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url="https://example.com/sitemap.xml", text=SITEMAP_XML)

        async with SiteExplorer() as explorer:
            entries = await explorer.get_sitemap("https://example.com/sitemap.xml")

        assert [entry.url for entry in entries] == [
            "https://example.com/page1",
            "https://example.com/page2",
        ]
        assert entries[0].priority == 0.8

    @pytest.mark.asyncio
    async def test_invalid_sitemap_is_empty(self, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url="https://example.com/sitemap.xml", text="not xml")

        async with SiteExplorer() as explorer:
            assert await explorer.get_sitemap("https://example.com/sitemap.xml") == []

    @pytest.mark.asyncio
    async def test_stream_sitemap(self, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url="https://example.com/sitemap.xml", text=SITEMAP_XML)

        async with SiteExplorer() as explorer:
            urls = [
                entry.url
                async for entry in explorer.stream_sitemap("https://example.com/sitemap.xml")
            ]

        assert urls == ["https://example.com/page1", "https://example.com/page2"]

    @pytest.mark.asyncio
    async def test_discover_sitemaps_from_robots(self, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            url=ROBOTS_URL,
            text="Sitemap: https://example.com/a.xml\nSitemap: https://example.com/b.xml\n",
        )

        async with SiteExplorer() as explorer:
            sitemaps = await explorer.discover_sitemaps("https://example.com/blog")

        assert sitemaps == ["https://example.com/a.xml", "https://example.com/b.xml"]

    @pytest.mark.asyncio
    async def test_discover_sitemaps_falls_back_to_default(self, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=ROBOTS_URL, status_code=404)

        async with SiteExplorer() as explorer:
            sitemaps = await explorer.discover_sitemaps("https://example.com/blog")

        assert sitemaps == ["https://example.com/sitemap.xml"]


class TestClientOwnership:
    """Tests for HTTP client lifecycle."""

    @pytest.mark.asyncio
    async def test_internal_client_is_closed(self):
        explorer = SiteExplorer()
        client = explorer.client

        await explorer.aclose()

        assert client.is_closed

    @pytest.mark.asyncio
    async def test_injected_client_is_left_open(self, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=ROBOTS_URL, text="User-agent: *\nDisallow: /x\n")

        async with httpx.AsyncClient() as client:
            async with SiteExplorer(client) as explorer:
                assert explorer.client is client
                await explorer.get_robots("https://example.com")

            assert not client.is_closed
