"""Tests for the weblookup command-line interface."""

from __future__ import annotations

import json
import re

import pytest
import yaml
from pytest_httpx import HTTPXMock

from weblookup import __version__
from weblookup.cli import build_parser, main
from weblookup.search.providers.duckduckgo import DUCKDUCKGO_HTML_URL

pytestmark = pytest.mark.usefixtures("reset_logging")

MOJEEK_URL = re.compile(r"https://www\.mojeek\.com/search\?.*")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Run without provider configuration from the host environment."""
    monkeypatch.delenv("WEBLOOKUP_SEARCH__PROVIDERS", raising=False)


@pytest.fixture
def mojeek_config(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "search": {"providers": [{"provider": "mojeek", "api_key": "m-key"}]},
                "backoff": {"max_retries": 0},
            }
        )
    )
    return path


class TestParser:
    """Tests for argument parsing."""

    def test_no_command_prints_help_and_exits(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 0
        assert "usage: weblookup" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_search_arguments(self):
        args = build_parser().parse_args(["--debug", "search", "hello world", "-n", "3", "--json"])

        assert args.command == "search"
        assert args.query == "hello world"
        assert args.max_results == 3
        assert args.json is True
        assert args.debug is True
        assert args.config is None

    def test_max_results_must_be_positive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["search", "q", "-n", "0"])

    def test_robots_defaults(self):
        args = build_parser().parse_args(["robots", "https://example.com"])
        assert args.user_agent == "*"
        assert args.path is None

    def test_sitemap_arguments(self):
        args = build_parser().parse_args(["sitemap", "https://example.com/s.xml", "--limit", "5"])
        assert args.url == "https://example.com/s.xml"
        assert args.limit == 5
        assert args.json is False


class TestSearchCommand:
    """Tests for `weblookup search`."""

    def test_search_json_with_config(self, httpx_mock: HTTPXMock, mojeek_config, capsys):
        httpx_mock.add_response(
            url=MOJEEK_URL,
            json={
                "response": {
                    "results": [
                        {"url": "https://example.com/1", "title": "One", "desc": "First"},
                        {"url": "https://example.com/1/", "title": "Duplicate"},
                    ]
                }
            },
        )

        code = main(["search", "python", "-c", str(mojeek_config), "-n", "2", "--json"])

        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output == [
            {
                "url": "https://example.com/1",
                "title": "One",
                "description": "First",
                "provider": "Mojeek",
            }
        ]
        assert httpx_mock.get_requests()[0].url.params["t"] == "2"

    def test_search_defaults_to_duckduckgo(self, httpx_mock: HTTPXMock, capsys):
        httpx_mock.add_response(method="POST", url=DUCKDUCKGO_HTML_URL, text="")

        code = main(["search", "nothing here"])

        assert code == 0
        assert "No results found." in capsys.readouterr().out

    def test_search_table(self, httpx_mock: HTTPXMock, mojeek_config, capsys):
        httpx_mock.add_response(
            url=MOJEEK_URL,
            json={"response": {"results": [{"url": "https://ex.com", "title": "Hit"}]}},
        )

        code = main(["search", "q", "-c", str(mojeek_config)])

        assert code == 0
        output = capsys.readouterr().out
        assert "Hit" in output
        assert "Mojeek" in output

    def test_missing_config_file_fails(self, tmp_path, capsys):
        code = main(["search", "q", "-c", str(tmp_path / "missing.yaml")])

        assert code == 1
        assert "Configuration file not found" in capsys.readouterr().out


class TestRobotsCommand:
    """Tests for `weblookup robots`."""

    def test_robots_decision(self, httpx_mock: HTTPXMock, capsys):
        httpx_mock.add_response(
            url="https://example.com/robots.txt",
            text="User-agent: *\nDisallow: /private\nCrawl-delay: 2\n",
        )

        code = main(
            ["robots", "https://example.com", "--path", "/private", "--user-agent", "MyBot"]
        )

        assert code == 0
        output = capsys.readouterr().out
        assert "disallowed" in output
        assert "Crawl-delay" in output

    def test_robots_values_are_printed_literally(self, httpx_mock: HTTPXMock, capsys):
        httpx_mock.add_response(
            url="https://example.com/robots.txt",
            text=(
                "User-agent: *\nDisallow: /[red]secret\n"
                "Sitemap: https://example.com/[b]map.xml\n"
            ),
        )

        code = main(["robots", "https://example.com"])

        assert code == 0
        output = capsys.readouterr().out
        assert "/[red]secret" in output
        assert "https://example.com/[b]map.xml" in output

    def test_robots_missing_file_allows_everything(self, httpx_mock: HTTPXMock, capsys):
        httpx_mock.add_response(url="https://example.com/robots.txt", status_code=404)

        code = main(["robots", "https://example.com", "--path", "/any"])

        assert code == 0
        output = capsys.readouterr().out
        assert "everything is allowed" in output
        assert "allowed" in output


class TestSitemapCommand:
    """Tests for `weblookup sitemap`."""

    SITEMAP = (
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
        "<url><loc>https://example.com/a</loc><lastmod>2024-01-15</lastmod></url>"
        "<url><loc>https://example.com/b</loc></url>"
        "</urlset>"
    )

    def test_sitemap_json_with_limit(self, httpx_mock: HTTPXMock, capsys):
        httpx_mock.add_response(url="https://example.com/sitemap.xml", text=self.SITEMAP)

        code = main(["sitemap", "https://example.com/sitemap.xml", "--limit", "1", "--json"])

        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output == [
            {
                "url": "https://example.com/a",
                "last_modified": "2024-01-15T00:00:00Z",
                "change_frequency": None,
                "priority": None,
            }
        ]

    def test_empty_sitemap(self, httpx_mock: HTTPXMock, capsys):
        httpx_mock.add_response(url="https://example.com/sitemap.xml", status_code=500)

        code = main(["sitemap", "https://example.com/sitemap.xml"])

        assert code == 0
        assert "No sitemap entries found." in capsys.readouterr().out
