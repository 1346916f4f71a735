"""CLI argument parser."""

from __future__ import annotations

import argparse

from .. import __version__


def _add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to a YAML configuration file (default: environment only)",
    )


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    Returns:
        ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="weblookup",
        description="WebLookup - multi-provider web search and site exploration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Search with the providers from a config file
  weblookup search "python asyncio" -c config.yaml

  # Check whether a path may be crawled
  weblookup robots https://example.com --path /private --user-agent MyBot

  # Print the first 20 sitemap entries as JSON
  weblookup sitemap https://example.com/sitemap.xml --limit 20 --json
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s v{__version__}",
        help="Show program's version number and exit",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Search command
    search_parser = subparsers.add_parser("search", help="Search the web")
    search_parser.add_argument("query", help="Search query")
    _add_config_argument(search_parser)
    search_parser.add_argument(
        "-n",
        "--max-results",
        type=_positive_int,
        default=None,
        help="Results requested from each provider",
    )
    search_parser.add_argument("--json", action="store_true", help="Print results as JSON")

    # Robots command
    robots_parser = subparsers.add_parser("robots", help="Show a site's robots.txt policy")
    robots_parser.add_argument("base_url", help="Site URL, e.g. https://example.com")
    _add_config_argument(robots_parser)
    robots_parser.add_argument("--path", default=None, help="Path to check against the policy")
    robots_parser.add_argument(
        "--user-agent",
        default="*",
        help="User-agent to evaluate rules for (default: *)",
    )

    # Sitemap command
    sitemap_parser = subparsers.add_parser("sitemap", help="List sitemap entries")
    sitemap_parser.add_argument("url", help="Sitemap URL")
    _add_config_argument(sitemap_parser)
    sitemap_parser.add_argument(
        "--limit",
        type=_positive_int,
        default=None,
        help="Stop after this many entries",
    )
    sitemap_parser.add_argument("--json", action="store_true", help="Print entries as JSON")

    return parser
