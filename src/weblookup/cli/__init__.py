"""CLI module for WebLookup.

This module provides the ``weblookup`` command-line interface.
"""

from __future__ import annotations

from collections.abc import Sequence

from .base import load_config, logger
from .commands import cmd_robots, cmd_search, cmd_sitemap
from .parser import build_parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point.

    Args:
        argv: Optional sequence of CLI arguments (without the program name).

    Returns:
        Process exit code. 0 for success.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # No command: print help and exit like argparse does for --help
    if not args.command:
        parser.print_help()
        raise SystemExit(0)

    handlers = {
        "search": cmd_search,
        "robots": cmd_robots,
        "sitemap": cmd_sitemap,
    }

    handler = handlers.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


__all__ = [
    "build_parser",
    "cmd_robots",
    "cmd_search",
    "cmd_sitemap",
    "load_config",
    "logger",
    "main",
]
