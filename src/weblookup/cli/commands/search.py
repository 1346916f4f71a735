"""Search CLI command."""

from __future__ import annotations

import argparse
import asyncio
import json

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from ...builder import WebLookupBuilder
from ...search import SearchOptions, SearchResult
from ..base import load_config, logger


async def _run_search(builder: WebLookupBuilder, query: str) -> list[SearchResult]:
    async with builder.build_search_client() as client:
        return await client.search(query)


def cmd_search(args: argparse.Namespace) -> int:
    """Handle search command.

    Args:
        args: Parsed arguments

    Returns:
        Exit code
    """
    try:
        config = load_config(args)
        builder = WebLookupBuilder.from_config(config)
        if builder.provider_count == 0:
            logger.debug("No providers configured; using DuckDuckGo")
            builder.add_duckduckgo()
        if args.max_results:
            builder.with_options(SearchOptions(max_results_per_provider=args.max_results))

        results = asyncio.run(_run_search(builder, args.query))
    except Exception as e:
        logger.error(f"Error running search: {e}", exc_info=True)
        print(f"Error: {e}")
        return 1

    if args.json:
        print(json.dumps([result.model_dump() for result in results], indent=2))
        return 0

    console = Console()
    if not results:
        console.print("[yellow]No results found.[/]")
        return 0

    table = Table(title=f"Results for: {escape(args.query)}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("URL", style="blue")
    table.add_column("Provider", style="magenta")

    for index, result in enumerate(results, start=1):
        table.add_row(str(index), Text(result.title), Text(result.url), result.provider or "-")

    console.print(table)
    return 0
