"""Site exploration CLI commands: robots and sitemap."""

from __future__ import annotations

import argparse
import asyncio
import json
from contextlib import aclosing

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ...builder import WebLookupBuilder
from ...site import RobotsPolicy, SitemapEntry
from ..base import load_config, logger


async def _fetch_robots(builder: WebLookupBuilder, base_url: str) -> RobotsPolicy:
    async with builder.build_site_explorer() as explorer:
        return await explorer.get_robots(base_url)


async def _collect_entries(
    builder: WebLookupBuilder,
    url: str,
    limit: int | None,
) -> list[SitemapEntry]:
    entries: list[SitemapEntry] = []
    async with builder.build_site_explorer() as explorer:
        async with aclosing(explorer.stream_sitemap(url)) as stream:
            async for entry in stream:
                entries.append(entry)
                if limit is not None and len(entries) >= limit:
                    break
    return entries


def cmd_robots(args: argparse.Namespace) -> int:
    """Handle robots command.

    Args:
        args: Parsed arguments

    Returns:
        Exit code
    """
    try:
        config = load_config(args)
        builder = WebLookupBuilder.from_config(config)
        policy = asyncio.run(_fetch_robots(builder, args.base_url))
    except Exception as e:
        logger.error(f"Error fetching robots.txt: {e}", exc_info=True)
        print(f"Error: {e}")
        return 1

    console = Console()

    if policy.rules:
        table = Table(title=f"robots.txt rules for {escape(args.base_url)}")
        table.add_column("User-agent", style="cyan")
        table.add_column("Type", style="magenta")
        table.add_column("Path")
        for rule in policy.rules:
            table.add_row(
                Text(rule.user_agent),
                rule.type.value,
                Text(rule.path or "(empty)"),
            )
        console.print(table)
    else:
        console.print("[yellow]No rules: everything is allowed.[/]")

    for sitemap in policy.sitemaps:
        console.print(f"Sitemap: [blue]{escape(sitemap)}[/]")
    if policy.crawl_delay is not None:
        console.print(f"Crawl-delay: [cyan]{policy.crawl_delay.total_seconds()}s[/]")

    if args.path is not None:
        allowed = policy.is_allowed(args.path, args.user_agent)
        verdict = "[green]allowed[/]" if allowed else "[red]disallowed[/]"
        subject = f"{escape(args.path)} is {verdict}"
        console.print(
            Panel(
                f"{subject} for user-agent [cyan]{escape(args.user_agent)}[/]",
                title="[bold]Decision[/]",
                expand=False,
            )
        )

    return 0


def cmd_sitemap(args: argparse.Namespace) -> int:
    """Handle sitemap command."""
    try:
        config = load_config(args)
        builder = WebLookupBuilder.from_config(config)
        entries = asyncio.run(_collect_entries(builder, args.url, args.limit))
    except Exception as e:
        logger.error(f"Error reading sitemap: {e}", exc_info=True)
        print(f"Error: {e}")
        return 1

    if args.json:
        print(json.dumps([entry.model_dump(mode="json") for entry in entries], indent=2))
        return 0

    console = Console()
    if not entries:
        console.print("[yellow]No sitemap entries found.[/]")
        return 0

    table = Table(title=f"Sitemap entries from {escape(args.url)}")
    table.add_column("URL", style="blue")
    table.add_column("Last modified")
    table.add_column("Change frequency")
    table.add_column("Priority", justify="right")

    for entry in entries:
        table.add_row(
            Text(entry.url),
            entry.last_modified.isoformat() if entry.last_modified else "-",
            Text(entry.change_frequency or "-"),
            f"{entry.priority:g}" if entry.priority is not None else "-",
        )

    console.print(table)
    return 0
