"""CLI command handlers package."""

from .search import cmd_search
from .site import cmd_robots, cmd_sitemap

__all__ = [
    "cmd_robots",
    "cmd_search",
    "cmd_sitemap",
]
