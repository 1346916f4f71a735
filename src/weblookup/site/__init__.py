"""Site exploration: robots.txt policies and sitemap crawling."""

from .explorer import SiteExplorer
from .robots import (
    ALLOW_ALL,
    DISALLOW_ALL,
    RobotsPolicy,
    RobotsRule,
    RobotsRuleType,
    parse_robots,
    path_matches,
)
from .sitemap import SitemapCrawler, SitemapEntry

__all__ = [
    "ALLOW_ALL",
    "DISALLOW_ALL",
    "RobotsPolicy",
    "RobotsRule",
    "RobotsRuleType",
    "SiteExplorer",
    "SitemapCrawler",
    "SitemapEntry",
    "parse_robots",
    "path_matches",
]
