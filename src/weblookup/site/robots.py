"""robots.txt parsing and rule evaluation.

Rules are resolved by longest matching pattern; on equal length an ``Allow``
rule beats a ``Disallow`` rule. Patterns support ``*`` wildcards and a
trailing ``$`` end anchor. Parsing is lenient: malformed lines and values are
skipped, never raised.
"""

from __future__ import annotations

import re
from datetime import timedelta
from enum import Enum
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field

WILDCARD_AGENT = "*"

_INLINE_COMMENT = re.compile(r"(?<!\\)#")
_DECIMAL = re.compile(r"^[+]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


class RobotsRuleType(str, Enum):
    """Kind of a robots.txt path rule."""

    ALLOW = "allow"
    DISALLOW = "disallow"


class RobotsRule(BaseModel):
    """A single ``Allow``/``Disallow`` line bound to a user-agent group."""

    model_config = ConfigDict(frozen=True)

    user_agent: str = Field(description="User-agent the rule applies to")
    type: RobotsRuleType = Field(description="Allow or Disallow")
    path: str = Field(description="Path pattern")


class RobotsPolicy(BaseModel):
    """Parsed robots.txt for one site at one point in time."""

    model_config = ConfigDict(frozen=True)

    rules: tuple[RobotsRule, ...] = Field(default=(), description="Rules in parse order")
    sitemaps: tuple[str, ...] = Field(default=(), description="Declared sitemap URLs")
    crawl_delay: timedelta | None = Field(default=None, description="Crawl-delay directive")

    def is_allowed(self, path: str, user_agent: str = WILDCARD_AGENT) -> bool:
        """Check whether ``path`` may be crawled by ``user_agent``.

        Args:
            path: URL path (optionally with query string) to check
            user_agent: Crawler user-agent token, compared case-insensitively

        Returns:
            True if crawling is allowed
        """
        candidates = self._rules_for(user_agent)
        if not candidates:
            return True

        best: RobotsRule | None = None
        best_length = -1
        for rule in candidates:
            if not path_matches(path, rule.path):
                continue
            length = len(rule.path)
            if length > best_length:
                best = rule
                best_length = length
            elif length == best_length and rule.type is RobotsRuleType.ALLOW:
                best = rule

        if best is None:
            return True
        return best.type is RobotsRuleType.ALLOW

    def can_fetch(self, url: str, user_agent: str = WILDCARD_AGENT) -> bool:
        """Check an absolute URL by evaluating its path and query."""
        parsed = urlsplit(url)
        path = parsed.path or "/"
        if parsed.query:
            path = f"{path}?{parsed.query}"
        return self.is_allowed(path, user_agent)

    def _rules_for(self, user_agent: str) -> list[RobotsRule]:
        wanted = user_agent.casefold()
        specific = [rule for rule in self.rules if rule.user_agent.casefold() == wanted]
        if specific:
            return specific
        return [rule for rule in self.rules if rule.user_agent == WILDCARD_AGENT]


def path_matches(path: str, pattern: str) -> bool:
    """Match a URL path against a robots.txt pattern.

    ``*`` matches any run of characters and a trailing ``$`` requires the
    pattern to reach the end of the path. Without ``$`` the pattern is a
    prefix match. Comparison is case-sensitive.
    """
    if not pattern:
        return True

    strict_end = pattern.endswith("$")
    effective = pattern[:-1] if strict_end else pattern

    if "*" in effective:
        parts = effective.split("*")
        index = 0

        if parts[0]:
            if not path.startswith(parts[0]):
                return False
            index = len(parts[0])

        for part in parts[1:]:
            if not part:
                continue
            found = path.find(part, index)
            if found < 0:
                return False
            index = found + len(part)

        if strict_end:
            return index == len(path)
        return True

    if strict_end:
        return path == effective
    return path.startswith(effective)


def _parse_crawl_delay(value: str) -> timedelta | None:
    if not _DECIMAL.match(value):
        return None
    try:
        seconds = float(value)
        return timedelta(seconds=seconds)
    except (ValueError, OverflowError):
        return None


def parse_robots(content: str) -> RobotsPolicy:
    """Parse robots.txt text into a :class:`RobotsPolicy`.

    Args:
        content: Raw robots.txt body

    Returns:
        Parsed policy; unknown directives and malformed values are ignored
    """
    rules: list[RobotsRule] = []
    sitemaps: list[str] = []
    crawl_delay: timedelta | None = None
    current_agent = WILDCARD_AGENT

    for raw_line in content.split("\n"):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        directive, sep, value = line.partition(":")
        if not sep:
            continue
        directive = directive.strip().lower()
        value = value.strip()

        comment = _INLINE_COMMENT.search(value)
        if comment:
            value = value[: comment.start()].strip()

        if directive == "user-agent":
            if value:
                current_agent = value
        elif directive == "allow":
            # An empty Allow is kept and matches every path.
            rules.append(
                RobotsRule(user_agent=current_agent, type=RobotsRuleType.ALLOW, path=value)
            )
        elif directive == "disallow":
            # An empty Disallow means "allow everything" and adds no rule.
            if value:
                rules.append(
                    RobotsRule(
                        user_agent=current_agent,
                        type=RobotsRuleType.DISALLOW,
                        path=value,
                    )
                )
        elif directive == "crawl-delay":
            parsed_delay = _parse_crawl_delay(value)
            if parsed_delay is not None:
                crawl_delay = parsed_delay
        elif directive == "sitemap":
            if value:
                sitemaps.append(value)

    return RobotsPolicy(rules=tuple(rules), sitemaps=tuple(sitemaps), crawl_delay=crawl_delay)


ALLOW_ALL = RobotsPolicy()
"""Policy used when a site has no robots.txt (404)."""

DISALLOW_ALL = RobotsPolicy(
    rules=(RobotsRule(user_agent=WILDCARD_AGENT, type=RobotsRuleType.DISALLOW, path="/"),)
)
"""Policy used when robots.txt could not be retrieved."""
