"""Search provider implementations."""

from .duckduckgo import DuckDuckGoProvider
from .google import GoogleSearchProvider
from .mojeek import MojeekProvider
from .searchapi import SearchApiProvider
from .tavily import TavilySearchProvider

__all__ = [
    "DuckDuckGoProvider",
    "GoogleSearchProvider",
    "MojeekProvider",
    "SearchApiProvider",
    "TavilySearchProvider",
]
