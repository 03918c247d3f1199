"""Search and page acquisition tools."""

from __future__ import annotations

from seek.tools.acquisition import ContentAcquirer, check_url
from seek.tools.page_cache import PageCache
from seek.tools.page_fetcher import HttpPageFetcher, PageSource
from seek.tools.page_parser import PageParser
from seek.tools.web_search import WebSearchProvider, get_search_provider

__all__ = [
    "ContentAcquirer",
    "check_url",
    "PageCache",
    "PageSource",
    "HttpPageFetcher",
    "PageParser",
    "WebSearchProvider",
    "get_search_provider",
]
