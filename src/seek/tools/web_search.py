"""Web search tool abstraction."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Protocol

import httpx
from duckduckgo_search import DDGS

from seek.config import Settings
from seek.errors import GoogleSearchError, TavilySearchError, WebSearchError
from seek.logging import get_logger
from seek.models.search import SearchOptions, SearchResult

logger = get_logger(__name__)

# Language codes accepted by the `lr` parameter of Google Custom Search.
GOOGLE_LANGUAGES = frozenset(
    {
        "ar", "bg", "ca", "cs", "da", "de", "el", "en", "es", "et", "fi", "fr", "hr",
        "hu", "id", "is", "it", "iw", "ja", "ko", "lt", "lv", "nl", "no", "pl", "pt",
        "ro", "ru", "sk", "sl", "sr", "sv", "tr", "zh-CN", "zh-TW",
    }
)

_DAYS_PER_UNIT = {"d": 1, "w": 7, "m": 30, "y": 365}


class WebSearchProvider(Protocol):
    """Search provider interface."""

    async def search(self, query: str, options: SearchOptions) -> list[SearchResult]:
        """Search web."""


def date_restrict_days(date_restrict: str | None) -> int | None:
    """Convert ``d3``/``w2``/``m6``/``y1`` into an approximate number of days."""

    if not date_restrict:
        return None
    return _DAYS_PER_UNIT[date_restrict[0]] * int(date_restrict[1:])


@dataclass(frozen=True)
class TavilySearchProvider:
    """Tavily API search provider.

    Notes:
        - API key must be provided via settings (`SEEK_TAVILY_API_KEY`).
        - This provider returns only URL/title/snippet and keeps raw content fetching in the
          acquisition pipeline.
    """

    api_key: str
    base_url: str = "https://api.tavily.com"
    search_depth: str = "basic"
    timeout_s: float = 10.0
    source_name: str = "tavily"
    transport: httpx.AsyncBaseTransport | None = None

    def build_payload(self, query: str, options: SearchOptions) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "api_key": self.api_key,
            "query": query,
            "max_results": options.max_results,
            "search_depth": self.search_depth,
            "include_answer": False,
            "include_raw_content": False,
            "include_images": False,
        }
        if options.include_domain:
            payload["include_domains"] = [options.include_domain]
        if options.exclude_domain:
            payload["exclude_domains"] = [options.exclude_domain]
        days = date_restrict_days(options.date_restrict)
        if days is not None:
            payload["days"] = days
        return payload

    async def search(self, query: str, options: SearchOptions) -> list[SearchResult]:
        """Search using Tavily.

        Args:
            query: Search query.
            options: Search constraints.

        Returns:
            List of results.
        """

        url = f"{self.base_url.rstrip('/')}/search"
        payload = self.build_payload(query, options)
        started = time.monotonic()

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout_s),
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                resp = await client.post(url, json=payload)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(
                "Tavily search failed",
                extra={
                    "provider": self.source_name,
                    "query_len": len(query),
                    "error_type": type(e).__name__,
                    "error": str(e),
                    "elapsed_ms": int((time.monotonic() - started) * 1000),
                },
            )
            raise TavilySearchError(f"Tavily search failed: {e}") from e

        if not isinstance(data, dict):
            raise TavilySearchError("tavily response not a JSON object")
        raw_results = data.get("results")
        if not isinstance(raw_results, list):
            raise TavilySearchError("tavily response missing results list")

        results: list[SearchResult] = []
        for i, item in enumerate(raw_results, start=1):
            if not isinstance(item, dict) or not item.get("url"):
                continue
            results.append(
                SearchResult(
                    title=item.get("title"),
                    snippet=item.get("content") or item.get("snippet"),
                    url=item["url"],
                    source=self.source_name,
                    rank=i,
                )
            )

        logger.info(
            "Tavily search ok",
            extra={
                "provider": self.source_name,
                "query_len": len(query),
                "max_results": options.max_results,
                "search_depth": self.search_depth,
                "status_code": resp.status_code,
                "result_count": len(results),
                "latency_ms": int((time.monotonic() - started) * 1000),
            },
        )
        return results


@dataclass(frozen=True)
class GoogleSearchProvider:
    """Google Custom Search JSON API provider."""

    api_key: str
    cx: str
    base_url: str = "https://www.googleapis.com/customsearch/v1"
    timeout_s: float = 10.0
    source_name: str = "google"
    transport: httpx.AsyncBaseTransport | None = None

    def build_params(self, query: str, options: SearchOptions) -> dict[str, str]:
        """Map search options onto CSE query parameters.

        Raises:
            GoogleSearchError: If the language is not one CSE can restrict to.
        """

        params = {
            "key": self.api_key,
            "cx": self.cx,
            "q": query,
            # CSE returns at most 10 results per request.
            "num": str(min(options.max_results, 10)),
        }
        if options.language:
            if options.language not in GOOGLE_LANGUAGES:
                raise GoogleSearchError(
                    f"unsupported language code {options.language!r} for Google search; "
                    f"supported: {','.join(sorted(GOOGLE_LANGUAGES))}"
                )
            params["lr"] = f"lang_{options.language}"
        if options.country:
            params["cr"] = f"country{options.country.upper()}"
        if options.date_restrict:
            params["dateRestrict"] = options.date_restrict
        # CSE takes a single site filter; exclusion wins when both are set.
        if options.include_domain:
            params["siteSearch"] = options.include_domain
            params["siteSearchFilter"] = "i"
        if options.exclude_domain:
            params["siteSearch"] = options.exclude_domain
            params["siteSearchFilter"] = "e"
        params["safe"] = "active" if options.safe_search else "off"
        return params

    async def search(self, query: str, options: SearchOptions) -> list[SearchResult]:
        params = self.build_params(query, options)
        started = time.monotonic()
        try:
            async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout_s), transport=self.transport) as client:
                resp = await client.get(self.base_url, params=params)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(
                "Google search failed",
                extra={"provider": self.source_name, "query_len": len(query), "error": str(e)},
            )
            raise GoogleSearchError(f"Google search failed: {e}") from e

        if not isinstance(data, dict):
            raise GoogleSearchError("google response not a JSON object")
        # CSE omits "items" when nothing matched.
        raw_items = data.get("items") or []
        if not isinstance(raw_items, list):
            raise GoogleSearchError("google response items is not a list")

        results: list[SearchResult] = []
        for i, item in enumerate(raw_items, start=1):
            if not isinstance(item, dict) or not item.get("link"):
                continue
            results.append(
                SearchResult(
                    title=item.get("title"),
                    snippet=item.get("snippet"),
                    url=item["link"],
                    source=self.source_name,
                    rank=i,
                )
            )

        logger.info(
            "Google search ok",
            extra={
                "provider": self.source_name,
                "query_len": len(query),
                "result_count": len(results),
                "latency_ms": int((time.monotonic() - started) * 1000),
            },
        )
        return results


@dataclass(frozen=True)
class DuckDuckGoSearchProvider:
    """DuckDuckGo search provider."""

    timeout_s: float = 10.0
    source_name: str = "duckduckgo"

    @staticmethod
    def build_kwargs(options: SearchOptions) -> dict[str, Any]:
        region = "wt-wt"
        if options.country:
            region = f"{options.country.lower()}-{(options.language or options.country).lower()}"
        kwargs: dict[str, Any] = {
            "region": region,
            "safesearch": "moderate" if options.safe_search else "off",
            "max_results": options.max_results,
        }
        if options.date_restrict:
            kwargs["timelimit"] = options.date_restrict[0]
        return kwargs

    def _search_sync(self, query: str, options: SearchOptions) -> list[SearchResult]:
        if options.include_domain:
            query = f"{query} site:{options.include_domain}"
        if options.exclude_domain:
            query = f"{query} -site:{options.exclude_domain}"

        results: list[SearchResult] = []
        with DDGS(timeout=int(self.timeout_s)) as ddgs:
            for i, r in enumerate(ddgs.text(query, **self.build_kwargs(options)) or [], start=1):
                url = r.get("href") or r.get("url")
                if not url:
                    continue
                results.append(
                    SearchResult(
                        title=r.get("title"),
                        snippet=r.get("body") or r.get("snippet"),
                        url=url,
                        source=self.source_name,
                        rank=i,
                    )
                )
        return results

    async def search(self, query: str, options: SearchOptions) -> list[SearchResult]:
        """Search using DuckDuckGo.

        The client is synchronous, so the call runs in a worker thread.
        """

        try:
            async with asyncio.timeout(self.timeout_s):
                results = await asyncio.to_thread(self._search_sync, query, options)
        except TimeoutError as e:
            raise WebSearchError(f"DuckDuckGo search timed out after {self.timeout_s}s") from e
        except Exception as e:
            logger.exception("Search failed for query=%s: %s", query, e)
            raise WebSearchError(f"DuckDuckGo search failed: {e}") from e

        logger.info("DuckDuckGo search ok", extra={"provider": self.source_name, "result_count": len(results)})
        return results


def search_options_from_settings(settings: Settings, **overrides: Any) -> SearchOptions:
    """Build default search options from settings; ``None`` overrides are ignored."""

    values: dict[str, Any] = {
        "max_results": settings.search_max_results,
        "language": settings.search_language,
        "country": settings.search_country,
        "safe_search": settings.search_safe,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return SearchOptions(**values)


def get_search_provider(settings: Settings, name: str | None = None) -> WebSearchProvider:
    """Factory to create a search provider based on settings."""

    name = name or settings.search_provider
    if name == "tavily":
        if not settings.tavily_api_key:
            raise ValueError(
                "Missing SEEK_TAVILY_API_KEY while search_provider=tavily. "
                "Set it in environment variables or .env."
            )
        return TavilySearchProvider(
            api_key=settings.tavily_api_key,
            base_url=settings.tavily_api_base_url,
            search_depth=settings.tavily_search_depth,
            timeout_s=settings.search_timeout_s,
        )

    if name == "google":
        if not settings.google_api_key or not settings.google_cx:
            raise ValueError(
                "Missing SEEK_GOOGLE_API_KEY or SEEK_GOOGLE_CX while search_provider=google. "
                "Set them in environment variables or .env."
            )
        return GoogleSearchProvider(
            api_key=settings.google_api_key,
            cx=settings.google_cx,
            base_url=settings.google_search_url,
            timeout_s=settings.search_timeout_s,
        )

    if name == "duckduckgo":
        return DuckDuckGoSearchProvider(timeout_s=settings.search_timeout_s)

    raise ValueError(f"Unknown search provider: {name}")
