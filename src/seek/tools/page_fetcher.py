"""Page fetching utilities."""

from __future__ import annotations

import asyncio
from typing import Protocol

import httpx

from seek.config import Settings
from seek.errors import FetchError, UnsupportedContentError
from seek.logging import get_logger
from seek.models.page import Page
from seek.tools.page_parser import PageParser

logger = get_logger(__name__)

_HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


class PageSource(Protocol):
    """One tier of page acquisition."""

    name: str

    async def fetch(self, url: str) -> Page:
        """Produce a page for ``url`` or raise :class:`FetchError`."""

    async def aclose(self) -> None:
        """Release resources held by the source."""


class HttpPageFetcher:
    """Fetch pages with one plain HTTP request.

    Fast, but sees only the markup the server sends: pages rendered by client-side scripts
    come back nearly empty.
    """

    name = "http"

    def __init__(
        self,
        settings: Settings,
        *,
        parser: PageParser | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._parser = parser or PageParser(max_chars=settings.webread_max_content_chars)
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.webread_timeout_s),
            headers={"User-Agent": settings.http_user_agent},
            follow_redirects=True,
            transport=transport,
        )

    async def fetch(self, url: str) -> Page:
        """Fetch and parse a URL."""

        try:
            async with asyncio.timeout(self._settings.webread_timeout_s):
                resp = await self._client.get(url)
        except TimeoutError as e:
            raise FetchError(url, f"timed out after {self._settings.webread_timeout_s}s") from e
        except httpx.HTTPError as e:
            raise FetchError(url, f"request failed: {e}") from e

        if resp.status_code >= 400:
            raise FetchError(url, f"HTTP {resp.status_code}")

        content_type = resp.headers.get("content-type")
        if content_type and content_type.split(";")[0].strip().lower() not in _HTML_CONTENT_TYPES:
            raise UnsupportedContentError(url, f"unsupported content type: {content_type}")

        try:
            page = await asyncio.to_thread(self._parser.parse, url, resp.text)
        except Exception as e:
            raise FetchError(url, f"failed to parse markup: {e}") from e

        logger.debug("Fetched page", extra={"url": url, "chars": len(page.content), "tier": self.name})
        return page

    async def aclose(self) -> None:
        await self._client.aclose()
