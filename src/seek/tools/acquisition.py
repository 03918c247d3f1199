"""Concurrent content acquisition over a chain of page sources."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Sequence
from urllib.parse import urlparse

from seek.config import Settings
from seek.core.concurrency import TaskPool
from seek.errors import ContentTooShortError, FetchError, UnsupportedContentError
from seek.logging import get_logger, log_exception
from seek.models.page import AcquisitionResult, Page, PageError
from seek.tools.page_cache import PageCache
from seek.tools.page_fetcher import HttpPageFetcher, PageSource

logger = get_logger(__name__)

ALLOWED_SCHEMES = frozenset({"http", "https"})

REJECTED_EXTENSIONS = frozenset(
    {
        ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
        ".zip", ".gz", ".tar", ".rar", ".7z",
        ".jpg", ".jpeg", ".png", ".gif", ".svg", ".webp",
        ".mp3", ".mp4", ".avi", ".mov",
    }
)


def check_url(url: str) -> None:
    """Raise :class:`UnsupportedContentError` for URLs no tier should see."""

    parsed = urlparse(url)
    if parsed.scheme.lower() not in ALLOWED_SCHEMES or not parsed.netloc:
        raise UnsupportedContentError(url, f"unsupported URL scheme: {parsed.scheme or '<none>'}")

    suffix = PurePosixPath(parsed.path).suffix.lower()
    if suffix in REJECTED_EXTENSIONS:
        raise UnsupportedContentError(url, f"unsupported document type: {suffix}")


def default_tiers(settings: Settings) -> list[PageSource]:
    tiers: list[PageSource] = [HttpPageFetcher(settings)]
    if settings.browser_enabled:
        # Imported here so that runs without a browser never load playwright.
        from seek.tools.page_renderer import BrowserPageRenderer

        tiers.append(BrowserPageRenderer(settings))
    return tiers


class ContentAcquirer:
    """Turn URLs into pages, trying each source tier in order.

    A tier result is accepted only when its content reaches ``webread_min_content_length``;
    anything else (error, timeout, short content) moves on to the next tier. One acquirer
    holds one cache, so a URL is fetched at most once per run unless two tasks race for it.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        tiers: Sequence[PageSource] | None = None,
        cache: PageCache | None = None,
    ) -> None:
        self._settings = settings
        self._tiers: list[PageSource] = list(tiers) if tiers is not None else default_tiers(settings)
        if not self._tiers:
            raise ValueError("at least one page source is required")
        self._cache = cache if cache is not None else PageCache()
        self._min_length = settings.webread_min_content_length

    @property
    def cache(self) -> PageCache:
        return self._cache

    async def __aenter__(self) -> "ContentAcquirer":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        for tier in self._tiers:
            try:
                await tier.aclose()
            except Exception:
                log_exception(logger, "Failed to close page source", tier=tier.name)

    async def acquire(self, urls: Sequence[str]) -> AcquisitionResult:
        """Read every URL concurrently and wait for all of them.

        Returns:
            Pages for the URLs that produced usable content and errors for the rest. When the
            configured deadline expires, unfinished URLs are reported as errors.
        """

        if not urls:
            return AcquisitionResult()

        deadline = self._settings.webread_deadline_s
        pool = TaskPool(max_concurrent=self._settings.webread_max_concurrency)
        tasks = [(url, pool.submit(self.acquire_one, url)) for url in urls]
        await pool.join(timeout=deadline)

        result = AcquisitionResult()
        for url, task in tasks:
            if task.cancelled():
                reason = "deadline exceeded" if deadline is not None else "cancelled"
                result.errors.append(PageError(url=url, error=reason))
                continue
            exc = task.exception()
            if exc is not None:
                result.errors.append(PageError(url=url, error=str(exc)))
                continue
            outcome = task.result()
            if isinstance(outcome, Page):
                result.pages.append(outcome)
            else:
                result.errors.append(outcome)

        logger.info(
            "Acquisition finished",
            extra={"urls": len(urls), "pages": len(result.pages), "errors": len(result.errors)},
        )
        return result

    async def acquire_one(self, url: str) -> Page | PageError:
        """Read a single URL through the rejection rules, the cache and the tier chain."""

        try:
            check_url(url)
        except UnsupportedContentError as e:
            logger.info("Rejected URL", extra={"url": url, "reason": str(e)})
            return PageError(url=url, error=str(e))

        cached = await self._cache.get(url)
        if cached is not None:
            logger.debug("Cache hit", extra={"url": url})
            return cached

        last_error: FetchError | None = None
        for index, tier in enumerate(self._tiers):
            try:
                page = await tier.fetch(url)
                if len(page.content) < self._min_length:
                    raise ContentTooShortError(
                        url,
                        f"content too short ({len(page.content)} < {self._min_length} chars)",
                    )
            except FetchError as e:
                last_error = e
            except Exception as e:
                last_error = FetchError(url, f"{tier.name} failed: {e}")
            else:
                await self._cache.put(page)
                return page

            if index + 1 < len(self._tiers):
                logger.info(
                    "Falling back to next page source",
                    extra={"url": url, "tier": tier.name, "error": str(last_error)},
                )

        logger.warning("All page sources failed", extra={"url": url, "error": str(last_error)})
        return PageError(url=url, error=str(last_error))
