"""Per-run page cache."""

from __future__ import annotations

import asyncio

from seek.models.page import Page


class PageCache:
    """URL -> page store shared by the tasks of one run.

    Writes are last-writer-wins; two concurrent reads of the same URL may both miss and both
    fetch, which is harmless because a URL yields the same page within a run.
    """

    def __init__(self) -> None:
        self._pages: dict[str, Page] = {}
        self._lock = asyncio.Lock()

    async def get(self, url: str) -> Page | None:
        async with self._lock:
            return self._pages.get(url)

    async def put(self, page: Page) -> None:
        async with self._lock:
            self._pages[page.url] = page

    def __len__(self) -> int:
        return len(self._pages)

    def __contains__(self, url: object) -> bool:
        return url in self._pages
