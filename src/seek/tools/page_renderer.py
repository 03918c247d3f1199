"""Browser-driven page rendering.

The fallback tier: slower than a plain request, but it runs client scripts and waits for the
page to settle, so script-rendered sites produce real content.
"""

from __future__ import annotations

import asyncio
import time

from playwright.async_api import Browser, Error as PlaywrightError, Playwright, async_playwright

from seek.config import Settings
from seek.errors import FetchError
from seek.logging import get_logger
from seek.models.page import Page
from seek.tools.page_parser import PageParser

logger = get_logger(__name__)

# Resolves once the DOM has gone `quiet_ms` without a mutation.
_WAIT_STABLE_JS = """
(quietMs) => new Promise((resolve) => {
    let timer = setTimeout(done, quietMs);
    const observer = new MutationObserver(() => {
        clearTimeout(timer);
        timer = setTimeout(done, quietMs);
    });
    function done() {
        observer.disconnect();
        resolve(true);
    }
    observer.observe(document, {subtree: true, childList: true, attributes: true, characterData: true});
})
"""


class BrowserPageRenderer:
    """Render pages in headless Chromium."""

    name = "browser"

    def __init__(self, settings: Settings, *, parser: PageParser | None = None) -> None:
        self._settings = settings
        self._parser = parser or PageParser(max_chars=settings.webread_max_content_chars)
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._launch_lock = asyncio.Lock()

    async def _ensure_browser(self) -> Browser:
        async with self._launch_lock:
            if self._browser is None:
                self._playwright = await async_playwright().start()
                self._browser = await self._playwright.chromium.launch(headless=True)
                logger.info("Browser launched")
            return self._browser

    async def fetch(self, url: str) -> Page:
        """Render a URL and parse the resulting markup."""

        timeout_s = self._settings.webread_timeout_s
        try:
            async with asyncio.timeout(timeout_s):
                title, html = await self._render(url)
        except TimeoutError as e:
            raise FetchError(url, f"rendering timed out after {timeout_s}s") from e
        except PlaywrightError as e:
            raise FetchError(url, f"browser failed: {e}") from e

        try:
            page = await asyncio.to_thread(self._parser.parse, url, html, title=title)
        except Exception as e:
            raise FetchError(url, f"failed to parse rendered markup: {e}") from e

        logger.debug("Rendered page", extra={"url": url, "chars": len(page.content), "tier": self.name})
        return page

    async def _render(self, url: str) -> tuple[str | None, str]:
        browser = await self._ensure_browser()
        timeout_ms = self._settings.webread_timeout_s * 1000
        context = await browser.new_context(user_agent=self._settings.http_user_agent)
        try:
            page = await context.new_page()
            started = time.monotonic()
            await page.goto(url, wait_until="load", timeout=timeout_ms)

            remaining_ms = max(timeout_ms - (time.monotonic() - started) * 1000, 1.0)
            try:
                await page.wait_for_load_state("networkidle", timeout=remaining_ms)
            except PlaywrightError:
                logger.debug("Network never went idle", extra={"url": url})
            await page.evaluate(_WAIT_STABLE_JS, self._settings.browser_stable_ms)

            try:
                title = await page.evaluate("() => document.title")
            except PlaywrightError:
                logger.warning("Failed to read page title", extra={"url": url})
                title = None
            html = await page.content()
            return title, html
        finally:
            await context.close()

    async def aclose(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
