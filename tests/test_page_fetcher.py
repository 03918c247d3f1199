"""Tests for the plain HTTP page source. HTTP is served by ``httpx.MockTransport``."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from seek.errors import FetchError, UnsupportedContentError
from seek.tools.page_fetcher import HttpPageFetcher
from seek.tools.page_parser import PageParser

URL = "https://example.com/spain"

HTML = (
    "<html><head><title>Spain</title></head>"
    "<body><h1>Spain</h1><p>Madrid is the capital of Spain.</p><script>x()</script></body></html>"
)


def _fetcher(settings, handler) -> HttpPageFetcher:
    return HttpPageFetcher(settings, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_parses_html(settings) -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["agent"] = request.headers.get("user-agent")
        return httpx.Response(200, text=HTML, headers={"content-type": "text/html; charset=utf-8"})

    fetcher = _fetcher(settings, handler)
    page = await fetcher.fetch(URL)
    await fetcher.aclose()

    assert page == PageParser(max_chars=settings.webread_max_content_chars).parse(URL, HTML)
    assert "Madrid is the capital of Spain." in page.content
    assert seen["agent"] == settings.http_user_agent


@pytest.mark.asyncio
async def test_fetch_follows_redirects(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old":
            return httpx.Response(301, headers={"location": URL})
        return httpx.Response(200, text=HTML, headers={"content-type": "text/html"})

    page = await _fetcher(settings, handler).fetch("https://example.com/old")
    assert "Madrid" in page.content


@pytest.mark.asyncio
async def test_non_html_content_type_is_unsupported(settings) -> None:
    fetcher = _fetcher(
        settings, lambda r: httpx.Response(200, content=b"%PDF-1.7", headers={"content-type": "application/pdf"})
    )
    with pytest.raises(UnsupportedContentError, match="application/pdf"):
        await fetcher.fetch(URL)


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [404, 500])
async def test_http_error_status_fails(settings, status: int) -> None:
    fetcher = _fetcher(settings, lambda r: httpx.Response(status, text=HTML, headers={"content-type": "text/html"}))
    with pytest.raises(FetchError, match=f"HTTP {status}"):
        await fetcher.fetch(URL)


@pytest.mark.asyncio
async def test_transport_error_fails(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FetchError, match="request failed"):
        await _fetcher(settings, handler).fetch(URL)


@pytest.mark.asyncio
async def test_slow_response_times_out(settings) -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, text=HTML, headers={"content-type": "text/html"})

    fetcher = _fetcher(settings.model_copy(update={"webread_timeout_s": 0.05}), handler)
    with pytest.raises(FetchError, match="timed out"):
        await fetcher.fetch(URL)
