"""Tests for concurrent content acquisition."""

from __future__ import annotations

import asyncio
import time

import pytest

from seek.tools.acquisition import ContentAcquirer, check_url
from seek.errors import UnsupportedContentError

from stubs import LONG_TEXT, StubSource


@pytest.mark.parametrize(
    "url",
    [
        "ftp://example.com/page",
        "file:///etc/passwd",
        "mailto:someone@example.com",
        "https://example.com/report.pdf",
        "https://example.com/REPORT.PDF?download=1",
        "http://example.com/archive.tar.gz",
        "https://example.com/photo.jpeg",
    ],
)
def test_check_url_rejects(url: str) -> None:
    with pytest.raises(UnsupportedContentError):
        check_url(url)


@pytest.mark.parametrize(
    "url",
    ["https://example.com/", "http://example.com/page.html", "https://example.com/pdf-guide"],
)
def test_check_url_accepts(url: str) -> None:
    check_url(url)


@pytest.mark.asyncio
async def test_rejected_url_never_reaches_a_tier(settings) -> None:
    primary = StubSource("http", pages={"https://example.com/a.pdf": LONG_TEXT})
    fallback = StubSource("browser", pages={"https://example.com/a.pdf": LONG_TEXT})
    acquirer = ContentAcquirer(settings, tiers=[primary, fallback])

    result = await acquirer.acquire(["https://example.com/a.pdf", "ftp://example.com/x"])

    assert result.pages == []
    assert len(result.errors) == 2
    assert primary.calls == [] and fallback.calls == []


@pytest.mark.asyncio
async def test_primary_success_skips_fallback(settings) -> None:
    url = "https://example.com/spain"
    primary = StubSource("http", pages={url: LONG_TEXT})
    fallback = StubSource("browser", pages={url: "rendered " + LONG_TEXT})
    acquirer = ContentAcquirer(settings, tiers=[primary, fallback])

    result = await acquirer.acquire([url])

    assert [p.content for p in result.pages] == [LONG_TEXT]
    assert fallback.calls == []


@pytest.mark.asyncio
async def test_short_primary_content_falls_back(settings) -> None:
    """Content below the threshold is a soft failure and the next tier is used."""

    url = "https://example.com/spa"
    primary = StubSource("http", pages={url: "x" * 10})
    fallback = StubSource("browser", pages={url: LONG_TEXT})
    acquirer = ContentAcquirer(settings, tiers=[primary, fallback])

    result = await acquirer.acquire([url])

    assert primary.calls == [url]
    assert fallback.calls == [url]
    assert [p.content for p in result.pages] == [LONG_TEXT]
    assert result.errors == []


@pytest.mark.asyncio
async def test_primary_error_falls_back(settings) -> None:
    url = "https://example.com/blocked"
    primary = StubSource("http", pages={url: TimeoutError("slow")})
    fallback = StubSource("browser", pages={url: LONG_TEXT})
    acquirer = ContentAcquirer(settings, tiers=[primary, fallback])

    result = await acquirer.acquire([url])

    assert len(result.pages) == 1
    assert fallback.calls == [url]


@pytest.mark.asyncio
async def test_last_tier_failure_reports_last_error(settings) -> None:
    url = "https://example.com/empty"
    primary = StubSource("http")
    fallback = StubSource("browser", pages={url: "short"})
    acquirer = ContentAcquirer(settings, tiers=[primary, fallback])

    result = await acquirer.acquire([url])

    assert result.pages == []
    assert len(result.errors) == 1
    assert result.errors[0].url == url
    assert "content too short" in result.errors[0].error


@pytest.mark.asyncio
async def test_cached_url_is_not_fetched_again(settings) -> None:
    url = "https://example.com/spain"
    primary = StubSource("http", pages={url: "tiny"})
    fallback = StubSource("browser", pages={url: LONG_TEXT})
    acquirer = ContentAcquirer(settings, tiers=[primary, fallback])

    first = await acquirer.acquire([url])
    second = await acquirer.acquire([url])

    assert first.pages == second.pages
    assert primary.calls == [url]
    assert fallback.calls == [url]
    assert url in acquirer.cache


@pytest.mark.asyncio
async def test_partial_failure_runs_concurrently(settings) -> None:
    """Five URLs with two failing: three pages, two errors, latency of the slowest URL."""

    good = [f"https://example.com/ok{i}" for i in range(3)]
    bad = [f"https://example.com/bad{i}" for i in range(2)]
    primary = StubSource("http", pages={u: LONG_TEXT for u in good}, delay_s=0.2)
    fallback = StubSource("browser", delay_s=0.2)
    acquirer = ContentAcquirer(settings, tiers=[primary, fallback])

    started = time.monotonic()
    result = await acquirer.acquire(good + bad)
    elapsed = time.monotonic() - started

    assert sorted(p.url for p in result.pages) == good
    assert sorted(e.url for e in result.errors) == bad
    # Sequential execution would take 5 * 0.2 + 2 * 0.2 = 1.4s.
    assert elapsed < 0.9


@pytest.mark.asyncio
async def test_concurrency_ceiling_is_respected(settings) -> None:
    settings = settings.model_copy(update={"webread_max_concurrency": 2})
    in_flight = 0
    peak = 0

    class CountingSource(StubSource):
        async def fetch(self, url: str):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            try:
                return await super().fetch(url)
            finally:
                in_flight -= 1

    urls = [f"https://example.com/{i}" for i in range(6)]
    source = CountingSource("http", pages={u: LONG_TEXT for u in urls}, delay_s=0.05)
    result = await ContentAcquirer(settings, tiers=[source]).acquire(urls)

    assert len(result.pages) == 6
    assert peak == 2


@pytest.mark.asyncio
async def test_deadline_returns_completed_and_errors_for_rest(settings) -> None:
    settings = settings.model_copy(update={"webread_deadline_s": 0.3})
    fast_url = "https://example.com/fast"
    slow_url = "https://example.com/slow"

    class MixedSource(StubSource):
        async def fetch(self, url: str):
            if url == slow_url:
                await asyncio.sleep(5)
            return await super().fetch(url)

    source = MixedSource("http", pages={fast_url: LONG_TEXT, slow_url: LONG_TEXT})
    started = time.monotonic()
    result = await ContentAcquirer(settings, tiers=[source]).acquire([fast_url, slow_url])

    assert time.monotonic() - started < 2
    assert [p.url for p in result.pages] == [fast_url]
    assert [(e.url, e.error) for e in result.errors] == [(slow_url, "deadline exceeded")]


@pytest.mark.asyncio
async def test_duplicate_urls_are_tolerated(settings) -> None:
    url = "https://example.com/dup"
    source = StubSource("http", pages={url: LONG_TEXT})
    result = await ContentAcquirer(settings, tiers=[source]).acquire([url, url])

    assert len(result.pages) + len(result.errors) == 2
    assert all(p.url == url for p in result.pages)


@pytest.mark.asyncio
async def test_context_manager_closes_tiers(settings) -> None:
    primary = StubSource("http")
    fallback = StubSource("browser")
    async with ContentAcquirer(settings, tiers=[primary, fallback]):
        pass
    assert primary.closed and fallback.closed
