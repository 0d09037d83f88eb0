"""Tests for paginated discovery of archived conversations."""

from __future__ import annotations

import httpx
import pytest
from fakes import FakeConversationApi, RecordingSleep, make_ids

from archive_recovery.domain.exceptions.domain_exceptions import (
    DiscoveryCancelledError,
    DiscoveryError,
)
from archive_recovery.services.list_fetcher import ArchiveListFetcher, PageCursor
from archive_recovery.services.rate_limiter import RateLimitPolicy


def _pages(*sizes: int) -> list[list[str]]:
    ids = make_ids(sum(sizes))
    pages, start = [], 0
    for size in sizes:
        pages.append(ids[start : start + size])
        start += size
    return pages


def test_cursor_advances_by_returned_count():
    cursor = PageCursor()
    cursor.advance(50)
    cursor.advance(13)
    assert cursor.offset == 63
    assert not cursor.exhausted
    cursor.advance(0)
    assert cursor.exhausted
    assert cursor.offset == 63


@pytest.mark.asyncio
async def test_short_pages_drive_offsets():
    api = FakeConversationApi(_pages(50, 50, 13, 0))
    fetcher = ArchiveListFetcher(api, rate_limit=RateLimitPolicy.none())

    ids = await fetcher.fetch_all()

    assert [offset for offset, _ in api.list_calls] == [0, 50, 100, 113]
    assert all(limit == 50 for _, limit in api.list_calls)
    assert len(ids) == 113
    assert ids == [item for page in api.pages for item in page]


@pytest.mark.asyncio
async def test_empty_archive_makes_one_request():
    api = FakeConversationApi([[]])
    fetcher = ArchiveListFetcher(api, rate_limit=RateLimitPolicy.none())

    assert await fetcher.fetch_all() == []
    assert api.list_calls == [(0, 50)]


@pytest.mark.asyncio
async def test_waits_between_every_request(recording_sleep: RecordingSleep):
    api = FakeConversationApi(_pages(2, 1, 0))
    fetcher = ArchiveListFetcher(
        api, page_size=2, rate_limit=RateLimitPolicy(interval_sec=0.1, sleep=recording_sleep)
    )

    await fetcher.fetch_all()

    assert recording_sleep.calls == [0.1, 0.1, 0.1]
    assert api.list_calls == [(0, 2), (2, 2), (3, 2)]


@pytest.mark.asyncio
async def test_reports_running_total_per_page():
    api = FakeConversationApi(_pages(50, 7, 0))
    fetcher = ArchiveListFetcher(api, rate_limit=RateLimitPolicy.none())
    seen: list[int] = []

    await fetcher.fetch_all(on_page=seen.append)

    assert seen == [50, 57]


@pytest.mark.asyncio
async def test_transport_error_fails_whole_discovery():
    request = httpx.Request("GET", "https://example.test/conversations")
    api = FakeConversationApi(
        _pages(50, 50, 0),
        list_error=httpx.ReadTimeout("timed out", request=request),
        list_error_at_call=1,
    )
    fetcher = ArchiveListFetcher(api, rate_limit=RateLimitPolicy.none())

    with pytest.raises(DiscoveryError) as exc_info:
        await fetcher.fetch_all()

    assert exc_info.value.offset == 50
    assert exc_info.value.found == 50
    assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)


@pytest.mark.asyncio
async def test_parse_error_fails_whole_discovery():
    api = FakeConversationApi(list_error=ValueError("Expecting value: line 1 column 1 (char 0)"))
    fetcher = ArchiveListFetcher(api, rate_limit=RateLimitPolicy.none())

    with pytest.raises(DiscoveryError):
        await fetcher.fetch_all()


@pytest.mark.asyncio
async def test_stop_request_ends_discovery_before_next_page():
    api = FakeConversationApi(_pages(3, 3, 3))
    fetcher = ArchiveListFetcher(api, rate_limit=RateLimitPolicy.none())
    stop = False

    def on_page(found: int) -> None:
        nonlocal stop
        stop = found >= 3

    with pytest.raises(DiscoveryCancelledError) as exc_info:
        await fetcher.fetch_all(on_page, should_stop=lambda: stop)

    assert exc_info.value.found == 3
    assert api.list_calls == [(0, 50)]
