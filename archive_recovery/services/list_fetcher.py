"""Paginated discovery of every archived conversation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from archive_recovery.core.async_utils import call_maybe_async, raise_if_cancelled
from archive_recovery.domain.exceptions.domain_exceptions import (
    DiscoveryCancelledError,
    DiscoveryError,
    RestoreError,
)
from archive_recovery.services.rate_limiter import RateLimitPolicy

if TYPE_CHECKING:
    from collections.abc import Callable

    from archive_recovery.services.protocols import ArchiveListingClient

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50


@dataclass
class PageCursor:
    """Listing position. Advances by the size of each returned page."""

    offset: int = 0
    limit: int = DEFAULT_PAGE_SIZE
    exhausted: bool = False

    def advance(self, returned: int) -> None:
        if returned <= 0:
            self.exhausted = True
            return
        self.offset += returned


class ArchiveListFetcher:
    """Collect archived conversation ids page by page until an empty page."""

    def __init__(
        self,
        client: ArchiveListingClient,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        rate_limit: RateLimitPolicy | None = None,
    ) -> None:
        self._client = client
        self._page_size = page_size
        self._rate_limit = rate_limit or RateLimitPolicy()

    async def fetch_all(
        self,
        on_page: Callable[[int], object] | None = None,
        *,
        correlation_id: str | None = None,
        should_stop: Callable[[], bool] | None = None,
    ) -> list[str]:
        """Return every archived conversation id in server order.

        Args:
            on_page: Called with the running total after each non-empty page
            correlation_id: Attached to log records
            should_stop: Checked before each page request

        Returns:
            All ids; never a partial list

        Raises:
            DiscoveryError: If any page request or parse fails
            DiscoveryCancelledError: If *should_stop* turned true before the last page
        """
        cursor = PageCursor(limit=self._page_size)
        ids: list[str] = []

        while not cursor.exhausted:
            if should_stop is not None and should_stop():
                logger.info(
                    "archive_discovery_stopped",
                    extra={"correlation_id": correlation_id, "found": len(ids)},
                )
                raise DiscoveryCancelledError(found=len(ids))

            try:
                page = await self._client.list_archived(offset=cursor.offset, limit=cursor.limit)
            except RestoreError:
                raise
            except Exception as exc:
                raise_if_cancelled(exc)
                logger.error(
                    "archive_discovery_failed",
                    extra={
                        "correlation_id": correlation_id,
                        "offset": cursor.offset,
                        "found": len(ids),
                        "error": str(exc),
                        "error_type": type(exc).__name__,
                    },
                )
                raise DiscoveryError(
                    f"Listing archived conversations failed at offset {cursor.offset}: {exc}",
                    offset=cursor.offset,
                    found=len(ids),
                ) from exc

            returned = page.ids
            ids.extend(returned)
            cursor.advance(len(returned))
            logger.debug(
                "archive_page_fetched",
                extra={
                    "correlation_id": correlation_id,
                    "offset": cursor.offset,
                    "page_items": len(returned),
                    "found": len(ids),
                },
            )
            if returned and on_page is not None:
                await call_maybe_async(on_page, len(ids))

            await self._rate_limit.wait()

        logger.info(
            "archive_discovery_complete",
            extra={"correlation_id": correlation_id, "count": len(ids)},
        )
        return ids
