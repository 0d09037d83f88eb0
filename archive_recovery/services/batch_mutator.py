"""Sequential, rate-limited unarchiving of a list of conversation ids."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from archive_recovery.core.async_utils import call_maybe_async, raise_if_cancelled
from archive_recovery.domain.exceptions.domain_exceptions import (
    BatchAlreadyRunningError,
    CredentialNotReadyError,
)
from archive_recovery.domain.models.batch_job import BatchJob, BatchTally
from archive_recovery.services.rate_limiter import RateLimitPolicy

if TYPE_CHECKING:
    from collections.abc import Sequence

    from archive_recovery.domain.models.batch_job import BatchProgress
    from archive_recovery.services.protocols import ProgressCallback, UnarchiveClient

logger = logging.getLogger(__name__)


class BatchMutator:
    """Unarchive ids one at a time, in input order.

    A failed item (non-2xx answer or a raised request error) is counted and
    the batch moves on. Only one job may run per mutator; ``cancel`` stops a
    running job before its next item.
    """

    def __init__(
        self,
        client: UnarchiveClient,
        *,
        rate_limit: RateLimitPolicy | None = None,
    ) -> None:
        self._client = client
        self._rate_limit = rate_limit or RateLimitPolicy()
        self._job: BatchJob | None = None
        self._cancel_requested = False

    @property
    def job(self) -> BatchJob | None:
        """The current or most recent job."""
        return self._job

    @property
    def is_running(self) -> bool:
        return self._job is not None and self._job.is_running

    def cancel(self) -> bool:
        """Ask the running job to stop. Returns False if nothing is running."""
        if not self.is_running:
            return False
        self._cancel_requested = True
        return True

    async def run(
        self,
        ids: Sequence[str],
        on_progress: ProgressCallback | None = None,
        *,
        correlation_id: str | None = None,
    ) -> BatchTally:
        """Attempt every id and return the tally.

        Raises:
            BatchAlreadyRunningError: If this mutator already has a running job
        """
        if self.is_running:
            raise BatchAlreadyRunningError(
                "A restore batch is already running",
                details={"completed": self._job.completed, "total": self._job.total},
            )

        job = BatchJob(total=len(ids))
        self._job = job
        self._cancel_requested = False
        logger.info(
            "restore_batch_started",
            extra={"correlation_id": correlation_id, "total": job.total},
        )

        try:
            for item_id in ids:
                if self._cancel_requested:
                    job.mark_aborted()
                    logger.warning(
                        "restore_batch_cancelled",
                        extra={
                            "correlation_id": correlation_id,
                            "completed": job.completed,
                            "total": job.total,
                        },
                    )
                    return job.tally()

                job.begin_item(item_id)
                ok = await self._restore_one(item_id, correlation_id)
                progress = job.record(item_id, ok)
                await self._emit(on_progress, progress, correlation_id)
                await self._rate_limit.wait()
        except BaseException:
            if job.is_running:
                job.mark_aborted()
            raise

        job.mark_completed()
        tally = job.tally()
        logger.info(
            "restore_batch_completed",
            extra={
                "correlation_id": correlation_id,
                "succeeded": tally.succeeded,
                "failed": tally.failed,
                "total": tally.total,
            },
        )
        return tally

    async def _restore_one(self, item_id: str, correlation_id: str | None) -> bool:
        try:
            ok = await self._client.unarchive(item_id)
        except CredentialNotReadyError:
            raise
        except Exception as exc:
            raise_if_cancelled(exc)
            logger.warning(
                "restore_item_error",
                extra={
                    "correlation_id": correlation_id,
                    "conversation_id": item_id,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
            )
            return False
        if not ok:
            logger.warning(
                "restore_item_rejected",
                extra={"correlation_id": correlation_id, "conversation_id": item_id},
            )
        return bool(ok)

    @staticmethod
    async def _emit(
        on_progress: ProgressCallback | None,
        progress: BatchProgress,
        correlation_id: str | None,
    ) -> None:
        if on_progress is None:
            return
        try:
            await call_maybe_async(on_progress, progress)
        except Exception as exc:
            raise_if_cancelled(exc)
            logger.warning(
                "restore_progress_callback_failed",
                extra={
                    "correlation_id": correlation_id,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
            )
