"""Restore jobs: "restore everything" and "restore this list".

The orchestrator checks preconditions, asks the presentation layer for
confirmation, runs discovery or extraction, then hands the ids to the batch
mutator. Every call returns exactly one ``RestoreOutcome``; nothing is raised
to the caller except cancellation.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from archive_recovery.core.async_utils import call_maybe_async, raise_if_cancelled
from archive_recovery.core.logging_utils import generate_correlation_id
from archive_recovery.domain.exceptions.domain_exceptions import (
    BatchAlreadyRunningError,
    CredentialNotReadyError,
    DiscoveryCancelledError,
    DiscoveryError,
)
from archive_recovery.domain.models.batch_job import BatchJobStatus
from archive_recovery.domain.models.restore_outcome import RestoreOutcome, RestoreStatus
from archive_recovery.services.batch_mutator import BatchMutator
from archive_recovery.services.identifier_extractor import extract_identifiers, unique_identifiers
from archive_recovery.services.list_fetcher import ArchiveListFetcher
from archive_recovery.services.rate_limiter import RateLimitPolicy

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from archive_recovery.adapters.conversations.client import ConversationClient
    from archive_recovery.auth.credential import CredentialContext
    from archive_recovery.config.restore import RestoreConfig
    from archive_recovery.services.protocols import ConfirmCallback, ProgressCallback

logger = logging.getLogger(__name__)

RESTORE_ALL_PROMPT = "Start restoring ALL archived chats?"


def refuse_all(prompt: str) -> bool:
    """Default confirmation: never approve a bulk change nobody asked for."""
    logger.info("restore_confirmation_unavailable", extra={"prompt": prompt})
    return False


class RestoreOrchestrator:
    """Compose discovery, extraction and batch mutation into restore jobs."""

    def __init__(
        self,
        credentials: CredentialContext,
        fetcher: ArchiveListFetcher,
        mutator: BatchMutator,
        *,
        confirm: ConfirmCallback | None = None,
    ) -> None:
        self.credentials = credentials
        self._fetcher = fetcher
        self._mutator = mutator
        self._confirm = confirm or refuse_all
        self._active = False
        self._cancel_requested = False

    @classmethod
    def create(
        cls,
        credentials: CredentialContext,
        client: ConversationClient,
        config: RestoreConfig,
        *,
        confirm: ConfirmCallback | None = None,
    ) -> RestoreOrchestrator:
        """Wire an orchestrator around one conversation client using *config* pacing."""
        fetcher = ArchiveListFetcher(
            client,
            page_size=config.page_size,
            rate_limit=RateLimitPolicy(interval_sec=config.list_delay_sec),
        )
        mutator = BatchMutator(
            client,
            rate_limit=RateLimitPolicy(interval_sec=config.mutate_delay_sec),
        )
        return cls(credentials, fetcher, mutator, confirm=confirm)

    @property
    def is_busy(self) -> bool:
        return self._active or self._mutator.is_running

    def credential_status(self) -> str:
        if self.credentials.ready:
            return "Token captured: YES"
        return "Token captured: NO (open a chat to capture it)"

    def cancel(self) -> bool:
        """Ask the running job to stop.

        A job still waiting for confirmation or listing conversations stops
        before its next request; a running batch stops before its next item.
        Returns False if nothing is running.
        """
        if not self.is_busy:
            return False
        self._cancel_requested = True
        self._mutator.cancel()
        return True

    async def restore_all(
        self,
        on_progress: ProgressCallback | None = None,
        on_discovery: Callable[[int], object] | None = None,
    ) -> RestoreOutcome:
        """Unarchive every archived conversation.

        Args:
            on_progress: Receives a ``BatchProgress`` after each item
            on_discovery: Receives the running count of discovered items

        Returns:
            The single terminal outcome of the run
        """
        correlation_id = generate_correlation_id()
        blocked = self._claim(correlation_id)
        if blocked is not None:
            return self._report(blocked)

        try:
            if not await self._confirmed(RESTORE_ALL_PROMPT, correlation_id):
                return self._report(
                    RestoreOutcome(RestoreStatus.CANCELLED, correlation_id=correlation_id)
                )

            try:
                ids = await self._fetcher.fetch_all(
                    on_discovery,
                    correlation_id=correlation_id,
                    should_stop=self._stop_requested,
                )
            except DiscoveryCancelledError:
                return self._report(self._aborted_before_batch(correlation_id))
            except DiscoveryError as exc:
                return self._report(RestoreOutcome.failed(exc.message, correlation_id=correlation_id))

            if not ids:
                return self._report(
                    RestoreOutcome(RestoreStatus.NOTHING_TO_RESTORE, correlation_id=correlation_id)
                )
            if self._cancel_requested:
                return self._report(self._aborted_before_batch(correlation_id))
            return self._report(await self._run_batch(ids, on_progress, correlation_id))
        except Exception as exc:
            return self._report(self._unexpected(exc, correlation_id))
        finally:
            self._release()

    async def restore_list(
        self,
        raw_text: str,
        on_progress: ProgressCallback | None = None,
    ) -> RestoreOutcome:
        """Unarchive the conversation ids found in *raw_text*.

        Args:
            raw_text: Pasted ids as JSON, comma- or newline-separated text
            on_progress: Receives a ``BatchProgress`` after each item

        Returns:
            The single terminal outcome of the run
        """
        correlation_id = generate_correlation_id()
        blocked = self._claim(correlation_id)
        if blocked is not None:
            return self._report(blocked)

        try:
            ids = extract_identifiers(raw_text)
            if not ids:
                return self._report(
                    RestoreOutcome(RestoreStatus.NO_VALID_IDS, correlation_id=correlation_id)
                )

            distinct = len(unique_identifiers(ids))
            prompt = f"Found {distinct} unique IDs. Restore them?"
            if not await self._confirmed(prompt, correlation_id):
                return self._report(
                    RestoreOutcome(RestoreStatus.CANCELLED, correlation_id=correlation_id)
                )
            if self._cancel_requested:
                return self._report(self._aborted_before_batch(correlation_id))
            return self._report(await self._run_batch(ids, on_progress, correlation_id))
        except Exception as exc:
            return self._report(self._unexpected(exc, correlation_id))
        finally:
            self._release()

    def _claim(self, correlation_id: str) -> RestoreOutcome | None:
        """Check preconditions and mark the orchestrator busy in the same step."""
        if not self.credentials.ready:
            return RestoreOutcome(RestoreStatus.NOT_READY, correlation_id=correlation_id)
        if self.is_busy:
            return RestoreOutcome.failed(
                "A restore is already running", correlation_id=correlation_id
            )
        self._active = True
        self._cancel_requested = False
        return None

    def _release(self) -> None:
        self._active = False
        self._cancel_requested = False

    def _stop_requested(self) -> bool:
        return self._cancel_requested

    @staticmethod
    def _aborted_before_batch(correlation_id: str) -> RestoreOutcome:
        logger.warning("restore_cancelled_before_batch", extra={"correlation_id": correlation_id})
        return RestoreOutcome(RestoreStatus.ABORTED, correlation_id=correlation_id)

    async def _confirmed(self, prompt: str, correlation_id: str) -> bool:
        try:
            return bool(await call_maybe_async(self._confirm, prompt))
        except Exception as exc:
            raise_if_cancelled(exc)
            logger.warning(
                "restore_confirmation_failed",
                extra={"correlation_id": correlation_id, "error": str(exc)},
            )
            return False

    async def _run_batch(
        self,
        ids: Sequence[str],
        on_progress: ProgressCallback | None,
        correlation_id: str,
    ) -> RestoreOutcome:
        try:
            tally = await self._mutator.run(ids, on_progress, correlation_id=correlation_id)
        except BatchAlreadyRunningError as exc:
            return RestoreOutcome.failed(exc.message, correlation_id=correlation_id)

        job = self._mutator.job
        if job is not None and job.status == BatchJobStatus.ABORTED:
            return RestoreOutcome(
                RestoreStatus.ABORTED,
                succeeded=tally.succeeded,
                total=tally.total,
                correlation_id=correlation_id,
            )
        return RestoreOutcome.completed(
            tally.succeeded, tally.total, correlation_id=correlation_id
        )

    @staticmethod
    def _unexpected(exc: Exception, correlation_id: str) -> RestoreOutcome:
        raise_if_cancelled(exc)
        if isinstance(exc, CredentialNotReadyError):
            return RestoreOutcome(RestoreStatus.NOT_READY, correlation_id=correlation_id)
        logger.exception(
            "restore_unexpected_error",
            extra={"correlation_id": correlation_id, "error_type": type(exc).__name__},
        )
        return RestoreOutcome.failed(str(exc) or type(exc).__name__, correlation_id=correlation_id)

    @staticmethod
    def _report(outcome: RestoreOutcome) -> RestoreOutcome:
        level = logging.INFO if outcome.ok else logging.WARNING
        logger.log(
            level,
            "restore_finished",
            extra={
                "correlation_id": outcome.correlation_id,
                "status": outcome.status.value,
                "succeeded": outcome.succeeded,
                "total": outcome.total,
                "error": outcome.error,
            },
        )
        return outcome
