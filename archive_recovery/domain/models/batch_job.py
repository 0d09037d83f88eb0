"""Batch job domain model.

A BatchJob is the ephemeral run state of one sequential restore pass over an
ordered list of conversation identifiers. It lives only as long as the run.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum


class BatchJobStatus(str, Enum):
    """Lifecycle of a batch job."""

    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class BatchProgress:
    """Snapshot emitted to progress observers after each item."""

    completed: int
    total: int
    current_id: str
    succeeded: int
    item_succeeded: bool

    @property
    def label(self) -> str:
        return f"Restoring {self.completed}/{self.total}: {self.current_id}"


@dataclass(frozen=True)
class BatchTally:
    """Final result of a batch: how many of ``total`` items were restored."""

    succeeded: int
    total: int

    @property
    def failed(self) -> int:
        return self.total - self.succeeded


@dataclass
class BatchJob:
    """Run state for one batch, owned by the mutator that created it."""

    total: int
    completed: int = 0
    succeeded: int = 0
    current_id: str | None = None
    status: BatchJobStatus = BatchJobStatus.RUNNING
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    finished_at: datetime | None = None

    @property
    def is_running(self) -> bool:
        return self.status == BatchJobStatus.RUNNING

    def begin_item(self, item_id: str) -> None:
        self.current_id = item_id

    def record(self, item_id: str, ok: bool) -> BatchProgress:
        """Count one attempted item and return the resulting progress snapshot.

        Raises:
            ValueError: If the job is no longer running.
        """
        if not self.is_running:
            raise ValueError(f"Cannot record items on a job in status: {self.status}")
        self.current_id = item_id
        self.completed += 1
        if ok:
            self.succeeded += 1
        return BatchProgress(
            completed=self.completed,
            total=self.total,
            current_id=item_id,
            succeeded=self.succeeded,
            item_succeeded=ok,
        )

    def mark_completed(self) -> None:
        self._finish(BatchJobStatus.COMPLETED)

    def mark_aborted(self) -> None:
        self._finish(BatchJobStatus.ABORTED)

    def tally(self) -> BatchTally:
        """Return the tally of items attempted so far."""
        return BatchTally(succeeded=self.succeeded, total=self.completed)

    def _finish(self, status: BatchJobStatus) -> None:
        if not self.is_running:
            raise ValueError(f"Cannot finish a job in status: {self.status}")
        self.status = status
        self.finished_at = datetime.now(UTC)
