"""Terminal report of a restore run.

Every call to ``restore_all`` or ``restore_list`` produces exactly one
RestoreOutcome, whatever happened during the run.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RestoreStatus(str, Enum):
    """How a restore run ended."""

    COMPLETED = "completed"
    NOTHING_TO_RESTORE = "nothing_to_restore"
    NO_VALID_IDS = "no_valid_ids"
    NOT_READY = "not_ready"
    CANCELLED = "cancelled"
    ABORTED = "aborted"
    FAILED = "failed"


@dataclass(frozen=True)
class RestoreOutcome:
    status: RestoreStatus
    succeeded: int = 0
    total: int = 0
    error: str | None = None
    correlation_id: str | None = None

    @property
    def ok(self) -> bool:
        """True when the run finished without a fatal error or unmet precondition."""
        return self.status in (
            RestoreStatus.COMPLETED,
            RestoreStatus.NOTHING_TO_RESTORE,
            RestoreStatus.NO_VALID_IDS,
        )

    @property
    def message(self) -> str:
        """One-line report suitable for showing to the user."""
        if self.status == RestoreStatus.COMPLETED:
            return f"Done! Restored {self.succeeded} out of {self.total} conversations."
        if self.status == RestoreStatus.NOTHING_TO_RESTORE:
            return "No archived chats found."
        if self.status == RestoreStatus.NO_VALID_IDS:
            return "No valid IDs found."
        if self.status == RestoreStatus.NOT_READY:
            return "Token captured: NO (open a chat to capture it)"
        if self.status == RestoreStatus.CANCELLED:
            return "Restore cancelled."
        if self.status == RestoreStatus.ABORTED:
            return f"Stopped early: restored {self.succeeded} of {self.total} attempted."
        return f"Error: {self.error or 'unknown error'}"

    @classmethod
    def completed(
        cls, succeeded: int, total: int, *, correlation_id: str | None = None
    ) -> RestoreOutcome:
        return cls(
            RestoreStatus.COMPLETED,
            succeeded=succeeded,
            total=total,
            correlation_id=correlation_id,
        )

    @classmethod
    def failed(cls, error: str, *, correlation_id: str | None = None) -> RestoreOutcome:
        return cls(RestoreStatus.FAILED, error=error, correlation_id=correlation_id)
