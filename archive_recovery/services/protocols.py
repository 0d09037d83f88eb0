"""Protocol definitions (ports) for the restore services.

Keeping these as Protocols isolates discovery and mutation from the concrete
HTTP client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from archive_recovery.adapters.conversations.models import ConversationPage
    from archive_recovery.domain.models.batch_job import BatchProgress


class ArchiveListingClient(Protocol):
    async def list_archived(self, offset: int = 0, limit: int = 50) -> ConversationPage: ...


class UnarchiveClient(Protocol):
    async def unarchive(self, conversation_id: str) -> bool: ...


class ProgressCallback(Protocol):
    def __call__(self, progress: BatchProgress) -> object: ...


class ConfirmCallback(Protocol):
    def __call__(self, prompt: str) -> object: ...
