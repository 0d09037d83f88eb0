"""Fakes and sample data shared by the test modules."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import httpx

from archive_recovery.adapters.conversations.models import ConversationPage

VALID_TOKEN = "Bearer eyJhbGciOiJSUzI1NiJ9.first-token"

ID_A = "6650a1b2-c3d4-e5f6-a7b8-c9d0e1f2a3b4"
ID_B = "6650b1b2-c3d4-e5f6-a7b8-c9d0e1f2a3b4"
ID_C = "6650c1b2-c3d4-e5f6-a7b8-c9d0e1f2a3b4"


def make_ids(count: int, prefix: str = "conv") -> list[str]:
    return [f"{prefix}-{index:04d}-aaaaaaaaaaaaaaaaaaaa" for index in range(count)]


class FakeConversationApi:
    """In-memory stand-in for ``ConversationClient``.

    ``pages`` are served in order, one per ``list_archived`` call; ``fail``
    marks ids whose unarchive answer is a non-2xx status and ``explode`` ids
    whose request raises.
    """

    def __init__(
        self,
        pages: Iterable[list[str]] = (),
        *,
        fail: Iterable[str] = (),
        explode: Iterable[str] = (),
        list_error: Exception | None = None,
        list_error_at_call: int = 0,
    ) -> None:
        self.pages = [list(page) for page in pages]
        self.fail = set(fail)
        self.explode = set(explode)
        self.list_error = list_error
        self.list_error_at_call = list_error_at_call
        self.list_calls: list[tuple[int, int]] = []
        self.unarchive_calls: list[str] = []
        self.archived: set[str] = {item for page in self.pages for item in page}

    async def list_archived(self, offset: int = 0, limit: int = 50) -> ConversationPage:
        call_index = len(self.list_calls)
        self.list_calls.append((offset, limit))
        if self.list_error is not None and call_index == self.list_error_at_call:
            raise self.list_error
        page = self.pages[call_index] if call_index < len(self.pages) else []
        return ConversationPage.model_validate({"items": [{"id": item} for item in page]})

    async def unarchive(self, conversation_id: str) -> bool:
        self.unarchive_calls.append(conversation_id)
        if conversation_id in self.explode:
            request = httpx.Request("PATCH", f"https://example.test/conversation/{conversation_id}")
            raise httpx.ConnectError("connection reset", request=request)
        if conversation_id in self.fail:
            return False
        self.archived.discard(conversation_id)
        return True

    @property
    def total_calls(self) -> int:
        return len(self.list_calls) + len(self.unarchive_calls)


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
