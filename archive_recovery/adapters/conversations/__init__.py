"""Conversation backend adapter used for listing and unarchiving."""

from archive_recovery.adapters.conversations.client import (
    ConversationClient,
    ConversationClientError,
)

__all__ = ["ConversationClient", "ConversationClientError"]
