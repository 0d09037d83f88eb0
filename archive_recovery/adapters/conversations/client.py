"""Conversation backend API client."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from archive_recovery.adapters.conversations.models import ArchiveUpdateRequest, ConversationPage
from archive_recovery.config.restore import DEFAULT_API_BASE_URL

if TYPE_CHECKING:
    from typing import Self

    from archive_recovery.auth.credential import CredentialContext

logger = logging.getLogger(__name__)


class ConversationClientError(Exception):
    """Base exception for conversation client errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _wrap_http_error(operation: str, exc: httpx.HTTPError) -> ConversationClientError:
    status_code = None
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
    return ConversationClientError(f"{operation} failed: {exc}", status_code=status_code)


class ConversationClient:
    """Async HTTP client for the archived-conversation endpoints.

    The ``Authorization`` header is read from the shared credential context on
    every call, so one client can be created before the credential exists.
    """

    # Default per-endpoint timeouts (seconds)
    DEFAULT_TIMEOUTS: dict[str, float] = {
        "list_archived": 30.0,
        "set_archived": 15.0,
    }

    def __init__(
        self,
        credentials: CredentialContext,
        api_url: str = DEFAULT_API_BASE_URL,
        timeout: float = 30.0,
        *,
        http_client: httpx.AsyncClient | None = None,
        endpoint_timeouts: dict[str, float] | None = None,
    ) -> None:
        """Initialize the conversation client.

        Args:
            credentials: Context holding the captured bearer credential
            api_url: Base URL of the backend API (e.g. https://chatgpt.com/backend-api)
            timeout: Default request timeout in seconds
            http_client: Pre-built client to use instead of opening one; not closed on exit
            endpoint_timeouts: Custom per-endpoint timeouts (overrides defaults)
        """
        self.credentials = credentials
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.endpoint_timeouts = {**self.DEFAULT_TIMEOUTS}
        if endpoint_timeouts:
            self.endpoint_timeouts.update(endpoint_timeouts)
        self._client: httpx.AsyncClient | None = http_client
        self._owns_client = http_client is None

    def get_timeout(self, endpoint: str) -> float:
        return self.endpoint_timeouts.get(endpoint, self.timeout)

    async def __aenter__(self) -> Self:
        """Enter async context."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.api_url,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        return self

    async def __aexit__(self, *args: object) -> None:
        """Exit async context."""
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the HTTP client."""
        if self._client is None:
            raise ConversationClientError("Client not initialized. Use async context manager.")
        return self._client

    def _auth_headers(self) -> dict[str, str]:
        return self.credentials.require().authorization_header

    async def list_archived(self, offset: int = 0, limit: int = 50) -> ConversationPage:
        """Get one page of archived conversations, most recently updated first.

        Args:
            offset: Number of items to skip
            limit: Page size

        Returns:
            The parsed page

        Raises:
            ConversationClientError: On transport failures and non-success statuses
            pydantic.ValidationError: If the body is not a conversation page
        """
        params: dict[str, str | int] = {
            "offset": offset,
            "limit": limit,
            "order": "updated",
            "is_archived": "true",
        }
        headers = self._auth_headers()
        try:
            response = await self.client.get(
                "/conversations",
                params=params,
                headers=headers,
                timeout=self.get_timeout("list_archived"),
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise _wrap_http_error("Listing archived conversations", e) from e
        return ConversationPage.model_validate(response.json())

    async def set_archived(self, conversation_id: str, archived: bool = False) -> bool:
        """Set the archived flag of one conversation.

        Success is the transport status alone; the response body is not read.

        Args:
            conversation_id: Conversation identifier
            archived: New archived flag

        Returns:
            True if the backend answered with a 2xx status

        Raises:
            ConversationClientError: If the request never got an answer
        """
        body = ArchiveUpdateRequest(is_archived=archived)
        headers = self._auth_headers()
        try:
            response = await self.client.patch(
                f"/conversation/{conversation_id}",
                json=body.model_dump(),
                headers=headers,
                timeout=self.get_timeout("set_archived"),
            )
        except httpx.HTTPError as e:
            raise _wrap_http_error(f"Updating conversation {conversation_id}", e) from e
        if not response.is_success:
            logger.debug(
                "conversation_update_rejected",
                extra={"conversation_id": conversation_id, "status_code": response.status_code},
            )
        return response.is_success

    async def unarchive(self, conversation_id: str) -> bool:
        return await self.set_archived(conversation_id, archived=False)
