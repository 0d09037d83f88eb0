"""Single-credential context shared by every restore component.

The context holds at most one bearer credential. The first value handed to
``set_once`` wins for the life of the process; later values are ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from archive_recovery.core.async_utils import raise_if_cancelled
from archive_recovery.core.logging_utils import mask_credential
from archive_recovery.domain.exceptions.domain_exceptions import CredentialNotReadyError

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credential:
    """A captured ``Authorization`` header value, kept exactly as observed."""

    value: str
    captured_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def authorization_header(self) -> dict[str, str]:
        return {"Authorization": self.value}

    def __repr__(self) -> str:
        return f"Credential(value={mask_credential(self.value)!r}, captured_at={self.captured_at!r})"


class CredentialContext:
    """Holds the one bearer credential and announces when it becomes ready."""

    def __init__(self) -> None:
        self._credential: Credential | None = None
        self._listeners: list[Callable[[Credential], None]] = []

    @property
    def ready(self) -> bool:
        return self._credential is not None

    @property
    def credential(self) -> Credential | None:
        return self._credential

    def require(self) -> Credential:
        """Return the captured credential.

        Raises:
            CredentialNotReadyError: If nothing has been captured yet.
        """
        if self._credential is None:
            raise CredentialNotReadyError()
        return self._credential

    def set_once(self, value: str) -> bool:
        """Store *value* if no credential is held yet.

        Returns:
            True if this call captured the credential, False if one was already held.
        """
        if self._credential is not None:
            return False
        self._credential = Credential(value=value)
        logger.info(
            "credential_captured",
            extra={"credential": mask_credential(value)},
        )
        self._notify(self._credential)
        return True

    def add_listener(self, callback: Callable[[Credential], None]) -> None:
        """Register a callback for the one-shot "credential ready" event.

        Listeners registered after capture are called immediately, so late
        subscribers still see the event exactly once.
        """
        self._listeners.append(callback)
        if self._credential is not None:
            self._call_listener(callback, self._credential)

    def _notify(self, credential: Credential) -> None:
        for callback in list(self._listeners):
            self._call_listener(callback, credential)

    @staticmethod
    def _call_listener(callback: Callable[[Credential], None], credential: Credential) -> None:
        try:
            callback(credential)
        except Exception as exc:
            raise_if_cancelled(exc)
            logger.warning(
                "credential_listener_failed",
                extra={"error": str(exc), "error_type": type(exc).__name__},
            )
