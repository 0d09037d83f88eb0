"""Domain-specific exceptions.

These exceptions represent precondition violations and fatal restore errors.
They are caught by the orchestrator and turned into a single terminal outcome.
"""


class DomainException(Exception):
    """Base exception for all domain errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        """Initialize domain exception.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class RestoreError(DomainException):
    """Base class for errors raised while restoring archived conversations."""


class CredentialNotReadyError(RestoreError):
    """Raised when an operation needs a bearer credential that was never captured."""

    def __init__(self, message: str = "No bearer credential has been captured yet") -> None:
        super().__init__(message)


class DiscoveryError(RestoreError):
    """Raised when listing archived conversations fails.

    Discovery is all-or-nothing: callers never receive a truncated list.
    """

    def __init__(self, message: str, *, offset: int, found: int) -> None:
        super().__init__(message, details={"offset": offset, "found": found})
        self.offset = offset
        self.found = found


class BatchAlreadyRunningError(RestoreError):
    """Raised when a batch is started while another one is still running."""

    pass


class DiscoveryCancelledError(RestoreError):
    """Raised when a restore is cancelled while archived conversations are being listed."""

    def __init__(self, message: str = "Discovery cancelled", *, found: int = 0) -> None:
        super().__init__(message, details={"found": found})
        self.found = found
