"""Restore archived conversations with a bearer credential captured from host traffic."""

from archive_recovery.auth import Credential, CredentialContext, CredentialObserver
from archive_recovery.di.container import RestoreSession, restore_session
from archive_recovery.domain.models.restore_outcome import RestoreOutcome, RestoreStatus
from archive_recovery.services.restore_orchestrator import RestoreOrchestrator

__all__ = [
    "Credential",
    "CredentialContext",
    "CredentialObserver",
    "RestoreOrchestrator",
    "RestoreOutcome",
    "RestoreSession",
    "RestoreStatus",
    "restore_session",
]
