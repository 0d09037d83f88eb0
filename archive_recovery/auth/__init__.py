"""Bearer credential capture."""

from archive_recovery.auth.credential import Credential, CredentialContext
from archive_recovery.auth.observer import CredentialObserver, extract_bearer

__all__ = ["Credential", "CredentialContext", "CredentialObserver", "extract_bearer"]
