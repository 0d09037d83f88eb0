"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest
from fakes import VALID_TOKEN, RecordingSleep

from archive_recovery.auth.credential import CredentialContext


@pytest.fixture
def credentials() -> CredentialContext:
    return CredentialContext()


@pytest.fixture
def ready_credentials() -> CredentialContext:
    context = CredentialContext()
    context.set_once(VALID_TOKEN)
    return context


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
