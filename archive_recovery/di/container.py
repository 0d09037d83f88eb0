from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from archive_recovery.adapters.conversations.client import ConversationClient
from archive_recovery.auth.credential import CredentialContext
from archive_recovery.auth.observer import CredentialObserver
from archive_recovery.config import AppConfig, load_config
from archive_recovery.core.logging_utils import setup_logging
from archive_recovery.services.restore_orchestrator import RestoreOrchestrator

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    import httpx

    from archive_recovery.services.protocols import ConfirmCallback

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RestoreSession:
    """Everything one host process needs: the credential, its observer and the jobs."""

    credentials: CredentialContext
    observer: CredentialObserver
    orchestrator: RestoreOrchestrator


@asynccontextmanager
async def restore_session(
    cfg: AppConfig | None = None,
    *,
    host_client: httpx.AsyncClient | httpx.Client | None = None,
    api_client: httpx.AsyncClient | None = None,
    credentials: CredentialContext | None = None,
    confirm: ConfirmCallback | None = None,
    configure_logging: bool = False,
) -> AsyncIterator[RestoreSession]:
    """Wire a restore session and keep its API client open for the block.

    Args:
        cfg: Configuration. If None, loads from environment.
        host_client: The host application's own httpx client; the credential
            observer is installed on its request hooks.
        api_client: Client for the backend calls. If None, one is opened from config.
        credentials: Shared credential context. If None, a fresh one is created.
        confirm: Confirmation callback supplied by the presentation layer.
        configure_logging: Route stdlib logging through loguru using the runtime config.

    Yields:
        The wired session.
    """
    cfg = cfg or load_config()
    if configure_logging:
        setup_logging(
            cfg.runtime.log_level,
            json_output=cfg.runtime.log_json,
            log_file=cfg.runtime.log_file,
        )
    credentials = credentials or CredentialContext()
    observer = CredentialObserver(credentials)
    if host_client is not None:
        observer.install(host_client)

    async with ConversationClient(
        credentials,
        cfg.restore.api_base_url,
        cfg.restore.request_timeout_sec,
        http_client=api_client,
    ) as client:
        orchestrator = RestoreOrchestrator.create(credentials, client, cfg.restore, confirm=confirm)
        logger.debug(
            "restore_session_opened",
            extra={"api_url": cfg.restore.api_base_url, "observer_installed": host_client is not None},
        )
        yield RestoreSession(credentials=credentials, observer=observer, orchestrator=orchestrator)
