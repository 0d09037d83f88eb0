from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://chatgpt.com/backend-api"


class RestoreConfig(BaseModel):
    """Upstream endpoint and pacing configuration for archive restores."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    api_base_url: str = Field(
        default=DEFAULT_API_BASE_URL,
        validation_alias="RESTORE_API_BASE_URL",
        description="Base URL of the conversation backend API",
    )

    page_size: int = Field(
        default=50,
        validation_alias="RESTORE_PAGE_SIZE",
        description="Number of archived conversations requested per listing page",
    )

    list_delay_ms: int = Field(
        default=100,
        validation_alias="RESTORE_LIST_DELAY_MS",
        description="Pause between listing requests in milliseconds",
    )

    mutate_delay_ms: int = Field(
        default=100,
        validation_alias="RESTORE_MUTATE_DELAY_MS",
        description="Pause between unarchive requests in milliseconds",
    )

    request_timeout_sec: float = Field(
        default=30.0,
        validation_alias="RESTORE_REQUEST_TIMEOUT_SEC",
        description="Per-request timeout in seconds",
    )

    @field_validator("api_base_url", mode="before")
    @classmethod
    def _validate_api_base_url(cls, value: Any) -> str:
        url = str(value or DEFAULT_API_BASE_URL).strip()
        if not url:
            return DEFAULT_API_BASE_URL
        if not url.startswith(("http://", "https://")):
            msg = "API base URL must start with http:// or https://"
            raise ValueError(msg)
        return url.rstrip("/")

    @field_validator("page_size", mode="before")
    @classmethod
    def _validate_page_size(cls, value: Any) -> int:
        try:
            parsed = int(str(value if value not in (None, "") else 50))
        except ValueError as exc:
            msg = "Page size must be a valid integer"
            raise ValueError(msg) from exc
        if parsed < 1 or parsed > 100:
            msg = "Page size must be between 1 and 100"
            raise ValueError(msg)
        return parsed

    @field_validator("list_delay_ms", "mutate_delay_ms", mode="before")
    @classmethod
    def _validate_delay(cls, value: Any, info: ValidationInfo) -> int:
        if value in (None, ""):
            return int(cls.model_fields[info.field_name].default)
        try:
            parsed = int(str(value))
        except ValueError as exc:
            msg = f"{info.field_name.replace('_', ' ')} must be a valid integer"
            raise ValueError(msg) from exc
        if parsed < 0 or parsed > 60_000:
            msg = f"{info.field_name.replace('_', ' ').capitalize()} must be between 0 and 60000"
            raise ValueError(msg)
        if parsed == 0:
            logger.warning(
                "restore_delay_disabled",
                extra={"field": info.field_name},
            )
        return parsed

    @field_validator("request_timeout_sec", mode="before")
    @classmethod
    def _validate_timeout(cls, value: Any) -> float:
        try:
            timeout = float(str(value or 30))
        except ValueError as exc:
            msg = "Timeout must be a valid number"
            raise ValueError(msg) from exc
        if timeout <= 0:
            msg = "Timeout must be positive"
            raise ValueError(msg)
        if timeout > 600:
            msg = "Timeout too large (max 600 seconds)"
            raise ValueError(msg)
        return timeout

    @property
    def list_delay_sec(self) -> float:
        return self.list_delay_ms / 1000

    @property
    def mutate_delay_sec(self) -> float:
        return self.mutate_delay_ms / 1000
