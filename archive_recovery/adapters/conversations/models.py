"""Pydantic models for the conversation backend API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class ConversationItem(BaseModel):
    """One entry of a conversation listing. Only ``id`` is required."""

    id: str
    title: str | None = None
    create_time: str | float | None = None
    update_time: str | float | None = None
    is_archived: bool | None = None

    model_config = {"populate_by_name": True, "extra": "ignore"}


class ConversationPage(BaseModel):
    """One page of ``GET /conversations``."""

    items: list[ConversationItem] = Field(default_factory=list)
    total: int | None = None
    limit: int | None = None
    offset: int | None = None

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("items", mode="before")
    @classmethod
    def _null_items_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def ids(self) -> list[str]:
        return [item.id for item in self.items]


class ArchiveUpdateRequest(BaseModel):
    """Body of ``PATCH /conversation/{id}``."""

    is_archived: bool = False
