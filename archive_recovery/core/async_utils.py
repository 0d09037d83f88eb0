"""Async helper utilities."""

from __future__ import annotations

import asyncio
import inspect
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable


def raise_if_cancelled(exc: BaseException) -> None:
    """Re-raise ``asyncio.CancelledError`` instances to preserve cancellation semantics."""

    if isinstance(exc, asyncio.CancelledError):  # pragma: no cover - simple guard
        raise exc


async def call_maybe_async(func: Callable[..., Any], *args: Any) -> Any:
    """Call *func* and await the result when it returns an awaitable."""
    result = func(*args)
    if inspect.isawaitable(result):
        return await result
    return result
