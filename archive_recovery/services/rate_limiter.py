"""Fixed-interval pacing between upstream requests."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass(frozen=True)
class RateLimitPolicy:
    """Pause of ``interval_sec`` between consecutive requests of one loop.

    The sleep function is injectable so tests can record pauses without
    waiting for them.
    """

    interval_sec: float = 0.1
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep, compare=False)

    def __post_init__(self) -> None:
        if self.interval_sec < 0:
            msg = "interval_sec must not be negative"
            raise ValueError(msg)

    @classmethod
    def none(cls) -> RateLimitPolicy:
        """Policy that never waits."""
        return cls(interval_sec=0.0)

    async def wait(self) -> None:
        if self.interval_sec > 0:
            await self.sleep(self.interval_sec)
