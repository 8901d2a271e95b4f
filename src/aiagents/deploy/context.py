"""DeployContext — the deadline and cancellation signal of one run.

The reconciler checks :attr:`DeployContext.cancelled` between specs and
routes every capability call through :meth:`DeployContext.call`, so a
caller-supplied deadline bounds the run end to end.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from aiagents.errors import DeployCancelledError

T = TypeVar("T")

DEADLINE_EXCEEDED = "deadline exceeded"


class DeployContext:
    """Cooperative cancellation for a deployment run."""

    def __init__(self, *, timeout: float | None = None) -> None:
        self.timeout = timeout
        self._deadline: float | None = None
        self._reason: str | None = None

    def start(self) -> None:
        """Arm the deadline relative to the running loop's clock."""
        if self.timeout is not None and self._deadline is None:
            self._deadline = asyncio.get_running_loop().time() + self.timeout

    def cancel(self, reason: str = "cancelled") -> None:
        """Request cancellation; takes effect at the next spec boundary."""
        if self._reason is None:
            self._reason = reason

    def remaining(self) -> float | None:
        if self._deadline is None:
            return None
        return self._deadline - asyncio.get_running_loop().time()

    @property
    def cancelled(self) -> bool:
        if self._reason is not None:
            return True
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            self._reason = DEADLINE_EXCEEDED
            return True
        return False

    @property
    def reason(self) -> str:
        return self._reason or ""

    async def call(self, func: Callable[..., Awaitable[T]], *args: Any) -> T:
        """Await ``func(*args)`` bounded by the remaining deadline.

        Raises:
            DeployCancelledError: If the run is already cancelled or the
                deadline expires while waiting.
        """
        if self.cancelled:
            raise DeployCancelledError(self.reason)
        remaining = self.remaining()
        if remaining is None:
            return await func(*args)
        try:
            return await asyncio.wait_for(func(*args), timeout=remaining)
        except TimeoutError as exc:
            self._reason = DEADLINE_EXCEEDED
            raise DeployCancelledError(DEADLINE_EXCEEDED) from exc
