"""Cancellation tokens bound to a single in-flight table read."""

from __future__ import annotations

import asyncio
import itertools
from typing import Optional

from domain.exceptions import FetchCancelledError

_ids = itertools.count(1)


class CancellationToken:
    """One-shot, idempotent cancellation handle.

    Cancelling does not stop a running coroutine by itself; holders must
    check :attr:`cancelled` (or await :meth:`wait`) and the owner must compare
    tokens before committing any result.
    """

    def __init__(self) -> None:
        self.id = next(_ids)
        self._event = asyncio.Event()
        self.reason: Optional[str] = None

    def __repr__(self) -> str:
        state = f"cancelled:{self.reason}" if self.cancelled else "live"
        return f"<CancellationToken #{self.id} {state}>"

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "superseded") -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise FetchCancelledError(self.reason or "superseded")

    async def wait(self) -> None:
        await self._event.wait()

    async def sleep(self, delay: float) -> bool:
        """Sleep for *delay* seconds; return ``True`` if cancelled meanwhile."""
        if delay <= 0:
            return self.cancelled
        try:
            await asyncio.wait_for(self._event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True
