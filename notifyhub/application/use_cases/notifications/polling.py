"""Background loop keeping the first page of notifications fresh."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)


class NotificationPoller:
    """Call ``refresh`` every ``interval`` seconds on the running event loop.

    ``start`` is idempotent and ``stop`` cancels the timer synchronously, so
    the owner can tie the loop to its own lifetime.
    """

    def __init__(
        self,
        refresh: Callable[[], Awaitable[Any]],
        *,
        interval: float = 30.0,
    ) -> None:
        if interval <= 0:
            raise ValueError("Polling interval must be positive")
        self._refresh = refresh
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("Notification polling started every %.1f seconds", self._interval)

    def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            logger.info("Notification polling stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self._refresh()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Scheduled notification refresh failed")


__all__ = ["NotificationPoller"]
