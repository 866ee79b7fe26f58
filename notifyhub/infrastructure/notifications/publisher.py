"""Utility helpers to push collection snapshots to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from notifyhub.application.state import NotificationState
from notifyhub.application.use_cases.notifications import (
    build_dropdown_view,
    has_high_priority_notification,
    unread_count,
)
from notifyhub.domain.entities import Notification
from notifyhub.interfaces.api.schemas import NotificationRead

from .manager import ViewConnectionManager

logger = logging.getLogger(__name__)


class SnapshotPublisher:
    """Serialize the dropdown projection and schedule its delivery.

    Registered as a state listener, so it runs synchronously inside the writer
    and only schedules the network sends.
    """

    def __init__(self, manager: ViewConnectionManager, *, dropdown_limit: int = 10) -> None:
        self._manager = manager
        self._dropdown_limit = dropdown_limit

    def __call__(self, state: NotificationState) -> None:
        self.dispatch(state)

    def dispatch(self, state: NotificationState) -> None:
        if not self._manager.connection_count:
            return
        message = {
            "type": "snapshot",
            "data": self.snapshot(state.items, loading=state.loading, error=state.error),
        }
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop, snapshot not delivered")
            return
        loop.create_task(self._manager.broadcast(message))

    def snapshot(
        self,
        items: Sequence[Notification],
        *,
        loading: bool = False,
        error: str | None = None,
    ) -> dict[str, Any]:
        view = build_dropdown_view(items, limit=self._dropdown_limit)
        return {
            "unread_count": unread_count(items),
            "badge": view.badge,
            "has_high_priority": has_high_priority_notification(items),
            "loading": loading,
            "error": error,
            "items": [
                NotificationRead.from_entity(item.notification).model_dump(mode="json")
                for item in view.items
            ],
        }


__all__ = ["SnapshotPublisher"]
