"""Contract of the remote notification store consumed by the core."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from .entities import NotificationPage, NotificationPreferences


class NotificationGateway(Protocol):
    """Fetch, paginate and mutate notifications held by the remote store."""

    async def fetch_page(self, page: int, limit: int) -> NotificationPage:
        ...

    async def mark_as_read(self, notification_id: str) -> None:
        ...

    async def mark_all_as_read(self, notification_ids: Sequence[str]) -> list[str]:
        """Mark ``notification_ids`` read and return the ids the store rejected."""
        ...

    async def delete(self, notification_id: str) -> None:
        ...

    async def get_preferences(self) -> NotificationPreferences:
        ...

    async def update_preferences(self, changes: Mapping[str, Any]) -> None:
        ...


__all__ = ["NotificationGateway"]
