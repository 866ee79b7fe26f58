"""Domain entities describing paginated notification reads."""

from __future__ import annotations

from dataclasses import dataclass

from .notification import Notification


@dataclass(frozen=True)
class NotificationPage:
    """One page of notifications as returned by the remote store."""

    items: tuple[Notification, ...]
    total: int
    has_more: bool


@dataclass(frozen=True)
class PaginationState:
    """Pagination bookkeeping of the locally loaded collection."""

    page: int = 1
    limit: int = 20
    total: int = 0

    @property
    def can_load_more(self) -> bool:
        return self.page * self.limit < self.total


__all__ = ["NotificationPage", "PaginationState"]
