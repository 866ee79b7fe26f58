"""Single source of truth for the locally held notification collection."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace

from notifyhub.domain.entities import Notification, PaginationState

logger = logging.getLogger(__name__)

StateListener = Callable[["NotificationState"], None]


class NotificationState:
    """Ordered, id-unique collection plus the bookkeeping of in-flight work.

    Only the fetch, polling and mutation layers write here. Views read the
    immutable snapshot returned by :attr:`items`.
    """

    def __init__(self, *, page_limit: int = 20) -> None:
        self._items: list[Notification] = []
        self._listeners: list[StateListener] = []
        self._fetches_in_flight = 0
        self.pagination = PaginationState(page=1, limit=page_limit, total=0)
        self.error: str | None = None
        self.alive = True
        self.pending_reads: set[str] = set()
        self.confirmed_reads: set[str] = set()
        self.pending_deletes: set[str] = set()
        self.deleted_ids: set[str] = set()

    @property
    def items(self) -> tuple[Notification, ...]:
        return tuple(self._items)

    @property
    def loading(self) -> bool:
        return self._fetches_in_flight > 0

    @property
    def locally_read_ids(self) -> set[str]:
        """Ids whose read flag must survive a server refresh."""

        return self.pending_reads | self.confirmed_reads

    @property
    def excluded_ids(self) -> set[str]:
        """Ids that must not be re-inserted by a merge."""

        return self.pending_deletes | self.deleted_ids

    def get(self, notification_id: str) -> Notification | None:
        for item in self._items:
            if item.id == notification_id:
                return item
        return None

    def index_of(self, notification_id: str) -> int | None:
        for index, item in enumerate(self._items):
            if item.id == notification_id:
                return index
        return None

    def set_items(self, items: Iterable[Notification]) -> None:
        collected = list(items)
        ids = [item.id for item in collected]
        if len(ids) != len(set(ids)):
            raise ValueError("Notification collection cannot contain duplicate ids")
        self._items = collected

    def replace(self, notification: Notification) -> None:
        index = self.index_of(notification.id)
        if index is None:
            raise KeyError(notification.id)
        self._items[index] = notification

    def set_read(self, notification_id: str, is_read: bool, *, read_at=None) -> bool:
        """Flip the read flag of ``notification_id`` if it is still present."""

        current = self.get(notification_id)
        if current is None:
            return False
        self.replace(replace(current, is_read=is_read, read_at=read_at))
        return True

    def remove(self, notification_id: str) -> tuple[int, Notification] | None:
        index = self.index_of(notification_id)
        if index is None:
            return None
        return index, self._items.pop(index)

    def restore(self, notification: Notification, *, original_index: int) -> None:
        """Re-insert ``notification`` where it belongs by ``created_at`` ordering.

        The collection is kept newest first; records sharing the same timestamp
        keep their previous relative order.
        """

        if self.get(notification.id) is not None:
            return
        position = len(self._items)
        for index, item in enumerate(self._items):
            if item.created_at < notification.created_at or (
                item.created_at == notification.created_at and index >= original_index
            ):
                position = index
                break
        self._items.insert(position, notification)

    def begin_fetch(self) -> None:
        self._fetches_in_flight += 1

    def end_fetch(self) -> None:
        self._fetches_in_flight = max(0, self._fetches_in_flight - 1)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self) -> None:
        if not self.alive:
            return
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Notification state listener %r failed", listener)


__all__ = ["NotificationState", "StateListener"]
