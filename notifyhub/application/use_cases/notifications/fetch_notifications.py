"""Fetch pages from the remote store and merge them into the local collection."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Collection, Sequence
from dataclasses import replace

from notifyhub.application.state import NotificationState
from notifyhub.domain.entities import Notification, NotificationPage, PaginationState
from notifyhub.domain.errors import RemoteStoreError
from notifyhub.domain.gateway import NotificationGateway

logger = logging.getLogger(__name__)


def merge_notifications(
    current: Sequence[Notification],
    incoming: Sequence[Notification],
    *,
    prepend_new: bool,
    locally_read: Collection[str] = (),
    excluded: Collection[str] = (),
) -> list[Notification]:
    """Merge ``incoming`` into ``current`` without duplicating ids.

    Known ids are refreshed in place with the fetched fields. A record read
    locally (pending or confirmed) stays read even when the fetched copy is
    not. Ids in ``excluded`` are ignored.

    With ``prepend_new`` unknown ids that precede every known id of the page
    are inserted as one block at the front; the others follow the known id
    they come after in server order. Without it, unknown ids are appended.
    """

    fresh_by_id: dict[str, Notification] = {}
    fresh_order: list[str] = []
    for notification in incoming:
        if notification.id in excluded:
            continue
        if notification.id not in fresh_by_id:
            fresh_order.append(notification.id)
        fresh_by_id[notification.id] = notification

    merged: list[Notification] = []
    seen: set[str] = set()
    for existing in current:
        fresh = fresh_by_id.get(existing.id)
        if fresh is None:
            merged.append(existing)
        else:
            merged.append(_reconcile(existing, fresh, locally_read))
        seen.add(existing.id)

    if not prepend_new:
        return merged + [
            _reconcile(None, fresh_by_id[notification_id], locally_read)
            for notification_id in fresh_order
            if notification_id not in seen
        ]

    leading: list[Notification] = []
    following: dict[str, list[Notification]] = {}
    anchor: str | None = None
    for notification_id in fresh_order:
        if notification_id in seen:
            anchor = notification_id
            continue
        record = _reconcile(None, fresh_by_id[notification_id], locally_read)
        if anchor is None:
            leading.append(record)
        else:
            following.setdefault(anchor, []).append(record)

    result = leading
    for item in merged:
        result.append(item)
        result.extend(following.get(item.id, ()))
    return result


def _reconcile(
    existing: Notification | None,
    fresh: Notification,
    locally_read: Collection[str],
) -> Notification:
    if fresh.is_read or fresh.id not in locally_read:
        return fresh
    read_at = existing.read_at if existing is not None else None
    return replace(fresh, is_read=True, read_at=read_at or fresh.read_at)


class NotificationFetcher:
    """Fetch/pagination layer writing into a shared :class:`NotificationState`."""

    def __init__(
        self,
        state: NotificationState,
        gateway: NotificationGateway,
        *,
        max_page_limit: int = 100,
    ) -> None:
        self._state = state
        self._gateway = gateway
        self._max_page_limit = max_page_limit
        self._refresh_task: asyncio.Task[NotificationPage | None] | None = None

    @property
    def refresh_in_flight(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    async def fetch_page(self, page: int, limit: int) -> NotificationPage | None:
        """Fetch ``page`` and merge it; ``page == 1`` is handled as a refresh."""

        self._validate(page, limit)
        if page == 1:
            return await self.refresh(limit)
        return await self._fetch_and_merge(page, limit)

    async def load_more(self) -> NotificationPage | None:
        pagination = self._state.pagination
        if not pagination.can_load_more:
            return None
        return await self.fetch_page(pagination.page + 1, pagination.limit)

    async def refresh(self, limit: int | None = None) -> NotificationPage | None:
        """Fetch page 1, joining the request already in flight if there is one."""

        if limit is None:
            limit = self._state.pagination.limit
        self._validate(1, limit)
        if self._refresh_task is None or self._refresh_task.done():
            task = asyncio.ensure_future(self._fetch_and_merge(1, limit))
            task.add_done_callback(self._clear_refresh_task)
            self._refresh_task = task
        else:
            logger.debug("Joining the page 1 refresh already in flight")
        return await asyncio.shield(self._refresh_task)

    def _clear_refresh_task(self, task: asyncio.Task) -> None:
        if self._refresh_task is task:
            self._refresh_task = None

    def _validate(self, page: int, limit: int) -> None:
        if page < 1:
            raise ValueError("page must be greater than or equal to 1")
        if limit < 1 or limit > self._max_page_limit:
            raise ValueError(f"limit must be between 1 and {self._max_page_limit}")

    async def _fetch_and_merge(self, page: int, limit: int) -> NotificationPage | None:
        state = self._state
        state.begin_fetch()
        state.notify()
        try:
            result = await self._gateway.fetch_page(page, limit)
        except RemoteStoreError as exc:
            if not state.alive:
                return None
            logger.warning("Fetching notifications page %s failed: %s", page, exc)
            state.error = str(exc)
            return None
        finally:
            state.end_fetch()
            state.notify()

        if not state.alive:
            logger.debug("Discarding notifications page %s received after close", page)
            return None

        state.set_items(
            merge_notifications(
                state.items,
                result.items,
                prepend_new=page == 1,
                locally_read=state.locally_read_ids,
                excluded=state.excluded_ids,
            )
        )
        state.confirmed_reads -= {item.id for item in result.items if item.is_read}
        # A new page size restarts the offsets at the requested page.
        if limit != state.pagination.limit:
            current_page = page
        else:
            current_page = max(state.pagination.page, page)
        state.pagination = PaginationState(
            page=current_page,
            limit=limit,
            total=result.total,
        )
        state.error = None
        state.notify()
        return result


__all__ = ["NotificationFetcher", "merge_notifications"]
