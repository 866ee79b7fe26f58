"""Optimistic mark-read and delete operations with rollback on failure.

Every mutation runs in three phases: snapshot the prior state, apply the
optimistic change, then commit or roll back once the remote store answered.
Remote failures are reported through :class:`MutationResult` values.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from dataclasses import replace

from notifyhub.application.state import NotificationState
from notifyhub.domain.entities import BatchMutationResult, MutationResult
from notifyhub.domain.errors import RemoteStoreError
from notifyhub.domain.gateway import NotificationGateway
from notifyhub.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

NOT_FOUND_ERROR = "Notification not found"


class NotificationMutator:
    """Mutation layer of the notification center."""

    def __init__(self, state: NotificationState, gateway: NotificationGateway) -> None:
        self._state = state
        self._gateway = gateway
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, notification_id: str) -> asyncio.Lock:
        lock = self._locks.get(notification_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[notification_id] = lock
        return lock

    async def mark_as_read(self, notification_id: str) -> MutationResult:
        """Mark ``notification_id`` read; a second call on a read record is a no-op."""

        state = self._state
        async with self._lock_for(notification_id):
            prior = state.get(notification_id)
            if prior is None:
                return MutationResult.failed(notification_id, NOT_FOUND_ERROR)
            if prior.is_read:
                return MutationResult.ok(notification_id)

            state.set_read(notification_id, True, read_at=now_in_app_timezone())
            state.pending_reads.add(notification_id)
            state.notify()

            try:
                await self._gateway.mark_as_read(notification_id)
            except RemoteStoreError as exc:
                state.pending_reads.discard(notification_id)
                logger.warning(
                    "Marking notification %s as read failed: %s", notification_id, exc
                )
                if state.alive:
                    state.set_read(notification_id, prior.is_read, read_at=prior.read_at)
                    state.notify()
                return MutationResult.failed(notification_id, str(exc))

            state.pending_reads.discard(notification_id)
            state.confirmed_reads.add(notification_id)
            return MutationResult.ok(notification_id)

    async def mark_all_as_read(self) -> BatchMutationResult:
        """Mark every unread record read, rolling back only the rejected ids."""

        state = self._state
        snapshot = {item.id: item for item in state.items if not item.is_read}
        if not snapshot:
            return BatchMutationResult()

        read_at = now_in_app_timezone()
        for notification_id in snapshot:
            state.set_read(notification_id, True, read_at=read_at)
            state.pending_reads.add(notification_id)
        state.notify()

        error: str | None = None
        ids = list(snapshot)
        try:
            failed = set(await self._gateway.mark_all_as_read(ids)) & snapshot.keys()
        except RemoteStoreError as exc:
            logger.warning("Marking all notifications as read failed: %s", exc)
            failed = set(ids)
            error = str(exc)
        else:
            if failed:
                error = f"{len(failed)} notification(s) could not be marked as read"
                logger.warning("Mark all as read rejected ids: %s", sorted(failed))

        succeeded: list[str] = []
        rejected: list[str] = []
        for notification_id in ids:
            state.pending_reads.discard(notification_id)
            if notification_id in failed:
                rejected.append(notification_id)
                prior = snapshot[notification_id]
                if state.alive:
                    state.set_read(notification_id, prior.is_read, read_at=prior.read_at)
            else:
                succeeded.append(notification_id)
                state.confirmed_reads.add(notification_id)
        state.notify()
        return BatchMutationResult(
            succeeded=tuple(succeeded), failed=tuple(rejected), error=error
        )

    async def delete_notification(self, notification_id: str) -> MutationResult:
        """Remove ``notification_id`` locally and remotely, restoring it on failure."""

        state = self._state
        async with self._lock_for(notification_id):
            removed = state.remove(notification_id)
            if removed is None:
                return MutationResult.failed(notification_id, NOT_FOUND_ERROR)
            original_index, record = removed
            state.pending_deletes.add(notification_id)
            state.notify()

            try:
                await self._gateway.delete(notification_id)
            except RemoteStoreError as exc:
                state.pending_deletes.discard(notification_id)
                logger.warning("Deleting notification %s failed: %s", notification_id, exc)
                if state.alive:
                    state.restore(record, original_index=original_index)
                    state.notify()
                return MutationResult.failed(notification_id, str(exc))

            state.pending_deletes.discard(notification_id)
            state.deleted_ids.add(notification_id)
            state.pending_reads.discard(notification_id)
            state.confirmed_reads.discard(notification_id)
            state.pagination = replace(
                state.pagination, total=max(0, state.pagination.total - 1)
            )
            state.notify()
            return MutationResult.ok(notification_id)


__all__ = ["NOT_FOUND_ERROR", "NotificationMutator"]
