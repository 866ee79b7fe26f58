"""Shared fixtures: an in-memory remote store and notification factories."""

from __future__ import annotations

import asyncio
import os
import sys
from collections.abc import Mapping, Sequence
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("REMOTE_API_URL", "http://store.test/api")
os.environ.setdefault("APP_TIMEZONE", "UTC")

from notifyhub.config import reset_settings_cache  # noqa: E402
from notifyhub.domain.entities import (  # noqa: E402
    DEFAULT_PREFERENCES,
    Notification,
    NotificationPage,
    NotificationPreferences,
)
from notifyhub.domain.errors import RemoteStoreError  # noqa: E402
from notifyhub.utils import reset_app_timezone  # noqa: E402

reset_settings_cache()
reset_app_timezone()

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeNotificationStore:
    """In-memory stand-in for the remote notification store.

    ``*_gate`` attributes hold an :class:`asyncio.Event` that the matching call
    waits on, which lets tests keep a request in flight.
    """

    def __init__(self, notifications: Sequence[Notification] = ()) -> None:
        self.notifications: list[Notification] = list(notifications)
        self.preferences: NotificationPreferences = DEFAULT_PREFERENCES
        self.reflect_reads = True
        self.fail_fetch = False
        self.fail_preferences = False
        self.fail_mark_all = False
        self.fail_read_ids: set[str] = set()
        self.fail_delete_ids: set[str] = set()
        self.reject_ids: set[str] = set()
        self.fetch_gate: asyncio.Event | None = None
        self.read_gate: asyncio.Event | None = None
        self.delete_gate: asyncio.Event | None = None
        self.fetch_calls: list[tuple[int, int]] = []
        self.read_calls: list[str] = []
        self.mark_all_calls: list[list[str]] = []
        self.delete_calls: list[str] = []

    def get(self, notification_id: str) -> Notification | None:
        for notification in self.notifications:
            if notification.id == notification_id:
                return notification
        return None

    def publish(self, notification: Notification) -> None:
        self.notifications.insert(0, notification)

    def _set_read(self, notification_id: str) -> None:
        for index, notification in enumerate(self.notifications):
            if notification.id == notification_id:
                self.notifications[index] = replace(notification, is_read=True)

    async def fetch_page(self, page: int, limit: int) -> NotificationPage:
        self.fetch_calls.append((page, limit))
        if self.fetch_gate is not None:
            await self.fetch_gate.wait()
        if self.fail_fetch:
            raise RemoteStoreError("store unavailable", status_code=503)
        start = (page - 1) * limit
        items = tuple(self.notifications[start : start + limit])
        total = len(self.notifications)
        return NotificationPage(items=items, total=total, has_more=page * limit < total)

    async def mark_as_read(self, notification_id: str) -> None:
        self.read_calls.append(notification_id)
        if self.read_gate is not None:
            await self.read_gate.wait()
        if notification_id in self.fail_read_ids:
            raise RemoteStoreError("mark read rejected", status_code=500)
        if self.reflect_reads:
            self._set_read(notification_id)

    async def mark_all_as_read(self, notification_ids: Sequence[str]) -> list[str]:
        self.mark_all_calls.append(list(notification_ids))
        if self.fail_mark_all:
            raise RemoteStoreError("mark all rejected", status_code=500)
        for notification_id in notification_ids:
            if notification_id not in self.reject_ids and self.reflect_reads:
                self._set_read(notification_id)
        return [item for item in notification_ids if item in self.reject_ids]

    async def delete(self, notification_id: str) -> None:
        self.delete_calls.append(notification_id)
        if self.delete_gate is not None:
            await self.delete_gate.wait()
        if notification_id in self.fail_delete_ids:
            raise RemoteStoreError("delete rejected", status_code=500)
        self.notifications = [
            item for item in self.notifications if item.id != notification_id
        ]

    async def get_preferences(self) -> NotificationPreferences:
        if self.fail_preferences:
            raise RemoteStoreError("preferences unavailable", status_code=503)
        return self.preferences

    async def update_preferences(self, changes: Mapping[str, Any]) -> None:
        if self.fail_preferences:
            raise RemoteStoreError("preferences rejected", status_code=500)
        self.preferences = replace(self.preferences, **changes)


def build_notification(
    notification_id: str,
    *,
    minutes_ago: int = 0,
    priority_score: float = 0.5,
    is_read: bool = False,
    type: str = "info",
    title: str | None = None,
    message: str | None = None,
    **extra: Any,
) -> Notification:
    return Notification(
        id=notification_id,
        type=type,
        title=title if title is not None else f"Notification {notification_id}",
        message=message if message is not None else f"Body of {notification_id}",
        created_at=BASE_TIME - timedelta(minutes=minutes_ago),
        is_read=is_read,
        priority_score=priority_score,
        **extra,
    )


@pytest.fixture(autouse=True)
def _unpinned_timezone():
    """Drop any timezone pinned by an application factory during a test."""

    yield
    reset_app_timezone()


@pytest.fixture()
def make_notification():
    return build_notification


@pytest.fixture()
def store() -> FakeNotificationStore:
    """Store holding five notifications, newest first."""

    return FakeNotificationStore(
        [
            build_notification("n5", minutes_ago=1, priority_score=0.9),
            build_notification("n4", minutes_ago=2, priority_score=0.2, is_read=True),
            build_notification("n3", minutes_ago=3, priority_score=0.65, type="warning"),
            build_notification("n2", minutes_ago=4, priority_score=0.4, type="job_match"),
            build_notification("n1", minutes_ago=5, priority_score=0.75, type="payment"),
        ]
    )


@pytest.fixture()
def empty_store() -> FakeNotificationStore:
    return FakeNotificationStore()
