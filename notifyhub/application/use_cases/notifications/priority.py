"""Priority scoring, filtering and sorting of notification projections."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import Enum

from notifyhub.domain.entities import Notification, PriorityBucket, priority_bucket_for

TYPE_FILTER_ALL = "all"


class NotificationFilter(str, Enum):
    ALL = "all"
    UNREAD = "unread"
    HIGH_PRIORITY = "high_priority"


class NotificationSort(str, Enum):
    PRIORITY = "priority"
    TIME = "time"


def priority_bucket(score: float) -> PriorityBucket | None:
    """Return the badge shown for ``score``; ``None`` means no badge."""

    return priority_bucket_for(score)


def unread_count(notifications: Iterable[Notification]) -> int:
    """Count unread records over the whole collection, whatever the view."""

    return sum(1 for notification in notifications if not notification.is_read)


def has_high_priority_notification(notifications: Iterable[Notification]) -> bool:
    return any(
        not notification.is_read and notification.is_high_priority
        for notification in notifications
    )


def filter_notifications(
    notifications: Iterable[Notification],
    notification_filter: NotificationFilter | str = NotificationFilter.ALL,
) -> list[Notification]:
    active = NotificationFilter(notification_filter)
    if active is NotificationFilter.UNREAD:
        return [notification for notification in notifications if not notification.is_read]
    if active is NotificationFilter.HIGH_PRIORITY:
        return [notification for notification in notifications if notification.is_high_priority]
    return list(notifications)


def sort_notifications(
    notifications: Iterable[Notification],
    sort_by: NotificationSort | str = NotificationSort.PRIORITY,
) -> list[Notification]:
    """Return a new list ordered by ``sort_by``; the input is left untouched."""

    ordered = list(notifications)
    if NotificationSort(sort_by) is NotificationSort.PRIORITY:
        ordered.sort(
            key=lambda notification: (notification.priority_score, notification.created_at),
            reverse=True,
        )
    else:
        ordered.sort(key=lambda notification: notification.created_at, reverse=True)
    return ordered


def project_notifications(
    notifications: Sequence[Notification],
    *,
    notification_filter: NotificationFilter | str = NotificationFilter.ALL,
    sort_by: NotificationSort | str = NotificationSort.PRIORITY,
) -> list[Notification]:
    """Apply the single active filter and then the selected sort order."""

    return sort_notifications(filter_notifications(notifications, notification_filter), sort_by)


def search_notifications(
    notifications: Iterable[Notification],
    query: str = "",
    notification_type: str = TYPE_FILTER_ALL,
) -> list[Notification]:
    """Free-text search over title and message combined with a type filter.

    Works on the records already loaded; it never triggers a fetch.
    """

    needle = (query or "").strip().lower()
    wanted_type = (notification_type or TYPE_FILTER_ALL).strip()
    matches: list[Notification] = []
    for notification in notifications:
        if needle and needle not in notification.title.lower() and needle not in notification.message.lower():
            continue
        if wanted_type != TYPE_FILTER_ALL and notification.type != wanted_type:
            continue
        matches.append(notification)
    return matches


__all__ = [
    "NotificationFilter",
    "NotificationSort",
    "TYPE_FILTER_ALL",
    "filter_notifications",
    "has_high_priority_notification",
    "priority_bucket",
    "project_notifications",
    "search_notifications",
    "sort_notifications",
    "unread_count",
]
