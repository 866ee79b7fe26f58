"""Read-only projections rendered by the dropdown, the panel and the history page."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from notifyhub.domain.entities import (
    NOTIFICATION_TYPE_ERROR,
    NOTIFICATION_TYPE_SUCCESS,
    NOTIFICATION_TYPE_WARNING,
    NOTIFICATION_TYPES,
    Notification,
    PaginationState,
)
from notifyhub.utils import format_time_ago

from .priority import (
    TYPE_FILTER_ALL,
    NotificationFilter,
    NotificationSort,
    has_high_priority_notification,
    project_notifications,
    search_notifications,
    unread_count,
)

HISTORY_URL = "/notifications"
PEAK_ACTIVITY_LEVEL = "high"
OPTIMAL_TIMING_TEXT = "Optimally timed for you"
HISTORY_TYPE_OPTIONS: tuple[str, ...] = (TYPE_FILTER_ALL, *NOTIFICATION_TYPES)

_TYPE_COLORS = {
    NOTIFICATION_TYPE_SUCCESS: "green",
    NOTIFICATION_TYPE_WARNING: "yellow",
    NOTIFICATION_TYPE_ERROR: "red",
}

_EMPTY_PANEL_MESSAGES = {
    NotificationFilter.ALL: "No notifications yet",
    NotificationFilter.UNREAD: "No unread notifications",
    NotificationFilter.HIGH_PRIORITY: "No high priority notifications",
}


@dataclass(frozen=True)
class NotificationItemView:
    """One rendered row; shared by every surface."""

    notification: Notification
    time_ago: str
    color: str
    priority_badge: str | None
    insights: tuple[str, ...] = ()


@dataclass(frozen=True)
class DropdownView:
    items: tuple[NotificationItemView, ...]
    unread_count: int
    badge: str
    has_high_priority: bool
    history_url: str = HISTORY_URL


@dataclass(frozen=True)
class PanelView:
    items: tuple[NotificationItemView, ...]
    unread_count: int
    has_high_priority: bool
    active_filter: NotificationFilter
    sort_by: NotificationSort
    empty_message: str | None


@dataclass(frozen=True)
class HistoryView:
    items: tuple[NotificationItemView, ...]
    unread_count: int
    search: str
    type_filter: str
    pagination: PaginationState
    summary: str
    type_options: tuple[str, ...] = HISTORY_TYPE_OPTIONS


def unread_badge(count: int) -> str:
    """Label of the unread counter; empty when there is nothing to show."""

    if count <= 0:
        return ""
    if count > 9:
        return "9+"
    return str(count)


def type_color(notification_type: str) -> str:
    return _TYPE_COLORS.get(notification_type, "blue")


def engagement_insights(notification: Notification) -> tuple[str, ...]:
    """Explanatory lines derived from the display-only engagement hints."""

    insights: list[str] = []
    context = notification.engagement_context
    if (
        context is not None
        and context.user_activity_level == PEAK_ACTIVITY_LEVEL
        and context.preferred_times
    ):
        insights.append(
            f"Sent during your peak activity time ({context.preferred_times[0]})"
        )
    if notification.optimal_timing:
        insights.append(OPTIMAL_TIMING_TEXT)
    return tuple(insights)


def render_item(
    notification: Notification, *, now: datetime | None = None, with_insights: bool = False
) -> NotificationItemView:
    bucket = notification.priority_bucket
    return NotificationItemView(
        notification=notification,
        time_ago=format_time_ago(notification.created_at, now=now),
        color=type_color(notification.type),
        priority_badge=bucket.value if bucket is not None else None,
        insights=engagement_insights(notification) if with_insights else (),
    )


def build_dropdown_view(
    notifications: Sequence[Notification],
    *,
    limit: int = 10,
    now: datetime | None = None,
) -> DropdownView:
    """Most recent records in collection order plus the unread badge."""

    count = unread_count(notifications)
    return DropdownView(
        items=tuple(render_item(item, now=now) for item in notifications[:limit]),
        unread_count=count,
        badge=unread_badge(count),
        has_high_priority=has_high_priority_notification(notifications),
    )


def build_panel_view(
    notifications: Sequence[Notification],
    *,
    notification_filter: NotificationFilter | str = NotificationFilter.ALL,
    sort_by: NotificationSort | str = NotificationSort.PRIORITY,
    now: datetime | None = None,
) -> PanelView:
    active_filter = NotificationFilter(notification_filter)
    active_sort = NotificationSort(sort_by)
    projected = project_notifications(
        notifications, notification_filter=active_filter, sort_by=active_sort
    )
    return PanelView(
        items=tuple(render_item(item, now=now, with_insights=True) for item in projected),
        unread_count=unread_count(notifications),
        has_high_priority=has_high_priority_notification(notifications),
        active_filter=active_filter,
        sort_by=active_sort,
        empty_message=None if projected else _EMPTY_PANEL_MESSAGES[active_filter],
    )


def build_history_view(
    notifications: Sequence[Notification],
    pagination: PaginationState,
    *,
    search: str = "",
    type_filter: str = TYPE_FILTER_ALL,
    now: datetime | None = None,
) -> HistoryView:
    """Search the pages loaded so far; loading more pages is up to the caller."""

    matches = search_notifications(notifications, search, type_filter)
    return HistoryView(
        items=tuple(render_item(item, now=now) for item in matches),
        unread_count=unread_count(notifications),
        search=search,
        type_filter=type_filter or TYPE_FILTER_ALL,
        pagination=pagination,
        summary=f"Showing {len(matches)} of {pagination.total} notifications",
    )


__all__ = [
    "DropdownView",
    "HistoryView",
    "NotificationItemView",
    "PanelView",
    "build_dropdown_view",
    "build_history_view",
    "build_panel_view",
    "engagement_insights",
    "render_item",
    "type_color",
    "unread_badge",
]
