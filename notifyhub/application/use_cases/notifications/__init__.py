"""Use cases of the notification core."""

from .fetch_notifications import NotificationFetcher, merge_notifications
from .mutations import NOT_FOUND_ERROR, NotificationMutator
from .polling import NotificationPoller
from .priority import (
    TYPE_FILTER_ALL,
    NotificationFilter,
    NotificationSort,
    filter_notifications,
    has_high_priority_notification,
    priority_bucket,
    project_notifications,
    search_notifications,
    sort_notifications,
    unread_count,
)
from .views import (
    DropdownView,
    HistoryView,
    NotificationItemView,
    PanelView,
    build_dropdown_view,
    build_history_view,
    build_panel_view,
    engagement_insights,
    render_item,
    type_color,
    unread_badge,
)

__all__ = [
    "DropdownView",
    "HistoryView",
    "NOT_FOUND_ERROR",
    "NotificationFetcher",
    "NotificationFilter",
    "NotificationItemView",
    "NotificationMutator",
    "NotificationPoller",
    "NotificationSort",
    "PanelView",
    "TYPE_FILTER_ALL",
    "build_dropdown_view",
    "build_history_view",
    "build_panel_view",
    "engagement_insights",
    "filter_notifications",
    "has_high_priority_notification",
    "merge_notifications",
    "priority_bucket",
    "project_notifications",
    "render_item",
    "search_notifications",
    "sort_notifications",
    "type_color",
    "unread_badge",
    "unread_count",
]
