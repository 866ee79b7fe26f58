"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from notifyhub.domain.entities import Notification


class EngagementContextRead(BaseModel):
    user_activity_level: str
    preferred_times: list[str] = Field(default_factory=list)


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the views."""

    id: str
    type: str
    title: str
    message: str
    created_at: datetime
    is_read: bool
    read_at: datetime | None = None
    priority_score: float
    priority_bucket: str | None = None
    action_url: str | None = None
    action_text: str | None = None
    optimal_timing: bool = False
    engagement_context: EngagementContextRead | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationRead":
        """Build the payload shared by the HTTP routes and the websocket."""

        context = notification.engagement_context
        bucket = notification.priority_bucket
        return cls(
            id=notification.id,
            type=notification.type,
            title=notification.title,
            message=notification.message,
            created_at=notification.created_at,
            is_read=notification.is_read,
            read_at=notification.read_at,
            priority_score=notification.priority_score,
            priority_bucket=bucket.value if bucket is not None else None,
            action_url=notification.action_url,
            action_text=notification.action_text,
            optimal_timing=notification.optimal_timing,
            engagement_context=EngagementContextRead(
                user_activity_level=context.user_activity_level,
                preferred_times=list(context.preferred_times),
            )
            if context is not None
            else None,
            metadata=dict(notification.metadata),
        )


class NotificationItemRead(BaseModel):
    """A notification as rendered by one of the surfaces."""

    notification: NotificationRead
    time_ago: str
    color: str
    priority_badge: str | None = None
    insights: list[str] = Field(default_factory=list)


class PaginationRead(BaseModel):
    page: int
    limit: int
    total: int
    can_load_more: bool


class NotificationCollectionRead(BaseModel):
    """Unfiltered collection together with the shared counters."""

    notifications: list[NotificationRead]
    unread_count: int
    has_high_priority_notification: bool
    pagination: PaginationRead
    loading: bool
    error: str | None = None


class DropdownRead(BaseModel):
    items: list[NotificationItemRead]
    unread_count: int
    badge: str
    has_high_priority: bool
    history_url: str


class PanelRead(BaseModel):
    items: list[NotificationItemRead]
    unread_count: int
    has_high_priority: bool
    filter: str
    sort: str
    empty_message: str | None = None


class HistoryRead(BaseModel):
    items: list[NotificationItemRead]
    unread_count: int
    search: str
    type: str
    pagination: PaginationRead
    summary: str
    type_options: list[str] = Field(default_factory=list)


class MutationResultRead(BaseModel):
    notification_id: str
    success: bool


class BatchMutationResultRead(BaseModel):
    succeeded: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    error: str | None = None


class NotificationPreferencesRead(BaseModel):
    email_notifications: bool
    push_notifications: bool
    job_updates: bool
    payment_notifications: bool
    deadline_reminders: bool
    project_updates: bool
    system_notifications: bool
    do_not_disturb_start: str | None = None
    do_not_disturb_end: str | None = None


class NotificationPreferencesUpdate(BaseModel):
    """Partial update of the delivery preferences."""

    email_notifications: bool | None = None
    push_notifications: bool | None = None
    job_updates: bool | None = None
    payment_notifications: bool | None = None
    deadline_reminders: bool | None = None
    project_updates: bool | None = None
    system_notifications: bool | None = None
    do_not_disturb_start: str | None = Field(
        default=None, pattern=r"^([01]\d|2[0-3]):[0-5]\d$"
    )
    do_not_disturb_end: str | None = Field(
        default=None, pattern=r"^([01]\d|2[0-3]):[0-5]\d$"
    )

    def changes(self) -> dict[str, Any]:
        """Return only the fields explicitly sent by the client.

        ``null`` clears the quiet hours but is ignored for the boolean switches.
        """

        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key.startswith("do_not_disturb_")
        }


__all__ = [
    "BatchMutationResultRead",
    "DropdownRead",
    "EngagementContextRead",
    "HistoryRead",
    "MutationResultRead",
    "NotificationCollectionRead",
    "NotificationItemRead",
    "NotificationPreferencesRead",
    "NotificationPreferencesUpdate",
    "NotificationRead",
    "PaginationRead",
    "PanelRead",
]
