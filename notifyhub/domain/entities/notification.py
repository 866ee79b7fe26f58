"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

NOTIFICATION_TYPE_JOB_MATCH = "job_match"
NOTIFICATION_TYPE_APPLICATION_UPDATE = "application_update"
NOTIFICATION_TYPE_DEADLINE = "deadline"
NOTIFICATION_TYPE_DIGEST = "digest"
NOTIFICATION_TYPE_PAYMENT = "payment"
NOTIFICATION_TYPE_INFO = "info"
NOTIFICATION_TYPE_SUCCESS = "success"
NOTIFICATION_TYPE_WARNING = "warning"
NOTIFICATION_TYPE_ERROR = "error"

NOTIFICATION_TYPES: tuple[str, ...] = (
    NOTIFICATION_TYPE_JOB_MATCH,
    NOTIFICATION_TYPE_APPLICATION_UPDATE,
    NOTIFICATION_TYPE_DEADLINE,
    NOTIFICATION_TYPE_DIGEST,
    NOTIFICATION_TYPE_PAYMENT,
    NOTIFICATION_TYPE_INFO,
    NOTIFICATION_TYPE_SUCCESS,
    NOTIFICATION_TYPE_WARNING,
    NOTIFICATION_TYPE_ERROR,
)

HIGH_PRIORITY_THRESHOLD = 0.7


class PriorityBucket(str, Enum):
    """Badge label derived from a notification priority score."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


def priority_bucket_for(score: float) -> PriorityBucket | None:
    """Return the badge for ``score`` or ``None`` when no badge is shown."""

    if score > 0.8:
        return PriorityBucket.HIGH
    if score > 0.6:
        return PriorityBucket.MEDIUM
    if score > 0.3:
        return PriorityBucket.LOW
    return None


@dataclass(frozen=True)
class InteractionHistory:
    job_views_today: int = 0
    applications_today: int = 0
    last_active: datetime | None = None


@dataclass(frozen=True)
class EngagementContext:
    """Behavioural hint attached by the store, used only for explanatory text."""

    user_activity_level: str
    preferred_times: tuple[str, ...] = ()
    interaction_history: InteractionHistory | None = None


@dataclass(frozen=True)
class Notification:
    """Information message delivered to the current user.

    Records are immutable. The read flag changes by replacing the record, which
    only the mutation and fetch layers of the notification center do.
    """

    id: str
    type: str
    title: str
    message: str
    created_at: datetime
    is_read: bool = False
    priority_score: float = 0.0
    action_url: str | None = None
    action_text: str | None = None
    read_at: datetime | None = None
    engagement_context: EngagementContext | None = None
    optimal_timing: bool = False
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Notification id is required")
        if not 0.0 <= self.priority_score <= 1.0:
            raise ValueError("priority_score must be within [0, 1]")
        if (self.action_url is None) != (self.action_text is None):
            raise ValueError("action_url and action_text must be provided together")

    @property
    def priority_bucket(self) -> PriorityBucket | None:
        return priority_bucket_for(self.priority_score)

    @property
    def is_high_priority(self) -> bool:
        return self.priority_score > HIGH_PRIORITY_THRESHOLD

    @property
    def has_action(self) -> bool:
        return self.action_url is not None


__all__ = [
    "EngagementContext",
    "HIGH_PRIORITY_THRESHOLD",
    "InteractionHistory",
    "Notification",
    "NOTIFICATION_TYPES",
    "NOTIFICATION_TYPE_APPLICATION_UPDATE",
    "NOTIFICATION_TYPE_DEADLINE",
    "NOTIFICATION_TYPE_DIGEST",
    "NOTIFICATION_TYPE_ERROR",
    "NOTIFICATION_TYPE_INFO",
    "NOTIFICATION_TYPE_JOB_MATCH",
    "NOTIFICATION_TYPE_PAYMENT",
    "NOTIFICATION_TYPE_SUCCESS",
    "NOTIFICATION_TYPE_WARNING",
    "PriorityBucket",
    "priority_bucket_for",
]
