"""Domain entities exposed by the application."""

from .mutation_result import BatchMutationResult, MutationResult
from .notification import (
    HIGH_PRIORITY_THRESHOLD,
    NOTIFICATION_TYPE_APPLICATION_UPDATE,
    NOTIFICATION_TYPE_DEADLINE,
    NOTIFICATION_TYPE_DIGEST,
    NOTIFICATION_TYPE_ERROR,
    NOTIFICATION_TYPE_INFO,
    NOTIFICATION_TYPE_JOB_MATCH,
    NOTIFICATION_TYPE_PAYMENT,
    NOTIFICATION_TYPE_SUCCESS,
    NOTIFICATION_TYPE_WARNING,
    NOTIFICATION_TYPES,
    EngagementContext,
    InteractionHistory,
    Notification,
    PriorityBucket,
    priority_bucket_for,
)
from .pagination import NotificationPage, PaginationState
from .preferences import DEFAULT_PREFERENCES, NotificationPreferences

__all__ = [
    "BatchMutationResult",
    "DEFAULT_PREFERENCES",
    "EngagementContext",
    "HIGH_PRIORITY_THRESHOLD",
    "InteractionHistory",
    "MutationResult",
    "Notification",
    "NotificationPage",
    "NotificationPreferences",
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
    "PaginationState",
    "PriorityBucket",
    "priority_bucket_for",
]
