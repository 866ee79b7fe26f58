"""Domain entity holding the delivery preferences of the current user."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class NotificationPreferences:
    """Channels and categories the user wants to be notified about."""

    email_notifications: bool = True
    push_notifications: bool = True
    job_updates: bool = True
    payment_notifications: bool = True
    deadline_reminders: bool = True
    project_updates: bool = True
    system_notifications: bool = True
    do_not_disturb_start: str | None = None
    do_not_disturb_end: str | None = None


DEFAULT_PREFERENCES = NotificationPreferences()


__all__ = ["DEFAULT_PREFERENCES", "NotificationPreferences"]
