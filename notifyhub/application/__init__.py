"""Application layer: shared notification state and its use cases."""

from .notification_center import NotificationCenter
from .state import NotificationState

__all__ = ["NotificationCenter", "NotificationState"]
