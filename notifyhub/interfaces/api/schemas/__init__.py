from .notification import (
    BatchMutationResultRead,
    DropdownRead,
    EngagementContextRead,
    HistoryRead,
    MutationResultRead,
    NotificationCollectionRead,
    NotificationItemRead,
    NotificationPreferencesRead,
    NotificationPreferencesUpdate,
    NotificationRead,
    PaginationRead,
    PanelRead,
)

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
