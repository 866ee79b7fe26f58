"""Facade sharing one notification collection between every view."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import fields, replace
from typing import Any

from notifyhub.config import Settings, get_settings
from notifyhub.domain.entities import (
    DEFAULT_PREFERENCES,
    BatchMutationResult,
    MutationResult,
    Notification,
    NotificationPage,
    NotificationPreferences,
    PaginationState,
)
from notifyhub.domain.errors import RemoteStoreError
from notifyhub.domain.gateway import NotificationGateway
from notifyhub.utils import configure_app_timezone

from .state import NotificationState, StateListener
from .use_cases.notifications import (
    TYPE_FILTER_ALL,
    DropdownView,
    HistoryView,
    NotificationFetcher,
    NotificationFilter,
    NotificationMutator,
    NotificationPoller,
    NotificationSort,
    PanelView,
    build_dropdown_view,
    build_history_view,
    build_panel_view,
    has_high_priority_notification,
    unread_count,
)

logger = logging.getLogger(__name__)

_PREFERENCE_FIELDS = frozenset(item.name for item in fields(NotificationPreferences))


class NotificationCenter:
    """Own the notification state and expose its read models and actions.

    The dropdown, the slide-in panel and the history page all read from the
    same center, so a mutation made from one surface shows up in the others.
    """

    def __init__(
        self,
        gateway: NotificationGateway,
        *,
        page_limit: int = 20,
        max_page_limit: int = 100,
        poll_interval: float = 30.0,
        dropdown_limit: int = 10,
    ) -> None:
        self._gateway = gateway
        self._state = NotificationState(page_limit=page_limit)
        self._fetcher = NotificationFetcher(
            self._state, gateway, max_page_limit=max_page_limit
        )
        self._mutator = NotificationMutator(self._state, gateway)
        self._poller = NotificationPoller(self.refresh, interval=poll_interval)
        self._dropdown_limit = dropdown_limit
        self._preferences: NotificationPreferences | None = None

    @classmethod
    def from_settings(
        cls, gateway: NotificationGateway, settings: Settings | None = None
    ) -> "NotificationCenter":
        settings = settings or get_settings()
        configure_app_timezone(settings.app_timezone)
        return cls(
            gateway,
            page_limit=settings.page_limit,
            max_page_limit=settings.max_page_limit,
            poll_interval=settings.poll_interval_seconds,
            dropdown_limit=settings.dropdown_limit,
        )

    async def __aenter__(self) -> "NotificationCenter":
        self.start_polling()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    # Read models

    @property
    def notifications(self) -> tuple[Notification, ...]:
        return self._state.items

    @property
    def unread_count(self) -> int:
        return unread_count(self._state.items)

    @property
    def has_high_priority_notification(self) -> bool:
        return has_high_priority_notification(self._state.items)

    @property
    def pagination(self) -> PaginationState:
        return self._state.pagination

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def polling(self) -> bool:
        return self._poller.running

    @property
    def closed(self) -> bool:
        return not self._state.alive

    def dropdown(self) -> DropdownView:
        return build_dropdown_view(self._state.items, limit=self._dropdown_limit)

    def panel(
        self,
        notification_filter: NotificationFilter | str = NotificationFilter.ALL,
        sort_by: NotificationSort | str = NotificationSort.PRIORITY,
    ) -> PanelView:
        return build_panel_view(
            self._state.items, notification_filter=notification_filter, sort_by=sort_by
        )

    def history(self, search: str = "", type_filter: str = TYPE_FILTER_ALL) -> HistoryView:
        return build_history_view(
            self._state.items,
            self._state.pagination,
            search=search,
            type_filter=type_filter,
        )

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        return self._state.subscribe(listener)

    # Fetching

    async def fetch_notifications(
        self, page: int = 1, limit: int | None = None
    ) -> NotificationPage | None:
        if limit is None:
            limit = self._state.pagination.limit
        return await self._fetcher.fetch_page(page, limit)

    async def load_more(self) -> NotificationPage | None:
        return await self._fetcher.load_more()

    async def refresh(self) -> NotificationPage | None:
        """Out-of-band fetch of page 1; the polling phase is left untouched."""

        return await self._fetcher.refresh()

    # Mutations

    async def mark_as_read(self, notification_id: str) -> MutationResult:
        return await self._mutator.mark_as_read(notification_id)

    async def mark_all_as_read(self) -> BatchMutationResult:
        return await self._mutator.mark_all_as_read()

    async def delete_notification(self, notification_id: str) -> MutationResult:
        return await self._mutator.delete_notification(notification_id)

    # Preferences

    async def get_preferences(self) -> NotificationPreferences:
        """Return the stored preferences, falling back to the last known ones."""

        try:
            self._preferences = await self._gateway.get_preferences()
        except RemoteStoreError as exc:
            logger.warning("Loading notification preferences failed: %s", exc)
            return self._preferences or DEFAULT_PREFERENCES
        return self._preferences

    async def update_preferences(self, changes: Mapping[str, Any]) -> NotificationPreferences:
        unknown = set(changes) - _PREFERENCE_FIELDS
        if unknown:
            raise ValueError(f"Unknown preference fields: {', '.join(sorted(unknown))}")
        await self._gateway.update_preferences(changes)
        self._preferences = replace(self._preferences or DEFAULT_PREFERENCES, **changes)
        return self._preferences

    # Lifecycle

    def start_polling(self) -> None:
        if self.closed:
            raise RuntimeError("Notification center is closed")
        self._poller.start()

    def stop_polling(self) -> None:
        self._poller.stop()

    def close(self) -> None:
        """Stop polling and ignore any response that arrives afterwards."""

        self._poller.stop()
        self._state.alive = False


__all__ = ["NotificationCenter"]
