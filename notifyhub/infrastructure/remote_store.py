"""HTTP client for the remote notification store."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import fields
from typing import Any

import httpx

from notifyhub.config import Settings, get_settings
from notifyhub.domain.entities import (
    EngagementContext,
    InteractionHistory,
    Notification,
    NotificationPage,
    NotificationPreferences,
)
from notifyhub.domain.errors import RemoteStoreError
from notifyhub.utils import now_in_app_timezone, parse_timestamp

logger = logging.getLogger(__name__)

_PREFERENCE_FIELDS = frozenset(item.name for item in fields(NotificationPreferences))


class NotificationStoreClient:
    """Talk to the notification endpoints of the remote store."""

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "NotificationStoreClient":
        settings = settings or get_settings()
        return cls(
            settings.remote_api_url,
            token=settings.remote_api_token,
            timeout=settings.request_timeout_seconds,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_page(self, page: int, limit: int) -> NotificationPage:
        """Return the ``page`` of notifications holding at most ``limit`` items."""

        body = await self._request(
            "GET", "/notifications", params={"page": page, "limit": limit}
        )
        return parse_page(body, page=page, limit=limit)

    async def mark_as_read(self, notification_id: str) -> None:
        await self._request("PUT", f"/notifications/{notification_id}/read")

    async def mark_all_as_read(self, notification_ids: Sequence[str]) -> list[str]:
        """Mark every id read and return the ids the store could not update."""

        body = await self._request(
            "PUT", "/notifications/mark-all-read", json={"ids": list(notification_ids)}
        )
        failed = body.get("failed_ids") if isinstance(body, dict) else None
        if not isinstance(failed, list):
            return []
        return [str(item) for item in failed]

    async def delete(self, notification_id: str) -> None:
        await self._request("DELETE", f"/notifications/{notification_id}")

    async def get_preferences(self) -> NotificationPreferences:
        body = await self._request("GET", "/notifications/settings")
        return parse_preferences(body)

    async def update_preferences(self, changes: Mapping[str, Any]) -> None:
        payload = {key: value for key, value in changes.items() if key in _PREFERENCE_FIELDS}
        await self._request("PUT", "/notifications/settings", json=payload)

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise RemoteStoreError(f"Notification store unreachable: {exc}") from exc

        if response.is_error:
            detail = _extract_error_detail(response)
            raise RemoteStoreError(
                f"Notification store answered {response.status_code}: {detail}",
                status_code=response.status_code,
            )

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteStoreError(
                "Notification store returned an invalid JSON body",
                status_code=response.status_code,
            ) from exc


def parse_page(body: Any, *, page: int, limit: int) -> NotificationPage:
    """Build a :class:`NotificationPage` from a list response.

    Both ``{"notifications": [...], "pagination": {...}}`` and
    ``{"items": [...], "total": n}`` shapes are understood.
    """

    if not isinstance(body, dict):
        raise RemoteStoreError("Notification store returned an unexpected page payload")
    if isinstance(body.get("data"), dict):
        return parse_page(body["data"], page=page, limit=limit)

    raw_items = body.get("notifications")
    if raw_items is None:
        raw_items = body.get("items") or []

    items: list[Notification] = []
    for raw in raw_items:
        notification = parse_notification(raw)
        if notification is not None:
            items.append(notification)

    pagination = body.get("pagination") if isinstance(body.get("pagination"), dict) else {}
    total = _coerce_int(pagination.get("total", body.get("total")), default=len(items))

    has_more = body.get("has_more", body.get("hasMore"))
    if not isinstance(has_more, bool):
        has_more = page * limit < total

    return NotificationPage(items=tuple(items), total=total, has_more=has_more)


def parse_notification(raw: Any) -> Notification | None:
    """Translate one store payload into a :class:`Notification`.

    Invalid entries are logged and skipped so a single malformed record never
    breaks a whole page.
    """

    if not isinstance(raw, dict) or raw.get("id") in (None, ""):
        logger.warning("Skipping notification payload without id: %r", raw)
        return None

    notification_id = str(raw["id"])
    action_url = raw.get("action_url") or None
    action_text = raw.get("action_text") or None
    if (action_url is None) != (action_text is None):
        logger.warning(
            "Notification %s carries an incomplete action pair; dropping it",
            notification_id,
        )
        action_url = action_text = None

    created_at = parse_timestamp(raw.get("created_at"))
    if created_at is None:
        logger.warning("Notification %s has no valid created_at", notification_id)
        created_at = now_in_app_timezone()

    metadata = raw.get("metadata")
    try:
        return Notification(
            id=notification_id,
            type=str(raw.get("type") or "info"),
            title=str(raw.get("title") or ""),
            message=str(raw.get("message") or ""),
            created_at=created_at,
            is_read=bool(raw.get("is_read", False)),
            priority_score=_clamp_score(raw.get("priority_score")),
            action_url=action_url,
            action_text=action_text,
            read_at=parse_timestamp(raw.get("read_at")),
            engagement_context=_parse_engagement_context(raw.get("engagement_context")),
            optimal_timing=bool(raw.get("optimal_timing")),
            metadata=dict(metadata) if isinstance(metadata, dict) else {},
        )
    except ValueError as exc:
        logger.warning("Skipping invalid notification %s: %s", notification_id, exc)
        return None


def parse_preferences(body: Any) -> NotificationPreferences:
    if isinstance(body, dict) and isinstance(body.get("data"), dict):
        body = body["data"]
    if not isinstance(body, dict):
        raise RemoteStoreError("Notification store returned unexpected preferences")
    values = {key: body[key] for key in _PREFERENCE_FIELDS if body.get(key) is not None}
    return NotificationPreferences(**values)


def _parse_engagement_context(raw: Any) -> EngagementContext | None:
    if not isinstance(raw, dict) or not raw.get("user_activity_level"):
        return None

    history = raw.get("interaction_history")
    interaction_history = None
    if isinstance(history, dict):
        interaction_history = InteractionHistory(
            job_views_today=_coerce_int(history.get("job_views_today"), default=0),
            applications_today=_coerce_int(history.get("applications_today"), default=0),
            last_active=parse_timestamp(history.get("last_active")),
        )

    preferred_times = raw.get("preferred_times") or []
    return EngagementContext(
        user_activity_level=str(raw["user_activity_level"]),
        preferred_times=tuple(str(item) for item in preferred_times),
        interaction_history=interaction_history,
    )


def _clamp_score(value: Any) -> float:
    try:
        score = float(value)
    except (TypeError, ValueError):
        return 0.0
    if score != score:  # NaN
        return 0.0
    return min(max(score, 0.0), 1.0)


def _coerce_int(value: Any, *, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _extract_error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase
    if isinstance(body, dict):
        for key in ("detail", "error", "message"):
            if body.get(key):
                return str(body[key])
    return response.reason_phrase


__all__ = [
    "NotificationStoreClient",
    "RemoteStoreError",
    "parse_notification",
    "parse_page",
    "parse_preferences",
]
