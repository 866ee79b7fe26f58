"""Helpers for working with timezone-aware datetimes."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from notifyhub.config import get_settings

_DEFAULT_TIMEZONE: Final[str] = "UTC"
_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)

_configured_timezone: tzinfo | None = None


def configure_app_timezone(tz_name: str | None) -> tzinfo:
    """Pin the application timezone instead of reading it from the environment.

    Used by the factories that receive an explicit ``Settings`` instance.
    """

    global _configured_timezone
    _configured_timezone = _resolve_timezone((tz_name or "").strip() or _DEFAULT_TIMEZONE)
    get_app_timezone.cache_clear()
    return _configured_timezone


def reset_app_timezone() -> None:
    """Forget a pinned timezone so the settings are read again."""

    global _configured_timezone
    _configured_timezone = None
    get_app_timezone.cache_clear()


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the configured application timezone.

    A timezone pinned with :func:`configure_app_timezone` wins. Otherwise it is
    resolved using the ``APP_TIMEZONE`` environment variable (via the
    ``Settings`` model). Fixed offsets such as ``UTC-05:00`` are accepted too.
    Unknown names fall back to UTC.
    """

    if _configured_timezone is not None:
        return _configured_timezone
    settings = get_settings()
    tz_name = (settings.app_timezone or "").strip() or _DEFAULT_TIMEZONE
    return _resolve_timezone(tz_name)


def now_in_app_timezone() -> datetime:
    """Return the current time localized to the configured timezone."""

    return datetime.now(tz=get_app_timezone())


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Normalize ``value`` so it is expressed in the configured timezone."""

    if value is None:
        return None

    tz = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO 8601 value received from the remote store.

    ``datetime`` instances are passed through, strings ending in ``Z`` are read
    as UTC. Anything that cannot be parsed yields ``None``.
    """

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_app_timezone(value)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return ensure_app_timezone(parsed)


def format_time_ago(value: datetime, *, now: datetime | None = None) -> str:
    """Return the short relative label rendered next to a notification."""

    reference = ensure_app_timezone(now) if now is not None else now_in_app_timezone()
    localized = ensure_app_timezone(value)
    minutes = int((reference - localized).total_seconds() // 60)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if minutes < 1440:
        return f"{minutes // 60}h ago"
    return localized.strftime("%b %d, %Y")


def _resolve_timezone(tz_name: str) -> tzinfo:
    """Resolve ``tz_name`` into a ``timezone`` instance."""

    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        match = _OFFSET_PATTERN.match(tz_name)
        if match:
            sign = -1 if match.group("sign") == "-" else 1
            hours = int(match.group("hours"))
            minutes = int(match.group("minutes") or 0)
            offset = timedelta(hours=hours, minutes=minutes)
            return timezone(sign * offset)
    return timezone.utc
