"""Utility helpers for reusable functionality."""

from .datetime import (
    configure_app_timezone,
    ensure_app_timezone,
    format_time_ago,
    get_app_timezone,
    now_in_app_timezone,
    parse_timestamp,
    reset_app_timezone,
)

__all__ = [
    "configure_app_timezone",
    "ensure_app_timezone",
    "format_time_ago",
    "get_app_timezone",
    "now_in_app_timezone",
    "parse_timestamp",
    "reset_app_timezone",
]
