"""Errors raised across the notification core."""

from __future__ import annotations


class RemoteStoreError(Exception):
    """Raised when the remote store rejects a request or cannot be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


__all__ = ["RemoteStoreError"]
