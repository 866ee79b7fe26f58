"""Explicit outcomes of optimistic notification mutations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MutationResult:
    """Outcome of a mutation acting on a single notification."""

    notification_id: str
    success: bool
    error: str | None = None

    @classmethod
    def ok(cls, notification_id: str) -> "MutationResult":
        return cls(notification_id=notification_id, success=True)

    @classmethod
    def failed(cls, notification_id: str, error: str) -> "MutationResult":
        return cls(notification_id=notification_id, success=False, error=error)


@dataclass(frozen=True)
class BatchMutationResult:
    """Outcome of a batch mutation resolved independently for each id."""

    succeeded: tuple[str, ...] = ()
    failed: tuple[str, ...] = ()
    error: str | None = None

    @property
    def success(self) -> bool:
        return not self.failed


__all__ = ["BatchMutationResult", "MutationResult"]
