"""Realtime notification helpers for the infrastructure layer."""

from .manager import ViewConnectionManager
from .publisher import SnapshotPublisher

__all__ = [
    "SnapshotPublisher",
    "ViewConnectionManager",
]
