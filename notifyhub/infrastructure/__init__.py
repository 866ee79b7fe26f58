"""Infrastructure adapters: remote store client and websocket delivery."""

from .remote_store import NotificationStoreClient, RemoteStoreError

__all__ = ["NotificationStoreClient", "RemoteStoreError"]
