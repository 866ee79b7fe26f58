"""FastAPI dependency utilities."""

from fastapi import HTTPException, Request, WebSocket, status

from notifyhub.application import NotificationCenter
from notifyhub.infrastructure.notifications import SnapshotPublisher, ViewConnectionManager


def get_notification_center(request: Request) -> NotificationCenter:
    """Return the notification center owned by the running application."""

    center: NotificationCenter | None = getattr(
        request.app.state, "notification_center", None
    )
    if center is None or center.closed:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification center is not available",
        )
    return center


def get_websocket_resources(
    websocket: WebSocket,
) -> tuple[NotificationCenter | None, ViewConnectionManager, SnapshotPublisher]:
    state = websocket.app.state
    return (
        getattr(state, "notification_center", None),
        state.connection_manager,
        state.snapshot_publisher,
    )
