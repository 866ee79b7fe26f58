"""Endpoints and websocket handler serving the notification views."""

from __future__ import annotations

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)

from notifyhub.application import NotificationCenter
from notifyhub.application.use_cases.notifications import (
    NOT_FOUND_ERROR,
    TYPE_FILTER_ALL,
    NotificationFilter,
    NotificationItemView,
    NotificationSort,
)
from notifyhub.domain.entities import MutationResult, PaginationState
from notifyhub.domain.errors import RemoteStoreError
from notifyhub.interfaces.api.dependencies import (
    get_notification_center,
    get_websocket_resources,
)
from notifyhub.interfaces.api.schemas import (
    BatchMutationResultRead,
    DropdownRead,
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

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _item_to_schema(item: NotificationItemView) -> NotificationItemRead:
    return NotificationItemRead(
        notification=NotificationRead.from_entity(item.notification),
        time_ago=item.time_ago,
        color=item.color,
        priority_badge=item.priority_badge,
        insights=list(item.insights),
    )


def _pagination_to_schema(pagination: PaginationState) -> PaginationRead:
    return PaginationRead(
        page=pagination.page,
        limit=pagination.limit,
        total=pagination.total,
        can_load_more=pagination.can_load_more,
    )


def _collection_to_schema(center: NotificationCenter) -> NotificationCollectionRead:
    return NotificationCollectionRead(
        notifications=[NotificationRead.from_entity(item) for item in center.notifications],
        unread_count=center.unread_count,
        has_high_priority_notification=center.has_high_priority_notification,
        pagination=_pagination_to_schema(center.pagination),
        loading=center.loading,
        error=center.error,
    )


def _raise_for_failed_mutation(result: MutationResult) -> None:
    if result.success:
        return
    if result.error == NOT_FOUND_ERROR:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error)
    raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.error)


@router.get("/", response_model=NotificationCollectionRead)
async def list_notifications(
    center: NotificationCenter = Depends(get_notification_center),
) -> NotificationCollectionRead:
    """Return the locally held collection, unsorted and unfiltered."""

    return _collection_to_schema(center)


@router.get("/dropdown", response_model=DropdownRead)
async def get_dropdown(
    center: NotificationCenter = Depends(get_notification_center),
) -> DropdownRead:
    """Refresh the first page and return the header dropdown projection."""

    await center.refresh()
    view = center.dropdown()
    return DropdownRead(
        items=[_item_to_schema(item) for item in view.items],
        unread_count=view.unread_count,
        badge=view.badge,
        has_high_priority=view.has_high_priority,
        history_url=view.history_url,
    )


@router.get("/panel", response_model=PanelRead)
async def get_panel(
    notification_filter: NotificationFilter = Query(NotificationFilter.ALL, alias="filter"),
    sort_by: NotificationSort = Query(NotificationSort.PRIORITY, alias="sort"),
    center: NotificationCenter = Depends(get_notification_center),
) -> PanelRead:
    view = center.panel(notification_filter, sort_by)
    return PanelRead(
        items=[_item_to_schema(item) for item in view.items],
        unread_count=view.unread_count,
        has_high_priority=view.has_high_priority,
        filter=view.active_filter.value,
        sort=view.sort_by.value,
        empty_message=view.empty_message,
    )


@router.get("/history", response_model=HistoryRead)
async def get_history(
    search: str = Query("", max_length=200),
    notification_type: str = Query(TYPE_FILTER_ALL, alias="type"),
    center: NotificationCenter = Depends(get_notification_center),
) -> HistoryRead:
    """Search the pages loaded so far without fetching new ones."""

    view = center.history(search, notification_type)
    return HistoryRead(
        items=[_item_to_schema(item) for item in view.items],
        unread_count=view.unread_count,
        search=view.search,
        type=view.type_filter,
        pagination=_pagination_to_schema(view.pagination),
        summary=view.summary,
        type_options=list(view.type_options),
    )


@router.post("/refresh", response_model=NotificationCollectionRead)
async def refresh_notifications(
    center: NotificationCenter = Depends(get_notification_center),
) -> NotificationCollectionRead:
    await center.refresh()
    return _collection_to_schema(center)


@router.post("/load-more", response_model=NotificationCollectionRead)
async def load_more_notifications(
    center: NotificationCenter = Depends(get_notification_center),
) -> NotificationCollectionRead:
    await center.load_more()
    return _collection_to_schema(center)


@router.post("/read-all", response_model=BatchMutationResultRead)
async def mark_all_notifications_read(
    center: NotificationCenter = Depends(get_notification_center),
) -> BatchMutationResultRead:
    """Mark every unread notification read; rejected ids are listed in ``failed``."""

    result = await center.mark_all_as_read()
    return BatchMutationResultRead(
        succeeded=list(result.succeeded), failed=list(result.failed), error=result.error
    )


@router.get("/preferences", response_model=NotificationPreferencesRead)
async def get_preferences(
    center: NotificationCenter = Depends(get_notification_center),
) -> NotificationPreferencesRead:
    preferences = await center.get_preferences()
    return NotificationPreferencesRead.model_validate(preferences, from_attributes=True)


@router.put("/preferences", response_model=NotificationPreferencesRead)
async def update_preferences(
    payload: NotificationPreferencesUpdate,
    center: NotificationCenter = Depends(get_notification_center),
) -> NotificationPreferencesRead:
    try:
        preferences = await center.update_preferences(payload.changes())
    except RemoteStoreError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return NotificationPreferencesRead.model_validate(preferences, from_attributes=True)


@router.post("/{notification_id}/read", response_model=MutationResultRead)
async def mark_notification_read(
    notification_id: str,
    center: NotificationCenter = Depends(get_notification_center),
) -> MutationResultRead:
    result = await center.mark_as_read(notification_id)
    _raise_for_failed_mutation(result)
    return MutationResultRead(notification_id=result.notification_id, success=True)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: str,
    center: NotificationCenter = Depends(get_notification_center),
) -> Response:
    result = await center.delete_notification(notification_id)
    _raise_for_failed_mutation(result)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams dropdown snapshots to the views."""

    center, manager, publisher = get_websocket_resources(websocket)
    if center is None or center.closed:
        await websocket.close(code=1011)
        return

    await manager.connect(websocket)
    try:
        snapshot = publisher.snapshot(
            center.notifications, loading=center.loading, error=center.error
        )
        await websocket.send_json({"type": "init", "data": snapshot})
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "refresh":
                await center.refresh()
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list):
                    for notification_id in ids:
                        await center.mark_as_read(str(notification_id))
                continue
    except WebSocketDisconnect:
        manager.disconnect(websocket)
    except Exception:
        manager.disconnect(websocket)
        raise
