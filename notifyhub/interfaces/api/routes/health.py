from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health(request: Request) -> dict[str, object]:
    center = getattr(request.app.state, "notification_center", None)
    return {
        "status": "ok",
        "polling": bool(center is not None and center.polling),
        "last_error": center.error if center is not None else None,
    }
