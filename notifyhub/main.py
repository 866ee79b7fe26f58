import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notifyhub.application import NotificationCenter
from notifyhub.config import Settings, get_settings
from notifyhub.domain.gateway import NotificationGateway
from notifyhub.infrastructure import NotificationStoreClient
from notifyhub.infrastructure.notifications import SnapshotPublisher, ViewConnectionManager
from notifyhub.interfaces.api.routes import register_routes
from notifyhub.utils import configure_app_timezone

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    gateway: NotificationGateway | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``gateway`` replaces the HTTP client of the remote store, which is how the
    tests plug in an in-memory store.
    """

    settings = settings or get_settings()
    configure_app_timezone(settings.app_timezone)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load the first page and start polling; stop everything on shutdown."""

        client = gateway or NotificationStoreClient.from_settings(settings)
        center = NotificationCenter.from_settings(client, settings)
        manager = ViewConnectionManager()
        publisher = SnapshotPublisher(manager, dropdown_limit=settings.dropdown_limit)
        center.subscribe(publisher)

        app.state.notification_center = center
        app.state.connection_manager = manager
        app.state.snapshot_publisher = publisher

        await center.refresh()
        if center.error:
            logger.warning("Initial notification fetch failed: %s", center.error)
        if settings.polling_enabled:
            center.start_polling()
        try:
            yield
        finally:
            center.close()
            if gateway is None:
                await client.aclose()

    app = FastAPI(title="notifyhub", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app
