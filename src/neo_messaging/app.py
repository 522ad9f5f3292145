"""Neo Messaging API application.

Builds the FastAPI application and wires the database pool, Redis cache,
platform senders and file storage into the message services.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request

from .api.exception_handlers import register_exception_handlers
from .cache.client import CacheManager
from .config.settings import MessagingSettings, get_settings
from .core.exceptions import CacheConnectionError
from .database.connection import DatabaseManager
from .features.messages.adapters.cloudinary_storage import CloudinaryStorage
from .features.messages.repositories.message_repository import MessageRepository
from .features.messages.routers import router as messages_router
from .features.messages.senders.selector import create_sender_selector
from .features.messages.services.dispatch_service import MessageDispatchService
from .features.messages.services.query_service import MessageQueryService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings: MessagingSettings = app.state.settings

    database = DatabaseManager(
        settings.database_url,
        application_name=settings.app_name,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
    )
    repository = MessageRepository(database, schema_name=settings.db_schema)
    await repository.ensure_schema()

    cache = CacheManager(settings)
    try:
        await cache.connect()
    except CacheConnectionError as e:
        logger.warning(f"{e.message}. Running without message cache")

    http_client = httpx.AsyncClient(timeout=settings.platform_timeout_seconds)
    file_storage = CloudinaryStorage(
        settings.cloudinary_cloud_name,
        settings.cloudinary_upload_preset,
        timeout=settings.upload_timeout_seconds,
    )

    app.state.database = database
    app.state.cache = cache
    app.state.dispatch_service = MessageDispatchService(
        repository=repository,
        selector=create_sender_selector(settings, http_client=http_client),
        cache=cache,
        file_storage=file_storage,
        max_file_size_mb=settings.max_file_size_mb,
    )
    app.state.query_service = MessageQueryService(
        repository=repository,
        cache=cache,
        cache_ttl=settings.messages_cache_ttl,
    )
    logger.info(f"{settings.app_name} services initialized")

    yield

    await http_client.aclose()
    await cache.disconnect()
    await database.close_pool()


def create_app(settings: Optional[MessagingSettings] = None) -> FastAPI:
    """Create the Neo Messaging API.

    Returns:
        FastAPI application with routes and exception handlers registered
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Neo Messaging API",
        version=settings.app_version,
        description="Send messages to Telegram, Slack, Discord and WhatsApp and browse sent history",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings

    register_exception_handlers(app, is_production=settings.is_production)
    app.include_router(messages_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health(request: Request):
        database = getattr(request.app.state, "database", None)
        cache = getattr(request.app.state, "cache", None)
        return {
            "status": "ok",
            "database": await database.health_check() if database else False,
            "cache": await cache.health_check() if cache else False,
        }

    logger.info("Created Neo Messaging API")
    return app
