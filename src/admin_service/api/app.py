# src/admin_service/api/app.py
from contextlib import asynccontextmanager
from fastapi import FastAPI

from admin_service.config.settings import get_settings
from admin_service.api.middleware.cache import ResponseCacheMiddleware
from admin_service.api.middleware.errors import register_error_handlers
from admin_service.api.middleware.request_id import RequestIDMiddleware
from admin_service.api.middleware.request_log import RequestLogMiddleware
from admin_service.api.routes import health
from admin_service.api.routes.resources import build_resource_routers
from admin_service.infrastructure.cache.cache import get_cache
from admin_service.infrastructure.cache.redis import close_redis
from admin_service.infrastructure.database import db
from admin_service.infrastructure.observability.logging import configure_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    settings = get_settings()
    configure_logging()

    if settings.database_url:
        await db.connect(
            url=settings.database_url.get_secret_value(),
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
            pool_pre_ping=True,
            echo_sql=settings.db_echo_sql,
            isolation_level=settings.db_isolation_level,
        )
    else:
        logger.warning("Database not configured - resource endpoints will fail")

    # Redis when configured and reachable, in-memory LRU otherwise
    app.state.cache = await get_cache()

    logger.info("Server started", server=settings.server_name, environment=settings.environment)

    yield

    await close_redis()

    if db.is_connected:
        await db.disconnect()

    logger.info("Server stopped", server=settings.server_name)


def create_app() -> FastAPI:
    """
    Application factory.

    Every entity kind in ``ENTITY_REGISTRY`` gets its router at ``/<name>``.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Administrative API with soft-delete aware resources and a cached read path.",
        docs_url="/docs" if settings.debug else None,
        lifespan=lifespan,
    )

    # Middleware (added in reverse order of execution)
    # Request ID runs first so it's available to everything after it
    app.add_middleware(ResponseCacheMiddleware)
    app.add_middleware(RequestLogMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_error_handlers(app)

    app.include_router(health.router, tags=["Health"])
    for router in build_resource_routers():
        app.include_router(router)

    return app
