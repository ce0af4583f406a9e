"""FastAPI application factory and lifespan management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from contentgraph.config import Settings
from contentgraph.content import ContentStore
from contentgraph.middleware.cors import configure_cors
from contentgraph.middleware.logging import RequestLoggingMiddleware
from contentgraph.routes import content, health, related, structure

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle events.

    Makes sure the content root exists before the first request.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings: Settings = app.state.settings
    store: ContentStore = app.state.content_store
    logger.info("api_startup", host=settings.host, port=settings.port, root=str(store.root))

    store.ensure_root()

    try:
        yield
    finally:
        logger.info("api_shutdown")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory function to create configured FastAPI application.

    The content store is built here from the settings and shared through
    `app.state`; nothing is held in module globals.

    Args:
        settings: Configuration instance. Creates default if None.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="Content Graph API",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/api/v1/docs" if settings.debug else None,
        redoc_url=None,
        openapi_url="/api/v1/openapi.json" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.content_store = ContentStore(settings.content_options())

    configure_cors(app, settings.cors_origins)
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(health.router, prefix="/api/v1")
    app.include_router(content.router, prefix="/api/v1")
    app.include_router(structure.router, prefix="/api/v1")
    app.include_router(related.router, prefix="/api/v1")

    return app
