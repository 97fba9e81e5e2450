"""FastAPI application entry point.

This module assembles all components and creates the main application.
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from vidshelf import __version__
from vidshelf.api import health, library, metrics, youtube
from vidshelf.core.config import Config, ConfigService, MonitoringConfig, SecurityConfig
from vidshelf.core.display import DisplayFormatter
from vidshelf.core.errors import EXCEPTION_TO_ERROR_CODE, APIError, global_exception_handler
from vidshelf.core.logging import configure_logging
from vidshelf.core.metrics import MetricsCollector, initialize_metrics
from vidshelf.middleware.request_id import RequestIDMiddleware
from vidshelf.providers.base import MetadataProvider
from vidshelf.providers.youtube import YouTubeMetadataProvider
from vidshelf.services.collection import CollectionStore
from vidshelf.services.library import configure_library_service, get_library_service
from vidshelf.services.notifications import NotificationQueue
from vidshelf.services.slots import create_slot_store

logger = structlog.get_logger(__name__)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to track HTTP request metrics.

    Records request count and duration for all endpoints,
    using FastAPI route templates to normalize paths.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Process request and record metrics."""
        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time

        # Fixed label for unmatched routes keeps label cardinality bounded
        route = request.scope.get("route")
        endpoint = route.path if route else "/unmatched"

        MetricsCollector.record_request(
            method=request.method,
            endpoint=endpoint,
            status=response.status_code,
            duration=duration,
        )

        return response


# Global provider instance
_metadata_provider: Optional[MetadataProvider] = None


def get_metadata_provider() -> MetadataProvider:
    """Get the global metadata provider instance."""
    if _metadata_provider is None:
        raise RuntimeError("Metadata provider not configured")
    return _metadata_provider


def configure_services(config: Config, provider: Optional[MetadataProvider] = None) -> None:
    """Build the provider, collection store and library service from config.

    Args:
        config: Loaded application configuration.
        provider: Optional provider override (used by tests).
    """
    global _metadata_provider

    _metadata_provider = provider or YouTubeMetadataProvider(config.youtube)
    if not _metadata_provider.is_configured:
        logger.warning("YouTube API key not configured; video lookups will fail")

    formatter = DisplayFormatter(config.display)
    store = CollectionStore(
        slots=create_slot_store(config.storage),
        slot_key=config.storage.slot_key,
        formatter=formatter,
    )
    store.load()

    configure_library_service(
        store=store,
        provider=_metadata_provider,
        notifications=NotificationQueue(default_ttl=config.notifications.add_ttl),
        add_ttl=config.notifications.add_ttl,
        subtitle_ttl=config.notifications.subtitle_ttl,
    )
    logger.info("Library service configured", videos=len(store))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown."""
    logger.info("Application starting", version=__version__)

    initialize_metrics(__version__)

    config = ConfigService().load()

    configure_logging(config.logging.level, config.logging.format)

    logger.info(
        "Configuration loaded",
        server_port=config.server.port,
        slot_path=config.storage.slot_path,
    )

    configure_services(config)

    logger.info("Application startup complete", version=__version__)

    yield

    logger.info("Application shutdown complete")


def register_exception_handlers(app: FastAPI) -> None:
    """Route every error through the global handler.

    Service exceptions are registered individually so they are handled inside
    the middleware stack, where the request ID is still bound.
    """
    app.add_exception_handler(Exception, global_exception_handler)
    app.add_exception_handler(APIError, global_exception_handler)
    app.add_exception_handler(StarletteHTTPException, global_exception_handler)
    app.add_exception_handler(RequestValidationError, global_exception_handler)
    for exc_type in EXCEPTION_TO_ERROR_CODE:
        app.add_exception_handler(exc_type, global_exception_handler)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="vidshelf",
        description="Personal YouTube video bookmarks with subtitle attachments",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Default ["*"] for development; override via APP_SECURITY_CORS_ORIGINS env var
    security_config = SecurityConfig()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=security_config.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Override dependency injection for routers
    app.dependency_overrides[youtube.get_metadata_provider] = get_metadata_provider
    app.dependency_overrides[library.get_library_service] = get_library_service
    app.dependency_overrides[health.get_library_service] = get_library_service

    app.include_router(health.router)
    app.include_router(youtube.router)
    app.include_router(library.router)
    if MonitoringConfig().metrics_enabled:
        app.include_router(metrics.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn  # type: ignore[import-not-found]

    _server = ConfigService().load().server
    uvicorn.run(app, host=_server.host, port=_server.port)
