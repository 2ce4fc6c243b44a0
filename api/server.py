"""
FastAPI application entry point.

Sets up the application with:
- Lifespan management (record store startup/shutdown)
- Route registration
- Request logging middleware
- Error handling
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
from fastapi import FastAPI, Request

from api.errors import register_error_handlers
from api.routes import health_router, records_router
from core.config import Settings, get_settings
from core.logging import configure_logging, get_logger
from core.storage import RecordStore, create_record_store


logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    record_store: Optional[RecordStore] = None,
) -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application.

    Args:
        settings: Application settings (default: environment)
        record_store: Store to serve from; built from settings when omitted.
            The application takes ownership and closes it on shutdown.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Application lifecycle manager.

        Startup: configure logging, open the record store pool.
        Shutdown: runs after the server has drained in-flight requests;
        disposes the pool.
        """
        configure_logging(settings)

        logger.info(
            "Starting Records API...",
            environment=settings.environment,
        )

        store = record_store or create_record_store(settings)
        await store.setup()
        app.state.record_store = store

        logger.info(
            "Records API started",
            host=settings.server_host,
            port=settings.server_port,
        )

        try:
            yield
        finally:
            logger.info("Shutting down Records API...")
            await store.close()
            app.state.record_store = None
            logger.info("Records API stopped")

    app = FastAPI(
        title="Records API",
        description="Create, read, update, delete and search records.",
        version="0.1.0",
        lifespan=lifespan,
        # Routing table is fixed; no generated docs routes
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        # "/health_check/" is unmapped, not a redirect
        redirect_slashes=False,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        structlog.contextvars.bind_contextvars(
            method=request.method,
            path=request.url.path,
        )
        started = time.perf_counter()
        try:
            response = await call_next(request)
            logger.info(
                "Request handled",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()

    # Register routes
    app.include_router(health_router)
    app.include_router(records_router)

    register_error_handlers(app)

    return app


app = create_app()


def main() -> None:
    import uvicorn

    settings = get_settings()
    # uvicorn traps SIGINT/SIGTERM and drains open requests before the
    # lifespan shutdown runs.
    uvicorn.run(
        "api.server:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug,
        timeout_graceful_shutdown=settings.shutdown_timeout_seconds,
    )


if __name__ == "__main__":
    main()
