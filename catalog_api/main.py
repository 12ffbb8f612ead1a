"""FastAPI application entry point.

Cavavin Catalog API - read-only wine catalog, stores and delivery zones.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
from datetime import datetime, timezone
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalog_api.errors import CatalogError, DecodeError, NotFoundError
from catalog_api.routes import api_router
from catalog_api.schemas import ErrorResponse, HealthResponse
from catalog_api.settings import get_settings
from catalog_api.stores.postgres import init_db, close_db, ping_db

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    settings = get_settings()
    logger.info("Database URL configured: %s", "database_url" in settings.model_fields_set)

    # Initialize database (skip in tests if no DB available)
    try:
        await init_db()
        await ping_db()
        logger.info("Postgres connected")
    except Exception:
        logger.exception("Postgres init failed")

    yield

    # Shutdown
    await close_db()


def _error_response(status_code: int, error: str, message: str | None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, message=message).model_dump(),
    )


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Read-only catalog API for the Cavavin storefront",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CatalogError)
    async def catalog_exception_handler(request: Request, exc: CatalogError) -> JSONResponse:
        """Map catalog error kinds to {error, message} bodies."""
        if isinstance(exc, NotFoundError):
            logger.info("%s %s: %s", request.method, request.url.path, exc.message)
        elif isinstance(exc, DecodeError):
            logger.error(
                "%s %s: corrupt %s on record %s",
                request.method,
                request.url.path,
                exc.field,
                exc.record_id,
                exc_info=exc,
            )
        else:
            logger.error("%s: %s", exc.error, exc.message, exc_info=exc)
        return _error_response(exc.status_code, exc.error, exc.message)

    # Exception handler for anything the services did not classify
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return _error_response(
            500,
            "Internal server error",
            str(exc) if settings.debug else None,
        )

    # Health check endpoint
    @app.get("/health", tags=["health"], response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(timestamp=datetime.now(timezone.utc))

    # Include API routes
    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "catalog_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
