"""
OnScript Analytics Backend - FastAPI Application Entry Point

Dashboard pages and user-scoped API routes for the OnScript / Vocalytics
call-analytics application, over call data synced from Ringba.
"""

import logging
import sys
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .core.config import settings
from .core.database import engine, init_db
from .api import health_router, ringba_router, secure_router, pages_router
from .schemas.common import ErrorResponse


logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Root logging setup from settings.log_level."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# =============================================================================
# Performance Monitoring Middleware
# =============================================================================

class PerformanceMonitoringMiddleware(BaseHTTPMiddleware):
    """
    Middleware to track API response times and log slow requests.

    Logs warnings for requests exceeding 500ms.
    Adds X-Response-Time header to all responses.
    """

    SLOW_REQUEST_THRESHOLD_MS = 500

    async def dispatch(self, request: Request, call_next):
        """Process request with timing."""
        start_time = time.time()

        response = await call_next(request)

        process_time_ms = (time.time() - start_time) * 1000
        response.headers["X-Response-Time"] = f"{process_time_ms:.2f}ms"

        if process_time_ms > self.SLOW_REQUEST_THRESHOLD_MS:
            logger.warning(
                f"Slow request: {request.method} {request.url.path} "
                f"took {process_time_ms:.2f}ms"
            )

        if settings.debug:
            logger.debug(
                f"{request.method} {request.url.path} - {process_time_ms:.2f}ms"
            )

        return response


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.

    Refuses to start in production with dev-default secrets and creates
    tables in development.
    """
    print(f"Starting {settings.app_name} v{settings.app_version}")
    print(f"Environment: {settings.environment}")

    _insecure_secrets = []
    if settings.secret_key == "dev-secret-key-change-in-production":
        _insecure_secrets.append("SECRET_KEY")
    if settings.encryption_key.rstrip("0") == "dev-encryption-key-32bytes!":
        _insecure_secrets.append("ENCRYPTION_KEY")

    if _insecure_secrets and settings.is_production:
        logger.critical(
            f"Insecure dev-default secrets in production: {', '.join(_insecure_secrets)}. Refusing to start."
        )
        sys.exit(1)
    elif _insecure_secrets:
        logger.warning(
            f"Dev-default secrets in use: {', '.join(_insecure_secrets)}. "
            "Fine for development, must be changed for production."
        )

    # Production schema is managed outside the app
    if settings.is_development:
        init_db()
        print("Development mode - tables created")

    yield

    print("Shutting down...")
    engine.dispose()


# =============================================================================
# Application Factory
# =============================================================================

def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="OnScript call-analytics dashboard pages and user-scoped data API.",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    # Compress responses > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.add_middleware(PerformanceMonitoringMiddleware)

    cors_origins = settings.cors_origins_list
    allow_all = "*" in cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else cors_origins,
        allow_credentials=not allow_all,  # credentials not compatible with wildcard
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Response-Time"],
    )

    # Register routers
    app.include_router(health_router)
    app.include_router(ringba_router)
    app.include_router(secure_router)
    app.include_router(pages_router)

    register_exception_handlers(app)

    return app


# =============================================================================
# Exception Handlers
# =============================================================================

def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        """
        Handle ValueError exceptions.

        Returns user-friendly error response without exposing internals.
        """
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="validation_error", message=str(exc)).model_dump(exclude_none=True),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Handle unhandled exceptions.

        Logs the error and returns a generic message.
        """
        logger.error(f"Unhandled exception on {request.method} {request.url.path}: {type(exc).__name__}")

        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="internal_error",
                message="An unexpected error occurred. Please try again later.",
            ).model_dump(exclude_none=True),
        )


app = create_application()


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict:
    """
    Root endpoint returning API information.
    """
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "docs": "/docs" if settings.is_development else "disabled",
    }


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level="debug" if settings.debug else "info",
    )
