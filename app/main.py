"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.api.v1.router import api_router
from app.config import settings
from app.core.background_tasks import background_dispatcher
from app.core.exceptions import AppException
from app.core.immutability import register_immutability_enforcement
from app.core.logging_config import setup_logging
from app.core.middleware import RequestLoggingMiddleware
from app.database import close_db, engine, init_db
from app.services.booking_service import BookingService
from app.services.booking_store import BookingStore
from app.services.identity_service import identity_service
from app.services.notification_service import notification_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events."""
    # Startup
    if settings.debug:
        await init_db()
    logger.info(f"{settings.app_name} {settings.app_version} started ({settings.environment})")

    yield

    # Shutdown: let in-flight notifications finish before closing clients
    await background_dispatcher.drain(timeout=settings.dispatch_drain_timeout_seconds)
    await notification_service.close()
    await identity_service.close()
    await close_db()


async def database_is_reachable() -> bool:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Database health check failed: {e}")
        return False


def create_application(booking_service: BookingService | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    setup_logging(settings.log_level)
    register_immutability_enforcement()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Booking Service - reservations with bounded cancellation retention",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.booking_service = booking_service or BookingService(BookingStore())

    # Exception handlers
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Handle custom application exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=exc.headers,
        )

    # Middleware (order matters - first added = last executed)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routes
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health")
    async def health_check() -> JSONResponse:
        """Health check endpoint."""
        db_ok = await database_is_reachable()
        return JSONResponse(
            status_code=200 if db_ok else 503,
            content={
                "status": "healthy" if db_ok else "unhealthy",
                "db": "connected" if db_ok else "disconnected",
                "version": settings.app_version,
                "environment": settings.environment,
                "timestamp": datetime.now(UTC).isoformat(),
            },
        )

    @app.get("/ready")
    async def readiness_check() -> JSONResponse:
        """Readiness probe."""
        if await database_is_reachable():
            return JSONResponse(status_code=200, content={"status": "ready"})
        return JSONResponse(status_code=503, content={"status": "not ready"})

    @app.get("/")
    async def root() -> dict:
        """Root endpoint."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs" if settings.debug else None,
        }

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=1 if settings.debug else settings.workers,
    )
