"""
FastAPI Application Entry Point.

This is the main application file for the SendIT parcel tracking backend.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from sendit.app.core.config import settings
from sendit.app.api.v1.router import router as api_v1_router
from sendit.app.core.observability import ObservabilityMiddleware, configure_logging
from sendit.app.core.redis_client import close_redis, ping_redis
from sendit.app.db.session import Database
from sendit.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from sendit.app.models.user import User  # noqa: F401
from sendit.app.models.audit_log import AuditLog  # noqa: F401
from sendit.app.models.parcel import Parcel  # noqa: F401
from sendit.app.models.order import DeliveryOrder  # noqa: F401
from sendit.app.models.notification import Notification  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Configures logging and opens the database (creating missing tables).
    2. On shutdown disposes the connection pool and closes Redis.

    A Database already placed on ``app.state`` (as the tests do) is used
    as-is.
    """
    configure_logging(settings.log_level)

    database = getattr(app.state, "database", None)
    owns_database = database is None
    if owns_database:
        database = Database.from_settings(settings)
        app.state.database = database
    await database.connect()

    if not await ping_redis():
        logger.warning("Redis unavailable; token revocation checks will fail open")

    logger.info("%s started (API %s)", settings.app_name, settings.api_version)
    yield

    if owns_database:
        await database.disconnect()
    await close_redis()
    logger.info("%s stopped", settings.app_name)


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Parcel delivery tracking: parcels, priced delivery orders and public tracking",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
        "redis": "up" if await ping_redis() else "down",
    }


# Include API v1 router
app.include_router(api_v1_router, prefix=f"/{settings.api_version}")


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint.

    Returns:
        dict: Welcome message and API documentation links
    """
    return {
        "message": "Welcome to the SendIT Parcel Tracker API",
        "docs": "/docs",
        "health": "/health",
        "tracking": f"/{settings.api_version}/orders/track/{{tracking_number}}",
    }
