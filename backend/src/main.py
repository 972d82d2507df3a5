# pyright: reportMissingTypeStubs=false
"""
Dental Booking Backend API

A FastAPI application providing slot availability and booking endpoints
for a multi-tenant dental-clinic platform.

Features:
- Slot availability from local schedules or external practice-management systems
- Conflict-safe appointment booking
- Doctor schedule and clinic working-hours management
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import appointments, availability
from core.config import DATABASE_URL
from core.constants import CORS_ORIGINS
from core.database import Database
from core.exceptions import BookingConflictError, ConfigurationError, ExternalAdapterError, NotFoundError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)

logger = logging.getLogger(__name__)


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        database: Persistence handle to use. When omitted, one is created from
            DATABASE_URL at startup and disposed at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager for startup and shutdown events."""
        logger.info("🚀 Starting Dental Booking Backend API")
        owns_database = database is None
        app.state.database = database or Database(DATABASE_URL)

        yield

        if owns_database:
            app.state.database.dispose()
            logger.info("🛑 Database connections released")
        logger.info("🛑 Shutting down Dental Booking Backend API")

    app = FastAPI(
        title="Dental Booking Backend",
        description="Slot availability and booking for dental clinics",
        version="1.0.0",
        docs_url="/docs",  # Swagger UI
        redoc_url="/redoc",  # ReDoc
        lifespan=lifespan,
    )
    if database is not None:
        # Available before startup for clients that skip the lifespan
        app.state.database = database

    # CORS middleware for frontend integration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Include API routers
    app.include_router(
        availability.router,
        prefix="/api",
        tags=["availability"],
        responses={
            400: {"description": "Bad request"},
            404: {"description": "Resource not found"},
            422: {"description": "Clinic misconfigured"},
            502: {"description": "External system error"},
        },
    )
    app.include_router(
        appointments.router,
        prefix="/api",
        tags=["appointments"],
        responses={
            400: {"description": "Bad request"},
            404: {"description": "Resource not found"},
            409: {"description": "Conflict"},
            502: {"description": "External system error"},
        },
    )

    @app.get(
        "/",
        summary="Root endpoint",
        description="Returns basic API information",
    )
    async def root() -> dict[str, str]:
        """Get API information."""
        return {
            "message": "Dental Booking Backend API",
            "version": "1.0.0",
            "status": "running"
        }

    @app.get(
        "/health",
        summary="Health check",
        description="Returns the health status of the API",
    )
    async def health_check() -> dict[str, str]:
        """Check if the API is healthy and responding."""
        return {"status": "healthy"}

    register_exception_handlers(app)
    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain exceptions to HTTP responses."""

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content={"detail": str(exc), "type": "not_found"},
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        logger.warning(f"Configuration error: {exc}")
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "type": "configuration_error"},
        )

    @app.exception_handler(BookingConflictError)
    async def booking_conflict_handler(request: Request, exc: BookingConflictError):
        return JSONResponse(
            status_code=409,
            content={"detail": str(exc), "type": "booking_conflict"},
        )

    @app.exception_handler(ExternalAdapterError)
    async def external_adapter_error_handler(request: Request, exc: ExternalAdapterError):
        logger.warning(f"External system error: {exc}")
        return JSONResponse(
            status_code=502,
            content={"detail": str(exc), "type": "external_service_error"},
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        """Handle ValueError exceptions."""
        logger.warning(f"ValueError: {exc}")
        return JSONResponse(
            status_code=400,
            content={"detail": str(exc), "type": "validation_error"},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions globally."""
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "type": "internal_error"},
        )


app = create_app()
