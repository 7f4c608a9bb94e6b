"""
FastAPI Application
===================

Main FastAPI app setup with all routes and middleware.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wayfarer.api.v1 import (
    admin_router,
    checkin_router,
    me_router,
    permission_router,
    place_router,
    region_router,
    report_router,
    user_router,
)
from wayfarer.api.v1.errors import register_exception_handlers
from wayfarer.application.services.user_service import UserService
from wayfarer.core.config import Settings
from wayfarer.core.logging_config import configure_logging
from wayfarer.di.container import get_container
from wayfarer.infrastructure.db import ensure_indexes

logger = logging.getLogger(__name__)


def create_application() -> FastAPI:
    """
    Create and configure FastAPI application.

    This function sets up the FastAPI application with:
    - Logging configuration
    - CORS middleware configuration
    - Error translation for service results
    - API route registration
    - Startup/shutdown hooks for the MongoDB backend

    Returns:
        Configured FastAPI application instance
    """
    configure_logging()

    application = FastAPI(
        title="Wayfarer API",
        description="Regions, places, check-ins and moderation for the Wayfarer discovery platform",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # TODO: Configure allowed origins for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(application)

    # Register API routers
    application.include_router(user_router, prefix="/api/v1/users")
    application.include_router(region_router, prefix="/api/v1/regions")
    application.include_router(place_router, prefix="/api/v1/places")
    application.include_router(me_router, prefix="/api/v1/me")
    application.include_router(permission_router, prefix="/api/v1/permissions")
    application.include_router(checkin_router, prefix="/api/v1/checkins")
    application.include_router(report_router, prefix="/api/v1/reports")
    application.include_router(admin_router, prefix="/api/v1/admin")

    @application.on_event("startup")
    async def startup_event():
        """Build the container, make sure MongoDB indexes exist and purge expired sessions."""
        container = get_container()
        if container.has("mongo_client"):
            settings = container.get(Settings)
            await ensure_indexes(container.get("mongo_client").get_database(), settings)
        cleanup = await container.get(UserService).cleanup_expired_sessions()
        if cleanup.is_err():
            logger.warning(f"Expired session cleanup failed: {cleanup.error.message}")
        logger.info("Wayfarer API started")

    @application.on_event("shutdown")
    async def shutdown_event():
        """Close the MongoDB connection if one was opened."""
        container = get_container()
        if container.has("mongo_client"):
            await container.get("mongo_client").close()
        logger.info("Wayfarer API stopped")

    @application.get("/")
    async def root():
        """Root endpoint - health check."""
        return {
            "status": "running",
            "service": "Wayfarer API",
            "version": "1.0.0",
            "docs": "/docs",
        }

    @application.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    return application


# Create application instance
app = create_application()
