"""Main entry point for the Huddle application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from huddle.api.route_guard import RouteGuardMiddleware
from huddle.api.v1 import (
    communities_router,
    events_router,
    locations_router,
    onboarding_router,
    tags_router,
    users_router,
)
from huddle.core.settings import settings
from huddle.services.identity import get_identity_client
from huddle.services.locations import get_location_client
from huddle.services.storage import get_storage_client

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Huddle API",
    description="Community and event discovery API",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=(
        settings.cors_origins
        if "*" in settings.cors_origins
        else [settings.app_base_url, *settings.cors_origins]
    ),
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Redirect page routes by sign-in and onboarding state
app.add_middleware(RouteGuardMiddleware)

# Include API routers
app.include_router(communities_router, prefix="/api/v1")
app.include_router(events_router, prefix="/api/v1")
app.include_router(locations_router, prefix="/api/v1")
app.include_router(onboarding_router, prefix="/api/v1")
app.include_router(tags_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    logger.info(
        "Starting %s (identity provider %s, image storage %s)",
        settings.app_name,
        "configured" if settings.identity_enabled else "disabled",
        "configured" if settings.storage_enabled else "disabled",
    )


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await get_identity_client().close()
    await get_location_client().close()
    await get_storage_client().close()
    logger.info("Closed outbound HTTP clients")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": f"{settings.app_name} API",
        "version": settings.app_version,
        "description": "Community and event discovery API",
        "docs": "/docs",
        "redoc": "/redoc"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("huddle.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
