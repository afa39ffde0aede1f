"""Version 1 API endpoints."""

from .endpoints import (
    communities_router,
    events_router,
    locations_router,
    onboarding_router,
    tags_router,
    users_router,
)

__all__ = [
    "communities_router",
    "events_router",
    "locations_router",
    "onboarding_router",
    "tags_router",
    "users_router",
]
