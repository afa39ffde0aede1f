"""API endpoint modules for version 1."""

from .communities import router as communities_router
from .events import router as events_router
from .locations import router as locations_router
from .onboarding import router as onboarding_router
from .tags import router as tags_router
from .users import router as users_router

__all__ = [
    "communities_router",
    "events_router",
    "locations_router",
    "onboarding_router",
    "tags_router",
    "users_router",
]
