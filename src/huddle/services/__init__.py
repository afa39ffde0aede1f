"""Business logic services and external clients for the Huddle application."""

from .identity import IdentityClient, IdentityError
from .locations import LocationClient, LocationError
from .storage import StorageClient, StorageError
from .wizard import CommunityWizard

__all__ = [
    "IdentityClient", "IdentityError",
    "LocationClient", "LocationError",
    "StorageClient", "StorageError",
    "CommunityWizard",
]
