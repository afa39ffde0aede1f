"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .community import (
    ChatRoomInput,
    ChatRoomResponse,
    CommunityCreate,
    CommunityCreated,
    CommunityResponse,
)
from .event import AttendeeResponse, EventCreate, EventDetailResponse, EventResponse, RsvpRequest
from .location import CityOption, CountryOption
from .tag import InterestResponse
from .user import CurrentUserResponse, OnboardingResult

__all__ = [
    "ChatRoomInput", "ChatRoomResponse",
    "CommunityCreate", "CommunityCreated", "CommunityResponse",
    "AttendeeResponse", "EventCreate", "EventDetailResponse", "EventResponse", "RsvpRequest",
    "CityOption", "CountryOption",
    "InterestResponse",
    "CurrentUserResponse", "OnboardingResult",
]
