"""Event-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from huddle.models.event import RSVP_GOING


class EventCreate(BaseModel):
    """Schema for creating an event inside a community.

    Values arrive as entered in the form; ``max_attendees`` is kept as text so
    that non-numeric input is reported as a field error.
    """

    title: str = ""
    description: str = ""
    start_time: datetime | None = None
    end_time: datetime | None = None
    address: str = ""
    city: str = ""
    country: str = ""
    location_url: str = ""
    max_attendees: str | int | None = None


class EventResponse(BaseModel):
    """Schema for event information returned by the API."""

    id: int
    title: str
    description: str
    start_time: datetime
    end_time: datetime | None
    address: str | None
    city: str | None
    country: str | None
    location_url: str | None
    is_online: bool
    max_attendees: int | None
    created_by: int
    community_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    """Public subset of a user profile."""

    user_id: int
    bio: str | None
    city: str | None
    country: str | None
    profile_image_url: str | None

    model_config = ConfigDict(from_attributes=True)


class AttendeeResponse(BaseModel):
    """RSVP row with the attending user."""

    event_id: int
    user_id: int
    rsvp_status: str
    rsvp_time: datetime
    user: UserSummary

    model_config = ConfigDict(from_attributes=True)


class EventDetailResponse(EventResponse):
    """Event with its creator and attendee list."""

    created_by_user: UserSummary
    attendees: list[AttendeeResponse] = Field(default_factory=list)


class RsvpRequest(BaseModel):
    """RSVP submission."""

    rsvp_status: str = RSVP_GOING
