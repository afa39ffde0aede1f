"""User-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class CurrentUserResponse(BaseModel):
    """Profile of the authenticated user."""

    user_id: int
    external_id: str
    bio: str | None
    city: str | None
    country: str | None
    location_latitude: float | None
    location_longitude: float | None
    profile_image_url: str | None
    interest_ids: list[int] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class OnboardingResult(BaseModel):
    """Outcome message of an onboarding step."""

    message: str
