"""Tag-related Pydantic schemas."""

from pydantic import BaseModel


class InterestResponse(BaseModel):
    """Interest option as offered during onboarding."""

    id: str
    label: str
