"""Onboarding form endpoints.

Both endpoints take form-encoded fields and answer ``{"message": ...}`` on
success or ``{"error": ...}`` with a non-2xx status on failure.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile, status
from fastapi.responses import JSONResponse

from huddle.api.v1.dependencies import ClaimsDep, IdentityClientDep, SessionDep
from huddle.core.settings import settings
from huddle.schemas.user import OnboardingResult
from huddle.services.onboarding import (
    OnboardingError,
    ProfilePhoto,
    complete_location_onboarding,
    complete_onboarding,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


def _error(message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/", response_model=OnboardingResult)
async def submit_profile(
    claims: ClaimsDep,
    db: SessionDep,
    identity: IdentityClientDep,
    bio: Annotated[str, Form()] = "",
    interests: Annotated[str, Form()] = "",
    profile_photo: Annotated[UploadFile | None, File(alias="profilePhoto")] = None,
) -> OnboardingResult | JSONResponse:
    """Store bio, interests and an optional profile photo."""
    photo: ProfilePhoto | None = None
    if profile_photo is not None:
        data = await profile_photo.read()
        if len(data) > settings.max_upload_bytes:
            return _error("Profile photo is too large", status.HTTP_413_REQUEST_ENTITY_TOO_LARGE)
        if data:
            photo = ProfilePhoto(
                data=data,
                filename=profile_photo.filename or "profile.jpg",
                content_type=profile_photo.content_type,
            )

    try:
        await complete_onboarding(
            db,
            identity,
            claims.external_id,
            bio=bio,
            interests_raw=interests,
            photo=photo,
        )
    except OnboardingError as err:
        logger.error("Onboarding error for %s: %s", claims.external_id, err)
        return _error(str(err))
    return OnboardingResult(message="Profile updated successfully")


@router.post("/location", response_model=OnboardingResult)
async def submit_location(
    claims: ClaimsDep,
    db: SessionDep,
    identity: IdentityClientDep,
    city: Annotated[str, Form()] = "",
    country: Annotated[str, Form()] = "",
    latitude: Annotated[str, Form()] = "",
    longitude: Annotated[str, Form()] = "",
) -> OnboardingResult | JSONResponse:
    """Store the user's location and mark onboarding complete."""
    try:
        await complete_location_onboarding(
            db,
            identity,
            claims.external_id,
            city=city,
            country=country,
            latitude=latitude,
            longitude=longitude,
        )
    except OnboardingError as err:
        logger.error("Location update error for %s: %s", claims.external_id, err)
        return _error(str(err))
    return OnboardingResult(message="Location updated successfully")
