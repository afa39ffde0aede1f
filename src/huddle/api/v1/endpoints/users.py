"""Endpoints exposing the authenticated user's profile."""

from __future__ import annotations

from fastapi import APIRouter

from huddle.api.v1.dependencies import CurrentUserDep
from huddle.models import User
from huddle.schemas.user import CurrentUserResponse

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=CurrentUserResponse)
async def get_me(current_user: CurrentUserDep) -> User:
    """Return the numeric id and profile of the caller."""
    return current_user
