"""Interest tag endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from huddle.api.v1.dependencies import SessionDep
from huddle.schemas.tag import InterestResponse
from huddle.services.tags import list_interests

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("/", response_model=list[InterestResponse])
async def get_interests(db: SessionDep) -> list[InterestResponse]:
    """Return every tag as an interest option, ordered by name."""
    return [InterestResponse(id=str(tag.id), label=tag.name) for tag in list_interests(db)]
