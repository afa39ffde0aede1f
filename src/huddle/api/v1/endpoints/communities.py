"""Community-related endpoints for the Huddle API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, File, HTTPException, Query, Response, UploadFile, status
from pydantic import BaseModel

from huddle.api.v1.dependencies import CurrentUserDep, SessionDep, StorageClientDep
from huddle.core.settings import settings
from huddle.models import Community, CommunityMember, Event
from huddle.models.community import MEMBER_ROLE_MEMBER, MEMBER_ROLE_OWNER
from huddle.schemas.common import ValidationErrors
from huddle.schemas.community import (
    CommunityCreate,
    CommunityCreated,
    CommunityResponse,
    ImageUploadResponse,
)
from huddle.schemas.event import EventCreate, EventResponse
from huddle.services import communities as community_service
from huddle.services import events as event_service
from huddle.services.images import prepare_upload, upload_filename
from huddle.services.storage import StorageDisabledError, StorageError
from huddle.services.wizard import STEP_BASIC_INFO, STEPS, CommunityWizard

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/communities", tags=["communities"])


class WizardStepRequest(BaseModel):
    """Wizard step to validate together with the current draft."""

    step: str = STEP_BASIC_INFO
    community: CommunityCreate


class WizardStepResponse(BaseModel):
    """Step reached after validation and any field errors."""

    step: str
    errors: dict[str, str]


def _get_community_or_404(db: SessionDep, community_id: int) -> Community:
    community = db.query(Community).filter(Community.id == community_id).first()
    if not community:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Community not found"
        )
    return community


@router.get("/", response_model=list[CommunityResponse])
async def list_communities(
    db: SessionDep,
    limit: int = Query(100, ge=1, le=100),
) -> list[Community]:
    """List communities with their tags for discovery."""
    return list(community_service.list_communities(db, limit=limit))


@router.post("/validate", response_model=WizardStepResponse)
async def validate_step(payload: WizardStepRequest) -> WizardStepResponse:
    """Validate a wizard step and report the step the client may move to.

    Nothing is written; invalid drafts keep the current step.
    """
    if payload.step not in STEPS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown wizard step: {payload.step}",
        )
    wizard = CommunityWizard(step=payload.step, draft=payload.community)
    wizard.next()
    return WizardStepResponse(step=wizard.step, errors=wizard.errors)


@router.post("/", response_model=CommunityCreated, status_code=status.HTTP_201_CREATED)
async def create_community(
    community_data: CommunityCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CommunityCreated:
    """Create a community with chat rooms, tags and the owner's membership."""
    try:
        community = community_service.create_full_community(db, current_user, community_data)
    except community_service.CommunityValidationError as err:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=ValidationErrors(errors=err.errors).model_dump(),
        ) from err
    except community_service.CommunityCreationError as err:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(err),
        ) from err
    return CommunityCreated(community_id=community.id)


@router.post("/images", response_model=ImageUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_community_image(
    current_user: CurrentUserDep,
    storage: StorageClientDep,
    file: UploadFile = File(...),
) -> ImageUploadResponse:
    """Upload a community cover image and return its public URL."""
    data = await file.read()
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty file")
    if len(data) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="File too large",
        )

    data, content_type = prepare_upload(data, file.content_type)
    try:
        url = await storage.upload_community_image(
            data,
            upload_filename(file.filename or "image.jpg", content_type),
            current_user.user_id,
            content_type=content_type,
        )
    except StorageDisabledError as err:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Image uploads are not available",
        ) from err
    except StorageError as err:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to upload image",
        ) from err
    return ImageUploadResponse(url=url)


@router.get("/{community_id}", response_model=CommunityResponse)
async def get_community(
    community_id: int,
    db: SessionDep,
) -> Community:
    """Get a specific community by ID."""
    community = community_service.get_community(db, community_id)
    if not community:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Community not found"
        )
    return community


@router.post("/{community_id}/join", status_code=status.HTTP_201_CREATED)
async def join_community(
    community_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, str]:
    """Join a community."""
    community = _get_community_or_404(db, community_id)

    existing_membership = db.query(CommunityMember).filter(
        CommunityMember.community_id == community_id,
        CommunityMember.user_id == current_user.user_id
    ).first()

    if existing_membership:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Already a member of this community"
        )

    membership = CommunityMember(
        community_id=community_id,
        user_id=current_user.user_id,
        role=MEMBER_ROLE_MEMBER,
    )
    db.add(membership)
    community.member_count = (community.member_count or 0) + 1
    db.commit()

    return {"status": "joined"}


@router.delete(
    "/{community_id}/leave",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def leave_community(
    community_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Response:
    """Leave a community."""
    community = _get_community_or_404(db, community_id)

    membership = db.query(CommunityMember).filter(
        CommunityMember.community_id == community_id,
        CommunityMember.user_id == current_user.user_id
    ).first()

    if not membership:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Not a member of this community"
        )
    if membership.role == MEMBER_ROLE_OWNER:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="The owner cannot leave the community"
        )

    db.delete(membership)
    community.member_count = max(0, (community.member_count or 0) - 1)
    db.commit()

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{community_id}/events", response_model=list[EventResponse])
async def list_community_events(
    community_id: int,
    db: SessionDep,
) -> list[Event]:
    """List events of a community ordered by start time."""
    _get_community_or_404(db, community_id)
    return list(event_service.community_events(db, community_id))


@router.post(
    "/{community_id}/events",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_community_event(
    community_id: int,
    event_data: EventCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Event:
    """Create an event in a community."""
    community = _get_community_or_404(db, community_id)
    try:
        return event_service.create_event(db, community, current_user, event_data)
    except event_service.EventValidationError as err:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=ValidationErrors(errors=err.errors).model_dump(),
        ) from err
