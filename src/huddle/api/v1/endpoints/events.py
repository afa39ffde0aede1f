"""Event endpoints for the Huddle API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from huddle.api.v1.dependencies import CurrentUserDep, SessionDep
from huddle.models import Event, EventAttendee
from huddle.schemas.event import (
    AttendeeResponse,
    EventDetailResponse,
    EventResponse,
    RsvpRequest,
)
from huddle.services import events as event_service

router = APIRouter(prefix="/events", tags=["events"])


@router.get("/latest", response_model=list[EventResponse])
async def latest_events(
    db: SessionDep,
    limit: int = Query(3, ge=1, le=50),
) -> list[Event]:
    """Return the most recently created events."""
    return list(event_service.latest_events(db, limit=limit))


@router.get("/{event_id}", response_model=EventDetailResponse)
async def get_event(event_id: int, db: SessionDep) -> Event:
    """Get an event with its creator and attendees."""
    event = event_service.get_event_with_details(db, event_id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return event


@router.post("/{event_id}/rsvp", response_model=AttendeeResponse)
async def rsvp_event(
    event_id: int,
    payload: RsvpRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> EventAttendee:
    """Create or update the caller's RSVP."""
    event = db.query(Event).filter(Event.id == event_id).first()
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    try:
        return event_service.rsvp(db, event, current_user, payload.rsvp_status)
    except event_service.EventFullError as err:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(err)) from err
    except ValueError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
