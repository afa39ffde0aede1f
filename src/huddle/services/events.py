"""Event validation, creation and RSVP handling."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from urllib.parse import urlparse

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from huddle.db.time import utcnow
from huddle.models import Community, Event, EventAttendee, User
from huddle.models.event import RSVP_GOING, RSVP_STATUSES
from huddle.schemas.event import EventCreate

logger = logging.getLogger(__name__)

TITLE_MIN_LENGTH = 3


class EventValidationError(ValueError):
    """Raised when an event submission fails field validation."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("Please fix the errors in the form.")
        self.errors = errors


class EventFullError(RuntimeError):
    """Raised when a 'going' RSVP would exceed ``max_attendees``."""


def _as_aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def parse_max_attendees(value: str | int | None) -> int | None:
    """Return the positive attendee limit, ``None`` when blank.

    Raises ``ValueError`` for non-numeric or non-positive input.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    number = int(value)
    if number <= 0:
        raise ValueError("max_attendees must be positive")
    return number


def _is_valid_url(value: str) -> bool:
    parsed = urlparse(value)
    return bool(parsed.scheme and parsed.netloc)


def validate_event(data: EventCreate) -> dict[str, str]:
    """Return field errors for an event submission."""
    errors: dict[str, str] = {}

    title = data.title.strip()
    if not title:
        errors["title"] = "Event title is required"
    elif len(title) < TITLE_MIN_LENGTH:
        errors["title"] = "Title must be at least 3 characters"

    if not data.description.strip():
        errors["description"] = "Event description is required"

    if data.start_time is None:
        errors["start_time"] = "Start date/time is required"
    elif data.end_time is not None and _as_aware(data.start_time) > _as_aware(data.end_time):
        errors["start_time"] = "Start date cannot be after end date"

    if not data.address.strip():
        errors["address"] = "Address is required"
    if not data.city.strip():
        errors["city"] = "City is required"
    if not data.country.strip():
        errors["country"] = "Country is required"

    try:
        parse_max_attendees(data.max_attendees)
    except ValueError:
        errors["max_attendees"] = "Maximum attendees must be a positive number"

    location_url = data.location_url.strip()
    if location_url and not _is_valid_url(location_url):
        errors["location_url"] = "Please enter a valid URL (e.g., https://maps.google.com)"

    return errors


def create_event(db: Session, community: Community, creator: User, data: EventCreate) -> Event:
    """Validate and insert an event for ``community``."""
    errors = validate_event(data)
    if errors:
        raise EventValidationError(errors)

    event = Event(
        title=data.title.strip(),
        description=data.description.strip(),
        start_time=data.start_time,
        end_time=data.end_time,
        community_id=community.id,
        created_by=creator.user_id,
        address=data.address.strip(),
        city=data.city.strip(),
        country=data.country.strip(),
        is_online=False,
        location_url=data.location_url.strip() or None,
        max_attendees=parse_max_attendees(data.max_attendees),
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Created event %d in community %d", event.id, community.id)
    return event


def get_event_with_details(db: Session, event_id: int) -> Event | None:
    """Return an event with its creator and attendees (with users) loaded."""
    return (
        db.query(Event)
        .options(
            selectinload(Event.created_by_user),
            selectinload(Event.attendees).selectinload(EventAttendee.user),
        )
        .filter(Event.id == event_id)
        .first()
    )


def latest_events(db: Session, limit: int = 3) -> Sequence[Event]:
    """Return the most recently created events."""
    return db.query(Event).order_by(Event.created_at.desc(), Event.id.desc()).limit(limit).all()


def community_events(db: Session, community_id: int) -> Sequence[Event]:
    """Return a community's events ordered by start time."""
    return (
        db.query(Event)
        .filter(Event.community_id == community_id)
        .order_by(Event.start_time)
        .all()
    )


def rsvp(db: Session, event: Event, user: User, status: str) -> EventAttendee:
    """Create or update the user's RSVP for ``event``.

    Raises:
        ValueError: For an unknown status.
        EventFullError: When a new 'going' RSVP would exceed the limit.
    """
    if status not in RSVP_STATUSES:
        raise ValueError(f"Unknown RSVP status: {status}")

    attendee = (
        db.query(EventAttendee)
        .filter(EventAttendee.event_id == event.id, EventAttendee.user_id == user.user_id)
        .first()
    )

    already_going = attendee is not None and attendee.rsvp_status == RSVP_GOING
    if status == RSVP_GOING and not already_going and event.max_attendees is not None:
        going = (
            db.query(func.count())
            .select_from(EventAttendee)
            .filter(EventAttendee.event_id == event.id, EventAttendee.rsvp_status == RSVP_GOING)
            .scalar()
            or 0
        )
        if going >= event.max_attendees:
            raise EventFullError("Event is full")

    if attendee is None:
        attendee = EventAttendee(event_id=event.id, user_id=user.user_id)
        db.add(attendee)
    attendee.rsvp_status = status
    attendee.rsvp_time = utcnow()
    db.commit()
    db.refresh(attendee)
    return attendee
