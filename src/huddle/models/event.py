"""SQLAlchemy models for events and their attendees."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from huddle.db.session import Base
from huddle.db.time import utcnow
from huddle.models.user import User

RSVP_GOING = "going"
RSVP_MAYBE = "maybe"
RSVP_NOT_GOING = "not_going"
RSVP_STATUSES = (RSVP_GOING, RSVP_MAYBE, RSVP_NOT_GOING)


class Event(Base):
    """Scheduled gathering organised within a community."""

    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    city: Mapped[str | None] = mapped_column(Text, nullable=True)
    country: Mapped[str | None] = mapped_column(Text, nullable=True)
    location_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_online: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    max_attendees: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_by: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.user_id"), nullable=False, index=True
    )
    community_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("communities.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )

    created_by_user: Mapped[User] = relationship("User")
    attendees: Mapped[list[EventAttendee]] = relationship(
        "EventAttendee", back_populates="event", cascade="all, delete-orphan"
    )


class EventAttendee(Base):
    """RSVP row linking a user to an event."""

    __tablename__ = "event_attendees"

    event_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("events.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True
    )
    rsvp_status: Mapped[str] = mapped_column(Text, nullable=False, default=RSVP_GOING)
    rsvp_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    event: Mapped[Event] = relationship("Event", back_populates="attendees")
    user: Mapped[User] = relationship("User")
