"""SQLAlchemy models for communities, their chat rooms, tags and members."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from huddle.db.session import Base
from huddle.db.time import utcnow
from huddle.models.tag import Tag

CHAT_ROOM_TYPES = ("text", "voice", "video")
MEMBER_ROLE_OWNER = "owner"
MEMBER_ROLE_MEMBER = "member"


class Community(Base):
    """Named group with membership, tags and chat rooms."""

    __tablename__ = "communities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    owner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.user_id"), nullable=False, index=True
    )
    city: Mapped[str | None] = mapped_column(Text, nullable=True)
    country: Mapped[str | None] = mapped_column(Text, nullable=True)
    cover_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Adjusted on create/join/leave; never recounted from community_members.
    member_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_online: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    chat_rooms: Mapped[list[ChatRoom]] = relationship(
        "ChatRoom", back_populates="community", cascade="all, delete-orphan"
    )
    tag_links: Mapped[list[CommunityTag]] = relationship(
        "CommunityTag", back_populates="community", cascade="all, delete-orphan"
    )

    @property
    def tag_names(self) -> list[str]:
        """Return tag names in insertion order."""
        return [link.tag.name for link in self.tag_links if link.tag is not None]


class ChatRoom(Base):
    """Text, voice or video room belonging to a community."""

    __tablename__ = "chat_rooms"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    community_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("communities.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(Text, nullable=False, default="text")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    community: Mapped[Community] = relationship("Community", back_populates="chat_rooms")


class CommunityTag(Base):
    """Join table mapping communities to tags."""

    __tablename__ = "community_tags"
    __table_args__ = (UniqueConstraint("community_id", "tag_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    community_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("communities.id", ondelete="CASCADE"), nullable=False
    )
    tag_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False
    )

    community: Mapped[Community] = relationship("Community", back_populates="tag_links")
    tag: Mapped[Tag] = relationship("Tag", lazy="joined")


class CommunityMember(Base):
    """Join table mapping users into communities."""

    __tablename__ = "community_members"

    community_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("communities.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True
    )
    role: Mapped[str] = mapped_column(Text, nullable=False, default=MEMBER_ROLE_MEMBER)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
