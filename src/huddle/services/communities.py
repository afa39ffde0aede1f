"""Community validation and the multi-table creation sequence."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from huddle.db.time import utcnow
from huddle.models import ChatRoom, Community, CommunityMember, CommunityTag, User
from huddle.models.community import MEMBER_ROLE_OWNER
from huddle.schemas.community import ChatRoomInput, CommunityCreate
from huddle.services.tags import ensure_tags, normalize_tag_names

logger = logging.getLogger(__name__)

NAME_MIN_LENGTH = 3
DEFAULT_CHAT_ROOM = ChatRoomInput(name="general", type="text")


class CommunityValidationError(ValueError):
    """Raised when a community submission fails field validation."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("Please fill in all required fields")
        self.errors = errors


class CommunityCreationError(RuntimeError):
    """Raised when the creation sequence fails after validation."""


def validate_basic_info(data: CommunityCreate) -> dict[str, str]:
    """Return field errors for the basic-info step."""
    errors: dict[str, str] = {}

    name = data.name.strip()
    if not name:
        errors["name"] = "Community name is required"
    elif len(name) < NAME_MIN_LENGTH:
        errors["name"] = "Name must be at least 3 characters"

    if not data.description.strip():
        errors["description"] = "Description is required"

    if not data.country.strip():
        errors["country"] = "Please select a country"
    elif not data.city.strip():
        errors["city"] = "Please select a city/state"

    if not normalize_tag_names(data.tags):
        errors["tags"] = "Add at least one tag"

    return errors


def validate_chat_rooms(data: CommunityCreate) -> dict[str, str]:
    """Return field errors for the chat-rooms step."""
    if any(not room.name.strip() for room in data.chat_rooms):
        return {"chat_rooms": "All chat rooms must have a name."}
    return {}


def validate_community(data: CommunityCreate) -> dict[str, str]:
    """Return all field errors of a submission."""
    return {**validate_basic_info(data), **validate_chat_rooms(data)}


def create_full_community(db: Session, owner: User, data: CommunityCreate) -> Community:
    """Create a community with its chat rooms, tags and owner membership.

    Steps run in order (community, chat rooms, tags, membership) and are
    committed together; any failure rolls the whole sequence back.

    Raises:
        CommunityValidationError: If the submission is invalid. Nothing is written.
        CommunityCreationError: If a database write fails.
    """
    errors = validate_community(data)
    if errors:
        raise CommunityValidationError(errors)

    try:
        community = Community(
            name=data.name.strip(),
            description=data.description.strip(),
            owner_id=owner.user_id,
            city=data.city.strip() or None,
            country=data.country.strip() or None,
            cover_image_url=data.cover_image_url or None,
            is_online=data.is_online,
            is_private=data.is_private,
            member_count=1,
        )
        db.add(community)
        db.flush()

        rooms = data.chat_rooms or [DEFAULT_CHAT_ROOM]
        for room in rooms:
            db.add(ChatRoom(community_id=community.id, name=room.name.strip(), type=room.type))

        tags = ensure_tags(db, data.tags)
        for tag in tags.values():
            db.add(CommunityTag(community_id=community.id, tag_id=tag.id))

        db.add(
            CommunityMember(
                community_id=community.id,
                user_id=owner.user_id,
                role=MEMBER_ROLE_OWNER,
                joined_at=utcnow(),
            )
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Error creating community %r: %s", data.name, exc)
        raise CommunityCreationError("Failed to create community.") from exc

    db.refresh(community)
    logger.info("Created community %d owned by user %d", community.id, owner.user_id)
    return community


def list_communities(db: Session, limit: int = 100) -> Sequence[Community]:
    """Return communities with their tags for the discover page."""
    return (
        db.query(Community)
        .options(selectinload(Community.tag_links), selectinload(Community.chat_rooms))
        .order_by(Community.created_at.desc(), Community.id.desc())
        .limit(limit)
        .all()
    )


def get_community(db: Session, community_id: int) -> Community | None:
    """Return a single community with tags and chat rooms loaded."""
    return (
        db.query(Community)
        .options(selectinload(Community.tag_links), selectinload(Community.chat_rooms))
        .filter(Community.id == community_id)
        .first()
    )
