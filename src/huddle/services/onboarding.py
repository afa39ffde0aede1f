"""Onboarding writes spanning the identity provider and the database.

The two systems are updated one after the other with no atomicity between
them; a failure in either surfaces as :class:`OnboardingError`.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from huddle.db.time import utcnow
from huddle.models import Tag, User, UserTag
from huddle.services.identity import IdentityClient, IdentityError
from huddle.services.images import prepare_upload, upload_filename

logger = logging.getLogger(__name__)

# Range of the integer primary key column.
MAX_TAG_ID = 2**63 - 1


class OnboardingError(RuntimeError):
    """User-facing onboarding failure."""


@dataclass(frozen=True)
class ProfilePhoto:
    """Uploaded photo bytes with their original metadata."""

    data: bytes
    filename: str = "profile.jpg"
    content_type: str | None = None


def parse_interest_ids(raw: str | None) -> list[int]:
    """Decode a JSON-encoded list of tag ids.

    Entries that are not whole numbers within the id column's range are dropped.
    """
    if not raw:
        return []
    try:
        values = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise OnboardingError("Interests must be a JSON list") from exc
    if not isinstance(values, list):
        return []

    ids: list[int] = []
    for value in values:
        if isinstance(value, bool):
            continue
        if isinstance(value, int):
            tag_id = value
        else:
            try:
                number = float(value)
            except (TypeError, ValueError):
                continue
            if not (math.isfinite(number) and number.is_integer()):
                continue
            tag_id = int(number)
        if 1 <= tag_id <= MAX_TAG_ID and tag_id not in ids:
            ids.append(tag_id)
    return ids


def get_or_create_user(db: Session, external_id: str, **fields: Any) -> User:
    """Return the user linked to ``external_id``, inserting it when missing."""
    user = db.query(User).filter(User.external_id == external_id).first()
    if user is None:
        user = User(external_id=external_id, **fields)
        db.add(user)
        db.flush()
    return user


def replace_user_tags(db: Session, user: User, tag_ids: list[int]) -> None:
    """Delete every interest of ``user`` and insert ``tag_ids``; unknown ids are skipped."""
    db.query(UserTag).filter(UserTag.user_id == user.user_id).delete(synchronize_session=False)
    if tag_ids:
        known = {tag_id for (tag_id,) in db.query(Tag.id).filter(Tag.id.in_(tag_ids)).all()}
        skipped = [tag_id for tag_id in tag_ids if tag_id not in known]
        if skipped:
            logger.warning("Ignoring unknown interest ids for user %d: %s", user.user_id, skipped)
        for tag_id in tag_ids:
            if tag_id in known:
                db.add(UserTag(user_id=user.user_id, tag_id=tag_id))
    db.flush()
    db.expire(user, ["tags"])


async def complete_onboarding(
    db: Session,
    identity: IdentityClient,
    external_id: str,
    *,
    bio: str | None,
    interests_raw: str | None,
    photo: ProfilePhoto | None = None,
) -> User:
    """Store bio and interests in both the identity provider and the database."""
    interest_ids = parse_interest_ids(interests_raw)

    if photo is not None and photo.data:
        data, content_type = prepare_upload(photo.data, photo.content_type)
        try:
            await identity.update_profile_image(
                external_id,
                data,
                filename=upload_filename(photo.filename, content_type),
                content_type=content_type,
            )
        except IdentityError as exc:
            logger.error("Failed to upload profile image for %s: %s", external_id, exc)

    try:
        await identity.update_metadata(
            external_id,
            unsafe={"bio": bio},
            public={"onboardingBioComplete": True, "interests": interest_ids},
        )
    except IdentityError as exc:
        logger.error("Onboarding metadata update failed for %s: %s", external_id, exc)
        raise OnboardingError("Failed to complete onboarding") from exc

    try:
        user = get_or_create_user(db, external_id)
        user.bio = bio or None
        user.updated_at = utcnow()
        replace_user_tags(db, user, interest_ids)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Onboarding database write failed for %s: %s", external_id, exc)
        raise OnboardingError("Failed to update user in database") from exc

    db.refresh(user)
    return user


def _parse_coordinate(value: str | None) -> float | None:
    if value is None or not str(value).strip():
        return None
    try:
        number = float(value)
    except ValueError as exc:
        raise OnboardingError("Latitude and longitude must be numbers") from exc
    return number if math.isfinite(number) else None


async def complete_location_onboarding(
    db: Session,
    identity: IdentityClient,
    external_id: str,
    *,
    city: str | None,
    country: str | None,
    latitude: str | None = None,
    longitude: str | None = None,
) -> User:
    """Store the user's location and mark onboarding complete."""
    city = (city or "").strip()
    country = (country or "").strip()
    if not city or not country:
        raise OnboardingError("City and country are required")

    lat = _parse_coordinate(latitude)
    lng = _parse_coordinate(longitude)

    try:
        await identity.update_metadata(
            external_id,
            public={"onboardingComplete": True, "location": {"city": city, "country": country}},
        )
    except IdentityError as exc:
        logger.error("Location metadata update failed for %s: %s", external_id, exc)
        raise OnboardingError("Failed to update location") from exc

    try:
        user = get_or_create_user(db, external_id)
        user.city = city
        user.country = country
        user.location_latitude = lat
        user.location_longitude = lng
        user.updated_at = utcnow()
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Error updating user location for %s: %s", external_id, exc)
        raise OnboardingError("Failed to update location") from exc

    db.refresh(user)
    return user
