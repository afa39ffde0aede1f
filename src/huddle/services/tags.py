"""Tag lookup and de-duplicating creation."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from sqlalchemy.orm import Session

from huddle.models import Tag

logger = logging.getLogger(__name__)

__all__ = ["normalize_tag_names", "ensure_tags", "list_interests"]


def normalize_tag_names(names: Iterable[str]) -> list[str]:
    """Trim names, drop blanks and duplicates, keep first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for raw in names:
        name = (raw or "").strip()
        if name and name not in seen:
            seen.add(name)
            result.append(name)
    return result


def ensure_tags(db: Session, names: Iterable[str]) -> dict[str, Tag]:
    """Return a tag for every name, inserting only the ones that do not exist yet.

    Rows are flushed, not committed; the caller owns the transaction.
    """
    tag_names = normalize_tag_names(names)
    if not tag_names:
        return {}

    existing = db.query(Tag).filter(Tag.name.in_(tag_names)).all()
    by_name = {tag.name: tag for tag in existing}

    missing = [name for name in tag_names if name not in by_name]
    if missing:
        logger.debug("Creating %d new tags", len(missing))
        for name in missing:
            tag = Tag(name=name)
            db.add(tag)
            by_name[name] = tag
        db.flush()

    return {name: by_name[name] for name in tag_names}


def list_interests(db: Session) -> Sequence[Tag]:
    """Return all tags ordered by name."""
    return db.query(Tag).order_by(Tag.name).all()
