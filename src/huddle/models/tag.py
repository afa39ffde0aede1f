"""SQLAlchemy model for globally shared tags."""
from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from huddle.db.session import Base


class Tag(Base):
    """Interest/topic label shared by users and communities."""

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Names are global; creation goes through services.tags.ensure_tags.
    name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
