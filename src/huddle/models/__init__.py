"""SQLAlchemy models for the Huddle application."""

from .community import ChatRoom, Community, CommunityMember, CommunityTag
from .event import Event, EventAttendee
from .tag import Tag
from .user import User, UserTag

__all__ = [
    "ChatRoom", "Community", "CommunityMember", "CommunityTag",
    "Event", "EventAttendee",
    "Tag",
    "User", "UserTag",
]
