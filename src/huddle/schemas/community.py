"""Community-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ChatRoomType = Literal["text", "voice", "video"]


class ChatRoomInput(BaseModel):
    """Chat room entry of the creation wizard."""

    name: str = ""
    type: ChatRoomType = "text"


def _default_chat_rooms() -> list[ChatRoomInput]:
    return [ChatRoomInput(name="general", type="text")]


class CommunityCreate(BaseModel):
    """Schema for creating a new community.

    Fields default to empty values so that missing input is reported by the
    field-level validation in ``huddle.services.communities`` rather than by
    schema parsing.
    """

    name: str = ""
    description: str = ""
    country: str = ""
    city: str = ""
    tags: list[str] = Field(default_factory=list)
    chat_rooms: list[ChatRoomInput] = Field(default_factory=_default_chat_rooms)
    is_private: bool = False
    is_online: bool = False
    cover_image_url: str | None = None


class ChatRoomResponse(BaseModel):
    """Chat room information returned by the API."""

    id: int
    name: str
    type: str

    model_config = ConfigDict(from_attributes=True)


class CommunityResponse(BaseModel):
    """Schema for community information returned by the API."""

    id: int
    name: str
    description: str
    owner_id: int
    city: str | None
    country: str | None
    cover_image_url: str | None
    member_count: int
    is_online: bool
    is_private: bool
    created_at: datetime
    tags: list[str] = Field(default_factory=list, validation_alias="tag_names")
    chat_rooms: list[ChatRoomResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class CommunityCreated(BaseModel):
    """Result of the full community creation sequence."""

    success: bool = True
    community_id: int


class ImageUploadResponse(BaseModel):
    """Public URL of an uploaded image."""

    url: str
