from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import field_validator

from vidshare.core.validation import require_text
from vidshare.schemas.common import CamelModel
from vidshare.schemas.user import UserPublic


class VideoResponse(CamelModel):
    id: str
    title: str
    description: str
    video_url: str
    thumbnail_url: str
    duration: Optional[float] = None
    views: int
    is_published: bool
    owner_id: str
    created_at: datetime
    updated_at: datetime


class VideoDetailResponse(VideoResponse):
    owner: UserPublic
    likes_count: int
    is_liked: bool


class VideoPublishRequest(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> str:
        return require_text(v, "Title is required")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> str:
        return require_text(v, "Description is required")


class VideoUpdateRequest(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None

    @field_validator("title", "description")
    @classmethod
    def strip_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        cleaned = v.strip()
        return cleaned or None
