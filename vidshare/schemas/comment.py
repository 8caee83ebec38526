from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from vidshare.core.validation import require_text
from vidshare.schemas.common import CamelModel
from vidshare.schemas.user import UserPublic


class CommentRequest(CamelModel):
    content: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: Optional[str]) -> str:
        return require_text(v, "Comment content is required")


class CommentResponse(CamelModel):
    id: str
    content: str
    video_id: str
    owner_id: str
    created_at: datetime
    updated_at: datetime


class CommentWithOwner(CommentResponse):
    owner: UserPublic
    likes_count: int
