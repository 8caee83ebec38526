from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from vidshare.core.validation import require_text
from vidshare.schemas.common import CamelModel


class TweetRequest(CamelModel):
    content: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: Optional[str]) -> str:
        return require_text(v, "Tweet content required")


class TweetResponse(CamelModel):
    id: str
    content: str
    owner_id: str
    created_at: datetime
    updated_at: datetime
    likes_count: int = 0
