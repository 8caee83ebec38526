from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import field_validator, model_validator

from vidshare.core.validation import require_text, rule_error
from vidshare.schemas.common import CamelModel


class PlaylistCreateRequest(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None

    @model_validator(mode="after")
    def require_fields(self) -> "PlaylistCreateRequest":
        if not (self.name or "").strip() or not (self.description or "").strip():
            raise rule_error("Name & description required")
        self.name = self.name.strip()
        self.description = self.description.strip()
        return self


class PlaylistUpdateRequest(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return require_text(v, "Playlist name cannot be empty")

    @model_validator(mode="after")
    def require_any(self) -> "PlaylistUpdateRequest":
        if self.name is None and self.description is None:
            raise rule_error("Name or description is required")
        return self


class PlaylistResponse(CamelModel):
    id: str
    name: str
    description: str
    owner_id: str
    total_videos: int = 0
    created_at: datetime
    updated_at: datetime


class PlaylistVideoItem(CamelModel):
    id: str
    title: str
    thumbnail_url: str
    duration: Optional[float] = None
    owner_id: str
    added_at: datetime


class PlaylistDetailResponse(PlaylistResponse):
    videos: list[PlaylistVideoItem]
