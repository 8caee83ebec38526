from __future__ import annotations

from datetime import datetime

from vidshare.schemas.common import CamelModel
from vidshare.schemas.video import VideoResponse


class LikeToggleResponse(CamelModel):
    liked: bool


class LikedVideoItem(CamelModel):
    liked_at: datetime
    video: VideoResponse
