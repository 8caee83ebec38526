from __future__ import annotations

from vidshare.schemas.common import CamelModel


class ChannelStatsResponse(CamelModel):
    total_videos: int
    total_views: int
    total_subscribers: int
    total_likes: int
