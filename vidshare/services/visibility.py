from __future__ import annotations

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import NotFoundError
from vidshare.models.video import Video


def visible_to(viewer_id: Optional[str]) -> Any:
    """Filter matching videos ``viewer_id`` may see: published ones and their own."""
    if viewer_id:
        return Video.is_published.is_(True) | (Video.owner_id == viewer_id)
    return Video.is_published.is_(True)


def is_visible(video: Video, viewer_id: Optional[str]) -> bool:
    return video.is_published or (viewer_id is not None and video.owner_id == viewer_id)


async def get_visible_video(
    db: AsyncSession, video_id: str, viewer_id: Optional[str]
) -> Video:
    # Hidden videos look missing to everyone but their owner.
    video = await db.get(Video, video_id)
    if video is None or not is_visible(video, viewer_id):
        raise NotFoundError("Video not found")
    return video
