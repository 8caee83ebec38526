from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.models.like import Like, LikeTarget
from vidshare.models.subscription import Subscription
from vidshare.models.user import User
from vidshare.models.video import Video
from vidshare.schemas.dashboard import ChannelStatsResponse
from vidshare.schemas.video import VideoResponse


class DashboardService:
    @staticmethod
    async def get_channel_stats(db: AsyncSession, user: User) -> ChannelStatsResponse:
        owned_videos = select(Video.id).where(Video.owner_id == user.id)
        video_totals = await db.execute(
            select(func.count(Video.id), func.coalesce(func.sum(Video.views), 0)).where(
                Video.owner_id == user.id
            )
        )
        total_videos, total_views = video_totals.one()
        total_subscribers = (
            await db.execute(
                select(func.count(Subscription.id)).where(
                    Subscription.channel_id == user.id
                )
            )
        ).scalar_one()
        total_likes = (
            await db.execute(
                select(func.count(Like.id)).where(
                    Like.target_type == LikeTarget.VIDEO.value,
                    Like.target_id.in_(owned_videos),
                )
            )
        ).scalar_one()
        return ChannelStatsResponse(
            total_videos=total_videos,
            total_views=int(total_views),
            total_subscribers=total_subscribers,
            total_likes=total_likes,
        )

    @staticmethod
    async def get_channel_videos(db: AsyncSession, user: User) -> list[VideoResponse]:
        result = await db.execute(
            select(Video)
            .where(Video.owner_id == user.id)
            .order_by(Video.created_at.desc(), Video.id)
        )
        return [VideoResponse.model_validate(video) for video in result.scalars()]
