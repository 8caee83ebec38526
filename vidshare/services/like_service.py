from __future__ import annotations

import logging
from typing import Any, Type

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import NotFoundError
from vidshare.models.base import BaseRecord
from vidshare.models.comment import Comment
from vidshare.models.like import Like, LikeTarget
from vidshare.models.tweet import Tweet
from vidshare.models.user import User
from vidshare.models.video import Video
from vidshare.schemas.like import LikedVideoItem
from vidshare.schemas.video import VideoResponse
from vidshare.services.toggle import toggle_relation
from vidshare.services.visibility import get_visible_video, visible_to

logger = logging.getLogger("vidshare.like_service")

_TARGET_MODELS: dict[LikeTarget, Type[BaseRecord]] = {
    LikeTarget.VIDEO: Video,
    LikeTarget.COMMENT: Comment,
    LikeTarget.TWEET: Tweet,
}


def likes_count_column(target: LikeTarget, target_id_column: Any) -> Any:
    """Correlated count of likes on the row that ``target_id_column`` belongs to."""
    return (
        select(func.count(Like.id))
        .where(Like.target_type == target.value, Like.target_id == target_id_column)
        .scalar_subquery()
    )


class LikeService:
    @staticmethod
    async def _ensure_target(
        db: AsyncSession, user_id: str, target: LikeTarget, target_id: str
    ) -> None:
        if target is LikeTarget.VIDEO:
            await get_visible_video(db, target_id, user_id)
            return
        model = _TARGET_MODELS[target]
        row = await db.get(model, target_id)
        if row is None:
            raise NotFoundError(f"{target.value.capitalize()} not found")
        if target is LikeTarget.COMMENT:
            # Comments under a hidden video are hidden with it.
            await get_visible_video(db, row.video_id, user_id)

    @staticmethod
    async def toggle_like(
        db: AsyncSession, user: User, target: LikeTarget, target_id: str
    ) -> bool:
        user_id = user.id
        await LikeService._ensure_target(db, user_id, target, target_id)

        liked = await toggle_relation(
            db,
            Like,
            liked_by_id=user_id,
            target_type=target.value,
            target_id=target_id,
        )
        logger.info(
            "Like toggled: user_id=%s target=%s:%s liked=%s",
            user_id,
            target.value,
            target_id,
            liked,
        )
        return liked

    @staticmethod
    async def is_liked(
        db: AsyncSession, user_id: str, target: LikeTarget, target_id: str
    ) -> bool:
        result = await db.execute(
            select(Like.id).where(
                Like.liked_by_id == user_id,
                Like.target_type == target.value,
                Like.target_id == target_id,
            )
        )
        return result.first() is not None

    @staticmethod
    async def list_liked_videos(db: AsyncSession, user: User) -> list[LikedVideoItem]:
        stmt = (
            select(Like.created_at, Video)
            .select_from(Like)
            .join(Video, Video.id == Like.target_id)
            .where(
                Like.liked_by_id == user.id,
                Like.target_type == LikeTarget.VIDEO.value,
                visible_to(user.id),
            )
            .order_by(Like.created_at.desc(), Like.id)
        )
        rows = (await db.execute(stmt)).all()
        return [
            LikedVideoItem(liked_at=liked_at, video=VideoResponse.model_validate(video))
            for liked_at, video in rows
        ]
