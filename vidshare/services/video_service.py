from __future__ import annotations

import logging
from typing import Optional

from fastapi import UploadFile
from sqlalchemy import Select, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import (
    ApiError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from vidshare.models.comment import Comment
from vidshare.models.like import Like, LikeTarget
from vidshare.models.playlist import PlaylistVideo
from vidshare.models.user import User
from vidshare.models.video import Video
from vidshare.models.watch_history import WatchHistoryEntry
from vidshare.schemas.user import UserPublic
from vidshare.schemas.video import (
    VideoDetailResponse,
    VideoPublishRequest,
    VideoResponse,
    VideoUpdateRequest,
)
from vidshare.services.like_service import LikeService, likes_count_column
from vidshare.services.media_service import MediaService
from vidshare.services.pagination import paginate
from vidshare.services.visibility import is_visible

logger = logging.getLogger("vidshare.video_service")

SORT_COLUMNS = {
    "createdAt": Video.created_at,
    "updatedAt": Video.updated_at,
    "views": Video.views,
    "duration": Video.duration,
    "title": Video.title,
}


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_listing_query(
    query: Optional[str],
    sort_by: str,
    sort_type: str,
    owner_id: Optional[str],
) -> Select[tuple[Video]]:
    column = SORT_COLUMNS.get(sort_by)
    if column is None:
        raise ValidationError(
            f"sortBy must be one of: {', '.join(sorted(SORT_COLUMNS))}"
        )
    if sort_type not in {"asc", "desc"}:
        raise ValidationError("sortType must be asc or desc")

    stmt = select(Video).where(Video.is_published.is_(True))
    if query:
        stmt = stmt.where(Video.title.ilike(f"%{_escape_like(query)}%", escape="\\"))
    if owner_id:
        stmt = stmt.where(Video.owner_id == owner_id)
    order = column.asc() if sort_type == "asc" else column.desc()
    return stmt.order_by(order, Video.id)


class VideoService:
    @staticmethod
    async def list_videos(
        db: AsyncSession,
        page: int,
        limit: int,
        query: Optional[str],
        sort_by: str,
        sort_type: str,
        owner_id: Optional[str],
    ) -> tuple[list[VideoResponse], int]:
        logger.info(
            "Fetching videos: page=%s limit=%s query=%r sort=%s:%s owner=%s",
            page,
            limit,
            query,
            sort_by,
            sort_type,
            owner_id,
        )
        stmt = build_listing_query(query, sort_by, sort_type, owner_id)
        rows, total = await paginate(db, stmt, page, limit)
        return [VideoResponse.model_validate(row[0]) for row in rows], total

    @staticmethod
    async def publish(
        db: AsyncSession,
        media: MediaService,
        owner: User,
        data: VideoPublishRequest,
        video_file: Optional[UploadFile],
        thumbnail: Optional[UploadFile],
    ) -> Video:
        if video_file is None or thumbnail is None:
            raise ValidationError("Video and thumbnail required")
        uploaded_video = await media.upload(video_file, "video", owner.id, "videoFile")
        try:
            uploaded_thumb = await media.upload(thumbnail, "image", owner.id, "thumbnail")
        except ApiError:
            await media.discard(uploaded_video.url)
            raise

        video = Video(
            owner_id=owner.id,
            title=data.title,
            description=data.description,
            video_url=uploaded_video.url,
            thumbnail_url=uploaded_thumb.url,
            duration=uploaded_video.duration,
        )
        if video.duration is None:
            logger.warning("Duration unknown for upload object=%s", uploaded_video.object_name)
        db.add(video)
        await db.commit()
        logger.info("Video published: video_id=%s owner_id=%s", video.id, owner.id)
        return video

    @staticmethod
    async def get_video(
        db: AsyncSession, video_id: str, viewer: Optional[User]
    ) -> VideoDetailResponse:
        stmt = (
            select(Video, User, likes_count_column(LikeTarget.VIDEO, Video.id))
            .join(User, User.id == Video.owner_id)
            .where(Video.id == video_id)
        )
        row = (await db.execute(stmt)).first()
        viewer_id = viewer.id if viewer is not None else None
        if row is None:
            raise NotFoundError("Video not found")
        video, owner, likes_count = row
        if not is_visible(video, viewer_id):
            raise NotFoundError("Video not found")
        is_liked = (
            await LikeService.is_liked(db, viewer_id, LikeTarget.VIDEO, video.id)
            if viewer_id
            else False
        )
        return VideoDetailResponse(
            **VideoResponse.model_validate(video).model_dump(),
            owner=UserPublic.model_validate(owner),
            likes_count=likes_count,
            is_liked=is_liked,
        )

    @staticmethod
    async def get_owned_video(db: AsyncSession, video_id: str, user: User) -> Video:
        video = await db.get(Video, video_id)
        if video is None:
            raise NotFoundError("Video not found")
        if video.owner_id != user.id:
            raise PermissionDeniedError("You are not allowed to modify this video")
        return video

    @staticmethod
    async def update_video(
        db: AsyncSession,
        media: MediaService,
        user: User,
        video_id: str,
        data: VideoUpdateRequest,
        thumbnail: Optional[UploadFile],
    ) -> Video:
        video = await VideoService.get_owned_video(db, video_id, user)
        if data.title is None and data.description is None and thumbnail is None:
            raise ValidationError("Nothing to update")
        if data.title is not None:
            video.title = data.title
        if data.description is not None:
            video.description = data.description
        replaced_thumbnail: Optional[str] = None
        if thumbnail is not None:
            uploaded = await media.upload(thumbnail, "image", user.id, "thumbnail")
            replaced_thumbnail = video.thumbnail_url
            video.thumbnail_url = uploaded.url
        await db.commit()
        await db.refresh(video)
        await media.discard(replaced_thumbnail)
        logger.info("Video updated: video_id=%s", video_id)
        return video

    @staticmethod
    async def delete_video(
        db: AsyncSession, media: MediaService, user: User, video_id: str
    ) -> None:
        """Delete a video together with everything that references it.

        The stored video and thumbnail objects are removed once the rows are gone.
        """
        video = await VideoService.get_owned_video(db, video_id, user)
        media_urls = (video.video_url, video.thumbnail_url)
        comment_ids = select(Comment.id).where(Comment.video_id == video_id)
        await db.execute(
            delete(Like)
            .where(
                or_(
                    (Like.target_type == LikeTarget.VIDEO.value)
                    & (Like.target_id == video_id),
                    (Like.target_type == LikeTarget.COMMENT.value)
                    & Like.target_id.in_(comment_ids),
                )
            )
            .execution_options(synchronize_session=False)
        )
        await db.execute(delete(Comment).where(Comment.video_id == video_id))
        await db.execute(delete(PlaylistVideo).where(PlaylistVideo.video_id == video_id))
        await db.execute(
            delete(WatchHistoryEntry).where(WatchHistoryEntry.video_id == video_id)
        )
        await db.delete(video)
        await db.commit()
        logger.info("Video deleted: video_id=%s", video_id)
        for url in media_urls:
            await media.discard(url)

    @staticmethod
    async def toggle_publish(db: AsyncSession, user: User, video_id: str) -> Video:
        video = await VideoService.get_owned_video(db, video_id, user)
        video.is_published = not video.is_published
        await db.commit()
        await db.refresh(video)
        logger.info(
            "Video publish toggled: video_id=%s published=%s", video_id, video.is_published
        )
        return video
