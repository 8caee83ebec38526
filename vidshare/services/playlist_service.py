from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import NotFoundError, PermissionDeniedError
from vidshare.models.playlist import Playlist, PlaylistVideo
from vidshare.models.user import User
from vidshare.models.video import Video
from vidshare.schemas.playlist import (
    PlaylistCreateRequest,
    PlaylistDetailResponse,
    PlaylistResponse,
    PlaylistUpdateRequest,
    PlaylistVideoItem,
)
from vidshare.services.visibility import get_visible_video, visible_to

logger = logging.getLogger("vidshare.playlist_service")


def _video_count_column(viewer_id: Optional[str]):
    return (
        select(func.count(PlaylistVideo.id))
        .join(Video, Video.id == PlaylistVideo.video_id)
        .where(PlaylistVideo.playlist_id == Playlist.id, visible_to(viewer_id))
        .scalar_subquery()
    )


class PlaylistService:
    @staticmethod
    async def _get_owned(db: AsyncSession, playlist_id: str, user: User) -> Playlist:
        playlist = await db.get(Playlist, playlist_id)
        if playlist is None:
            raise NotFoundError("Playlist not found")
        if playlist.owner_id != user.id:
            raise PermissionDeniedError("You are not allowed to modify this playlist")
        return playlist

    @staticmethod
    def _to_response(playlist: Playlist, total_videos: int) -> PlaylistResponse:
        return PlaylistResponse(
            id=playlist.id,
            name=playlist.name,
            description=playlist.description,
            owner_id=playlist.owner_id,
            total_videos=total_videos,
            created_at=playlist.created_at,
            updated_at=playlist.updated_at,
        )

    @staticmethod
    async def _count_videos(db: AsyncSession, playlist_id: str, viewer_id: str) -> int:
        result = await db.execute(
            select(func.count(PlaylistVideo.id))
            .join(Video, Video.id == PlaylistVideo.video_id)
            .where(PlaylistVideo.playlist_id == playlist_id, visible_to(viewer_id))
        )
        return result.scalar_one()

    @staticmethod
    async def create_playlist(
        db: AsyncSession, user: User, data: PlaylistCreateRequest
    ) -> PlaylistResponse:
        playlist = Playlist(name=data.name, description=data.description, owner_id=user.id)
        db.add(playlist)
        await db.commit()
        logger.info("Playlist created: playlist_id=%s", playlist.id)
        return PlaylistService._to_response(playlist, 0)

    @staticmethod
    async def list_user_playlists(db: AsyncSession, owner_id: str) -> list[PlaylistResponse]:
        stmt = (
            select(Playlist, _video_count_column(None))
            .where(Playlist.owner_id == owner_id)
            .order_by(Playlist.created_at.desc(), Playlist.id)
        )
        rows = (await db.execute(stmt)).all()
        return [PlaylistService._to_response(playlist, count) for playlist, count in rows]

    @staticmethod
    async def get_playlist(
        db: AsyncSession, playlist_id: str, viewer_id: Optional[str]
    ) -> PlaylistDetailResponse:
        """Playlist with the member videos ``viewer_id`` is allowed to see."""
        playlist = await db.get(Playlist, playlist_id)
        if playlist is None:
            raise NotFoundError("Playlist not found")
        stmt = (
            select(Video, PlaylistVideo.added_at)
            .select_from(PlaylistVideo)
            .join(Video, Video.id == PlaylistVideo.video_id)
            .where(PlaylistVideo.playlist_id == playlist_id, visible_to(viewer_id))
            .order_by(PlaylistVideo.added_at, PlaylistVideo.id)
        )
        rows = (await db.execute(stmt)).all()
        videos = [
            PlaylistVideoItem(
                id=video.id,
                title=video.title,
                thumbnail_url=video.thumbnail_url,
                duration=video.duration,
                owner_id=video.owner_id,
                added_at=added_at,
            )
            for video, added_at in rows
        ]
        base = PlaylistService._to_response(playlist, len(videos))
        return PlaylistDetailResponse(**base.model_dump(), videos=videos)

    @staticmethod
    async def update_playlist(
        db: AsyncSession, user: User, playlist_id: str, data: PlaylistUpdateRequest
    ) -> PlaylistResponse:
        playlist = await PlaylistService._get_owned(db, playlist_id, user)
        if data.name is not None:
            playlist.name = data.name
        if data.description is not None:
            playlist.description = data.description
        await db.commit()
        await db.refresh(playlist)
        total = await PlaylistService._count_videos(db, playlist_id, user.id)
        return PlaylistService._to_response(playlist, total)

    @staticmethod
    async def delete_playlist(db: AsyncSession, user: User, playlist_id: str) -> None:
        playlist = await PlaylistService._get_owned(db, playlist_id, user)
        await db.execute(delete(PlaylistVideo).where(PlaylistVideo.playlist_id == playlist_id))
        await db.delete(playlist)
        await db.commit()
        logger.info("Playlist deleted: playlist_id=%s", playlist_id)

    @staticmethod
    async def add_video(
        db: AsyncSession, user: User, playlist_id: str, video_id: str
    ) -> PlaylistResponse:
        playlist = await PlaylistService._get_owned(db, playlist_id, user)
        await get_visible_video(db, video_id, user.id)

        existing = await db.execute(
            select(PlaylistVideo.id).where(
                PlaylistVideo.playlist_id == playlist_id,
                PlaylistVideo.video_id == video_id,
            )
        )
        if existing.first() is None:
            db.add(PlaylistVideo(playlist_id=playlist_id, video_id=video_id))
            try:
                await db.commit()
            except IntegrityError:
                # Added by a concurrent request; membership is a set.
                await db.rollback()
            logger.info("Video added to playlist: playlist_id=%s video_id=%s", playlist_id, video_id)
        await db.refresh(playlist)
        total = await PlaylistService._count_videos(db, playlist_id, user.id)
        return PlaylistService._to_response(playlist, total)

    @staticmethod
    async def remove_video(
        db: AsyncSession, user: User, playlist_id: str, video_id: str
    ) -> PlaylistResponse:
        playlist = await PlaylistService._get_owned(db, playlist_id, user)
        result = await db.execute(
            delete(PlaylistVideo).where(
                PlaylistVideo.playlist_id == playlist_id,
                PlaylistVideo.video_id == video_id,
            )
        )
        if not result.rowcount:
            raise NotFoundError("Video is not in this playlist")
        await db.commit()
        await db.refresh(playlist)
        logger.info("Video removed from playlist: playlist_id=%s video_id=%s", playlist_id, video_id)
        total = await PlaylistService._count_videos(db, playlist_id, user.id)
        return PlaylistService._to_response(playlist, total)
