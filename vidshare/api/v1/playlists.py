from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.api.deps import get_current_user, get_current_user_optional, get_db
from vidshare.core.response import success
from vidshare.core.validation import ensure_uuid
from vidshare.models.user import User
from vidshare.schemas.playlist import PlaylistCreateRequest, PlaylistUpdateRequest
from vidshare.services.playlist_service import PlaylistService

router = APIRouter(prefix="/playlists", tags=["playlists"])


@router.post("")
async def create_playlist(
    data: PlaylistCreateRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    playlist = await PlaylistService.create_playlist(db, user, data)
    return success(
        data=playlist.to_payload(), message="Playlist created successfully", status_code=201
    )


@router.get("/user/{user_id}")
async def get_user_playlists(
    user_id: str,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    user_id = ensure_uuid(user_id, "user")
    playlists = await PlaylistService.list_user_playlists(db, user_id)
    return success(data=[p.to_payload() for p in playlists], message="User playlists fetched")


@router.get("/{playlist_id}")
async def get_playlist_by_id(
    playlist_id: str,
    db: AsyncSession = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
) -> JSONResponse:
    playlist_id = ensure_uuid(playlist_id, "playlist")
    playlist = await PlaylistService.get_playlist(
        db, playlist_id, viewer.id if viewer else None
    )
    return success(data=playlist.to_payload(), message="Playlist fetched")


@router.patch("/add/{video_id}/{playlist_id}")
async def add_video_to_playlist(
    video_id: str,
    playlist_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    video_id = ensure_uuid(video_id, "video")
    playlist_id = ensure_uuid(playlist_id, "playlist")
    playlist = await PlaylistService.add_video(db, user, playlist_id, video_id)
    return success(data=playlist.to_payload(), message="Video added to playlist")


@router.patch("/remove/{video_id}/{playlist_id}")
async def remove_video_from_playlist(
    video_id: str,
    playlist_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    video_id = ensure_uuid(video_id, "video")
    playlist_id = ensure_uuid(playlist_id, "playlist")
    playlist = await PlaylistService.remove_video(db, user, playlist_id, video_id)
    return success(data=playlist.to_payload(), message="Video removed successfully")


@router.patch("/{playlist_id}")
async def update_playlist(
    playlist_id: str,
    data: PlaylistUpdateRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    playlist_id = ensure_uuid(playlist_id, "playlist")
    playlist = await PlaylistService.update_playlist(db, user, playlist_id, data)
    return success(data=playlist.to_payload(), message="Playlist updated successfully")


@router.delete("/{playlist_id}")
async def delete_playlist(
    playlist_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    playlist_id = ensure_uuid(playlist_id, "playlist")
    await PlaylistService.delete_playlist(db, user, playlist_id)
    return success(data={}, message="Playlist deleted successfully")
