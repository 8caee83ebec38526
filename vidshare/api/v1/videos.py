from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.api.deps import get_current_user, get_current_user_optional, get_db, get_media_service
from vidshare.core.response import success
from vidshare.core.validation import ensure_uuid, parse_model
from vidshare.models.user import User
from vidshare.schemas.common import PageResponse
from vidshare.schemas.video import (
    VideoPublishRequest,
    VideoResponse,
    VideoUpdateRequest,
)
from vidshare.services.media_service import MediaService
from vidshare.services.video_service import VideoService

router = APIRouter(prefix="/videos", tags=["videos"])


@router.get("")
async def list_videos(
    db: AsyncSession = Depends(get_db),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    query: Optional[str] = Query(default=None),
    sort_by: str = Query(default="createdAt", alias="sortBy"),
    sort_type: str = Query(default="desc", alias="sortType"),
    user_id: Optional[str] = Query(default=None, alias="userId"),
) -> JSONResponse:
    if user_id:
        user_id = ensure_uuid(user_id, "user")
    items, total = await VideoService.list_videos(
        db, page, limit, query, sort_by, sort_type.lower(), user_id
    )
    response = PageResponse[VideoResponse].build(items, total, page, limit)
    return success(data=response.to_payload(), message="Videos fetched successfully")


@router.post("")
async def publish_video(
    title: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
    video_file: Optional[UploadFile] = File(default=None, alias="videoFile"),
    thumbnail: Optional[UploadFile] = File(default=None),
    db: AsyncSession = Depends(get_db),
    media: MediaService = Depends(get_media_service),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    data = parse_model(VideoPublishRequest, {"title": title, "description": description})
    video = await VideoService.publish(db, media, user, data, video_file, thumbnail)
    return success(
        data=VideoResponse.model_validate(video).to_payload(),
        message="Video published successfully",
        status_code=201,
    )


@router.get("/{video_id}")
async def get_video_by_id(
    video_id: str,
    db: AsyncSession = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
) -> JSONResponse:
    video_id = ensure_uuid(video_id, "video")
    detail = await VideoService.get_video(db, video_id, viewer)
    return success(data=detail.to_payload(), message="Video fetched successfully")


@router.patch("/{video_id}")
async def update_video(
    video_id: str,
    title: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
    thumbnail: Optional[UploadFile] = File(default=None),
    db: AsyncSession = Depends(get_db),
    media: MediaService = Depends(get_media_service),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    video_id = ensure_uuid(video_id, "video")
    data = parse_model(VideoUpdateRequest, {"title": title, "description": description})
    video = await VideoService.update_video(db, media, user, video_id, data, thumbnail)
    return success(
        data=VideoResponse.model_validate(video).to_payload(),
        message="Video updated successfully",
    )


@router.delete("/{video_id}")
async def delete_video(
    video_id: str,
    db: AsyncSession = Depends(get_db),
    media: MediaService = Depends(get_media_service),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    video_id = ensure_uuid(video_id, "video")
    await VideoService.delete_video(db, media, user, video_id)
    return success(data={}, message="Video deleted successfully")


@router.patch("/{video_id}/toggle-publish")
async def toggle_publish_status(
    video_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    video_id = ensure_uuid(video_id, "video")
    video = await VideoService.toggle_publish(db, user, video_id)
    return success(
        data=VideoResponse.model_validate(video).to_payload(),
        message="Publish status updated",
    )
