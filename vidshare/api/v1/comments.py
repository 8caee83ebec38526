from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.api.deps import get_current_user, get_current_user_optional, get_db
from vidshare.core.response import success
from vidshare.core.validation import ensure_uuid
from vidshare.models.user import User
from vidshare.schemas.comment import CommentRequest, CommentResponse, CommentWithOwner
from vidshare.schemas.common import PageResponse
from vidshare.services.comment_service import CommentService

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("/{video_id}")
async def get_video_comments(
    video_id: str,
    db: AsyncSession = Depends(get_db),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    viewer: Optional[User] = Depends(get_current_user_optional),
) -> JSONResponse:
    video_id = ensure_uuid(video_id, "video")
    items, total = await CommentService.list_comments(
        db, video_id, viewer.id if viewer else None, page, limit
    )
    response = PageResponse[CommentWithOwner].build(items, total, page, limit)
    return success(data=response.to_payload(), message="Comments fetched successfully")


@router.post("/{video_id}")
async def add_comment(
    video_id: str,
    data: CommentRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    video_id = ensure_uuid(video_id, "video")
    comment = await CommentService.add_comment(db, user, video_id, data.content)
    return success(
        data=CommentResponse.model_validate(comment).to_payload(),
        message="Comment added successfully",
        status_code=201,
    )


@router.patch("/c/{comment_id}")
async def update_comment(
    comment_id: str,
    data: CommentRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    comment_id = ensure_uuid(comment_id, "comment")
    comment = await CommentService.update_comment(db, user, comment_id, data.content)
    return success(
        data=CommentResponse.model_validate(comment).to_payload(),
        message="Comment updated successfully",
    )


@router.delete("/c/{comment_id}")
async def delete_comment(
    comment_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    comment_id = ensure_uuid(comment_id, "comment")
    await CommentService.delete_comment(db, user, comment_id)
    return success(data={}, message="Comment deleted successfully")
