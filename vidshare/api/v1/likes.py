from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.api.deps import get_current_user, get_db
from vidshare.core.response import success
from vidshare.core.validation import ensure_uuid
from vidshare.models.like import LikeTarget
from vidshare.models.user import User
from vidshare.schemas.like import LikeToggleResponse
from vidshare.services.like_service import LikeService

router = APIRouter(prefix="/likes", tags=["likes"])


async def _toggle(
    db: AsyncSession, user: User, target: LikeTarget, target_id: str
) -> JSONResponse:
    target_id = ensure_uuid(target_id, target.value)
    liked = await LikeService.toggle_like(db, user, target, target_id)
    return success(
        data=LikeToggleResponse(liked=liked).to_payload(),
        message=f"{target.value.capitalize()} like toggled",
    )


@router.post("/toggle/v/{video_id}")
async def toggle_video_like(
    video_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    return await _toggle(db, user, LikeTarget.VIDEO, video_id)


@router.post("/toggle/c/{comment_id}")
async def toggle_comment_like(
    comment_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    return await _toggle(db, user, LikeTarget.COMMENT, comment_id)


@router.post("/toggle/t/{tweet_id}")
async def toggle_tweet_like(
    tweet_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    return await _toggle(db, user, LikeTarget.TWEET, tweet_id)


@router.get("/videos")
async def get_liked_videos(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    items = await LikeService.list_liked_videos(db, user)
    return success(
        data=[item.to_payload() for item in items], message="Liked videos fetched"
    )
