from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.api.deps import get_current_user, get_db
from vidshare.core.response import success
from vidshare.models.user import User
from vidshare.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats")
async def get_channel_stats(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    stats = await DashboardService.get_channel_stats(db, user)
    return success(data=stats.to_payload(), message="Channel stats fetched")


@router.get("/videos")
async def get_channel_videos(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    videos = await DashboardService.get_channel_videos(db, user)
    return success(data=[v.to_payload() for v in videos], message="Channel videos fetched")
