from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.api.deps import get_current_user, get_current_user_optional, get_db
from vidshare.core.response import success
from vidshare.core.validation import ensure_uuid
from vidshare.models.user import User
from vidshare.schemas.subscription import SubscriptionToggleResponse
from vidshare.services.subscription_service import SubscriptionService

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.post("/c/{channel_id}")
async def toggle_subscription(
    channel_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    channel_id = ensure_uuid(channel_id, "channel")
    subscribed = await SubscriptionService.toggle_subscription(db, user, channel_id)
    payload = SubscriptionToggleResponse(subscribed=subscribed).to_payload()
    if subscribed:
        return success(data=payload, message="Subscribed successfully", status_code=201)
    return success(data=payload, message="Unsubscribed successfully")


@router.get("/c/{channel_id}")
async def get_user_channel_subscribers(
    channel_id: str,
    db: AsyncSession = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
) -> JSONResponse:
    channel_id = ensure_uuid(channel_id, "channel")
    channel = await SubscriptionService.get_channel_subscribers(
        db, channel_id, viewer.id if viewer else None
    )
    return success(data=channel.to_payload(), message="Subscribers fetched successfully")


@router.get("/u/{subscriber_id}")
async def get_subscribed_channels(
    subscriber_id: str,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    subscriber_id = ensure_uuid(subscriber_id, "subscriber")
    channels = await SubscriptionService.get_subscribed_channels(db, subscriber_id)
    return success(
        data=[item.to_payload() for item in channels],
        message="Subscribed channels fetched",
    )
