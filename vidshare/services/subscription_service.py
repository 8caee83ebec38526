from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import NotFoundError
from vidshare.models.subscription import Subscription
from vidshare.models.user import User
from vidshare.schemas.subscription import SubscribedChannelItem
from vidshare.schemas.user import ChannelSubscribersResponse, UserPublic
from vidshare.services.toggle import toggle_relation
from vidshare.services.user_service import UserService

logger = logging.getLogger("vidshare.subscription_service")


class SubscriptionService:
    @staticmethod
    async def toggle_subscription(db: AsyncSession, user: User, channel_id: str) -> bool:
        subscriber_id = user.id
        logger.info(
            "Toggle subscription attempt: user_id=%s channel_id=%s", subscriber_id, channel_id
        )
        found = await db.execute(select(User.id).where(User.id == channel_id))
        if found.first() is None:
            raise NotFoundError("Channel does not exist")
        subscribed = await toggle_relation(
            db, Subscription, subscriber_id=subscriber_id, channel_id=channel_id
        )
        logger.info(
            "Subscription %s: user_id=%s channel_id=%s",
            "added" if subscribed else "removed",
            subscriber_id,
            channel_id,
        )
        return subscribed

    @staticmethod
    async def get_channel_subscribers(
        db: AsyncSession, channel_id: str, viewer_id: Optional[str]
    ) -> ChannelSubscribersResponse:
        profile = await UserService.get_channel_profile(db, viewer_id, channel_id=channel_id)
        stmt = (
            select(User)
            .join(Subscription, Subscription.subscriber_id == User.id)
            .where(Subscription.channel_id == channel_id)
            .order_by(Subscription.created_at.desc(), Subscription.id)
        )
        subscribers = (await db.execute(stmt)).scalars().all()
        return ChannelSubscribersResponse(
            **profile.model_dump(),
            subscribers=[UserPublic.model_validate(u) for u in subscribers],
        )

    @staticmethod
    async def get_subscribed_channels(
        db: AsyncSession, subscriber_id: str
    ) -> list[SubscribedChannelItem]:
        found = await db.execute(select(User.id).where(User.id == subscriber_id))
        if found.first() is None:
            raise NotFoundError("User not found")
        stmt = (
            select(User, Subscription.created_at)
            .select_from(Subscription)
            .join(User, User.id == Subscription.channel_id)
            .where(Subscription.subscriber_id == subscriber_id)
            .order_by(Subscription.created_at.desc(), Subscription.id)
        )
        rows = (await db.execute(stmt)).all()
        return [
            SubscribedChannelItem(
                channel=UserPublic.model_validate(channel), subscribed_at=subscribed_at
            )
            for channel, subscribed_at in rows
        ]
