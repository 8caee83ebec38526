from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from fastapi import UploadFile
from sqlalchemy import exists, false, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import ApiError, ConflictError, NotFoundError, ValidationError
from vidshare.core.security import hash_password
from vidshare.models.base import utcnow
from vidshare.models.subscription import Subscription
from vidshare.models.user import User
from vidshare.models.video import Video
from vidshare.models.watch_history import WatchHistoryEntry
from vidshare.schemas.user import (
    ChannelProfile,
    RegisterRequest,
    UpdateAccountRequest,
    UserPublic,
    WatchHistoryItem,
)
from vidshare.services.media_service import MediaService
from vidshare.services.visibility import get_visible_video, visible_to

logger = logging.getLogger("vidshare.user_service")


async def _identity_taken(db: AsyncSession, email: str, username: str) -> bool:
    existing = await db.execute(
        select(User.id).where(or_(User.email == email, User.username == username))
    )
    return existing.first() is not None


async def _touch_history(
    db: AsyncSession, user_id: str, video_id: str, watched_at: datetime
) -> bool:
    bumped = await db.execute(
        update(WatchHistoryEntry)
        .where(
            WatchHistoryEntry.user_id == user_id,
            WatchHistoryEntry.video_id == video_id,
        )
        .values(watched_at=watched_at)
    )
    return bool(bumped.rowcount)


async def _count_view(db: AsyncSession, video_id: str) -> None:
    await db.execute(
        update(Video).where(Video.id == video_id).values(views=Video.views + 1)
    )


class UserService:
    @staticmethod
    async def register(
        db: AsyncSession,
        media: MediaService,
        data: RegisterRequest,
        avatar: Optional[UploadFile],
        cover_image: Optional[UploadFile],
    ) -> User:
        logger.info("Register attempt: email=%s username=%s", data.email, data.username)
        if await _identity_taken(db, data.email, data.username):
            raise ConflictError("Email or username already exists")

        if avatar is None:
            raise ValidationError("Avatar is required")

        uploaded_avatar = await media.upload(avatar, "image", data.username, "avatar")
        cover_url: Optional[str] = None
        if cover_image is not None:
            try:
                uploaded_cover = await media.upload(
                    cover_image, "image", data.username, "coverImage"
                )
            except ApiError:
                await media.discard(uploaded_avatar.url)
                raise
            cover_url = uploaded_cover.url

        user = User(
            full_name=data.full_name,
            email=data.email,
            username=data.username,
            password=hash_password(data.password),
            avatar_url=uploaded_avatar.url,
            cover_image_url=cover_url,
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError as exc:
            # Lost a race with a concurrent registration for the same identity.
            await db.rollback()
            await media.discard(uploaded_avatar.url)
            await media.discard(cover_url)
            raise ConflictError("Email or username already exists") from exc
        logger.info("User registered: user_id=%s", user.id)
        return user

    @staticmethod
    async def update_account(
        db: AsyncSession, user: User, data: UpdateAccountRequest
    ) -> User:
        if data.email is not None and data.email != user.email:
            taken = await db.execute(
                select(User.id).where(User.email == data.email, User.id != user.id)
            )
            if taken.first() is not None:
                raise ConflictError("Email already in use")
            user.email = data.email
        if data.full_name is not None:
            user.full_name = data.full_name
        try:
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            raise ConflictError("Email already in use") from exc
        await db.refresh(user)
        return user

    @staticmethod
    async def update_image(
        db: AsyncSession,
        media: MediaService,
        user: User,
        file: Optional[UploadFile],
        field: str,
    ) -> User:
        if file is None:
            raise ValidationError(f"{field} file is missing")
        uploaded = await media.upload(file, "image", user.id, field)
        if field == "avatar":
            replaced = user.avatar_url
            user.avatar_url = uploaded.url
        else:
            replaced = user.cover_image_url
            user.cover_image_url = uploaded.url
        await db.commit()
        await db.refresh(user)
        await media.discard(replaced)
        logger.info("User %s updated: user_id=%s", field, user.id)
        return user

    @staticmethod
    async def get_channel_profile(
        db: AsyncSession,
        viewer_id: Optional[str],
        *,
        username: Optional[str] = None,
        channel_id: Optional[str] = None,
    ) -> ChannelProfile:
        """Load a channel with its subscription counters in one round trip.

        ``isSubscribed`` is true when ``viewer_id`` is among the channel's
        subscribers; anonymous viewers are never subscribed.
        """
        subscribers_count = (
            select(func.count(Subscription.id))
            .where(Subscription.channel_id == User.id)
            .scalar_subquery()
        )
        subscribed_to_count = (
            select(func.count(Subscription.id))
            .where(Subscription.subscriber_id == User.id)
            .scalar_subquery()
        )
        if viewer_id:
            is_subscribed: Any = exists().where(
                Subscription.channel_id == User.id,
                Subscription.subscriber_id == viewer_id,
            )
        else:
            is_subscribed = false()

        stmt = select(
            User,
            subscribers_count.label("subscribers_count"),
            subscribed_to_count.label("channels_subscribed_to_count"),
            is_subscribed.label("is_subscribed"),
        )
        if username is not None:
            stmt = stmt.where(User.username == username.strip().lower())
        elif channel_id is not None:
            stmt = stmt.where(User.id == channel_id)
        else:
            raise ValueError("username or channel_id is required")

        row = (await db.execute(stmt)).first()
        if row is None:
            raise NotFoundError("Channel does not exist")
        channel, subscribers, subscribed_to, subscribed = row
        return ChannelProfile(
            id=channel.id,
            username=channel.username,
            full_name=channel.full_name,
            email=channel.email,
            avatar_url=channel.avatar_url,
            cover_image_url=channel.cover_image_url,
            subscribers_count=subscribers,
            channels_subscribed_to_count=subscribed_to,
            is_subscribed=bool(subscribed),
        )

    @staticmethod
    async def get_watch_history(db: AsyncSession, user: User) -> list[WatchHistoryItem]:
        stmt = (
            select(WatchHistoryEntry.watched_at, Video, User)
            .select_from(WatchHistoryEntry)
            .join(Video, Video.id == WatchHistoryEntry.video_id)
            .join(User, User.id == Video.owner_id)
            .where(WatchHistoryEntry.user_id == user.id, visible_to(user.id))
            .order_by(WatchHistoryEntry.watched_at.desc(), WatchHistoryEntry.id.desc())
        )
        rows = (await db.execute(stmt)).all()
        return [
            WatchHistoryItem(
                id=video.id,
                title=video.title,
                description=video.description,
                video_url=video.video_url,
                thumbnail_url=video.thumbnail_url,
                duration=video.duration,
                views=video.views,
                created_at=video.created_at,
                owner=UserPublic.model_validate(owner),
                watched_at=watched_at,
            )
            for watched_at, video, owner in rows
        ]

    @staticmethod
    async def record_watch(db: AsyncSession, user: User, video_id: str) -> None:
        """Put ``video_id`` at the head of the user's history and count a view."""
        user_id = user.id
        await get_visible_video(db, video_id, user_id)

        now = utcnow()
        try:
            if not await _touch_history(db, user_id, video_id, now):
                db.add(WatchHistoryEntry(user_id=user_id, video_id=video_id, watched_at=now))
                await db.flush()
            await _count_view(db, video_id)
            await db.commit()
        except IntegrityError:
            # A concurrent report inserted the row first; bump it instead.
            await db.rollback()
            await _touch_history(db, user_id, video_id, now)
            await _count_view(db, video_id)
            await db.commit()
        logger.info("Watch recorded: user_id=%s video_id=%s", user_id, video_id)
