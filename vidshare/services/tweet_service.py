from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import NotFoundError, PermissionDeniedError
from vidshare.models.like import Like, LikeTarget
from vidshare.models.tweet import Tweet
from vidshare.models.user import User
from vidshare.schemas.tweet import TweetResponse
from vidshare.services.like_service import likes_count_column

logger = logging.getLogger("vidshare.tweet_service")


class TweetService:
    @staticmethod
    async def _get_owned(db: AsyncSession, tweet_id: str, user: User) -> Tweet:
        tweet = await db.get(Tweet, tweet_id)
        if tweet is None:
            raise NotFoundError("Tweet not found")
        if tweet.owner_id != user.id:
            raise PermissionDeniedError("You are not allowed to modify this tweet")
        return tweet

    @staticmethod
    async def create_tweet(db: AsyncSession, user: User, content: str) -> Tweet:
        tweet = Tweet(content=content, owner_id=user.id)
        db.add(tweet)
        await db.commit()
        logger.info("Tweet created: tweet_id=%s", tweet.id)
        return tweet

    @staticmethod
    async def list_user_tweets(db: AsyncSession, owner_id: str) -> list[TweetResponse]:
        found = await db.execute(select(User.id).where(User.id == owner_id))
        if found.first() is None:
            raise NotFoundError("User not found")
        stmt = (
            select(Tweet, likes_count_column(LikeTarget.TWEET, Tweet.id))
            .where(Tweet.owner_id == owner_id)
            .order_by(Tweet.created_at.desc(), Tweet.id)
        )
        rows = (await db.execute(stmt)).all()
        return [
            TweetResponse(
                **TweetResponse.model_validate(tweet).model_dump(exclude={"likes_count"}),
                likes_count=likes_count,
            )
            for tweet, likes_count in rows
        ]

    @staticmethod
    async def update_tweet(
        db: AsyncSession, user: User, tweet_id: str, content: str
    ) -> Tweet:
        tweet = await TweetService._get_owned(db, tweet_id, user)
        tweet.content = content
        await db.commit()
        await db.refresh(tweet)
        logger.info("Tweet updated: tweet_id=%s", tweet_id)
        return tweet

    @staticmethod
    async def delete_tweet(db: AsyncSession, user: User, tweet_id: str) -> None:
        tweet = await TweetService._get_owned(db, tweet_id, user)
        await db.execute(
            delete(Like).where(
                Like.target_type == LikeTarget.TWEET.value,
                Like.target_id == tweet_id,
            )
        )
        await db.delete(tweet)
        await db.commit()
        logger.info("Tweet deleted: tweet_id=%s", tweet_id)
