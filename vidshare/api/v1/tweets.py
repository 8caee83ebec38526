from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.api.deps import get_current_user, get_db
from vidshare.core.response import success
from vidshare.core.validation import ensure_uuid
from vidshare.models.user import User
from vidshare.schemas.tweet import TweetRequest, TweetResponse
from vidshare.services.tweet_service import TweetService

router = APIRouter(prefix="/tweets", tags=["tweets"])


@router.post("")
async def create_tweet(
    data: TweetRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    tweet = await TweetService.create_tweet(db, user, data.content)
    return success(
        data=TweetResponse.model_validate(tweet).to_payload(),
        message="Tweet created",
        status_code=201,
    )


@router.get("/user/{user_id}")
async def get_user_tweets(
    user_id: str,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    user_id = ensure_uuid(user_id, "user")
    tweets = await TweetService.list_user_tweets(db, user_id)
    return success(data=[t.to_payload() for t in tweets], message="Tweets fetched")


@router.patch("/{tweet_id}")
async def update_tweet(
    tweet_id: str,
    data: TweetRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    tweet_id = ensure_uuid(tweet_id, "tweet")
    tweet = await TweetService.update_tweet(db, user, tweet_id, data.content)
    return success(data=TweetResponse.model_validate(tweet).to_payload(), message="Tweet updated")


@router.delete("/{tweet_id}")
async def delete_tweet(
    tweet_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    tweet_id = ensure_uuid(tweet_id, "tweet")
    await TweetService.delete_tweet(db, user, tweet_id)
    return success(data={}, message="Tweet deleted")
