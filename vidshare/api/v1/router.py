from fastapi import APIRouter

from vidshare.api.v1 import (
    comments,
    dashboard,
    health,
    likes,
    playlists,
    subscriptions,
    tweets,
    users,
    videos,
)

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health.router)
api_router.include_router(users.router)
api_router.include_router(videos.router)
api_router.include_router(comments.router)
api_router.include_router(likes.router)
api_router.include_router(playlists.router)
api_router.include_router(subscriptions.router)
api_router.include_router(tweets.router)
api_router.include_router(dashboard.router)
