from __future__ import annotations

import logging
from typing import AsyncGenerator, Optional

from fastapi import Cookie, Depends, Header
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import AuthError
from vidshare.core.security import ACCESS_TOKEN_COOKIE, decode_token, extract_bearer_token
from vidshare.db import get_db_session
from vidshare.models.user import User
from vidshare.services.media_service import MediaService
from vidshare.services.storage import get_storage_service

logger = logging.getLogger("vidshare.deps")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_db_session():
        yield session


def get_media_service() -> MediaService:
    return MediaService(get_storage_service())


async def _resolve_user(db: AsyncSession, token: str) -> User:
    user_id = decode_token(token, "access")
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise AuthError("Invalid access token")
    return user


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    authorization: Optional[str] = Header(default=None),
    access_token: Optional[str] = Cookie(default=None, alias=ACCESS_TOKEN_COOKIE),
) -> User:
    token = access_token or extract_bearer_token(authorization)
    if not token:
        raise AuthError("Unauthorized request")
    return await _resolve_user(db, token)


async def get_current_user_optional(
    db: AsyncSession = Depends(get_db),
    authorization: Optional[str] = Header(default=None),
    access_token: Optional[str] = Cookie(default=None, alias=ACCESS_TOKEN_COOKIE),
) -> Optional[User]:
    """Like ``get_current_user`` but anonymous requests resolve to None.

    An expired or otherwise unusable session cookie also counts as anonymous
    (browsers keep sending it until it is cleared). A malformed or invalid
    Authorization header is still rejected.
    """
    if access_token:
        try:
            return await _resolve_user(db, access_token)
        except AuthError as exc:
            logger.info("Ignoring unusable session cookie: %s", exc)
    token = extract_bearer_token(authorization)
    if not token:
        return None
    return await _resolve_user(db, token)
