from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import AuthError, NotFoundError, ValidationError
from vidshare.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from vidshare.models.user import User
from vidshare.schemas.user import ChangePasswordRequest, LoginRequest

logger = logging.getLogger("vidshare.auth_service")


class AuthService:
    @staticmethod
    def _issue_tokens(user_id: str) -> tuple[str, str]:
        return create_access_token(user_id), create_refresh_token(user_id)

    @staticmethod
    async def login(db: AsyncSession, data: LoginRequest) -> tuple[User, str, str]:
        conditions = []
        if data.email:
            conditions.append(User.email == data.email)
        if data.username:
            conditions.append(User.username == data.username)
        result = await db.execute(select(User).where(or_(*conditions)))
        user = result.scalars().first()
        if user is None:
            raise NotFoundError("User does not exist")
        if not verify_password(data.password, user.password):
            logger.info("Login rejected: user_id=%s", user.id)
            raise AuthError("Invalid user credentials")

        access_token, refresh_token = AuthService._issue_tokens(user.id)
        user.refresh_token = refresh_token
        await db.commit()
        logger.info("User logged in: user_id=%s", user.id)
        return user, access_token, refresh_token

    @staticmethod
    async def logout(db: AsyncSession, user: User) -> None:
        user.refresh_token = None
        await db.commit()
        logger.info("User logged out: user_id=%s", user.id)

    @staticmethod
    async def refresh(db: AsyncSession, incoming_token: Optional[str]) -> tuple[str, str]:
        """Rotate the session's token pair.

        The stored token is swapped with a compare-and-set so a refresh token
        can be redeemed at most once.
        """
        if not incoming_token:
            raise AuthError("Unauthorized request")
        user_id = decode_token(incoming_token, "refresh")

        access_token, refresh_token = AuthService._issue_tokens(user_id)
        result = await db.execute(
            update(User)
            .where(User.id == user_id, User.refresh_token == incoming_token)
            .values(refresh_token=refresh_token)
        )
        if result.rowcount != 1:
            await db.rollback()
            logger.info("Refresh rejected: user_id=%s", user_id)
            raise AuthError("Refresh token is expired or used")
        await db.commit()
        logger.info("Tokens refreshed: user_id=%s", user_id)
        return access_token, refresh_token

    @staticmethod
    async def change_password(
        db: AsyncSession, user: User, data: ChangePasswordRequest
    ) -> None:
        if not verify_password(data.old_password, user.password):
            raise ValidationError("Invalid old password")
        user.password = hash_password(data.new_password)
        await db.commit()
        logger.info("Password changed: user_id=%s", user.id)
