from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Literal, Optional
from uuid import uuid4

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from vidshare.config import settings
from vidshare.core.exceptions import AuthError

TokenType = Literal["access", "refresh"]

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def _get_jwt_config() -> tuple[str, str]:
    secret = settings.JWT_SECRET
    algorithm = settings.JWT_ALGORITHM
    if not secret or not algorithm:
        raise RuntimeError("JWT_SECRET or JWT_ALGORITHM is not set")
    return secret, algorithm


def _create_token(user_id: str, token_type: TokenType, expires_delta: timedelta) -> str:
    secret, algorithm = _get_jwt_config()
    now = datetime.now(timezone.utc)
    payload: dict[str, object] = {
        "sub": user_id,
        "type": token_type,
        "jti": uuid4().hex,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def create_access_token(user_id: str) -> str:
    return _create_token(
        user_id, "access", timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )


def create_refresh_token(user_id: str) -> str:
    return _create_token(
        user_id, "refresh", timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    )


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise AuthError("Invalid authorization header")
    return token


def decode_token(token: str, expected_type: TokenType) -> str:
    """Verify ``token`` and return its subject (the user id)."""
    if not token:
        raise AuthError("Unauthorized request")
    secret, algorithm = _get_jwt_config()
    try:
        payload: dict[str, object] = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"verify_aud": False},
        )
    except ExpiredSignatureError as exc:
        raise AuthError(f"{expected_type.capitalize()} token expired") from exc
    except JWTError as exc:
        raise AuthError(f"Invalid {expected_type} token") from exc
    if payload.get("type") != expected_type:
        raise AuthError(f"Invalid {expected_type} token")
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise AuthError(f"Invalid {expected_type} token")
    return subject
