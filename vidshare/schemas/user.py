from __future__ import annotations

from datetime import datetime
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import Field, field_validator, model_validator

from vidshare.core.validation import check_password_strength, require_text, rule_error
from vidshare.schemas.common import CamelModel


def _normalize_email(value: Optional[str]) -> str:
    raw = require_text(value, "Email is required")
    try:
        result = validate_email(raw, check_deliverability=False)
    except EmailNotValidError as exc:
        raise rule_error("Invalid email") from exc
    return result.normalized.lower()


class UserPublic(CamelModel):
    id: str
    username: str
    full_name: str
    avatar_url: str


class UserResponse(CamelModel):
    id: str
    username: str
    email: str
    full_name: str
    avatar_url: str
    cover_image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class RegisterRequest(CamelModel):
    full_name: Optional[str] = Field(default=None, validate_default=True)
    email: Optional[str] = Field(default=None, validate_default=True)
    username: Optional[str] = Field(default=None, validate_default=True)
    password: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: Optional[str]) -> str:
        name = require_text(v, "Full name is required")
        if len(name) < 3:
            raise rule_error("Full name must be at least 3 characters")
        return name

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v: Optional[str]) -> str:
        return _normalize_email(v)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: Optional[str]) -> str:
        username = require_text(v, "Username is required")
        if len(username) < 3:
            raise rule_error("Username must be at least 3 characters")
        return username.lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: Optional[str]) -> str:
        return check_password_strength(v or "")


class LoginRequest(CamelModel):
    email: Optional[str] = None
    username: Optional[str] = None
    password: str = Field(min_length=1)

    @model_validator(mode="after")
    def require_identifier(self) -> "LoginRequest":
        if not (self.email or self.username):
            raise rule_error("Username or email is required")
        if self.username:
            self.username = self.username.strip().lower()
        if self.email:
            self.email = self.email.strip().lower()
        return self


class LoginResponse(CamelModel):
    user: UserResponse
    access_token: str
    refresh_token: str


class TokenPairResponse(CamelModel):
    access_token: str
    refresh_token: str


class RefreshTokenRequest(CamelModel):
    refresh_token: Optional[str] = None


class ChangePasswordRequest(CamelModel):
    old_password: str = Field(min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        return check_password_strength(v)


class UpdateAccountRequest(CamelModel):
    full_name: Optional[str] = None
    email: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        name = require_text(v, "Full name is required")
        if len(name) < 3:
            raise rule_error("Full name must be at least 3 characters")
        return name

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return _normalize_email(v)

    @model_validator(mode="after")
    def require_any(self) -> "UpdateAccountRequest":
        if self.full_name is None and self.email is None:
            raise rule_error("Full name or email is required")
        return self


class ChannelProfile(CamelModel):
    id: str
    username: str
    full_name: str
    email: str
    avatar_url: str
    cover_image_url: Optional[str] = None
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool


class ChannelSubscribersResponse(ChannelProfile):
    subscribers: list[UserPublic]


class WatchHistoryItem(CamelModel):
    id: str
    title: str
    description: str
    video_url: str
    thumbnail_url: str
    duration: Optional[float] = None
    views: int
    created_at: datetime
    owner: UserPublic
    watched_at: datetime
