from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Cookie, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.api.deps import get_current_user, get_current_user_optional, get_db, get_media_service
from vidshare.config import settings
from vidshare.core.response import success
from vidshare.core.security import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE
from vidshare.core.validation import ensure_uuid, parse_model
from vidshare.models.user import User
from vidshare.schemas.user import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    RegisterRequest,
    TokenPairResponse,
    UpdateAccountRequest,
    UserResponse,
)
from vidshare.services.auth_service import AuthService
from vidshare.services.media_service import MediaService
from vidshare.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


def _set_auth_cookies(response: JSONResponse, access_token: str, refresh_token: str) -> None:
    for name, value, max_age in (
        (ACCESS_TOKEN_COOKIE, access_token, settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60),
        (REFRESH_TOKEN_COOKIE, refresh_token, settings.REFRESH_TOKEN_EXPIRE_DAYS * 86400),
    ):
        response.set_cookie(
            name,
            value,
            max_age=max_age,
            httponly=True,
            secure=settings.COOKIE_SECURE,
            samesite=settings.COOKIE_SAMESITE,
        )


def _clear_auth_cookies(response: JSONResponse) -> None:
    for name in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        response.delete_cookie(
            name,
            httponly=True,
            secure=settings.COOKIE_SECURE,
            samesite=settings.COOKIE_SAMESITE,
        )


def _user_payload(user: User) -> dict[str, object]:
    return UserResponse.model_validate(user).to_payload()


@router.post("/register")
async def register_user(
    full_name: Optional[str] = Form(default=None, alias="fullName"),
    email: Optional[str] = Form(default=None),
    username: Optional[str] = Form(default=None),
    password: Optional[str] = Form(default=None),
    avatar: Optional[UploadFile] = File(default=None),
    cover_image: Optional[UploadFile] = File(default=None, alias="coverImage"),
    db: AsyncSession = Depends(get_db),
    media: MediaService = Depends(get_media_service),
) -> JSONResponse:
    data = parse_model(
        RegisterRequest,
        {"fullName": full_name, "email": email, "username": username, "password": password},
    )
    user = await UserService.register(db, media, data, avatar, cover_image)
    return success(
        data=_user_payload(user), message="User registered successfully", status_code=201
    )


@router.post("/login")
async def login_user(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    user, access_token, refresh_token = await AuthService.login(db, data)
    payload = LoginResponse(
        user=UserResponse.model_validate(user),
        access_token=access_token,
        refresh_token=refresh_token,
    )
    response = success(data=payload.to_payload(), message="User logged in successfully")
    _set_auth_cookies(response, access_token, refresh_token)
    return response


@router.post("/logout")
async def logout_user(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    await AuthService.logout(db, user)
    response = success(data={}, message="User logged out")
    _clear_auth_cookies(response)
    return response


@router.post("/refresh-token")
async def refresh_access_token(
    body: Optional[RefreshTokenRequest] = Body(default=None),
    refresh_cookie: Optional[str] = Cookie(default=None, alias=REFRESH_TOKEN_COOKIE),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    incoming = refresh_cookie or (body.refresh_token if body else None)
    access_token, refresh_token = await AuthService.refresh(db, incoming)
    payload = TokenPairResponse(access_token=access_token, refresh_token=refresh_token)
    response = success(data=payload.to_payload(), message="Access token refreshed")
    _set_auth_cookies(response, access_token, refresh_token)
    return response


@router.post("/change-password")
async def change_password(
    data: ChangePasswordRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    await AuthService.change_password(db, user, data)
    return success(data={}, message="Password changed successfully")


@router.get("/current-user")
async def get_current_user_profile(user: User = Depends(get_current_user)) -> JSONResponse:
    return success(data=_user_payload(user), message="User fetched successfully")


@router.patch("/update-account")
async def update_account_details(
    data: UpdateAccountRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    updated = await UserService.update_account(db, user, data)
    return success(data=_user_payload(updated), message="Account details updated successfully")


@router.patch("/avatar")
async def update_user_avatar(
    avatar: Optional[UploadFile] = File(default=None),
    db: AsyncSession = Depends(get_db),
    media: MediaService = Depends(get_media_service),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    updated = await UserService.update_image(db, media, user, avatar, "avatar")
    return success(data=_user_payload(updated), message="Avatar updated successfully")


@router.patch("/cover-image")
async def update_user_cover_image(
    cover_image: Optional[UploadFile] = File(default=None, alias="coverImage"),
    db: AsyncSession = Depends(get_db),
    media: MediaService = Depends(get_media_service),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    updated = await UserService.update_image(db, media, user, cover_image, "coverImage")
    return success(data=_user_payload(updated), message="Cover image updated successfully")


@router.get("/c/{username}")
async def get_user_channel_profile(
    username: str,
    db: AsyncSession = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
) -> JSONResponse:
    profile = await UserService.get_channel_profile(
        db, viewer.id if viewer else None, username=username
    )
    return success(data=profile.to_payload(), message="User channel fetched successfully")


@router.get("/history")
async def get_watch_history(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    history = await UserService.get_watch_history(db, user)
    return success(
        data=[item.to_payload() for item in history],
        message="Watch history fetched successfully",
    )


@router.post("/history/{video_id}")
async def add_to_watch_history(
    video_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> JSONResponse:
    video_id = ensure_uuid(video_id, "video")
    await UserService.record_watch(db, user, video_id)
    return success(data={}, message="Watch history updated")
