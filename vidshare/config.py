from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    APP_ENV: Literal["development", "staging", "production"] = Field(
        default="development"
    )
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="INFO")

    DATABASE_URL: Optional[str] = Field(default=None)

    CORS_ORIGINS: Optional[str] = Field(default=None)

    JWT_SECRET: Optional[str] = Field(default=None)
    JWT_ALGORITHM: Optional[str] = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=15)
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(default=10)

    COOKIE_SECURE: bool = Field(default=True)
    COOKIE_SAMESITE: Literal["lax", "strict", "none"] = Field(default="lax")

    STORAGE_PROVIDER: Optional[Literal["minio"]] = Field(default="minio")

    MINIO_ENDPOINT: Optional[str] = Field(default=None)
    MINIO_ACCESS_KEY: Optional[str] = Field(default=None)
    MINIO_SECRET_KEY: Optional[str] = Field(default=None)
    MINIO_BUCKET: Optional[str] = Field(default=None)
    MINIO_USE_SSL: Optional[bool] = Field(default=None)
    MEDIA_PUBLIC_BASE_URL: Optional[str] = Field(default=None)

    UPLOAD_TMP_DIR: Optional[str] = Field(default=None)
    UPLOAD_MAX_SIZE_BYTES: Optional[int] = Field(default=None)


settings = Settings()
