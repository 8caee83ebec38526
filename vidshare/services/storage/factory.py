from __future__ import annotations

from vidshare.config import settings
from vidshare.services.storage.base import StorageService
from vidshare.services.storage.minio import MinioStorageService


def get_storage_service() -> StorageService:
    provider = settings.STORAGE_PROVIDER or "minio"
    if provider == "minio":
        return MinioStorageService()
    raise RuntimeError(f"Unsupported STORAGE_PROVIDER: {provider}")
