from __future__ import annotations

from vidshare.services.storage.base import StorageService
from vidshare.services.storage.factory import get_storage_service
from vidshare.services.storage.minio import MinioStorageService

__all__ = ["StorageService", "MinioStorageService", "get_storage_service"]
