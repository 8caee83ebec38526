from __future__ import annotations

from typing import Optional

from minio import Minio

from vidshare.config import settings
from vidshare.services.storage.base import StorageService


class MinioStorageService(StorageService):
    def __init__(self) -> None:
        endpoint = settings.MINIO_ENDPOINT
        access_key = settings.MINIO_ACCESS_KEY
        secret_key = settings.MINIO_SECRET_KEY
        use_ssl = settings.MINIO_USE_SSL
        if not endpoint or not access_key or not secret_key or use_ssl is None:
            raise RuntimeError("MinIO settings are not set")
        self._endpoint = endpoint
        self._scheme = "https" if use_ssl else "http"
        self._client = Minio(
            endpoint=endpoint,
            access_key=access_key,
            secret_key=secret_key,
            secure=bool(use_ssl),
        )

    @staticmethod
    def _get_bucket() -> str:
        bucket = settings.MINIO_BUCKET
        if not bucket:
            raise RuntimeError("MINIO_BUCKET is not set")
        return bucket

    def _public_url(self, bucket: str, object_name: str) -> str:
        base = settings.MEDIA_PUBLIC_BASE_URL
        if base:
            return f"{base.rstrip('/')}/{object_name}"
        return f"{self._scheme}://{self._endpoint}/{bucket}/{object_name}"

    def upload_file(
        self, object_name: str, file_path: str, content_type: Optional[str]
    ) -> str:
        bucket = self._get_bucket()
        self._client.fput_object(
            bucket_name=bucket,
            object_name=object_name,
            file_path=file_path,
            content_type=content_type or "application/octet-stream",
        )
        return self._public_url(bucket, object_name)

    def delete_object(self, object_name: str) -> None:
        self._client.remove_object(bucket_name=self._get_bucket(), object_name=object_name)

    def object_name_for(self, url: str) -> Optional[str]:
        prefix = self._public_url(self._get_bucket(), "")
        if not url.startswith(prefix):
            return None
        return url[len(prefix):] or None
