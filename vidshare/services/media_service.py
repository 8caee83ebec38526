from __future__ import annotations

import asyncio
import logging
import mimetypes
import os
import subprocess
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal, Optional
from uuid import uuid4

from fastapi import UploadFile

from vidshare.config import settings
from vidshare.core.exceptions import UpstreamError, ValidationError
from vidshare.services.storage import StorageService

logger = logging.getLogger("vidshare.media")

MediaKind = Literal["image", "video"]

_CHUNK_SIZE = 1024 * 1024


@dataclass
class UploadedMedia:
    url: str
    object_name: str
    duration: Optional[float] = None


def _probe_duration(file_path: str) -> Optional[float]:
    """Read the container duration in seconds using ffprobe."""
    try:
        result = subprocess.run(  # nosec
            [
                "ffprobe",
                "-v",
                "error",
                "-show_entries",
                "format=duration",
                "-of",
                "default=noprint_wrappers=1:nokey=1",
                file_path,
            ],
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode == 0 and result.stdout.strip():
            return round(float(result.stdout.strip()), 3)
    except (OSError, ValueError, subprocess.SubprocessError) as exc:
        logger.warning("Failed to probe duration for %s: %s", file_path, exc)
    return None


def _build_object_name(owner_id: str, kind: MediaKind, filename: str, content_type: str) -> str:
    now = datetime.now(timezone.utc)
    ext = Path(filename).suffix.lower() or mimetypes.guess_extension(content_type) or ""
    return f"{kind}s/{owner_id}/{now:%Y/%m/%d}/{uuid4().hex}{ext}"


class MediaService:
    """Moves an uploaded file through local temp storage to the media host."""

    def __init__(self, storage: StorageService) -> None:
        self._storage = storage

    @staticmethod
    def _ensure_kind(file: UploadFile, kind: MediaKind, field: str) -> str:
        content_type = (file.content_type or "").lower()
        if not content_type.startswith(f"{kind}/"):
            article = "an" if kind == "image" else "a"
            raise ValidationError(f"{field} must be {article} {kind} file")
        return content_type

    @staticmethod
    async def _save_to_temp(file: UploadFile, field: str) -> str:
        max_size = settings.UPLOAD_MAX_SIZE_BYTES
        suffix = Path(file.filename or "").suffix
        written = 0
        with tempfile.NamedTemporaryFile(
            delete=False, suffix=suffix, dir=settings.UPLOAD_TMP_DIR
        ) as tmp:
            try:
                while True:
                    chunk = await file.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if max_size is not None and written > max_size:
                        raise ValidationError(f"{field} exceeds the maximum upload size")
                    tmp.write(chunk)
            except BaseException:
                tmp.close()
                os.unlink(tmp.name)
                raise
        if written == 0:
            os.unlink(tmp.name)
            raise ValidationError(f"{field} is empty")
        return tmp.name

    async def upload(
        self, file: UploadFile, kind: MediaKind, owner_id: str, field: str
    ) -> UploadedMedia:
        content_type = self._ensure_kind(file, kind, field)
        tmp_path = await self._save_to_temp(file, field)
        try:
            duration = await asyncio.to_thread(_probe_duration, tmp_path) if kind == "video" else None
            object_name = _build_object_name(owner_id, kind, file.filename or "", content_type)
            try:
                url = await asyncio.to_thread(
                    self._storage.upload_file, object_name, tmp_path, content_type
                )
            except Exception as exc:
                logger.exception("Upload of %s failed: %s", field, exc)
                raise UpstreamError(f"{field} upload failed") from exc
        finally:
            os.unlink(tmp_path)
        logger.info("Uploaded %s object=%s", field, object_name)
        return UploadedMedia(url=url, object_name=object_name, duration=duration)

    async def discard(self, url: Optional[str]) -> None:
        """Remove a previously uploaded object, logging instead of raising on failure."""
        if not url:
            return
        object_name = self._storage.object_name_for(url)
        if object_name is None:
            logger.warning("Skipping delete of foreign media url=%s", url)
            return
        try:
            await asyncio.to_thread(self._storage.delete_object, object_name)
        except Exception as exc:
            logger.warning("Failed to delete object=%s: %s", object_name, exc)
            return
        logger.info("Deleted object=%s", object_name)
