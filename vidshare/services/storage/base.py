from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class StorageService(ABC):
    @abstractmethod
    def upload_file(
        self, object_name: str, file_path: str, content_type: Optional[str]
    ) -> str:
        """Store ``file_path`` under ``object_name`` and return its public URL."""
        raise NotImplementedError

    @abstractmethod
    def delete_object(self, object_name: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def object_name_for(self, url: str) -> Optional[str]:
        """Inverse of the URL returned by ``upload_file``; None for foreign URLs."""
        raise NotImplementedError
