"""
Storage Service Interface
=========================

Object storage for uploaded region and place images. Failures raise
``StorageError``.
"""
from abc import ABC, abstractmethod
from typing import Optional


class StorageError(Exception):
    """Raised when a file could not be written to or removed from storage."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class StorageService(ABC):
    """Stores uploaded files and returns public URLs."""

    @abstractmethod
    async def upload(self, key: str, content: bytes, content_type: str) -> str:
        """
        Store a file.

        Args:
            key: Relative object key, e.g. "regions/<id>/<name>.jpg"
            content: Raw bytes
            content_type: MIME type

        Returns:
            Public URL of the stored file
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        pass

    @abstractmethod
    def get_url(self, key: str) -> str:
        pass

    @abstractmethod
    def key_for_url(self, url: str) -> Optional[str]:
        """Object key behind a public URL, or None for URLs this storage does not serve."""
        pass
