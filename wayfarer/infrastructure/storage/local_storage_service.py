"""
Local Storage Service
=====================

StorageService implementation writing uploads to a local directory served
under a base URL.
"""
import asyncio
import logging
from pathlib import Path
from typing import Optional

from wayfarer.domain.services.storage_service import StorageError, StorageService

logger = logging.getLogger(__name__)


class LocalStorageService(StorageService):
    def __init__(self, directory: str, base_url: str):
        self._root = Path(directory).resolve()
        self._base_url = base_url.rstrip("/")

    def _path(self, key: str) -> Path:
        path = (self._root / key.lstrip("/")).resolve()
        if self._root not in path.parents:
            raise StorageError(f"Invalid storage key: {key}")
        return path

    async def upload(self, key: str, content: bytes, content_type: str) -> str:
        path = self._path(key)

        def write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)

        try:
            await asyncio.to_thread(write)
        except OSError as exc:
            raise StorageError(f"Could not store {key}", exc) from exc
        logger.info(f"Stored {len(content)} bytes ({content_type}) at {key}")
        return self.get_url(key)

    async def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            await asyncio.to_thread(lambda: path.unlink(missing_ok=True))
        except OSError as exc:
            raise StorageError(f"Could not delete {key}", exc) from exc
        logger.info(f"Deleted {key}")

    def get_url(self, key: str) -> str:
        return f"{self._base_url}/{key.lstrip('/')}"

    def key_for_url(self, url: str) -> Optional[str]:
        prefix = f"{self._base_url}/"
        if not url.startswith(prefix):
            return None
        return url[len(prefix):] or None
