import logging
from typing import TYPE_CHECKING

from ...core.config import Settings
from ...infrastructure.db.mongo_connection import get_mongo_client
from ...infrastructure.memory import InMemoryStore

if TYPE_CHECKING:
    from ..base_container import BaseContainer

logger = logging.getLogger(__name__)


class StorageProvider:
    """Centralized storage provider - single source of truth for the persistence backend"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register the storage backend selected by STORAGE_BACKEND.

        "mongo" registers the MongoDB client manager under "mongo_client";
        anything else registers one process-wide InMemoryStore.
        """
        settings = container.get(Settings)

        if settings.storage_backend == "mongo":
            container.register_singleton("mongo_client", get_mongo_client())
            logger.info("Storage backend: MongoDB")
        else:
            container.register_singleton(InMemoryStore, InMemoryStore())
            logger.info("Storage backend: in-memory")
