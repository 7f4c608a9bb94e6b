"""
MongoDB Client
==============

Singleton async MongoDB client for database connections.
"""
import logging
from typing import Optional

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from wayfarer.core.config import get_settings

logger = logging.getLogger(__name__)


class MongoClientManager:
    """
    Singleton MongoDB client manager.

    Manages the MongoDB connection and provides access to collections.
    """
    _instance: Optional["MongoClientManager"] = None
    _client: Optional[AsyncMongoClient] = None
    _database: Optional[AsyncDatabase] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._client is None:
            self._initialize_client()

    def _initialize_client(self) -> None:
        """Initialize MongoDB client connection."""
        if self._client is not None:
            return  # Already initialized

        settings = get_settings()
        if not settings.mongo_uri:
            raise RuntimeError("MONGO_URI not set. Please configure it in your .env file.")

        # Entities carry timezone-aware timestamps; read them back the same way
        self._client = AsyncMongoClient(settings.mongo_uri, tz_aware=True)
        self._database = self._client[settings.mongo_database_name]
        logger.info(f"Connected to MongoDB: {settings.mongo_database_name}")

    @property
    def client(self) -> AsyncMongoClient:
        if self._client is None:
            self._initialize_client()
        return self._client

    def get_database(self) -> AsyncDatabase:
        """Get MongoDB database instance."""
        if self._database is None:
            self._initialize_client()
        return self._database

    async def close(self) -> None:
        """Close MongoDB connection."""
        if self._client:
            await self._client.close()
            self._client = None
            self._database = None
            logger.info("MongoDB connection closed")


def get_mongo_client() -> MongoClientManager:
    """Get singleton MongoDB client manager."""
    return MongoClientManager()
