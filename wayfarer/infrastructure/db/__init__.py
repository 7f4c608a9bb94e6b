"""
MongoDB Infrastructure
======================

Repository ports backed by MongoDB through the async pymongo driver.
"""
from .factory import build_mongo_repositories
from .indexes import ensure_indexes
from .mongo_connection import MongoClientManager, get_mongo_client
from .transaction import MongoTransactionManager

__all__ = [
    "MongoClientManager",
    "MongoTransactionManager",
    "build_mongo_repositories",
    "ensure_indexes",
    "get_mongo_client",
]
