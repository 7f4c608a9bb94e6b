from typing import TYPE_CHECKING

from ...core.config import Settings
from ...domain.repositories.bundle import Repositories
from ...domain.repositories.transaction_manager import TransactionManager
from ...infrastructure.db import MongoTransactionManager, build_mongo_repositories
from ...infrastructure.memory import InMemoryStore, InMemoryTransactionManager, build_memory_repositories

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class RepositoryProvider:
    """Repository registration provider - wires domain ports to infrastructure implementations"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register the repository bundle and its transaction manager.
        Uses whichever storage backend the storage provider registered.
        """
        settings = container.get(Settings)

        if container.has("mongo_client"):
            mongo_client = container.get("mongo_client")
            database = mongo_client.get_database()
            container.register_singleton(Repositories, build_mongo_repositories(database, settings))
            container.register_singleton(
                TransactionManager,
                MongoTransactionManager(mongo_client.client, database, settings),
            )
            return

        store = container.get(InMemoryStore)
        container.register_singleton(Repositories, build_memory_repositories(store))
        container.register_singleton(TransactionManager, InMemoryTransactionManager(store))
