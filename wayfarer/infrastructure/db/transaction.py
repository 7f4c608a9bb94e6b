"""
MongoDB Transactions
====================

Runs a unit of work inside a MongoDB multi-document transaction. Requires a
replica set or sharded cluster.
"""
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from pymongo import AsyncMongoClient
from pymongo.asynchronous.client_session import AsyncClientSession
from pymongo.asynchronous.database import AsyncDatabase

from wayfarer.core.config import Settings
from wayfarer.domain.repositories.bundle import Repositories
from wayfarer.domain.repositories.transaction_manager import TransactionManager
from wayfarer.infrastructure.db.factory import build_mongo_repositories

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MongoTransactionManager(TransactionManager):
    """
    Opens a client session per unit of work and rebinds every repository to it.

    MongoDB has no nested transactions: a manager created for work that is
    already inside a transaction joins it, and the outermost manager decides
    commit or rollback.
    """

    def __init__(
        self,
        client: AsyncMongoClient,
        database: AsyncDatabase,
        settings: Settings,
        session: Optional[AsyncClientSession] = None,
    ):
        self._client = client
        self._database = database
        self._settings = settings
        self._session = session

    def _joined(self, session: AsyncClientSession) -> "MongoTransactionManager":
        return MongoTransactionManager(self._client, self._database, self._settings, session)

    async def run(
        self,
        work: Callable[[Repositories, TransactionManager], Awaitable[T]],
        should_commit: Callable[[T], bool],
    ) -> T:
        if self._session is not None:
            repositories = build_mongo_repositories(self._database, self._settings, self._session)
            return await work(repositories, self)

        async with self._client.start_session() as session:
            await session.start_transaction()
            try:
                repositories = build_mongo_repositories(self._database, self._settings, session)
                result = await work(repositories, self._joined(session))
            except Exception:
                await session.abort_transaction()
                raise

            if should_commit(result):
                await session.commit_transaction()
            else:
                await session.abort_transaction()
                logger.debug("MongoDB transaction rolled back")
            return result
