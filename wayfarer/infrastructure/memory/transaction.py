"""
In-Memory Transactions
======================

Runs a unit of work against a fork of the store and commits the fork back
when the work succeeds.
"""
import logging
from typing import Awaitable, Callable, TypeVar

from wayfarer.domain.repositories.bundle import Repositories
from wayfarer.domain.repositories.transaction_manager import TransactionManager
from wayfarer.infrastructure.memory.factory import build_memory_repositories
from wayfarer.infrastructure.memory.store import InMemoryStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InMemoryTransactionManager(TransactionManager):
    """
    Serializes transactions on the store lock.

    The work runs against repositories bound to a deep copy of the tables.
    Nothing becomes visible until commit; rollback simply drops the fork.
    A transaction opened inside the work forks the fork.
    """

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def run(
        self,
        work: Callable[[Repositories, TransactionManager], Awaitable[T]],
        should_commit: Callable[[T], bool],
    ) -> T:
        async with self._store.lock:
            fork = self._store.fork()
            result = await work(build_memory_repositories(fork), InMemoryTransactionManager(fork))
            if should_commit(result):
                self._store.commit(fork)
            else:
                logger.debug("In-memory transaction rolled back")
            return result
