"""
Transaction Manager Interface
=============================

Storage-specific unit of work used by ``Context.with_transaction``.
"""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Awaitable, Callable, TypeVar

if TYPE_CHECKING:
    from wayfarer.domain.repositories.bundle import Repositories

T = TypeVar("T")


class TransactionManager(ABC):
    """
    Runs a callback against repositories bound to one storage transaction.

    The callback receives a ``Repositories`` bundle bound to the transaction
    plus the manager to use for transactions opened inside it, and returns a
    result value. Implementations commit when ``should_commit(result)`` is
    true and roll back otherwise. An exception raised by the callback rolls
    back and propagates.
    """

    @abstractmethod
    async def run(
        self,
        work: Callable[["Repositories", "TransactionManager"], Awaitable[T]],
        should_commit: Callable[[T], bool],
    ) -> T:
        """
        Execute ``work`` inside a transaction.

        Args:
            work: Coroutine function receiving transaction-bound repositories
                and the nested transaction manager
            should_commit: Decides from the returned value whether to commit

        Returns:
            Whatever ``work`` returned
        """
        pass
