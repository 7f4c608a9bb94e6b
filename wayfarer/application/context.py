"""
Application Context
===================

The fixed aggregate of repository ports and collaborator services every
application operation receives, plus the transaction coordinator.
"""
import logging
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, TypeVar

from wayfarer.core.config import Settings
from wayfarer.domain.repositories.bundle import Repositories
from wayfarer.domain.repositories.transaction_manager import TransactionManager
from wayfarer.domain.result import ErrorCode, Result, err
from wayfarer.domain.services.email_service import EmailService
from wayfarer.domain.services.location_service import LocationService
from wayfarer.domain.services.password_hasher import PasswordHasher
from wayfarer.domain.services.storage_service import StorageService

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Context:
    """
    Context passed to every application operation.

    Repository ports are reached through the shortcut properties
    (``context.regions``, ``context.places`` ...).
    """
    repositories: Repositories
    transactions: TransactionManager
    password_hasher: PasswordHasher
    email_service: EmailService
    location_service: LocationService
    storage_service: StorageService
    settings: Settings

    @property
    def regions(self):
        return self.repositories.regions

    @property
    def region_favorites(self):
        return self.repositories.region_favorites

    @property
    def region_pins(self):
        return self.repositories.region_pins

    @property
    def places(self):
        return self.repositories.places

    @property
    def place_favorites(self):
        return self.repositories.place_favorites

    @property
    def place_permissions(self):
        return self.repositories.place_permissions

    @property
    def checkins(self):
        return self.repositories.checkins

    @property
    def checkin_photos(self):
        return self.repositories.checkin_photos

    @property
    def reports(self):
        return self.repositories.reports

    @property
    def users(self):
        return self.repositories.users

    @property
    def sessions(self):
        return self.repositories.sessions

    @property
    def password_reset_tokens(self):
        return self.repositories.password_reset_tokens

    async def with_transaction(self, fn: Callable[["Context"], Awaitable[Result[T]]]) -> Result[T]:
        """
        Run ``fn`` with a context whose repositories share one storage transaction.

        An ``Err`` returned by ``fn`` rolls the transaction back and is returned
        unchanged. An exception raised by ``fn`` rolls back and becomes
        TRANSACTION_FAILED. Inside ``fn`` only the context it receives may be
        used; the outer context is locked for the duration.

        Args:
            fn: Coroutine function taking the transaction-bound context

        Returns:
            The result of ``fn``, or a TRANSACTION_FAILED error
        """
        async def work(repositories: Repositories, nested: TransactionManager) -> Result[T]:
            return await fn(replace(self, repositories=repositories, transactions=nested))

        try:
            return await self.transactions.run(work, should_commit=lambda result: result.is_ok())
        except Exception as exc:
            logger.error(f"Transaction rolled back: {exc}", exc_info=True)
            return err(ErrorCode.TRANSACTION_FAILED, "Transaction failed", exc)
