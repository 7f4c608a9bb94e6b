"""
MongoDB Repository Base
=======================

Shared plumbing for the MongoDB repositories: optional transaction session,
error translation and paged queries.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.asynchronous.client_session import AsyncClientSession
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError, PyMongoError

from wayfarer.domain.constants.fields import CommonFields
from wayfarer.domain.models.common import SortDirection
from wayfarer.domain.queries import Page, Pagination, SortSpec
from wayfarer.domain.repositories.errors import RepositoryError
from wayfarer.domain.search.engine import DEFAULT_SORT

logger = logging.getLogger(__name__)


@contextmanager
def mongo_errors(action: str, conflict_message: Optional[str] = None) -> Iterator[None]:
    """
    Translate driver exceptions into RepositoryError.

    Args:
        action: Short description used in the error message
        conflict_message: Message for unique-index violations
    """
    try:
        yield
    except DuplicateKeyError as e:
        raise RepositoryError.conflict(conflict_message or f"Duplicate key while trying to {action}") from e
    except PyMongoError as e:
        logger.error(f"MongoDB error while trying to {action}: {e}")
        raise RepositoryError.query_failed(f"Failed to {action}", e) from e


class MongoRepository:
    """
    Base class for collection-backed repositories.

    Every operation passes ``session`` through to the driver so a repository
    bound to a transaction session reads and writes inside that transaction.
    """

    ENTITY: str = ""

    def __init__(self, collection: AsyncCollection, session: Optional[AsyncClientSession] = None):
        self._collection = collection
        self._session = session

    def _to_entity(self, doc: dict) -> Any:
        raise NotImplementedError

    async def _find_one(self, query: Dict[str, Any], action: str) -> Optional[Any]:
        with mongo_errors(action):
            doc = await self._collection.find_one(query, session=self._session)
        return self._to_entity(doc) if doc else None

    async def _find_many(
        self,
        query: Dict[str, Any],
        action: str,
        sort: Optional[List[Tuple[str, int]]] = None,
        limit: Optional[int] = None,
    ) -> List[Any]:
        with mongo_errors(action):
            cursor = self._collection.find(query, session=self._session)
            if sort:
                cursor = cursor.sort(sort)
            if limit is not None:
                cursor = cursor.limit(limit)
            docs = await cursor.to_list(length=None)
        return [self._to_entity(doc) for doc in docs]

    async def _find_page(
        self,
        query: Dict[str, Any],
        sort: List[Tuple[str, int]],
        pagination: Pagination,
        action: str,
    ) -> Page[Any]:
        with mongo_errors(action):
            total = await self._collection.count_documents(query, session=self._session)
            cursor = (
                self._collection.find(query, session=self._session)
                .sort(sort)
                .skip(pagination.offset)
                .limit(pagination.limit)
            )
            docs = await cursor.to_list(length=None)
        return Page(
            items=[self._to_entity(doc) for doc in docs],
            total_count=total,
            page=pagination.page,
            limit=pagination.limit,
        )

    async def _update_by_id(self, entity_id: str, update: Any, action: str) -> Any:
        """Apply an update document or pipeline and return the stored entity."""
        with mongo_errors(action):
            doc = await self._collection.find_one_and_update(
                {CommonFields.MONGO_ID: entity_id},
                update,
                return_document=ReturnDocument.AFTER,
                session=self._session,
            )
        if not doc:
            raise RepositoryError.not_found(self.ENTITY, entity_id)
        return self._to_entity(doc)

    async def _delete_by_id(self, entity_id: str, action: str) -> None:
        with mongo_errors(action):
            result = await self._collection.delete_one({CommonFields.MONGO_ID: entity_id}, session=self._session)
        if result.deleted_count == 0:
            raise RepositoryError.not_found(self.ENTITY, entity_id)


def clamped_increment(field: str, delta: int) -> List[Dict[str, Any]]:
    """Update pipeline adding ``delta`` to a counter without going below zero."""
    return [{"$set": {field: {"$max": [0, {"$add": [{"$ifNull": [f"${field}", 0]}, delta]}]}}}]


def mongo_sort(sort: Optional[SortSpec], allowed: Dict[str, str]) -> List[Tuple[str, int]]:
    """
    Translate a SortSpec into a driver sort list.

    Document fields share the entity attribute names; ``_id`` breaks ties.
    """
    spec = sort or DEFAULT_SORT
    field = allowed.get(spec.field, spec.field)
    direction = ASCENDING if spec.direction == SortDirection.ASC else DESCENDING
    return [(field, direction), (CommonFields.MONGO_ID, direction)]

