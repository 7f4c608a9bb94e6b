"""
In-Memory Store
===============

Process-local tables backing the in-memory repositories. One store is
created per process (or per test) and handed to every repository explicitly.
"""
import asyncio
import copy
from typing import Any, Dict, Iterable, List, Optional, TypeVar

from wayfarer.domain.repositories.errors import RepositoryError
from wayfarer.utils.datetime_utils import now

T = TypeVar("T")

TABLES = (
    "regions",
    "region_favorites",
    "region_pins",
    "places",
    "place_favorites",
    "place_permissions",
    "checkins",
    "checkin_photos",
    "reports",
    "users",
    "sessions",
    "password_reset_tokens",
)


def newest_first(rows: Iterable[T]) -> List[T]:
    """Order by created_at descending; later inserts win ties."""
    indexed = list(enumerate(rows))
    indexed.sort(key=lambda pair: (pair[1].created_at, pair[0]), reverse=True)
    return [row for _, row in indexed]


class InMemoryStore:
    """
    Named tables of entities keyed by id.

    Writers that check-then-insert hold ``lock`` so a concurrent loser sees the
    winner's row. Transactions fork the store, run against the fork and
    commit it back in one assignment.
    """

    def __init__(self, tables: Optional[Dict[str, Dict[str, Any]]] = None) -> None:
        self.lock = asyncio.Lock()
        self.tables: Dict[str, Dict[str, Any]] = tables or {name: {} for name in TABLES}

    def fork(self) -> "InMemoryStore":
        return InMemoryStore(copy.deepcopy(self.tables))

    def commit(self, fork: "InMemoryStore") -> None:
        self.tables = fork.tables


class InMemoryRepository:
    """Shared table helpers. Entities are copied in and out so callers never alias stored rows."""

    TABLE: str = ""
    ENTITY: str = ""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    @property
    def _rows(self) -> Dict[str, Any]:
        return self._store.tables[self.TABLE]

    def _get(self, entity_id: str) -> Optional[Any]:
        row = self._rows.get(entity_id)
        return copy.deepcopy(row) if row is not None else None

    def _require(self, entity_id: str) -> Any:
        row = self._rows.get(entity_id)
        if row is None:
            raise RepositoryError.not_found(self.ENTITY, entity_id)
        return row

    def _put(self, entity: Any) -> Any:
        self._rows[entity.id] = copy.deepcopy(entity)
        return copy.deepcopy(entity)

    def _patch(self, entity: Any, fields: Iterable[str]) -> Any:
        """Copy only ``fields`` from ``entity`` onto the stored row; other columns keep their stored values."""
        row = self._require(entity.id)
        for name in fields:
            setattr(row, name, copy.deepcopy(getattr(entity, name)))
        row.updated_at = now()
        return copy.deepcopy(row)

    def _all(self) -> List[Any]:
        return [copy.deepcopy(row) for row in self._rows.values()]

    @staticmethod
    def _copies(rows: Iterable[T]) -> List[T]:
        return [copy.deepcopy(row) for row in rows]
