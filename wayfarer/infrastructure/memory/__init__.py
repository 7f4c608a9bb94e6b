"""
In-Memory Infrastructure
========================

Reference implementation of every repository port, backed by an explicit
InMemoryStore.
"""
from .factory import build_memory_repositories
from .store import InMemoryStore
from .transaction import InMemoryTransactionManager

__all__ = ["InMemoryStore", "InMemoryTransactionManager", "build_memory_repositories"]
