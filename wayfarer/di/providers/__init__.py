"""
Providers Package
=================

Dependency injection providers for registering dependencies.
"""
from .storage_provider import StorageProvider
from .repository_provider import RepositoryProvider
from .collaborator_provider import CollaboratorProvider
from .service_provider import ServiceProvider

__all__ = [
    "StorageProvider",
    "RepositoryProvider",
    "CollaboratorProvider",
    "ServiceProvider",
]
