# Standard library imports
from typing import Optional

# Local application imports
from ..core.config import Settings, get_settings
from .base_container import BaseContainer
from .providers import (
    CollaboratorProvider,
    RepositoryProvider,
    ServiceProvider,
    StorageProvider,
)


class DIContainer(BaseContainer):
    """
    Main dependency injection container.
    Composes all providers in the correct order.

    Registration order is important:
    1. Storage backend (StorageProvider)
    2. Repositories (RepositoryProvider) - depends on storage
    3. Collaborators (CollaboratorProvider) - hashing, e-mail, geocoding, files
    4. Context and services (ServiceProvider) - depend on everything above
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        super().__init__()
        self.register_singleton(Settings, settings or get_settings())
        self.setup()

    def setup(self) -> None:
        """
        Setup dependency registrations by composing all providers.
        Order matters: storage → repositories → collaborators → services
        """
        StorageProvider.register(self)
        RepositoryProvider.register(self)
        CollaboratorProvider.register(self)
        ServiceProvider.register(self)


# Global container instance (singleton pattern)
_container: Optional[DIContainer] = None


def get_container() -> DIContainer:
    """
    Get the global DI container instance (singleton pattern)

    Returns:
        DIContainer instance with all dependencies registered
    """
    global _container
    if _container is None:
        _container = DIContainer()
    return _container


def reset_container() -> None:
    """Drop the global container so the next get_container() rebuilds it."""
    global _container
    _container = None
