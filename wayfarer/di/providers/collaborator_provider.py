from typing import TYPE_CHECKING

from ...core.config import Settings
from ...domain.services.email_service import EmailService
from ...domain.services.location_service import LocationService
from ...domain.services.password_hasher import PasswordHasher
from ...domain.services.storage_service import StorageService
from ...infrastructure.auth.bcrypt_password_hasher import BcryptPasswordHasher
from ...infrastructure.email.console_email_service import ConsoleEmailService
from ...infrastructure.location.haversine_location_service import HaversineLocationService
from ...infrastructure.storage.local_storage_service import LocalStorageService

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class CollaboratorProvider:
    """Collaborator service provider - password hashing, e-mail, geocoding and file storage"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        settings = container.get(Settings)

        container.register_singleton(PasswordHasher, BcryptPasswordHasher())
        container.register_singleton(EmailService, ConsoleEmailService(public_url=settings.public_url))
        container.register_singleton(
            LocationService,
            HaversineLocationService(
                base_url=settings.nominatim_url,
                user_agent=settings.geocoder_user_agent,
                timeout=settings.geocoder_timeout_seconds,
                default_max_distance_meters=settings.checkin_max_distance_meters,
            ),
        )
        container.register_singleton(
            StorageService,
            LocalStorageService(directory=settings.upload_directory, base_url=settings.upload_base_url),
        )
