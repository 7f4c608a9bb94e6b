from typing import TYPE_CHECKING

from ...application.context import Context
from ...application.services.admin_service import AdminService
from ...application.services.checkin_service import CheckinService
from ...application.services.favorite_service import FavoriteService, PinService
from ...application.services.permission_service import PermissionService
from ...application.services.place_service import PlaceService
from ...application.services.region_service import RegionService
from ...application.services.report_service import ReportService
from ...application.services.user_service import UserService
from ...core.config import Settings
from ...domain.repositories.bundle import Repositories
from ...domain.repositories.transaction_manager import TransactionManager
from ...domain.services.email_service import EmailService
from ...domain.services.location_service import LocationService
from ...domain.services.password_hasher import PasswordHasher
from ...domain.services.storage_service import StorageService

if TYPE_CHECKING:
    from ..base_container import BaseContainer

SERVICES = (
    RegionService,
    PlaceService,
    FavoriteService,
    PinService,
    PermissionService,
    ReportService,
    AdminService,
    CheckinService,
    UserService,
)


class ServiceProvider:
    """Application service provider - builds the shared Context and every service on top of it"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register the application Context and the services.
        Every service shares the same Context instance.
        """
        context = Context(
            repositories=container.get(Repositories),
            transactions=container.get(TransactionManager),
            password_hasher=container.get(PasswordHasher),
            email_service=container.get(EmailService),
            location_service=container.get(LocationService),
            storage_service=container.get(StorageService),
            settings=container.get(Settings),
        )
        container.register_singleton(Context, context)

        for service_class in SERVICES:
            container.register_singleton(service_class, service_class(context))
