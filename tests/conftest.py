import uuid

import pytest

from wayfarer.application.context import Context
from wayfarer.application.services.admin_service import AdminService
from wayfarer.application.services.checkin_service import CheckinService
from wayfarer.application.services.favorite_service import FavoriteService, PinService
from wayfarer.application.services.permission_service import PermissionService
from wayfarer.application.services.place_service import PlaceService
from wayfarer.application.services.region_service import RegionService
from wayfarer.application.services.report_service import ReportService
from wayfarer.application.services.user_service import UserService
from wayfarer.core.config import Settings
from wayfarer.domain.models.common import UserRole, UserStatus
from wayfarer.domain.models.user import User
from wayfarer.infrastructure.auth.bcrypt_password_hasher import BcryptPasswordHasher
from wayfarer.infrastructure.email.console_email_service import ConsoleEmailService
from wayfarer.infrastructure.location.haversine_location_service import HaversineLocationService
from wayfarer.infrastructure.memory import InMemoryStore, InMemoryTransactionManager, build_memory_repositories
from wayfarer.infrastructure.storage.local_storage_service import LocalStorageService

# Helsinki city centre; places are created here and check-ins are made nearby.
OLD_TOWN = {"latitude": 60.1675, "longitude": 24.9525}
PASSWORD = "correct-horse-battery"


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def email_service():
    return ConsoleEmailService(public_url="http://wayfarer.test")


@pytest.fixture
def context(store, email_service, tmp_path):
    return Context(
        repositories=build_memory_repositories(store),
        transactions=InMemoryTransactionManager(store),
        password_hasher=BcryptPasswordHasher(rounds=4),
        email_service=email_service,
        location_service=HaversineLocationService("http://geocoder.test", "wayfarer-tests"),
        storage_service=LocalStorageService(str(tmp_path), "http://files.test"),
        settings=Settings(),
    )


@pytest.fixture
def region_service(context):
    return RegionService(context)


@pytest.fixture
def place_service(context):
    return PlaceService(context)


@pytest.fixture
def favorite_service(context):
    return FavoriteService(context)


@pytest.fixture
def pin_service(context):
    return PinService(context)


@pytest.fixture
def permission_service(context):
    return PermissionService(context)


@pytest.fixture
def report_service(context):
    return ReportService(context)


@pytest.fixture
def admin_service(context):
    return AdminService(context)


@pytest.fixture
def checkin_service(context):
    return CheckinService(context)


@pytest.fixture
def user_service(context):
    return UserService(context)


@pytest.fixture
def make_user(context):
    """Store a user directly, bypassing registration."""
    async def factory(role=UserRole.VISITOR, status=UserStatus.ACTIVE, name="Test User", email=None):
        user = User(
            email=email or f"{uuid.uuid4().hex[:10]}@example.com",
            hashed_password=context.password_hasher.hash(PASSWORD),
            name=name,
            role=role,
            status=status,
        )
        return await context.users.create(user)

    return factory


@pytest.fixture
async def admin(make_user):
    return await make_user(UserRole.ADMIN, name="Ada Admin")


@pytest.fixture
async def editor(make_user):
    return await make_user(UserRole.EDITOR, name="Eddie Editor")


@pytest.fixture
async def other_editor(make_user):
    return await make_user(UserRole.EDITOR, name="Olga Other")


@pytest.fixture
async def visitor(make_user):
    return await make_user(UserRole.VISITOR, name="Vera Visitor")


@pytest.fixture
def make_region(region_service):
    """Create a region through the service, published unless asked otherwise."""
    async def factory(owner, name="Old Town", publish=True, **fields):
        data = {"name": name, "coordinates": OLD_TOWN, **fields}
        region = (await region_service.create_region(owner.id, data)).unwrap()
        if publish:
            region = (await region_service.publish_region(owner.id, region.id)).unwrap()
        return region

    return factory


@pytest.fixture
def make_place(place_service):
    """Create a place through the service, published unless asked otherwise."""
    async def factory(owner, region, name="Corner Cafe", publish=True, **fields):
        data = {
            "name": name,
            "category": "cafe",
            "region_id": region.id,
            "coordinates": OLD_TOWN,
            "address": "Senaatintori 1, Helsinki",
            **fields,
        }
        place = (await place_service.create_place(owner.id, data)).unwrap()
        if publish:
            place = (await place_service.publish_place(owner.id, place.id)).unwrap()
        return place

    return factory
