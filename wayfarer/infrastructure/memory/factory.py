from wayfarer.domain.repositories.bundle import Repositories
from wayfarer.infrastructure.memory.checkin_repository import (
    InMemoryCheckinPhotoRepository,
    InMemoryCheckinRepository,
)
from wayfarer.infrastructure.memory.place_repository import (
    InMemoryPlaceFavoriteRepository,
    InMemoryPlacePermissionRepository,
    InMemoryPlaceRepository,
)
from wayfarer.infrastructure.memory.region_repository import (
    InMemoryRegionFavoriteRepository,
    InMemoryRegionPinRepository,
    InMemoryRegionRepository,
)
from wayfarer.infrastructure.memory.report_repository import InMemoryReportRepository
from wayfarer.infrastructure.memory.store import InMemoryStore
from wayfarer.infrastructure.memory.user_repository import (
    InMemoryPasswordResetTokenRepository,
    InMemorySessionRepository,
    InMemoryUserRepository,
)


def build_memory_repositories(store: InMemoryStore) -> Repositories:
    """Bind every in-memory repository to one store."""
    return Repositories(
        regions=InMemoryRegionRepository(store),
        region_favorites=InMemoryRegionFavoriteRepository(store),
        region_pins=InMemoryRegionPinRepository(store),
        places=InMemoryPlaceRepository(store),
        place_favorites=InMemoryPlaceFavoriteRepository(store),
        place_permissions=InMemoryPlacePermissionRepository(store),
        checkins=InMemoryCheckinRepository(store),
        checkin_photos=InMemoryCheckinPhotoRepository(store),
        reports=InMemoryReportRepository(store),
        users=InMemoryUserRepository(store),
        sessions=InMemorySessionRepository(store),
        password_reset_tokens=InMemoryPasswordResetTokenRepository(store),
    )
