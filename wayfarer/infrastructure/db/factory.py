from typing import Optional

from pymongo.asynchronous.client_session import AsyncClientSession
from pymongo.asynchronous.database import AsyncDatabase

from wayfarer.core.config import Settings
from wayfarer.domain.repositories.bundle import Repositories
from wayfarer.infrastructure.db.mongo_checkin_repository import MongoCheckinPhotoRepository, MongoCheckinRepository
from wayfarer.infrastructure.db.mongo_place_repository import (
    MongoPlaceFavoriteRepository,
    MongoPlacePermissionRepository,
    MongoPlaceRepository,
)
from wayfarer.infrastructure.db.mongo_region_repository import (
    MongoRegionFavoriteRepository,
    MongoRegionPinRepository,
    MongoRegionRepository,
)
from wayfarer.infrastructure.db.mongo_report_repository import MongoReportRepository
from wayfarer.infrastructure.db.mongo_user_repository import (
    MongoPasswordResetTokenRepository,
    MongoSessionRepository,
    MongoUserRepository,
)


def build_mongo_repositories(
    database: AsyncDatabase,
    settings: Settings,
    session: Optional[AsyncClientSession] = None,
) -> Repositories:
    """Bind every MongoDB repository to its configured collection and an optional session."""
    return Repositories(
        regions=MongoRegionRepository(database[settings.regions_collection], session),
        region_favorites=MongoRegionFavoriteRepository(database[settings.region_favorites_collection], session),
        region_pins=MongoRegionPinRepository(database[settings.region_pins_collection], session),
        places=MongoPlaceRepository(database[settings.places_collection], session),
        place_favorites=MongoPlaceFavoriteRepository(database[settings.place_favorites_collection], session),
        place_permissions=MongoPlacePermissionRepository(database[settings.place_permissions_collection], session),
        checkins=MongoCheckinRepository(database[settings.checkins_collection], session),
        checkin_photos=MongoCheckinPhotoRepository(database[settings.checkin_photos_collection], session),
        reports=MongoReportRepository(database[settings.reports_collection], session),
        users=MongoUserRepository(database[settings.users_collection], session),
        sessions=MongoSessionRepository(database[settings.sessions_collection], session),
        password_reset_tokens=MongoPasswordResetTokenRepository(
            database[settings.password_reset_tokens_collection], session,
        ),
    )
