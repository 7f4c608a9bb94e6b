"""
MongoDB Indexes
===============

Unique indexes back the one-row-per-pair rules (favorites, pins,
permissions, reports, e-mails); the rest serve the common lookups.
"""
import logging

from pymongo import ASCENDING, DESCENDING
from pymongo.asynchronous.database import AsyncDatabase

from wayfarer.core.config import Settings
from wayfarer.domain.constants.fields import (
    CheckinFields,
    CheckinPhotoFields,
    FavoriteFields,
    PasswordResetFields,
    PermissionFields,
    PinFields,
    PlaceFields,
    RegionFields,
    ReportFields,
    SessionFields,
    UserFields,
)
from wayfarer.infrastructure.db.base import mongo_errors

logger = logging.getLogger(__name__)


async def ensure_indexes(database: AsyncDatabase, settings: Settings) -> None:
    """
    Create every index the repositories rely on. Safe to call on each startup.

    Args:
        database: Target database
        settings: Provides the collection names
    """
    with mongo_errors("create indexes"):
        regions = database[settings.regions_collection]
        await regions.create_index([(RegionFields.STATUS, ASCENDING), (RegionFields.CREATED_AT, DESCENDING)])
        await regions.create_index([(RegionFields.CREATED_BY, ASCENDING)])

        places = database[settings.places_collection]
        await places.create_index([(PlaceFields.REGION_ID, ASCENDING), (PlaceFields.STATUS, ASCENDING)])
        await places.create_index([(PlaceFields.CREATED_BY, ASCENDING)])

        region_favorites = database[settings.region_favorites_collection]
        await region_favorites.create_index(
            [(FavoriteFields.USER_ID, ASCENDING), (FavoriteFields.REGION_ID, ASCENDING)], unique=True,
        )
        await region_favorites.create_index([(FavoriteFields.REGION_ID, ASCENDING)])
        place_favorites = database[settings.place_favorites_collection]
        await place_favorites.create_index(
            [(FavoriteFields.USER_ID, ASCENDING), (FavoriteFields.PLACE_ID, ASCENDING)], unique=True,
        )
        await place_favorites.create_index([(FavoriteFields.PLACE_ID, ASCENDING)])
        region_pins = database[settings.region_pins_collection]
        await region_pins.create_index(
            [(PinFields.USER_ID, ASCENDING), (PinFields.REGION_ID, ASCENDING)], unique=True,
        )
        await region_pins.create_index([(PinFields.REGION_ID, ASCENDING)])
        await database[settings.place_permissions_collection].create_index(
            [(PermissionFields.USER_ID, ASCENDING), (PermissionFields.PLACE_ID, ASCENDING)], unique=True,
        )

        checkins = database[settings.checkins_collection]
        await checkins.create_index([(CheckinFields.USER_ID, ASCENDING), (CheckinFields.CREATED_AT, DESCENDING)])
        await checkins.create_index([(CheckinFields.PLACE_ID, ASCENDING)])
        await database[settings.checkin_photos_collection].create_index(
            [(CheckinPhotoFields.CHECKIN_ID, ASCENDING), (CheckinPhotoFields.DISPLAY_ORDER, ASCENDING)],
        )

        reports = database[settings.reports_collection]
        await reports.create_index(
            [
                (ReportFields.REPORTER_USER_ID, ASCENDING),
                (ReportFields.ENTITY_TYPE, ASCENDING),
                (ReportFields.ENTITY_ID, ASCENDING),
            ],
            unique=True,
        )
        await reports.create_index([(ReportFields.STATUS, ASCENDING), (ReportFields.CREATED_AT, DESCENDING)])

        await database[settings.users_collection].create_index([(UserFields.EMAIL, ASCENDING)], unique=True)

        sessions = database[settings.sessions_collection]
        await sessions.create_index([(SessionFields.TOKEN, ASCENDING)], unique=True)
        await sessions.create_index([(SessionFields.USER_ID, ASCENDING)])

        reset_tokens = database[settings.password_reset_tokens_collection]
        await reset_tokens.create_index([(PasswordResetFields.TOKEN, ASCENDING)], unique=True)
        await reset_tokens.create_index([(PasswordResetFields.EXPIRES_AT, ASCENDING)], expireAfterSeconds=0)

    logger.info("MongoDB indexes ensured")
