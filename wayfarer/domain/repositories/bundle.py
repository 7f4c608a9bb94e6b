"""
Repository Bundle
=================

The fixed set of repository ports an application context carries. A
transaction rebinds the whole bundle at once.
"""
from dataclasses import dataclass

from wayfarer.domain.repositories.checkin_repository import CheckinPhotoRepository, CheckinRepository
from wayfarer.domain.repositories.place_repository import (
    PlaceFavoriteRepository,
    PlacePermissionRepository,
    PlaceRepository,
)
from wayfarer.domain.repositories.region_repository import (
    RegionFavoriteRepository,
    RegionPinRepository,
    RegionRepository,
)
from wayfarer.domain.repositories.report_repository import ReportRepository
from wayfarer.domain.repositories.user_repository import (
    PasswordResetTokenRepository,
    SessionRepository,
    UserRepository,
)


@dataclass(frozen=True)
class Repositories:
    regions: RegionRepository
    region_favorites: RegionFavoriteRepository
    region_pins: RegionPinRepository
    places: PlaceRepository
    place_favorites: PlaceFavoriteRepository
    place_permissions: PlacePermissionRepository
    checkins: CheckinRepository
    checkin_photos: CheckinPhotoRepository
    reports: ReportRepository
    users: UserRepository
    sessions: SessionRepository
    password_reset_tokens: PasswordResetTokenRepository
