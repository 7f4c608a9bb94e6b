"""
Location Service Interface
==========================

Distance checks for check-ins plus forward/reverse geocoding.
"""
from abc import ABC, abstractmethod
from typing import Optional

from wayfarer.domain.models.common import Coordinates


class LocationServiceError(Exception):
    """Raised when geocoding fails at the provider."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class LocationService(ABC):

    @abstractmethod
    def calculate_distance(self, origin: Coordinates, destination: Coordinates) -> float:
        """
        Great-circle distance in meters.

        Args:
            origin: First point
            destination: Second point

        Returns:
            Distance in meters
        """
        pass

    @abstractmethod
    def is_within_radius(self, center: Coordinates, point: Coordinates, radius_meters: float) -> bool:
        pass

    @abstractmethod
    def validate_user_location(
        self,
        user_location: Coordinates,
        place_location: Coordinates,
        max_distance_meters: Optional[int] = None,
    ) -> bool:
        """True when the user stands within the allowed check-in distance of the place."""
        pass

    @abstractmethod
    async def get_address_from_coordinates(self, coordinates: Coordinates) -> Optional[str]:
        pass

    @abstractmethod
    async def get_coordinates_from_address(self, address: str) -> Optional[Coordinates]:
        pass
