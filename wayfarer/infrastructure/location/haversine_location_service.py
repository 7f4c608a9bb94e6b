"""
Haversine Location Service
==========================

LocationService implementation: great-circle distance checks plus forward
and reverse geocoding against a Nominatim-compatible HTTP API.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from wayfarer.domain.constants.limits import LocationLimits
from wayfarer.domain.models.common import Coordinates
from wayfarer.domain.search.geo import haversine_m
from wayfarer.domain.services.location_service import LocationService, LocationServiceError

logger = logging.getLogger(__name__)


class HaversineLocationService(LocationService):
    """
    Distance math is local; geocoding calls the configured Nominatim endpoint.

    Args:
        base_url: Nominatim base URL, e.g. https://nominatim.openstreetmap.org
        user_agent: User-Agent header the provider requires
        timeout: Request timeout in seconds
        default_max_distance_meters: Check-in radius used when none is given
        transport: Optional httpx transport (tests use ``httpx.MockTransport``)
    """

    def __init__(
        self,
        base_url: str,
        user_agent: str,
        timeout: float = 10.0,
        default_max_distance_meters: int = LocationLimits.DEFAULT_CHECKIN_DISTANCE_METERS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._headers = {"User-Agent": user_agent}
        self._timeout = timeout
        self._default_max_distance = default_max_distance_meters
        self._transport = transport

    def calculate_distance(self, origin: Coordinates, destination: Coordinates) -> float:
        return haversine_m(origin, destination)

    def is_within_radius(self, center: Coordinates, point: Coordinates, radius_meters: float) -> bool:
        return self.calculate_distance(center, point) <= radius_meters

    def validate_user_location(
        self,
        user_location: Coordinates,
        place_location: Coordinates,
        max_distance_meters: Optional[int] = None,
    ) -> bool:
        limit = max_distance_meters if max_distance_meters is not None else self._default_max_distance
        limit = min(limit, LocationLimits.MAX_CHECKIN_DISTANCE_METERS)
        return self.is_within_radius(place_location, user_location, limit)

    async def _get(self, path: str, params: Dict[str, Any]) -> Any:
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                headers=self._headers,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(path, params={**params, "format": "json"})
                response.raise_for_status()
                return response.json()
        except httpx.TimeoutException as exc:
            logger.warning(f"Geocoding request to {path} timed out")
            raise LocationServiceError("Geocoding request timed out", exc) from exc
        except httpx.HTTPStatusError as exc:
            logger.warning(f"Geocoding request to {path} failed: HTTP {exc.response.status_code}")
            raise LocationServiceError(f"Geocoding failed with status {exc.response.status_code}", exc) from exc
        except httpx.HTTPError as exc:
            logger.warning(f"Geocoding request to {path} failed: {exc}")
            raise LocationServiceError("Geocoding request failed", exc) from exc

    async def get_address_from_coordinates(self, coordinates: Coordinates) -> Optional[str]:
        data = await self._get("/reverse", {"lat": coordinates.latitude, "lon": coordinates.longitude})
        if not isinstance(data, dict):
            return None
        return data.get("display_name")

    async def get_coordinates_from_address(self, address: str) -> Optional[Coordinates]:
        data = await self._get("/search", {"q": address, "limit": 1})
        if not data:
            return None
        first = data[0]
        try:
            return Coordinates(latitude=float(first["lat"]), longitude=float(first["lon"]))
        except (KeyError, TypeError, ValueError):
            logger.warning(f"Unexpected geocoding response for '{address}'")
            return None
