"""
Great-circle distance
=====================

Haversine distance on a spherical Earth. Region search, place search and the
check-in location check all go through these two functions.
"""
import math

from wayfarer.domain.constants.limits import LocationLimits
from wayfarer.domain.models.common import Coordinates


def haversine_km(a: Coordinates, b: Coordinates) -> float:
    """
    Distance between two WGS84 points in kilometers.

    Args:
        a: First point
        b: Second point

    Returns:
        Great-circle distance using an Earth radius of 6371 km
    """
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = math.radians(b.latitude - a.latitude)
    d_lon = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return LocationLimits.EARTH_RADIUS_KM * c


def haversine_m(a: Coordinates, b: Coordinates) -> float:
    """Distance between two WGS84 points in meters."""
    return haversine_km(a, b) * 1000.0
