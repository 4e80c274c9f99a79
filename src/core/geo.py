"""Geographic calculations - Pure functions.

This module provides the coordinate value type and great-circle distance
calculations used to place events relative to the user.
All functions are pure with no side effects.
"""

import math
from dataclasses import dataclass


# Earth's radius in kilometers (spherical approximation)
EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Coordinate:
    """Immutable latitude/longitude pair in degrees.

    Attributes:
        latitude: Latitude in degrees
        longitude: Longitude in degrees
    """
    latitude: float
    longitude: float

    @property
    def is_valid(self) -> bool:
        """Return True if the coordinate is finite and within range."""
        return (
            math.isfinite(self.latitude)
            and math.isfinite(self.longitude)
            and -90 <= self.latitude <= 90
            and -180 <= self.longitude <= 180
        )


def calculate_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Calculate distance between two points using Haversine formula.

    Pure function. NaN or infinite inputs yield NaN; callers validate
    coordinates before relying on the result.

    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point

    Returns:
        Distance in kilometers
    """
    # math.sin raises on infinity; report it as an undefined distance instead
    if not all(math.isfinite(v) for v in (lat1, lon1, lat2, lon2)):
        return math.nan

    # Convert to radians
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    # Haversine formula
    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    # Rounding can push a fractionally past 1 for near-antipodal points
    a = min(a, 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates.

    Pure function. Symmetric, and zero when both coordinates are equal.

    Args:
        a: First coordinate
        b: Second coordinate

    Returns:
        Distance in kilometers
    """
    return calculate_distance(a.latitude, a.longitude, b.latitude, b.longitude)
