"""Location Providers - Imperative Shell.

This module resolves the user's current coordinate. Providers raise
LocationUnavailable on any failure; the controller substitutes the
fallback coordinate.
"""

import logging
from typing import Any, Protocol

import requests

from src.core.geo import Coordinate


logger = logging.getLogger(__name__)


# Default timeout for location requests (seconds)
DEFAULT_TIMEOUT = 5


class LocationUnavailable(Exception):
    """Raised when the device location cannot be determined."""


class LocationProvider(Protocol):
    """Anything that can report the user's current coordinate."""

    def request_location(self) -> Coordinate:
        ...


class StaticLocationProvider:
    """Provider that always reports a fixed coordinate."""

    def __init__(self, coordinate: Coordinate) -> None:
        self.coordinate = coordinate

    def request_location(self) -> Coordinate:
        return self.coordinate


class IpLocationProvider:
    """Best-effort location from an IP geolocation HTTP endpoint.

    This is part of the imperative shell - it handles HTTP I/O.

    The endpoint must return JSON with 'latitude'/'longitude' or
    'lat'/'lon' keys.
    """

    def __init__(self, url: str, timeout: int = DEFAULT_TIMEOUT) -> None:
        """Initialize IP location provider.

        Args:
            url: Geolocation endpoint URL
            timeout: Request timeout in seconds
        """
        self.url = url
        self.timeout = timeout

    @staticmethod
    def _parse_coordinate(data: Any) -> Coordinate:
        """Extract a coordinate from a geolocation response body."""
        if not isinstance(data, dict):
            raise LocationUnavailable("Unexpected geolocation response")

        lat = data.get("latitude", data.get("lat"))
        lon = data.get("longitude", data.get("lon"))
        if lat is None or lon is None:
            raise LocationUnavailable("Geolocation response has no coordinates")

        try:
            coordinate = Coordinate(latitude=float(lat), longitude=float(lon))
        except (TypeError, ValueError) as e:
            raise LocationUnavailable(f"Invalid coordinates: {e}") from e

        if not coordinate.is_valid:
            raise LocationUnavailable(f"Coordinates out of range: {coordinate}")

        return coordinate

    def request_location(self) -> Coordinate:
        """Resolve the current coordinate.

        This method performs HTTP I/O.

        Returns:
            Current coordinate

        Raises:
            LocationUnavailable: If the request or its response fails
        """
        try:
            response = requests.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise LocationUnavailable(f"Geolocation request failed: {e}") from e
        except ValueError as e:
            raise LocationUnavailable(f"Geolocation response is not JSON: {e}") from e

        coordinate = self._parse_coordinate(data)

        logger.info(
            "Resolved location %.4f, %.4f",
            coordinate.latitude,
            coordinate.longitude,
        )

        return coordinate
