"""Geodesic calculations on Earth's surface.

Provides geographic helper functions for the roll map:
- Distance calculation (Haversine formula)
- Coordinate range checks (finite, inside WGS84 bounds)
- Axis-aligned bounding box of a set of coordinates
- Web Mercator projection to and from the unit square (camera math)

All calculations use a spherical Earth approximation (R = 6,371 km).
"""

from math import asin, atan, cos, degrees, isfinite, log, pi, radians, sin, sinh, sqrt, tan

import numpy as np

# Earth's mean radius in meters (spherical approximation)
EARTH_RADIUS_M = 6_371_000

MAX_ABS_LAT = 90.0
MAX_ABS_LNG = 180.0

# Web Mercator is undefined at the poles, latitudes are clamped to this
MERCATOR_LAT_BOUND = 85.05112878


class GeoCalculator:
    """Static methods for geodesic calculations on Earth's surface.

    Coordinates are in decimal degrees (WGS84).
    Distances are in meters.
    """

    EARTH_RADIUS_M = EARTH_RADIUS_M

    @staticmethod
    def haversine_distance_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
        """Calculate great-circle distance between two points using Haversine formula.

        Args:
            lat1: Latitude of first point (decimal degrees)
            lng1: Longitude of first point (decimal degrees)
            lat2: Latitude of second point (decimal degrees)
            lng2: Longitude of second point (decimal degrees)

        Returns:
            Distance in meters.
        """
        dlat = radians(lat2 - lat1)
        dlng = radians(lng2 - lng1)
        a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlng / 2) ** 2
        # Rounding can push a marginally above 1 for antipodal points
        return 2 * EARTH_RADIUS_M * asin(sqrt(min(1.0, a)))

    @staticmethod
    def is_valid_coordinate(lat: object, lng: object) -> bool:
        """Check that lat/lng are finite numbers inside the WGS84 range.

        Booleans and strings are rejected even though Python can coerce them.
        """
        for value in (lat, lng):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return False
            if not isfinite(value):
                return False
        return abs(lat) <= MAX_ABS_LAT and abs(lng) <= MAX_ABS_LNG  # type: ignore[arg-type]

    @staticmethod
    def bounding_box(coords: list[tuple[float, float]]) -> tuple[float, float, float, float]:
        """Minimal axis-aligned box covering all (lng, lat) pairs.

        Args:
            coords: Non-empty list of (lng, lat) tuples

        Returns:
            Tuple (west, south, east, north) in decimal degrees.

        Raises:
            ValueError: If coords is empty.
        """
        if not coords:
            raise ValueError("Cannot compute bounding box of an empty coordinate list")
        arr = np.asarray(coords, dtype=float)
        west, south = arr.min(axis=0)
        east, north = arr.max(axis=0)
        return float(west), float(south), float(east), float(north)

    @staticmethod
    def to_mercator_unit(lat: float, lng: float) -> tuple[float, float]:
        """Project a coordinate onto the Web Mercator unit square.

        Returns:
            Tuple (x, y) with x growing east and y growing south, both in [0, 1].
        """
        lat = max(-MERCATOR_LAT_BOUND, min(MERCATOR_LAT_BOUND, lat))
        x = (lng + MAX_ABS_LNG) / (2 * MAX_ABS_LNG)
        y = (1 - log(tan(pi / 4 + radians(lat) / 2)) / pi) / 2
        return x, y

    @staticmethod
    def from_mercator_unit(x: float, y: float) -> tuple[float, float]:
        """Inverse of to_mercator_unit. Returns (lat, lng)."""
        lng = x * 2 * MAX_ABS_LNG - MAX_ABS_LNG
        lat = degrees(atan(sinh(pi * (1 - 2 * y))))
        return lat, lng
