"""Display helpers for distances and outbound directions links."""

from __future__ import annotations

from math import floor, isfinite
from typing import TYPE_CHECKING
from urllib.parse import urlencode

from rollmap.constants import DistanceConfig

if TYPE_CHECKING:
    from rollmap.model.geo_point import Coordinate


def format_distance(meters: float) -> str:
    """Format a distance for display.

    Sub-kilometer distances are shown in whole meters, everything else in
    kilometers with one decimal place. Non-finite input gives "".

    Examples:
        format_distance(999) -> "999 m"
        format_distance(1000) -> "1.0 km"
    """
    if not isfinite(meters):
        return ""
    if meters < DistanceConfig.METERS_PER_KM:
        return f"{floor(meters + 0.5)} m"
    return f"{meters / DistanceConfig.METERS_PER_KM:.1f} km"


def directions_url(origin: Coordinate, destination: Coordinate) -> str:
    """Build a walking directions link from origin to destination."""
    query = urlencode(
        {
            "api": 1,
            "origin": f"{origin.lat},{origin.lng}",
            "destination": f"{destination.lat},{destination.lng}",
            "travelmode": DistanceConfig.TRAVEL_MODE,
        },
        safe=",",
    )
    return f"{DistanceConfig.DIRECTIONS_BASE_URL}?{query}"
