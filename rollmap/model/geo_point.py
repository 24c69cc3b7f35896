"""GeoPoint - The fundamental geometry atom for the roll map.

A GeoPoint is one named place with a valid WGS84 coordinate. It is the
single source of truth for place location throughout the system.

Used by:
- PointCollection (immutable snapshot of all renderable places)
- NearestResult (closest place to the live position)
- SelectionContext (the place whose detail panel is open)
"""

from dataclasses import dataclass
from typing import Any

from rollmap.core.geo_calculator import GeoCalculator


@dataclass(frozen=True)
class Coordinate:
    """A bare WGS84 coordinate.

    Also used as the live position published by the position tracker.
    """

    lat: float
    lng: float

    @property
    def lng_lat(self) -> tuple[float, float]:
        """Return (lng, lat) tuple - GeoJSON/Pydeck order."""
        return (self.lng, self.lat)

    def distance_to(self, other: "Coordinate") -> float:
        """Great-circle distance to another coordinate in meters."""
        return GeoCalculator.haversine_distance_m(
            lat1=self.lat,
            lng1=self.lng,
            lat2=other.lat,
            lng2=other.lng,
        )


@dataclass(frozen=True)
class GeoPoint:
    """A renderable place.

    Attributes:
        id: Data source identifier
        name: Display name
        description: Free text, "" when the source has none
        lat: Latitude in decimal degrees, within [-90, 90]
        lng: Longitude in decimal degrees, within [-180, 180]

    Example:
        point = GeoPoint(id="abc", name="Harbour Cafe", description="", lat=56.223, lng=-2.7)
    """

    id: str
    name: str
    description: str
    lat: float
    lng: float

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        if not GeoCalculator.is_valid_coordinate(lat=self.lat, lng=self.lng):
            raise ValueError(f"GeoPoint {self.id!r} has invalid coordinate ({self.lat}, {self.lng})")

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(lat=self.lat, lng=self.lng)

    @property
    def lng_lat(self) -> tuple[float, float]:
        """Return (lng, lat) tuple - GeoJSON/Pydeck order."""
        return (self.lng, self.lat)

    def to_feature(self) -> dict[str, Any]:
        """GeoJSON Feature for rendering."""
        return {
            "type": "Feature",
            "properties": {
                "id": self.id,
                "name": self.name,
                "description": self.description,
            },
            "geometry": {"type": "Point", "coordinates": [self.lng, self.lat]},
        }

    def __repr__(self) -> str:
        return f"GeoPoint({self.id}, {self.name!r}, lat={self.lat:.5f}, lng={self.lng:.5f})"


# Immutable snapshot, rebuilt on every source refresh
PointCollection = tuple[GeoPoint, ...]


@dataclass(frozen=True)
class NearestResult:
    """Closest known place to the live position."""

    point: GeoPoint
    distance_m: float


@dataclass(frozen=True)
class PlaceDraft:
    """Validated input for a new place."""

    name: str
    description: str
    lat: float
    lng: float

    def to_payload(self) -> dict[str, Any]:
        """Insert payload for the locations table."""
        description = self.description.strip()
        return {
            "name": self.name.strip(),
            "description": description or None,
            "lat": self.lat,
            "lng": self.lng,
        }
