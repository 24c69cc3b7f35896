"""Click types - tap information for map interactions.

PinTap is the only output of pin click detection. It carries the raw id as
found on the clicked feature; whether that id is usable is decided by the
selection controller, which rejects the tap instead of transitioning.
"""

from dataclasses import dataclass
from typing import Any

from rollmap.constants import SelectionConfig
from rollmap.core.geo_calculator import GeoCalculator
from rollmap.model.geo_point import Coordinate, GeoPoint


@dataclass(frozen=True)
class PinTap:
    """A tap on a rendered place pin.

    Attributes:
        raw_id: Identifier from the feature properties, any type or None
        name: Display name ("Untitled" when missing)
        description: Description ("" when missing)
        lat: Pin latitude from the feature geometry
        lng: Pin longitude from the feature geometry
    """

    raw_id: Any
    name: str
    description: str
    lat: float
    lng: float

    @property
    def point_id(self) -> str | None:
        """Usable identifier, or None for missing/empty/"undefined"/"null"."""
        if self.raw_id is None:
            return None
        point_id = self.raw_id if isinstance(self.raw_id, str) else str(self.raw_id)
        if point_id.strip() in SelectionConfig.INVALID_IDS:
            return None
        return point_id

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(lat=self.lat, lng=self.lng)

    def to_point(self) -> GeoPoint | None:
        """GeoPoint for this tap, or None when the id or coordinate is unusable."""
        point_id = self.point_id
        if point_id is None:
            return None
        if not GeoCalculator.is_valid_coordinate(lat=self.lat, lng=self.lng):
            return None
        return GeoPoint(id=point_id, name=self.name, description=self.description, lat=self.lat, lng=self.lng)
