"""Click detector - turns deck.gl click events into pin taps and map clicks.

st_deckgl returns the last click event again on every Streamlit rerun, so
each click is identified by (map_version, object, coordinate) and only
reported once. Bumping the map version (fresh component) resets this.

Results:
- PinTap: a place pin was clicked (id is passed through unvalidated)
- Coordinate: empty map was clicked (used by the add-place picker)
- None: no new click
"""

import logging
from dataclasses import dataclass
from typing import Any

from rollmap.constants import ClickConfig
from rollmap.model.click_info import PinTap
from rollmap.model.geo_point import Coordinate

logger = logging.getLogger(__name__)


@dataclass
class ClickDeduplicationContext:
    """Remembers the last processed click across reruns."""

    last_click_id: str | None = None

    def is_new_click(self, click_id: str) -> bool:
        """Return True (and remember it) if click_id was not seen last time."""
        if click_id == self.last_click_id:
            return False
        self.last_click_id = click_id
        return True

    def clear(self) -> None:
        self.last_click_id = None


@dataclass
class ClickDetector:
    """Detects clicks from Pydeck picked objects.

    Attributes:
        dedup: ClickDeduplicationContext for tracking last-seen clicks
        map_version: Version of the map component the event came from
    """

    dedup: ClickDeduplicationContext
    map_version: int = 0

    def detect(
        self,
        clicked_object: dict[str, Any] | None,
        clicked_coordinate: list[float] | None,
    ) -> PinTap | Coordinate | None:
        """Detect click from Pydeck event data.

        Args:
            clicked_object: The picked deck.gl object data (dict) or None
            clicked_coordinate: [lon, lat] of click location or None

        Returns:
            PinTap or Coordinate for new clicks, None otherwise
        """
        if clicked_object is None and clicked_coordinate is None:
            return None

        click_id = self._get_click_id(obj=clicked_object, coord=clicked_coordinate)
        if not self.dedup.is_new_click(click_id=click_id):
            return None

        if clicked_object is not None:
            return self._parse_object_click(obj=clicked_object, coord=clicked_coordinate)

        if clicked_coordinate is not None and len(clicked_coordinate) >= 2:
            lon, lat = float(clicked_coordinate[0]), float(clicked_coordinate[1])
            logger.debug(f"Map click at ({lat:.6f}, {lon:.6f})")
            return Coordinate(lat=lat, lng=lon)

        return None

    def _get_click_id(self, obj: dict[str, Any] | None, coord: list[float] | None) -> str:
        """Generate unique ID for click deduplication."""
        parts = [f"v{self.map_version}"]
        if obj is not None:
            parts.append(f"{obj.get('type', '')}_{obj.get('id', '')}")
        if coord:
            # Rounded so float noise between reruns does not look like a new click
            parts.append(f"coord_{float(coord[0]):.6f}_{float(coord[1]):.6f}")
        return "_".join(parts)

    def _parse_object_click(self, obj: dict[str, Any], coord: list[float] | None) -> PinTap | Coordinate | None:
        """Parse clicked object to PinTap (or a map click for non-place layers)."""
        obj_type = obj.get("type")

        # GeoJSON Feature: merge properties for easier access
        if obj_type == "Feature":
            props = obj.get("properties") or {}
            obj = {**obj, **props, "type": props.get("type")}
            obj_type = obj.get("type")

        if obj_type == ClickConfig.TYPE_PLACE:
            lon, lat = _position_of(obj=obj, fallback=coord)
            name = obj.get("name")
            description = obj.get("description")
            tap = PinTap(
                raw_id=obj.get("id"),
                name="Untitled" if name is None else str(name),
                description="" if description is None else str(description),
                lat=lat,
                lng=lon,
            )
            logger.debug(f"Place click: {tap}")
            return tap

        # Picker markers and unknown layers behave like a click on the map itself
        if coord is not None and len(coord) >= 2:
            if obj_type != ClickConfig.TYPE_PICKER:
                logger.warning(f"Unknown object type: {obj_type}")
            return Coordinate(lat=float(coord[1]), lng=float(coord[0]))

        logger.warning(f"Object click without coordinate: {obj}")
        return None


def _position_of(obj: dict[str, Any], fallback: list[float] | None) -> tuple[float, float]:
    """(lon, lat) of a picked object, from its position or else the click coordinate."""
    position = obj.get("position") or (obj.get("geometry") or {}).get("coordinates") or fallback
    if not position or len(position) < 2:
        return float("nan"), float("nan")
    try:
        return float(position[0]), float(position[1])
    except (TypeError, ValueError):
        return float("nan"), float("nan")
