"""Projector - turns raw data-source records into a renderable PointCollection.

Records with a missing, non-numeric, non-finite or out-of-range latitude or
longitude are dropped from the projection. The raw record list itself is
never modified.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from rollmap.core.geo_calculator import GeoCalculator
from rollmap.model.geo_point import GeoPoint, PointCollection

logger = logging.getLogger(__name__)


def project_points(records: Iterable[Mapping[str, Any]]) -> PointCollection:
    """Project raw records into an immutable point collection.

    Pure and idempotent: the same input always yields an equal tuple in the
    same order.

    Args:
        records: Raw rows with at least lat/lng, usually id/name/description too

    Returns:
        Tuple of GeoPoint in input order, invalid coordinates excluded.
    """
    points: list[GeoPoint] = []
    dropped = 0
    for record in records:
        point = project_record(record)
        if point is None:
            dropped += 1
            continue
        points.append(point)

    if dropped:
        logger.debug(f"[PROJECT] Dropped {dropped} record(s) with invalid coordinates")
    return tuple(points)


def project_record(record: Mapping[str, Any]) -> GeoPoint | None:
    """Project one record, or None if its coordinate is unusable."""
    lat = record.get("lat")
    lng = record.get("lng")
    if not GeoCalculator.is_valid_coordinate(lat=lat, lng=lng):
        return None

    raw_id = record.get("id")
    name = record.get("name")
    description = record.get("description")
    return GeoPoint(
        id="" if raw_id is None else str(raw_id),
        name="" if name is None else str(name),
        description="" if description is None else str(description),
        lat=float(lat),  # type: ignore[arg-type]
        lng=float(lng),  # type: ignore[arg-type]
    )
