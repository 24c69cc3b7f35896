"""Nearest resolver - closest known place to the live position.

Scans the whole collection on every call. Point counts stay in the low
hundreds, so no spatial index is kept and nothing is cached between calls.
"""

from rollmap.model.geo_point import Coordinate, NearestResult, PointCollection


def resolve_nearest(position: Coordinate | None, points: PointCollection) -> NearestResult | None:
    """Find the closest point to position.

    Ties keep the first point in collection order.

    Args:
        position: Reference position, None while unavailable
        points: Current point collection

    Returns:
        NearestResult, or None if position is None or points is empty.
    """
    if position is None or not points:
        return None

    best: NearestResult | None = None
    for point in points:
        meters = position.distance_to(point.coordinate)
        if best is None or meters < best.distance_m:
            best = NearestResult(point=point, distance_m=meters)
    return best
