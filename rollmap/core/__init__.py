"""Core foundation for the roll map.

This module provides the logic that keeps map, position and data consistent:
- GeoCalculator: Geodesic calculations (distances, coordinate checks, bounding boxes, Mercator)
- projector: Raw records -> PointCollection
- nearest: Closest point to the live position
- viewport: Automatic fit-to-pins requests
- lifecycle: Cancellable subscriptions and the per-view LifetimeScope
- tracker: Live position stream
- data_source: PostgREST client for places and ratings
"""

from rollmap.core.geo_calculator import GeoCalculator

# The other core modules import rollmap.model, which imports GeoCalculator
# Import directly: from rollmap.core.nearest import resolve_nearest

__all__ = [
    "GeoCalculator",
]
