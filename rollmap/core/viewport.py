"""Viewport fitter - frames the current pins once per view lifetime.

Policy:
- No points: no request
- One point: ease to it at street zoom
- Two or more: fit the bounding box with extra bottom padding for the
  detail panel, capped at a maximum zoom

The automatic fit runs only once. Later refreshes update the pins without
re-centering, so the user's own pan/zoom is preserved.
"""

import logging
from dataclasses import dataclass

from rollmap.constants import ViewportConfig
from rollmap.core.geo_calculator import GeoCalculator
from rollmap.model.geo_point import PointCollection
from rollmap.model.map_command import Bounds, FitBounds, MapCommand, Padding, PanTo

logger = logging.getLogger(__name__)

FIT_PADDING = Padding(
    top=ViewportConfig.FIT_PADDING_TOP,
    bottom=ViewportConfig.FIT_PADDING_BOTTOM,
    left=ViewportConfig.FIT_PADDING_LEFT,
    right=ViewportConfig.FIT_PADDING_RIGHT,
)


def fit_request(points: PointCollection) -> MapCommand | None:
    """Compute the camera request that frames points.

    Returns:
        PanTo for a single point, FitBounds for several, None for none.
    """
    if not points:
        return None

    if len(points) == 1:
        only = points[0]
        return PanTo(
            center=only.coordinate,
            zoom=ViewportConfig.SINGLE_POINT_ZOOM,
            duration_ms=ViewportConfig.EASE_DURATION_MS,
        )

    west, south, east, north = GeoCalculator.bounding_box([p.lng_lat for p in points])
    return FitBounds(
        bounds=Bounds(west=west, south=south, east=east, north=north),
        padding=FIT_PADDING,
        max_zoom=ViewportConfig.MAX_FIT_ZOOM,
        duration_ms=ViewportConfig.EASE_DURATION_MS,
    )


@dataclass
class FitOnceGate:
    """Tracks whether the automatic fit already ran for this view.

    The flag survives data refreshes and is only reset by creating a new
    gate (i.e. a new view lifetime).
    """

    completed: bool = False

    def take(self, points: PointCollection) -> MapCommand | None:
        """Return the fit request the first time, None afterwards.

        The gate closes on the first call even when points is empty.
        """
        if self.completed:
            return None
        self.completed = True
        command = fit_request(points)
        logger.info(f"[VIEWPORT] Automatic fit for {len(points)} point(s): {type(command).__name__}")
        return command
