"""Map commands - requests the core issues to the map surface.

The core never holds authoritative viewport state. It produces commands and
the map surface applies them; the surface stays the source of truth for what
is currently displayed.

Commands:
- SetPoints: Replace rendered pins
- PanTo: Ease the camera to a center (optionally zoom and pixel offset)
- FitBounds: Frame a bounding box with padding and a zoom ceiling
- SetPadding: Reserve screen space (e.g. for the detail panel)
- Resize: Re-measure the drawing surface
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rollmap.model.geo_point import Coordinate, PointCollection

if TYPE_CHECKING:
    from rollmap.ui.map_surface import MapSurface


@dataclass(frozen=True)
class Padding:
    """Screen padding in pixels."""

    top: int = 0
    bottom: int = 0
    left: int = 0
    right: int = 0

    @staticmethod
    def zero() -> Padding:
        return Padding()

    @property
    def is_zero(self) -> bool:
        return self.top == 0 and self.bottom == 0 and self.left == 0 and self.right == 0


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned geographic box in decimal degrees."""

    west: float
    south: float
    east: float
    north: float

    def contains(self, lat: float, lng: float) -> bool:
        return self.south <= lat <= self.north and self.west <= lng <= self.east

    @property
    def center(self) -> Coordinate:
        return Coordinate(lat=(self.south + self.north) / 2, lng=(self.west + self.east) / 2)


class MapCommand(ABC):
    """A single request to the map surface."""

    @abstractmethod
    def apply(self, surface: MapSurface) -> None:
        """Forward this command to the surface."""
        raise NotImplementedError


@dataclass(frozen=True)
class SetPoints(MapCommand):
    points: PointCollection

    def apply(self, surface: MapSurface) -> None:
        surface.set_points(points=self.points)


@dataclass(frozen=True)
class PanTo(MapCommand):
    """Ease the camera to center.

    Attributes:
        center: Target camera center
        zoom: Target zoom, None keeps the current zoom
        offset_px: (x, y) pixel offset of the center on screen
        duration_ms: Ease duration
    """

    center: Coordinate
    zoom: float | None = None
    offset_px: tuple[int, int] = (0, 0)
    duration_ms: int = 0

    def apply(self, surface: MapSurface) -> None:
        surface.pan_to(center=self.center, zoom=self.zoom, offset_px=self.offset_px, duration_ms=self.duration_ms)


@dataclass(frozen=True)
class FitBounds(MapCommand):
    bounds: Bounds
    padding: Padding
    max_zoom: float
    duration_ms: int

    def apply(self, surface: MapSurface) -> None:
        surface.fit_to(
            bounds=self.bounds,
            padding=self.padding,
            max_zoom=self.max_zoom,
            duration_ms=self.duration_ms,
        )


@dataclass(frozen=True)
class SetPadding(MapCommand):
    padding: Padding

    def apply(self, surface: MapSurface) -> None:
        surface.set_padding(padding=self.padding)


@dataclass(frozen=True)
class Resize(MapCommand):
    width_px: int
    height_px: int

    def apply(self, surface: MapSurface) -> None:
        surface.resize(width_px=self.width_px, height_px=self.height_px)
