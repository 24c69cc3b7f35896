"""Map surface - the rendering side of the map view.

MapSurface is the capability the core talks to. The core never reads camera
state back; it only issues commands (see rollmap.model.map_command) and
receives pin taps through on_point_tapped().

PydeckMapSurface renders with deck.gl via Pydeck:
- IconLayer with the roll pin for every place (added only after the pin
  image loaded)
- TextLayer with place names, shown from street zoom upwards
- Camera moves (pan, fit, padding) emulated with Web Mercator math, since
  deck.gl view states have no padding or fitBounds of their own

Key differences from a Mapbox GL map:
- Uses [lon, lat] coordinate order (GeoJSON standard)
- Colors as RGBA lists [R, G, B, A] (0-255)
- The deck is rebuilt on every Streamlit run from the surface state
"""

import base64
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from math import log2
from pathlib import Path
from typing import Any

import pydeck as pdk

from rollmap.constants import ClickConfig, MapConfig, StyleConfig
from rollmap.core.geo_calculator import GeoCalculator
from rollmap.model.click_info import PinTap
from rollmap.model.geo_point import Coordinate, PointCollection
from rollmap.model.map_command import Bounds, Padding

logger = logging.getLogger(__name__)

TapHandler = Callable[[PinTap], None]
ImageLoadedCallback = Callable[[str | None], None]


class MapSurface(ABC):
    """Interface of the map rendering capability used by MapView."""

    @abstractmethod
    def set_points(self, points: PointCollection) -> None:
        """Replace the rendered pins."""

    @abstractmethod
    def fit_to(self, bounds: Bounds, padding: Padding, max_zoom: float, duration_ms: int) -> None:
        """Frame bounds inside the padded viewport, zooming in no further than max_zoom."""

    @abstractmethod
    def pan_to(
        self,
        center: Coordinate,
        zoom: float | None,
        offset_px: tuple[int, int],
        duration_ms: int,
    ) -> None:
        """Ease the camera so center shows at the screen center plus offset_px."""

    @abstractmethod
    def set_padding(self, padding: Padding) -> None:
        """Reserve screen space at the edges of the viewport."""

    @abstractmethod
    def on_point_tapped(self, handler: TapHandler | None) -> None:
        """Register the single tap handler (None unregisters)."""

    @abstractmethod
    def set_pin_image(self, path: Path, on_loaded: ImageLoadedCallback) -> None:
        """Load the pin icon, then call on_loaded(None) or on_loaded(error)."""

    @abstractmethod
    def add_places_layer(self) -> None:
        """Start rendering the place pins. Requires a loaded pin image."""

    @abstractmethod
    def resize(self, width_px: int, height_px: int) -> None:
        """Re-measure the drawing surface."""

    @abstractmethod
    def release(self) -> None:
        """Free the surface. Further use is an error."""


class PydeckMapSurface(MapSurface):
    """MapSurface rendered as a pydeck.Deck.

    Example:
        surface = PydeckMapSurface()
        surface.set_pin_image(path=StyleConfig.PIN_IMAGE_PATH, on_loaded=print)
        deck = surface.render()
    """

    def __init__(
        self,
        center_lat: float = MapConfig.START_CENTER_LAT,
        center_lon: float = MapConfig.START_CENTER_LON,
        zoom: float = MapConfig.DEFAULT_ZOOM,
        width_px: int = MapConfig.DEFAULT_WIDTH_PX,
        height_px: int = MapConfig.DEFAULT_HEIGHT_PX,
    ) -> None:
        self.center_lat = center_lat
        self.center_lon = center_lon
        self.zoom = zoom
        self.width_px = width_px
        self.height_px = height_px
        self.padding = Padding.zero()
        self.transition_ms = 0
        self.points: PointCollection = ()
        self.pin_icon: dict[str, Any] | None = None
        self.places_layer_added = False
        self.released = False
        self._tap_handler: TapHandler | None = None

    # =========================================================================
    # MapSurface
    # =========================================================================

    def set_points(self, points: PointCollection) -> None:
        self._ensure_alive()
        self.points = points
        logger.debug(f"[SURFACE] {len(points)} point(s) set")

    def fit_to(self, bounds: Bounds, padding: Padding, max_zoom: float, duration_ms: int) -> None:
        self._ensure_alive()
        west_x, north_y = GeoCalculator.to_mercator_unit(lat=bounds.north, lng=bounds.west)
        east_x, south_y = GeoCalculator.to_mercator_unit(lat=bounds.south, lng=bounds.east)
        span_x = (east_x - west_x) * MapConfig.TILE_SIZE_PX
        span_y = (south_y - north_y) * MapConfig.TILE_SIZE_PX

        usable_w = max(1, self.width_px - padding.left - padding.right)
        usable_h = max(1, self.height_px - padding.top - padding.bottom)

        # Zoom at which the box exactly fills the usable area along its tighter axis
        candidates = [log2(usable / span) for usable, span in ((usable_w, span_x), (usable_h, span_y)) if span > 0]
        zoom = min(candidates) if candidates else max_zoom
        zoom = max(MapConfig.MIN_ZOOM, min(max_zoom, zoom))

        mid_x = (west_x + east_x) / 2
        mid_y = (north_y + south_y) / 2
        self._move_camera(unit_x=mid_x, unit_y=mid_y, zoom=zoom, shift_px=self._padding_shift(padding))
        self.transition_ms = duration_ms
        logger.info(f"[SURFACE] Fit {bounds} -> zoom {zoom:.2f}")

    def pan_to(
        self,
        center: Coordinate,
        zoom: float | None,
        offset_px: tuple[int, int],
        duration_ms: int,
    ) -> None:
        self._ensure_alive()
        target_zoom = self.zoom if zoom is None else zoom
        unit_x, unit_y = GeoCalculator.to_mercator_unit(lat=center.lat, lng=center.lng)
        pad_x, pad_y = self._padding_shift(self.padding)
        self._move_camera(
            unit_x=unit_x,
            unit_y=unit_y,
            zoom=target_zoom,
            shift_px=(pad_x + offset_px[0], pad_y + offset_px[1]),
        )
        self.transition_ms = duration_ms
        logger.debug(f"[SURFACE] Pan to ({center.lat:.5f}, {center.lng:.5f}) offset {offset_px}")

    def set_padding(self, padding: Padding) -> None:
        self._ensure_alive()
        self.padding = padding

    def on_point_tapped(self, handler: TapHandler | None) -> None:
        self._tap_handler = handler

    def emit_tap(self, tap: PinTap) -> None:
        """Forward a detected pin tap to the registered handler."""
        if self.released or self._tap_handler is None:
            logger.debug(f"[SURFACE] Tap on {tap.raw_id!r} ignored, no handler")
            return
        self._tap_handler(tap)

    def set_pin_image(self, path: Path, on_loaded: ImageLoadedCallback) -> None:
        self._ensure_alive()
        try:
            encoded = base64.b64encode(Path(path).read_bytes()).decode("ascii")
        except OSError as e:
            logger.error(f"[SURFACE] Pin image {path} failed to load: {e}")
            on_loaded(str(e))
            return
        self.pin_icon = {
            "id": StyleConfig.PIN_IMAGE_ID,
            "url": f"data:image/png;base64,{encoded}",
            "width": StyleConfig.PIN_WIDTH_PX,
            "height": StyleConfig.PIN_HEIGHT_PX,
            "anchorY": StyleConfig.PIN_HEIGHT_PX,
        }
        on_loaded(None)

    def add_places_layer(self) -> None:
        self._ensure_alive()
        if self.pin_icon is None:
            raise RuntimeError("Places layer needs a loaded pin image")
        self.places_layer_added = True

    def resize(self, width_px: int, height_px: int) -> None:
        self._ensure_alive()
        self.width_px = width_px
        self.height_px = height_px

    def release(self) -> None:
        if self.released:
            return
        self.released = True
        self._tap_handler = None
        self.points = ()
        logger.info("[SURFACE] Released")

    # =========================================================================
    # Rendering
    # =========================================================================

    def get_view_state(self) -> pdk.ViewState:
        """Create Pydeck ViewState from the current camera."""
        return pdk.ViewState(
            latitude=self.center_lat,
            longitude=self.center_lon,
            zoom=self.zoom,
            pitch=0,
            bearing=0,
            transition_duration=self.transition_ms,
        )

    def render(self) -> pdk.Deck:
        """Build the deck for the current surface state."""
        self._ensure_alive()
        layers: list[pdk.Layer] = []
        if self.places_layer_added and self.points:
            layers.append(self._create_places_layer())
            if self.zoom >= StyleConfig.LABEL_MIN_ZOOM:
                layers.append(self._create_labels_layer())

        return pdk.Deck(
            map_provider=StyleConfig.MAP_PROVIDER,
            map_style=StyleConfig.MAP_STYLE,
            initial_view_state=self.get_view_state(),
            layers=layers,
            tooltip={"html": StyleConfig.TOOLTIP_HTML, "style": StyleConfig.TOOLTIP_STYLE},
        )

    def _place_data(self) -> list[dict[str, Any]]:
        # "type" marks the picked object for click detection
        return [
            {
                "type": ClickConfig.TYPE_PLACE,
                "id": point.id,
                "name": point.name,
                "description": point.description,
                "position": list(point.lng_lat),
                "icon": self.pin_icon,
            }
            for point in self.points
        ]

    def _create_places_layer(self) -> pdk.Layer:
        return pdk.Layer(
            "IconLayer",
            self._place_data(),
            get_position="position",
            get_icon="icon",
            get_size=StyleConfig.PIN_SIZE,
            size_units="pixels",
            pickable=True,
            auto_highlight=True,
            id=StyleConfig.PLACES_LAYER_ID,
        )

    def _create_labels_layer(self) -> pdk.Layer:
        return pdk.Layer(
            "TextLayer",
            self._place_data(),
            get_position="position",
            get_text="name",
            get_size=StyleConfig.LABEL_SIZE,
            get_color=StyleConfig.LABEL_COLOR,
            get_pixel_offset=StyleConfig.LABEL_OFFSET_PX,
            outline_width=2,
            outline_color=StyleConfig.LABEL_HALO_COLOR,
            font_settings={"sdf": True},
            pickable=False,
            id=StyleConfig.LABELS_LAYER_ID,
        )

    # =========================================================================
    # Camera helpers
    # =========================================================================

    @staticmethod
    def _padding_shift(padding: Padding) -> tuple[float, float]:
        """Screen offset of the padded area's center from the canvas center."""
        return ((padding.left - padding.right) / 2, (padding.top - padding.bottom) / 2)

    def _move_camera(self, unit_x: float, unit_y: float, zoom: float, shift_px: tuple[float, float]) -> None:
        """Center the camera so (unit_x, unit_y) appears shift_px away from the canvas center."""
        world_px = MapConfig.TILE_SIZE_PX * 2**zoom
        camera_x = unit_x - shift_px[0] / world_px
        camera_y = min(1.0, max(0.0, unit_y - shift_px[1] / world_px))
        lat, lng = GeoCalculator.from_mercator_unit(x=camera_x, y=camera_y)
        self.center_lat = lat
        self.center_lon = ((lng + 180.0) % 360.0) - 180.0
        self.zoom = zoom

    def _ensure_alive(self) -> None:
        if self.released:
            raise RuntimeError("Map surface used after release")
