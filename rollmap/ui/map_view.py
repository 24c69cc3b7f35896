"""MapView - one lifetime of the map screen.

Wires the pieces together:
    data source -> project_points -> {map surface, resolve_nearest}
    map surface taps -> SelectionController -> commands back to the surface

Lifecycle:
- mount(): creates the LifetimeScope, registers the surface first, starts the
  pin image load and the position stream. A second mount() is an error.
- refresh(): numbered fetch task; results from cancelled or superseded tasks
  are discarded.
- unmount(): closes the scope. Fetches and the position stream are cancelled
  before the surface is released.

The place layer and the automatic fit wait for the pin image. The fit runs
once, after the image is ready and the first fetch succeeded.

Streamlit keeps a MapView in st.session_state across reruns; nothing in here
imports Streamlit.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from rollmap.constants import DataSourceConfig, StyleConfig
from rollmap.core.data_source import DataSourceError
from rollmap.core.formatting import directions_url
from rollmap.core.lifecycle import FetchTask, LifetimeScope, Subscription
from rollmap.core.nearest import resolve_nearest
from rollmap.core.projector import project_points
from rollmap.core.tracker import LivePositionTracker, PositionSource, WatchOptions
from rollmap.core.viewport import FitOnceGate
from rollmap.model.click_info import PinTap
from rollmap.model.geo_point import GeoPoint, NearestResult, PointCollection
from rollmap.model.map_command import MapCommand, Resize, SetPoints
from rollmap.model.message import (
    FetchFailedMessage,
    LoadingPlacesMessage,
    LocationOffMessage,
    Message,
    PinImageFailedMessage,
    PlacesCountMessage,
    ToastMessage,
)
from rollmap.ui.map_surface import MapSurface
from rollmap.ui.selection_machine import SelectionController

logger = logging.getLogger(__name__)


class PointsSource(Protocol):
    """Read side of the data source used by the map view."""

    def fetch_points(self) -> list[dict[str, Any]]: ...


class MapView:
    """State and wiring of one mounted map view.

    Attributes:
        records: Raw records of the last successful fetch (never filtered)
        points: Renderable projection of records
        nearest: Closest point to the live position, None when unknown
        loading: True while the newest fetch is outstanding
        fetch_error: Message of the last failed fetch, None after a success
        image_error: Reason the pin image failed, None otherwise

    Example:
        view = MapView(surface=PydeckMapSurface(), data_source=client, position_source=source)
        view.mount()
        view.refresh()
        ...
        view.unmount()
    """

    def __init__(
        self,
        surface: MapSurface,
        data_source: PointsSource | None,
        position_source: PositionSource | None,
        pin_image_path: Path = StyleConfig.PIN_IMAGE_PATH,
        watch_options: WatchOptions | None = None,
    ) -> None:
        self.surface = surface
        self.data_source = data_source
        self.pin_image_path = pin_image_path
        self.tracker = LivePositionTracker(
            source=position_source,
            options=watch_options,
            on_change=self._on_position_changed,
        )
        self.selection = SelectionController()
        self.fit_gate = FitOnceGate()

        self.records: list[Mapping[str, Any]] = []
        self.points: PointCollection = ()
        self.nearest: NearestResult | None = None
        self.loading = True
        self.fetch_error: str | None = None
        self.image_error: str | None = None
        self.pin_image_ready = False

        self._scope: LifetimeScope | None = None
        self._initialized = False
        self._loaded_once = False
        self._fetch_seq = 0
        self._latest_task: FetchTask | None = None
        self._toasts: list[ToastMessage] = []

    # =========================================================================
    # Lifetime
    # =========================================================================

    @property
    def is_mounted(self) -> bool:
        return self._scope is not None and not self._scope.closed

    def mount(self) -> None:
        """Initialize the surface and start the view's subscriptions.

        Raises:
            RuntimeError: If this view was already mounted once.
        """
        if self._initialized:
            raise RuntimeError("Map view already initialized, create a new MapView per lifetime")
        self._initialized = True
        scope = LifetimeScope(name="map-view")
        self._scope = scope

        # Registered first so it is released last
        surface_sub = scope.add(Subscription(name="map-surface", teardown=self.surface.release))
        self.surface.on_point_tapped(surface_sub.guard(self.handle_tap))

        image_sub = scope.add(Subscription(name="pin-image"))
        self.surface.set_pin_image(path=self.pin_image_path, on_loaded=image_sub.guard(self._on_pin_image_loaded))

        self.tracker.start(scope=scope)
        logger.info("[VIEW] Mounted")

    def unmount(self) -> None:
        """Cancel everything this view owns. Safe to call more than once."""
        if self._scope is None or self._scope.closed:
            return
        self.surface.on_point_tapped(None)
        self._scope.close()
        self._latest_task = None
        logger.info("[VIEW] Unmounted")

    # =========================================================================
    # Fetching
    # =========================================================================

    def refresh(self) -> None:
        """Fetch the points synchronously through the data source."""
        task = self.begin_refresh()
        if self.data_source is None:
            self.complete_refresh(task=task, error=DataSourceConfig.NOT_CONFIGURED)
            return
        try:
            records = self.data_source.fetch_points()
        except DataSourceError as e:
            self.complete_refresh(task=task, error=str(e))
            return
        self.complete_refresh(task=task, records=records)

    def begin_refresh(self) -> FetchTask:
        """Start a new fetch task. Any older task is cancelled.

        Raises:
            RuntimeError: If the view is not mounted.
        """
        if not self.is_mounted or self._scope is None:
            raise RuntimeError("Cannot fetch points for a view that is not mounted")
        if self._latest_task is not None:
            self._latest_task.cancel()
            self._scope.discard(self._latest_task)

        self._fetch_seq += 1
        task = FetchTask(seq=self._fetch_seq)
        self._scope.add(task)
        self._latest_task = task
        self.loading = True
        logger.debug(f"[FETCH] Started {task.name}")
        return task

    def complete_refresh(
        self,
        task: FetchTask,
        records: list[Mapping[str, Any]] | None = None,
        error: str | None = None,
    ) -> bool:
        """Deliver the outcome of a fetch task.

        Returns:
            True if the result was applied, False if it was discarded.
        """
        if not task.active or task is not self._latest_task:
            logger.info(f"[FETCH] Discarded result of {task.name} (cancelled or superseded)")
            return False

        task.cancel()
        if self._scope is not None:
            self._scope.discard(task)
        self._latest_task = None
        self.loading = False

        if error is not None or records is None:
            self.fetch_error = error or "Unknown error"
            logger.error(f"[FETCH] {task.name} failed: {self.fetch_error}")
            self.records = []
        else:
            self.fetch_error = None
            self.records = list(records)
            self._loaded_once = True

        self.points = project_points(self.records)
        logger.info(f"[FETCH] {task.name}: {len(self.records)} record(s), {len(self.points)} renderable")
        if self.pin_image_ready:
            self._apply([SetPoints(points=self.points)])
        self._recompute_nearest()
        self._maybe_fit()
        return True

    # =========================================================================
    # Callbacks
    # =========================================================================

    def _on_pin_image_loaded(self, error: str | None) -> None:
        if error is not None:
            self.image_error = error
            logger.error(f"[VIEW] Place layer not added: {error}")
            return
        self.pin_image_ready = True
        self.surface.add_places_layer()
        self._apply([SetPoints(points=self.points)])
        self._maybe_fit()

    def _on_position_changed(self) -> None:
        self._recompute_nearest()

    def _recompute_nearest(self) -> None:
        self.nearest = resolve_nearest(position=self.tracker.position, points=self.points)

    def _maybe_fit(self) -> None:
        if not (self.pin_image_ready and self._loaded_once):
            return
        command = self.fit_gate.take(self.points)
        if command is not None:
            self._apply([command])

    # =========================================================================
    # User interaction
    # =========================================================================

    def handle_tap(self, tap: PinTap) -> None:
        """Route a pin tap from the surface to the selection controller."""
        commands = self.selection.handle_tap(tap)
        error = self.selection.error
        if error is not None:
            self._toasts.append(error)
            self.selection.dismiss_error()
        self._apply(commands)

    def close_selection(self) -> None:
        self._apply(self.selection.close())

    def navigate_away(self) -> None:
        """Leaving the map screen closes the detail panel."""
        self.close_selection()

    def handle_resize(self, width_px: int, height_px: int) -> None:
        """Platform resize notification (window resize, orientation change)."""
        if not self.is_mounted:
            return
        self.selection.set_viewport_height(height_px)
        self._apply([Resize(width_px=width_px, height_px=height_px)])

    def dismiss_location_error(self) -> None:
        self.tracker.dismiss_error()

    def _apply(self, commands: list[MapCommand]) -> None:
        if not self.is_mounted:
            logger.debug(f"[VIEW] Dropped {len(commands)} command(s), view not mounted")
            return
        for command in commands:
            command.apply(self.surface)

    # =========================================================================
    # Read side for the UI shell
    # =========================================================================

    @property
    def selected(self) -> GeoPoint | None:
        return self.selection.selected

    @property
    def status_message(self) -> Message:
        """One status line: error, else loading, else the place count."""
        if self.image_error is not None:
            return PinImageFailedMessage(path=str(self.pin_image_path))
        if self.fetch_error is not None:
            return FetchFailedMessage(error=self.fetch_error)
        if self.loading:
            return LoadingPlacesMessage()
        return PlacesCountMessage(count=len(self.records))

    @property
    def location_message(self) -> LocationOffMessage | None:
        if self.tracker.error is None:
            return None
        return LocationOffMessage(reason=self.tracker.error)

    def nearest_directions_url(self) -> str | None:
        if self.nearest is None or self.tracker.position is None:
            return None
        return directions_url(origin=self.tracker.position, destination=self.nearest.point.coordinate)

    def selected_directions_url(self) -> str | None:
        selected = self.selected
        if selected is None or self.tracker.position is None:
            return None
        return directions_url(origin=self.tracker.position, destination=selected.coordinate)

    def drain_toasts(self) -> list[ToastMessage]:
        toasts, self._toasts = self._toasts, []
        return toasts
