"""Tests for MapView - the wiring of one map screen lifetime.

Tests: mount/unmount, fetch sequencing, pin image gating, automatic fit,
       nearest updates, taps, resize and status messages

Note: Fixtures are defined in conftest.py (surface, position_source,
points_source, map_view, sample_records).
"""

from typing import Any

import pytest
from fakes import (
    FakePointsSource,
    LoggingPositionSource,
    RecordingMapSurface,
    make_record,
)

from rollmap.constants import DataSourceConfig, TrackerConfig
from rollmap.core.tracker import ManualPositionSource
from rollmap.model.click_info import PinTap
from rollmap.model.geo_point import Coordinate
from rollmap.model.map_command import Padding
from rollmap.model.message import (
    FetchFailedMessage,
    InvalidPinMessage,
    LoadingPlacesMessage,
    LocationOffMessage,
    PinImageFailedMessage,
    PlacesCountMessage,
)
from rollmap.ui.map_view import MapView


def pin_tap(raw_id: Any, lat: float = 56.223, lng: float = -2.7) -> PinTap:
    return PinTap(raw_id=raw_id, name="Harbour Cafe", description="Bacon rolls", lat=lat, lng=lng)


# =============================================================================
# MOUNT / UNMOUNT
# =============================================================================


class TestMountLifecycle:
    """One mount per view, teardown before release."""

    def test_mount_twice_raises(self, map_view: MapView) -> None:
        with pytest.raises(RuntimeError):
            map_view.mount()

    def test_mount_again_after_unmount_raises(self, map_view: MapView) -> None:
        map_view.unmount()
        with pytest.raises(RuntimeError):
            map_view.mount()

    def test_refresh_before_mount_raises(self, surface: RecordingMapSurface, points_source: FakePointsSource) -> None:
        view = MapView(surface=surface, data_source=points_source, position_source=None)
        with pytest.raises(RuntimeError):
            view.refresh()
        assert points_source.fetch_count == 0

    def test_mount_starts_image_and_position_stream(
        self,
        surface: RecordingMapSurface,
        position_source: ManualPositionSource,
    ) -> None:
        view = MapView(surface=surface, data_source=None, position_source=position_source)
        view.mount()
        assert surface.call_names()[0] == "set_pin_image"
        assert position_source.watcher_count == 1
        assert view.is_mounted

    def test_unmount_cancels_stream_before_releasing_surface(self, sample_records: list[dict[str, Any]]) -> None:
        log: list[str] = []
        view = MapView(
            surface=RecordingMapSurface(log=log),
            data_source=FakePointsSource(records=sample_records),
            position_source=LoggingPositionSource(log=log),
        )
        view.mount()
        view.refresh()
        log.clear()

        view.unmount()
        assert log == ["source.clear_watch", "surface.release"]
        assert not view.is_mounted

    def test_unmount_twice_releases_once(self, map_view: MapView, surface: RecordingMapSurface) -> None:
        map_view.unmount()
        map_view.unmount()
        assert surface.call_names().count("release") == 1

    def test_in_flight_fetch_cancelled_on_unmount(self, map_view: MapView) -> None:
        task = map_view.begin_refresh()
        map_view.unmount()
        assert not task.active


# =============================================================================
# FETCH AND PROJECTION
# =============================================================================


class TestFetch:
    """Fetch sequencing, projection and status line."""

    def test_loading_until_first_fetch(self, surface: RecordingMapSurface, points_source: FakePointsSource) -> None:
        view = MapView(surface=surface, data_source=points_source, position_source=None)
        view.mount()
        assert view.status_message == LoadingPlacesMessage()

    def test_projection_drops_invalid_records(self, map_view: MapView, surface: RecordingMapSurface) -> None:
        assert [p.id for p in map_view.points] == ["a1", "b2", "c3"]
        assert [p.id for p in surface.points] == ["a1", "b2", "c3"]
        assert len(map_view.records) == 5

    def test_status_counts_raw_records(self, map_view: MapView) -> None:
        assert not map_view.loading
        assert map_view.status_message == PlacesCountMessage(count=5)
        assert map_view.status_message.message == "5 locations"

    def test_fetch_error_status(self, surface: RecordingMapSurface) -> None:
        view = MapView(surface=surface, data_source=FakePointsSource(error="relation does not exist"), position_source=None)
        view.mount()
        view.refresh()
        assert view.status_message == FetchFailedMessage(error="relation does not exist")
        assert view.status_message.message == "Error: relation does not exist"
        assert view.points == ()
        assert not view.loading

    def test_not_configured(self, surface: RecordingMapSurface) -> None:
        view = MapView(surface=surface, data_source=None, position_source=None)
        view.mount()
        view.refresh()
        assert view.fetch_error == DataSourceConfig.NOT_CONFIGURED

    def test_success_after_error_clears_error(self, surface: RecordingMapSurface, sample_records: list[dict[str, Any]]) -> None:
        source = FakePointsSource(error="timeout")
        view = MapView(surface=surface, data_source=source, position_source=None)
        view.mount()
        view.refresh()
        source.error = None
        source.records = sample_records
        view.refresh()
        assert view.fetch_error is None
        assert len(view.points) == 3

    def test_superseded_fetch_is_discarded(self, map_view: MapView) -> None:
        older = map_view.begin_refresh()
        newer = map_view.begin_refresh()
        assert not older.active
        assert map_view.complete_refresh(task=older, records=[make_record("old", 1.0, 1.0)]) is False
        assert map_view.complete_refresh(task=newer, records=[make_record("new", 2.0, 2.0)]) is True
        assert [p.id for p in map_view.points] == ["new"]

    def test_result_after_unmount_is_discarded(self, map_view: MapView, surface: RecordingMapSurface) -> None:
        task = map_view.begin_refresh()
        map_view.unmount()
        calls_before = len(surface.calls)
        assert map_view.complete_refresh(task=task, records=[make_record("late", 1.0, 1.0)]) is False
        assert len(surface.calls) == calls_before
        assert [p.id for p in map_view.points] == ["a1", "b2", "c3"]

    def test_refresh_does_not_mutate_source_records(self, map_view: MapView, points_source: FakePointsSource) -> None:
        map_view.refresh()
        assert len(points_source.records) == 5


# =============================================================================
# PIN IMAGE AND AUTOMATIC FIT
# =============================================================================


class TestImageAndFit:
    """Place layer waits for the pin image; the fit happens once."""

    def test_fit_once_after_image_and_data(self, map_view: MapView, surface: RecordingMapSurface) -> None:
        assert surface.call_names() == ["set_pin_image", "add_places_layer", "set_points", "set_points", "fit_to"]
        map_view.refresh()
        map_view.refresh()
        assert len(surface.calls_named("fit_to")) == 1

    def test_fit_bounds_cover_valid_points(self, map_view: MapView, surface: RecordingMapSurface) -> None:
        fit = surface.calls_named("fit_to")[0]
        for point in map_view.points:
            assert fit["bounds"].contains(lat=point.lat, lng=point.lng)
        assert fit["max_zoom"] == 16

    def test_single_point_pans(self, surface: RecordingMapSurface) -> None:
        view = MapView(
            surface=surface,
            data_source=FakePointsSource(records=[make_record("only", 56.2, -2.7)]),
            position_source=None,
        )
        view.mount()
        view.refresh()
        pan = surface.calls_named("pan_to")
        assert len(pan) == 1
        assert pan[0]["center"] == Coordinate(lat=56.2, lng=-2.7)
        assert pan[0]["zoom"] == 15
        assert surface.calls_named("fit_to") == []

    def test_empty_first_load_never_refits(self, surface: RecordingMapSurface, sample_records: list[dict[str, Any]]) -> None:
        source = FakePointsSource(records=[])
        view = MapView(surface=surface, data_source=source, position_source=None)
        view.mount()
        view.refresh()
        source.records = sample_records
        view.refresh()
        assert surface.calls_named("fit_to") == []
        assert surface.calls_named("pan_to") == []

    def test_failed_first_fetch_does_not_close_fit(self, surface: RecordingMapSurface, sample_records: list[dict[str, Any]]) -> None:
        source = FakePointsSource(error="offline")
        view = MapView(surface=surface, data_source=source, position_source=None)
        view.mount()
        view.refresh()
        source.error = None
        source.records = sample_records
        view.refresh()
        assert len(surface.calls_named("fit_to")) == 1

    def test_deferred_image_waits(self, points_source: FakePointsSource) -> None:
        surface = RecordingMapSurface(defer_image=True)
        view = MapView(surface=surface, data_source=points_source, position_source=None)
        view.mount()
        view.refresh()
        assert surface.call_names() == ["set_pin_image"]

        surface.finish_image_load()
        assert surface.call_names() == ["set_pin_image", "add_places_layer", "set_points", "fit_to"]
        assert [p.id for p in surface.points] == ["a1", "b2", "c3"]

    def test_image_failure_blocks_layer(self, points_source: FakePointsSource) -> None:
        surface = RecordingMapSurface(image_error="No such file")
        view = MapView(surface=surface, data_source=points_source, position_source=None)
        view.mount()
        view.refresh()
        assert not surface.places_layer_added
        assert surface.calls_named("set_points") == []
        assert surface.calls_named("fit_to") == []
        assert isinstance(view.status_message, PinImageFailedMessage)

    def test_image_after_unmount_is_ignored(self, points_source: FakePointsSource) -> None:
        surface = RecordingMapSurface(defer_image=True)
        view = MapView(surface=surface, data_source=points_source, position_source=None)
        view.mount()
        view.unmount()
        surface.finish_image_load()
        assert not view.pin_image_ready
        assert not surface.places_layer_added


# =============================================================================
# NEAREST
# =============================================================================


class TestNearest:
    """Nearest place follows both position and data updates."""

    def test_no_nearest_without_position(self, map_view: MapView) -> None:
        assert map_view.nearest is None
        assert map_view.nearest_directions_url() is None

    def test_nearest_follows_position(self, map_view: MapView, position_source: ManualPositionSource) -> None:
        position_source.push_fix(lat=56.2231, lng=-2.7001)
        assert map_view.nearest is not None
        assert map_view.nearest.point.id == "a1"

        position_source.push_fix(lat=56.19, lng=-2.651)
        assert map_view.nearest is not None
        assert map_view.nearest.point.id == "c3"

    def test_nearest_follows_data(self, map_view: MapView, points_source: FakePointsSource, position_source: ManualPositionSource) -> None:
        position_source.push_fix(lat=56.2, lng=-2.7)
        points_source.records = [make_record("z9", 56.2001, -2.7)]
        map_view.refresh()
        assert map_view.nearest is not None
        assert map_view.nearest.point.id == "z9"

    def test_nearest_directions_url(self, map_view: MapView, position_source: ManualPositionSource) -> None:
        position_source.push_fix(lat=56.2, lng=-2.7)
        url = map_view.nearest_directions_url()
        assert url is not None
        assert "origin=56.2,-2.7" in url
        assert "destination=56.223,-2.7" in url
        assert url.endswith("travelmode=walking")

    def test_location_error_keeps_nearest(self, map_view: MapView, position_source: ManualPositionSource) -> None:
        position_source.push_fix(lat=56.2231, lng=-2.7001)
        position_source.push_error("User denied Geolocation")
        assert map_view.nearest is not None
        assert map_view.location_message == LocationOffMessage(reason="User denied Geolocation")

    def test_dismiss_location_error(self, map_view: MapView, position_source: ManualPositionSource) -> None:
        position_source.push_error("Timeout expired")
        map_view.dismiss_location_error()
        assert map_view.location_message is None

    def test_unsupported_position_source(self, surface: RecordingMapSurface) -> None:
        view = MapView(surface=surface, data_source=None, position_source=None)
        view.mount()
        assert view.location_message == LocationOffMessage(reason=TrackerConfig.UNSUPPORTED_REASON)


# =============================================================================
# TAPS AND RESIZE
# =============================================================================


class TestInteraction:
    """Pin taps drive the selection; commands reach the surface."""

    def test_tap_opens_panel(self, map_view: MapView, surface: RecordingMapSurface) -> None:
        surface.emit_tap(pin_tap("a1"))
        assert map_view.selected is not None
        assert map_view.selected.id == "a1"
        pan = surface.calls_named("pan_to")[-1]
        assert pan["offset_px"] == (0, -120)
        assert pan["duration_ms"] == 450
        assert surface.padding == Padding(bottom=320)

    def test_invalid_tap_toasts(self, map_view: MapView, surface: RecordingMapSurface) -> None:
        calls_before = len(surface.calls)
        surface.emit_tap(pin_tap("undefined"))
        assert map_view.drain_toasts() == [InvalidPinMessage()]
        assert map_view.drain_toasts() == []
        assert len(surface.calls) == calls_before
        assert map_view.selected is None

    def test_close_selection_resets_padding(self, map_view: MapView, surface: RecordingMapSurface) -> None:
        surface.emit_tap(pin_tap("a1"))
        map_view.close_selection()
        assert map_view.selected is None
        assert surface.padding == Padding.zero()

    def test_navigate_away_closes_panel(self, map_view: MapView, surface: RecordingMapSurface) -> None:
        surface.emit_tap(pin_tap("a1"))
        map_view.navigate_away()
        assert map_view.selected is None

    def test_selected_directions_url(self, map_view: MapView, surface: RecordingMapSurface, position_source: ManualPositionSource) -> None:
        surface.emit_tap(pin_tap("c3", lat=56.19, lng=-2.65))
        assert map_view.selected_directions_url() is None
        position_source.push_fix(lat=56.2, lng=-2.7)
        url = map_view.selected_directions_url()
        assert url is not None
        assert "destination=56.19,-2.65" in url

    def test_tap_after_unmount_is_ignored(self, map_view: MapView, surface: RecordingMapSurface) -> None:
        map_view.unmount()
        surface.emit_tap(pin_tap("a1"))
        map_view.handle_tap(pin_tap("b2", lat=56.23, lng=-2.71))
        assert surface.calls_named("pan_to") == []

    def test_resize_forwards_and_updates_panel_padding(self, map_view: MapView, surface: RecordingMapSurface) -> None:
        map_view.handle_resize(width_px=390, height_px=844)
        assert surface.calls_named("resize") == [{"width_px": 390, "height_px": 844}]
        surface.emit_tap(pin_tap("a1"))
        assert surface.padding == Padding(bottom=422)

    def test_resize_after_unmount_ignored(self, map_view: MapView, surface: RecordingMapSurface) -> None:
        map_view.unmount()
        map_view.handle_resize(width_px=390, height_px=844)
        assert surface.calls_named("resize") == []
