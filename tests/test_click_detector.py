"""Tests for click detection and deduplication.

st_deckgl repeats the last event on every rerun; the detector must report
each click once per map version.
"""

import math

import pytest

from rollmap.model.click_info import PinTap
from rollmap.model.geo_point import Coordinate
from rollmap.ui.click_detector import ClickDeduplicationContext, ClickDetector
from rollmap.ui.pydeck_click_handler import parse_click_event


@pytest.fixture
def detector() -> ClickDetector:
    return ClickDetector(dedup=ClickDeduplicationContext(), map_version=0)


def place_object(**overrides: object) -> dict[str, object]:
    obj: dict[str, object] = {
        "type": "place",
        "id": "a1",
        "name": "Harbour Cafe",
        "description": "Bacon rolls",
        "position": [-2.7, 56.223],
    }
    obj.update(overrides)
    return obj


class TestClickDeduplication:
    """ClickDeduplicationContext - last click remembered across reruns."""

    def test_first_click_is_new(self) -> None:
        assert ClickDeduplicationContext().is_new_click(click_id="v0_place_a1") is True

    def test_repeat_is_not_new(self) -> None:
        dedup = ClickDeduplicationContext()
        dedup.is_new_click(click_id="v0_place_a1")
        assert dedup.is_new_click(click_id="v0_place_a1") is False

    def test_clear_forgets(self) -> None:
        dedup = ClickDeduplicationContext()
        dedup.is_new_click(click_id="v0_place_a1")
        dedup.clear()
        assert dedup.is_new_click(click_id="v0_place_a1") is True


class TestClickDetector:
    """ClickDetector - pin taps, map clicks and repeats."""

    def test_no_event(self, detector: ClickDetector) -> None:
        assert detector.detect(clicked_object=None, clicked_coordinate=None) is None

    def test_place_click_gives_pin_tap(self, detector: ClickDetector) -> None:
        result = detector.detect(clicked_object=place_object(), clicked_coordinate=[-2.70001, 56.22301])
        assert result == PinTap(raw_id="a1", name="Harbour Cafe", description="Bacon rolls", lat=56.223, lng=-2.7)

    def test_same_event_on_rerun_is_ignored(self, detector: ClickDetector) -> None:
        detector.detect(clicked_object=place_object(), clicked_coordinate=[-2.7, 56.223])
        assert detector.detect(clicked_object=place_object(), clicked_coordinate=[-2.7, 56.223]) is None

    def test_new_map_version_reports_again(self) -> None:
        dedup = ClickDeduplicationContext()
        ClickDetector(dedup=dedup, map_version=0).detect(clicked_object=place_object(), clicked_coordinate=[-2.7, 56.223])
        result = ClickDetector(dedup=dedup, map_version=1).detect(clicked_object=place_object(), clicked_coordinate=[-2.7, 56.223])
        assert isinstance(result, PinTap)

    def test_missing_fields_get_defaults(self, detector: ClickDetector) -> None:
        obj = {"type": "place", "id": None, "position": [-2.7, 56.223]}
        result = detector.detect(clicked_object=obj, clicked_coordinate=None)
        assert isinstance(result, PinTap)
        assert result.name == "Untitled"
        assert result.description == ""
        assert result.point_id is None

    def test_geojson_feature(self, detector: ClickDetector) -> None:
        feature = {
            "type": "Feature",
            "properties": {"type": "place", "id": "b2", "name": "Bakery"},
            "geometry": {"type": "Point", "coordinates": [-2.71, 56.23]},
        }
        result = detector.detect(clicked_object=feature, clicked_coordinate=None)
        assert isinstance(result, PinTap)
        assert result.raw_id == "b2"
        assert (result.lat, result.lng) == (56.23, -2.71)

    def test_position_falls_back_to_click_coordinate(self, detector: ClickDetector) -> None:
        obj = place_object(position=None)
        result = detector.detect(clicked_object=obj, clicked_coordinate=[-2.65, 56.19])
        assert isinstance(result, PinTap)
        assert (result.lat, result.lng) == (56.19, -2.65)

    def test_no_position_at_all_gives_nan(self, detector: ClickDetector) -> None:
        result = detector.detect(clicked_object=place_object(position=None), clicked_coordinate=None)
        assert isinstance(result, PinTap)
        assert math.isnan(result.lat)
        assert result.to_point() is None

    def test_empty_map_click(self, detector: ClickDetector) -> None:
        assert detector.detect(clicked_object=None, clicked_coordinate=[-2.7, 56.2]) == Coordinate(lat=56.2, lng=-2.7)

    def test_picker_marker_click_acts_as_map_click(self, detector: ClickDetector) -> None:
        obj = {"type": "picker", "id": "chosen", "position": [-2.7, 56.2]}
        result = detector.detect(clicked_object=obj, clicked_coordinate=[-2.69, 56.21])
        assert result == Coordinate(lat=56.21, lng=-2.69)


class TestClickEventPipeline:
    """st_deckgl event -> parse_click_event -> ClickDetector."""

    def test_object_event_spreads_properties(self, detector: ClickDetector) -> None:
        event = {**place_object(), "coordinate": [-2.7, 56.223], "eventType": "click"}
        parsed = parse_click_event(event)
        assert parsed.is_object_click
        assert parsed.clicked_object is not None
        assert "eventType" not in parsed.clicked_object
        result = detector.detect(clicked_object=parsed.clicked_object, clicked_coordinate=parsed.clicked_coordinate)
        assert isinstance(result, PinTap)
        assert result.raw_id == "a1"

    def test_map_event_has_coordinate_only(self) -> None:
        parsed = parse_click_event({"coordinate": [-2.7, 56.2], "eventType": "click"})
        assert not parsed.is_object_click
        assert parsed.clicked_coordinate == [-2.7, 56.2]

    @pytest.mark.parametrize("event", [None, {}, "click", []])
    def test_empty_event(self, event: object) -> None:
        assert parse_click_event(event) == parse_click_event(None)
