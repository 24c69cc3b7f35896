"""Shared pytest fixtures for rollmap tests.

Provides the sample place records and a mounted MapView built on the fakes
from fakes.py.

COORDINATE SYSTEM:
    Sample places sit around the East Neuk of Fife (lat ~56.2, lng ~-2.7),
    the default map center, so distances stay in the hundreds of meters to
    tens of kilometers.
"""

from typing import Any

import pytest
from fakes import FakePointsSource, RecordingMapSurface, make_record

from rollmap.core.tracker import ManualPositionSource
from rollmap.ui.map_view import MapView


# =============================================================================
# SAMPLE DATA
# =============================================================================


@pytest.fixture
def sample_records() -> list[dict[str, Any]]:
    """Three valid places and two with unusable coordinates."""
    return [
        make_record("a1", 56.2230, -2.7000, name="Harbour Cafe", description="Bacon rolls"),
        make_record("b2", 56.2300, -2.7100, name="Bakery"),
        make_record("c3", 56.1900, -2.6500, name="Van by the beach"),
        make_record("bad-lat", 123.0, -2.7, name="Broken"),
        make_record("bad-lng", 56.2, None, name="Missing lng"),
    ]


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def surface() -> RecordingMapSurface:
    return RecordingMapSurface()


@pytest.fixture
def position_source() -> ManualPositionSource:
    return ManualPositionSource()


@pytest.fixture
def points_source(sample_records: list[dict[str, Any]]) -> FakePointsSource:
    return FakePointsSource(records=sample_records)


@pytest.fixture
def map_view(
    surface: RecordingMapSurface,
    points_source: FakePointsSource,
    position_source: ManualPositionSource,
) -> MapView:
    """Mounted map view with the sample records loaded."""
    view = MapView(surface=surface, data_source=points_source, position_source=position_source)
    view.mount()
    view.refresh()
    return view
