"""Shared pytest fixtures for rollmap workflow tests.

Workflow tests drive real Streamlit scripts through AppTest, so the data
source is the only fake. Keep this file minimal.

COORDINATE SYSTEM:
    Places sit around the East Neuk of Fife (lat ~56.2, lng ~-2.7).
"""

from typing import Any

import pytest


class StaticPointsSource:
    """Data source returning a fixed list of location rows."""

    def __init__(self, records: list[dict[str, Any]]) -> None:
        self.records = records
        self.fetch_count = 0

    def fetch_points(self) -> list[dict[str, Any]]:
        self.fetch_count += 1
        return list(self.records)


@pytest.fixture
def workflow_records() -> list[dict[str, Any]]:
    """Two valid places plus one row with a missing longitude."""
    return [
        {"id": "a1", "name": "Harbour Cafe", "description": "Bacon rolls", "lat": 56.2230, "lng": -2.7000},
        {"id": "c3", "name": "Van by the beach", "description": None, "lat": 56.1900, "lng": -2.6500},
        {"id": "x9", "name": "Broken", "description": None, "lat": 56.2, "lng": None},
    ]


@pytest.fixture
def points_source(workflow_records: list[dict[str, Any]]) -> StaticPointsSource:
    return StaticPointsSource(records=workflow_records)
