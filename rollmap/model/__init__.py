"""Data model classes for the roll map.

- Coordinate: Bare WGS84 coordinate (also the live position)
- GeoPoint: Renderable place with a validated coordinate
- NearestResult: Closest place plus distance
- PlaceDraft: Validated new place input
- MapCommand: Requests to the map surface (SetPoints, PanTo, FitBounds, SetPadding, Resize)
- PinTap: A tap on a place pin
- PlaceStats, Rating, RatingDraft: Reviews
- Message, ToastMessage: User-facing messages
"""

from rollmap.model.click_info import PinTap
from rollmap.model.geo_point import (
    Coordinate,
    GeoPoint,
    NearestResult,
    PlaceDraft,
    PointCollection,
)
from rollmap.model.map_command import (
    Bounds,
    FitBounds,
    MapCommand,
    Padding,
    PanTo,
    Resize,
    SetPadding,
    SetPoints,
)
from rollmap.model.message import Message, MessageLevel, ToastMessage
from rollmap.model.rating import PlaceStats, Rating, RatingDraft

__all__ = [
    "Coordinate",
    "GeoPoint",
    "PointCollection",
    "NearestResult",
    "PlaceDraft",
    "PinTap",
    "MapCommand",
    "SetPoints",
    "PanTo",
    "FitBounds",
    "SetPadding",
    "Resize",
    "Padding",
    "Bounds",
    "Message",
    "MessageLevel",
    "ToastMessage",
    "PlaceStats",
    "Rating",
    "RatingDraft",
]
