"""Roll Map - find the nearest breakfast roll.

A map of places with live nearest-place resolution featuring:
- Validated projection of raw place records into renderable points
- Nearest place to the live position (haversine, full scan)
- State machine-based selection of the place detail panel
- Viewport fitting and camera commands for a pydeck map surface

Modules:
    core: Foundation (geo calculations, projection, nearest, viewport, tracker, data source)
    model: Data structures (GeoPoint, MapCommand, PinTap, Rating, messages)
    ui: Streamlit interface (map view, map surface, selection machine, pages)

Example:
    from rollmap.core.projector import project_points
    from rollmap.core.nearest import resolve_nearest
    from rollmap.model import Coordinate
"""
