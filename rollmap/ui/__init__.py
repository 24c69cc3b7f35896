"""User interface components for the roll map.

File Structure (page-based naming):
- map_page.py: Map, nearest chip, status line, place detail panel
- place_page.py: Rating summary, review form, reviews list
- add_place_page.py: Coordinate picker and new place form

Core Components:
- map_view.py: MapView, one lifetime of the map screen
- map_surface.py: MapSurface interface + PydeckMapSurface
- selection_machine.py: SelectionStateMachine (2 states) + SelectionController
- click_detector.py: deck.gl click events -> PinTap / Coordinate
- validators.py: Input validation with ToastMessage | None returns

Pages import Streamlit; import them directly from their modules.
"""

from rollmap.ui.click_detector import ClickDeduplicationContext, ClickDetector
from rollmap.ui.map_surface import MapSurface, PydeckMapSurface
from rollmap.ui.map_view import MapView
from rollmap.ui.selection_machine import (
    SelectionController,
    SelectionModel,
    SelectionStateMachine,
)

__all__ = [
    "ClickDeduplicationContext",
    "ClickDetector",
    "MapSurface",
    "PydeckMapSurface",
    "MapView",
    "SelectionController",
    "SelectionModel",
    "SelectionStateMachine",
]
