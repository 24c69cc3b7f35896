"""Infrastructure utilities for Streamlit UI operations.

This module abstracts Streamlit-specific infrastructure (st.rerun, st.session_state)
so pages share one way of rerunning, switching pages and refreshing the map
component.

IMPORTANT: Only infrastructure belongs here (rerun, map version, page switch).
- Map view state lives in rollmap.ui.map_view
- Rendering stays in the *_page modules
"""

import logging

import streamlit as st

from rollmap.constants import AppConfig

logger = logging.getLogger(__name__)


def trigger_rerun(scope: str = "app") -> None:
    """Trigger Streamlit rerun with optional scope.

    This is a mockable wrapper around st.rerun() for testability.

    Args:
        scope: Rerun scope - "app" for full rerun, "fragment" for partial.
    """
    st.rerun(scope=scope)


def bump_map_version() -> None:
    """Increment map_version to create fresh Pydeck component.

    A fresh component shows the new camera and has no memory of previous
    click events. Call this whenever the map view issued camera commands.
    """
    old_version = st.session_state.get("map_version", 0)
    new_version = old_version + 1
    st.session_state.map_version = new_version
    logger.info(f"[MAP] Bumped map_version: {old_version} -> {new_version}")


def select_page(page: str, place_id: str | None = None) -> None:
    """Switch the active page.

    Meant as a widget on_click callback: callbacks run before the next script
    run, so the sidebar page widget can still be updated here. Leaving the map
    page closes the detail panel.
    """
    if page not in AppConfig.PAGES:
        raise ValueError(f"Unknown page {page!r}")
    view = st.session_state.get("map_view")
    if page != AppConfig.PAGE_MAP and view is not None:
        view.navigate_away()
    st.session_state.page = page
    if place_id is not None:
        st.session_state.place_id = place_id
    logger.info(f"[NAV] -> {page} (place_id={place_id})")


def on_page_radio_change() -> None:
    """on_change callback of the sidebar page radio.

    The radio already wrote the new page into session_state; routing it
    through select_page closes the detail panel when leaving the map.
    """
    select_page(st.session_state.page)
