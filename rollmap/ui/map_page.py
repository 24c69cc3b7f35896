"""Map page - full map, nearest place chip and the place detail panel.

Layout (top to bottom):
- Location status (dismissable) and the "Nearest roll" chip
- The map (pydeck via streamlit-deckgl)
- Status line: error, "Loading locations…" or "N locations"
- Detail panel for the selected place

The MapView lives in st.session_state for the whole browser session. The
sidebar holds the position input, which feeds a ManualPositionSource.
"""

import logging

import streamlit as st

from rollmap.constants import AppConfig, MapConfig
from rollmap.core.data_source import DataSourceError, PlacesClient
from rollmap.core.formatting import format_distance
from rollmap.core.geo_calculator import GeoCalculator
from rollmap.core.tracker import ManualPositionSource
from rollmap.model.click_info import PinTap
from rollmap.ui.click_detector import ClickDeduplicationContext, ClickDetector
from rollmap.ui.infra import bump_map_version, select_page, trigger_rerun
from rollmap.ui.map_surface import PydeckMapSurface
from rollmap.ui.map_view import MapView
from rollmap.ui.pydeck_click_handler import render_pydeck_map

logger = logging.getLogger(__name__)


# =============================================================================
# SESSION STATE
# =============================================================================


def create_map_view() -> MapView:
    """Create, mount and load a new map view and store it in session state."""
    try:
        client: PlacesClient | None = PlacesClient.from_config()
    except DataSourceError as e:
        logger.warning(f"[VIEW] {e}")
        client = None

    source = ManualPositionSource()
    view = MapView(surface=PydeckMapSurface(), data_source=client, position_source=source)
    view.mount()
    view.handle_resize(
        width_px=MapConfig.DEFAULT_WIDTH_PX,
        height_px=st.session_state.get("map_height_px", MapConfig.DEFAULT_HEIGHT_PX),
    )
    view.refresh()

    st.session_state.map_view = view
    st.session_state.position_source = source
    st.session_state.click_dedup = ClickDeduplicationContext()
    st.session_state.last_camera = None
    return view


def get_map_view() -> MapView:
    view = st.session_state.get("map_view")
    if view is None or not view.is_mounted:
        view = create_map_view()
    return view


def dispose_map_view() -> None:
    """Tear down the current map view (error recovery)."""
    view: MapView | None = st.session_state.pop("map_view", None)
    if view is not None:
        view.unmount()


# =============================================================================
# SIDEBAR
# =============================================================================


def render_position_controls(view: MapView) -> None:
    """Sidebar inputs feeding the manual position source."""
    source: ManualPositionSource = st.session_state.position_source
    st.sidebar.subheader("📍 Your position")
    lat = st.sidebar.number_input("Latitude", value=MapConfig.START_CENTER_LAT, format="%.6f", key="pos_lat")
    lng = st.sidebar.number_input("Longitude", value=MapConfig.START_CENTER_LON, format="%.6f", key="pos_lng")
    if st.sidebar.button("Use this position", width="stretch"):
        if GeoCalculator.is_valid_coordinate(lat=lat, lng=lng):
            source.push_fix(lat=lat, lng=lng)
        else:
            source.push_error(f"({lat}, {lng}) is not a valid position.")

    height = st.sidebar.slider(
        "Map height (px)",
        min_value=400,
        max_value=1000,
        value=MapConfig.DEFAULT_HEIGHT_PX,
        step=20,
        key="map_height_px",
    )
    if height != view.selection.context.viewport_height_px:
        view.handle_resize(width_px=MapConfig.DEFAULT_WIDTH_PX, height_px=height)

    if st.sidebar.button("🔄 Reload locations", width="stretch"):
        view.refresh()


# =============================================================================
# PAGE
# =============================================================================


def render_nearest_chip(view: MapView) -> None:
    if view.nearest is None:
        return
    url = view.nearest_directions_url()
    with st.container(border=True):
        col_text, col_link = st.columns([4, 1])
        with col_text:
            st.caption("Nearest roll")
            st.markdown(f"{view.nearest.point.name} · **{format_distance(view.nearest.distance_m)}**")
        with col_link:
            if url is not None:
                st.link_button("Directions", url)


def render_location_status(view: MapView) -> None:
    message = view.location_message
    if message is None:
        return
    col_msg, col_btn = st.columns([6, 1])
    with col_msg:
        message.display()
    with col_btn:
        st.button("✕", key="dismiss_location", on_click=view.dismiss_location_error)


def render_detail_panel(view: MapView) -> None:
    """Bottom panel for the selected place."""
    selected = view.selected
    if selected is None:
        return

    with st.container(border=True):
        col_title, col_close = st.columns([8, 1])
        with col_title:
            st.subheader(selected.name)
            if selected.description:
                st.caption(selected.description)
        with col_close:
            if st.button("✕", key="close_panel"):
                view.close_selection()
                bump_map_version()
                trigger_rerun()

        col_rate, col_reviews = st.columns(2)
        with col_rate:
            st.button(
                "Rate this roll",
                type="primary",
                width="stretch",
                on_click=select_page,
                args=(AppConfig.PAGE_PLACE, selected.id),
            )
        with col_reviews:
            st.button(
                "View reviews",
                width="stretch",
                on_click=select_page,
                args=(AppConfig.PAGE_PLACE, selected.id),
            )

        url = view.selected_directions_url()
        if url is not None:
            st.link_button("Directions to this roll", url, width="stretch")

        st.caption("Tip: zoom in to see nearby places, then tap another pin to switch.")


def render_map_page() -> None:
    """Render the map page for this run."""
    view = get_map_view()
    render_position_controls(view=view)

    render_location_status(view=view)
    render_nearest_chip(view=view)

    # Camera moved since the last run: fresh component so the new view state applies
    surface = view.surface
    camera = (round(surface.center_lat, 6), round(surface.center_lon, 6), round(surface.zoom, 3))
    if camera != st.session_state.get("last_camera"):
        if st.session_state.get("last_camera") is not None:
            bump_map_version()
        st.session_state.last_camera = camera

    map_version = st.session_state.get("map_version", 0)
    click_result = render_pydeck_map(
        deck=surface.render(),
        key=f"main_map_{map_version}",
        height=view.selection.context.viewport_height_px,
    )

    detector = ClickDetector(dedup=st.session_state.click_dedup, map_version=map_version)
    click = detector.detect(
        clicked_object=click_result.clicked_object,
        clicked_coordinate=click_result.clicked_coordinate,
    )
    if isinstance(click, PinTap):
        surface.emit_tap(click)
        for toast in view.drain_toasts():
            toast.display()
        if view.selected is not None:
            trigger_rerun()

    view.status_message.display()
    st.button("＋ Add a location", on_click=select_page, args=(AppConfig.PAGE_ADD_PLACE,))

    render_detail_panel(view=view)
