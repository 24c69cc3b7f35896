"""Add place page - pick a coordinate on the map, then name the place.

The picker map shows existing places as white dots and the chosen
coordinate as a black dot. Clicking anywhere (including on a dot) moves the
chosen coordinate.
"""

import logging
from typing import Any

import pydeck as pdk
import streamlit as st

from rollmap.constants import AppConfig, ClickConfig, MapConfig, StyleConfig
from rollmap.core.data_source import DataSourceError, PlacesClient
from rollmap.core.projector import project_points
from rollmap.model.geo_point import Coordinate, PlaceDraft, PointCollection
from rollmap.model.message import FetchFailedMessage, SavedMessage, SaveFailedMessage
from rollmap.ui.click_detector import ClickDeduplicationContext, ClickDetector
from rollmap.ui.infra import bump_map_version, select_page, trigger_rerun
from rollmap.ui.pydeck_click_handler import render_pydeck_map
from rollmap.ui.validators import validate_new_place

logger = logging.getLogger(__name__)

PICKER_HEIGHT_PX = 360


def build_picker_deck(points: PointCollection, chosen: Coordinate | None) -> pdk.Deck:
    """Deck with existing places and the chosen coordinate."""
    existing: list[dict[str, Any]] = [
        {
            "type": ClickConfig.TYPE_PICKER,
            "id": point.id,
            "name": point.name,
            "position": list(point.lng_lat),
            "color": StyleConfig.EXISTING_PLACE_COLOR,
        }
        for point in points
    ]
    if chosen is not None:
        existing.append(
            {
                "type": ClickConfig.TYPE_PICKER,
                "id": "chosen",
                "name": "New place",
                "position": list(chosen.lng_lat),
                "color": StyleConfig.PICKER_COLOR,
            }
        )

    layer = pdk.Layer(
        "ScatterplotLayer",
        existing,
        get_position="position",
        get_fill_color="color",
        get_line_color=[17, 17, 17, 255],
        stroked=True,
        line_width_min_pixels=1,
        get_radius=StyleConfig.MARKER_RADIUS_PX,
        radius_units="pixels",
        pickable=True,
        id=StyleConfig.PICKER_LAYER_ID,
    )

    center = chosen or Coordinate(lat=MapConfig.START_CENTER_LAT, lng=MapConfig.START_CENTER_LON)
    return pdk.Deck(
        map_provider=StyleConfig.MAP_PROVIDER,
        map_style=StyleConfig.MAP_STYLE,
        initial_view_state=pdk.ViewState(
            latitude=center.lat,
            longitude=center.lng,
            zoom=MapConfig.PICKER_ZOOM if chosen is not None else MapConfig.DEFAULT_ZOOM,
        ),
        layers=[layer],
        tooltip={"html": StyleConfig.TOOLTIP_HTML, "style": StyleConfig.TOOLTIP_STYLE},
    )


def load_existing_points(client: PlacesClient | None) -> PointCollection:
    if client is None:
        return ()
    try:
        return project_points(client.fetch_points())
    except DataSourceError as e:
        FetchFailedMessage(error=str(e)).display()
        return ()


def render_add_place_page() -> None:
    """Render the add place page."""
    st.button("← Back to map", key="add_back", on_click=select_page, args=(AppConfig.PAGE_MAP,))
    st.header("Add a location")
    st.caption("Click the map to drop a pin, then give the place a name.")

    try:
        client: PlacesClient | None = PlacesClient.from_config()
    except DataSourceError as e:
        FetchFailedMessage(error=str(e)).display()
        client = None

    if "picker_dedup" not in st.session_state:
        st.session_state.picker_dedup = ClickDeduplicationContext()
    chosen: Coordinate | None = st.session_state.get("picker_choice")

    map_version = st.session_state.get("map_version", 0)
    click_result = render_pydeck_map(
        deck=build_picker_deck(points=load_existing_points(client), chosen=chosen),
        key=f"picker_map_{map_version}",
        height=PICKER_HEIGHT_PX,
    )
    detector = ClickDetector(dedup=st.session_state.picker_dedup, map_version=map_version)
    click = detector.detect(
        clicked_object=click_result.clicked_object,
        clicked_coordinate=click_result.clicked_coordinate,
    )
    if isinstance(click, Coordinate):
        st.session_state.picker_choice = click
        logger.info(f"[PICKER] Chosen ({click.lat:.6f}, {click.lng:.6f})")
        bump_map_version()
        trigger_rerun()

    if chosen is not None:
        st.caption(f"Pin: {chosen.lat:.6f}, {chosen.lng:.6f}")

    with st.form("add_place_form"):
        name = st.text_input("Name", placeholder="e.g. Harbour Cafe")
        description = st.text_area("Description (optional)")
        submitted = st.form_submit_button("Save location", type="primary", disabled=client is None)

    if not submitted or client is None:
        return

    error = validate_new_place(
        name=name,
        lat=chosen.lat if chosen is not None else None,
        lng=chosen.lng if chosen is not None else None,
    )
    if error is not None:
        error.display()
        return

    draft = PlaceDraft(name=name, description=description, lat=chosen.lat, lng=chosen.lng)  # type: ignore[union-attr]
    try:
        client.insert_point(draft.to_payload())
    except DataSourceError as e:
        SaveFailedMessage(error=str(e)).display()
        return

    SavedMessage(what="Location").display()
    st.session_state.picker_choice = None
    view = st.session_state.get("map_view")
    if view is not None and view.is_mounted:
        view.refresh()
    bump_map_version()
