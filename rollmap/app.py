"""Roll Map - find the nearest breakfast roll.

Shows every known place on a map, the place closest to your position with a
walking directions link, per-place ratings and reviews, and a form to add new
places.

Run: streamlit run rollmap/app.py
"""

import logging
import traceback

import streamlit as st

from rollmap.constants import AppConfig
from rollmap.ui.add_place_page import render_add_place_page
from rollmap.ui.infra import on_page_radio_change
from rollmap.ui.map_page import dispose_map_view, render_map_page
from rollmap.ui.place_page import render_place_page

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# =============================================================================
# SESSION STATE
# =============================================================================


def init_session_state() -> None:
    """Initialize navigation and map component state."""
    if "page" not in st.session_state:
        st.session_state.page = AppConfig.PAGE_MAP

    if "place_id" not in st.session_state:
        st.session_state.place_id = None

    if "map_version" not in st.session_state:
        st.session_state.map_version = 0


def reset_ui_state() -> None:
    """Reset UI state after an error.

    Resets:
    - Map view (unmounted, recreated on the next run)
    - Map version (to clear any stale map state)
    """
    logger.info("Resetting UI state due to error recovery")
    dispose_map_view()
    st.session_state.map_version = st.session_state.get("map_version", 0) + 1
    logger.info("UI state reset complete")


def _run_app_ui() -> None:
    page = st.sidebar.radio("Page", options=AppConfig.PAGES, key="page", on_change=on_page_radio_change)
    if page == AppConfig.PAGE_MAP:
        render_map_page()
    elif page == AppConfig.PAGE_PLACE:
        render_place_page()
    else:
        render_add_place_page()


# =============================================================================
# MAIN
# =============================================================================


def main() -> None:
    """Application entry point."""
    st.set_page_config(page_title=AppConfig.TITLE, page_icon=AppConfig.ICON, layout=AppConfig.LAYOUT)
    init_session_state()

    st.title(AppConfig.TITLE)

    try:
        _run_app_ui()
    except Exception as e:
        # Log full traceback for debugging
        error_msg = f"{type(e).__name__}: {e}"
        full_traceback = traceback.format_exc()
        logger.error(f"[UI] UI error caught: {error_msg}\n{full_traceback}")

        # Show user-friendly error message
        st.error(f"⚠️ [UI] Something went wrong: {error_msg}")

        reset_ui_state()

        if st.button("🔄 Reset and Continue", type="primary"):
            st.rerun()


if __name__ == "__main__":
    main()
