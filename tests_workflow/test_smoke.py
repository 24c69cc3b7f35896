"""Smoke tests for module imports and configuration validation.

Quick tests that verify the system is correctly installed and configured.
"""

import pytest

# =============================================================================
# MODULE IMPORT TESTS
# =============================================================================


class TestModuleImports:
    """Parametrized smoke tests for module imports."""

    @pytest.mark.parametrize(
        "module_path,class_name",
        [
            # Core modules
            pytest.param("rollmap.core.data_source", "PlacesClient", id="core_data_source"),
            pytest.param("rollmap.core.geo_calculator", "GeoCalculator", id="core_geo"),
            pytest.param("rollmap.core.lifecycle", "LifetimeScope", id="core_lifecycle"),
            pytest.param("rollmap.core.tracker", "LivePositionTracker", id="core_tracker"),
            pytest.param("rollmap.core.viewport", "FitOnceGate", id="core_viewport"),
            # Model modules
            pytest.param("rollmap.model.click_info", "PinTap", id="model_pin_tap"),
            pytest.param("rollmap.model.geo_point", "GeoPoint", id="model_geo_point"),
            pytest.param("rollmap.model.map_command", "FitBounds", id="model_commands"),
            pytest.param("rollmap.model.rating", "Rating", id="model_rating"),
            # UI modules
            pytest.param("rollmap.ui.click_detector", "ClickDetector", id="ui_detector"),
            pytest.param("rollmap.ui.map_surface", "PydeckMapSurface", id="ui_surface"),
            pytest.param("rollmap.ui.map_view", "MapView", id="ui_map_view"),
            pytest.param("rollmap.ui.selection_machine", "SelectionStateMachine", id="ui_statemachine"),
        ],
    )
    def test_module_import(self, module_path: str, class_name: str) -> None:
        """Module can be imported without errors."""
        import importlib

        module = importlib.import_module(module_path)
        cls = getattr(module, class_name)
        assert cls is not None

    @pytest.mark.parametrize(
        "module_path,function_name",
        [
            pytest.param("rollmap.ui.map_page", "render_map_page", id="page_map"),
            pytest.param("rollmap.ui.place_page", "render_place_page", id="page_place"),
            pytest.param("rollmap.ui.add_place_page", "render_add_place_page", id="page_add_place"),
            pytest.param("rollmap.app", "main", id="app"),
        ],
    )
    def test_page_import(self, module_path: str, function_name: str) -> None:
        """Streamlit pages import without a running script context."""
        import importlib

        module = importlib.import_module(module_path)
        assert callable(getattr(module, function_name))


# =============================================================================
# CONFIGURATION VALIDATION TESTS
# =============================================================================


class TestConfigurationValidation:
    """Tests that configuration constants are valid and consistent."""

    def test_pin_image_is_packaged(self) -> None:
        from rollmap.constants import StyleConfig

        assert StyleConfig.PIN_IMAGE_PATH.is_file()

    def test_pages_are_unique(self) -> None:
        from rollmap.constants import AppConfig

        assert len(AppConfig.PAGES) == len(set(AppConfig.PAGES))
        assert AppConfig.PAGES[0] == AppConfig.PAGE_MAP

    def test_default_sauce_is_an_option(self) -> None:
        from rollmap.constants import RatingConfig

        assert RatingConfig.DEFAULT_SAUCE in RatingConfig.SAUCES
        assert RatingConfig.NO_SAUCE in RatingConfig.SAUCES
        assert RatingConfig.MIN_STARS <= RatingConfig.DEFAULT_STARS <= RatingConfig.MAX_STARS

    def test_fit_padding_leaves_room_for_panel(self) -> None:
        from rollmap.constants import ViewportConfig

        assert ViewportConfig.FIT_PADDING_BOTTOM > ViewportConfig.FIT_PADDING_TOP
        assert ViewportConfig.SINGLE_POINT_ZOOM <= ViewportConfig.MAX_FIT_ZOOM

    @pytest.mark.parametrize("raw_id", ["", "undefined", "null"])
    def test_invalid_ids(self, raw_id: str) -> None:
        from rollmap.constants import SelectionConfig

        assert raw_id in SelectionConfig.INVALID_IDS


# =============================================================================
# STATE MACHINE TESTS
# =============================================================================


class TestStateMachineConfiguration:
    """Tests for state machine setup."""

    @pytest.mark.parametrize("state_name", ["no_selection", "place_open"])
    def test_state_exists(self, state_name: str) -> None:
        from rollmap.ui.selection_machine import SelectionStateMachine

        sm = SelectionStateMachine()
        assert hasattr(sm, state_name)

    @pytest.mark.parametrize("event_name", ["select_place", "close_panel"])
    def test_event_exists(self, event_name: str) -> None:
        from rollmap.ui.selection_machine import SelectionStateMachine

        sm = SelectionStateMachine()
        assert callable(getattr(sm, event_name))
