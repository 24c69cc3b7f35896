"""Configuration constants for Roll Map.

All configurable parameters are centralized here for easy tuning.

Classes:
    AppConfig: UI application settings
    MapConfig: Default map view parameters
    ViewportConfig: Automatic fit-to-pins policy
    SelectionConfig: Camera nudge and panel padding for the detail panel
    TrackerConfig: Live position stream options
    DataSourceConfig: REST data source tables, columns and credentials
    DistanceConfig: Distance formatting and directions links
    RatingConfig: Review form options and limits
    ClickConfig: Click object types for map layers
    StyleConfig: Pin icon and label styling
"""

import os
from pathlib import Path

# Package root directory (where rollmap/ lives)
PACKAGE_DIR = Path(__file__).parent

# Static assets shipped with the package
ASSETS_DIR = PACKAGE_DIR / "assets"


class AppConfig:
    """UI application settings."""

    TITLE = "Roll Map - Find Your Nearest Roll"
    ICON = "🥯"
    LAYOUT = "wide"

    # Page names for sidebar navigation
    PAGE_MAP = "Map"
    PAGE_PLACE = "Place"
    PAGE_ADD_PLACE = "Add a location"
    PAGES = [PAGE_MAP, PAGE_PLACE, PAGE_ADD_PLACE]


class MapConfig:
    """Default map view parameters."""

    # Initial center for program start: East Neuk of Fife, Scotland
    START_CENTER_LAT = 56.223
    START_CENTER_LON = -2.7

    # Higher number = more zoomed in, lower = more zoomed out
    DEFAULT_ZOOM = 11
    PICKER_ZOOM = 13  # Add-place picker when a coordinate is already chosen

    # Drawing surface size used before the first resize notification
    DEFAULT_WIDTH_PX = 1000
    DEFAULT_HEIGHT_PX = 640

    # Web Mercator tile size used for zoom computations
    TILE_SIZE_PX = 512
    MIN_ZOOM = 0.0


class ViewportConfig:
    """Automatic fit-to-pins policy (runs once per view lifetime)."""

    SINGLE_POINT_ZOOM = 15  # Street scale when only one pin exists
    EASE_DURATION_MS = 800

    # Bounds fit padding in pixels, extra room at the bottom for the panel
    FIT_PADDING_TOP = 80
    FIT_PADDING_BOTTOM = 220
    FIT_PADDING_LEFT = 60
    FIT_PADDING_RIGHT = 60

    # Two nearby pins must not zoom in past this level
    MAX_FIT_ZOOM = 16


class SelectionConfig:
    """Camera nudge and padding applied while the detail panel is open."""

    PAN_OFFSET_X_PX = 0
    PAN_OFFSET_Y_PX = -120  # Keep the pin visible above the panel
    PAN_DURATION_MS = 450

    # Fraction of the viewport height reserved for the panel
    PANEL_HEIGHT_FRACTION = 0.5

    # Identifier values that count as "missing" on a tapped pin
    INVALID_IDS = {"", "undefined", "null", "None"}


class TrackerConfig:
    """Live position stream options."""

    HIGH_ACCURACY = True
    MAX_AGE_MS = 10_000  # Accept cached fixes up to this age
    TIMEOUT_MS = 10_000  # Give up acquiring a fix after this long

    UNSUPPORTED_REASON = "Geolocation not supported on this device."
    FALLBACK_REASON = "Unable to get location."


class DataSourceConfig:
    """REST data source (Supabase/PostgREST) tables, columns and credentials."""

    URL_ENV = "SUPABASE_URL"
    KEY_ENV = "SUPABASE_ANON_KEY"
    URL = os.environ.get(URL_ENV, "")
    ANON_KEY = os.environ.get(KEY_ENV, "")

    REST_PATH = "/rest/v1"
    TIMEOUT_S = 15

    LOCATIONS_TABLE = "locations"
    LOCATIONS_COLUMNS = "id,name,description,lat,lng,created_at"
    LOCATIONS_LIMIT = 500

    STATS_VIEW = "location_stats"
    STATS_COLUMNS = "location_id,name,description,lat,lng,created_at,rating_count,avg_stars"

    RATINGS_TABLE = "ratings"
    RATINGS_COLUMNS = "id,location_id,stars,extras,sauce,price_pence,notes,created_at"
    RATINGS_LIMIT = 200

    NOT_CONFIGURED = f"Data source is not configured. Set {URL_ENV} and {KEY_ENV}."


class DistanceConfig:
    """Distance formatting and outbound directions links."""

    METERS_PER_KM = 1000
    DIRECTIONS_BASE_URL = "https://www.google.com/maps/dir/"
    TRAVEL_MODE = "walking"


class RatingConfig:
    """Review form options and limits."""

    MIN_STARS = 1
    MAX_STARS = 5
    DEFAULT_STARS = 5

    EXTRAS = [
        "Tattie scone",
        "Fried egg",
        "Bacon",
        "Sausage",
        "Black pudding",
        "Hash brown",
        "Cheese",
        "Onion",
        "Haggis",
    ]
    SAUCES = ["Brown", "Ketchup", "HP", "Chilli", "Mayo", "None"]
    DEFAULT_SAUCE = "Brown"
    NO_SAUCE = "None"

    CURRENCY_SYMBOL = "£"
    PENCE_PER_POUND = 100


class ClickConfig:
    """Click object types carried by pickable map layers."""

    TYPE_PLACE = "place"
    TYPE_PICKER = "picker"


class StyleConfig:
    """Pin icon and label styling."""

    PIN_IMAGE_ID = "roll-pin"
    PIN_IMAGE_PATH = ASSETS_DIR / "roll-pin.png"
    PIN_WIDTH_PX = 64
    PIN_HEIGHT_PX = 64
    PIN_SIZE = 0.8 * 40  # Icon size in pixels on screen

    PLACES_LAYER_ID = "places-layer"
    LABELS_LAYER_ID = "places-labels"
    PICKER_LAYER_ID = "picker-layer"

    LABEL_COLOR = [44, 44, 44, 255]  # #2c2c2c
    LABEL_HALO_COLOR = [250, 204, 0, 255]  # #facc00
    LABEL_SIZE = 12
    LABEL_MIN_ZOOM = 12  # Labels hidden below this zoom
    LABEL_OFFSET_PX = [0, 22]  # Label sits below the pin

    PICKER_COLOR = [0, 0, 0, 255]
    EXISTING_PLACE_COLOR = [255, 255, 255, 230]
    MARKER_RADIUS_PX = 8

    MAP_PROVIDER = "carto"
    MAP_STYLE = "light"

    TOOLTIP_HTML = "<b>{name}</b>"
    TOOLTIP_STYLE = {
        "backgroundColor": "rgba(255, 255, 255, 0.95)",
        "color": "#333",
        "padding": "6px 10px",
        "borderRadius": "4px",
    }
