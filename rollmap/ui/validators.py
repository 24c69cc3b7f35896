"""Validators - Input validation for the review and add-place forms.

Centralizes all validation logic. Validators return ToastMessage | None:
- None if valid
- A ToastMessage if invalid (caller displays it)

Design Principles:
- No exceptions for expected validation failures
- Checks run before any write to the data source
- Caller controls when/how to display the message
"""

from math import floor, isfinite

from rollmap.constants import RatingConfig, SelectionConfig
from rollmap.core.geo_calculator import GeoCalculator
from rollmap.model.message import (
    InvalidCoordinateMessage,
    InvalidLocationLinkMessage,
    InvalidPriceMessage,
    InvalidStarsMessage,
    MissingCoordinateMessage,
    MissingNameMessage,
    ToastMessage,
)


def validate_stars(stars: int) -> ToastMessage | None:
    """Validate that the star rating is within MIN_STARS..MAX_STARS.

    Returns:
        None if valid, InvalidStarsMessage otherwise.
    """
    if stars < RatingConfig.MIN_STARS or stars > RatingConfig.MAX_STARS:
        return InvalidStarsMessage(min_stars=RatingConfig.MIN_STARS, max_stars=RatingConfig.MAX_STARS)
    return None


def parse_price_pence(raw: str) -> tuple[int | None, ToastMessage | None]:
    """Parse a price like "3.50" or "£3.50" into pence.

    Blank input means no price was given.

    Returns:
        Tuple (pence, None) when valid, (None, InvalidPriceMessage) otherwise.
    """
    text = raw.strip().replace(RatingConfig.CURRENCY_SYMBOL, "").strip()
    if not text:
        return None, None
    try:
        pounds = float(text)
    except ValueError:
        return None, InvalidPriceMessage(raw=raw)
    if not isfinite(pounds) or pounds < 0:
        return None, InvalidPriceMessage(raw=raw)
    # Round half up
    return floor(pounds * RatingConfig.PENCE_PER_POUND + 0.5), None


def validate_new_place(name: str, lat: float | None, lng: float | None) -> ToastMessage | None:
    """Validate the add-place form.

    Returns:
        None if valid, the first problem found otherwise.
    """
    if not name.strip():
        return MissingNameMessage()
    if lat is None or lng is None:
        return MissingCoordinateMessage()
    if not GeoCalculator.is_valid_coordinate(lat=lat, lng=lng):
        return InvalidCoordinateMessage(lat=lat, lng=lng)
    return None


def validate_location_id(location_id: str | None) -> ToastMessage | None:
    """Validate the place id a review page was opened with.

    Returns:
        None if valid, InvalidLocationLinkMessage if missing.
    """
    if location_id is None or location_id.strip() in SelectionConfig.INVALID_IDS:
        return InvalidLocationLinkMessage()
    return None
