"""Message - User-facing messages for the roll map UI.

Architecture:
- STATUS (bottom-left overlay): ONE message at a time - error, loading or place count
- LOCATION (top): Position stream problems, dismissable
- TOASTS: Transient feedback for invalid taps and rejected form input

Design Principles:
- Errors never crash the page; every failure ends up as one of these messages
- Messages know their own display level (error/warning/info)
- Caller controls when/how to display the message
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class MessageLevel(Enum):
    """Display level for UI messages."""

    INFO = "info"  # Blue - context/status/loading
    WARNING = "warning"  # Yellow - recoverable problems
    ERROR = "error"  # Red - failed loads


@dataclass(frozen=True)
class Message(ABC):
    """Abstract base class for persistent messages displayed inline.

    These messages are rendered as st.info/st.warning/st.error blocks that persist
    in the UI until replaced.
    """

    @property
    @abstractmethod
    def message(self) -> str:
        """Formatted message for display in Streamlit."""
        raise NotImplementedError

    @property
    @abstractmethod
    def level(self) -> MessageLevel:
        """Display level."""
        raise NotImplementedError

    def display(self) -> None:
        """Render this message using the appropriate Streamlit function."""
        import streamlit as st

        render_fn = {
            MessageLevel.INFO: st.info,
            MessageLevel.WARNING: st.warning,
            MessageLevel.ERROR: st.error,
        }[self.level]
        render_fn(self.message)


@dataclass(frozen=True)
class ToastMessage(ABC):
    """Abstract base class for transient popup notifications.

    Good for: invalid taps, validation failures, quick confirmations
    Bad for: load status, anything the user must still see after a rerun
    """

    @property
    @abstractmethod
    def message(self) -> str:
        """Formatted message for the toast notification."""
        raise NotImplementedError

    @property
    @abstractmethod
    def icon(self) -> str:
        """Icon to show in toast. Override in subclasses."""
        raise NotImplementedError

    def display(self) -> None:
        """Show this message as a toast notification and log it."""
        import streamlit as st

        logger = logging.getLogger(__name__)
        logger.info(f"[TOAST] {self.icon} {self.message}")
        st.toast(self.message, icon=self.icon)


# =============================================================================
# TOAST MESSAGES - Invalid taps and rejected form input
# =============================================================================


@dataclass(frozen=True)
class InvalidPinMessage(ToastMessage):
    """User tapped a pin without a usable id."""

    @property
    def icon(self) -> str:
        return "📍"

    @property
    def message(self) -> str:
        return "This pin has no valid id (cannot open reviews)."


@dataclass(frozen=True)
class InvalidPinLocationMessage(ToastMessage):
    """User tapped a pin whose coordinate is unusable."""

    point_id: str

    @property
    def icon(self) -> str:
        return "📍"

    @property
    def message(self) -> str:
        return f"Pin {self.point_id} has no valid location (cannot open it)."


@dataclass(frozen=True)
class InvalidStarsMessage(ToastMessage):
    """Star rating outside the allowed range."""

    min_stars: int
    max_stars: int

    @property
    def icon(self) -> str:
        return "⭐"

    @property
    def message(self) -> str:
        return f"Stars must be between {self.min_stars} and {self.max_stars}."


@dataclass(frozen=True)
class InvalidPriceMessage(ToastMessage):
    """Price could not be parsed as a non-negative amount."""

    raw: str

    @property
    def icon(self) -> str:
        return "💷"

    @property
    def message(self) -> str:
        return "Price looks invalid. Use a number like 3.50"


@dataclass(frozen=True)
class MissingNameMessage(ToastMessage):
    """New place submitted without a name."""

    @property
    def icon(self) -> str:
        return "✏️"

    @property
    def message(self) -> str:
        return "Please add a name for the place."


@dataclass(frozen=True)
class MissingCoordinateMessage(ToastMessage):
    """New place submitted before choosing a location on the map."""

    @property
    def icon(self) -> str:
        return "🗺️"

    @property
    def message(self) -> str:
        return "Please click the map to drop a pin."


@dataclass(frozen=True)
class InvalidCoordinateMessage(ToastMessage):
    """Chosen coordinate is outside the valid geographic range."""

    lat: float
    lng: float

    @property
    def icon(self) -> str:
        return "🗺️"

    @property
    def message(self) -> str:
        return f"Location ({self.lat}, {self.lng}) is not a valid coordinate."


@dataclass(frozen=True)
class InvalidLocationLinkMessage(ToastMessage):
    """Place page opened without a place id."""

    @property
    def icon(self) -> str:
        return "🔗"

    @property
    def message(self) -> str:
        return "Invalid location link."


@dataclass(frozen=True)
class SaveFailedMessage(ToastMessage):
    """Write to the data source failed."""

    error: str

    @property
    def icon(self) -> str:
        return "⚠️"

    @property
    def message(self) -> str:
        return f"Save Failed — {self.error}"


@dataclass(frozen=True)
class SavedMessage(ToastMessage):
    """Write to the data source succeeded."""

    what: str  # e.g. "Review", "Location"

    @property
    def icon(self) -> str:
        return "✅"

    @property
    def message(self) -> str:
        return f"{self.what} saved."


# =============================================================================
# STATUS OVERLAY - Loading / count / failures
# =============================================================================


@dataclass(frozen=True)
class LoadingPlacesMessage(Message):
    """Shown while the place list is being fetched."""

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.INFO

    @property
    def message(self) -> str:
        return "Loading locations…"


@dataclass(frozen=True)
class PlacesCountMessage(Message):
    """Shown once places are loaded."""

    count: int

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.INFO

    @property
    def message(self) -> str:
        return f"{self.count} locations"


@dataclass(frozen=True)
class FetchFailedMessage(Message):
    """Reading from the data source failed."""

    error: str

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.ERROR

    @property
    def message(self) -> str:
        return f"Error: {self.error}"


@dataclass(frozen=True)
class PinImageFailedMessage(Message):
    """The pin icon could not be loaded, so the place layer was not added."""

    path: str

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.ERROR

    @property
    def message(self) -> str:
        return f"Error: Could not load pin image. Check {self.path}"


# =============================================================================
# LOCATION - Position stream problems (dismissable)
# =============================================================================


@dataclass(frozen=True)
class LocationOffMessage(Message):
    """Position stream failed or is unsupported; last position is kept."""

    reason: str

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.WARNING

    @property
    def message(self) -> str:
        return f"Location off: {self.reason}"
