"""Selection state machine - which place's detail panel is open.

Uses python-statemachine with the model pattern, like the rest of the UI
state handling:
- Clear state definitions
- Guarded transitions (same place re-tap is not a transition)
- Entry hooks produce map commands instead of touching the map directly

States (2 states):
    NO_SELECTION: Initial, no panel visible
    PLACE_OPEN: Detail panel visible for context.selection.point

Transitions:
    NO_SELECTION -> PLACE_OPEN: select_place (tap on a pin with a usable id)
    PLACE_OPEN -> PLACE_OPEN: select_place (tap on a different pin, replaces selection)
    PLACE_OPEN -> NO_SELECTION: close_panel (close button or navigating away)

Side effects are collected as MapCommand objects in SelectionModel.commands.
SelectionController drains them after every transition and returns them to
the caller, so the transition rules can be tested without any map.

Entering PLACE_OPEN:
    PanTo(point, offset (0, -120) px, 450 ms) + SetPadding(bottom = half the viewport)
Closing:
    SetPadding(zero)

The map surface only reports taps; it never writes the selection.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from rollmap.constants import MapConfig, SelectionConfig
from rollmap.model.click_info import PinTap
from rollmap.model.geo_point import Coordinate, GeoPoint
from rollmap.model.map_command import MapCommand, Padding, PanTo, SetPadding
from rollmap.model.message import InvalidPinLocationMessage, InvalidPinMessage, ToastMessage

logger = logging.getLogger(__name__)


@dataclass
class SelectionContext:
    """The open place and the coordinate it was opened at."""

    point: GeoPoint | None = None
    coordinate: Coordinate | None = None

    def set(self, point: GeoPoint) -> None:
        self.point = point
        self.coordinate = point.coordinate

    def clear(self) -> None:
        self.point = None
        self.coordinate = None

    @property
    def point_id(self) -> str | None:
        return self.point.id if self.point is not None else None


@dataclass
class SelectionModel:
    """Shared model for SelectionStateMachine.

    Note: The 'state' field is managed by python-statemachine when this
    object is passed as the model.
    """

    state: str | None = None
    selection: SelectionContext = field(default_factory=SelectionContext)
    viewport_height_px: int = MapConfig.DEFAULT_HEIGHT_PX
    commands: list[MapCommand] = field(default_factory=list)
    error: ToastMessage | None = None

    def drain_commands(self) -> list[MapCommand]:
        """Return and clear the pending commands."""
        commands, self.commands = self.commands, []
        return commands


class SelectionLogListener:
    """Listener that logs every selection transition."""

    def after_transition(self, event: str, source: State, target: State) -> None:
        logger.info(f"[SELECTION] {source.name} --({event})--> {target.name}")


class SelectionStateMachine(StateMachine):
    """State machine for the place detail panel. See module docstring."""

    no_selection = State("NoSelection", initial=True)
    place_open = State("PlaceOpen")

    select_place = no_selection.to(place_open) | place_open.to(place_open, unless="is_same_place")
    close_panel = place_open.to(no_selection)

    def __init__(self, context: SelectionModel | None = None) -> None:
        super().__init__(model=context or SelectionModel())

    @property
    def context(self) -> SelectionModel:
        """Alias for model."""
        return self.model

    # ==========================================================================
    # Guards
    # ==========================================================================

    def is_same_place(self, point: GeoPoint) -> bool:
        """Guard: tapped place is the one already open."""
        return self.context.selection.point_id == point.id

    # ==========================================================================
    # State Check Properties
    # ==========================================================================

    @property
    def is_open(self) -> bool:
        return self.place_open.is_active

    # ==========================================================================
    # Transition Actions
    # ==========================================================================

    def before_select_place(self, point: GeoPoint) -> None:
        self.context.selection.set(point=point)
        self.context.error = None

    def on_enter_place_open(self) -> None:
        """Hook: nudge the camera above the panel and reserve its space."""
        point = self.context.selection.point
        if point is None:
            raise ValueError("Entered PlaceOpen without a selected place")
        panel_px = round(self.context.viewport_height_px * SelectionConfig.PANEL_HEIGHT_FRACTION)
        self.context.commands.append(
            PanTo(
                center=point.coordinate,
                offset_px=(SelectionConfig.PAN_OFFSET_X_PX, SelectionConfig.PAN_OFFSET_Y_PX),
                duration_ms=SelectionConfig.PAN_DURATION_MS,
            )
        )
        self.context.commands.append(SetPadding(padding=Padding(bottom=panel_px)))

    def on_close_panel(self) -> None:
        self.context.selection.clear()
        self.context.commands.append(SetPadding(padding=Padding.zero()))

    def get_state_name(self) -> str:
        return self.current_state.name

    def __repr__(self) -> str:
        return f"SelectionStateMachine(state={self.get_state_name()}, open={self.context.selection.point_id})"


class SelectionController:
    """Owns the selection and turns taps/close actions into map commands.

    Example:
        controller = SelectionController()
        commands = controller.handle_tap(tap)
        for command in commands:
            command.apply(surface)
    """

    def __init__(self, viewport_height_px: int = MapConfig.DEFAULT_HEIGHT_PX) -> None:
        self.context = SelectionModel(viewport_height_px=viewport_height_px)
        self.machine = SelectionStateMachine(context=self.context)
        self.machine.add_listener(SelectionLogListener())

    @property
    def is_open(self) -> bool:
        return self.machine.is_open

    @property
    def selected(self) -> GeoPoint | None:
        return self.context.selection.point

    @property
    def error(self) -> ToastMessage | None:
        return self.context.error

    def set_viewport_height(self, height_px: int) -> None:
        """Panel padding is computed from this height on the next open."""
        self.context.viewport_height_px = height_px

    def handle_tap(self, tap: PinTap) -> list[MapCommand]:
        """Open the tapped place.

        A tap without a usable id or coordinate sets the error and returns
        no commands.
        A tap on the place that is already open is a no-op.
        """
        point_id = tap.point_id
        if point_id is None:
            self.context.error = InvalidPinMessage()
            logger.warning(f"[SELECTION] Rejected tap on pin with id {tap.raw_id!r}")
            return []

        point = tap.to_point()
        if point is None:
            self.context.error = InvalidPinLocationMessage(point_id=point_id)
            logger.warning(f"[SELECTION] Rejected tap on pin {point_id} at ({tap.lat}, {tap.lng})")
            return []

        if self.is_open and self.machine.is_same_place(point=point):
            logger.debug(f"[SELECTION] {point.id} already open")
            return []

        return self._send("select_place", point=point)

    def close(self) -> list[MapCommand]:
        """Close the panel (also used when navigating away). No-op when closed."""
        if not self.is_open:
            return []
        return self._send("close_panel")

    def dismiss_error(self) -> None:
        self.context.error = None

    def _send(self, event: str, **kwargs: object) -> list[MapCommand]:
        try:
            self.machine.send(event, **kwargs)
        except TransitionNotAllowed:
            logger.warning(f"[SELECTION] Transition '{event}' not allowed from {self.machine.get_state_name()}")
            self.context.commands.clear()
            return []
        return self.context.drain_commands()
