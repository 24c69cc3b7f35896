"""Live position tracker - one continuous position stream per view.

Wraps a platform position source into a single current position plus an
error reason:
- A fix clears any previous error and replaces the position
- A failure sets the error and keeps the last known position
- stop() cancels the stream exactly once; late callbacks are ignored

Position sources implement the PositionSource protocol. ManualPositionSource
is the in-process implementation used by the Streamlit shell (coordinates
entered in the sidebar) and by tests.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from rollmap.constants import TrackerConfig
from rollmap.core.lifecycle import LifetimeScope, Subscription
from rollmap.model.geo_point import Coordinate

logger = logging.getLogger(__name__)

FixCallback = Callable[[Coordinate], None]
ErrorCallback = Callable[[str], None]


@dataclass(frozen=True)
class WatchOptions:
    """Options passed to the position source when the stream starts."""

    high_accuracy: bool = TrackerConfig.HIGH_ACCURACY
    max_age_ms: int = TrackerConfig.MAX_AGE_MS
    timeout_ms: int = TrackerConfig.TIMEOUT_MS


class PositionSource(Protocol):
    """Platform capability delivering position fixes until cleared."""

    @property
    def supported(self) -> bool: ...

    def watch(self, on_fix: FixCallback, on_error: ErrorCallback, options: WatchOptions) -> int: ...

    def clear_watch(self, watch_id: int) -> None: ...


class ManualPositionSource:
    """Position source fed by explicit push calls.

    Example:
        source = ManualPositionSource()
        watch_id = source.watch(on_fix=print, on_error=print, options=WatchOptions())
        source.push_fix(lat=56.22, lng=-2.70)
    """

    def __init__(self, supported: bool = True) -> None:
        self._supported = supported
        self._watchers: dict[int, tuple[FixCallback, ErrorCallback]] = {}
        self._next_id = 1
        self.cleared_ids: list[int] = []
        self.last_options: WatchOptions | None = None

    @property
    def supported(self) -> bool:
        return self._supported

    @property
    def watcher_count(self) -> int:
        return len(self._watchers)

    def watch(self, on_fix: FixCallback, on_error: ErrorCallback, options: WatchOptions) -> int:
        watch_id = self._next_id
        self._next_id += 1
        self._watchers[watch_id] = (on_fix, on_error)
        self.last_options = options
        return watch_id

    def clear_watch(self, watch_id: int) -> None:
        self._watchers.pop(watch_id, None)
        self.cleared_ids.append(watch_id)

    def push_fix(self, lat: float, lng: float) -> None:
        """Deliver a fix to every active watcher."""
        fix = Coordinate(lat=lat, lng=lng)
        for on_fix, _ in list(self._watchers.values()):
            on_fix(fix)

    def push_error(self, reason: str) -> None:
        """Deliver a failure to every active watcher."""
        for _, on_error in list(self._watchers.values()):
            on_error(reason)


class LivePositionTracker:
    """Holds the current live position and error reason for one view.

    Attributes:
        position: Last known position, None until the first fix
        error: Human-readable reason of the last failure, None after a fix
    """

    def __init__(
        self,
        source: PositionSource | None,
        options: WatchOptions | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.source = source
        self.options = options or WatchOptions()
        self.on_change = on_change
        self.position: Coordinate | None = None
        self.error: str | None = None
        self._subscription: Subscription | None = None

    @property
    def is_tracking(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def start(self, scope: LifetimeScope | None = None) -> Subscription:
        """Start the position stream.

        Only one stream is allowed per tracker. When the source is missing or
        unsupported the error is published and no stream is opened.

        Raises:
            RuntimeError: If start() was already called.
        """
        if self._subscription is not None:
            raise RuntimeError("Position tracker already started for this view")

        subscription = Subscription(name="position-stream")
        self._subscription = subscription
        if scope is not None:
            scope.add(subscription)

        if self.source is None or not self.source.supported:
            logger.warning(f"[TRACKER] {TrackerConfig.UNSUPPORTED_REASON}")
            self._publish_error(TrackerConfig.UNSUPPORTED_REASON)
            return subscription

        watch_id = self.source.watch(
            on_fix=subscription.guard(self._publish_fix),
            on_error=subscription.guard(self._publish_error),
            options=self.options,
        )
        source = self.source
        subscription.set_teardown(lambda: source.clear_watch(watch_id))
        logger.info(f"[TRACKER] Watching position (watch_id={watch_id}, options={self.options})")
        return subscription

    def stop(self) -> None:
        """Cancel the position stream. Safe to call more than once."""
        if self._subscription is not None and self._subscription.cancel():
            logger.info("[TRACKER] Position stream cancelled")

    def dismiss_error(self) -> None:
        """Hide the current error without touching the position."""
        if self.error is not None:
            self.error = None
            self._notify()

    def _publish_fix(self, fix: Coordinate) -> None:
        self.error = None
        self.position = fix
        logger.debug(f"[TRACKER] Fix ({fix.lat:.6f}, {fix.lng:.6f})")
        self._notify()

    def _publish_error(self, reason: str) -> None:
        self.error = reason or TrackerConfig.FALLBACK_REASON
        logger.info(f"[TRACKER] Position unavailable: {self.error}")
        self._notify()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()
