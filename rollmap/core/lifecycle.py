"""Lifecycle - cancellable subscriptions owned by one view lifetime.

Every asynchronous resource (point fetch, position stream, pin image load,
the map surface itself) is represented by a Subscription with a single
teardown hook. Callbacks are wrapped with Subscription.guard() so a late
callback arriving after cancellation is dropped instead of mutating state.

A LifetimeScope owns the subscriptions of one view and cancels them in
reverse registration order. The map surface is registered first, so fetches
and the position stream are always cancelled before the surface is released.
"""

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class Subscription:
    """Cancellable handle for one resource.

    Example:
        sub = Subscription(name="tracker", teardown=lambda: source.clear_watch(watch_id))
        on_fix = sub.guard(tracker.publish)
        ...
        sub.cancel()  # teardown runs once, on_fix becomes a no-op
    """

    def __init__(self, name: str, teardown: Callable[[], None] | None = None) -> None:
        self.name = name
        self._teardown = teardown
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def set_teardown(self, teardown: Callable[[], None]) -> None:
        """Attach the teardown hook once the underlying handle is known."""
        if self._teardown is not None:
            raise RuntimeError(f"Subscription '{self.name}' already has a teardown hook")
        if not self._active:
            # Handle arrived after cancellation, release it right away
            teardown()
            return
        self._teardown = teardown

    def cancel(self) -> bool:
        """Cancel the subscription. Returns False if it was already cancelled."""
        if not self._active:
            return False
        self._active = False
        logger.debug(f"[LIFECYCLE] Cancelled {self.name}")
        if self._teardown is not None:
            teardown, self._teardown = self._teardown, None
            teardown()
        return True

    def guard(self, callback: Callable[..., Any]) -> Callable[..., None]:
        """Wrap callback so it only runs while this subscription is active."""

        def guarded(*args: Any, **kwargs: Any) -> None:
            if not self._active:
                logger.debug(f"[LIFECYCLE] Dropped late callback for {self.name}")
                return
            callback(*args, **kwargs)

        return guarded

    def __repr__(self) -> str:
        return f"Subscription({self.name}, active={self._active})"


class FetchTask(Subscription):
    """One in-flight point fetch, numbered in start order."""

    def __init__(self, seq: int) -> None:
        super().__init__(name=f"fetch#{seq}")
        self.seq = seq


class LifetimeScope:
    """Owns all subscriptions of one view lifetime.

    Subscriptions are cancelled in reverse registration order on close().
    A closed scope refuses new subscriptions.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._subscriptions: list[Subscription] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def add(self, subscription: Subscription) -> Subscription:
        """Register a subscription for teardown on close()."""
        if self._closed:
            raise RuntimeError(f"Scope '{self.name}' is closed, cannot add {subscription.name}")
        self._subscriptions.append(subscription)
        return subscription

    def discard(self, subscription: Subscription) -> None:
        """Forget a finished subscription without cancelling it."""
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def close(self) -> None:
        """Cancel every registered subscription, newest first."""
        if self._closed:
            return
        self._closed = True
        logger.info(f"[LIFECYCLE] Closing scope {self.name} ({len(self._subscriptions)} subscriptions)")
        for subscription in reversed(self._subscriptions):
            subscription.cancel()
        self._subscriptions.clear()
