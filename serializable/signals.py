"""Listener fan-out primitives.

Every notification source in the bridge (module lifecycle signals, domain
events, a bridge's inbound call stream) is a Broadcaster:

- Listeners run in subscription order.
- The listener list is snapshotted when delivery starts, so listeners added
  during a delivery only see later ones.
- A listener cancelled mid-delivery is skipped for the rest of it.
- One failing listener never stops delivery to the next.
- Listeners may be coroutine functions; the coroutine is scheduled on the
  running event loop.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[Any], Any]
ErrorHandler = Callable[[Exception], None]

# Strong references to scheduled listener coroutines until they finish
_pending: set[asyncio.Future[Any]] = set()


def _on_scheduled_done(future: asyncio.Future[Any]) -> None:
    _pending.discard(future)
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.error("Async listener failed: %s", error, exc_info=error)


def schedule_awaitable(result: Awaitable[Any], origin: str) -> asyncio.Future[Any] | None:
    """Schedule an awaitable returned by a listener on the running loop.

    Args:
        result: The awaitable returned by the listener
        origin: Description of the source, used in log messages

    Returns:
        The scheduled future, or None when no loop is running
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.warning("No running event loop for async listener of %s, discarding", origin)
        if inspect.iscoroutine(result):
            result.close()
        return None

    future = asyncio.ensure_future(result, loop=loop)
    _pending.add(future)
    future.add_done_callback(_on_scheduled_done)
    return future


class Subscription:
    """Handle returned by subscribe(). cancel() detaches the listener."""

    __slots__ = ("_source", "listener", "_active")

    def __init__(self, source: Broadcaster[Any], listener: Listener):
        self._source = source
        self.listener = listener
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        """Stop delivering to this listener. Safe to call more than once."""
        if not self._active:
            return
        self._active = False
        self._source._remove(self)

    def __repr__(self) -> str:
        state = "active" if self._active else "cancelled"
        return f"<Subscription {self._source.describe()} {state}>"


class Broadcaster(Generic[T]):
    """Multicast notification source.

    Subclasses decide who may trigger a delivery; subscribing is open to
    anyone.

    Attributes:
        name: Optional label used in log messages
    """

    def __init__(self, name: str | None = None, on_error: ErrorHandler | None = None):
        """Initialize the broadcaster.

        Args:
            name: Optional label used in log messages
            on_error: Called with any exception a listener raises. When not
                given, the failure is logged and delivery continues.
        """
        self.name = name
        self._on_error = on_error
        self._subscriptions: list[Subscription] = []

    def subscribe(self, listener: Callable[[T], Any]) -> Subscription:
        """Register a listener for every future delivery.

        Args:
            listener: Callable receiving the payload

        Returns:
            Subscription handle for cancelling
        """
        subscription = Subscription(self, listener)
        self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, listener: Callable[[T], Any]) -> bool:
        """Cancel the oldest active subscription of the given listener.

        Returns:
            True if a subscription was cancelled
        """
        for subscription in self._subscriptions:
            if subscription.listener == listener:
                subscription.cancel()
                return True
        return False

    def clear(self) -> None:
        """Cancel every subscription."""
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription._active = False

    @property
    def listener_count(self) -> int:
        return len(self._subscriptions)

    @property
    def has_listeners(self) -> bool:
        return bool(self._subscriptions)

    def describe(self) -> str:
        return self.name or type(self).__name__

    def _remove(self, subscription: Subscription) -> None:
        self._subscriptions = [s for s in self._subscriptions if s is not subscription]

    def _deliver(self, payload: T) -> None:
        for subscription in list(self._subscriptions):
            if not subscription.active:
                continue
            try:
                result = subscription.listener(payload)
            except Exception as e:
                self._handle_error(e, subscription.listener)
                continue
            if inspect.isawaitable(result):
                schedule_awaitable(result, self.describe())

    def _handle_error(self, error: Exception, listener: Listener) -> None:
        if self._on_error is not None:
            self._on_error(error)
            return
        logger.exception(
            "Listener %s failed for %s",
            getattr(listener, "__qualname__", repr(listener)),
            self.describe(),
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.describe()} listeners={self.listener_count}>"


class Signal(Broadcaster[T]):
    """Broadcaster that anyone holding a reference may emit on."""

    def emit(self, payload: T | None = None) -> None:
        """Deliver a payload to all current listeners."""
        self._deliver(payload)  # type: ignore[arg-type]
