"""
Ready-made Bridge implementations.

The physical transport is up to the host. These bridges cover the common
wiring cases: discarding events, collecting them in memory for queue-based
consumers, and handing JSON text to a transport callback.
"""

import asyncio
import inspect
import json
import logging
from typing import Any, Callable

from serializable import Bridge, Broadcaster
from serializable.signals import ErrorHandler, schedule_awaitable

from .logging_config import log_timing

logger = logging.getLogger(__name__)


class NullBridge(Bridge):
    """No-op Bridge implementation for testing."""

    def broadcast_serialized_event(self, event: dict[str, Any]) -> None:
        """Discard the event."""
        pass


class MemoryBridge(Bridge):
    """
    Bridge that keeps outbound events in memory.

    Every event is appended to `sent` and put on each subscriber queue, so
    async consumers (a websocket or SSE endpoint, for example) can stream
    them out.
    """

    def __init__(
        self,
        api_calls: Broadcaster[Any] | None = None,
        on_error: ErrorHandler | None = None,
    ) -> None:
        super().__init__(api_calls, on_error)
        self.sent: list[dict[str, Any]] = []
        self.subscribers: list[asyncio.Queue[dict[str, Any]]] = []

    def broadcast_serialized_event(self, event: dict[str, Any]) -> None:
        """Record the event and fan it out to all subscriber queues."""
        self.sent.append(event)
        for queue in self.subscribers:
            queue.put_nowait(event)

    def subscribe(self) -> asyncio.Queue[dict[str, Any]]:
        """
        Create a new subscription queue.

        Returns:
            A queue that will receive all events broadcast from now on
        """
        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self.subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[dict[str, Any]]) -> None:
        """
        Remove a subscription queue.

        Args:
            queue: The queue to unsubscribe
        """
        if queue in self.subscribers:
            self.subscribers.remove(queue)


class CallbackBridge(Bridge):
    """
    Bridge that encodes each event to JSON text and passes it to a callback.

    The callback may be a coroutine function; its coroutine is scheduled on
    the running event loop.
    """

    def __init__(
        self,
        send: Callable[[str], Any],
        api_calls: Broadcaster[Any] | None = None,
        on_error: ErrorHandler | None = None,
        indent: int | None = None,
    ) -> None:
        super().__init__(api_calls, on_error)
        self.send = send
        self.indent = indent

    def broadcast_serialized_event(self, event: dict[str, Any]) -> None:
        text = json.dumps(event, indent=self.indent)
        with log_timing(logger, f"Send {event.get('module')}.{event.get('event')}"):
            result = self.send(text)
        if inspect.isawaitable(result):
            schedule_awaitable(result, "CallbackBridge.send")
