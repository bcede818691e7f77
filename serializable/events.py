"""
Serializable domain events.

A module declares its outward-facing events as SerializableEvent instances
grouped on a SerializableEvents object. Anyone may listen to an event, but
only the holder of the event's DispatchKey may fire it.
"""

from __future__ import annotations

import inspect
from typing import Any, TypeVar

from .dispatch_key import DispatchKey
from .exceptions import AuthorizationError
from .signals import Broadcaster, ErrorHandler

T = TypeVar("T")


class SerializableEvent(Broadcaster[T]):
    """A named broadcast event gated by a dispatch key.

    Example:
        key = DispatchKey("todo")
        item_added = SerializableEvent("itemAdded", key)
        item_added.subscribe(print)
        item_added({"name": "milk"}, key)
    """

    def __init__(self, event_key: str, dispatch_key: DispatchKey, on_error: ErrorHandler | None = None):
        super().__init__(name=event_key, on_error=on_error)
        self._event_key = event_key
        self._dispatch_key = dispatch_key

    @property
    def event_key(self) -> str:
        return self._event_key

    def fire(self, payload: T | None, dispatch_key: DispatchKey) -> None:
        """Notify all listeners with the payload.

        Args:
            payload: Value delivered to every listener
            dispatch_key: Must be the key this event was created with

        Raises:
            AuthorizationError: If the key does not match. No listener is
                notified in that case.
        """
        if dispatch_key is not self._dispatch_key:
            raise AuthorizationError(self._event_key)
        self._deliver(payload)  # type: ignore[arg-type]

    def __call__(self, payload: T | None, dispatch_key: DispatchKey) -> None:
        self.fire(payload, dispatch_key)


class SerializableEvents:
    """Collection of a module's serializable events.

    By default every SerializableEvent declared as a class attribute (base
    classes first) or assigned as an instance attribute is part of the
    collection, in declaration order. Override all_events to choose the
    list explicitly.
    """

    @property
    def all_events(self) -> list[SerializableEvent[Any]]:
        names: dict[str, None] = {}
        for klass in reversed(type(self).__mro__):
            names.update(dict.fromkeys(vars(klass)))
        names.update(dict.fromkeys(vars(self)))

        events: list[SerializableEvent[Any]] = []
        for name in names:
            # Read without evaluating properties
            value = inspect.getattr_static(self, name, None)
            if isinstance(value, SerializableEvent) and not any(value is e for e in events):
                events.append(value)
        return events
