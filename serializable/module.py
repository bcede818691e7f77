"""
SerializableModule capability.

A module takes part in the bridge by exposing an identity key, an optional
events collection, an optional api object and four lifecycle signals. The
lifecycle state machine itself lives outside the bridge; the bus only
listens to the signals.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from .events import SerializableEvents
from .signals import Broadcaster, Signal

# Wire event name -> module attribute, in transition order
LIFECYCLE_EVENTS: dict[str, str] = {
    "willLoad": "will_load",
    "didLoad": "did_load",
    "willUnload": "will_unload",
    "didUnload": "did_unload",
}


@runtime_checkable
class SerializableModule(Protocol):
    """Structural interface the bus requires of a registered module."""

    serializable_key: str | None
    events: SerializableEvents | None
    api: Any
    will_load: Broadcaster[Any]
    did_load: Broadcaster[Any]
    will_unload: Broadcaster[Any]
    did_unload: Broadcaster[Any]


class BaseSerializableModule:
    """Default SerializableModule implementation.

    serializable_key, events and api are None until a subclass provides
    them. A module without a key cannot be registered.
    """

    serializable_key: str | None = None
    events: SerializableEvents | None = None
    api: Any = None

    def __init__(self) -> None:
        self.will_load: Signal[Any] = Signal("willLoad")
        self.did_load: Signal[Any] = Signal("didLoad")
        self.will_unload: Signal[Any] = Signal("willUnload")
        self.did_unload: Signal[Any] = Signal("didUnload")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} key={self.serializable_key!r}>"
