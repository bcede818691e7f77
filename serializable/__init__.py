"""
Serializable module bridge core.

This package contains the transport-agnostic bridging engine: the module
registry, lifecycle-to-event translation, outbound event serialization and
inbound API-call dispatch. The host package provides concrete bridges and
process wiring around it.
"""

from .api import ApiHandler, ApiTable, api_method
from .bridge import Bridge
from .bus import SerializableBus, get_shared_bus
from .codec import JsonSerializable, decoder_for, to_plain_data
from .dispatch_key import DispatchKey
from .events import SerializableEvent, SerializableEvents
from .exceptions import (
    AnnotationError,
    AuthorizationError,
    BridgeError,
    ProgrammingError,
    RegistrationError,
)
from .models import InboundCall, OutboundEvent
from .module import LIFECYCLE_EVENTS, BaseSerializableModule, SerializableModule
from .signals import Broadcaster, Signal, Subscription

__all__ = [
    # Exceptions
    "BridgeError",
    "ProgrammingError",
    "RegistrationError",
    "AnnotationError",
    "AuthorizationError",
    # Signals and events
    "Broadcaster",
    "Signal",
    "Subscription",
    "DispatchKey",
    "SerializableEvent",
    "SerializableEvents",
    # Modules
    "SerializableModule",
    "BaseSerializableModule",
    "LIFECYCLE_EVENTS",
    # Plain data
    "JsonSerializable",
    "to_plain_data",
    "decoder_for",
    # API table
    "api_method",
    "ApiHandler",
    "ApiTable",
    # Wire descriptors
    "OutboundEvent",
    "InboundCall",
    # Bridge and bus
    "Bridge",
    "SerializableBus",
    "get_shared_bus",
]
