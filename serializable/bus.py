"""
SerializableBus: module registry and router.

The bus watches every registered module's lifecycle signals and domain
events, turns each notification into an outbound wire descriptor and hands
it to the current bridge. In the other direction it listens to the bridge's
inbound stream and dispatches each call to the matching module's api.

Calls that cannot be routed (unknown module or method, wrong argument
count, undecodable arguments) are dropped, as are events published while no
bridge is set. Set BusConfig.log_dropped_calls / log_skipped_events to see
them in the debug log.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Callable

from pydantic import ValidationError

from config import BusConfig

from .api import ApiTable
from .bridge import Bridge
from .codec import to_plain_data
from .exceptions import AnnotationError, RegistrationError
from .models import InboundCall, OutboundEvent
from .module import LIFECYCLE_EVENTS, SerializableModule
from .signals import Subscription, schedule_awaitable

logger = logging.getLogger(__name__)


class SerializableBus:
    """Registry of serializable modules and router to a single bridge.

    Attributes:
        config: Bus configuration
    """

    def __init__(self, config: BusConfig | None = None):
        self.config = config or BusConfig()
        self._modules: dict[str, SerializableModule] = {}
        self._api_tables: dict[str, ApiTable] = {}
        self._subscriptions: dict[str, list[Subscription]] = {}
        self._bridge: Bridge | None = None
        self._bridge_subscription: Subscription | None = None

    @classmethod
    def shared_bus(cls) -> SerializableBus:
        """Return the process-wide bus instance."""
        return get_shared_bus()

    @property
    def registered_modules(self) -> Mapping[str, SerializableModule]:
        """Read-only view of serializable_key -> module."""
        return MappingProxyType(self._modules)

    @property
    def bridge(self) -> Bridge | None:
        return self._bridge

    @bridge.setter
    def bridge(self, bridge: Bridge | None) -> None:
        # Assigning None keeps the current bridge
        if bridge is None:
            logger.debug("Ignoring request to unset the bridge")
            return
        self._detach_bridge()
        self._bridge = bridge
        self._bridge_subscription = bridge.api_calls.subscribe(self._on_api_call)
        logger.debug("Bridge set to %s", type(bridge).__name__)

    # =========================================================================
    # Registration
    # =========================================================================

    def register_module(self, module: SerializableModule) -> None:
        """Register a module and start forwarding its events.

        Args:
            module: The module to register

        Raises:
            RegistrationError: If the module has no key, its key is already
                registered, two of its events share a key, or an api
                parameter annotation cannot be resolved
        """
        key = module.serializable_key
        if key is None:
            raise RegistrationError(None, "module has no serializable key")
        if key in self._modules:
            raise RegistrationError(key, "key is already registered")

        events = module.events.all_events if module.events is not None else []
        seen: set[str] = set()
        for event in events:
            if event.event_key in seen:
                raise RegistrationError(key, f"duplicate event key {event.event_key!r}")
            seen.add(event.event_key)

        try:
            api_table = ApiTable.from_object(module.api) if module.api is not None else None
        except AnnotationError as e:
            raise RegistrationError(key, str(e)) from e
        signals = [(wire_name, getattr(module, attribute)) for wire_name, attribute in LIFECYCLE_EVENTS.items()]

        self._modules[key] = module
        if api_table is not None:
            self._api_tables[key] = api_table

        subscriptions: list[Subscription] = []
        for wire_name, signal in signals:
            subscriptions.append(signal.subscribe(self._forwarder(key, wire_name, lifecycle=True)))
        for event in events:
            subscriptions.append(event.subscribe(self._forwarder(key, event.event_key)))
        self._subscriptions[key] = subscriptions

        logger.debug("Registered module %s with %d events", key, len(events))

    def reset(self) -> None:
        """Unregister every module and drop the bridge."""
        for subscriptions in self._subscriptions.values():
            for subscription in subscriptions:
                subscription.cancel()
        self._subscriptions.clear()
        self._api_tables.clear()
        self._modules.clear()
        self._detach_bridge()
        self._bridge = None
        logger.debug("Bus reset")

    # =========================================================================
    # Outbound
    # =========================================================================

    def _forwarder(self, module_key: str, event_key: str, lifecycle: bool = False) -> Callable[[Any], None]:
        def forward(payload: Any) -> None:
            self._publish(module_key, event_key, None if lifecycle else payload)

        return forward

    def _publish(self, module_key: str, event_key: str, data: Any) -> None:
        bridge = self._bridge
        if bridge is None:
            if self.config.log_skipped_events:
                logger.debug("No bridge set, skipping %s.%s", module_key, event_key)
            return
        event = OutboundEvent(module=module_key, event=event_key, data=to_plain_data(data))
        bridge.broadcast_serialized_event(event.model_dump())

    # =========================================================================
    # Inbound
    # =========================================================================

    def dispatch(self, api_call: Any) -> bool:
        """Route one inbound call to its module's api.

        Exceptions raised by the api method itself propagate.

        Args:
            api_call: InboundCall or mapping with module, method and data

        Returns:
            True if the method was invoked (or its coroutine scheduled),
            False if the call was dropped
        """
        call = _coerce_call(api_call)
        if call is None:
            return self._drop(api_call, "malformed call")

        if call.module not in self._modules:
            return self._drop(call, "unknown module")

        table = self._api_tables.get(call.module)
        if table is None:
            return self._drop(call, "module has no api")

        handler = table.get(call.method)
        if handler is None:
            return self._drop(call, "unknown method")

        if not handler.accepts(call.data):
            return self._drop(call, f"expected {handler.arity} arguments, got {len(call.data)}")

        try:
            args = handler.decode(call.data)
        except Exception as e:
            return self._drop(call, f"undecodable arguments: {e}")

        result = handler.func(*args)
        if inspect.isawaitable(result):
            if schedule_awaitable(result, f"{call.module}.{call.method}") is None:
                return self._drop(call, "no running event loop for coroutine method")
        return True

    def _on_api_call(self, api_call: Any) -> None:
        self.dispatch(api_call)

    def _drop(self, api_call: Any, reason: str) -> bool:
        if self.config.log_dropped_calls:
            logger.debug("Dropped api call %r: %s", api_call, reason)
        return False

    def _detach_bridge(self) -> None:
        if self._bridge_subscription is not None:
            self._bridge_subscription.cancel()
            self._bridge_subscription = None


def _coerce_call(api_call: Any) -> InboundCall | None:
    if isinstance(api_call, InboundCall):
        return api_call
    if not isinstance(api_call, Mapping):
        return None
    try:
        return InboundCall.model_validate(dict(api_call))
    except ValidationError:
        return None


# Process-wide bus instance
_shared_bus: SerializableBus | None = None


def get_shared_bus() -> SerializableBus:
    """Get the process-wide bus instance, creating it if necessary."""
    global _shared_bus
    if _shared_bus is None:
        _shared_bus = SerializableBus()
    return _shared_bus
