"""
Bridge transport abstraction.

A Bridge is the conduit between the bus and the external host: outbound
events go through broadcast_serialized_event(), inbound API calls arrive on
the api_calls stream. It never interprets payload contents. The host layer
provides concrete implementations.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterable
from typing import Any

from .exceptions import ProgrammingError
from .signals import Broadcaster, ErrorHandler, Signal

logger = logging.getLogger(__name__)


class Bridge(ABC):
    """Abstract transport between the bus and the host.

    Attributes:
        api_calls: Stream of inbound call descriptors. The bus subscribes to
            it when the bridge is assigned.
    """

    def __init__(
        self,
        api_calls: Broadcaster[Any] | None = None,
        on_error: ErrorHandler | None = None,
    ):
        """Initialize the bridge.

        Args:
            api_calls: Existing inbound stream to expose. A new Signal is
                created when omitted.
            on_error: Error hook for the created Signal. Exceptions raised
                by api methods during inbound dispatch end up here; when
                omitted they are logged.
        """
        if api_calls is None:
            api_calls = Signal("api_calls", on_error=on_error)
        self.api_calls = api_calls

    @abstractmethod
    def broadcast_serialized_event(self, event: dict[str, Any]) -> None:
        """Publish one outbound event descriptor to the host."""
        ...

    def handle_serialized_api_call(self, api_call: Any) -> None:
        """Push one inbound call onto the api_calls stream.

        Args:
            api_call: A call descriptor mapping, an InboundCall, or JSON
                text encoding one. Text that is not valid JSON is dropped.

        Raises:
            ProgrammingError: If the inbound stream was supplied externally
                and cannot be emitted on
        """
        if not isinstance(self.api_calls, Signal):
            raise ProgrammingError("Bridge inbound stream is owned by its supplier")

        if isinstance(api_call, (str, bytes, bytearray)):
            try:
                api_call = json.loads(api_call)
            except ValueError as e:
                logger.debug("Dropping undecodable api call: %s", e)
                return

        self.api_calls.emit(api_call)

    async def consume(self, source: AsyncIterable[Any]) -> int:
        """Feed every call from an async source into the inbound stream.

        Args:
            source: Async iterable of raw inbound calls

        Returns:
            Number of calls consumed
        """
        count = 0
        async for api_call in source:
            self.handle_serialized_api_call(api_call)
            count += 1
        logger.debug("Consumed %d api calls", count)
        return count
