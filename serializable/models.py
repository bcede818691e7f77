"""
Wire descriptors exchanged with the bridge.

Both directions are plain JSON-compatible structures:
- Outbound: {"module": str, "event": str, "data": JSON or null}
- Inbound:  {"module": str, "method": str, "data": [JSON, ...]}
"""

from typing import Any

from pydantic import BaseModel, Field


class OutboundEvent(BaseModel):
    """Event published by a registered module."""

    module: str
    event: str
    data: Any = None


class InboundCall(BaseModel):
    """API call requested by the host."""

    module: str
    method: str
    data: list[Any] = Field(default_factory=list)
