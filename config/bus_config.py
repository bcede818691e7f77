"""BusConfig model for configuration."""

from pydantic import BaseModel, Field

from .defaults import DEFAULT_LOG_LEVEL


class BusConfig(BaseModel):
    """Serializable bus configuration."""

    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        description="Log level applied by the host wiring",
    )
    log_dropped_calls: bool = Field(
        default=False,
        description="Log inbound api calls that are dropped, with the reason",
    )
    log_skipped_events: bool = Field(
        default=False,
        description="Log outbound events skipped because no bridge is set",
    )
