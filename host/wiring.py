"""
Process wiring for the serializable bus.

Call create_bus() once at startup and pass the returned bus to the
collaborators that register modules.
"""

import logging

from config import BusConfig, get_config
from serializable import Bridge, SerializableBus, get_shared_bus

from .logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_bus(
    config: BusConfig | None = None,
    bridge: Bridge | None = None,
    shared: bool = True,
) -> SerializableBus:
    """Configure logging and return a ready bus.

    Args:
        config: Bus configuration. Loaded from config files when omitted.
        bridge: Bridge to assign, if any
        shared: Use the process-wide bus instead of a new one

    Returns:
        The configured bus
    """
    if config is None:
        config = get_config()
    setup_logging(config.log_level)

    if shared:
        bus = get_shared_bus()
        bus.config = config
    else:
        bus = SerializableBus(config)

    if bridge is not None:
        bus.bridge = bridge

    logger.info("Serializable bus ready (bridge: %s)", type(bridge).__name__ if bridge else "none")
    return bus
