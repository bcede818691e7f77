"""
Host-side wiring for the serializable bridge.

This package provides concrete bridges and process setup around the
transport-agnostic core in the serializable package.
"""

from .bridges import CallbackBridge, MemoryBridge, NullBridge
from .logging_config import log_timing, setup_logging
from .wiring import create_bus

__all__ = [
    "NullBridge",
    "MemoryBridge",
    "CallbackBridge",
    "setup_logging",
    "log_timing",
    "create_bus",
]
