"""
Shared pytest fixtures for all tests.
"""
from typing import Iterator

import pytest

from host import MemoryBridge
from serializable import DispatchKey, SerializableBus, Signal


@pytest.fixture
def dispatch_key() -> DispatchKey:
    """Dispatch key shared by the test events."""
    return DispatchKey("serializable")


@pytest.fixture
def bus() -> Iterator[SerializableBus]:
    """Fresh bus, reset after the test."""
    bus = SerializableBus()
    yield bus
    bus.reset()


@pytest.fixture
def inbound() -> Signal:
    """Inbound api call stream the test emits on directly."""
    return Signal("inbound")


@pytest.fixture
def bridge(inbound: Signal) -> MemoryBridge:
    """In-memory bridge reading api calls from the inbound fixture."""
    return MemoryBridge(inbound)


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Make sure no LOG_LEVEL from the environment leaks into a test."""
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    return monkeypatch
