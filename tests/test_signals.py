"""Tests for signal fan-out."""

import asyncio
import logging

import pytest

from serializable import Signal, Subscription


class TestSignalSubscribe:
    """Tests for subscribing and unsubscribing."""

    def test_subscribe_returns_subscription(self):
        """Test subscribe hands back an active handle."""
        signal = Signal("test")

        subscription = signal.subscribe(lambda payload: None)

        assert isinstance(subscription, Subscription)
        assert subscription.active
        assert signal.listener_count == 1
        assert signal.has_listeners

    def test_cancel(self):
        """Test cancelled listeners receive nothing."""
        signal = Signal()
        received = []
        subscription = signal.subscribe(received.append)

        subscription.cancel()
        signal.emit("payload")

        assert received == []
        assert not subscription.active
        assert signal.listener_count == 0

    def test_cancel_twice(self):
        """Test cancelling is idempotent."""
        signal = Signal()
        subscription = signal.subscribe(lambda payload: None)

        subscription.cancel()
        subscription.cancel()

        assert signal.listener_count == 0

    def test_unsubscribe_listener(self):
        """Test unsubscribe removes the listener."""
        signal = Signal()
        received = []
        signal.subscribe(received.append)

        assert signal.unsubscribe(received.append) is True
        signal.emit(1)

        assert received == []

    def test_unsubscribe_unknown(self):
        """Test unsubscribing an unknown listener reports False."""
        signal = Signal()

        assert signal.unsubscribe(print) is False

    def test_clear(self):
        """Test clear cancels every subscription."""
        signal = Signal()
        first = signal.subscribe(lambda payload: None)
        second = signal.subscribe(lambda payload: None)

        signal.clear()

        assert signal.listener_count == 0
        assert not first.active
        assert not second.active


class TestSignalDelivery:
    """Tests for delivery semantics."""

    def test_emit_default_payload(self):
        """Test emit without a payload delivers None."""
        signal = Signal()
        received = []
        signal.subscribe(received.append)

        signal.emit()

        assert received == [None]

    def test_subscription_order(self):
        """Test listeners run in the order they subscribed."""
        signal = Signal()
        call_order = []
        signal.subscribe(lambda payload: call_order.append("first"))
        signal.subscribe(lambda payload: call_order.append("second"))
        signal.subscribe(lambda payload: call_order.append("third"))

        signal.emit()

        assert call_order == ["first", "second", "third"]

    def test_listener_added_during_emit(self):
        """Test listeners added mid-delivery only see later deliveries."""
        signal = Signal()
        late = []

        def add_late(payload):
            if not late:
                signal.subscribe(lambda p: late.append(p))

        signal.subscribe(add_late)

        signal.emit("first")
        assert late == []

        signal.emit("second")
        assert late == ["second"]

    def test_listener_cancelled_during_emit(self):
        """Test a listener cancelled mid-delivery is skipped."""
        signal = Signal()
        received = []
        holder = {}

        def cancel_next(payload):
            holder["next"].cancel()

        signal.subscribe(cancel_next)
        holder["next"] = signal.subscribe(received.append)

        signal.emit("payload")

        assert received == []

    def test_failing_listener_isolated(self, caplog):
        """Test one failing listener does not stop the others."""
        signal = Signal("isolated")
        received = []

        def failing(payload):
            raise RuntimeError("listener error")

        signal.subscribe(failing)
        signal.subscribe(received.append)

        with caplog.at_level(logging.ERROR):
            signal.emit("payload")

        assert received == ["payload"]
        assert "failed for isolated" in caplog.text
        assert "listener error" in caplog.text

    def test_on_error_hook(self):
        """Test the error hook receives listener exceptions."""
        errors = []
        signal = Signal(on_error=errors.append)
        received = []

        def failing(payload):
            raise ValueError("bad")

        signal.subscribe(failing)
        signal.subscribe(received.append)
        signal.emit(1)

        assert len(errors) == 1
        assert isinstance(errors[0], ValueError)
        assert received == [1]

    @pytest.mark.asyncio
    async def test_async_listener(self):
        """Test coroutine listeners are scheduled on the running loop."""
        signal = Signal()
        received = []

        async def listener(payload):
            received.append(payload)

        signal.subscribe(listener)
        signal.emit("async")

        assert received == []
        await asyncio.sleep(0)
        assert received == ["async"]

    @pytest.mark.asyncio
    async def test_async_listener_failure_logged(self, caplog):
        """Test failing coroutine listeners are logged."""
        signal = Signal()

        async def listener(payload):
            raise RuntimeError("async boom")

        signal.subscribe(listener)

        with caplog.at_level(logging.ERROR):
            signal.emit()
            await asyncio.sleep(0)
            await asyncio.sleep(0)

        assert "Async listener failed" in caplog.text

    def test_async_listener_without_loop(self, caplog):
        """Test coroutine listeners are discarded when no loop is running."""
        signal = Signal("no-loop")
        received = []

        async def listener(payload):
            received.append(payload)

        signal.subscribe(listener)

        with caplog.at_level(logging.WARNING):
            signal.emit("payload")

        assert received == []
        assert "No running event loop" in caplog.text


class TestSignalRepr:
    """Tests for debugging output."""

    def test_repr(self):
        """Test repr shows the name and listener count."""
        signal = Signal("named")
        signal.subscribe(print)

        assert repr(signal) == "<Signal named listeners=1>"

    def test_describe_defaults_to_class_name(self):
        """Test unnamed broadcasters describe themselves by class."""
        assert Signal().describe() == "Signal"
