"""Tests for serializable events and dispatch keys."""

import pytest

from serializable import AuthorizationError, DispatchKey, SerializableEvent, SerializableEvents


class TodoEvents(SerializableEvents):
    def __init__(self, dispatch_key: DispatchKey):
        self.item_added = SerializableEvent("itemAdded", dispatch_key)
        self.item_removed = SerializableEvent("itemRemoved", dispatch_key)
        self.label = "not an event"


class ExplicitEvents(SerializableEvents):
    def __init__(self, dispatch_key: DispatchKey):
        self.first = SerializableEvent("first", dispatch_key)
        self.second = SerializableEvent("second", dispatch_key)

    @property
    def all_events(self):
        return [self.second]


CLASS_KEY = DispatchKey("class-level")


class ClassLevelEvents(SerializableEvents):
    item_added = SerializableEvent("itemAdded", CLASS_KEY)
    item_removed = SerializableEvent("itemRemoved", CLASS_KEY)


class ExtendedEvents(ClassLevelEvents):
    item_renamed = SerializableEvent("itemRenamed", CLASS_KEY)

    def __init__(self):
        self.item_moved = SerializableEvent("itemMoved", CLASS_KEY)
        self.alias = self.item_added


class TestDispatchKey:
    """Tests for DispatchKey."""

    def test_identity_comparison(self):
        """Test keys with the same name are still different keys."""
        assert DispatchKey("same") != DispatchKey("same")

    def test_equal_to_itself(self):
        """Test a key equals itself."""
        key = DispatchKey("owner")
        assert key == key

    def test_repr(self):
        """Test repr includes the name."""
        assert repr(DispatchKey("owner")) == "DispatchKey('owner')"


class TestSerializableEvent:
    """Tests for SerializableEvent."""

    def test_event_key(self, dispatch_key: DispatchKey):
        """Test the event exposes its key."""
        event = SerializableEvent("eventKey", dispatch_key)

        assert event.event_key == "eventKey"

    def test_event_key_read_only(self, dispatch_key: DispatchKey):
        """Test the event key cannot be reassigned."""
        event = SerializableEvent("eventKey", dispatch_key)

        with pytest.raises(AttributeError):
            event.event_key = "other"

    def test_fire_notifies_listeners(self, dispatch_key: DispatchKey):
        """Test firing with the right key reaches every listener."""
        event = SerializableEvent("eventKey", dispatch_key)
        first, second = [], []
        event.subscribe(first.append)
        event.subscribe(second.append)

        event.fire({"id": 1}, dispatch_key)

        assert first == [{"id": 1}]
        assert second == [{"id": 1}]

    def test_call_fires(self, dispatch_key: DispatchKey):
        """Test calling the event is the same as fire."""
        event = SerializableEvent("eventKey", dispatch_key)
        received = []
        event.subscribe(received.append)

        event(None, dispatch_key)

        assert received == [None]

    def test_wrong_key_rejected(self, dispatch_key: DispatchKey):
        """Test firing with another key raises and notifies nobody."""
        event = SerializableEvent("eventKey", dispatch_key)
        received = []
        event.subscribe(received.append)

        with pytest.raises(AuthorizationError) as exc_info:
            event.fire("payload", DispatchKey("serializable"))

        assert exc_info.value.event_key == "eventKey"
        assert received == []

    def test_missing_key_rejected(self, dispatch_key: DispatchKey):
        """Test firing without a key raises."""
        event = SerializableEvent("eventKey", dispatch_key)

        with pytest.raises(AuthorizationError):
            event("payload", None)

    def test_anyone_can_unsubscribe(self, dispatch_key: DispatchKey):
        """Test listeners detach without the dispatch key."""
        event = SerializableEvent("eventKey", dispatch_key)
        received = []
        subscription = event.subscribe(received.append)

        subscription.cancel()
        event.fire("payload", dispatch_key)

        assert received == []


class TestSerializableEvents:
    """Tests for SerializableEvents."""

    def test_all_events(self, dispatch_key: DispatchKey):
        """Test all declared events are listed in assignment order."""
        events = TodoEvents(dispatch_key)

        assert events.all_events == [events.item_added, events.item_removed]

    def test_all_events_override(self, dispatch_key: DispatchKey):
        """Test subclasses can choose the list explicitly."""
        events = ExplicitEvents(dispatch_key)

        assert events.all_events == [events.second]

    def test_empty(self):
        """Test a collection without events is empty."""
        assert SerializableEvents().all_events == []

    def test_class_level_events(self):
        """Test events declared on the class are listed."""
        events = ClassLevelEvents()

        assert events.all_events == [ClassLevelEvents.item_added, ClassLevelEvents.item_removed]

    def test_inherited_and_instance_events(self):
        """Test base class events come first and duplicates are listed once."""
        events = ExtendedEvents()

        assert [e.event_key for e in events.all_events] == [
            "itemAdded",
            "itemRemoved",
            "itemRenamed",
            "itemMoved",
        ]
