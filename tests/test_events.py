from dataclasses import dataclass

from layermap.events import BaseLayerChangedEvent, Event, EventBus


@dataclass(kw_only=True)
class SimpleEvent(Event):
    payload: str = ""


def test_sync_subscribe_publish():
    bus = EventBus()
    received = []

    bus.subscribe(SimpleEvent, lambda event: received.append(event.payload))
    bus.publish(SimpleEvent(payload="hello"))

    assert received == ["hello"]


def test_handlers_only_receive_their_event_type():
    bus = EventBus()
    received = []

    bus.subscribe(BaseLayerChangedEvent, received.append)
    bus.publish(SimpleEvent(payload="ignored"))
    bus.publish(BaseLayerChangedEvent(name="osm"))

    assert [event.name for event in received] == ["osm"]


def test_unsubscribe_and_cancel():
    bus = EventBus()
    count = 0

    def handler(event):
        nonlocal count
        count += 1

    subscription = bus.subscribe(SimpleEvent, handler)
    bus.publish(SimpleEvent())
    bus.unsubscribe(subscription)
    bus.publish(SimpleEvent())
    assert count == 1

    cancelled = bus.subscribe(SimpleEvent, handler)
    cancelled.cancel()
    bus.publish(SimpleEvent())
    assert count == 1


def test_failing_handler_does_not_stop_others(caplog):
    bus = EventBus()
    received = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(SimpleEvent, broken)
    bus.subscribe(SimpleEvent, lambda event: received.append(event.payload))
    bus.publish(SimpleEvent(payload="still delivered"))

    assert received == ["still delivered"]
    assert "boom" in caplog.text
