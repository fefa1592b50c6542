import threading
import pytest
from ffzap.infrastructure.event_bus import EventBus
from ffzap.domain.events import Event, JobStarted, JobSkipped

class MockEvent(Event):
    message: str

def test_event_bus_subscribe_publish():
    bus = EventBus()
    received_events = []

    def callback(event: MockEvent):
        received_events.append(event)

    bus.subscribe(MockEvent, callback)

    event = MockEvent(message="hello")
    bus.publish(event)

    assert len(received_events) == 1
    assert received_events[0].message == "hello"

def test_event_bus_multiple_subscribers():
    bus = EventBus()
    results = {"a": False, "b": False}

    bus.subscribe(MockEvent, lambda e: results.update({"a": True}))
    bus.subscribe(MockEvent, lambda e: results.update({"b": True}))

    bus.publish(MockEvent(message="test"))

    assert results["a"] is True
    assert results["b"] is True

def test_event_bus_decorator_subscribe():
    bus = EventBus()
    received = []

    @bus.subscribe(MockEvent)
    def on_event(event: MockEvent):
        received.append(event)

    bus.publish(MockEvent(message="decorator"))
    assert len(received) == 1
    assert received[0].message == "decorator"

def test_event_bus_dispatches_on_exact_type():
    bus = EventBus()
    started = []
    bus.subscribe(JobStarted, started.append)

    bus.publish(JobSkipped(worker_id=0, path="/a.mov"))
    bus.publish(JobStarted(worker_id=0, path="/b.mov"))

    assert [e.path for e in started] == ["/b.mov"]

def test_event_bus_publish_without_subscribers():
    bus = EventBus()
    bus.publish(MockEvent(message="nobody listens"))

def test_event_bus_concurrent_publish():
    bus = EventBus()
    received = []
    lock = threading.Lock()

    def on_event(event):
        with lock:
            received.append(event.message)

    bus.subscribe(MockEvent, on_event)

    def publish_many(n):
        for i in range(250):
            bus.publish(MockEvent(message=f"{n}-{i}"))

    threads = [threading.Thread(target=publish_many, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(received) == 8 * 250
    assert len(set(received)) == 8 * 250
