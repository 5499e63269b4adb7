"""Tests for the EventBus and EventHandler."""

from mpv_ipc.event_bus import EventBus, EventHandler, subscribe


class _Recorder(EventHandler):
    def __init__(self, event_bus: EventBus):
        self.calls = []
        super().__init__(event_bus)

    @subscribe
    def started(self, data=None):
        self.calls.append(("started", data))

    @subscribe
    def status(self, data: dict):
        self.calls.append(("status", data))

    def not_subscribed(self, data=None):
        self.calls.append(("not_subscribed", data))


def test_handler_methods_subscribe_by_name() -> None:
    bus = EventBus()
    recorder = _Recorder(bus)

    bus.publish("started")
    bus.publish("status", {"property": "volume", "value": 10})
    bus.publish("not_subscribed")

    assert recorder.calls == [
        ("started", None),
        ("status", {"property": "volume", "value": 10}),
    ]


def test_unsubscribe_callable() -> None:
    bus = EventBus()
    calls = []
    unsubscribe = bus.subscribe("crashed", calls.append)

    bus.publish("crashed", 1)
    unsubscribe()
    bus.publish("crashed", 2)

    assert calls == [1]


def test_listener_errors_are_contained() -> None:
    bus = EventBus()
    calls = []

    def broken(data):
        raise ValueError("boom")

    bus.subscribe("quit", broken)
    bus.subscribe("quit", calls.append)
    bus.publish("quit", "bye")

    assert calls == ["bye"]
