"""
Test EventBus
=============
Priorytety, izolacja handlerów, odsubskrybowanie.
"""

from core.events import EventBus, EventType, create_event


def test_handlers_run_by_priority():
    bus = EventBus()
    calls = []
    bus.subscribe(EventType.RECORD_CREATED, lambda e: calls.append("low"), priority=0)
    bus.subscribe(EventType.RECORD_CREATED, lambda e: calls.append("high"), priority=10)

    bus.publish(create_event(EventType.RECORD_CREATED, {}))

    assert calls == ["high", "low"]


def test_failing_handler_does_not_block_others():
    bus = EventBus()
    calls = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(EventType.API_ERROR, broken, priority=1)
    bus.subscribe(EventType.API_ERROR, lambda e: calls.append(e.data["status"]))

    bus.publish(create_event(EventType.API_ERROR, {"status": 500}))

    assert calls == [500]


def test_unsubscribe_and_clear():
    bus = EventBus()
    calls = []

    def handler(event):
        calls.append(event.type)

    bus.subscribe(EventType.RECORD_DELETED, handler)
    assert bus.unsubscribe(EventType.RECORD_DELETED, handler) is True
    assert bus.unsubscribe(EventType.RECORD_DELETED, handler) is False

    bus.subscribe_all(handler)
    bus.clear()
    bus.publish(create_event(EventType.RECORD_DELETED, {}))

    assert calls == []
