"""Tests for luckynine/realtime/event_bus.py — EventBus delivery."""

import threading
import time

import pytest

from luckynine.realtime.event_bus import EventBus
from luckynine.realtime.events import EventPayload, RoundEvent


def _payload(round_number: int = 1, kind: RoundEvent = RoundEvent.GUESS_MADE) -> EventPayload:
    return EventPayload(event=kind, round_number=round_number)


@pytest.fixture
def bus():
    bus = EventBus()
    yield bus
    bus.shutdown()


class TestSynchronousDelivery:
    def test_delivers_in_order(self, bus):
        got = []
        bus.subscribe(got.append)
        bus.publish_all([_payload(1), _payload(2), _payload(3)])
        assert [p.round_number for p in got] == [1, 2, 3]

    def test_fans_out_to_every_subscriber(self, bus):
        first, second = [], []
        bus.subscribe(first.append)
        bus.subscribe(second.append)
        bus.publish(_payload())
        assert len(first) == len(second) == 1

    def test_unsubscribe(self, bus):
        got = []
        token = bus.subscribe(got.append)
        bus.unsubscribe(token)
        bus.publish(_payload())
        assert got == []

    def test_unsubscribe_unknown_token_is_noop(self, bus):
        bus.unsubscribe(12345)

    def test_failing_subscriber_is_isolated(self, bus, caplog):
        got = []

        def broken(payload):
            raise RuntimeError("observer crashed")

        bus.subscribe(broken)
        bus.subscribe(got.append)
        bus.publish(_payload())

        assert len(got) == 1
        assert "failed handling GUESS_MADE" in caplog.text

    def test_history_is_append_only_copy(self, bus):
        bus.publish(_payload(1))
        history = bus.history
        history.clear()
        assert len(bus.history) == 1

    def test_events_of(self, bus):
        bus.publish(_payload(kind=RoundEvent.GUESS_MADE))
        bus.publish(_payload(kind=RoundEvent.NEW_ROUND_STARTED))
        assert len(bus.events_of(RoundEvent.NEW_ROUND_STARTED)) == 1

    def test_history_without_subscribers(self, bus):
        bus.publish(_payload())
        assert len(bus.history) == 1


class TestBackgroundDispatch:
    def test_delivers_from_dispatcher_thread(self, bus):
        threads = []
        bus.subscribe(lambda p: threads.append(threading.current_thread().name))
        bus.start()

        bus.publish(_payload())
        bus.flush()

        assert threads == ["luckynine-events"]

    def test_publish_does_not_wait_for_subscriber(self, bus):
        release = threading.Event()
        got = []

        def slow(payload):
            release.wait(5)
            got.append(payload)

        bus.subscribe(slow)
        bus.start()
        bus.publish(_payload())

        assert got == []
        release.set()
        bus.flush()
        assert len(got) == 1

    def test_start_is_idempotent(self, bus):
        bus.start()
        bus.start()
        got = []
        bus.subscribe(got.append)
        bus.publish(_payload())
        bus.flush()
        assert len(got) == 1

    def test_shutdown_drains_queue(self, bus):
        got = []
        bus.subscribe(got.append)
        bus.start()
        bus.publish_all([_payload(n) for n in range(10)])
        bus.shutdown()
        assert [p.round_number for p in got] == list(range(10))

    def test_shutdown_then_sync_again(self, bus):
        bus.start()
        bus.shutdown()
        got = []
        bus.subscribe(got.append)
        bus.publish(_payload())
        assert len(got) == 1


class TestReentrantPublish:
    def test_nested_publish_waits_for_outer_batch(self, bus):
        got = []

        def react(payload):
            got.append(payload.round_number)
            if payload.round_number == 1:
                bus.publish(_payload(99))

        bus.subscribe(react)
        bus.publish_all([_payload(1), _payload(2), _payload(3)])

        assert got == [1, 2, 3, 99]
        assert [p.round_number for p in bus.history] == [1, 2, 3, 99]

    def test_every_subscriber_sees_event_before_nested_one(self, bus):
        first, second = [], []

        def react(payload):
            first.append(payload.round_number)
            if payload.round_number == 1:
                bus.publish(_payload(2))

        bus.subscribe(react)
        bus.subscribe(lambda p: second.append(p.round_number))
        bus.publish(_payload(1))

        assert first == [1, 2]
        assert second == [1, 2]

    def test_failing_subscriber_does_not_strand_pending(self, bus):
        got = []

        def react(payload):
            if payload.round_number == 1:
                bus.publish(_payload(2))
                raise RuntimeError("after publishing")

        bus.subscribe(react)
        bus.subscribe(lambda p: got.append(p.round_number))
        bus.publish(_payload(1))
        bus.publish(_payload(3))

        assert got == [1, 2, 3]


class TestHistoryLimit:
    def test_keeps_most_recent(self):
        bus = EventBus(history_limit=3)
        bus.publish_all([_payload(n) for n in range(5)])
        assert [p.round_number for p in bus.history] == [2, 3, 4]

    def test_unbounded(self):
        bus = EventBus(history_limit=None)
        bus.publish_all([_payload(n) for n in range(20)])
        assert len(bus.history) == 20


class TestShutdownOrdering:
    def test_event_published_during_shutdown_is_delivered(self, bus):
        release = threading.Event()
        got = []

        def slow(payload):
            if payload.round_number == 1:
                release.wait(5)
            got.append(payload.round_number)

        bus.subscribe(slow)
        bus.start()
        bus.publish(_payload(1))

        stopper = threading.Thread(target=bus.shutdown)
        stopper.start()
        while not bus._stopping:
            time.sleep(0.01)
        bus.publish(_payload(2))
        release.set()
        stopper.join(5)

        bus.flush()
        assert got == [1, 2]
        assert bus._thread is None

    def test_repeated_shutdown_does_not_block_flush(self, bus):
        bus.start()
        bus.shutdown()
        bus.shutdown()
        bus.flush()

    def test_timed_out_shutdown_keeps_dispatcher_attached(self, bus):
        release = threading.Event()
        bus.subscribe(lambda p: release.wait(5))
        bus.start()
        bus.publish(_payload(1))

        bus.shutdown(timeout=0.05)
        bus.publish(_payload(2))
        assert bus._thread is not None

        release.set()
        bus.shutdown()
        bus.flush()
        assert bus._thread is None
