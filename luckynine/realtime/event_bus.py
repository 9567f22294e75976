"""
Lucky Nine - Event Bus

Ordered delivery of round events to observers. Events are delivered
synchronously on publish by default; after start() a daemon dispatcher
thread drains a queue instead, so publishers never wait on slow
subscribers.

Delivery order equals publish order in both modes. Inline delivery is
re-entrant safe: events published by a subscriber while it is handling an
event are queued behind everything already published, not delivered
in the middle of it.
"""

from __future__ import annotations

import itertools
import logging
import queue
import threading
from collections import deque
from typing import Callable, Iterable

from luckynine.realtime.events import EventPayload, RoundEvent

logger = logging.getLogger(__name__)

Subscriber = Callable[[EventPayload], None]

DEFAULT_HISTORY_LIMIT = 10_000

_STOP = object()


class EventBus:
    """Fan-out of EventPayloads to subscribed callbacks.

    Subscriber exceptions are logged and swallowed so one broken
    observer cannot affect the game or other observers.

    Args:
        history_limit: Most recent events kept in history (None keeps all)
    """

    def __init__(self, history_limit: int | None = DEFAULT_HISTORY_LIMIT) -> None:
        self._subscribers: dict[int, Subscriber] = {}
        self._history: deque[EventPayload] = deque(maxlen=history_limit)
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()
        self._queue: queue.Queue = queue.Queue()
        self._thread: threading.Thread | None = None
        self._stopping = False
        self._inline = threading.local()

    def subscribe(self, callback: Subscriber) -> int:
        """Register a callback. Returns a token for unsubscribe()."""
        with self._lock:
            token = next(self._tokens)
            self._subscribers[token] = callback
        logger.debug("Subscriber %d added", token)
        return token

    def unsubscribe(self, token: int) -> None:
        with self._lock:
            self._subscribers.pop(token, None)

    def publish(self, payload: EventPayload) -> None:
        """Record an event and deliver it (now, or via the dispatcher)."""
        self.publish_all((payload,))

    def publish_all(self, payloads: Iterable[EventPayload]) -> None:
        """Record a batch of events and deliver them in order."""
        batch = list(payloads)
        with self._lock:
            self._history.extend(batch)
            if self._thread is not None:
                for payload in batch:
                    self._queue.put(payload)
                return

        self._deliver_inline(batch)

    @property
    def history(self) -> list[EventPayload]:
        """Most recent events published, oldest first."""
        with self._lock:
            return list(self._history)

    def events_of(self, kind: RoundEvent) -> list[EventPayload]:
        return [p for p in self.history if p.event is kind]

    # -- Background dispatch ----------------------------------------------

    def start(self) -> None:
        """Start the dispatcher thread. No-op if already running."""
        with self._lock:
            if self._thread is not None:
                return
            self._thread = threading.Thread(
                target=self._dispatch_loop, daemon=True, name="luckynine-events"
            )
            self._thread.start()
        logger.info("Event dispatcher started")

    def flush(self) -> None:
        """Block until every queued event has been delivered."""
        self._queue.join()

    def shutdown(self, timeout: float | None = 5.0) -> None:
        """Deliver what is queued, then stop the dispatcher thread.

        The dispatcher detaches itself only once the queue is empty, so
        events published during shutdown are still delivered in order.
        """
        with self._lock:
            thread = self._thread
            if thread is None:
                return
            if not self._stopping:
                self._stopping = True
                self._queue.put(_STOP)

        thread.join(timeout)
        if thread.is_alive():
            logger.warning("Event dispatcher still draining after %s seconds", timeout)
        else:
            logger.info("Event dispatcher stopped")

    def _dispatch_loop(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    with self._lock:
                        if self._queue.empty():
                            self._thread = None
                            self._stopping = False
                            return
                        # Published after shutdown was requested: drain first.
                        self._queue.put(_STOP)
                    continue
                self._deliver(item)
            finally:
                self._queue.task_done()

    # -- Delivery ---------------------------------------------------------

    def _deliver_inline(self, batch: list[EventPayload]) -> None:
        state = self._inline
        if not hasattr(state, "pending"):
            state.pending = deque()
            state.delivering = False

        state.pending.extend(batch)
        if state.delivering:
            return

        state.delivering = True
        try:
            while state.pending:
                self._deliver(state.pending.popleft())
        finally:
            state.delivering = False
            state.pending.clear()

    def _deliver(self, payload: EventPayload) -> None:
        with self._lock:
            subscribers = list(self._subscribers.items())

        for token, callback in subscribers:
            try:
                callback(payload)
            except Exception:
                logger.exception(
                    "Subscriber %d failed handling %s", token, payload.event.name
                )
