"""
Lucky Nine - Test Configuration and Fixtures

Common fixtures and test doubles for all test modules.
"""

from collections import deque
from typing import Iterable

import pytest

from luckynine.engine.base import RoundRules, SeedContext
from luckynine.engine.round_manager import RoundManager
from luckynine.ledger.gateway import InMemoryLedger
from luckynine.realtime.event_bus import EventBus
from luckynine.realtime.events import EventPayload

ADMIN = "0xAdmin"
DRAWN = 9  # default draw; tests guess 1 to lose


class ScriptedDraw:
    """Deterministic RandomDraw returning queued values, then a default."""

    def __init__(self, values: Iterable[int] = (), default: int = DRAWN) -> None:
        self._values = deque(values)
        self.default = default
        self.contexts: list[SeedContext] = []

    def push(self, *values: int) -> None:
        self._values.extend(values)

    def draw(self, context: SeedContext) -> int:
        self.contexts.append(context)
        if self._values:
            return self._values.popleft()
        return self.default


@pytest.fixture
def rules() -> RoundRules:
    return RoundRules()


@pytest.fixture
def draw() -> ScriptedDraw:
    return ScriptedDraw()


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def received(event_bus: EventBus) -> list[EventPayload]:
    """Events delivered to a subscriber, in order."""
    events: list[EventPayload] = []
    event_bus.subscribe(events.append)
    return events


@pytest.fixture
def manager(rules, draw, ledger, event_bus) -> RoundManager:
    return RoundManager(ADMIN, draw, rules=rules, gateway=ledger, event_bus=event_bus)


@pytest.fixture
def small_manager(draw, ledger, event_bus) -> RoundManager:
    """Manager with a 3-player cap and a fee of 10 for arithmetic-friendly tests."""
    rules = RoundRules(registration_fee=10, max_players_per_round=3)
    return RoundManager(ADMIN, draw, rules=rules, gateway=ledger, event_bus=event_bus)
