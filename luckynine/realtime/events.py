"""
Lucky Nine - Realtime Event Definitions

Event types and payloads published by the RoundManager.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class RoundEvent(Enum):
    """Events that can occur during a round."""

    PLAYER_REGISTERED = auto()
    GUESS_MADE = auto()
    PRIZES_DISTRIBUTED = auto()
    NEW_ROUND_STARTED = auto()
    EMERGENCY_WITHDRAWAL = auto()


@dataclass(frozen=True)
class EventPayload:
    """Wrapper for event data."""

    event: RoundEvent
    round_number: int
    identity: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


def player_registered(round_number: int, identity: str, stake: int, pool: int) -> EventPayload:
    return EventPayload(
        event=RoundEvent.PLAYER_REGISTERED,
        round_number=round_number,
        identity=identity,
        data={"stake": stake, "pool": pool},
    )


def guess_made(round_number: int, identity: str, value: int, is_winner: bool) -> EventPayload:
    return EventPayload(
        event=RoundEvent.GUESS_MADE,
        round_number=round_number,
        identity=identity,
        data={"value": value, "is_winner": is_winner},
    )


def prizes_distributed(round_number: int, winners: tuple[str, ...], share: int) -> EventPayload:
    return EventPayload(
        event=RoundEvent.PRIZES_DISTRIBUTED,
        round_number=round_number,
        data={"winners": winners, "share": share},
    )


def new_round_started(round_number: int, pool: int) -> EventPayload:
    return EventPayload(
        event=RoundEvent.NEW_ROUND_STARTED,
        round_number=round_number,
        data={"pool": pool},
    )


def emergency_withdrawal(round_number: int, administrator: str, amount: int) -> EventPayload:
    return EventPayload(
        event=RoundEvent.EMERGENCY_WITHDRAWAL,
        round_number=round_number,
        identity=administrator,
        data={"amount": amount},
    )
