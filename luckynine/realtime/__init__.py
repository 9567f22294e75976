"""
Lucky Nine Realtime Events.

Event payloads and the bus delivering them to observers.
"""

from luckynine.realtime.event_bus import EventBus
from luckynine.realtime.events import EventPayload, RoundEvent

__all__ = [
    "EventBus",
    "EventPayload",
    "RoundEvent",
]
