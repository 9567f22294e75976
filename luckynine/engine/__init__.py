"""
Lucky Nine Game Engine.

Round lifecycle for the number-guessing pool: registration, guess
evaluation, auto-closure and prize distribution.
"""

from luckynine.engine.base import (
    DistributionResult,
    GuessOutcome,
    PlayerRecord,
    PlayerView,
    RoundRules,
    RoundSnapshot,
    SeedContext,
)
from luckynine.engine.errors import ErrorKind, LuckyNineError
from luckynine.engine.random_draw import HashDraw, RandomDraw, SystemRandomDraw
from luckynine.engine.round_manager import RoundManager

__all__ = [
    # Data Classes
    "DistributionResult",
    "GuessOutcome",
    "PlayerRecord",
    "PlayerView",
    "RoundRules",
    "RoundSnapshot",
    "SeedContext",
    # Errors
    "ErrorKind",
    "LuckyNineError",
    # Draws
    "HashDraw",
    "RandomDraw",
    "SystemRandomDraw",
    # Manager
    "RoundManager",
]
