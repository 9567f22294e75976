"""
Lucky Nine - Random Draw Sources

The engine never produces randomness itself: a RandomDraw is injected into
the RoundManager and asked for a fresh number on every guess. None of these
sources is cryptographically secure.
"""

import hashlib
import random
from typing import Protocol, runtime_checkable

from luckynine.engine.base import RoundRules, SeedContext


@runtime_checkable
class RandomDraw(Protocol):
    """Capability returning a number in [rules.min_number, rules.max_number]."""

    def draw(self, context: SeedContext) -> int:
        ...


class SystemRandomDraw:
    """
    Draws from a private random.Random instance.

    Pass a seed for reproducible sequences; otherwise the generator is seeded
    from the operating system.
    """

    def __init__(self, rules: RoundRules, seed: int | None = None) -> None:
        self._rules = rules
        self._rng = random.Random(seed)

    def draw(self, context: SeedContext) -> int:
        return self._rng.randint(self._rules.min_number, self._rules.max_number)


class HashDraw:
    """
    Deterministic draw derived from the seed context.

    The same (salt, round, identity, attempt, nonce) always yields the same
    number, which makes a round replayable for auditing.
    """

    def __init__(self, rules: RoundRules, salt: str = "") -> None:
        self._rules = rules
        self._salt = salt

    def digest(self, context: SeedContext) -> str:
        """Hex SHA-256 of the salted seed context."""
        material = (
            f"{self._salt}:{context.round_number}:{context.identity}"
            f":{context.attempt}:{context.nonce}"
        )
        return hashlib.sha256(material.encode("utf-8")).hexdigest()

    def draw(self, context: SeedContext) -> int:
        span = self._rules.max_number - self._rules.min_number + 1
        return self._rules.min_number + int(self.digest(context), 16) % span
