"""
Lucky Nine - Game Engine Base Classes

This module defines the foundational data structures used throughout the
game engine. Value objects handed to callers are immutable (frozen
dataclasses) so a snapshot can never be used to mutate live round state.
"""

from dataclasses import dataclass, field

ETHER = 10**18

DEFAULT_REGISTRATION_FEE = 2 * ETHER // 100  # 0.02 ether
DEFAULT_MAX_ATTEMPTS = 2
DEFAULT_MIN_NUMBER = 1
DEFAULT_MAX_NUMBER = 9
DEFAULT_MAX_PLAYERS_PER_ROUND = 100


@dataclass(frozen=True)
class RoundRules:
    """
    Deployment constants for every round.

    Attributes:
        registration_fee: Exact stake required to join a round
        max_attempts: Guesses allowed per player per round
        min_number: Lowest guessable (and drawable) number
        max_number: Highest guessable (and drawable) number
        max_players_per_round: Registration cap per round
    """
    registration_fee: int = DEFAULT_REGISTRATION_FEE
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    min_number: int = DEFAULT_MIN_NUMBER
    max_number: int = DEFAULT_MAX_NUMBER
    max_players_per_round: int = DEFAULT_MAX_PLAYERS_PER_ROUND

    def __post_init__(self) -> None:
        """Validate rules."""
        for name in (
            "registration_fee",
            "max_attempts",
            "min_number",
            "max_number",
            "max_players_per_round",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {type(value).__name__}.")

        if self.registration_fee <= 0:
            raise ValueError("Registration fee must be positive.")
        if self.max_attempts <= 0:
            raise ValueError("Max attempts must be positive.")
        if self.max_players_per_round <= 0:
            raise ValueError("Max players per round must be positive.")
        if self.min_number > self.max_number:
            raise ValueError(
                f"Number range is empty: {self.min_number} > {self.max_number}."
            )

    def in_range(self, value: int) -> bool:
        """Returns True if value lies in [min_number, max_number]."""
        return self.min_number <= value <= self.max_number


@dataclass
class PlayerRecord:
    """
    Per-round state of a registered player. Owned by the RoundManager.

    Attributes:
        attempts_used: Guesses made this round
        active: Whether the player is registered in the live round
    """
    attempts_used: int = 0
    active: bool = True


@dataclass(frozen=True)
class PlayerView:
    """Read-only copy of a PlayerRecord returned by queries."""
    identity: str
    attempts_used: int
    attempts_remaining: int
    active: bool


@dataclass(frozen=True)
class SeedContext:
    """
    Context handed to a RandomDraw for a single guess.

    Attributes:
        round_number: Round the guess belongs to
        identity: Player making the guess
        attempt: 1-based attempt index for this player
        nonce: Manager-wide counter, strictly increasing per draw
    """
    round_number: int
    identity: str
    attempt: int
    nonce: int


@dataclass(frozen=True)
class DistributionResult:
    """
    Outcome of closing a round.

    Attributes:
        round_number: The round that was closed
        winners: Winner entries paid, in payout order (duplicates preserved)
        share: Amount paid per winner entry (0 when nobody won)
        total_paid: share * len(winners)
        remainder: Undistributed floor-division remainder kept as dead balance
        rolled_over: Pool carried into the next round (zero-winner rounds only)
        next_round_number: Number of the round that started
    """
    round_number: int
    winners: tuple[str, ...]
    share: int
    total_paid: int
    remainder: int
    rolled_over: int
    next_round_number: int

    @property
    def had_winners(self) -> bool:
        """Returns True if any winner entry was paid."""
        return len(self.winners) > 0


@dataclass(frozen=True)
class GuessOutcome:
    """
    Result of a single guess.

    Attributes:
        identity: Player who guessed
        value: Guessed number
        drawn: Number drawn for this guess
        is_winner: Whether the guess matched the draw
        attempts_used: Player's attempts after this guess
        distribution: Set when the guess exhausted the round and closed it
    """
    identity: str
    value: int
    drawn: int
    is_winner: bool
    attempts_used: int
    distribution: DistributionResult | None = None

    @property
    def closed_round(self) -> bool:
        """Returns True if this guess triggered auto-distribution."""
        return self.distribution is not None


@dataclass(frozen=True)
class RoundSnapshot:
    """
    Consistent point-in-time view of the live round.

    Attributes:
        round_number: Current round number (starts at 1)
        pool: Prize pool of the current round
        balance: Total funds held, including dead balance
        registrants: Registered identities in arrival order
        winners: Winner entries so far this round
        previous_winners: Winner entries of every closed round
        distribution_pending: Whether a payout is in progress
    """
    round_number: int
    pool: int
    balance: int
    registrants: tuple[str, ...] = field(default_factory=tuple)
    winners: tuple[str, ...] = field(default_factory=tuple)
    previous_winners: tuple[str, ...] = field(default_factory=tuple)
    distribution_pending: bool = False

    @property
    def player_count(self) -> int:
        """Number of registrants this round."""
        return len(self.registrants)
