"""
Lucky Nine - Engine Exceptions

Every rejected operation raises a subclass of LuckyNineError tagged with an
ErrorKind, so callers can branch on the kind without string matching.
A rejected call never leaves partial state behind.
"""

from enum import Enum


class ErrorKind(Enum):
    """Kinds of rejection a RoundManager operation can produce."""
    ROUND_CLOSED = "round_closed"
    INVALID_STAKE = "invalid_stake"
    ALREADY_REGISTERED = "already_registered"
    ROUND_FULL = "round_full"
    NOT_REGISTERED = "not_registered"
    ATTEMPTS_EXHAUSTED = "attempts_exhausted"
    OUT_OF_RANGE = "out_of_range"
    ALREADY_DISTRIBUTING = "already_distributing"
    NO_WINNERS_YET = "no_winners_yet"
    UNAUTHORIZED = "unauthorized"
    DISTRIBUTION_FAILED = "distribution_failed"


class LuckyNineError(Exception):
    """Base class of all game rejections."""

    kind: ErrorKind


# ============ Round state ============

class RoundClosed(LuckyNineError):
    """The round is paying out and accepts no registrations or guesses."""
    kind = ErrorKind.ROUND_CLOSED

    def __init__(self, round_number: int):
        self.round_number = round_number
        super().__init__(f"Round {round_number} is closed for payout")


class AlreadyDistributing(LuckyNineError):
    """A distribution is already in progress."""
    kind = ErrorKind.ALREADY_DISTRIBUTING

    def __init__(self, round_number: int):
        self.round_number = round_number
        super().__init__(f"Round {round_number} is already distributing")


class NoWinnersYet(LuckyNineError):
    """Manual distribution requested before anyone won."""
    kind = ErrorKind.NO_WINNERS_YET

    def __init__(self, round_number: int):
        self.round_number = round_number
        super().__init__(
            f"Round {round_number} has no winners and attempts are not exhausted"
        )


class DistributionFailed(LuckyNineError):
    """The payout batch was refused; the round is left untouched."""
    kind = ErrorKind.DISTRIBUTION_FAILED

    def __init__(self, round_number: int, reason: str):
        self.round_number = round_number
        self.reason = reason
        super().__init__(f"Distribution of round {round_number} failed: {reason}")


# ============ Registration ============

class InvalidStake(LuckyNineError):
    """Stake differs from the registration fee."""
    kind = ErrorKind.INVALID_STAKE

    def __init__(self, stake: int, expected: int):
        self.stake = stake
        self.expected = expected
        super().__init__(f"Stake must be exactly {expected}, got {stake}")


class AlreadyRegistered(LuckyNineError):
    """Identity already joined the current round."""
    kind = ErrorKind.ALREADY_REGISTERED

    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(f"Player {identity} is already registered")


class RoundFull(LuckyNineError):
    """The registration cap has been reached."""
    kind = ErrorKind.ROUND_FULL

    def __init__(self, max_players: int):
        self.max_players = max_players
        super().__init__(f"Round is full ({max_players} players)")


# ============ Guessing ============

class NotRegistered(LuckyNineError):
    """Identity has no active record in the current round."""
    kind = ErrorKind.NOT_REGISTERED

    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(f"Player {identity} is not registered")


class AttemptsExhausted(LuckyNineError):
    """Player has used every guess of the round."""
    kind = ErrorKind.ATTEMPTS_EXHAUSTED

    def __init__(self, identity: str, max_attempts: int):
        self.identity = identity
        self.max_attempts = max_attempts
        super().__init__(f"Player {identity} has used all {max_attempts} attempts")


class OutOfRange(LuckyNineError):
    """Guessed number lies outside the playable range."""
    kind = ErrorKind.OUT_OF_RANGE

    def __init__(self, value: int, low: int, high: int):
        self.value = value
        self.low = low
        self.high = high
        super().__init__(f"Guess {value} is outside [{low}, {high}]")


# ============ Administration ============

class Unauthorized(LuckyNineError):
    """Caller is not the administrator."""
    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, caller: str):
        self.caller = caller
        super().__init__(f"{caller} is not the administrator")


# ============ Host defects ============

class DrawOutOfRange(ValueError):
    """A RandomDraw returned a number outside the configured range."""

    def __init__(self, drawn: int, low: int, high: int):
        self.drawn = drawn
        super().__init__(f"Draw returned {drawn}, must be between {low} and {high}")
