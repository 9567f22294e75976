"""
Lucky Nine - Input Validation Utilities

Shape checks for values entering the engine. Validators either return the
validated value or raise a descriptive ValueError; game-rule rejections
(wrong stake, guess outside the range) are raised by the RoundManager as
LuckyNineError subclasses instead.
"""

from luckynine.engine.base import RoundRules
from luckynine.engine.errors import DrawOutOfRange


def validate_identity(identity: str) -> str:
    """
    Validate a participant identity.

    Args:
        identity: Opaque participant identifier (address, username, ...)

    Returns:
        The identity unchanged

    Raises:
        ValueError: If identity is not a non-empty string
    """
    if not isinstance(identity, str):
        raise ValueError(f"Identity must be a string, got {type(identity).__name__}.")

    if not identity.strip():
        raise ValueError("Identity cannot be empty.")

    return identity


def validate_amount(amount: int, name: str = "Amount", allow_negative: bool = False) -> int:
    """
    Validate a funds amount in the smallest unit.

    Args:
        amount: Amount to validate
        name: Label used in error messages
        allow_negative: Whether negative amounts pass (left to game rules)

    Returns:
        Validated amount

    Raises:
        ValueError: If amount is not an integer, or is negative when not allowed
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"{name} must be an integer, got {type(amount).__name__}.")

    if not allow_negative and amount < 0:
        raise ValueError(f"{name} cannot be negative, got {amount}.")

    return amount


def validate_guess_value(value: int) -> int:
    """
    Validate that a guess is an integer. Range is a game rule, not checked here.

    Raises:
        ValueError: If value is not an integer
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Guess must be an integer, got {type(value).__name__}.")

    return value


def validate_drawn_number(drawn: int, rules: RoundRules) -> int:
    """
    Validate a number produced by a RandomDraw.

    Args:
        drawn: Number returned by the draw
        rules: Round rules holding the valid range

    Returns:
        Validated number

    Raises:
        DrawOutOfRange: If the draw broke its contract
    """
    if isinstance(drawn, bool) or not isinstance(drawn, int) or not rules.in_range(drawn):
        raise DrawOutOfRange(drawn, rules.min_number, rules.max_number)

    return drawn
