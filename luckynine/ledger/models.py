"""
Lucky Nine - Ledger Models

Pydantic models for funds movements leaving the game.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class TransferReason(str, Enum):
    """Why funds left the game."""

    PRIZE = "prize"
    EMERGENCY_WITHDRAWAL = "emergency_withdrawal"


class Transfer(BaseModel):
    """A single payout instruction."""

    recipient: str = Field(min_length=1)
    amount: int = Field(ge=0)
    reason: TransferReason = TransferReason.PRIZE
    round_number: int | None = None

    model_config = {"frozen": True}


class TransferRecord(BaseModel):
    """A transfer applied by the ledger, in application order."""

    sequence: int
    transfer: Transfer
    applied_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"frozen": True}
