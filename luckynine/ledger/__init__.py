"""
Lucky Nine Ledger.

Funds gateway and transfer records for prize payouts and withdrawals.
"""

from luckynine.ledger.gateway import FundsGateway, InMemoryLedger, TransferError
from luckynine.ledger.models import Transfer, TransferReason, TransferRecord

__all__ = [
    "FundsGateway",
    "InMemoryLedger",
    "Transfer",
    "TransferError",
    "TransferReason",
    "TransferRecord",
]
