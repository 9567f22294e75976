"""
Lucky Nine - Funds Gateway

The RoundManager moves money only through a FundsGateway. A gateway applies
a batch of transfers all-or-nothing: either every transfer lands or none
does and TransferError is raised.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Protocol, Sequence, runtime_checkable

from luckynine.ledger.models import Transfer, TransferRecord

logger = logging.getLogger(__name__)


class TransferError(Exception):
    """A transfer batch was refused. No transfer of the batch was applied."""

    def __init__(self, recipient: str, reason: str):
        self.recipient = recipient
        self.reason = reason
        super().__init__(f"Transfer to {recipient} failed: {reason}")


@runtime_checkable
class FundsGateway(Protocol):
    """Capability paying funds out of the game."""

    def transfer_batch(self, transfers: Sequence[Transfer]) -> None:
        ...


class InMemoryLedger:
    """Gateway keeping credited balances and a transfer log in memory.

    Recipients can be blocked to simulate a rail refusing a transfer.
    Zero-amount transfers are skipped.
    """

    def __init__(self) -> None:
        self._balances: dict[str, int] = defaultdict(int)
        self._log: list[TransferRecord] = []
        self._blocked: set[str] = set()
        self._lock = threading.Lock()

    def transfer_batch(self, transfers: Sequence[Transfer]) -> None:
        """Apply every transfer, or none of them."""
        with self._lock:
            for transfer in transfers:
                if transfer.recipient in self._blocked:
                    raise TransferError(transfer.recipient, "recipient is blocked")

            for transfer in transfers:
                if transfer.amount == 0:
                    continue
                self._balances[transfer.recipient] += transfer.amount
                self._log.append(
                    TransferRecord(sequence=len(self._log) + 1, transfer=transfer)
                )

        logger.debug("Applied batch of %d transfers", len(transfers))

    def balance_of(self, identity: str) -> int:
        """Total credited to an identity."""
        with self._lock:
            return self._balances.get(identity, 0)

    @property
    def records(self) -> list[TransferRecord]:
        """Applied transfers in order."""
        with self._lock:
            return list(self._log)

    @property
    def total_transferred(self) -> int:
        with self._lock:
            return sum(record.transfer.amount for record in self._log)

    def block(self, identity: str) -> None:
        """Refuse every batch that pays this identity."""
        with self._lock:
            self._blocked.add(identity)

    def unblock(self, identity: str) -> None:
        with self._lock:
            self._blocked.discard(identity)
