"""
Lucky Nine - Round Manager

Owns the live round: registrants, per-player attempts, prize pool, held
balance and winner lists. Every mutating operation runs as one transaction
under a single lock; events produced by a transaction are published only
after it commits, in the order they were produced.

Round lifecycle:
- register: pay the exact fee to join (up to the player cap)
- guess: each guess is checked against a freshly drawn number
- distribute_prizes: split the pool evenly among winner entries, archive
  the winners and start the next round; triggered automatically once every
  registrant has used all attempts
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Callable, TypeVar

from luckynine.engine.base import (
    DistributionResult,
    GuessOutcome,
    PlayerRecord,
    PlayerView,
    RoundRules,
    RoundSnapshot,
    SeedContext,
)
from luckynine.engine.errors import (
    AlreadyDistributing,
    AlreadyRegistered,
    AttemptsExhausted,
    DistributionFailed,
    InvalidStake,
    NotRegistered,
    NoWinnersYet,
    OutOfRange,
    RoundClosed,
    RoundFull,
    Unauthorized,
)
from luckynine.engine.random_draw import RandomDraw, SystemRandomDraw
from luckynine.engine.validators import (
    validate_amount,
    validate_drawn_number,
    validate_guess_value,
    validate_identity,
)
from luckynine.ledger.gateway import FundsGateway, InMemoryLedger, TransferError
from luckynine.ledger.models import Transfer, TransferReason
from luckynine.realtime import events
from luckynine.realtime.event_bus import EventBus
from luckynine.realtime.events import EventPayload

if TYPE_CHECKING:
    from luckynine.config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RoundManager:
    """
    Stateful owner of the round lifecycle.

    All public operations are thread-safe. Callbacks made while the lock
    is held (the draw and the funds gateway) may call back into the
    manager; such re-entrant calls see distribution_pending and are
    rejected.
    """

    def __init__(
        self,
        administrator: str,
        draw: RandomDraw,
        *,
        rules: RoundRules | None = None,
        gateway: FundsGateway | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self._administrator = validate_identity(administrator)
        self._rules = rules or RoundRules()
        self._draw = draw
        self._gateway = gateway if gateway is not None else InMemoryLedger()
        self._events = event_bus if event_bus is not None else EventBus()

        self._lock = threading.RLock()

        self._round_number = 1
        self._players: dict[str, PlayerRecord] = {}
        self._registrants: list[str] = []
        self._winners: list[str] = []
        self._previous_winners: list[str] = []
        self._pool = 0
        self._balance = 0
        self._distribution_pending = False
        self._draw_nonce = 0

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        draw: RandomDraw | None = None,
        gateway: FundsGateway | None = None,
        event_bus: EventBus | None = None,
    ) -> RoundManager:
        """Build a manager from deployment settings."""
        rules = settings.to_rules()
        if draw is None:
            draw = SystemRandomDraw(rules, seed=settings.draw_seed)
        return cls(
            settings.administrator,
            draw,
            rules=rules,
            gateway=gateway,
            event_bus=event_bus,
        )

    # -- Operations -------------------------------------------------------

    def register(self, identity: str, stake: int) -> PlayerView:
        """Join the current round by paying exactly the registration fee.

        Raises:
            RoundClosed: A payout is in progress
            InvalidStake: Stake differs from the fee
            AlreadyRegistered: Identity already joined this round
            RoundFull: Player cap reached
        """
        validate_identity(identity)
        validate_amount(stake, "Stake", allow_negative=True)
        return self._transaction(lambda outbox: self._register(outbox, identity, stake))

    def guess(self, identity: str, value: int) -> GuessOutcome:
        """Guess a number against a fresh draw.

        When the guess exhausts the last remaining attempt of the round the
        round is distributed in the same transaction and the result is
        attached to the returned outcome.

        Raises:
            NotRegistered: Identity has no active record
            RoundClosed: A payout is in progress
            AttemptsExhausted: Player already used every attempt
            OutOfRange: Value outside [min_number, max_number]
            DistributionFailed: Auto-distribution was refused (guess undone)
        """
        validate_identity(identity)
        validate_guess_value(value)
        return self._transaction(lambda outbox: self._guess(outbox, identity, value))

    def distribute_prizes(self) -> DistributionResult:
        """Pay the winners and start the next round.

        Raises:
            AlreadyDistributing: A payout is in progress
            NoWinnersYet: Nobody won and attempts are not exhausted
            DistributionFailed: The gateway refused the payout batch
        """
        return self._transaction(self._distribute)

    def emergency_withdraw(self, caller: str) -> int:
        """Send the whole held balance to the administrator.

        Manual recovery only: ignores every round invariant except that it
        cannot run in the middle of a payout.

        Returns:
            Amount withdrawn

        Raises:
            Unauthorized: Caller is not the administrator
            RoundClosed: A payout is in progress
            TransferError: The gateway refused the transfer
        """
        return self._transaction(lambda outbox: self._emergency_withdraw(outbox, caller))

    # -- Queries ----------------------------------------------------------

    @property
    def administrator(self) -> str:
        return self._administrator

    @property
    def rules(self) -> RoundRules:
        return self._rules

    @property
    def event_bus(self) -> EventBus:
        return self._events

    @property
    def round_number(self) -> int:
        with self._lock:
            return self._round_number

    @property
    def pool(self) -> int:
        with self._lock:
            return self._pool

    @property
    def balance(self) -> int:
        """Funds held by the game, including undistributed remainders."""
        with self._lock:
            return self._balance

    @property
    def registrants(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._registrants)

    @property
    def winners(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._winners)

    @property
    def previous_winners(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._previous_winners)

    @property
    def distribution_pending(self) -> bool:
        with self._lock:
            return self._distribution_pending

    def get_player(self, identity: str) -> PlayerView | None:
        """Current-round record of a player, or None if not registered."""
        with self._lock:
            record = self._players.get(identity)
            if record is None:
                return None
            return self._view(identity, record)

    def attempts_remaining(self, identity: str) -> int:
        """Guesses left this round (0 for unregistered identities)."""
        player = self.get_player(identity)
        return player.attempts_remaining if player else 0

    def should_auto_distribute(self) -> bool:
        """True once every registrant has used all attempts."""
        with self._lock:
            return self._should_auto_distribute()

    def snapshot(self) -> RoundSnapshot:
        with self._lock:
            return RoundSnapshot(
                round_number=self._round_number,
                pool=self._pool,
                balance=self._balance,
                registrants=tuple(self._registrants),
                winners=tuple(self._winners),
                previous_winners=tuple(self._previous_winners),
                distribution_pending=self._distribution_pending,
            )

    # -- Transaction plumbing --------------------------------------------

    def _transaction(self, operation: Callable[[list[EventPayload]], T]) -> T:
        """Run operation under the state lock, then publish its events.

        Events are handed to the bus once the operation has returned, still
        under the lock so consecutive transactions publish in commit order.
        Nothing is published if the operation raises.
        """
        outbox: list[EventPayload] = []
        with self._lock:
            result = operation(outbox)
            self._events.publish_all(outbox)
        return result

    # -- Locked implementations ------------------------------------------

    def _register(self, outbox: list[EventPayload], identity: str, stake: int) -> PlayerView:
        if self._distribution_pending:
            raise RoundClosed(self._round_number)
        if stake != self._rules.registration_fee:
            raise InvalidStake(stake, self._rules.registration_fee)
        existing = self._players.get(identity)
        if existing is not None and existing.active:
            raise AlreadyRegistered(identity)
        if len(self._registrants) >= self._rules.max_players_per_round:
            raise RoundFull(self._rules.max_players_per_round)

        record = PlayerRecord(attempts_used=0, active=True)
        self._players[identity] = record
        self._registrants.append(identity)
        self._pool += stake
        self._balance += stake

        logger.info(
            "Round %d: %s registered (%d/%d), pool %d",
            self._round_number, identity, len(self._registrants),
            self._rules.max_players_per_round, self._pool,
        )
        outbox.append(events.player_registered(self._round_number, identity, stake, self._pool))
        return self._view(identity, record)

    def _guess(self, outbox: list[EventPayload], identity: str, value: int) -> GuessOutcome:
        record = self._players.get(identity)
        if record is None or not record.active:
            raise NotRegistered(identity)
        if self._distribution_pending:
            raise RoundClosed(self._round_number)
        if record.attempts_used >= self._rules.max_attempts:
            raise AttemptsExhausted(identity, self._rules.max_attempts)
        if not self._rules.in_range(value):
            raise OutOfRange(value, self._rules.min_number, self._rules.max_number)

        context = SeedContext(
            round_number=self._round_number,
            identity=identity,
            attempt=record.attempts_used + 1,
            nonce=self._draw_nonce + 1,
        )
        drawn = validate_drawn_number(self._draw.draw(context), self._rules)

        self._draw_nonce = context.nonce
        record.attempts_used += 1
        is_winner = value == drawn
        if is_winner:
            self._winners.append(identity)

        logger.debug(
            "Round %d: %s guessed %d, drew %d (attempt %d/%d)",
            self._round_number, identity, value, drawn,
            record.attempts_used, self._rules.max_attempts,
        )
        outbox.append(events.guess_made(self._round_number, identity, value, is_winner))

        distribution = None
        if self._should_auto_distribute():
            logger.info("Round %d: all attempts used, closing round", self._round_number)
            try:
                distribution = self._distribute(outbox)
            except Exception:
                # Undo the guess so the whole call leaves no trace.
                self._draw_nonce -= 1
                record.attempts_used -= 1
                if is_winner:
                    self._winners.pop()
                raise

        return GuessOutcome(
            identity=identity,
            value=value,
            drawn=drawn,
            is_winner=is_winner,
            attempts_used=record.attempts_used,
            distribution=distribution,
        )

    def _distribute(self, outbox: list[EventPayload]) -> DistributionResult:
        if self._distribution_pending:
            raise AlreadyDistributing(self._round_number)
        if not self._winners and not self._should_auto_distribute():
            raise NoWinnersYet(self._round_number)

        self._distribution_pending = True

        round_number = self._round_number
        winners = tuple(self._winners)
        pool = self._pool
        share = pool // len(winners) if winners else 0
        total_paid = share * len(winners)

        if winners:
            transfers = [
                Transfer(recipient=winner, amount=share, round_number=round_number)
                for winner in winners
            ]
            try:
                self._gateway.transfer_batch(transfers)
            except TransferError as exc:
                self._distribution_pending = False
                logger.warning("Round %d: payout refused: %s", round_number, exc)
                raise DistributionFailed(round_number, exc.reason) from exc
            except Exception:
                self._distribution_pending = False
                raise

            self._previous_winners.extend(winners)
            self._balance -= total_paid
            self._pool = 0
            logger.info(
                "Round %d: paid %d to %d winner entries, %d left as dead balance",
                round_number, share, len(winners), pool - total_paid,
            )
            outbox.append(events.prizes_distributed(round_number, winners, share))
        else:
            logger.info("Round %d: no winners, rolling pool %d forward", round_number, pool)

        self._players.clear()
        self._registrants.clear()
        self._winners.clear()
        self._round_number += 1
        self._distribution_pending = False

        logger.info("Round %d started with pool %d", self._round_number, self._pool)
        outbox.append(events.new_round_started(self._round_number, self._pool))

        return DistributionResult(
            round_number=round_number,
            winners=winners,
            share=share,
            total_paid=total_paid,
            remainder=pool - total_paid if winners else 0,
            rolled_over=0 if winners else pool,
            next_round_number=self._round_number,
        )

    def _emergency_withdraw(self, outbox: list[EventPayload], caller: str) -> int:
        if caller != self._administrator:
            logger.warning("Emergency withdrawal refused for %s", caller)
            raise Unauthorized(caller)
        if self._distribution_pending:
            raise RoundClosed(self._round_number)

        amount = self._balance
        if amount:
            self._gateway.transfer_batch([
                Transfer(
                    recipient=self._administrator,
                    amount=amount,
                    reason=TransferReason.EMERGENCY_WITHDRAWAL,
                    round_number=self._round_number,
                )
            ])
        self._balance = 0
        self._pool = 0

        logger.warning("Emergency withdrawal of %d by %s", amount, caller)
        outbox.append(events.emergency_withdrawal(self._round_number, self._administrator, amount))
        return amount

    # -- Helpers ----------------------------------------------------------

    def _should_auto_distribute(self) -> bool:
        if not self._registrants:
            return False
        return all(
            self._players[identity].attempts_used == self._rules.max_attempts
            for identity in self._registrants
        )

    def _view(self, identity: str, record: PlayerRecord) -> PlayerView:
        return PlayerView(
            identity=identity,
            attempts_used=record.attempts_used,
            attempts_remaining=self._rules.max_attempts - record.attempts_used,
            active=record.active,
        )
