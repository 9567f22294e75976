"""
Lucky Nine - End-to-End Round Scenarios

Full round walkthroughs with a 0.02 ether registration fee.
"""

import pytest

from luckynine.engine.base import ETHER
from luckynine.engine.errors import InvalidStake, Unauthorized
from luckynine.realtime.events import RoundEvent

FEE = 2 * ETHER // 100


class TestScenarios:
    def test_default_fee_is_two_hundredths_of_an_ether(self, manager):
        assert manager.rules.registration_fee == FEE == 20_000_000_000_000_000

    def test_a_two_registrations(self, manager):
        manager.register("alice", FEE)
        manager.register("bob", FEE)
        assert manager.registrants == ("alice", "bob")
        assert manager.pool == 2 * FEE

    def test_b_wrong_stake(self, manager):
        manager.register("alice", FEE)
        manager.register("bob", FEE)
        with pytest.raises(InvalidStake):
            manager.register("carol", FEE // 2)
        assert manager.pool == 2 * FEE
        assert manager.registrants == ("alice", "bob")

    def test_c_everyone_misses(self, manager, received):
        manager.register("alice", FEE)
        manager.register("bob", FEE)

        manager.guess("alice", 1)
        manager.guess("bob", 2)
        manager.guess("alice", 3)
        assert manager.should_auto_distribute() is False

        outcome = manager.guess("bob", 4)

        assert outcome.closed_round is True
        assert outcome.distribution.winners == ()
        assert outcome.distribution.rolled_over == 2 * FEE
        assert manager.round_number == 2
        assert manager.pool == 2 * FEE
        assert manager.registrants == ()
        assert received[-1].event is RoundEvent.NEW_ROUND_STARTED
        assert received[-1].data["pool"] == 2 * FEE

    def test_d_single_winner(self, manager, draw, ledger):
        manager.register("alice", FEE)
        draw.push(7)
        assert manager.guess("alice", 7).is_winner is True

        result = manager.distribute_prizes()

        assert result.share == FEE
        assert ledger.balance_of("alice") == FEE
        assert manager.previous_winners == ("alice",)
        assert manager.round_number == 2
        assert manager.pool == 0

    def test_e_unauthorized_withdrawal(self, manager, ledger):
        manager.register("alice", FEE)
        with pytest.raises(Unauthorized):
            manager.emergency_withdraw("alice")
        assert manager.balance == FEE
        assert ledger.records == []
