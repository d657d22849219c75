"""Tests for unattended batch play."""

from decimal import Decimal

import pytest

from core.cards import Shoe
from core.game import AutoPlay, BlackjackGame, EventType, GamePhase
from core.game.autoplay import MSG_RESERVE_REACHED, dealer_mimic_policy
from core.sidebets import BetKind
from helpers import FILLER, bet, cards, rig

WIN = ("10S", "8D", "9C", "8H")
LOSS = ("10S", "7D", "10C", "9H")


def stack(game, pattern, rounds):
    """Fill the shoe with ``rounds`` copies of one four-card round."""
    game.shoe = Shoe.from_cards(FILLER + list(reversed(cards(*pattern * rounds))))


@pytest.fixture
def seeded_game():
    """A game that has played one losing $10 round."""
    game = BlackjackGame(initial_balance=Decimal("1000"))
    bet(game, BetKind.MAIN, "10")
    rig(game, *LOSS)
    game.deal()
    game.stand()
    assert game.balance == Decimal("990")
    return game


class TestAutoPlay:
    """Tests for AutoPlay."""

    def test_requires_previous_bets(self, game):
        report = AutoPlay(game, rounds=3).run()
        assert report.rounds_played == 0
        assert report.stopped_reason == "No previous bets to repeat"

    @pytest.mark.parametrize("kwargs", [{"rounds": 0}, {"rounds": 1, "reserve": Decimal("-1")}])
    def test_invalid_arguments(self, game, kwargs):
        with pytest.raises(ValueError):
            AutoPlay(game, **kwargs)

    def test_plays_all_rounds(self, seeded_game):
        stack(seeded_game, WIN, 3)
        report = AutoPlay(seeded_game, rounds=3).run()
        assert report.rounds_played == 3
        assert report.stopped_reason is None
        assert report.net == Decimal("30")
        assert seeded_game.balance == Decimal("1020")
        assert seeded_game.phase == GamePhase.GAME_OVER

    def test_stops_at_reserve(self, seeded_game):
        stack(seeded_game, LOSS, 10)
        report = AutoPlay(seeded_game, rounds=10, reserve=Decimal("950")).run()
        assert report.rounds_played == 4
        assert report.stopped_reason == MSG_RESERVE_REACHED
        assert seeded_game.message == MSG_RESERVE_REACHED
        assert seeded_game.balance == Decimal("950")
        assert report.net == Decimal("-40")

    def test_doubles_when_legal(self, seeded_game):
        stack(seeded_game, ("6S", "5D", "9C", "8H", "KC"), 1)
        report = AutoPlay(seeded_game, rounds=1).run()
        result = report.results[0]
        assert result.main_bet == Decimal("20.00")
        assert result.payout == Decimal("40.00")

    def test_declines_insurance(self, seeded_game):
        stack(seeded_game, ("10S", "9D", "AH", "7C"), 1)
        report = AutoPlay(seeded_game, rounds=1).run()
        assert report.results[0].insurance_bet == 0
        assert report.results[0].payout == Decimal("20.00")

    def test_rejected_decision_stands(self, seeded_game):
        stack(seeded_game, WIN, 1)
        report = AutoPlay(seeded_game, rounds=1, policy=lambda game: "split").run()
        assert report.rounds_played == 1
        assert report.results[0].player_total == 18


class TestDealerMimicPolicy:
    """Tests for the default decision policy."""

    def _playing(self, *codes):
        game = BlackjackGame(initial_balance=Decimal("100"))
        bet(game, BetKind.MAIN, "10")
        rig(game, *codes)
        game.deal()
        return game

    def test_doubles_eleven(self):
        assert dealer_mimic_policy(self._playing("6S", "5D", "9C", "8H")) == "double"

    def test_hits_below_17(self):
        assert dealer_mimic_policy(self._playing("10S", "6D", "9C", "8H")) == "hit"

    def test_stands_on_17(self):
        assert dealer_mimic_policy(self._playing("10S", "7D", "9C", "8H")) == "stand"


class TestReserveDuringPlay:
    """Doubles and splits never take the balance below the reserve."""

    @pytest.fixture
    def short_game(self):
        """A game left with $20 after one losing $10 round."""
        game = BlackjackGame(initial_balance=Decimal("30"))
        bet(game, BetKind.MAIN, "10")
        rig(game, *LOSS)
        game.deal()
        game.stand()
        assert game.balance == Decimal("20")
        return game

    def test_double_played_as_hit(self, short_game):
        stack(short_game, ("6S", "5D", "10C", "9H", "KC"), 1)
        report = AutoPlay(short_game, rounds=1, reserve=Decimal("10")).run()

        result = report.results[0]
        assert result.main_bet == Decimal("10.00")
        assert result.player_total == 21
        assert short_game.balance == Decimal("30")
        assert all(e.event_type != EventType.PLAYER_DOUBLE for e in short_game.events.history)

    def test_losing_hand_keeps_reserve(self, short_game):
        stack(short_game, ("6S", "5D", "10C", "9H", "4C", "2D"), 1)
        AutoPlay(short_game, rounds=1, reserve=Decimal("10")).run()

        assert short_game.last_round[0].main_bet == Decimal("10.00")
        assert short_game.balance == Decimal("10")

    def test_split_played_as_hit(self, short_game):
        stack(short_game, ("8S", "8D", "10C", "9H", "KC"), 1)
        report = AutoPlay(short_game, rounds=1, reserve=Decimal("10"), policy=lambda game: "split").run()

        assert len(report.results) == 1
        assert report.results[0].player_total == 26
        assert short_game.balance == Decimal("10")
