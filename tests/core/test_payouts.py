"""Tests for main bet and insurance payouts."""

from decimal import Decimal

import pytest

from core.hand import Outcome
from core.payouts import calculate_payout, insurance_payout, main_ratio_label
from core.rules import RuleSet


class TestMainPayout:
    """Payouts include the returned stake."""

    @pytest.mark.parametrize(
        "outcome, expected",
        [
            (Outcome.BLACKJACK, Decimal("22")),
            (Outcome.WIN, Decimal("20")),
            (Outcome.PUSH, Decimal("10")),
            (Outcome.LOSS, Decimal("0")),
            (Outcome.BUST, Decimal("0")),
        ],
    )
    def test_ten_dollar_bet(self, outcome, expected):
        assert calculate_payout(outcome, Decimal("10")) == expected

    def test_blackjack_pays_six_to_five(self):
        assert calculate_payout(Outcome.BLACKJACK, Decimal("5")) == Decimal("11")

    def test_ratio_labels(self):
        assert main_ratio_label(Outcome.BLACKJACK) == "6:5"
        assert main_ratio_label(Outcome.WIN) == "1:1"
        assert main_ratio_label(Outcome.PUSH) == "push"
        assert main_ratio_label(Outcome.LOSS) is None


class TestInsurancePayout:
    """Insurance pays 2:1 on a dealer natural."""

    def test_dealer_blackjack(self):
        assert insurance_payout(Decimal("5"), True) == Decimal("15")

    def test_no_dealer_blackjack(self):
        assert insurance_payout(Decimal("5"), False) == 0

    def test_not_taken(self):
        assert insurance_payout(Decimal("0"), True) == 0


class TestRuleSet:
    """Tests for RuleSet validation."""

    def test_defaults(self):
        rules = RuleSet()
        assert rules.num_decks == 6
        assert rules.reshuffle_below == 50
        assert rules.max_hands == 2
        assert rules.insurance_fraction == Decimal("0.5")
        assert rules.history_size == 10

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"num_decks": 0},
            {"num_decks": 9},
            {"reshuffle_below": -1},
            {"num_decks": 1, "reshuffle_below": 52},
            {"max_hands": 0},
            {"history_size": 0},
        ],
    )
    def test_invalid_rules(self, kwargs):
        with pytest.raises(ValueError):
            RuleSet(**kwargs)
