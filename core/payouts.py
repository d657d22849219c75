"""Main bet and insurance payouts.

Payouts include the returned stake, since the stake leaves the balance
when the bet is placed.
"""

from decimal import Decimal

from core.hand import Outcome
from core.sidebets import ZERO

# 6:5 blackjack
BLACKJACK_MULTIPLIER = Decimal("2.2")

PAYOUT_MULTIPLIERS: dict[Outcome, Decimal] = {
    Outcome.BLACKJACK: BLACKJACK_MULTIPLIER,
    Outcome.WIN: Decimal("2"),
    Outcome.PUSH: Decimal("1"),
    Outcome.LOSS: ZERO,
    Outcome.BUST: ZERO,
}

# 2:1 plus the insurance stake
INSURANCE_MULTIPLIER = Decimal("3")


def calculate_payout(outcome: Outcome, bet: Decimal) -> Decimal:
    """Return the amount credited for a main bet with the given outcome."""
    return bet * PAYOUT_MULTIPLIERS[outcome]


def insurance_payout(insurance_bet: Decimal, dealer_has_blackjack: bool) -> Decimal:
    """Insurance pays only when the dealer holds a natural."""
    if insurance_bet <= 0 or not dealer_has_blackjack:
        return ZERO
    return insurance_bet * INSURANCE_MULTIPLIER


def main_ratio_label(outcome: Outcome) -> str | None:
    """Odds label shown next to a settled main bet."""
    return {
        Outcome.BLACKJACK: "6:5",
        Outcome.WIN: "1:1",
        Outcome.PUSH: "push",
    }.get(outcome)
