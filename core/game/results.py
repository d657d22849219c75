"""Settled round records and streak tracking."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Sequence

from core.cards import Card
from core.hand import Outcome
from core.sidebets import BetKind, SIDE_BET_KINDS, ZERO

CENTS = Decimal("0.01")


def to_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENTS)


class StreakType(str, Enum):
    WIN = "win"
    LOSS = "loss"


@dataclass(frozen=True)
class BetSettlement:
    """How one wager on a hand was settled."""

    kind: BetKind
    amount: Decimal
    outcome: str | None
    payout: Decimal
    ratio: str | None = None


@dataclass(frozen=True)
class RoundResult:
    """Immutable snapshot of one settled player hand."""

    hand_index: int
    player_cards: tuple[Card, ...]
    dealer_cards: tuple[Card, ...]
    player_total: int
    dealer_total: int
    settlements: tuple[BetSettlement, ...]
    insurance_bet: Decimal = ZERO
    insurance_payout: Decimal = ZERO
    session_id: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def get(self, kind: BetKind) -> BetSettlement:
        for settlement in self.settlements:
            if settlement.kind == kind:
                return settlement
        return BetSettlement(kind=kind, amount=ZERO, outcome=None, payout=ZERO)

    @property
    def outcome(self) -> Outcome:
        """Main bet outcome."""
        return Outcome(self.get(BetKind.MAIN).outcome)

    @property
    def main_bet(self) -> Decimal:
        return self.get(BetKind.MAIN).amount

    @property
    def payout(self) -> Decimal:
        """Main bet payout."""
        return self.get(BetKind.MAIN).payout

    @property
    def side_bet_payout(self) -> Decimal:
        return sum((self.get(kind).payout for kind in SIDE_BET_KINDS), ZERO)

    @property
    def total_staked(self) -> Decimal:
        return sum((s.amount for s in self.settlements), ZERO) + self.insurance_bet

    @property
    def total_payout(self) -> Decimal:
        return sum((s.payout for s in self.settlements), ZERO) + self.insurance_payout


def update_streak(
    outcomes: Sequence[Outcome],
    streak_count: int,
    streak_type: StreakType | None,
) -> tuple[int, StreakType | None]:
    """
    Fold one round's hand outcomes into the running streak.

    The round counts as a win or a loss by majority across its hands
    (pushes count as neither). A repeat extends the streak, a change
    restarts it at 1 and a tie clears it.
    """
    wins = sum(1 for o in outcomes if o in (Outcome.WIN, Outcome.BLACKJACK))
    losses = sum(1 for o in outcomes if o in (Outcome.LOSS, Outcome.BUST))

    if wins == losses:
        return 0, None

    round_type = StreakType.WIN if wins > losses else StreakType.LOSS
    if round_type == streak_type:
        return streak_count + 1, streak_type
    return 1, round_type
