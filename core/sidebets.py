"""Side bet evaluation: Perfect Pairs, 21+3 and Blazing Sevens.

Every evaluator looks only at the first two player cards and, where the
bet needs it, the dealer's up-card. Results are captured once right after
the initial deal as a ``SideBetSnapshot`` and never recomputed from the
live hand.

Multipliers include the returned stake: a 25:1 payout pays ``bet * 26``.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Sequence

from core.cards import Card, Rank

ZERO = Decimal("0")

# Perfect Pairs
PERFECT_PAIR = 26
COLORED_PAIR = 13
MIXED_PAIR = 6

# 21+3
SUITED_TRIPS = 101
STRAIGHT_FLUSH = 41
THREE_OF_A_KIND = 31
STRAIGHT = 11
FLUSH = 6

# Blazing Sevens
SUITED_SEVENS_WITH_DEALER = 1001
SUITED_PLAYER_SEVENS_WITH_DEALER = 501
THREE_SEVENS = 201
TWO_SUITED_SEVENS = 101
TWO_SEVENS = 51
ONE_SEVEN = 4


class BetKind(str, Enum):
    """The four wagers a player can place on a hand."""

    MAIN = "main"
    PERFECT_PAIRS = "perfectPairs"
    TWENTY_PLUS_THREE = "twentyPlusThree"
    BLAZING_SEVENS = "blazingSevens"

    @property
    def is_side_bet(self) -> bool:
        return self != BetKind.MAIN


SIDE_BET_KINDS = (
    BetKind.PERFECT_PAIRS,
    BetKind.TWENTY_PLUS_THREE,
    BetKind.BLAZING_SEVENS,
)


@dataclass
class SideBets:
    """Amounts staked on each side bet of a hand."""

    perfect_pairs: Decimal = ZERO
    twenty_plus_three: Decimal = ZERO
    blazing_sevens: Decimal = ZERO

    _FIELDS = {
        BetKind.PERFECT_PAIRS: "perfect_pairs",
        BetKind.TWENTY_PLUS_THREE: "twenty_plus_three",
        BetKind.BLAZING_SEVENS: "blazing_sevens",
    }

    def get(self, kind: BetKind) -> Decimal:
        return getattr(self, self._FIELDS[kind])

    def add(self, kind: BetKind, amount: Decimal) -> None:
        """Add ``amount`` (negative to remove) to the stake on ``kind``."""
        name = self._FIELDS[kind]
        setattr(self, name, getattr(self, name) + amount)

    @property
    def total(self) -> Decimal:
        return self.perfect_pairs + self.twenty_plus_three + self.blazing_sevens


def ratio_label(multiplier: int) -> str | None:
    """Human-readable odds for a multiplier that includes the stake, e.g. 26 -> '25:1'."""
    if multiplier <= 0:
        return None
    return f"{multiplier - 1}:1"


def _is_run(cards: Sequence[Card]) -> bool:
    """Three consecutive ranks. Ace only plays low, so Q-K-A is not a run."""
    values = sorted(card.rank.value for card in cards)
    return values[1] == values[0] + 1 and values[2] == values[1] + 1


def perfect_pairs_multiplier(player_cards: Sequence[Card]) -> int:
    """Perfect (same suit), colored (same color) or mixed pair on the first two cards."""
    if len(player_cards) < 2:
        return 0

    first, second = player_cards[0], player_cards[1]
    if first.rank != second.rank:
        return 0
    if first.suit == second.suit:
        return PERFECT_PAIR
    if first.suit.is_red == second.suit.is_red:
        return COLORED_PAIR
    return MIXED_PAIR


def twenty_plus_three_multiplier(player_cards: Sequence[Card], up_card: Card | None) -> int:
    """
    Poker hand formed by the first two player cards and the dealer up-card.

    Categories overlap, so they are checked most specific first.
    """
    if len(player_cards) < 2 or up_card is None:
        return 0

    three = [player_cards[0], player_cards[1], up_card]
    same_suit = len({card.suit for card in three}) == 1
    same_rank = len({card.rank for card in three}) == 1
    run = _is_run(three)

    if same_rank and same_suit:
        return SUITED_TRIPS
    if run and same_suit:
        return STRAIGHT_FLUSH
    if same_rank:
        return THREE_OF_A_KIND
    if same_suit:
        return FLUSH
    if run:
        return STRAIGHT
    return 0


def blazing_sevens_multiplier(player_cards: Sequence[Card], up_card: Card | None) -> int:
    """Sevens among the first two player cards, with the dealer's seven as a kicker."""
    if len(player_cards) < 2 or up_card is None:
        return 0

    first, second = player_cards[0], player_cards[1]
    player_sevens = sum(1 for card in (first, second) if card.rank == Rank.SEVEN)
    dealer_seven = up_card.rank == Rank.SEVEN

    if player_sevens == 2:
        suited = first.suit == second.suit
        if dealer_seven:
            if suited and up_card.suit == first.suit:
                return SUITED_SEVENS_WITH_DEALER
            if suited:
                return SUITED_PLAYER_SEVENS_WITH_DEALER
            return THREE_SEVENS
        return TWO_SUITED_SEVENS if suited else TWO_SEVENS
    if player_sevens == 1:
        return ONE_SEVEN
    return 0


@dataclass(frozen=True)
class SideBetResult:
    """Settled value of one side bet."""

    kind: BetKind
    bet: Decimal
    multiplier: int

    @property
    def payout(self) -> Decimal:
        return self.bet * self.multiplier

    @property
    def ratio(self) -> str | None:
        return ratio_label(self.multiplier) if self.bet > 0 else None

    @property
    def outcome(self) -> str | None:
        """'win' or 'loss' for a placed bet, None when nothing was staked."""
        if self.bet <= 0:
            return None
        return "win" if self.multiplier > 0 else "loss"


@dataclass(frozen=True)
class SideBetSnapshot:
    """Side bet results frozen at deal time."""

    results: tuple[SideBetResult, ...] = field(default_factory=tuple)

    def get(self, kind: BetKind) -> SideBetResult:
        for result in self.results:
            if result.kind == kind:
                return result
        return SideBetResult(kind=kind, bet=ZERO, multiplier=0)

    @property
    def total_payout(self) -> Decimal:
        return sum((result.payout for result in self.results), ZERO)

    @property
    def ratios(self) -> dict[BetKind, str | None]:
        return {result.kind: result.ratio for result in self.results if result.bet > 0}


def evaluate_side_bets(
    side_bets: SideBets,
    player_cards: Sequence[Card],
    up_card: Card | None,
) -> SideBetSnapshot:
    """Evaluate every side bet on a freshly dealt hand."""
    multipliers = {
        BetKind.PERFECT_PAIRS: perfect_pairs_multiplier(player_cards),
        BetKind.TWENTY_PLUS_THREE: twenty_plus_three_multiplier(player_cards, up_card),
        BetKind.BLAZING_SEVENS: blazing_sevens_multiplier(player_cards, up_card),
    }
    return SideBetSnapshot(
        results=tuple(
            SideBetResult(kind=kind, bet=side_bets.get(kind), multiplier=multipliers[kind])
            for kind in SIDE_BET_KINDS
        )
    )
