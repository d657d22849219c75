"""Hand evaluation and action legality for blackjack."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Iterator, NamedTuple, Sequence

from core.cards import Card
from core.sidebets import BetKind, SideBets, SideBetSnapshot, ZERO

DOUBLE_DOWN_TOTALS = (9, 10, 11)


class HandValue(NamedTuple):
    """Best total of a hand and whether an Ace still counts as 11."""

    total: int
    is_soft: bool


class Outcome(str, Enum):
    """Result of a player hand against the dealer."""

    WIN = "win"
    LOSS = "loss"
    PUSH = "push"
    BLACKJACK = "blackjack"
    BUST = "bust"


def hand_value(cards: Sequence[Card]) -> HandValue:
    """
    Calculate the best hand value.

    Every Ace starts at 11 and is demoted to 1, one at a time, while the
    total is over 21.
    """
    total = 0
    high_aces = 0

    for card in cards:
        if card.is_ace:
            high_aces += 1
        total += card.value

    while total > 21 and high_aces > 0:
        total -= 10
        high_aces -= 1

    return HandValue(total=total, is_soft=high_aces > 0)


def is_bust(cards: Sequence[Card]) -> bool:
    """Check if the cards total more than 21."""
    return hand_value(cards).total > 21


def is_blackjack(cards: Sequence[Card]) -> bool:
    """Check for a natural (21 with exactly 2 cards)."""
    return len(cards) == 2 and hand_value(cards).total == 21


def can_split(cards: Sequence[Card]) -> bool:
    """Two cards of identical rank; K-Q is not a pair even though both count 10."""
    return len(cards) == 2 and cards[0].rank == cards[1].rank


def can_double_down(cards: Sequence[Card]) -> bool:
    """Doubling is restricted to two-card hard 9, 10 and 11."""
    if len(cards) != 2:
        return False
    value = hand_value(cards)
    return value.total in DOUBLE_DOWN_TOTALS and not value.is_soft


def dealer_should_hit(cards: Sequence[Card]) -> bool:
    """Dealer hits 16 or less and soft 17; stands on hard 17 and soft 18+."""
    value = hand_value(cards)
    if value.total < 17:
        return True
    return value.total == 17 and value.is_soft


def evaluate_outcome(
    player_cards: Sequence[Card],
    dealer_cards: Sequence[Card],
    *,
    natural_allowed: bool = True,
) -> Outcome:
    """
    Compare a player hand with the dealer hand.

    A busted player hand is a plain LOSS here; callers that need the BUST
    label check ``is_bust`` first. ``natural_allowed`` is False for hands
    produced by a split, where a two-card 21 is not a blackjack.
    """
    player_bj = natural_allowed and is_blackjack(player_cards)
    dealer_bj = is_blackjack(dealer_cards)

    if player_bj and dealer_bj:
        return Outcome.PUSH
    if player_bj:
        return Outcome.BLACKJACK
    if dealer_bj:
        return Outcome.LOSS

    player_total = hand_value(player_cards).total
    dealer_total = hand_value(dealer_cards).total

    if player_total > 21:
        return Outcome.LOSS
    if dealer_total > 21:
        return Outcome.WIN
    if player_total > dealer_total:
        return Outcome.WIN
    if player_total < dealer_total:
        return Outcome.LOSS
    return Outcome.PUSH


@dataclass
class Hand:
    """A hand of cards together with the wagers riding on it."""

    cards: list[Card] = field(default_factory=list)
    main_bet: Decimal = ZERO
    side_bets: SideBets = field(default_factory=SideBets)
    bet_placement_order: list[tuple[BetKind, Decimal]] = field(default_factory=list)
    is_dealer_hand: bool = False
    is_split_hand: bool = False
    is_doubled: bool = False
    side_bet_snapshot: SideBetSnapshot | None = None

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def placed(self, kind: BetKind) -> Decimal:
        """Return the amount currently staked on ``kind``."""
        if kind == BetKind.MAIN:
            return self.main_bet
        return self.side_bets.get(kind)

    def stake(self, kind: BetKind, amount: Decimal) -> None:
        """Add ``amount`` (negative to remove) to the stake on ``kind``."""
        if kind == BetKind.MAIN:
            self.main_bet += amount
        else:
            self.side_bets.add(kind, amount)

    @property
    def total_staked(self) -> Decimal:
        return self.main_bet + self.side_bets.total

    @property
    def value(self) -> int:
        return hand_value(self.cards).total

    @property
    def is_soft(self) -> bool:
        return hand_value(self.cards).is_soft

    @property
    def is_blackjack(self) -> bool:
        """Naturals only count on hands that did not come from a split."""
        return not self.is_split_hand and is_blackjack(self.cards)

    @property
    def is_busted(self) -> bool:
        return is_bust(self.cards)

    @property
    def up_card(self) -> Card | None:
        """The first card dealt, which is the dealer's face-up card."""
        return self.cards[0] if self.cards else None

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        value = hand_value(self.cards)
        value_str = f"({value.total})"
        if value.is_soft:
            value_str = f"(soft {value.total})"
        if self.is_blackjack:
            value_str = "(BLACKJACK)"
        if self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value})"
