"""House rules for the side-bet blackjack table."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class RuleSet:
    """
    Table rules configuration.

    The defaults are the house-favorable variant the table runs: 6:5
    naturals, doubling on hard 9-11 only, a single split per round and
    dealer hitting soft 17.
    """

    # Shoe
    num_decks: int = 6
    reshuffle_below: int = 50

    # Split rules (1 split -> 2 hands)
    max_hands: int = 2

    # Insurance costs half the main bet
    insurance_fraction: Decimal = Decimal("0.5")

    # Round history kept for display
    history_size: int = 10

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.num_decks < 1 or self.num_decks > 8:
            raise ValueError("num_decks must be between 1 and 8")
        if self.reshuffle_below < 0 or self.reshuffle_below >= self.num_decks * 52:
            raise ValueError("reshuffle_below must leave cards to deal")
        if self.max_hands < 1:
            raise ValueError("max_hands must be at least 1")
        if self.history_size < 1:
            raise ValueError("history_size must be at least 1")
