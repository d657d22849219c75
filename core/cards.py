"""Card and Shoe classes - immutable card representations."""

from dataclasses import dataclass, field
from enum import Enum
from random import Random, SystemRandom
from typing import Iterable, Iterator

DECKS_PER_SHOE = 6
CARDS_PER_DECK = 52


class Suit(Enum):
    """Card suits, valued by their one-letter code."""

    HEARTS = "H"
    DIAMONDS = "D"
    CLUBS = "C"
    SPADES = "S"

    def __str__(self) -> str:
        return self.symbol

    @property
    def symbol(self) -> str:
        return _SUIT_SYMBOLS[self]

    @property
    def is_red(self) -> bool:
        """Hearts and diamonds are red, clubs and spades black."""
        return self in (Suit.HEARTS, Suit.DIAMONDS)


_SUIT_SYMBOLS = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}


class Rank(Enum):
    """Card ranks, valued by their position in the run A-2-...-K."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    def __str__(self) -> str:
        return _COURT_LABELS.get(self.value, str(self.value))

    @property
    def blackjack_value(self) -> int:
        """Ace counts 11 until a hand demotes it; court cards count 10."""
        if self is Rank.ACE:
            return 11
        return min(self.value, 10)

    @property
    def is_ace(self) -> bool:
        return self is Rank.ACE


_COURT_LABELS = {1: "A", 11: "J", 12: "Q", 13: "K"}

# Parse tables accept both letters and symbols
_RANK_CODES = {str(rank): rank for rank in Rank}
_RANK_CODES["T"] = Rank.TEN
_SUIT_CODES = {suit.value: suit for suit in Suit}
_SUIT_CODES.update({symbol: suit for suit, symbol in _SUIT_SYMBOLS.items()})


@dataclass(frozen=True, slots=True)
class Card:
    """
    Immutable playing card.

    ``card_id`` tells apart physical copies of the same card in a multi-deck
    shoe; it takes no part in equality or hashing.
    """

    rank: Rank
    suit: Suit
    card_id: int = field(default=0, compare=False)

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', '10h'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        if rank_str not in _RANK_CODES:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in _SUIT_CODES:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(_RANK_CODES[rank_str], _SUIT_CODES[suit_str])


def shuffle_cards(cards: list[Card], rng: Random | None = None) -> list[Card]:
    """
    Return a shuffled copy of ``cards`` using a Fisher-Yates pass.

    ``rng.randrange`` draws by rejection sampling, so every index in the
    range is equally likely. The default source is the operating system's
    CSPRNG.
    """
    rng = rng or SystemRandom()
    shuffled = list(cards)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def build_shoe(num_decks: int = DECKS_PER_SHOE, rng: Random | None = None) -> list[Card]:
    """Build ``num_decks`` concatenated 52-card decks and shuffle them."""
    if num_decks < 1:
        raise ValueError("Shoe must have at least 1 deck")

    cards: list[Card] = []
    for _ in range(num_decks):
        for suit in Suit:
            for rank in Rank:
                cards.append(Card(rank, suit, card_id=len(cards)))
    return shuffle_cards(cards, rng)


class Shoe:
    """A multi-deck shoe dealt from the top (end of the list)."""

    def __init__(
        self,
        num_decks: int = DECKS_PER_SHOE,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize and shuffle a fresh shoe.

        Args:
            num_decks: Number of decks in the shoe
            rng: Random source for shuffling (CSPRNG when omitted)
        """
        if num_decks < 1:
            raise ValueError("Shoe must have at least 1 deck")

        self._num_decks = num_decks
        self._rng = rng
        self._cards: list[Card] = []
        self.shuffle()

    @classmethod
    def from_cards(cls, cards: Iterable[Card], num_decks: int = DECKS_PER_SHOE) -> "Shoe":
        """Create a shoe holding exactly ``cards``; the last card is drawn first."""
        shoe = cls.__new__(cls)
        shoe._num_decks = num_decks
        shoe._rng = None
        shoe._cards = list(cards)
        return shoe

    def shuffle(self) -> None:
        """Replace the contents with a freshly built, shuffled shoe."""
        self._cards = build_shoe(self._num_decks, self._rng)

    def draw(self) -> Card:
        """Draw a card from the shoe."""
        if not self._cards:
            raise IndexError("Cannot draw from empty shoe")
        return self._cards.pop()

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self._cards)

    @property
    def total_cards(self) -> int:
        """Return the total number of cards in a full shoe."""
        return self._num_decks * CARDS_PER_DECK

    @property
    def num_decks(self) -> int:
        """Return the number of decks in the shoe."""
        return self._num_decks

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)
