"""Card and table helpers shared by the tests."""

from decimal import Decimal

from core.cards import Card, Rank, Shoe, Suit
from core.game import BlackjackGame
from core.sidebets import BetKind

# Low cards that keep a rigged shoe above the reshuffle threshold. Dealt
# last, only if a test draws past the cards it stacked.
FILLER = [Card(Rank.TWO, Suit.CLUBS)] * 60


def cards(*codes: str) -> list[Card]:
    """Build cards from short codes, e.g. cards("AS", "KH")."""
    return [Card.from_string(code) for code in codes]


def rig(game: BlackjackGame, *codes: str) -> None:
    """
    Stack the shoe so the given cards come out in order.

    Deal order is: player card 1, player card 2, dealer up-card, dealer
    hole card, then any hits.
    """
    game.shoe = Shoe.from_cards(FILLER + list(reversed(cards(*codes))))


def bet(game: BlackjackGame, kind: BetKind, amount: str) -> bool:
    """Select a bet type, set the chip and place it."""
    game.select_bet_mode(kind)
    game.set_bet_amount(Decimal(amount))
    return game.place_bet()
