"""Pytest fixtures for blackjack engine tests."""

from decimal import Decimal
from random import Random

import pytest

from core.cards import Card, Rank, Shoe, Suit
from core.game import BlackjackGame


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def shoe(rng):
    """A shuffled 6-deck shoe."""
    return Shoe(num_decks=6, rng=rng)


@pytest.fixture
def game(rng):
    """A new game with $1000."""
    return BlackjackGame(initial_balance=Decimal("1000"), rng=rng)


@pytest.fixture
def blackjack_cards():
    """A natural: A♠ K♥."""
    return [Card(Rank.ACE, Suit.SPADES), Card(Rank.KING, Suit.HEARTS)]


@pytest.fixture
def soft_17_cards():
    """A soft 17 (A-6)."""
    return [Card(Rank.ACE, Suit.SPADES), Card(Rank.SIX, Suit.HEARTS)]
