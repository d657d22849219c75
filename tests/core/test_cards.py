"""Tests for Card, shuffling and Shoe."""

from collections import Counter
from random import Random

import pytest
from hypothesis import given, settings, strategies as st

from core.cards import Card, Rank, Shoe, Suit, build_shoe, shuffle_cards


class TestCard:
    """Tests for the Card class."""

    def test_card_creation(self):
        card = Card(Rank.ACE, Suit.SPADES)
        assert card.rank == Rank.ACE
        assert card.suit == Suit.SPADES

    def test_card_immutability(self):
        """Test that cards are immutable."""
        card = Card(Rank.ACE, Suit.SPADES)
        with pytest.raises(AttributeError):
            card.rank = Rank.KING

    def test_card_value(self):
        """Test card blackjack values."""
        assert Card(Rank.TWO, Suit.HEARTS).value == 2
        assert Card(Rank.TEN, Suit.HEARTS).value == 10
        assert Card(Rank.JACK, Suit.HEARTS).value == 10
        assert Card(Rank.QUEEN, Suit.HEARTS).value == 10
        assert Card(Rank.KING, Suit.HEARTS).value == 10
        assert Card(Rank.ACE, Suit.HEARTS).value == 11

    def test_card_from_string(self):
        """Test creating cards from strings."""
        assert Card.from_string("AS") == Card(Rank.ACE, Suit.SPADES)
        assert Card.from_string("2H") == Card(Rank.TWO, Suit.HEARTS)
        assert Card.from_string("10D") == Card(Rank.TEN, Suit.DIAMONDS)
        assert Card.from_string("kc") == Card(Rank.KING, Suit.CLUBS)
        assert Card.from_string("7♥") == Card(Rank.SEVEN, Suit.HEARTS)

    @pytest.mark.parametrize("code", ["", "X", "1S", "11H", "AX"])
    def test_card_from_invalid_string(self, code):
        with pytest.raises(ValueError):
            Card.from_string(code)

    def test_card_str(self):
        assert str(Card(Rank.ACE, Suit.SPADES)) == "A♠"
        assert str(Card(Rank.TEN, Suit.HEARTS)) == "10♥"

    def test_identity_ignored_in_equality(self):
        """Copies of one card from different decks compare equal."""
        first = Card(Rank.SEVEN, Suit.HEARTS, card_id=3)
        second = Card(Rank.SEVEN, Suit.HEARTS, card_id=55)
        assert first == second
        assert len({first, second}) == 1

    def test_suit_colors(self):
        assert Suit.HEARTS.is_red
        assert Suit.DIAMONDS.is_red
        assert not Suit.CLUBS.is_red
        assert not Suit.SPADES.is_red


class TestBuildShoe:
    """Tests for shoe construction and shuffling."""

    def test_six_decks(self):
        cards = build_shoe(rng=Random(1))
        assert len(cards) == 312

    def test_each_card_six_times(self):
        counts = Counter((card.rank, card.suit) for card in build_shoe(rng=Random(1)))
        assert len(counts) == 52
        assert set(counts.values()) == {6}

    def test_card_ids_are_unique(self):
        cards = build_shoe(rng=Random(1))
        assert len({card.card_id for card in cards}) == 312

    def test_shuffle_changes_order(self):
        ordered = [Card(rank, suit) for suit in Suit for rank in Rank]
        assert shuffle_cards(ordered, Random(7)) != ordered

    def test_shuffle_does_not_mutate_input(self):
        ordered = [Card(rank, suit) for suit in Suit for rank in Rank]
        snapshot = list(ordered)
        shuffle_cards(ordered, Random(7))
        assert ordered == snapshot

    def test_same_seed_same_order(self):
        assert build_shoe(rng=Random(99)) == build_shoe(rng=Random(99))

    def test_default_source_is_system_random(self):
        """Without an injected source the CSPRNG is used."""
        assert len(build_shoe()) == 312

    @settings(max_examples=25)
    @given(seed=st.integers(min_value=0, max_value=2**32))
    def test_shuffle_is_permutation(self, seed):
        ordered = build_shoe(num_decks=1, rng=Random(0))
        shuffled = shuffle_cards(ordered, Random(seed))
        assert Counter(c.card_id for c in shuffled) == Counter(c.card_id for c in ordered)

    def test_invalid_deck_count(self):
        with pytest.raises(ValueError):
            build_shoe(num_decks=0)


class TestShoe:
    """Tests for the Shoe class."""

    def test_fresh_shoe(self, shoe):
        assert len(shoe) == 312
        assert shoe.total_cards == 312
        assert shoe.num_decks == 6

    def test_draw_pops_from_top(self):
        shoe = Shoe.from_cards([Card(Rank.TWO, Suit.CLUBS), Card(Rank.ACE, Suit.SPADES)])
        assert shoe.draw() == Card(Rank.ACE, Suit.SPADES)
        assert shoe.cards_remaining == 1

    def test_draw_empty_shoe(self):
        shoe = Shoe.from_cards([])
        with pytest.raises(IndexError):
            shoe.draw()

    def test_shuffle_refills(self, shoe):
        for _ in range(100):
            shoe.draw()
        shoe.shuffle()
        assert len(shoe) == 312
