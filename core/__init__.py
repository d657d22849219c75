"""Core blackjack engine - 100% UI-agnostic."""

from core.cards import Card, Shoe, Rank, Suit, build_shoe
from core.hand import Hand, HandValue, Outcome, hand_value
from core.rules import RuleSet
from core.sidebets import BetKind, SideBets

__all__ = [
    "Card",
    "Shoe",
    "Rank",
    "Suit",
    "build_shoe",
    "Hand",
    "HandValue",
    "Outcome",
    "hand_value",
    "RuleSet",
    "BetKind",
    "SideBets",
]
