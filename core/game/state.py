"""Round phase enumeration."""

from enum import Enum, auto


class GamePhase(Enum):
    """
    Round state machine phases.

    Flow: BETTING → PLAYING ⇄ INSURANCE → SETTLING → GAME_OVER → BETTING
    """

    # Bets are placed, undone and cleared
    BETTING = auto()

    # Player acts on the current hand
    PLAYING = auto()

    # Dealer shows an Ace; waiting on the insurance decision
    INSURANCE = auto()

    # Dealer draws and hands are compared
    SETTLING = auto()

    # Round settled, waiting for next round or redo
    GAME_OVER = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()

