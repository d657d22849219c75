"""Round engine and state management."""

from core.game.events import GameEvent, EventType
from core.game.state import GamePhase
from core.game.results import RoundResult, StreakType
from core.game.engine import BlackjackGame, Session
from core.game.autoplay import AutoPlay

__all__ = [
    "GameEvent",
    "EventType",
    "GamePhase",
    "RoundResult",
    "StreakType",
    "BlackjackGame",
    "Session",
    "AutoPlay",
]
