"""Round events published to the presentation layer."""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

DEFAULT_HISTORY_LIMIT = 500


class EventType(str, Enum):
    """Types of round events. Values are the names sent to a UI."""

    # Round flow
    ROUND_STARTED = "round_started"
    ROUND_SETTLED = "round_settled"
    ROUND_RESET = "round_reset"

    # Bet ledger
    BET_PLACED = "bet_placed"
    BET_UNDONE = "bet_undone"
    BETS_CLEARED = "bets_cleared"
    BETS_REPLAYED = "bets_replayed"

    # Cards
    CARD_DEALT = "card_dealt"
    SHOE_SHUFFLED = "shoe_shuffled"
    SIDE_BETS_EVALUATED = "side_bets_evaluated"

    # Player
    PLAYER_HIT = "player_hit"
    PLAYER_STAND = "player_stand"
    PLAYER_DOUBLE = "player_double"
    PLAYER_SPLIT = "player_split"
    PLAYER_BLACKJACK = "player_blackjack"
    PLAYER_BUSTS = "player_busts"
    HAND_ADVANCED = "hand_advanced"

    # Insurance
    INSURANCE_OFFERED = "insurance_offered"
    INSURANCE_TAKEN = "insurance_taken"
    INSURANCE_DECLINED = "insurance_declined"

    # Dealer
    DEALER_HITS = "dealer_hits"
    DEALER_STANDS = "dealer_stands"
    DEALER_BUSTS = "dealer_busts"
    DEALER_BLACKJACK = "dealer_blackjack"

    # Rejections
    INVALID_ACTION = "invalid_action"
    INSUFFICIENT_FUNDS = "insufficient_funds"


@dataclass(frozen=True)
class GameEvent:
    """
    Immutable round event.

    ``data`` holds only JSON-friendly values (strings, numbers, lists) so an
    event can be forwarded to a UI as is.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.event_type.value,
            "data": dict(self.data),
            "timestamp": self.timestamp.isoformat(),
        }


EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Fans events out to subscribers and keeps a bounded history.

    Handlers registered for ``None`` receive every event, after the handlers
    registered for the event's own type.
    """

    def __init__(self, history_limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if history_limit < 1:
            raise ValueError("history_limit must be at least 1")
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._event_history: deque[GameEvent] = deque(maxlen=history_limit)

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """
        Subscribe to events.

        Args:
            handler: Function to call when event occurs
            event_type: Specific event type to subscribe to, or None for all events
        """
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """Remove a handler; unknown handlers are ignored."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: GameEvent) -> None:
        self._event_history.append(event)
        for handler in [*self._handlers.get(event.event_type, []), *self._handlers.get(None, [])]:
            handler(event)

    def emit_new(self, event_type: EventType, **data: Any) -> GameEvent:
        """Create and emit a new event."""
        event = GameEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        """Most recent events, oldest first."""
        return list(self._event_history)

    def clear_history(self) -> None:
        self._event_history.clear()
