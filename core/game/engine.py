"""Blackjack round engine with state machine."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from random import Random
from typing import Any, Callable

from transitions import Machine

from core.cards import Card, Shoe
from core.hand import (
    Hand,
    Outcome,
    can_double_down,
    can_split,
    dealer_should_hit,
    evaluate_outcome,
    is_blackjack,
)
from core.payouts import calculate_payout, insurance_payout, main_ratio_label
from core.rules import RuleSet
from core.sidebets import (
    SIDE_BET_KINDS,
    ZERO,
    BetKind,
    SideBetSnapshot,
    evaluate_side_bets,
)
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.results import (
    BetSettlement,
    RoundResult,
    StreakType,
    to_cents,
    update_streak,
)
from core.game.state import GamePhase

logger = logging.getLogger(__name__)

DEFAULT_BET_AMOUNT = Decimal("5.00")

MSG_PLACE_BETS = "Place your bets"


def _to_decimal(amount: Any) -> Decimal | None:
    try:
        return Decimal(str(amount))
    except InvalidOperation:
        return None


@dataclass
class Session:
    """Everything that changes during play. Owned by one ``BlackjackGame``."""

    balance: Decimal
    shoe: Shoe
    player_hands: list[Hand] = field(default_factory=list)
    dealer_hand: Hand = field(default_factory=lambda: Hand(is_dealer_hand=True))
    current_hand_index: int = 0
    insurance_offered: bool = False
    insurance_bet: Decimal = ZERO
    bet_amount: Decimal = DEFAULT_BET_AMOUNT
    bet_placement_mode: BetKind | None = BetKind.MAIN
    last_bets: dict[BetKind, Decimal] | None = None
    current_deal_ratios: dict[BetKind, str | None] = field(default_factory=dict)
    round_history: list[RoundResult] = field(default_factory=list)
    last_round: list[RoundResult] = field(default_factory=list)
    rounds_settled: int = 0
    streak_count: int = 0
    streak_type: StreakType | None = None
    fair_session_id: str | None = None
    message: str = MSG_PLACE_BETS

    @property
    def current_hand(self) -> Hand | None:
        if 0 <= self.current_hand_index < len(self.player_hands):
            return self.player_hands[self.current_hand_index]
        return None

    @property
    def primary_hand(self) -> Hand | None:
        return self.player_hands[0] if self.player_hands else None


class BlackjackGame:
    """
    Multi-bet blackjack round engine.

    Owns the shoe, the hands and the bet ledger of a single player session.
    Commands return True when applied. A rejected command changes nothing,
    leaves its reason in ``message`` and emits an INVALID_ACTION or
    INSUFFICIENT_FUNDS event.
    """

    STATES = [p.name.lower() for p in GamePhase]

    TRANSITIONS = [
        {"trigger": "start_play", "source": "betting", "dest": "playing"},
        {"trigger": "offer_insurance", "source": "betting", "dest": "insurance"},
        {"trigger": "settle_natural", "source": "betting", "dest": "settling"},
        {"trigger": "resume_play", "source": "insurance", "dest": "playing"},
        {"trigger": "reveal_dealer_blackjack", "source": "insurance", "dest": "settling"},
        {"trigger": "advance_hand", "source": "playing", "dest": "playing"},
        {"trigger": "player_done", "source": "playing", "dest": "settling"},
        {"trigger": "close_round", "source": "settling", "dest": "game_over"},
        {"trigger": "open_betting", "source": "game_over", "dest": "betting"},
    ]

    def __init__(
        self,
        rules: RuleSet | None = None,
        initial_balance: Decimal = ZERO,
        rng: Random | None = None,
        bet_amount: Decimal = DEFAULT_BET_AMOUNT,
        require_session: bool = False,
    ) -> None:
        """
        Initialize a new game session.

        Args:
            rules: Table rules (house defaults if not provided)
            initial_balance: Balance read once from the account service
            rng: Random source for shuffling (system CSPRNG if not provided)
            bet_amount: Chip value used by ``place_bet``
            require_session: Refuse to deal until a provably fair session is attached
        """
        if initial_balance < 0:
            raise ValueError("initial_balance must not be negative")

        self.rules = rules or RuleSet()
        self.require_session = require_session
        self.default_bet_amount = Decimal(str(bet_amount))
        self.session = Session(
            balance=Decimal(str(initial_balance)),
            shoe=Shoe(num_decks=self.rules.num_decks, rng=rng),
            bet_amount=self.default_bet_amount,
        )
        self.events = EventEmitter()

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="betting",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def phase(self) -> GamePhase:
        """Get current phase as enum."""
        return GamePhase[self._machine_state.upper()]  # type: ignore[attr-defined]

    @property
    def balance(self) -> Decimal:
        return self.session.balance

    @property
    def message(self) -> str:
        """Last status or rejection message, for display."""
        return self.session.message

    @property
    def shoe(self) -> Shoe:
        return self.session.shoe

    @shoe.setter
    def shoe(self, shoe: Shoe) -> None:
        self.session.shoe = shoe

    @property
    def player_hands(self) -> list[Hand]:
        return self.session.player_hands

    @property
    def dealer_hand(self) -> Hand:
        return self.session.dealer_hand

    @property
    def current_hand(self) -> Hand | None:
        return self.session.current_hand

    @property
    def current_hand_index(self) -> int:
        return self.session.current_hand_index

    @property
    def dealer_showing(self) -> list[Card]:
        """Dealer cards visible to the player; the hole card stays hidden until settling."""
        if self.phase in (GamePhase.PLAYING, GamePhase.INSURANCE):
            return self.dealer_hand.cards[:1]
        return list(self.dealer_hand.cards)

    @property
    def round_history(self) -> list[RoundResult]:
        """Settled hands, newest first."""
        return list(self.session.round_history)

    @property
    def last_round(self) -> list[RoundResult]:
        """Results of the most recently settled round, in hand order."""
        return list(self.session.last_round)

    @property
    def streak(self) -> tuple[int, StreakType | None]:
        return self.session.streak_count, self.session.streak_type

    @property
    def current_deal_ratios(self) -> dict[BetKind, str | None]:
        return dict(self.session.current_deal_ratios)

    @property
    def insurance_cost(self) -> Decimal:
        hand = self.session.primary_hand
        if hand is None:
            return ZERO
        return hand.main_bet * self.rules.insurance_fraction

    @property
    def bets_on_table(self) -> Decimal:
        return sum((hand.total_staked for hand in self.player_hands), ZERO)

    @property
    def can_deal(self) -> bool:
        hand = self.session.primary_hand
        if self.phase != GamePhase.BETTING or hand is None or hand.main_bet <= 0:
            return False
        return not (self.require_session and self.session.fair_session_id is None)

    @property
    def can_undo(self) -> bool:
        hand = self.session.primary_hand
        return self.phase == GamePhase.BETTING and hand is not None and bool(hand.bet_placement_order)

    @property
    def can_redo(self) -> bool:
        last_bets = self.session.last_bets
        if last_bets is None:
            return False
        if self.phase == GamePhase.BETTING and self.player_hands:
            return False
        if self.phase not in (GamePhase.BETTING, GamePhase.GAME_OVER):
            return False
        return sum(last_bets.values(), ZERO) <= self.balance

    @property
    def can_hit(self) -> bool:
        """Check if hitting is allowed."""
        if self.phase != GamePhase.PLAYING:
            return False
        hand = self.current_hand
        return hand is not None and not hand.is_busted

    @property
    def can_stand(self) -> bool:
        return self.phase == GamePhase.PLAYING and self.current_hand is not None

    @property
    def can_double(self) -> bool:
        """Check if doubling is allowed."""
        if self.phase != GamePhase.PLAYING:
            return False
        hand = self.current_hand
        if hand is None or not can_double_down(hand.cards):
            return False
        return hand.main_bet <= self.balance

    @property
    def can_split(self) -> bool:
        """Check if splitting is allowed."""
        if self.phase != GamePhase.PLAYING:
            return False
        hand = self.current_hand
        if hand is None or not can_split(hand.cards):
            return False
        if len(self.player_hands) >= self.rules.max_hands:
            return False
        return hand.main_bet <= self.balance

    @property
    def can_insure(self) -> bool:
        """Check if insurance is available."""
        return self.phase == GamePhase.INSURANCE and self.insurance_cost <= self.balance

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _say(self, message: str) -> None:
        self.session.message = message

    def report_failure(self, message: str) -> bool:
        """Surface a failure from outside the engine (e.g. a collaborator) as a rejection."""
        return self._reject(message)

    def _reject(
        self,
        message: str,
        event_type: EventType = EventType.INVALID_ACTION,
        **data: Any,
    ) -> bool:
        """Record why a command was refused. Never touches the session otherwise."""
        self._say(message)
        logger.debug("Rejected in %s: %s", self.phase.name, message)
        self.events.emit_new(event_type, message=message, phase=self.phase.name, **data)
        return False

    def _draw_to(self, hand: Hand, face_up: bool = True) -> Card:
        card = self.shoe.draw()
        hand.add_card(card)
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card) if face_up else "??",
            hand="dealer" if hand.is_dealer_hand else "player",
            hand_value=hand.value if face_up else None,
        )
        return card

    # ------------------------------------------------------------------
    # Betting
    # ------------------------------------------------------------------

    def set_bet_amount(self, amount: Decimal | int | str) -> bool:
        """Set the chip value used by the next ``place_bet``."""
        value = _to_decimal(amount)
        if value is None or not value.is_finite() or value <= 0:
            return self._reject("Bet amount must be positive")
        self.session.bet_amount = value
        return True

    def select_bet_mode(self, mode: BetKind | str) -> bool:
        """Choose which wager ``place_bet`` adds to; resets the chip value."""
        try:
            kind = BetKind(mode)
        except ValueError:
            return self._reject(f"Unknown bet type: {mode}")
        self.session.bet_placement_mode = kind
        self.session.bet_amount = self.default_bet_amount
        return True

    def place_bet(self) -> bool:
        """Stake the current chip value on the selected wager of the primary hand."""
        if self.phase != GamePhase.BETTING:
            return self._reject("Bets are closed")

        kind = self.session.bet_placement_mode
        if kind is None:
            return self._reject("Select a bet type first")

        amount = self.session.bet_amount
        if amount > self.balance:
            return self._reject(
                "Insufficient balance",
                EventType.INSUFFICIENT_FUNDS,
                required=str(amount),
                available=str(self.balance),
            )

        hand = self.session.primary_hand
        if kind.is_side_bet and (hand is None or hand.main_bet <= 0):
            return self._reject("Place main bet first")

        if hand is None:
            hand = Hand()
            self.session.player_hands = [hand]

        hand.stake(kind, amount)
        hand.bet_placement_order.append((kind, amount))
        self.session.balance -= amount
        self._say("Bet placed")

        self.events.emit_new(EventType.BET_PLACED, kind=kind.value, amount=str(amount))
        return True

    def undo_bet(self) -> bool:
        """Take back the most recently placed chip."""
        if self.phase != GamePhase.BETTING:
            return self._reject("Bets are closed")

        hand = self.session.primary_hand
        if hand is None or not hand.bet_placement_order:
            return self._reject("Nothing to undo")

        kind, amount = hand.bet_placement_order.pop()
        hand.stake(kind, -amount)
        self.session.balance += amount
        if not hand.bet_placement_order:
            self.session.player_hands = []

        self.events.emit_new(EventType.BET_UNDONE, kind=kind.value, amount=str(amount))
        return True

    def clear_bets(self) -> bool:
        """Return every placed amount to the balance."""
        if self.phase != GamePhase.BETTING:
            return self._reject("Bets are closed")

        refund = self.bets_on_table
        self.session.player_hands = []
        self.session.balance += refund
        self._say(MSG_PLACE_BETS)

        self.events.emit_new(EventType.BETS_CLEARED, amount=str(refund))
        return True

    def redo_bet(self) -> bool:
        """Replay the previous round's bet composition."""
        last_bets = self.session.last_bets
        if last_bets is None:
            return self._reject("No previous bets to repeat")

        if self.phase == GamePhase.BETTING:
            if self.player_hands:
                return self._reject("Bets already placed")
        elif self.phase != GamePhase.GAME_OVER:
            return self._reject("Bets are closed")

        total = sum(last_bets.values(), ZERO)
        if total > self.balance:
            return self._reject(
                "Insufficient balance for redo",
                EventType.INSUFFICIENT_FUNDS,
                required=str(total),
                available=str(self.balance),
            )

        if self.phase == GamePhase.GAME_OVER:
            self.reset_game()

        hand = Hand()
        for kind in (BetKind.MAIN, *SIDE_BET_KINDS):
            amount = last_bets.get(kind, ZERO)
            if amount > 0:
                hand.stake(kind, amount)
                hand.bet_placement_order.append((kind, amount))

        self.session.player_hands = [hand]
        self.session.balance -= total
        self._say("Bets placed")

        self.events.emit_new(EventType.BETS_REPLAYED, amount=str(total))
        return True

    def attach_session(self, session_id: str) -> bool:
        """Attach the provably fair session the next round is recorded under."""
        if self.phase != GamePhase.BETTING:
            return self._reject("Session can only change between rounds")
        self.session.fair_session_id = session_id
        return True

    def set_balance(self, amount: Decimal) -> bool:
        """Replace the local balance with the authoritative one between rounds."""
        if self.phase not in (GamePhase.BETTING, GamePhase.GAME_OVER) or (
            self.phase == GamePhase.BETTING and self.player_hands
        ):
            return self._reject("Balance can only be synced with no bets on the table")
        if amount < 0:
            return self._reject("Balance must not be negative")
        self.session.balance = Decimal(str(amount))
        return True

    # ------------------------------------------------------------------
    # Dealing
    # ------------------------------------------------------------------

    def deal(self) -> bool:
        """Deal the opening cards and freeze the side bet evaluations."""
        if self.phase != GamePhase.BETTING:
            return self._reject("Round already in progress")

        primary = self.session.primary_hand
        if primary is None or primary.main_bet <= 0:
            return self._reject("Place a bet first")

        if self.require_session and self.session.fair_session_id is None:
            return self._reject("Provably fair session not started")

        if self.shoe.cards_remaining < self.rules.reshuffle_below:
            self.shoe.shuffle()
            logger.info("Shoe reshuffled (%d cards)", self.shoe.cards_remaining)
            self.events.emit_new(EventType.SHOE_SHUFFLED, cards=self.shoe.cards_remaining)

        self.session.last_bets = {
            BetKind.MAIN: primary.main_bet,
            **{kind: primary.side_bets.get(kind) for kind in SIDE_BET_KINDS},
        }

        for hand in self.player_hands:
            hand.cards = []
            self._draw_to(hand)
            self._draw_to(hand)

        dealer = Hand(is_dealer_hand=True)
        self.session.dealer_hand = dealer
        self._draw_to(dealer)
        self._draw_to(dealer, face_up=False)

        up_card = dealer.up_card
        for hand in self.player_hands:
            hand.side_bet_snapshot = evaluate_side_bets(hand.side_bets, hand.cards, up_card)
        self.session.current_deal_ratios = primary.side_bet_snapshot.ratios
        self.session.current_hand_index = 0

        self.events.emit_new(
            EventType.ROUND_STARTED,
            player=[str(card) for card in primary.cards],
            dealer_showing=str(up_card),
        )
        if primary.side_bets.total > 0:
            self.events.emit_new(
                EventType.SIDE_BETS_EVALUATED,
                ratios={kind.value: ratio for kind, ratio in self.current_deal_ratios.items()},
            )

        if up_card is not None and up_card.is_ace:
            self.session.insurance_offered = True
            self.offer_insurance()
            self._say("Insurance offered")
            self.events.emit_new(EventType.INSURANCE_OFFERED, cost=str(self.insurance_cost))
            return True

        if any(hand.is_blackjack for hand in self.player_hands):
            self.settle_natural()
            self._say("Blackjack!")
            self.events.emit_new(EventType.PLAYER_BLACKJACK)
            self._settle()
            return True

        self.start_play()
        self._say("Your turn")
        return True

    # ------------------------------------------------------------------
    # Insurance
    # ------------------------------------------------------------------

    def take_insurance(self) -> bool:
        """Stake half the main bet against a dealer natural."""
        if self.phase != GamePhase.INSURANCE:
            return self._reject("Insurance is not on offer")

        cost = self.insurance_cost
        if cost > self.balance:
            return self._reject(
                "Insufficient balance for insurance",
                EventType.INSUFFICIENT_FUNDS,
                required=str(cost),
                available=str(self.balance),
            )

        self.session.balance -= cost
        self.session.insurance_bet = cost
        self.session.insurance_offered = False
        self._say("Insurance taken")
        self.events.emit_new(EventType.INSURANCE_TAKEN, amount=str(cost))
        return self._resolve_insurance()

    def decline_insurance(self) -> bool:
        if self.phase != GamePhase.INSURANCE:
            return self._reject("Insurance is not on offer")

        self.session.insurance_offered = False
        self.events.emit_new(EventType.INSURANCE_DECLINED)
        return self._resolve_insurance()

    def _resolve_insurance(self) -> bool:
        if is_blackjack(self.dealer_hand.cards):
            self.reveal_dealer_blackjack()
            self._say("Dealer has Blackjack!")
            self.events.emit_new(EventType.DEALER_BLACKJACK)
            self._settle()
            return True

        self.resume_play()
        self._say("Your turn")
        hand = self.current_hand
        if hand is not None and hand.value == 21:
            self._advance()
        return True

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------

    def hit(self) -> bool:
        """Player takes another card."""
        if not self.can_hit:
            return self._reject("Cannot hit now")

        hand = self.current_hand
        self._draw_to(hand)
        self.events.emit_new(EventType.PLAYER_HIT, hand_value=hand.value)

        if hand.is_busted:
            self._say("Bust!")
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_index=self.current_hand_index)
            self._advance()
        elif hand.value == 21:
            self._say("21!")
            self._advance()
        return True

    def stand(self) -> bool:
        """Player keeps the current hand."""
        if not self.can_stand:
            return self._reject("Cannot stand now")

        self.events.emit_new(EventType.PLAYER_STAND, hand_value=self.current_hand.value)
        self._advance()
        return True

    def double_down(self) -> bool:
        """Double the main bet, draw exactly one card and stand."""
        if self.phase != GamePhase.PLAYING:
            return self._reject("Cannot double down now")

        hand = self.current_hand
        if hand is None or not can_double_down(hand.cards):
            return self._reject("Cannot double down")

        bet = hand.main_bet
        if bet > self.balance:
            return self._reject(
                "Insufficient balance to double",
                EventType.INSUFFICIENT_FUNDS,
                required=str(bet),
                available=str(self.balance),
            )

        self.session.balance -= bet
        hand.stake(BetKind.MAIN, bet)
        hand.bet_placement_order.append((BetKind.MAIN, bet))
        hand.is_doubled = True

        self._draw_to(hand)
        self.events.emit_new(EventType.PLAYER_DOUBLE, hand_value=hand.value, new_bet=str(hand.main_bet))

        if hand.is_busted:
            self._say("Bust!")
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_index=self.current_hand_index)
        self._advance()
        return True

    def split(self) -> bool:
        """Split a pair into two hands, each receiving one new card."""
        if self.phase != GamePhase.PLAYING:
            return self._reject("Cannot split now")

        hand = self.current_hand
        if hand is None or not can_split(hand.cards):
            return self._reject("Cannot split")

        if len(self.player_hands) >= self.rules.max_hands:
            return self._reject("Only one split per round")

        bet = hand.main_bet
        if bet > self.balance:
            return self._reject(
                "Insufficient balance to split",
                EventType.INSUFFICIENT_FUNDS,
                required=str(bet),
                available=str(self.balance),
            )

        self.session.balance -= bet

        first, second = hand.cards
        hand.cards = [first]
        hand.is_split_hand = True

        # Side bets stay with the first hand only
        new_hand = Hand(
            cards=[second],
            main_bet=bet,
            bet_placement_order=[(BetKind.MAIN, bet)],
            is_split_hand=True,
            side_bet_snapshot=SideBetSnapshot(),
        )
        self.session.player_hands.insert(self.current_hand_index + 1, new_hand)

        self._draw_to(hand)
        self._draw_to(new_hand)

        self._say("Hand split")
        self.events.emit_new(
            EventType.PLAYER_SPLIT,
            hand1_value=hand.value,
            hand2_value=new_hand.value,
        )
        return True

    def _advance(self) -> None:
        """Move to the next hand, or hand over to the dealer."""
        if self.session.current_hand_index < len(self.player_hands) - 1:
            self.session.current_hand_index += 1
            self.advance_hand()
            self._say("Next hand")
            self.events.emit_new(EventType.HAND_ADVANCED, hand_index=self.current_hand_index)
            return

        self.player_done()
        self._play_dealer()
        self._settle()

    def _play_dealer(self) -> None:
        """Dealer draws out, unless every player hand has already busted."""
        dealer = self.dealer_hand
        if all(hand.is_busted for hand in self.player_hands):
            return

        while dealer_should_hit(dealer.cards):
            self._draw_to(dealer)
            self.events.emit_new(EventType.DEALER_HITS, hand_value=dealer.value)

        if dealer.is_busted:
            self.events.emit_new(EventType.DEALER_BUSTS)
        else:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=dealer.value)

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    def _settle(self) -> None:
        """Pay every wager, record history and move to GAME_OVER."""
        dealer = self.dealer_hand
        dealer_bj = is_blackjack(dealer.cards)
        dealer_cards = tuple(dealer.cards)
        session_id = self.session.fair_session_id

        results: list[RoundResult] = []
        for index, hand in enumerate(self.player_hands):
            if hand.is_busted:
                outcome = Outcome.BUST
            else:
                outcome = evaluate_outcome(
                    hand.cards, dealer.cards, natural_allowed=not hand.is_split_hand
                )

            settlements = [
                BetSettlement(
                    kind=BetKind.MAIN,
                    amount=to_cents(hand.main_bet),
                    outcome=outcome.value,
                    payout=to_cents(calculate_payout(outcome, hand.main_bet)),
                    ratio=main_ratio_label(outcome),
                )
            ]
            snapshot = hand.side_bet_snapshot or SideBetSnapshot()
            for kind in SIDE_BET_KINDS:
                side = snapshot.get(kind)
                settlements.append(
                    BetSettlement(
                        kind=kind,
                        amount=to_cents(side.bet),
                        outcome=side.outcome,
                        payout=to_cents(side.payout),
                        ratio=side.ratio,
                    )
                )

            insurance_bet = self.session.insurance_bet if index == 0 else ZERO
            results.append(
                RoundResult(
                    hand_index=index,
                    player_cards=tuple(hand.cards),
                    dealer_cards=dealer_cards,
                    player_total=hand.value,
                    dealer_total=dealer.value,
                    settlements=tuple(settlements),
                    insurance_bet=to_cents(insurance_bet),
                    insurance_payout=to_cents(insurance_payout(insurance_bet, dealer_bj)),
                    session_id=session_id,
                )
            )

        total_payout = sum((result.total_payout for result in results), ZERO)
        self.session.balance = max(ZERO, self.session.balance + total_payout)

        self.session.streak_count, self.session.streak_type = update_streak(
            [result.outcome for result in results],
            self.session.streak_count,
            self.session.streak_type,
        )
        history = results + self.session.round_history
        self.session.round_history = history[: self.rules.history_size]
        self.session.last_round = results
        self.session.rounds_settled += 1

        self.close_round()
        self._say(f"Round over. Balance: ${self.balance:.2f}")
        logger.info(
            "Round settled: %s paid %s, balance %s",
            ", ".join(result.outcome.value for result in results),
            total_payout,
            self.balance,
        )
        self.events.emit_new(
            EventType.ROUND_SETTLED,
            outcomes=[result.outcome.value for result in results],
            payout=str(total_payout),
            balance=str(self.balance),
        )

    def reset_game(self) -> bool:
        """Clear the table and open betting for the next round."""
        if self.phase != GamePhase.GAME_OVER:
            return self._reject("Round not finished")

        session = self.session
        session.player_hands = []
        session.dealer_hand = Hand(is_dealer_hand=True)
        session.current_hand_index = 0
        session.insurance_offered = False
        session.insurance_bet = ZERO
        session.bet_placement_mode = BetKind.MAIN
        session.current_deal_ratios = {}
        session.fair_session_id = None

        self.open_betting()
        self._say(MSG_PLACE_BETS)
        self.events.emit_new(EventType.ROUND_RESET)
        return True
