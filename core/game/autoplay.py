"""Batch play: repeat the last bet composition for a number of rounds."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Literal

from core.sidebets import ZERO
from core.game.engine import BlackjackGame
from core.game.results import RoundResult
from core.game.state import GamePhase

logger = logging.getLogger(__name__)

Decision = Literal["hit", "stand", "double", "split"]
Policy = Callable[[BlackjackGame], Decision]

MSG_RESERVE_REACHED = "Autoplay stopped: reserve reached"


def dealer_mimic_policy(game: BlackjackGame) -> Decision:
    """Double when the table allows it, otherwise play like the dealer."""
    if game.can_double:
        return "double"
    hand = game.current_hand
    if hand is None or hand.value >= 17:
        return "stand"
    return "hit"


@dataclass
class AutoPlayReport:
    """What a batch run did."""

    rounds_played: int = 0
    results: list[RoundResult] = field(default_factory=list)
    stopped_reason: str | None = None

    @property
    def net(self) -> Decimal:
        return sum((r.total_payout - r.total_staked for r in self.results), ZERO)


class AutoPlay:
    """
    Plays whole rounds unattended by replaying ``last_bets``.

    Before each round the cost of the replayed bets is checked against the
    balance kept above ``reserve``; when the reserve would be breached the
    run stops without touching the balance. A double or split that would
    breach the reserve is played as a hit or stand instead.
    """

    def __init__(
        self,
        game: BlackjackGame,
        rounds: int,
        reserve: Decimal = ZERO,
        policy: Policy = dealer_mimic_policy,
    ) -> None:
        if rounds < 1:
            raise ValueError("rounds must be at least 1")
        if reserve < 0:
            raise ValueError("reserve must not be negative")
        self.game = game
        self.rounds = rounds
        self.reserve = Decimal(str(reserve))
        self.policy = policy

    def _round_cost(self) -> Decimal:
        last_bets = self.game.session.last_bets or {}
        return sum(last_bets.values(), ZERO)

    def _can_stake_again(self) -> bool:
        """Whether matching the current hand's main bet keeps the balance above the reserve."""
        hand = self.game.current_hand
        return hand is not None and self.game.balance - hand.main_bet >= self.reserve

    def _play_hands(self) -> None:
        game = self.game
        if game.phase == GamePhase.INSURANCE:
            game.decline_insurance()

        while game.phase == GamePhase.PLAYING:
            decision = self.policy(game)
            if decision in ("double", "split") and not self._can_stake_again():
                hand = game.current_hand
                decision = "hit" if hand is not None and hand.value < 17 else "stand"
            applied = {
                "hit": game.hit,
                "stand": game.stand,
                "double": game.double_down,
                "split": game.split,
            }[decision]()
            if not applied:
                game.stand()

    def run(self) -> AutoPlayReport:
        report = AutoPlayReport()
        game = self.game

        if game.session.last_bets is None:
            report.stopped_reason = "No previous bets to repeat"
            return report

        for _ in range(self.rounds):
            cost = self._round_cost()
            if game.balance - cost < self.reserve:
                report.stopped_reason = MSG_RESERVE_REACHED
                game.session.message = MSG_RESERVE_REACHED
                break

            if not game.redo_bet() or not game.deal():
                report.stopped_reason = game.message
                break

            self._play_hands()
            report.rounds_played += 1
            report.results.extend(game.last_round)

        logger.info(
            "Autoplay finished after %d rounds (%s)",
            report.rounds_played,
            report.stopped_reason or "completed",
        )
        return report
