"""Async table controller: the engine plus its remote collaborators."""

import asyncio
import logging
from decimal import Decimal
from random import Random
from typing import Any, Coroutine

from client.provably_fair import ProvablyFairClient, ServiceError
from client.schemas import SaveRoundRequest
from config import AppConfig, config
from core.game import BlackjackGame, GamePhase, RoundResult
from core.rules import RuleSet

logger = logging.getLogger(__name__)

MSG_SESSION_FAILED = "Could not start a provably fair session"


class TableController:
    """
    Drives one ``BlackjackGame`` for a UI.

    Deal waits for the remote session to start. Saving finished rounds and
    refreshing the balance run as background tasks so the engine never
    waits on the network.
    """

    def __init__(
        self,
        service: ProvablyFairClient,
        settings: AppConfig | None = None,
        rng: Random | None = None,
    ) -> None:
        self.service = service
        self.settings = settings or config
        self._rng = rng
        self._game: BlackjackGame | None = None
        self._recorded_rounds = 0
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def game(self) -> BlackjackGame:
        if self._game is None:
            raise RuntimeError("Table is not open; call open() first")
        return self._game

    async def open(self) -> BlackjackGame:
        """Read the authoritative balance once and seat a fresh game."""
        balance = await self.service.fetch_balance()
        self._game = BlackjackGame(
            rules=RuleSet(history_size=self.settings.game.history_size),
            initial_balance=balance,
            rng=self._rng,
            bet_amount=self.settings.game.default_bet_amount,
            require_session=self.settings.service.require_session,
        )
        self._recorded_rounds = 0
        logger.info("Table opened with balance %s", balance)
        return self._game

    async def deal(self) -> bool:
        """Start a provably fair session, then deal."""
        game = self.game
        primary = game.session.primary_hand
        if game.phase != GamePhase.BETTING or primary is None or primary.main_bet <= 0:
            return game.deal()

        if self.settings.service.require_session and game.session.fair_session_id is None:
            try:
                fair_session = await self.service.start_session()
            except ServiceError:
                return game.report_failure(MSG_SESSION_FAILED)
            game.attach_session(fair_session.game_id)

        dealt = game.deal()
        self._record_if_settled()
        return dealt

    async def act(self, action: str) -> bool:
        """Apply a player action by name and record the round if it settled."""
        game = self.game
        handlers = {
            "hit": game.hit,
            "stand": game.stand,
            "double": game.double_down,
            "split": game.split,
            "insurance": game.take_insurance,
            "decline_insurance": game.decline_insurance,
        }
        handler = handlers.get(action)
        if handler is None:
            return game.report_failure(f"Unknown action: {action}")

        applied = handler()
        self._record_if_settled()
        return applied

    async def reconcile_balance(self) -> bool:
        """Replace the local balance with the service's when no bets are out."""
        try:
            balance = await self.service.fetch_balance()
        except ServiceError:
            return False
        return self.game.set_balance(balance)

    async def drain(self) -> None:
        """Wait for outstanding background saves."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def _record_if_settled(self) -> None:
        game = self.game
        if game.session.rounds_settled == self._recorded_rounds:
            return
        self._recorded_rounds = game.session.rounds_settled

        session_id = game.session.fair_session_id
        if session_id is None:
            logger.debug("Round settled without a provably fair session; not saved")
            return
        self._spawn(self._save_round(game.last_round, session_id, game.balance))

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _save_round(
        self,
        results: list[RoundResult],
        session_id: str,
        balance: Decimal,
    ) -> None:
        payload = SaveRoundRequest.from_round(results, session_id, float(balance))
        try:
            await self.service.save_round(payload)
        except ServiceError as exc:
            logger.warning("Could not save round %s: %s", session_id, exc)
