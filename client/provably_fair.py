"""HTTP client for the provably fair session and account service."""

import logging
from decimal import Decimal
from typing import Any

import httpx
from pydantic import ValidationError

from client.schemas import (
    BalanceResponse,
    SaveRoundRequest,
    SaveRoundResponse,
    SessionStartResponse,
)
from config import ServiceConfig, config

logger = logging.getLogger(__name__)

SESSION_START_PATH = "/api/blackjack/session/start"
SAVE_ROUND_PATH = "/api/blackjack/game/save"
BALANCE_PATH = "/api/me"


class ServiceError(RuntimeError):
    """The remote service could not be reached or answered nonsense."""


class ProvablyFairClient:
    """
    Async client for the remote session, round persistence and balance endpoints.

    The table only takes the opaque game id from a started session; seeds
    are not used for shuffling.
    """

    def __init__(
        self,
        settings: ServiceConfig | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or config.service
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            base_url=self._settings.base_url,
            headers=self._settings.headers,
            timeout=self._settings.timeout,
        )

    async def __aenter__(self) -> "ProvablyFairClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._http.request(method, path, **kwargs)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ServiceError(f"{method} {path} failed: {exc}") from exc

    async def start_session(self) -> SessionStartResponse:
        """Open a provably fair session for the next round."""
        data = await self._request("POST", SESSION_START_PATH)
        try:
            session = SessionStartResponse.model_validate(data)
        except ValidationError as exc:
            raise ServiceError(f"Malformed session response: {exc}") from exc
        logger.info("Provably fair session started: %s", session.game_id)
        return session

    async def fetch_balance(self) -> Decimal:
        """Read the authoritative balance."""
        data = await self._request("GET", BALANCE_PATH)
        try:
            reply = BalanceResponse.model_validate(data)
        except ValidationError as exc:
            raise ServiceError(f"Malformed balance response: {exc}") from exc
        return Decimal(str(reply.balance))

    async def save_round(self, payload: SaveRoundRequest) -> SaveRoundResponse:
        """Persist one settled round under its session."""
        data = await self._request(
            "POST",
            SAVE_ROUND_PATH,
            json=payload.model_dump(by_alias=True, mode="json"),
        )
        try:
            reply = SaveRoundResponse.model_validate(data)
        except ValidationError as exc:
            raise ServiceError(f"Malformed save response: {exc}") from exc
        logger.info("Round saved for session %s", reply.game_id)
        return reply
