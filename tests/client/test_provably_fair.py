"""Tests for the provably fair service client."""

import json
from decimal import Decimal

import httpx
import pytest

from client.provably_fair import (
    BALANCE_PATH,
    SAVE_ROUND_PATH,
    SESSION_START_PATH,
    ProvablyFairClient,
    ServiceError,
)
from client.schemas import SaveRoundRequest
from core.game.results import BetSettlement, RoundResult
from core.sidebets import BetKind
from helpers import cards


def make_client(handler) -> ProvablyFairClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://fair.test")
    return ProvablyFairClient(http=http)


@pytest.fixture
def requests_seen():
    return []


@pytest.fixture
def settled_hand():
    return RoundResult(
        hand_index=0,
        player_cards=tuple(cards("7H", "7H")),
        dealer_cards=tuple(cards("9C", "8H")),
        player_total=14,
        dealer_total=17,
        settlements=(
            BetSettlement(BetKind.MAIN, Decimal("10.00"), "loss", Decimal("0.00")),
            BetSettlement(BetKind.PERFECT_PAIRS, Decimal("10.00"), "win", Decimal("260.00"), "25:1"),
            BetSettlement(BetKind.TWENTY_PLUS_THREE, Decimal("0.00"), None, Decimal("0.00")),
            BetSettlement(BetKind.BLAZING_SEVENS, Decimal("5.00"), "win", Decimal("255.00"), "50:1"),
        ),
        session_id="g-1",
    )


@pytest.mark.asyncio
async def test_start_session():
    """Test that a session start returns the opaque game id."""

    def handler(request):
        assert request.method == "POST"
        assert request.url.path == SESSION_START_PATH
        return httpx.Response(200, json={"gameId": "g-1", "serverHash": "abc", "blockHash": "def"})

    async with make_client(handler) as client:
        session = await client.start_session()

    assert session.game_id == "g-1"
    assert session.server_hash == "abc"


@pytest.mark.asyncio
async def test_start_session_server_error():
    def handler(request):
        return httpx.Response(503, json={"error": "down"})

    async with make_client(handler) as client:
        with pytest.raises(ServiceError):
            await client.start_session()


@pytest.mark.asyncio
async def test_start_session_malformed_body():
    def handler(request):
        return httpx.Response(200, json={"gameId": ""})

    async with make_client(handler) as client:
        with pytest.raises(ServiceError):
            await client.start_session()


@pytest.mark.asyncio
async def test_start_session_connection_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    async with make_client(handler) as client:
        with pytest.raises(ServiceError):
            await client.start_session()


@pytest.mark.asyncio
async def test_fetch_balance():
    def handler(request):
        assert request.url.path == BALANCE_PATH
        return httpx.Response(200, json={"balance": 123.45, "username": "alice"})

    async with make_client(handler) as client:
        balance = await client.fetch_balance()

    assert balance == Decimal("123.45")


@pytest.mark.asyncio
async def test_fetch_balance_not_json():
    def handler(request):
        return httpx.Response(200, text="<html>")

    async with make_client(handler) as client:
        with pytest.raises(ServiceError):
            await client.fetch_balance()


@pytest.mark.asyncio
async def test_save_round_sends_camel_case(requests_seen, settled_hand):
    """Test that the saved hand is posted with the service's field names."""

    def handler(request):
        requests_seen.append(json.loads(request.content))
        assert request.url.path == SAVE_ROUND_PATH
        return httpx.Response(200, json={"gameId": "g-1", "success": True})

    payload = SaveRoundRequest.from_result(settled_hand, "g-1", 1505.0)
    async with make_client(handler) as client:
        reply = await client.save_round(payload)

    assert reply.game_id == "g-1"
    body = requests_seen[0]
    assert body["gameId"] == "g-1"
    assert body["mainBet"] == 10.0
    assert body["mainResult"] == "loss"
    assert body["perfectPairsPayout"] == 260.0
    assert body["twentyPlusThreeResult"] is None
    assert body["blazingSevenResult"] == "win"
    assert body["blazingSevensPayout"] == 255.0
    assert body["playerCards"] == ["7♥", "7♥"]
    assert body["balance"] == 1505.0
    assert body["splitHands"] == []


@pytest.mark.asyncio
async def test_does_not_close_borrowed_client():
    http = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"balance": 1})),
        base_url="http://fair.test",
    )
    async with ProvablyFairClient(http=http):
        pass

    assert not http.is_closed
    await http.aclose()
