"""Pydantic schemas for the provably fair and account service."""

from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.game.results import RoundResult
from core.sidebets import BetKind


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionStartResponse(_CamelModel):
    """Reply to ``POST /api/blackjack/session/start``."""

    game_id: str = Field(..., min_length=1)
    server_hash: str
    block_hash: str


class BalanceResponse(BaseModel):
    """The part of ``GET /api/me`` the table needs."""

    model_config = ConfigDict(extra="ignore")

    balance: float = Field(..., ge=0)


class SplitHandRecord(_CamelModel):
    """Main bet result of a hand played after a split."""

    main_bet: float
    player_cards: list[str]
    player_total: int
    main_result: str
    main_payout: float

    @classmethod
    def from_result(cls, result: RoundResult) -> "SplitHandRecord":
        return cls(
            main_bet=float(result.main_bet),
            player_cards=[str(card) for card in result.player_cards],
            player_total=result.player_total,
            main_result=result.outcome.value,
            main_payout=float(result.payout),
        )


class SaveRoundRequest(_CamelModel):
    """Body of ``POST /api/blackjack/game/save`` for one settled round."""

    game_id: str
    main_bet: float
    perfect_pairs_bet: float
    twenty_plus_three_bet: float
    blazing_sevens_bet: float
    player_cards: list[str]
    dealer_cards: list[str]
    player_total: int
    dealer_total: int
    main_result: str
    main_payout: float
    perfect_pairs_result: str | None = None
    perfect_pairs_payout: float = 0
    twenty_plus_three_result: str | None = None
    twenty_plus_three_payout: float = 0
    blazing_seven_result: str | None = None
    blazing_sevens_payout: float = 0
    split_hands: list[SplitHandRecord] = Field(default_factory=list)
    balance: float

    @classmethod
    def from_result(cls, result: RoundResult, game_id: str, balance: float) -> "SaveRoundRequest":
        """Build the payload from a settled hand."""
        pp = result.get(BetKind.PERFECT_PAIRS)
        tpt = result.get(BetKind.TWENTY_PLUS_THREE)
        bs = result.get(BetKind.BLAZING_SEVENS)
        return cls(
            game_id=game_id,
            main_bet=float(result.main_bet),
            perfect_pairs_bet=float(pp.amount),
            twenty_plus_three_bet=float(tpt.amount),
            blazing_sevens_bet=float(bs.amount),
            player_cards=[str(card) for card in result.player_cards],
            dealer_cards=[str(card) for card in result.dealer_cards],
            player_total=result.player_total,
            dealer_total=result.dealer_total,
            main_result=result.outcome.value,
            main_payout=float(result.payout + result.insurance_payout),
            perfect_pairs_result=pp.outcome,
            perfect_pairs_payout=float(pp.payout),
            twenty_plus_three_result=tpt.outcome,
            twenty_plus_three_payout=float(tpt.payout),
            blazing_seven_result=bs.outcome,
            blazing_sevens_payout=float(bs.payout),
            balance=balance,
        )

    @classmethod
    def from_round(
        cls,
        results: Sequence[RoundResult],
        game_id: str,
        balance: float,
    ) -> "SaveRoundRequest":
        """
        Build a single payload for a whole round.

        The service keeps one record per game id, so a split round is folded
        into it: the first hand fills the card and result fields, the main bet
        and payout are totalled over every hand, and the later hands are listed
        under ``splitHands``.
        """
        first, *rest = results
        payload = cls.from_result(first, game_id, balance)
        if not rest:
            return payload
        return payload.model_copy(
            update={
                "main_bet": payload.main_bet + sum(float(r.main_bet) for r in rest),
                "main_payout": payload.main_payout + sum(float(r.payout) for r in rest),
                "split_hands": [SplitHandRecord.from_result(r) for r in rest],
            }
        )


class SaveRoundResponse(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    game_id: str
