"""Request bodies accepted by the HTTP layer, plus the planner's trade intent."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from planner.models.types import Direction, Pubkey, Side


class TradeRequest(BaseModel):
    """Body of the buy/sell routes."""

    amount: Decimal = Field(gt=0, description="Amount in UI units of the token spent")
    user: Pubkey


class RedeemRequest(BaseModel):
    """Body of the redeem route."""

    user: Pubkey


class CreateProposalRequest(BaseModel):
    """Body of the proposal preflight route."""

    description_url: str = Field(alias="descriptionUrl", min_length=1)
    base_tokens_to_lp: Decimal = Field(alias="baseTokensToLP", gt=0)
    quote_tokens_to_lp: Decimal = Field(alias="quoteTokensToLP", gt=0)
    proposer: Pubkey | None = None

    model_config = {"populate_by_name": True}


class TradeIntent(BaseModel):
    """A fully specified trade: market, side, direction, size and trader."""

    market: str
    side: Side
    direction: Direction
    amount: Decimal
    user: str
