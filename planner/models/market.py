"""Pydantic models for the on-chain accounts the planners read.

Field aliases follow the camelCase names the futarchy programs' clients use,
so snapshots exported from those clients validate as-is.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from planner.models.types import ChainAmount, Direction, Pubkey, Side


class ProposalState(str, Enum):
    """Resolution state of a proposal's conditional markets."""

    PENDING = "pending"
    PASSED = "passed"
    EXECUTED = "executed"
    FAILED = "failed"


class Dao(BaseModel):
    """A futarchy DAO and the token pair its proposals trade."""

    address: Pubkey
    token_mint: Pubkey = Field(alias="tokenMint")
    usdc_mint: Pubkey = Field(alias="usdcMint")
    pass_threshold_bps: int = Field(default=300, alias="passThresholdBps", ge=0, le=10_000)

    model_config = {"populate_by_name": True}


class Market(BaseModel):
    """A proposal: its paired conditional AMMs, its vaults and its state."""

    address: Pubkey
    dao: Pubkey
    question: Pubkey
    pass_amm: Pubkey = Field(alias="passAmm")
    fail_amm: Pubkey = Field(alias="failAmm")
    base_vault: Pubkey = Field(alias="baseVault")
    quote_vault: Pubkey = Field(alias="quoteVault")
    state: ProposalState = ProposalState.PENDING
    description_url: str | None = Field(default=None, alias="descriptionUrl")

    model_config = {"populate_by_name": True}

    @field_validator("state", mode="before")
    @classmethod
    def _normalize_state(cls, value: Any) -> Any:
        # Anchor enums serialise as {"executed": {}}; "rejected" is an older name for failed
        if isinstance(value, dict) and len(value) == 1:
            value = next(iter(value))
        if isinstance(value, str):
            value = value.lower()
            if value == "rejected":
                return ProposalState.FAILED
        return value

    def amm_for(self, side: Side) -> str:
        """Address of the conditional AMM for a side."""
        return self.pass_amm if side == Side.PASS else self.fail_amm


class Vault(BaseModel):
    """A conditional vault: one underlying mint, one conditional mint per outcome."""

    address: Pubkey
    underlying_mint: Pubkey = Field(alias="underlyingTokenMint")
    pass_mint: Pubkey = Field(alias="passMint")
    fail_mint: Pubkey = Field(alias="failMint")

    model_config = {"populate_by_name": True}

    @property
    def conditional_mints(self) -> tuple[str, str]:
        return self.pass_mint, self.fail_mint

    def conditional_mint(self, side: Side) -> str:
        return self.pass_mint if side == Side.PASS else self.fail_mint


class AmmPool(BaseModel):
    """A conditional constant-product pool.

    Reserves are integer amounts in chain precision.
    """

    address: Pubkey
    base_mint: Pubkey = Field(alias="baseMint")
    quote_mint: Pubkey = Field(alias="quoteMint")
    base_amount: ChainAmount = Field(alias="baseAmount")
    quote_amount: ChainAmount = Field(alias="quoteAmount")

    model_config = {"populate_by_name": True}

    def get_reserves(self, direction: Direction) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out).

        Buying spends quote for base; selling spends base for quote.
        """
        if direction == Direction.BUY:
            return self.quote_amount, self.base_amount
        return self.base_amount, self.quote_amount

    def input_mint(self, direction: Direction) -> str:
        return self.quote_mint if direction == Direction.BUY else self.base_mint

    def output_mint(self, direction: Direction) -> str:
        return self.base_mint if direction == Direction.BUY else self.quote_mint


class TokenAccount(BaseModel):
    """A user's token account for one mint."""

    address: Pubkey
    mint: Pubkey
    owner: Pubkey
    amount: ChainAmount

    model_config = {"populate_by_name": True}
