"""Operation plans and planner results.

A plan is an ordered list of abstract operations. It is consumed by an
operation builder and never executed here.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from planner.constants import MAX_PLAN_OPERATIONS, NUM_OUTCOMES
from planner.models.types import ChainAmount, Direction, Pubkey, Side, UiAmount


class OperationKind(str, Enum):
    SPLIT = "split"
    SWAP = "swap"
    REDEEM_BASE = "redeemBase"
    REDEEM_QUOTE = "redeemQuote"


class SplitOperation(BaseModel):
    """Split underlying tokens into one of each conditional token."""

    kind: Literal[OperationKind.SPLIT] = OperationKind.SPLIT
    vault: Pubkey
    question: Pubkey
    underlying_mint: Pubkey = Field(alias="underlyingMint")
    amount: ChainAmount
    num_outcomes: int = Field(default=NUM_OUTCOMES, alias="numOutcomes")
    authority: Pubkey

    model_config = {"populate_by_name": True}


class SwapOperation(BaseModel):
    """Exact-input swap against a conditional AMM."""

    kind: Literal[OperationKind.SWAP] = OperationKind.SWAP
    amm: Pubkey
    base_mint: Pubkey = Field(alias="baseMint")
    quote_mint: Pubkey = Field(alias="quoteMint")
    direction: Direction
    input_amount: ChainAmount = Field(alias="inputAmount")
    min_output_amount: ChainAmount = Field(alias="minOutputAmount")
    user: Pubkey

    model_config = {"populate_by_name": True}


class RedeemOperation(BaseModel):
    """Redeem a vault's conditional tokens for underlying after resolution.

    ``amount`` is the user's PASS plus FAIL holdings at planning time; it may be zero.
    """

    kind: Literal[OperationKind.REDEEM_BASE, OperationKind.REDEEM_QUOTE]
    vault: Pubkey
    question: Pubkey
    underlying_mint: Pubkey = Field(alias="underlyingMint")
    amount: ChainAmount
    num_outcomes: int = Field(default=NUM_OUTCOMES, alias="numOutcomes")
    user: Pubkey

    model_config = {"populate_by_name": True}


Operation = Annotated[
    SplitOperation | SwapOperation | RedeemOperation,
    Field(discriminator="kind"),
]


class OperationPlan(BaseModel):
    """Ordered operations; earlier entries must settle before later ones."""

    operations: list[Operation] = Field(default_factory=list, max_length=MAX_PLAN_OPERATIONS)

    @property
    def kinds(self) -> list[OperationKind]:
        return [op.kind for op in self.operations]

    @property
    def with_split(self) -> bool:
        return OperationKind.SPLIT in self.kinds


class SplitPlan(BaseModel):
    """Result of the split decision.

    Attributes:
        shortfall: requested - conditional balance, exact
        amount: shortfall in chain units, rounded down
    """

    shortfall: UiAmount
    amount: ChainAmount

    model_config = {"frozen": True}


class TradePlan(BaseModel):
    """Plan for a buy or sell in one conditional market."""

    market: Pubkey
    side: Side
    direction: Direction
    plan: OperationPlan
    amount: UiAmount
    amount_in: ChainAmount = Field(alias="amountIn")
    expected_output: ChainAmount = Field(alias="expectedOutput")
    min_output: ChainAmount = Field(alias="minOutput")
    split: SplitPlan | None = None

    model_config = {"populate_by_name": True}

    @property
    def with_split(self) -> bool:
        return self.plan.with_split


class RedemptionPlan(BaseModel):
    """Plan redeeming both legs of a resolved proposal."""

    market: Pubkey
    plan: OperationPlan
    base_balance: UiAmount = Field(alias="baseBalance")
    quote_balance: UiAmount = Field(alias="quoteBalance")
    base_conditional: UiAmount = Field(alias="baseConditional")
    quote_conditional: UiAmount = Field(alias="quoteConditional")

    model_config = {"populate_by_name": True}


class ProposalPreflight(BaseModel):
    """Outcome of the proposal-creation balance check."""

    dao: Pubkey
    proposer: Pubkey
    ok: bool = True
    required_base: ChainAmount = Field(alias="requiredBase")
    required_quote: ChainAmount = Field(alias="requiredQuote")

    model_config = {"populate_by_name": True}
