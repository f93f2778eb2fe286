"""Pydantic models for conditional market planning."""

from planner.models.market import AmmPool, Dao, Market, ProposalState, TokenAccount, Vault
from planner.models.plan import (
    Operation,
    OperationKind,
    OperationPlan,
    ProposalPreflight,
    RedemptionPlan,
    RedeemOperation,
    SplitOperation,
    SplitPlan,
    SwapOperation,
    TradePlan,
)
from planner.models.requests import (
    CreateProposalRequest,
    RedeemRequest,
    TradeIntent,
    TradeRequest,
)
from planner.models.types import ChainAmount, Direction, Pubkey, Side, UiAmount

__all__ = [
    # Types
    "ChainAmount",
    "Direction",
    "Pubkey",
    "Side",
    "UiAmount",
    # Chain accounts
    "AmmPool",
    "Dao",
    "Market",
    "ProposalState",
    "TokenAccount",
    "Vault",
    # Plans
    "Operation",
    "OperationKind",
    "OperationPlan",
    "ProposalPreflight",
    "RedemptionPlan",
    "RedeemOperation",
    "SplitOperation",
    "SplitPlan",
    "SwapOperation",
    "TradePlan",
    # Requests
    "CreateProposalRequest",
    "RedeemRequest",
    "TradeIntent",
    "TradeRequest",
]
