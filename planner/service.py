"""Service facade wiring planners to the injected chain collaborators.

The HTTP layer talks to MarketService only. Each call reads fresh chain
state, plans, and hands the plan to the operation builder.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from planner.amm.constant_product import ConstantProductAMM
from planner.chain.base import ChainStateReader, OperationBuilder, build_operations, guard
from planner.chain.instructions import DescriptorBuilder
from planner.chain.snapshot import SnapshotChainState
from planner.config import PlannerConfig
from planner.models.market import Dao, Market
from planner.models.plan import ProposalPreflight, RedemptionPlan, TradePlan
from planner.models.types import Direction, Side
from planner.proposals import ProposalPreflightChecker
from planner.redeem import RedemptionPlanner
from planner.trade import TradePlanner

logger = structlog.get_logger()


@dataclass
class TradeResult:
    """A trade plan and the instructions built from it."""

    trade: TradePlan
    instructions: list[Any]


@dataclass
class RedeemResult:
    """A redemption plan and the instructions built from it."""

    redemption: RedemptionPlan
    instructions: list[Any]


class MarketService:
    """Entry point for every request the API serves.

    Args:
        chain: Chain state reader
        builder: Operation builder (default: DescriptorBuilder)
        config: Planner configuration
        amm: Quote estimator override, mainly for tests
    """

    def __init__(
        self,
        chain: ChainStateReader,
        builder: OperationBuilder | None = None,
        config: PlannerConfig | None = None,
        amm: ConstantProductAMM | None = None,
    ) -> None:
        self.config = config if config is not None else PlannerConfig()
        self.chain = guard(chain)
        self.builder = builder if builder is not None else DescriptorBuilder()
        self.trades = TradePlanner(self.chain, amm=amm, config=self.config)
        self.redemptions = RedemptionPlanner(self.chain, config=self.config)
        self.preflight = ProposalPreflightChecker(self.chain, config=self.config)

    # --- Pass-through reads ---

    def list_daos(self) -> list[Dao]:
        return self.chain.list_daos()

    def get_dao(self, dao_id: str) -> Dao:
        return self.chain.get_dao(dao_id)

    def list_proposals(self, dao_id: str) -> list[Market]:
        # Unknown DAOs are NotFound rather than an empty list
        dao = self.chain.get_dao(dao_id)
        return self.chain.list_markets(dao.address)

    def get_proposal(self, proposal_id: str) -> Market:
        return self.chain.get_market(proposal_id)

    # --- Planning ---

    def trade(
        self, proposal_id: str, side: Side, direction: Direction, amount: Any, user: str
    ) -> TradeResult:
        if direction == Direction.BUY:
            plan = self.trades.plan_buy(proposal_id, side, amount, user)
        else:
            plan = self.trades.plan_sell(proposal_id, side, amount, user)
        instructions = build_operations(self.builder, plan.plan, user)
        return TradeResult(trade=plan, instructions=instructions)

    def redeem(self, proposal_id: str, user: str) -> RedeemResult:
        plan = self.redemptions.plan_redeem(proposal_id, user)
        instructions = build_operations(self.builder, plan.plan, user)
        return RedeemResult(redemption=plan, instructions=instructions)

    def check_proposal(
        self,
        dao_id: str,
        description_url: str,
        base_tokens_to_lp: Any,
        quote_tokens_to_lp: Any,
        proposer: str | None = None,
    ) -> ProposalPreflight:
        return self.preflight.check_proposal(
            dao_id, description_url, base_tokens_to_lp, quote_tokens_to_lp, proposer
        )


def service_from_config(config: PlannerConfig) -> MarketService:
    """Build a service over the configured snapshot.

    Raises:
        RuntimeError: If no snapshot path is configured
    """
    if config.snapshot_path is None:
        raise RuntimeError("PLANNER_SNAPSHOT_PATH is not set; no chain state to serve")
    chain = SnapshotChainState.from_file(config.snapshot_path)
    return MarketService(chain, config=config)


__all__ = ["MarketService", "TradeResult", "RedeemResult", "service_from_config"]
