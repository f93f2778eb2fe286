"""API endpoints for the conditional market planner."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

import structlog
from fastapi import APIRouter, Depends

from planner.config import PlannerConfig
from planner.models.requests import CreateProposalRequest, RedeemRequest, TradeRequest
from planner.models.types import Direction, Side
from planner.service import MarketService, TradeResult, service_from_config

logger = structlog.get_logger()

router = APIRouter()


@lru_cache(maxsize=1)
def _default_service() -> MarketService:
    return service_from_config(PlannerConfig.from_env())


def get_service() -> MarketService:
    """Dependency provider for the market service.

    Override this in tests to inject a service over a fake chain:
        app.dependency_overrides[get_service] = lambda: service
    """
    return _default_service()


def _dump(model: Any) -> Any:
    return model.model_dump(mode="json", by_alias=True)


def _trade_response(result: TradeResult, message: str) -> dict[str, Any]:
    trade = result.trade
    return {
        "success": True,
        "withSplit": trade.with_split,
        "plan": _dump(trade.plan),
        "instructions": [_dump(ix) for ix in result.instructions],
        "amountIn": str(trade.amount_in),
        "expectedOutput": str(trade.expected_output),
        "minOutput": str(trade.min_output),
        "message": message,
    }


def _trade(
    service: MarketService,
    proposal_id: str,
    side: Side,
    direction: Direction,
    body: TradeRequest,
) -> dict[str, Any]:
    logger.info(
        "received_trade",
        proposal=proposal_id,
        side=side.value,
        direction=direction.value,
        amount=str(body.amount),
        user=body.user,
    )
    result = service.trade(proposal_id, side, direction, body.amount, body.user)
    verb = "Buy" if direction == Direction.BUY else "Sell"
    return _trade_response(result, f"{verb} in {side.value} market planned successfully")


@router.get("/daos")
def list_daos(service: MarketService = Depends(get_service)) -> dict[str, Any]:
    return {"success": True, "daos": [_dump(dao) for dao in service.list_daos()]}


@router.get("/daos/{dao_id}")
def get_dao(dao_id: str, service: MarketService = Depends(get_service)) -> dict[str, Any]:
    return {"success": True, "dao": _dump(service.get_dao(dao_id))}


@router.get("/daos/{dao_id}/proposals")
def list_proposals(dao_id: str, service: MarketService = Depends(get_service)) -> dict[str, Any]:
    proposals = service.list_proposals(dao_id)
    return {"success": True, "proposals": [_dump(p) for p in proposals]}


@router.post("/daos/{dao_id}/proposals")
def create_proposal(
    dao_id: str,
    body: CreateProposalRequest,
    service: MarketService = Depends(get_service),
) -> dict[str, Any]:
    """Check the proposer can fund a new proposal's liquidity.

    Only the balance preflight runs here; building and signing the
    proposal itself belongs to the wallet side.
    """
    preflight = service.check_proposal(
        dao_id,
        body.description_url,
        body.base_tokens_to_lp,
        body.quote_tokens_to_lp,
        body.proposer,
    )
    return {
        "success": True,
        **_dump(preflight),
        "message": "Balances sufficient for proposal creation",
    }


@router.get("/proposals/{proposal_id}")
def get_proposal(proposal_id: str, service: MarketService = Depends(get_service)) -> dict[str, Any]:
    return {"success": True, "proposal": _dump(service.get_proposal(proposal_id))}


@router.post("/proposals/{proposal_id}/buy-pass")
def buy_pass(
    proposal_id: str, body: TradeRequest, service: MarketService = Depends(get_service)
) -> dict[str, Any]:
    return _trade(service, proposal_id, Side.PASS, Direction.BUY, body)


@router.post("/proposals/{proposal_id}/sell-pass")
def sell_pass(
    proposal_id: str, body: TradeRequest, service: MarketService = Depends(get_service)
) -> dict[str, Any]:
    return _trade(service, proposal_id, Side.PASS, Direction.SELL, body)


@router.post("/proposals/{proposal_id}/buy-fail")
def buy_fail(
    proposal_id: str, body: TradeRequest, service: MarketService = Depends(get_service)
) -> dict[str, Any]:
    return _trade(service, proposal_id, Side.FAIL, Direction.BUY, body)


@router.post("/proposals/{proposal_id}/sell-fail")
def sell_fail(
    proposal_id: str, body: TradeRequest, service: MarketService = Depends(get_service)
) -> dict[str, Any]:
    return _trade(service, proposal_id, Side.FAIL, Direction.SELL, body)


@router.post("/proposals/{proposal_id}/redeem")
def redeem(
    proposal_id: str, body: RedeemRequest, service: MarketService = Depends(get_service)
) -> dict[str, Any]:
    logger.info("received_redeem", proposal=proposal_id, user=body.user)
    result = service.redeem(proposal_id, body.user)
    redemption = result.redemption
    return {
        "success": True,
        "plan": _dump(redemption.plan),
        "instructions": [_dump(ix) for ix in result.instructions],
        "baseBalance": str(redemption.base_balance),
        "quoteBalance": str(redemption.quote_balance),
        "baseConditional": str(redemption.base_conditional),
        "quoteConditional": str(redemption.quote_conditional),
        "message": "Redeem plan created successfully",
    }
