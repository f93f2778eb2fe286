"""Planner error taxonomy.

Every failure the planners can produce is a PlannerError subclass with a
stable ``kind`` tag and structured fields, so callers branch on the type
and render messages from the fields instead of parsing strings.
"""

from __future__ import annotations

import decimal
from decimal import Decimal
from typing import Any

from planner.models.types import DECIMAL_CONTEXT


class PlannerError(Exception):
    """Base error for planning operations."""

    kind: str = "planner_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def context(self) -> dict[str, Any]:
        """Structured fields describing the failure."""
        return {}

    def to_dict(self) -> dict[str, Any]:
        """Serialisable form used by the HTTP layer."""
        payload: dict[str, Any] = {"error": self.kind, "message": self.message}
        for key, value in self.context().items():
            payload[key] = _jsonable(value)
        return payload


class ValidationError(PlannerError):
    """A request field is missing or malformed."""

    kind = "validation_error"

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Invalid {field}: {reason}")
        self.field = field
        self.reason = reason

    def context(self) -> dict[str, Any]:
        return {"field": self.field, "reason": self.reason}


class InsufficientFunds(PlannerError):
    """The user's aggregate balance is below the requested amount.

    Attributes:
        leg: Which token leg ran short (e.g. "pass_quote", "fail_base", "base")
        requested: Requested amount
        available: Amount the user can cover
        balances: Contributing balances by name
    """

    kind = "insufficient_funds"

    def __init__(
        self,
        leg: str,
        requested: Decimal | int,
        available: Decimal | int,
        balances: dict[str, Decimal | int] | None = None,
    ) -> None:
        super().__init__(
            f"Insufficient balance on {leg}: requested {requested}, available {available}"
        )
        self.leg = leg
        self.requested = requested
        self.available = available
        self.balances = dict(balances or {})

    @property
    def shortfall(self) -> Decimal | int:
        with decimal.localcontext(DECIMAL_CONTEXT):
            return self.requested - self.available

    def context(self) -> dict[str, Any]:
        return {
            "leg": self.leg,
            "requested": self.requested,
            "available": self.available,
            "shortfall": self.shortfall,
            "balances": self.balances,
        }


class AccountNotFound(PlannerError):
    """The user holds no token account for a required mint."""

    kind = "account_not_found"

    def __init__(self, owner: str, mint: str) -> None:
        super().__init__(f"No token account for mint {mint} owned by {owner}")
        self.owner = owner
        self.mint = mint

    def context(self) -> dict[str, Any]:
        return {"owner": self.owner, "mint": self.mint}


class NotFound(PlannerError):
    """A DAO, proposal, vault or pool does not exist."""

    kind = "not_found"

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity.capitalize()} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id

    def context(self) -> dict[str, Any]:
        return {"entity": self.entity, "id": self.entity_id}


class IlliquidPool(PlannerError):
    """An AMM reserve is zero, so no quote can be produced."""

    kind = "illiquid_pool"

    def __init__(self, reserve_in: int, reserve_out: int, pool: str | None = None) -> None:
        where = f"pool {pool}" if pool else "pool"
        super().__init__(
            f"Cannot quote against {where}: reserves in={reserve_in} out={reserve_out}"
        )
        self.pool = pool
        self.reserve_in = reserve_in
        self.reserve_out = reserve_out

    def context(self) -> dict[str, Any]:
        return {"pool": self.pool, "reserve_in": self.reserve_in, "reserve_out": self.reserve_out}


class InvalidState(PlannerError):
    """The market is not in the state the operation requires."""

    kind = "invalid_state"

    def __init__(self, market: str, state: str, required: str) -> None:
        super().__init__(f"Proposal {market} is {state}, must be {required}")
        self.market = market
        self.state = state
        self.required = required

    def context(self) -> dict[str, Any]:
        return {"market": self.market, "state": self.state, "required": self.required}


class NothingToRedeem(PlannerError):
    """Both redemption legs hold a zero balance."""

    kind = "nothing_to_redeem"

    def __init__(self, base_balance: Decimal, quote_balance: Decimal) -> None:
        super().__init__("No tokens to redeem")
        self.base_balance = base_balance
        self.quote_balance = quote_balance

    def context(self) -> dict[str, Any]:
        return {"base_balance": self.base_balance, "quote_balance": self.quote_balance}


class UpstreamUnavailable(PlannerError):
    """The chain state reader or operation builder failed."""

    kind = "upstream_unavailable"

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(f"Upstream call {operation} failed: {reason}")
        self.operation = operation
        self.reason = reason

    def context(self) -> dict[str, Any]:
        return {"operation": self.operation, "reason": self.reason}


def _jsonable(value: Any) -> Any:
    # Decimals go out as strings so no precision is lost in JSON
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    return value


__all__ = [
    "PlannerError",
    "ValidationError",
    "InsufficientFunds",
    "AccountNotFound",
    "NotFound",
    "IlliquidPool",
    "InvalidState",
    "NothingToRedeem",
    "UpstreamUnavailable",
]
