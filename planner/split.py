"""Split decision: how much spot to split before a conditional buy."""

from __future__ import annotations

import decimal
from decimal import Decimal

from planner.errors import InsufficientFunds
from planner.models.plan import SplitPlan
from planner.models.types import DECIMAL_CONTEXT, to_chain_amount


def plan_split(
    requested: Decimal,
    conditional_balance: Decimal,
    spot_balance: Decimal,
    decimals: int,
    leg: str = "quote",
) -> SplitPlan | None:
    """Decide whether spot tokens must be split to cover a conditional spend.

    Splitting A spot yields exactly A of each conditional token, so the
    shortfall is covered one-for-one.

    Args:
        requested: Conditional amount the trade spends (UI units)
        conditional_balance: Conditional tokens already held
        spot_balance: Spot tokens available to split
        decimals: Decimals of the spot mint, used for the chain amount
        leg: Name of the leg, reported on InsufficientFunds

    Returns:
        None when the conditional balance already covers the request,
        otherwise a SplitPlan whose chain amount is the shortfall rounded down.

    Raises:
        InsufficientFunds: If conditional_balance + spot_balance < requested
    """
    if requested <= conditional_balance:
        return None

    with decimal.localcontext(DECIMAL_CONTEXT):
        available = conditional_balance + spot_balance
        shortfall = requested - conditional_balance

    if available < requested:
        raise InsufficientFunds(
            leg=leg,
            requested=requested,
            available=available,
            balances={"conditional": conditional_balance, "spot": spot_balance},
        )

    return SplitPlan(shortfall=shortfall, amount=to_chain_amount(shortfall, decimals))


__all__ = ["plan_split"]
