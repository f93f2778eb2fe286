"""Trade planning for conditional markets.

A buy spends the side's conditional quote token (e.g. pUSDC) for its
conditional base token. When the user holds too little conditional quote,
spot quote is split first, so the plan is [split, swap]. A sell spends
conditional base the user already holds and never needs a split.

Plans are computed from a read-time snapshot of balances and reserves;
they are advisory until the execution layer settles them.
"""

from __future__ import annotations

import decimal
from decimal import Decimal
from typing import Any

import structlog

from planner.amm.constant_product import ConstantProductAMM, constant_product
from planner.balances import BalanceAggregator
from planner.chain.base import ChainStateReader, guard
from planner.config import DEFAULT_CONFIG, PlannerConfig
from planner.errors import AccountNotFound, InsufficientFunds, ValidationError
from planner.models.plan import OperationPlan, SplitOperation, SwapOperation, TradePlan
from planner.models.requests import TradeIntent
from planner.models.types import (
    DECIMAL_CONTEXT,
    Direction,
    Side,
    to_chain_amount,
    to_ui_amount,
)
from planner.safe_int import S
from planner.split import plan_split
from planner.validation import validate_amount, validate_choice, validate_pubkey

logger = structlog.get_logger()


class TradePlanner:
    """Builds buy and sell plans for one side of a proposal.

    Args:
        chain: Chain state reader; wrapped so collaborator failures surface
            as UpstreamUnavailable
        amm: Quote estimator (default: the constant-product singleton)
        config: Slippage and outcome settings
    """

    def __init__(
        self,
        chain: ChainStateReader,
        amm: ConstantProductAMM | None = None,
        config: PlannerConfig | None = None,
    ) -> None:
        self.chain = guard(chain)
        self.balances = BalanceAggregator(self.chain)
        self.amm = amm if amm is not None else constant_product
        self.config = config if config is not None else DEFAULT_CONFIG

    def plan(self, intent: TradeIntent) -> TradePlan:
        """Dispatch an intent to plan_buy or plan_sell."""
        if intent.direction == Direction.BUY:
            return self.plan_buy(intent.market, intent.side, intent.amount, intent.user)
        return self.plan_sell(intent.market, intent.side, intent.amount, intent.user)

    def plan_buy(self, market_id: str, side: Side | str, amount: Any, user: str) -> TradePlan:
        """Plan buying the side's conditional base token with ``amount`` quote.

        Raises:
            ValidationError: Malformed inputs, or an amount below token precision
            AccountNotFound: The user holds neither spot nor conditional quote
            InsufficientFunds: amount > spot + conditional quote balance
            IlliquidPool: The side's AMM has a zero reserve
        """
        side = validate_choice(side, Side, "side")
        amount = validate_amount(amount)
        user = validate_pubkey(user)

        market = self.chain.get_market(market_id)
        vault = self.chain.get_vault(market.quote_vault)
        pool = self.chain.get_amm_pool(market.amm_for(side))

        spot = self.balances.token_balance_or_zero(user, vault.underlying_mint)
        conditional = self.balances.token_balance_or_zero(user, pool.quote_mint)
        if not spot.exists and not conditional.exists:
            raise AccountNotFound(user, vault.underlying_mint)

        amount_in = self._chain_amount(amount, conditional.decimals)
        requested = to_ui_amount(amount_in, conditional.decimals)
        leg = f"{side.value}_quote"

        with decimal.localcontext(DECIMAL_CONTEXT):
            max_buy = spot.value + conditional.value
        if requested > max_buy:
            logger.info(
                "insufficient_balance",
                market=market.address,
                leg=leg,
                requested=str(requested),
                available=str(max_buy),
            )
            raise InsufficientFunds(
                leg=leg,
                requested=requested,
                available=max_buy,
                balances={"spot": spot.value, "conditional": conditional.value},
            )

        split = plan_split(requested, conditional.value, spot.value, spot.decimals, leg=leg)
        operations: list[SplitOperation | SwapOperation] = []
        if split is not None:
            operations.append(
                SplitOperation(
                    vault=vault.address,
                    question=market.question,
                    underlying_mint=vault.underlying_mint,
                    amount=split.amount,
                    num_outcomes=self.config.num_outcomes,
                    authority=user,
                )
            )

        quote = self.amm.simulate_swap(pool, Direction.BUY, amount_in, self.config.slippage_bps)
        operations.append(
            SwapOperation(
                amm=pool.address,
                base_mint=pool.base_mint,
                quote_mint=pool.quote_mint,
                direction=Direction.BUY,
                input_amount=amount_in,
                min_output_amount=quote.min_out,
                user=user,
            )
        )

        logger.info(
            "trade_planned",
            market=market.address,
            side=side.value,
            direction="buy",
            amount_in=amount_in,
            split_amount=split.amount if split else 0,
            expected_output=quote.expected_out,
            min_output=quote.min_out,
        )
        return TradePlan(
            market=market.address,
            side=side,
            direction=Direction.BUY,
            plan=OperationPlan(operations=operations),
            amount=requested,
            amount_in=amount_in,
            expected_output=quote.expected_out,
            min_output=quote.min_out,
            split=split,
        )

    def plan_sell(self, market_id: str, side: Side | str, amount: Any, user: str) -> TradePlan:
        """Plan selling ``amount`` of the side's conditional base token.

        Raises:
            ValidationError: Malformed inputs, or an amount below token precision
            AccountNotFound: The user has no account for the conditional base mint
            InsufficientFunds: amount > conditional base balance
            IlliquidPool: The side's AMM has a zero reserve
        """
        side = validate_choice(side, Side, "side")
        amount = validate_amount(amount)
        user = validate_pubkey(user)

        market = self.chain.get_market(market_id)
        pool = self.chain.get_amm_pool(market.amm_for(side))

        # The base account is the primary leg: without it there is nothing to sell
        base = self.balances.token_balance(user, pool.base_mint)

        amount_in = self._chain_amount(amount, base.decimals)
        requested = to_ui_amount(amount_in, base.decimals)
        leg = f"{side.value}_base"

        if requested > base.value:
            logger.info(
                "insufficient_balance",
                market=market.address,
                leg=leg,
                requested=str(requested),
                available=str(base.value),
            )
            raise InsufficientFunds(
                leg=leg,
                requested=requested,
                available=base.value,
                balances={"base": base.value},
            )

        quote = self.amm.simulate_swap(pool, Direction.SELL, amount_in, self.config.slippage_bps)
        swap = SwapOperation(
            amm=pool.address,
            base_mint=pool.base_mint,
            quote_mint=pool.quote_mint,
            direction=Direction.SELL,
            input_amount=amount_in,
            min_output_amount=quote.min_out,
            user=user,
        )

        logger.info(
            "trade_planned",
            market=market.address,
            side=side.value,
            direction="sell",
            amount_in=amount_in,
            expected_output=quote.expected_out,
            min_output=quote.min_out,
        )
        return TradePlan(
            market=market.address,
            side=side,
            direction=Direction.SELL,
            plan=OperationPlan(operations=[swap]),
            amount=requested,
            amount_in=amount_in,
            expected_output=quote.expected_out,
            min_output=quote.min_out,
        )

    @staticmethod
    def _chain_amount(amount: Decimal, decimals: int) -> int:
        """UI amount to a u64 chain amount, rounding down."""
        amount_in = S(to_chain_amount(amount, decimals))
        if not amount_in:
            raise ValidationError("amount", f"{amount} is below the token's precision")
        if not amount_in.is_u64():
            raise ValidationError("amount", f"{amount} exceeds the maximum token amount")
        return amount_in.value


__all__ = ["TradePlanner"]
