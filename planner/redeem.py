"""Redemption planning for resolved proposals."""

from __future__ import annotations

import structlog

from planner.balances import Balance, BalanceAggregator
from planner.chain.base import ChainStateReader, guard
from planner.config import DEFAULT_CONFIG, PlannerConfig
from planner.errors import InvalidState, NothingToRedeem
from planner.models.market import Market, ProposalState, Vault
from planner.models.plan import OperationKind, OperationPlan, RedeemOperation, RedemptionPlan
from planner.validation import validate_pubkey

logger = structlog.get_logger()


class RedemptionPlanner:
    """Plans redemption of both vault legs once a proposal has executed."""

    def __init__(self, chain: ChainStateReader, config: PlannerConfig | None = None) -> None:
        self.chain = guard(chain)
        self.balances = BalanceAggregator(self.chain)
        self.config = config if config is not None else DEFAULT_CONFIG

    def plan_redeem(self, market_id: str, user: str) -> RedemptionPlan:
        """Plan redeeming the user's positions in both vaults.

        The gating balances are the user's holdings of each vault's
        underlying mint. Conditional holdings ride along on the operations
        so the builder sees what each leg will burn. Both legs are always
        emitted, even when one holds nothing.

        Raises:
            ValidationError: Malformed user key
            InvalidState: The proposal has not executed
            NothingToRedeem: The user holds none of either vault's underlying mint
        """
        user = validate_pubkey(user)
        market = self.chain.get_market(market_id)
        if market.state != ProposalState.EXECUTED:
            raise InvalidState(
                market=market.address,
                state=market.state.value,
                required=ProposalState.EXECUTED.value,
            )

        base_vault = self.chain.get_vault(market.base_vault)
        quote_vault = self.chain.get_vault(market.quote_vault)

        base = self.balances.token_balance_or_zero(user, base_vault.underlying_mint)
        quote = self.balances.token_balance_or_zero(user, quote_vault.underlying_mint)
        if base.amount == 0 and quote.amount == 0:
            raise NothingToRedeem(base_balance=base.value, quote_balance=quote.value)

        base_conditional = self._conditional_holdings(user, base_vault)
        quote_conditional = self._conditional_holdings(user, quote_vault)
        operations = [
            self._redeem_op(
                OperationKind.REDEEM_BASE, market, base_vault, base_conditional.amount, user
            ),
            self._redeem_op(
                OperationKind.REDEEM_QUOTE, market, quote_vault, quote_conditional.amount, user
            ),
        ]

        logger.info(
            "redemption_planned",
            market=market.address,
            user=user,
            base_balance=base.amount,
            quote_balance=quote.amount,
            base_conditional=base_conditional.amount,
            quote_conditional=quote_conditional.amount,
        )
        return RedemptionPlan(
            market=market.address,
            plan=OperationPlan(operations=operations),
            base_balance=base.value,
            quote_balance=quote.value,
            base_conditional=base_conditional.value,
            quote_conditional=quote_conditional.value,
        )

    def _conditional_holdings(self, user: str, vault: Vault) -> Balance:
        """Sum of the user's PASS and FAIL conditional tokens for a vault.

        Conditional mints share the underlying's precision, so the sum is
        reported with the PASS mint's decimals.
        """
        legs = [self.balances.token_balance_or_zero(user, mint) for mint in vault.conditional_mints]
        return Balance(
            mint=vault.underlying_mint,
            amount=sum(leg.amount for leg in legs),
            decimals=legs[0].decimals,
        )

    def _redeem_op(
        self,
        kind: OperationKind,
        market: Market,
        vault: Vault,
        amount: int,
        user: str,
    ) -> RedeemOperation:
        return RedeemOperation(
            kind=kind,
            vault=vault.address,
            question=market.question,
            underlying_mint=vault.underlying_mint,
            amount=amount,
            num_outcomes=self.config.num_outcomes,
            user=user,
        )


__all__ = ["RedemptionPlanner"]
