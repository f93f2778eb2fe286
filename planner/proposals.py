"""Balance preflight for proposal creation.

Creating a proposal seeds both conditional AMMs with liquidity, so the
proposer must hold ``base_tokens_to_lp`` of the DAO token and
``quote_tokens_to_lp`` of its USDC mint before anything is submitted.
"""

from __future__ import annotations

from typing import Any

import structlog

from planner.balances import BalanceAggregator
from planner.chain.base import ChainStateReader, guard
from planner.config import DEFAULT_CONFIG, PlannerConfig
from planner.errors import InsufficientFunds, ValidationError
from planner.models.plan import ProposalPreflight
from planner.models.types import to_chain_amount, to_ui_amount
from planner.validation import validate_amount, validate_pubkey

logger = structlog.get_logger()


class ProposalPreflightChecker:
    """Checks a proposer can fund a new proposal's initial liquidity."""

    def __init__(self, chain: ChainStateReader, config: PlannerConfig | None = None) -> None:
        self.chain = guard(chain)
        self.balances = BalanceAggregator(self.chain)
        self.config = config if config is not None else DEFAULT_CONFIG

    def check_proposal(
        self,
        dao_id: str,
        description_url: str,
        base_tokens_to_lp: Any,
        quote_tokens_to_lp: Any,
        proposer: str | None = None,
    ) -> ProposalPreflight:
        """Verify the proposer's balances cover both LP legs.

        Raises:
            ValidationError: Missing description, non-positive LP amounts,
                or no proposer given or configured
            InsufficientFunds: A leg's balance is below its requirement
                (amounts reported in chain units)
        """
        if not description_url:
            raise ValidationError("descriptionUrl", "is required")
        base_lp = validate_amount(base_tokens_to_lp, "baseTokensToLP")
        quote_lp = validate_amount(quote_tokens_to_lp, "quoteTokensToLP")
        proposer = validate_pubkey(proposer or self.config.default_proposer, "proposer")

        dao = self.chain.get_dao(dao_id)
        base = self.balances.token_balance_or_zero(proposer, dao.token_mint)
        quote = self.balances.token_balance_or_zero(proposer, dao.usdc_mint)

        required_base = to_chain_amount(base_lp, base.decimals)
        required_quote = to_chain_amount(quote_lp, quote.decimals)

        for leg, required, balance in (
            ("base", required_base, base),
            ("quote", required_quote, quote),
        ):
            if balance.amount < required:
                logger.info(
                    "proposal_preflight_failed",
                    dao=dao.address,
                    leg=leg,
                    required=required,
                    available=balance.amount,
                )
                raise InsufficientFunds(
                    leg=leg,
                    requested=required,
                    available=balance.amount,
                    balances={
                        "base": base.amount,
                        "quote": quote.amount,
                        "requiredBase": required_base,
                        "requiredQuote": required_quote,
                    },
                )

        logger.info(
            "proposal_preflight_ok",
            dao=dao.address,
            proposer=proposer,
            required_base=str(to_ui_amount(required_base, base.decimals)),
            required_quote=str(to_ui_amount(required_quote, quote.decimals)),
        )
        return ProposalPreflight(
            dao=dao.address,
            proposer=proposer,
            ok=True,
            required_base=required_base,
            required_quote=required_quote,
        )


__all__ = ["ProposalPreflightChecker"]
