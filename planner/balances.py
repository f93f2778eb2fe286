"""Balance aggregation over a chain state reader."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

import structlog

from planner.chain.base import ChainStateReader
from planner.errors import AccountNotFound
from planner.models.types import to_ui_amount

logger = structlog.get_logger()


@dataclass(frozen=True)
class Balance:
    """A token balance in both chain and UI units.

    ``account`` is None when the owner has no account for the mint.
    """

    mint: str
    amount: int
    decimals: int
    account: str | None = None

    @property
    def value(self) -> Decimal:
        return to_ui_amount(self.amount, self.decimals)

    @property
    def exists(self) -> bool:
        return self.account is not None


class BalanceAggregator:
    """Reads token balances for a user, fresh on every call."""

    def __init__(self, chain: ChainStateReader) -> None:
        self.chain = chain

    def token_balance(self, user: str, mint: str) -> Balance:
        """Full balance record for ``user``'s account of ``mint``.

        Raises:
            AccountNotFound: If the user has no account for the mint
        """
        account = self.chain.get_token_balance(user, mint)
        decimals = self.chain.get_mint_decimals(mint)
        return Balance(mint=mint, amount=account.amount, decimals=decimals, account=account.address)

    def token_balance_or_zero(self, user: str, mint: str) -> Balance:
        """Like token_balance, but a missing account is a zero balance."""
        try:
            return self.token_balance(user, mint)
        except AccountNotFound:
            logger.debug("token_account_missing", user=user, mint=mint)
            return Balance(mint=mint, amount=0, decimals=self.chain.get_mint_decimals(mint))

    def balance_of(self, user: str, mint: str) -> Decimal:
        """UI balance of ``mint`` held by ``user``.

        Raises:
            AccountNotFound: If the user has no account for the mint
        """
        return self.token_balance(user, mint).value

    def balance_or_zero(self, user: str, mint: str) -> Decimal:
        return self.token_balance_or_zero(user, mint).value


__all__ = ["Balance", "BalanceAggregator"]
