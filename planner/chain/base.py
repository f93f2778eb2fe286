"""Interfaces to the chain: a read-only state reader and an operation builder.

Planners depend on these protocols only, so tests and alternative backends
can inject any object with matching methods.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, TypeVar, runtime_checkable

import structlog

from planner.errors import PlannerError, UpstreamUnavailable
from planner.models.market import AmmPool, Dao, Market, TokenAccount, Vault
from planner.models.plan import OperationPlan

logger = structlog.get_logger()

T = TypeVar("T")


@runtime_checkable
class ChainStateReader(Protocol):
    """Read-only, eventually-consistent view of chain state.

    Lookups of unknown DAOs, proposals, vaults or pools raise NotFound.
    get_token_balance raises AccountNotFound when the owner has no
    account for the mint.
    """

    def get_dao(self, dao_id: str) -> Dao: ...

    def list_daos(self) -> list[Dao]: ...

    def get_market(self, market_id: str) -> Market: ...

    def list_markets(self, dao: str | None = None) -> list[Market]: ...

    def get_amm_pool(self, amm_id: str) -> AmmPool: ...

    def get_vault(self, vault_id: str) -> Vault: ...

    def get_mint_decimals(self, mint: str) -> int: ...

    def get_token_balance(self, owner: str, mint: str) -> TokenAccount: ...


@runtime_checkable
class OperationBuilder(Protocol):
    """Turns an operation plan into concrete, unsigned instructions."""

    def build(self, plan: OperationPlan, user: str) -> list[Any]: ...


class GuardedChainState:
    """Reader wrapper that reports collaborator failures as UpstreamUnavailable.

    PlannerErrors raised by the wrapped reader (NotFound, AccountNotFound)
    pass through untouched. Anything else is logged and re-raised as
    UpstreamUnavailable; nothing is retried.
    """

    def __init__(self, inner: ChainStateReader) -> None:
        self.inner = inner

    def _call(self, operation: str, fn: Callable[..., T], *args: Any) -> T:
        try:
            return fn(*args)
        except PlannerError:
            raise
        except Exception as exc:
            logger.warning("upstream_call_failed", operation=operation, error=str(exc))
            raise UpstreamUnavailable(operation, str(exc)) from exc

    def get_dao(self, dao_id: str) -> Dao:
        return self._call("get_dao", self.inner.get_dao, dao_id)

    def list_daos(self) -> list[Dao]:
        return self._call("list_daos", self.inner.list_daos)

    def get_market(self, market_id: str) -> Market:
        return self._call("get_market", self.inner.get_market, market_id)

    def list_markets(self, dao: str | None = None) -> list[Market]:
        return self._call("list_markets", self.inner.list_markets, dao)

    def get_amm_pool(self, amm_id: str) -> AmmPool:
        return self._call("get_amm_pool", self.inner.get_amm_pool, amm_id)

    def get_vault(self, vault_id: str) -> Vault:
        return self._call("get_vault", self.inner.get_vault, vault_id)

    def get_mint_decimals(self, mint: str) -> int:
        return self._call("get_mint_decimals", self.inner.get_mint_decimals, mint)

    def get_token_balance(self, owner: str, mint: str) -> TokenAccount:
        return self._call("get_token_balance", self.inner.get_token_balance, owner, mint)


def guard(reader: ChainStateReader) -> GuardedChainState:
    """Wrap a reader once; already-guarded readers are returned as-is."""
    if isinstance(reader, GuardedChainState):
        return reader
    return GuardedChainState(reader)


def build_operations(builder: OperationBuilder, plan: OperationPlan, user: str) -> list[Any]:
    """Run an operation builder, reporting its failures as UpstreamUnavailable."""
    try:
        return builder.build(plan, user)
    except PlannerError:
        raise
    except Exception as exc:
        logger.warning("operation_builder_failed", error=str(exc), kinds=plan.kinds)
        raise UpstreamUnavailable("build_operations", str(exc)) from exc
