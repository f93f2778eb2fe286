"""Chain state reader backed by a JSON snapshot.

The snapshot mirrors what the futarchy clients return for each account,
keyed by address:

    {
      "daos": {"<dao>": {...}},
      "proposals": {"<proposal>": {...}},
      "amms": {"<amm>": {...}},
      "vaults": {"<vault>": {...}},
      "mints": {"<mint>": 6},
      "tokenAccounts": [{"address": ..., "mint": ..., "owner": ..., "amount": "..."}]
    }

Map keys are copied into each record's ``address`` when the record omits it.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, Field, model_validator

from planner.errors import AccountNotFound, NotFound
from planner.models.market import AmmPool, Dao, Market, TokenAccount, Vault

logger = structlog.get_logger()


class ChainSnapshot(BaseModel):
    """Validated snapshot contents."""

    daos: dict[str, Dao] = Field(default_factory=dict)
    proposals: dict[str, Market] = Field(default_factory=dict)
    amms: dict[str, AmmPool] = Field(default_factory=dict)
    vaults: dict[str, Vault] = Field(default_factory=dict)
    mints: dict[str, int] = Field(default_factory=dict)
    token_accounts: list[TokenAccount] = Field(default_factory=list, alias="tokenAccounts")

    model_config = {"populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def _fill_addresses(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for section in ("daos", "proposals", "amms", "vaults"):
            records = data.get(section)
            if isinstance(records, dict):
                data[section] = {
                    key: ({"address": key, **value} if isinstance(value, dict) else value)
                    for key, value in records.items()
                }
        return data


class SnapshotChainState:
    """ChainStateReader over an in-memory ChainSnapshot."""

    def __init__(self, snapshot: ChainSnapshot) -> None:
        self.snapshot = snapshot
        self._accounts: dict[tuple[str, str], TokenAccount] = {
            (account.owner, account.mint): account for account in snapshot.token_accounts
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SnapshotChainState:
        return cls(ChainSnapshot.model_validate(data))

    @classmethod
    def from_file(cls, path: Path) -> SnapshotChainState:
        """Load a snapshot from a JSON file."""
        with open(path) as f:
            data = json.load(f)
        reader = cls.from_dict(data)
        logger.info(
            "snapshot_loaded",
            path=str(path),
            daos=len(reader.snapshot.daos),
            proposals=len(reader.snapshot.proposals),
            token_accounts=len(reader.snapshot.token_accounts),
        )
        return reader

    def get_dao(self, dao_id: str) -> Dao:
        return _lookup(self.snapshot.daos, "dao", dao_id)

    def list_daos(self) -> list[Dao]:
        return list(self.snapshot.daos.values())

    def get_market(self, market_id: str) -> Market:
        return _lookup(self.snapshot.proposals, "proposal", market_id)

    def list_markets(self, dao: str | None = None) -> list[Market]:
        markets = self.snapshot.proposals.values()
        if dao is None:
            return list(markets)
        return [market for market in markets if market.dao == dao]

    def get_amm_pool(self, amm_id: str) -> AmmPool:
        return _lookup(self.snapshot.amms, "amm", amm_id)

    def get_vault(self, vault_id: str) -> Vault:
        return _lookup(self.snapshot.vaults, "vault", vault_id)

    def get_mint_decimals(self, mint: str) -> int:
        return _lookup(self.snapshot.mints, "mint", mint)

    def get_token_balance(self, owner: str, mint: str) -> TokenAccount:
        account = self._accounts.get((owner, mint))
        if account is None:
            raise AccountNotFound(owner, mint)
        return account


def _lookup(table: dict[str, Any], entity: str, key: str) -> Any:
    try:
        return table[key]
    except KeyError:
        raise NotFound(entity, key) from None


__all__ = ["ChainSnapshot", "SnapshotChainState"]
