"""Pytest configuration and fixtures."""

import json
from pathlib import Path
from typing import Any

import pytest

from planner.chain.snapshot import SnapshotChainState
from planner.config import PlannerConfig
from planner.service import MarketService
from tests.helpers import PASS_META, PASS_USDC, USDC, make_chain

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_snapshot_fixture(name: str) -> dict[str, Any]:
    """Load a snapshot fixture by name (e.g., "futarchy_snapshot")."""
    with open(FIXTURES_DIR / f"{name}.json") as f:
        return json.load(f)


# =============================================================================
# Fakes for dependency injection
# =============================================================================


class FailingChainState:
    """Reader that delegates to ``inner`` but raises on chosen methods.

    Usage:
        chain = FailingChainState(make_chain(), fail_on={"get_amm_pool"})
    """

    def __init__(
        self,
        inner: SnapshotChainState,
        fail_on: set[str],
        error: Exception | None = None,
    ) -> None:
        self.inner = inner
        self.fail_on = fail_on
        self.error = error or ConnectionError("rpc node timed out")
        self.calls: list[str] = []

    def __getattr__(self, name: str) -> Any:
        target = getattr(self.inner, name)

        def call(*args: Any) -> Any:
            self.calls.append(name)
            if name in self.fail_on:
                raise self.error
            return target(*args)

        return call


class ExplodingBuilder:
    """Operation builder that always fails."""

    def build(self, _plan: Any, _user: str) -> list[Any]:
        raise RuntimeError("builder offline")


# =============================================================================
# Common chains
# =============================================================================


@pytest.fixture
def funded_chain() -> SnapshotChainState:
    """User holds 200 USDC, 50 pUSDC and 5 pMETA."""
    return make_chain(
        balances={
            USDC: 200 * 10**6,
            PASS_USDC: 50 * 10**6,
            PASS_META: 5 * 10**9,
        }
    )


@pytest.fixture
def config() -> PlannerConfig:
    return PlannerConfig()


@pytest.fixture
def service(funded_chain, config) -> MarketService:
    return MarketService(funded_chain, config=config)
