"""Tests for the upstream failure boundary."""

import pytest

from planner.chain.base import GuardedChainState, build_operations, guard
from planner.errors import AccountNotFound, NotFound, UpstreamUnavailable
from planner.models.plan import OperationPlan
from tests.conftest import ExplodingBuilder, FailingChainState
from tests.helpers import DAO, USDC, USER, make_chain


class TestGuardedChainState:
    def test_passes_results_through(self):
        chain = guard(make_chain())
        assert chain.get_dao(DAO).address == DAO

    def test_guard_is_idempotent(self):
        chain = guard(make_chain())
        assert guard(chain) is chain
        assert isinstance(chain, GuardedChainState)

    def test_wraps_foreign_errors(self):
        chain = guard(FailingChainState(make_chain(), fail_on={"list_daos"}))
        with pytest.raises(UpstreamUnavailable) as exc_info:
            chain.list_daos()

        err = exc_info.value
        assert err.operation == "list_daos"
        assert err.reason == "rpc node timed out"
        assert isinstance(err.__cause__, ConnectionError)

    def test_planner_errors_not_wrapped(self):
        chain = guard(make_chain())
        with pytest.raises(NotFound):
            chain.get_dao(USER)
        with pytest.raises(AccountNotFound):
            chain.get_token_balance(USER, USDC)

    def test_custom_error_type(self):
        failing = FailingChainState(
            make_chain(), fail_on={"get_mint_decimals"}, error=KeyError("mint cache")
        )
        with pytest.raises(UpstreamUnavailable):
            guard(failing).get_mint_decimals(USDC)


class TestBuildOperations:
    def test_builder_failure(self):
        with pytest.raises(UpstreamUnavailable) as exc_info:
            build_operations(ExplodingBuilder(), OperationPlan(), USER)
        assert exc_info.value.operation == "build_operations"
        assert exc_info.value.reason == "builder offline"
