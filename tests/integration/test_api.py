"""End-to-end tests of the API over a recorded chain-state snapshot.

The snapshot holds one DAO with a pending proposal (trading) and an
executed one (redemption), plus a trader's token accounts.
"""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from planner.api.endpoints import get_service
from planner.api.main import app
from planner.config import PlannerConfig
from planner.service import service_from_config
from tests.conftest import FIXTURES_DIR

DAO = "p6L76tCXqUZKxcRQQhQm2yX84AjuToixqoXu1LdMPfNB"
LIVE_PROPOSAL = "fFiKkTNHEJopHTcQEutYYWHsG7XDr5ki2hEw55ZdxaRE"
EXECUTED_PROPOSAL = "2SWDadoKc4bTm7wNmxZY5CTUhUJJp2zPFMw49eaZFGDC"
LIVE_PASS_AMM = "ze9nbKL7KqpiYzcQLFRX61K1aDrHAFsn4df5GbfSWBDC"
LIVE_QUOTE_VAULT = "oMNMHdRxNwBrF6bjKYmhVSgxc22FQx8LVZhopUaMXjve"
USDC = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
TRADER = "mJtL3FUafDME2eQWcLELbrsGk8P5mrKcPqAyn16Tm1fU"

SNAPSHOT = FIXTURES_DIR / "futarchy_snapshot.json"


@pytest.fixture(scope="module")
def client() -> Iterator[TestClient]:
    service = service_from_config(PlannerConfig(snapshot_path=SNAPSHOT))
    app.dependency_overrides[get_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestBrowse:
    def test_dao_lists_both_proposals(self, client) -> None:
        body = client.get(f"/daos/{DAO}/proposals").json()
        states = {p["address"]: p["state"] for p in body["proposals"]}
        assert states == {LIVE_PROPOSAL: "pending", EXECUTED_PROPOSAL: "executed"}


class TestTradeFlow:
    def test_buy_pass_splits_usdc_shortfall(self, client) -> None:
        """Trader holds 25 pUSDC; buying with 100 splits 75 USDC first."""
        response = client.post(
            f"/proposals/{LIVE_PROPOSAL}/buy-pass", json={"amount": "100", "user": TRADER}
        )
        assert response.status_code == 200

        body = response.json()
        split_op, swap_op = body["plan"]["operations"]
        assert split_op["kind"] == "split"
        assert split_op["vault"] == LIVE_QUOTE_VAULT
        assert split_op["underlyingMint"] == USDC
        assert split_op["amount"] == "75000000"
        assert split_op["authority"] == TRADER

        assert swap_op["amm"] == LIVE_PASS_AMM
        assert swap_op["inputAmount"] == "100000000"
        # 25,000e9 * 100e6 / (12,400e6 + 100e6), less 1%
        assert body["expectedOutput"] == "200000000000"
        assert body["minOutput"] == "198000000000"
        assert swap_op["minOutputAmount"] == "198000000000"

    def test_buy_pass_beyond_holdings(self, client) -> None:
        response = client.post(
            f"/proposals/{LIVE_PROPOSAL}/buy-pass", json={"amount": "1025.01", "user": TRADER}
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "insufficient_funds"
        assert body["available"] == "1025.000000"
        assert body["balances"] == {"spot": "1000.000000", "conditional": "25.000000"}

    def test_sell_whole_pass_position(self, client) -> None:
        response = client.post(
            f"/proposals/{LIVE_PROPOSAL}/sell-pass", json={"amount": "12.5", "user": TRADER}
        )
        assert response.status_code == 200
        assert response.json()["withSplit"] is False

    def test_sell_fail_without_position(self, client) -> None:
        response = client.post(
            f"/proposals/{LIVE_PROPOSAL}/sell-fail", json={"amount": "1", "user": TRADER}
        )
        assert response.status_code == 404


class TestRedeemFlow:
    def test_redeem_executed_proposal(self, client) -> None:
        response = client.post(f"/proposals/{EXECUTED_PROPOSAL}/redeem", json={"user": TRADER})
        assert response.status_code == 200

        body = response.json()
        base_op, quote_op = body["plan"]["operations"]
        assert base_op["amount"] == "10000000000"
        assert quote_op["amount"] == "150000000"
        assert quote_op["underlyingMint"] == USDC
        assert body["baseBalance"] == "40.000000000"
        assert body["quoteBalance"] == "1000.000000"
        assert [ix["args"]["leg"] for ix in body["instructions"]] == ["base", "quote"]

    def test_trading_closed_pool_is_illiquid(self, client) -> None:
        response = client.post(
            f"/proposals/{EXECUTED_PROPOSAL}/buy-fail", json={"amount": "1", "user": TRADER}
        )
        assert response.status_code == 409

    def test_live_proposal_cannot_redeem(self, client) -> None:
        response = client.post(f"/proposals/{LIVE_PROPOSAL}/redeem", json={"user": TRADER})
        assert response.status_code == 400
        assert response.json()["required"] == "executed"


class TestProposalPreflight:
    @pytest.mark.parametrize(
        "base,quote,status",
        [("40", "1000", 200), ("40.000000001", "1", 400), ("1", "1000.000001", 400)],
    )
    def test_preflight(self, client, base, quote, status) -> None:
        response = client.post(
            f"/daos/{DAO}/proposals",
            json={
                "descriptionUrl": "https://docs.example.org/proposals/new",
                "baseTokensToLP": base,
                "quoteTokensToLP": quote,
                "proposer": TRADER,
            },
        )
        assert response.status_code == status


def test_service_requires_snapshot() -> None:
    with pytest.raises(RuntimeError):
        service_from_config(PlannerConfig())
