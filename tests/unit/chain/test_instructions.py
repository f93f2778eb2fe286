"""Tests for instruction descriptors."""

from decimal import Decimal

from planner.chain.instructions import DescriptorBuilder
from planner.redeem import RedemptionPlanner
from planner.trade import TradePlanner
from tests.helpers import (
    BASE_VAULT,
    FAIL_META,
    PASS_AMM,
    PASS_META,
    PROPOSAL,
    QUESTION,
    QUOTE_VAULT,
    USDC,
    USER,
    make_chain,
)


class TestDescriptorBuilder:
    def test_split_then_swap(self, funded_chain):
        trade = TradePlanner(funded_chain).plan_buy(PROPOSAL, "pass", Decimal("120"), USER)
        split_ix, swap_ix = DescriptorBuilder().build(trade.plan, USER)

        assert split_ix.program == "conditional_vault"
        assert split_ix.name == "split_tokens"
        assert split_ix.accounts == {
            "question": QUESTION,
            "vault": QUOTE_VAULT,
            "underlyingTokenMint": USDC,
            "authority": USER,
        }
        assert split_ix.args == {"amount": "70000000", "numOutcomes": 2}

        assert swap_ix.program == "amm"
        assert swap_ix.accounts["amm"] == PASS_AMM
        assert swap_ix.args["swapType"] == "buy"
        assert swap_ix.args["inputAmount"] == "120000000"
        assert swap_ix.args["outputAmountMin"] == str(trade.min_output)

    def test_redeem_both_legs(self):
        chain = make_chain(state="executed", balances={USDC: 1, PASS_META: 1, FAIL_META: 1})
        redemption = RedemptionPlanner(chain).plan_redeem(PROPOSAL, USER)
        base_ix, quote_ix = DescriptorBuilder().build(redemption.plan, USER)

        assert base_ix.name == quote_ix.name == "redeem_tokens"
        assert base_ix.accounts["vault"] == BASE_VAULT
        assert base_ix.args["leg"] == "base"
        assert quote_ix.accounts["vault"] == QUOTE_VAULT
        assert quote_ix.args["leg"] == "quote"
        assert quote_ix.accounts["payer"] == USER

    def test_descriptors_serialise(self, funded_chain):
        trade = TradePlanner(funded_chain).plan_sell(PROPOSAL, "pass", 1, USER)
        (swap_ix,) = DescriptorBuilder().build(trade.plan, USER)
        dumped = swap_ix.model_dump(mode="json")
        assert dumped["name"] == "swap"
        assert dumped["args"]["swapType"] == "sell"
