"""Tests for the proposal creation preflight."""

import pytest

from planner.config import PlannerConfig
from planner.errors import InsufficientFunds, NotFound, ValidationError
from planner.proposals import ProposalPreflightChecker
from tests.helpers import DAO, META, PROPOSER, USDC, USER, make_chain

URL = "https://example.org/proposals/raise-treasury"


@pytest.fixture
def proposer_chain():
    """Proposer holds 1,000 META and 500 USDC."""
    return make_chain(balances={META: 1_000 * 10**9, USDC: 500 * 10**6}, owner=PROPOSER)


class TestCheckProposal:
    def test_funded_proposer(self, proposer_chain):
        result = ProposalPreflightChecker(proposer_chain).check_proposal(
            DAO, URL, 100, "50.5", proposer=PROPOSER
        )
        assert result.ok
        assert result.dao == DAO
        assert result.proposer == PROPOSER
        assert result.required_base == 100 * 10**9
        assert result.required_quote == 50_500_000

    def test_exact_balances_suffice(self, proposer_chain):
        result = ProposalPreflightChecker(proposer_chain).check_proposal(
            DAO, URL, 1_000, 500, proposer=PROPOSER
        )
        assert result.ok

    def test_short_base_leg(self, proposer_chain):
        with pytest.raises(InsufficientFunds) as exc_info:
            ProposalPreflightChecker(proposer_chain).check_proposal(
                DAO, URL, 2_000, 1_000, proposer=PROPOSER
            )

        err = exc_info.value
        assert err.leg == "base"
        assert err.requested == 2_000 * 10**9
        assert err.available == 1_000 * 10**9
        assert err.balances["requiredQuote"] == 1_000 * 10**6

    def test_short_quote_leg(self, proposer_chain):
        with pytest.raises(InsufficientFunds) as exc_info:
            ProposalPreflightChecker(proposer_chain).check_proposal(
                DAO, URL, 10, 501, proposer=PROPOSER
            )
        assert exc_info.value.leg == "quote"
        assert exc_info.value.shortfall == 1 * 10**6

    def test_proposer_without_accounts(self, proposer_chain):
        with pytest.raises(InsufficientFunds) as exc_info:
            ProposalPreflightChecker(proposer_chain).check_proposal(DAO, URL, 1, 1, proposer=USER)
        assert exc_info.value.available == 0

    def test_configured_default_proposer(self, proposer_chain):
        config = PlannerConfig(default_proposer=PROPOSER)
        result = ProposalPreflightChecker(proposer_chain, config=config).check_proposal(
            DAO, URL, 1, 1
        )
        assert result.proposer == PROPOSER

    def test_no_proposer(self, proposer_chain):
        with pytest.raises(ValidationError) as exc_info:
            ProposalPreflightChecker(proposer_chain).check_proposal(DAO, URL, 1, 1)
        assert exc_info.value.field == "proposer"

    @pytest.mark.parametrize(
        "url,base,quote,field",
        [
            ("", 1, 1, "descriptionUrl"),
            (URL, 0, 1, "baseTokensToLP"),
            (URL, 1, -3, "quoteTokensToLP"),
            (URL, "lots", 1, "baseTokensToLP"),
            (URL, "1e999999", 1, "baseTokensToLP"),
            (URL, 1, "1e20", "quoteTokensToLP"),
        ],
    )
    def test_invalid_inputs(self, proposer_chain, url, base, quote, field):
        with pytest.raises(ValidationError) as exc_info:
            ProposalPreflightChecker(proposer_chain).check_proposal(
                DAO, url, base, quote, proposer=PROPOSER
            )
        assert exc_info.value.field == field

    def test_unknown_dao(self, proposer_chain):
        with pytest.raises(NotFound) as exc_info:
            ProposalPreflightChecker(proposer_chain).check_proposal(
                USER, URL, 1, 1, proposer=PROPOSER
            )
        assert exc_info.value.entity == "dao"
