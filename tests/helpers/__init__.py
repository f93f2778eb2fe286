"""Test helpers module for shared test utilities.

- constants: Public keys for users, accounts and mints
- factories: Chain-state snapshot factories
"""

from tests.helpers.constants import (
    BASE_VAULT,
    DAO,
    FAIL_AMM,
    FAIL_META,
    FAIL_USDC,
    META,
    OTHER_USER,
    PASS_AMM,
    PASS_META,
    PASS_USDC,
    PROPOSAL,
    PROPOSER,
    QUESTION,
    QUOTE_VAULT,
    TOKEN_DECIMALS,
    USDC,
    USER,
    make_key,
)
from tests.helpers.factories import (
    DEFAULT_BASE_RESERVE,
    DEFAULT_QUOTE_RESERVE,
    make_chain,
    make_snapshot,
)

__all__ = [
    # Constants
    "USER",
    "OTHER_USER",
    "PROPOSER",
    "DAO",
    "PROPOSAL",
    "QUESTION",
    "PASS_AMM",
    "FAIL_AMM",
    "BASE_VAULT",
    "QUOTE_VAULT",
    "META",
    "USDC",
    "PASS_META",
    "FAIL_META",
    "PASS_USDC",
    "FAIL_USDC",
    "TOKEN_DECIMALS",
    "make_key",
    # Factories
    "DEFAULT_BASE_RESERVE",
    "DEFAULT_QUOTE_RESERVE",
    "make_chain",
    "make_snapshot",
]
