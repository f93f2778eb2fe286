"""Constant-product quote estimation for conditional AMMs.

Conditional pools follow x * y = k. Quotes use the no-fee form for every
pool and direction; only the reserve pairing changes with direction:

    expected_out = reserve_out * amount_in // (reserve_in + amount_in)
    min_out      = expected_out * (10000 - slippage_bps) // 10000
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from planner.constants import BPS_DENOMINATOR, DEFAULT_SLIPPAGE_BPS
from planner.errors import IlliquidPool, ValidationError
from planner.models.market import AmmPool
from planner.models.types import Direction
from planner.safe_int import S

logger = structlog.get_logger()


@dataclass(frozen=True)
class Quote:
    """Result of quoting an exact-input swap, in chain units."""

    amount_in: int
    expected_out: int
    min_out: int
    slippage_bps: int
    pool_address: str | None = None


class ConstantProductAMM:
    """Constant-product math for conditional pools."""

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate output for an exact input.

        Args:
            amount_in: Input token amount (chain units)
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Output token amount, rounded down

        Raises:
            IlliquidPool: If either reserve is zero
            ValidationError: If amount_in is not positive
        """
        if reserve_in <= 0 or reserve_out <= 0:
            raise IlliquidPool(reserve_in=reserve_in, reserve_out=reserve_out)
        if amount_in <= 0:
            raise ValidationError("amount", f"swap input must be positive, got {amount_in}")

        numerator = S(reserve_out) * S(amount_in)
        denominator = S(reserve_in) + S(amount_in)
        return (numerator // denominator).to_u64()

    def apply_slippage(self, expected_out: int, slippage_bps: int) -> int:
        """Minimum acceptable output under a slippage tolerance, rounded down."""
        if not 0 <= slippage_bps <= BPS_DENOMINATOR:
            raise ValidationError(
                "slippage_bps", f"must be within [0, {BPS_DENOMINATOR}], got {slippage_bps}"
            )
        return (S(expected_out) * S(BPS_DENOMINATOR - slippage_bps) // S(BPS_DENOMINATOR)).value

    def quote(
        self,
        reserve_in: int,
        reserve_out: int,
        amount_in: int,
        slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
    ) -> Quote:
        """Quote an exact-input swap.

        Guarantees 0 <= min_out <= expected_out <= reserve_out.
        """
        expected_out = self.get_amount_out(amount_in, reserve_in, reserve_out)
        min_out = self.apply_slippage(expected_out, slippage_bps)
        return Quote(
            amount_in=amount_in,
            expected_out=expected_out,
            min_out=min_out,
            slippage_bps=slippage_bps,
        )

    def simulate_swap(
        self,
        pool: AmmPool,
        direction: Direction,
        amount_in: int,
        slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
    ) -> Quote:
        """Quote a swap through a pool.

        Buying spends quote reserves for base; selling the reverse.

        Raises:
            IlliquidPool: If either pool reserve is zero (carries the pool address)
        """
        reserve_in, reserve_out = pool.get_reserves(direction)
        if reserve_in <= 0 or reserve_out <= 0:
            logger.warning(
                "illiquid_pool",
                pool=pool.address,
                base_amount=pool.base_amount,
                quote_amount=pool.quote_amount,
            )
            raise IlliquidPool(reserve_in=reserve_in, reserve_out=reserve_out, pool=pool.address)

        quote = self.quote(reserve_in, reserve_out, amount_in, slippage_bps)
        return Quote(
            amount_in=quote.amount_in,
            expected_out=quote.expected_out,
            min_out=quote.min_out,
            slippage_bps=quote.slippage_bps,
            pool_address=pool.address,
        )


# Singleton instance
constant_product = ConstantProductAMM()


def quote(
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
) -> Quote:
    """Module-level shortcut for ConstantProductAMM.quote."""
    return constant_product.quote(reserve_in, reserve_out, amount_in, slippage_bps)


__all__ = ["Quote", "ConstantProductAMM", "constant_product", "quote"]
