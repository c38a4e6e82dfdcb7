"""Pricing oracles.

ConstantProductOracle is the deterministic UniswapV2 formula (x * y = k with a
fee on the input). RouterPricingOracle defers to a live router's own
get_amount_in/get_amount_out, which is what production connectors use.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from connector.constants import DEFAULT_FEE_BPS, FEE_DENOMINATOR
from connector.models.types import UINT256_MAX
from connector.safe_int import S

if TYPE_CHECKING:
    from connector.interfaces import Router


class ConstantProductOracle:
    """UniswapV2 constant-product math.

    Formula: amount_out = (in * fee * res_out) / (res_in * 10000 + in * fee)

    where fee is the multiplier 10000 - fee_bps (9970 for the standard 0.3%).
    """

    def __init__(self, fee_bps: int = DEFAULT_FEE_BPS) -> None:
        if not 0 <= fee_bps < FEE_DENOMINATOR:
            raise ValueError(f"fee_bps must be in [0, {FEE_DENOMINATOR}), got {fee_bps}")
        self.fee_bps = fee_bps

    @property
    def fee_multiplier(self) -> int:
        """10000 - fee_bps (9970 for 30 bps)."""
        return FEE_DENOMINATOR - self.fee_bps

    def amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Output amount for an exact input.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Output token amount, 0 for non-positive input or empty reserves
        """
        if amount_in <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return 0

        amount_in_with_fee = S(amount_in) * S(self.fee_multiplier)
        numerator = amount_in_with_fee * S(reserve_out)
        denominator = S(reserve_in) * S(FEE_DENOMINATOR) + amount_in_with_fee

        return (numerator // denominator).to_uint256()

    def amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Required input for an exact output (rounded up).

        Formula: amount_in = (res_in * out * 10000) / ((res_out - out) * fee) + 1

        Args:
            amount_out: Desired output token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Required input amount. Max uint256 if amount_out would drain the pool.
        """
        if amount_out <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return 0
        if amount_out >= reserve_out:
            return UINT256_MAX

        numerator = S(reserve_in) * S(amount_out) * S(FEE_DENOMINATOR)
        denominator = (S(reserve_out) - S(amount_out)) * S(self.fee_multiplier)

        return ((numerator // denominator) + S(1)).to_uint256()


class RouterPricingOracle:
    """Oracle backed by a router's own pricing functions."""

    def __init__(self, router: Router) -> None:
        self.router = router

    def amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        return self.router.get_amount_in(amount_out, reserve_in, reserve_out)

    def amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        return self.router.get_amount_out(amount_in, reserve_in, reserve_out)


# Singleton instance for the standard 0.3% fee
constant_product = ConstantProductOracle()

__all__ = ["ConstantProductOracle", "RouterPricingOracle", "constant_product"]
