"""Quote engine.

Sequences pool gate -> fresh reserve fetch -> pricing oracle. Reserves are
never cached: every quote re-reads them from the router.
"""

from __future__ import annotations

import structlog

from connector.collaborators import call_collaborator, expect_uint
from connector.config import ConnectorConfig
from connector.errors import MalformedResponseError
from connector.gate import PoolExistenceGate
from connector.interfaces import CollaboratorResolver, PricingOracle, Router
from connector.models.swap import QuoteError, QuoteResult, ReservePair
from connector.models.types import UINT256_MAX, normalize_address, short
from connector.pricing import RouterPricingOracle

logger = structlog.get_logger()


class QuoteEngine:
    """Computes required inputs and resulting outputs for a token pair.

    Args:
        config: Shared connector configuration
        resolver: Resolves the configured router and registry
        gate: Pool existence gate
        oracle: Pricing function. If None, the configured router prices swaps.
    """

    def __init__(
        self,
        config: ConnectorConfig,
        resolver: CollaboratorResolver,
        gate: PoolExistenceGate,
        oracle: PricingOracle | None = None,
    ) -> None:
        self.config = config
        self.resolver = resolver
        self.gate = gate
        self._oracle = oracle

    @property
    def router(self) -> Router:
        return self.resolver.router(self.config.router_address)

    @property
    def oracle(self) -> PricingOracle:
        if self._oracle is not None:
            return self._oracle
        return RouterPricingOracle(self.router)

    def fetch_reserves(self, token_in: str, token_out: str) -> ReservePair:
        """Read current reserves for (token_in, token_out) from the router."""
        result = call_collaborator(
            "router", "get_reserves", self.router.get_reserves, token_in, token_out
        )
        if not isinstance(result, (tuple, list)) or len(result) != 2:
            raise MalformedResponseError(
                "router", "get_reserves", f"expected (reserve_in, reserve_out), got {result!r}"
            )
        return ReservePair(
            reserve_in=expect_uint("router", "get_reserves", result[0]),
            reserve_out=expect_uint("router", "get_reserves", result[1]),
        )

    def amount_in_for(self, reserves: ReservePair, amount_out: int) -> int:
        """Input required for amount_out against already-fetched reserves.

        Outputs the pool cannot cover price at max uint256 without consulting
        the oracle.
        """
        if amount_out >= reserves.reserve_out:
            return UINT256_MAX
        value = call_collaborator(
            "oracle",
            "amount_in",
            self.oracle.amount_in,
            amount_out,
            reserves.reserve_in,
            reserves.reserve_out,
        )
        return expect_uint("oracle", "amount_in", value)

    def amount_out_for(self, reserves: ReservePair, amount_in: int) -> int:
        """Output for amount_in against already-fetched reserves."""
        value = call_collaborator(
            "oracle",
            "amount_out",
            self.oracle.amount_out,
            amount_in,
            reserves.reserve_in,
            reserves.reserve_out,
        )
        return expect_uint("oracle", "amount_out", value)

    def _precheck(self, amount: int, token_in: str, token_out: str) -> QuoteError | None:
        if amount <= 0:
            return QuoteError.ZERO_AMOUNT
        if normalize_address(token_in) == normalize_address(token_out):
            return QuoteError.IDENTICAL_TOKENS
        if not self.gate.pool_exists(token_in, token_out):
            return QuoteError.NO_POOL
        return None

    def quote_input_for(self, amount_out: int, token_in: str, token_out: str) -> QuoteResult:
        """Input amount of token_in required to receive amount_out of token_out."""
        error = self._precheck(amount_out, token_in, token_out)
        if error is not None:
            logger.debug("quote_infeasible", side="input", error=error.value)
            return QuoteResult.failure(error)

        reserves = self.fetch_reserves(token_in, token_out)
        if reserves.reserve_in == 0 or amount_out >= reserves.reserve_out:
            logger.debug(
                "quote_infeasible",
                side="input",
                error=QuoteError.INSUFFICIENT_LIQUIDITY.value,
                amount_out=amount_out,
                reserve_out=reserves.reserve_out,
            )
            return QuoteResult.failure(QuoteError.INSUFFICIENT_LIQUIDITY)

        amount_in = self.amount_in_for(reserves, amount_out)
        logger.debug(
            "quote_input",
            token_in=short(token_in),
            token_out=short(token_out),
            amount_out=amount_out,
            amount_in=amount_in,
        )
        return QuoteResult.success(amount_in)

    def quote_output_for(self, amount_in: int, token_in: str, token_out: str) -> QuoteResult:
        """Output amount of token_out received for amount_in of token_in."""
        error = self._precheck(amount_in, token_in, token_out)
        if error is not None:
            logger.debug("quote_infeasible", side="output", error=error.value)
            return QuoteResult.failure(error)

        reserves = self.fetch_reserves(token_in, token_out)
        if reserves.reserve_in == 0 or reserves.reserve_out == 0:
            logger.debug(
                "quote_infeasible", side="output", error=QuoteError.INSUFFICIENT_LIQUIDITY.value
            )
            return QuoteResult.failure(QuoteError.INSUFFICIENT_LIQUIDITY)

        amount_out = self.amount_out_for(reserves, amount_in)
        logger.debug(
            "quote_output",
            token_in=short(token_in),
            token_out=short(token_out),
            amount_in=amount_in,
            amount_out=amount_out,
        )
        return QuoteResult.success(amount_out)
