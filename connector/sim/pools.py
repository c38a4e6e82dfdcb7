"""In-memory constant-product pools and their registry."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from connector.models.types import NULL_ADDRESS, normalize_address, short

logger = structlog.get_logger()


@dataclass
class SimPool:
    """A two-token constant-product pool."""

    address: str
    token0: str
    token1: str
    reserve0: int
    reserve1: int

    def __post_init__(self) -> None:
        self.address = normalize_address(self.address)
        self.token0 = normalize_address(self.token0)
        self.token1 = normalize_address(self.token1)

    def get_reserves(self, token_in: str) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out)."""
        token_in = normalize_address(token_in)
        if token_in == self.token0:
            return self.reserve0, self.reserve1
        if token_in == self.token1:
            return self.reserve1, self.reserve0
        raise ValueError(f"Token {token_in} not in pool")

    def apply_swap(self, token_in: str, amount_in: int, amount_out: int) -> None:
        """Move reserves for a swap of amount_in of token_in for amount_out."""
        reserve_in, reserve_out = self.get_reserves(token_in)
        if amount_out > reserve_out:
            raise ValueError(f"Output {amount_out} exceeds reserve {reserve_out}")
        if normalize_address(token_in) == self.token0:
            self.reserve0 = reserve_in + amount_in
            self.reserve1 = reserve_out - amount_out
        else:
            self.reserve1 = reserve_in + amount_in
            self.reserve0 = reserve_out - amount_out


class InMemoryPoolRegistry:
    """Pool registry keyed by unordered token pair.

    Implements the PoolRegistry protocol (get_liquidity_pool) and offers
    get_pool for the in-memory router.
    """

    def __init__(self, address: str) -> None:
        self.address = normalize_address(address, validate=True)
        self._pools: dict[frozenset[str], SimPool] = {}

    @property
    def pool_count(self) -> int:
        return len(self._pools)

    def add_pool(self, pool: SimPool) -> None:
        """Register a pool, replacing any existing pool for the pair."""
        pair_key = frozenset([pool.token0, pool.token1])
        if pair_key in self._pools:
            logger.debug(
                "pool_replaced",
                pool=short(pool.address),
                token0=short(pool.token0),
                token1=short(pool.token1),
            )
        self._pools[pair_key] = pool

    def get_pool(self, token_a: str, token_b: str) -> SimPool | None:
        """Pool for a token pair (order independent), or None."""
        pair_key = frozenset([normalize_address(token_a), normalize_address(token_b)])
        return self._pools.get(pair_key)

    def get_liquidity_pool(self, token_a: str, token_b: str) -> str:
        pool = self.get_pool(token_a, token_b)
        return pool.address if pool is not None else NULL_ADDRESS
