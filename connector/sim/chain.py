"""In-memory host environment: ledger, registries and routers by address."""

from __future__ import annotations

import time
from collections.abc import Callable

from connector.errors import CollaboratorError
from connector.interfaces import PricingOracle
from connector.models.types import normalize_address
from connector.pricing import constant_product
from connector.sim.ledger import LedgerToken, TokenLedger
from connector.sim.pools import InMemoryPoolRegistry, SimPool
from connector.sim.router import InMemoryRouter


class InMemoryChain:
    """CollaboratorResolver backed by in-memory routers, registries and a ledger.

    Example:
        chain = InMemoryChain()
        router = chain.deploy_router(ROUTER, FACTORY, native_wrapper=WETH)
        chain.add_pool(FACTORY, POOL, TOKEN_A, TOKEN_B, 1000, 1000)
        connector = AmmConnector.create(chain, router_address=ROUTER, ...)
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self.clock = clock
        self.ledger = TokenLedger()
        self._routers: dict[str, InMemoryRouter] = {}
        self._registries: dict[str, InMemoryPoolRegistry] = {}

    def deploy_router(
        self,
        router_address: str,
        factory_address: str,
        native_wrapper: str,
        oracle: PricingOracle = constant_product,
    ) -> InMemoryRouter:
        """Create a router bound to a (possibly new) pool registry."""
        factory_address = normalize_address(factory_address, validate=True)
        registry = self._registries.get(factory_address)
        if registry is None:
            registry = InMemoryPoolRegistry(factory_address)
            self._registries[factory_address] = registry
        router = InMemoryRouter(
            router_address, registry, self.ledger, native_wrapper, oracle=oracle, clock=self.clock
        )
        self._routers[router.address] = router
        return router

    def add_pool(
        self,
        factory_address: str,
        pool_address: str,
        token_a: str,
        token_b: str,
        reserve_a: int,
        reserve_b: int,
    ) -> SimPool:
        """Register a pool and mint its reserves to the pool's account."""
        pool = SimPool(
            address=pool_address,
            token0=token_a,
            token1=token_b,
            reserve0=reserve_a,
            reserve1=reserve_b,
        )
        self.registry(factory_address).add_pool(pool)
        self.ledger.mint(token_a, pool.address, reserve_a)
        self.ledger.mint(token_b, pool.address, reserve_b)
        return pool

    # --- CollaboratorResolver ---

    def router(self, address: str) -> InMemoryRouter:
        router = self._routers.get(normalize_address(address))
        if router is None:
            raise CollaboratorError("chain", "router", f"no router deployed at {address}")
        return router

    def registry(self, address: str) -> InMemoryPoolRegistry:
        registry = self._registries.get(normalize_address(address))
        if registry is None:
            raise CollaboratorError("chain", "registry", f"no pool registry at {address}")
        return registry

    def token(self, address: str) -> LedgerToken:
        return LedgerToken(self.ledger, address)
