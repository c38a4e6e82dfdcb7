"""Pytest configuration and fixtures."""

import pytest

from connector.connector import AmmConnector
from connector.sim import InMemoryChain, InMemoryRouter
from tests.helpers import (
    ADMIN,
    ALICE,
    ALICE_BALANCE,
    CONNECTOR,
    FACTORY,
    POOL_AB,
    POOL_AW,
    ROUTER,
    TOKEN_A,
    TOKEN_B,
    WETH,
    CountingOracle,
    FixedClock,
)

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def chain(clock: FixedClock) -> InMemoryChain:
    """In-memory chain with one router, an A/B pool and an A/WETH pool."""
    chain = InMemoryChain(clock=clock)
    chain.deploy_router(ROUTER, FACTORY, native_wrapper=WETH)
    chain.add_pool(FACTORY, POOL_AB, TOKEN_A, TOKEN_B, 1000, 1000)
    chain.add_pool(FACTORY, POOL_AW, TOKEN_A, WETH, 1000, 1000)
    return chain


@pytest.fixture
def router(chain: InMemoryChain) -> InMemoryRouter:
    return chain.router(ROUTER)


@pytest.fixture
def oracle() -> CountingOracle:
    return CountingOracle()


@pytest.fixture
def connector(chain: InMemoryChain, clock: FixedClock, oracle: CountingOracle) -> AmmConnector:
    return AmmConnector.create(
        chain,
        name="test-connector",
        router_address=ROUTER,
        native_wrapper_token=WETH,
        admin=ADMIN,
        address=CONNECTOR,
        oracle=oracle,
        clock=clock,
    )


@pytest.fixture
def funded(chain: InMemoryChain, connector: AmmConnector) -> AmmConnector:
    """Connector where ALICE holds TOKEN_A and has approved the connector for all of it."""
    chain.ledger.mint(TOKEN_A, ALICE, ALICE_BALANCE)
    chain.ledger.approve(TOKEN_A, ALICE, CONNECTOR, ALICE_BALANCE)
    return connector
